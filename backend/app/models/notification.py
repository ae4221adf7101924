"""
Chartwise Backend — Notification SQLAlchemy Model
===================================================

What:  ORM model representing the `notifications` table.
Who:   Used by NotificationService and by Alembic.

The `metadata` column is mapped to the `meta` attribute because
`metadata` is reserved on declarative classes.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Notification(Base):
    """An in-app notification for one user."""

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[str] = mapped_column(String(255), nullable=False)

    # welcome, profile_update, chart, system, info
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="info")

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str] = mapped_column(String(32), nullable=False, default="🔔")

    # low, medium, high
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")

    action_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    action_label: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    meta: Mapped[Dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    __table_args__ = (
        Index("idx_notifications_user_created_at", "user_id", "created_at"),
        Index("idx_notifications_user_is_read", "user_id", "is_read"),
    )

    def __repr__(self) -> str:
        return (
            f"<Notification(id={self.id}, user_id='{self.user_id}', "
            f"type='{self.type}', is_read={self.is_read})>"
        )
