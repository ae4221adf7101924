"""
Chartwise Backend — SavedChart SQLAlchemy Model
=================================================

What:  ORM model representing the `saved_charts` table.
Who:   Used by ChartService for CRUD and statistics, and by Alembic.

Table Design Rationale:
    - user: identity-provider subject of the owner (plain string, no FK;
      profiles and charts are independent resources)
    - chart_config: arbitrary JSON produced by the charting frontend
    - chart_image_data: optional rendered image (data URL); large, so list
      views never select it
    - tags: JSON list of strings

    Composite index (user, created_at): serves the per-user listing and the
    "recent charts" block of the stats endpoint.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SavedChart(Base):
    """A chart a user saved from the analytics dashboard."""

    __tablename__ = "saved_charts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Owner's identity-provider subject id",
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    chart_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="bar, line, pie, scatter, ... (free-form)",
    )

    chart_config: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)

    chart_image_data: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Rendered chart image, excluded from list responses",
    )

    file_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Name of the uploaded data file the chart was built from",
    )

    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    __table_args__ = (
        Index("idx_saved_charts_user_created_at", "user", "created_at"),
        Index("idx_saved_charts_user_chart_type", "user", "chart_type"),
    )

    def __repr__(self) -> str:
        return (
            f"<SavedChart(id={self.id}, user='{self.user}', "
            f"chart_type='{self.chart_type}')>"
        )
