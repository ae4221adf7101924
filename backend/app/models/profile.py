"""
Chartwise Backend — UserProfile SQLAlchemy Model
==================================================

What:  ORM model representing the `user_profiles` table.
Who:   Used by ProfileService and by Alembic.

Table Design Rationale:
    - user_id: identity-provider subject; one profile per user (unique)
    - nickname: indexed for the availability check; uniqueness is enforced
      by ProfileService rather than a constraint, because auto-created
      profiles may fall back to a timestamp-suffixed nickname
    - social_links / preferences: nested settings-page sections stored as
      JSON documents in their camelCase wire shape
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import JSON, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# Profile fields counted by the completeness score, in display order.
NICKNAME_MAX_LENGTH = 100

COMPLETENESS_FIELDS = (
    "nickname",
    "avatar",
    "email",
    "bio",
    "phone",
    "job_title",
    "company",
    "department",
    "location",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserProfile(Base):
    """Profile shown and edited on the settings page."""

    __tablename__ = "user_profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    nickname: Mapped[str] = mapped_column(String(NICKNAME_MAX_LENGTH), nullable=False, index=True)

    # Format: "<emoji>|<css gradient>"
    avatar: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    job_title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    company: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    department: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    social_links: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    preferences: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    profile_completeness: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    last_active: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=_utcnow,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    def calculate_completeness(self) -> int:
        """
        Recompute and store `profile_completeness` (0-100).

        Each field in COMPLETENESS_FIELDS counts once when non-blank, plus one
        item for having at least one social link.
        """
        filled = sum(
            1 for name in COMPLETENESS_FIELDS
            if (getattr(self, name, None) or "").strip()
        )
        links = self.social_links or {}
        if any(isinstance(v, str) and v.strip() for v in links.values()):
            filled += 1
        total = len(COMPLETENESS_FIELDS) + 1
        self.profile_completeness = round(filled * 100 / total)
        return self.profile_completeness

    def __repr__(self) -> str:
        return f"<UserProfile(user_id='{self.user_id}', nickname='{self.nickname}')>"
