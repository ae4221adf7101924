"""
Chartwise Backend — User Profile Schemas
==========================================

What:  Request/response contracts for /api/user-profile and /api/auth.

The nested settings sections (social links, preferences) are validated here
and stored on the profile row as JSON in their camelCase wire shape, so a
stored document reads back through the same models.
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class SocialLinks(CamelModel):
    linkedin: str = ""
    github: str = ""
    twitter: str = ""
    website: str = ""


class DashboardPreferences(CamelModel):
    charts_per_page: int = Field(default=12, ge=1, le=100)
    auto_save_charts: bool = True
    show_tutorials: bool = True


class Preferences(CamelModel):
    theme: Literal["light", "dark", "system"] = "light"
    date_format: Literal["MM/DD/YYYY", "DD/MM/YYYY", "YYYY-MM-DD"] = "DD/MM/YYYY"
    dashboard: DashboardPreferences = Field(default_factory=DashboardPreferences)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ProfileUpdate(CamelModel):
    """
    Body of PUT /api/user-profile/{userId}.

    The settings page sends the whole profile back; read-only fields
    (id, userId, profileCompleteness, timestamps) are ignored.
    nickname is length-checked after trimming by ProfileService (→ 400).
    """
    nickname: Optional[str] = None
    avatar: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    job_title: Optional[str] = Field(default=None, max_length=255)
    company: Optional[str] = Field(default=None, max_length=255)
    department: Optional[str] = Field(default=None, max_length=255)
    location: Optional[str] = Field(default=None, max_length=255)
    social_links: Optional[SocialLinks] = None
    preferences: Optional[Preferences] = None


class NicknameCheckRequest(CamelModel):
    nickname: Optional[str] = None
    user_id: Optional[str] = None


class LoginEvent(CamelModel):
    """Identity claims forwarded by the frontend after the provider login."""
    sub: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    nickname: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ProfileResponse(CamelModel):
    id: uuid.UUID
    user_id: str
    nickname: str
    avatar: str
    email: str
    bio: str
    phone: str
    job_title: str
    company: str
    department: str
    location: str
    social_links: SocialLinks
    preferences: Preferences
    profile_completeness: int = Field(ge=0, le=100)
    last_active: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class NicknameCheckResponse(CamelModel):
    available: bool
    nickname: str
    message: str


class NicknameResponse(CamelModel):
    nickname: str


class AvatarResponse(CamelModel):
    avatar: str


class AvatarListResponse(CamelModel):
    avatars: List[str]


class LoginResponse(CamelModel):
    profile: ProfileResponse
    notification_sent: bool
