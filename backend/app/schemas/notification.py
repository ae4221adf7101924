"""
Chartwise Backend — Notification Schemas
==========================================

What:  Request/response contracts for /api/notifications.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from app.schemas.common import CamelModel, Pagination

NotificationType = Literal["welcome", "profile_update", "chart", "system", "info"]
NotificationPriority = Literal["low", "medium", "high"]


class NotificationCreate(CamelModel):
    """
    Body of POST /api/notifications.

    userId, title and message are checked by NotificationService so that a
    missing one answers 400 like the other resources.
    """
    user_id: Optional[str] = Field(default=None, max_length=255)
    type: NotificationType = "info"
    title: Optional[str] = Field(default=None, max_length=255)
    message: Optional[str] = None
    icon: str = Field(default="🔔", max_length=32)
    priority: NotificationPriority = "medium"
    action_url: Optional[str] = Field(default=None, max_length=500)
    action_label: Optional[str] = Field(default=None, max_length=100)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class NotificationResponse(CamelModel):
    id: uuid.UUID
    user_id: str
    type: str
    title: str
    message: str
    icon: str
    priority: str
    action_url: Optional[str] = None
    action_label: Optional[str] = None
    metadata: Dict[str, Any]
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class NotificationListResponse(CamelModel):
    notifications: List[NotificationResponse]
    unread_count: int
    pagination: Pagination


class MarkAllReadResponse(CamelModel):
    updated: int
