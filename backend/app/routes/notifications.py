"""
Chartwise Backend — Notification Route Handlers
=================================================

What:  /api/notifications: create, list, mark read and delete in-app
       notifications.

Route Inventory:
    POST   /api/notifications                          create (201)
    GET    /api/notifications/{userId}                 paginated list + unread count
    PUT    /api/notifications/{notificationId}/read    mark one read
    PUT    /api/notifications/user/{userId}/read-all   mark all read
    DELETE /api/notifications/{notificationId}         delete
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.notification import (
    MarkAllReadResponse,
    NotificationCreate,
    NotificationListResponse,
    NotificationResponse,
)
from app.services.notification_service import notification_service

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])

_NOT_FOUND = {404: {"description": "Notification not found", "model": ErrorResponse}}


@router.post(
    "",
    status_code=201,
    response_model=NotificationResponse,
    responses={400: {"description": "Missing required fields", "model": ErrorResponse}},
    summary="Create a notification",
)
async def create_notification(
    payload: NotificationCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NotificationResponse:
    return await notification_service.create_notification(db=db, payload=payload)


@router.get(
    "/{user_id}",
    response_model=NotificationListResponse,
    summary="List a user's notifications, newest first",
)
async def list_notifications(
    user_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=settings.max_page_size),
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    db: AsyncSession = Depends(get_db_session),
) -> NotificationListResponse:
    return await notification_service.list_notifications(
        db=db, user_id=user_id, page=page, limit=limit, unread_only=unread_only
    )


@router.put(
    "/user/{user_id}/read-all",
    response_model=MarkAllReadResponse,
    summary="Mark all of a user's notifications as read",
)
async def mark_all_read(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MarkAllReadResponse:
    updated = await notification_service.mark_all_read(db=db, user_id=user_id)
    return MarkAllReadResponse(updated=updated)


@router.put(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    responses=_NOT_FOUND,
    summary="Mark a notification as read",
)
async def mark_read(
    notification_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> NotificationResponse:
    return await notification_service.mark_read(db=db, notification_id=notification_id)


@router.delete(
    "/{notification_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Delete a notification",
)
async def delete_notification(
    notification_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await notification_service.delete_notification(db=db, notification_id=notification_id)
    return MessageResponse(message="Notification deleted successfully")
