"""
Chartwise Backend — Notification Service
==========================================

What:  CRUD for in-app notifications plus best-effort event dispatch.
Who:   Called by /api/notifications routes (CRUD) and by the auth and
       profile routes (login welcome, profile-update confirmation).

Event Dispatch:
    Event notifications must never fail the request that triggered them.
    dispatch() therefore:
    1. Writes the notification in its OWN session/transaction, so a failed
       insert cannot poison the caller's session
    2. Retries transient database errors (OperationalError) with tenacity,
       exponential backoff + jitter
    3. Logs and returns None once retries are exhausted
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import and_, desc, func, select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from app import database
from app.config import settings
from app.exceptions import ChartwiseError, DatabaseError, NotFoundError, ValidationError
from app.models.notification import Notification
from app.schemas.common import Pagination
from app.schemas.notification import (
    NotificationCreate,
    NotificationListResponse,
    NotificationResponse,
)
from app.schemas.profile import LoginEvent

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Ready to dive into your analytics? Let's create something amazing today!"


def to_notification_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        user_id=notification.user_id,
        type=notification.type,
        title=notification.title,
        message=notification.message,
        icon=notification.icon,
        priority=notification.priority,
        action_url=notification.action_url,
        action_label=notification.action_label,
        metadata=notification.meta or {},
        is_read=notification.is_read,
        read_at=notification.read_at,
        created_at=notification.created_at,
    )


def _build(payload: NotificationCreate) -> Notification:
    return Notification(
        user_id=payload.user_id,
        type=payload.type,
        title=payload.title,
        message=payload.message,
        icon=payload.icon,
        priority=payload.priority,
        action_url=payload.action_url,
        action_label=payload.action_label,
        meta=payload.metadata,
    )


class NotificationService:
    """Business logic layer for notifications."""

    # ── CRUD ──────────────────────────────────────────────────────────────

    async def create_notification(
        self, db: AsyncSession, payload: NotificationCreate
    ) -> NotificationResponse:
        """
        Store a notification sent by a client.

        Raises:
            ValidationError: userId, title or message missing (→ 400)
        """
        if not payload.user_id or not payload.title or not payload.message:
            raise ValidationError(
                message="Missing required fields: userId, title, message",
                context={"required": ["userId", "title", "message"]},
            )
        try:
            notification = _build(payload)
            db.add(notification)
            await db.flush()
            logger.info(
                "Notification %s created for %s (type=%s)",
                notification.id, notification.user_id, notification.type,
            )
            return to_notification_response(notification)
        except Exception as e:
            logger.error("Error creating notification: %s", e, exc_info=True)
            raise DatabaseError(
                message="Failed to create notification",
                context={"error_type": type(e).__name__},
            )

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: str,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
    ) -> NotificationListResponse:
        """Newest-first page of a user's notifications plus their unread count."""
        try:
            filters = [Notification.user_id == user_id]
            if unread_only:
                filters.append(Notification.is_read.is_(False))

            result = await db.execute(
                select(Notification)
                .where(*filters)
                .order_by(desc(Notification.created_at), desc(Notification.id))
                .offset((page - 1) * limit)
                .limit(limit)
            )
            notifications = list(result.scalars().all())

            total_result = await db.execute(
                select(func.count()).select_from(Notification).where(*filters)
            )
            total = total_result.scalar() or 0

            unread_result = await db.execute(
                select(func.count())
                .select_from(Notification)
                .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            )
            unread_count = unread_result.scalar() or 0

            return NotificationListResponse(
                notifications=[to_notification_response(n) for n in notifications],
                unread_count=unread_count,
                pagination=Pagination.build(page=page, limit=limit, total=total),
            )

        except Exception as e:
            logger.error("Error fetching notifications for %s: %s", user_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to fetch notifications",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    async def mark_read(self, db: AsyncSession, notification_id: str) -> NotificationResponse:
        try:
            notification = await self._load(db, notification_id)
            if not notification.is_read:
                notification.is_read = True
                notification.read_at = datetime.now(timezone.utc)
                await db.flush()
            return to_notification_response(notification)
        except ChartwiseError:
            raise
        except Exception as e:
            logger.error("Error marking notification %s read: %s", notification_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to update notification",
                context={"notification_id": notification_id, "error_type": type(e).__name__},
            )

    async def mark_all_read(self, db: AsyncSession, user_id: str) -> int:
        """Mark every unread notification of a user as read; returns how many changed."""
        try:
            result = await db.execute(
                update(Notification)
                .where(and_(Notification.user_id == user_id, Notification.is_read.is_(False)))
                .values(is_read=True, read_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
            updated = result.rowcount or 0
            logger.info("Marked %d notifications read for %s", updated, user_id)
            return updated
        except Exception as e:
            logger.error("Error marking notifications read for %s: %s", user_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to update notifications",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    async def delete_notification(self, db: AsyncSession, notification_id: str) -> None:
        try:
            notification = await self._load(db, notification_id)
            await db.delete(notification)
            await db.flush()
        except ChartwiseError:
            raise
        except Exception as e:
            logger.error("Error deleting notification %s: %s", notification_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to delete notification",
                context={"notification_id": notification_id, "error_type": type(e).__name__},
            )

    # ── Event Dispatch ────────────────────────────────────────────────────

    async def dispatch(self, payload: NotificationCreate) -> Optional[NotificationResponse]:
        """
        Best-effort write of an event notification.

        Returns:
            The stored notification, or None when every attempt failed.
        """
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(OperationalError),
                stop=stop_after_attempt(settings.notify_retry_attempts),
                wait=wait_exponential_jitter(
                    initial=settings.notify_retry_min_wait,
                    max=settings.notify_retry_max_wait,
                    jitter=settings.notify_retry_min_wait,
                ),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    return await self._store(payload)
        except Exception as e:
            logger.error(
                "Failed to send %s notification to %s: %s",
                payload.type, payload.user_id, e,
                exc_info=True,
            )
        return None

    async def send_welcome(self, claims: LoginEvent) -> Optional[NotificationResponse]:
        """Welcome-back notification for a user who just signed in."""
        display_name = claims.name or claims.nickname or "there"
        return await self.dispatch(
            NotificationCreate(
                user_id=claims.sub,
                type="welcome",
                title=f"Welcome back, {display_name}! 👋",
                message=WELCOME_MESSAGE,
                icon="🎉",
                priority="medium",
                action_url="/dashboard",
                action_label="Go to Dashboard",
                metadata={
                    "source": "auth",
                    "loginTime": datetime.now(timezone.utc).isoformat(),
                },
            )
        )

    async def send_profile_updated(
        self, user_id: str, fields: Iterable[str]
    ) -> Optional[NotificationResponse]:
        """Confirmation notification after a successful profile save."""
        return await self.dispatch(
            NotificationCreate(
                user_id=user_id,
                type="profile_update",
                title="Profile Updated",
                message="Your profile changes have been saved successfully.",
                icon="✅",
                priority="low",
                action_url="/settings",
                action_label="View Profile",
                metadata={"source": "profile", "updatedFields": sorted(fields)},
            )
        )

    # ── Internals ─────────────────────────────────────────────────────────

    async def _store(self, payload: NotificationCreate) -> NotificationResponse:
        async with database.async_session_factory() as session:
            notification = _build(payload)
            session.add(notification)
            await session.commit()
            logger.info(
                "Dispatched %s notification %s to %s",
                notification.type, notification.id, notification.user_id,
            )
            return to_notification_response(notification)

    async def _load(self, db: AsyncSession, notification_id: str) -> Notification:
        try:
            key = uuid.UUID(str(notification_id))
        except ValueError:
            raise NotFoundError(resource="notification", resource_id=notification_id)
        notification = await db.get(Notification, key)
        if notification is None:
            raise NotFoundError(resource="notification", resource_id=notification_id)
        return notification


# ── Singleton Instance ────────────────────────────────────────────────────
notification_service = NotificationService()
