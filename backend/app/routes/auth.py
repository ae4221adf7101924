"""
Chartwise Backend — Login Event Handler
=========================================

What:  POST /api/auth/login, called by the frontend right after the identity
       provider signs a user in.
How:   1. Get or create the user's profile (sub → userId)
       2. Dispatch a welcome-back notification (best effort)
       3. Return the profile and whether the notification was stored

A failed notification never fails the login: notificationSent is false.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import ValidationError
from app.schemas.common import ErrorResponse
from app.schemas.profile import LoginEvent, LoginResponse
from app.services.notification_service import notification_service
from app.services.profile_service import profile_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"description": "sub claim missing", "model": ErrorResponse}},
    summary="Record a login: ensure a profile and send a welcome notification",
)
async def login(
    claims: LoginEvent,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    if not claims.sub:
        raise ValidationError(message="Missing required field: sub", field="sub")

    profile = await profile_service.get_or_create_profile(
        db=db, user_id=claims.sub, email=claims.email
    )
    await db.commit()

    notification = await notification_service.send_welcome(claims)
    logger.info(
        "Login recorded for %s (welcome notification %s)",
        claims.sub, "sent" if notification else "skipped",
    )
    return LoginResponse(profile=profile, notification_sent=notification is not None)
