"""
Chartwise Backend — User Profile Route Handlers
=================================================

What:  /api/user-profile: profile get-or-create, update, delete, nickname
       availability and the random avatar/nickname pickers.
Who:   Called by the settings page and the navbar avatar menu.

Route Inventory:
    GET    /api/user-profile/{userId}?email=   get, creating on first access
    PUT    /api/user-profile/{userId}          update (+ confirmation notification)
    DELETE /api/user-profile/{userId}          delete
    POST   /api/user-profile/check-nickname    availability check
    GET    /api/user-profile/avatar/random     one random avatar
    GET    /api/user-profile/nickname/random   one unused random nickname
    GET    /api/user-profile/avatars/all       the full avatar catalogue
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.profile import (
    AvatarListResponse,
    AvatarResponse,
    NicknameCheckRequest,
    NicknameCheckResponse,
    NicknameResponse,
    ProfileResponse,
    ProfileUpdate,
)
from app.services.notification_service import notification_service
from app.services.profile_service import applied_fields, profile_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user-profile", tags=["User Profile"])


# ══════════════════════════════════════════════════════════════════════════
# Generators
# ══════════════════════════════════════════════════════════════════════════


@router.get(
    "/avatar/random",
    response_model=AvatarResponse,
    summary="Generate a random avatar",
)
async def random_avatar() -> AvatarResponse:
    return profile_service.random_avatar()


@router.get(
    "/nickname/random",
    response_model=NicknameResponse,
    summary="Generate a random nickname not used by any profile",
)
async def random_nickname(
    db: AsyncSession = Depends(get_db_session),
) -> NicknameResponse:
    nickname = await profile_service.random_nickname(db)
    return NicknameResponse(nickname=nickname)


@router.get(
    "/avatars/all",
    response_model=AvatarListResponse,
    summary="List every available avatar",
)
async def list_avatars() -> AvatarListResponse:
    return profile_service.list_avatars()


@router.post(
    "/check-nickname",
    response_model=NicknameCheckResponse,
    responses={400: {"description": "Nickname missing", "model": ErrorResponse}},
    summary="Check whether a nickname is available",
    description="A nickname held by the requesting user (userId) counts as available.",
)
async def check_nickname(
    payload: NicknameCheckRequest,
    db: AsyncSession = Depends(get_db_session),
) -> NicknameCheckResponse:
    return await profile_service.check_nickname(
        db=db, nickname=payload.nickname, user_id=payload.user_id
    )


# ══════════════════════════════════════════════════════════════════════════
# Profile CRUD
# ══════════════════════════════════════════════════════════════════════════


@router.get(
    "/{user_id}",
    response_model=ProfileResponse,
    summary="Get a user's profile, creating it on first access",
)
async def get_profile(
    user_id: str,
    email: Optional[str] = Query(default=None, description="Email stored on a newly created profile"),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    return await profile_service.get_or_create_profile(db=db, user_id=user_id, email=email)


@router.put(
    "/{user_id}",
    response_model=ProfileResponse,
    responses={
        400: {"description": "Invalid or taken nickname", "model": ErrorResponse},
        404: {"description": "Profile not found", "model": ErrorResponse},
    },
    summary="Update a user's profile",
)
async def update_profile(
    user_id: str,
    updates: ProfileUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    profile = await profile_service.update_profile(db=db, user_id=user_id, updates=updates)
    # Make the update visible to the notification's own session
    await db.commit()
    await notification_service.send_profile_updated(user_id, applied_fields(updates))
    return profile


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Profile not found", "model": ErrorResponse}},
    summary="Delete a user's profile",
)
async def delete_profile(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await profile_service.delete_profile(db=db, user_id=user_id)
    return MessageResponse(message="User profile deleted successfully")
