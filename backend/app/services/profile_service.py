"""
Chartwise Backend — User Profile Service
==========================================

What:  Business logic for user profiles: get-or-create, update, delete,
       nickname availability and unique random nicknames.
Who:   Called by the /api/user-profile and /api/auth route handlers.

Unique nickname loop:
    1. Generate Adjective+Noun+Number
    2. Look it up; return it when no profile uses it
    3. Repeat up to NICKNAME_MAX_ATTEMPTS (10) times
    4. Otherwise return the last candidate + "_<unix ms>"
"""

import logging
import time
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import ChartwiseError, DatabaseError, NotFoundError, ValidationError
from app.models.profile import NICKNAME_MAX_LENGTH, UserProfile
from app.schemas.common import CamelModel
from app.schemas.profile import (
    AvatarListResponse,
    AvatarResponse,
    NicknameCheckResponse,
    Preferences,
    ProfileResponse,
    ProfileUpdate,
    SocialLinks,
)
from app.services.avatar_service import (
    all_avatars,
    generate_random_avatar,
    generate_random_nickname,
)

logger = logging.getLogger(__name__)


def to_profile_response(profile: UserProfile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        user_id=profile.user_id,
        nickname=profile.nickname,
        avatar=profile.avatar,
        email=profile.email or "",
        bio=profile.bio or "",
        phone=profile.phone or "",
        job_title=profile.job_title or "",
        company=profile.company or "",
        department=profile.department or "",
        location=profile.location or "",
        social_links=SocialLinks.model_validate(profile.social_links or {}),
        preferences=Preferences.model_validate(profile.preferences or {}),
        profile_completeness=profile.profile_completeness,
        last_active=profile.last_active,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


def applied_fields(updates: ProfileUpdate) -> List[str]:
    """Fields an update actually writes: sent and not null, sorted."""
    return sorted(
        field for field in updates.model_fields_set
        if getattr(updates, field) is not None
    )


class ProfileService:
    """
    Business logic layer for user profiles.

    Error Handling Strategy:
        ValidationError / NotFoundError propagate as-is. Anything else is
        logged and wrapped in DatabaseError with the operation's message.
    """

    async def get_or_create_profile(
        self, db: AsyncSession, user_id: str, email: Optional[str] = None
    ) -> ProfileResponse:
        """
        Return the user's profile, creating it on first access.

        A new profile gets a unique random nickname, a random avatar, the
        email passed by the caller (or ""), default preferences and its
        completeness score.

        Sign-in fires the login hook and the profile fetch together, so two
        requests can both miss the lookup. The loser of the insert race hits
        the user_id unique constraint, rolls back and returns the winner's row.
        Must run before any other write in the session.
        """
        try:
            profile = await self._find(db, user_id)
            if profile is None:
                profile = await self._create(db, user_id, email)
            return to_profile_response(profile)

        except ChartwiseError:
            raise
        except Exception as e:
            logger.error("Error fetching user profile %s: %s", user_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to fetch user profile",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    async def update_profile(
        self, db: AsyncSession, user_id: str, updates: ProfileUpdate
    ) -> ProfileResponse:
        """
        Apply the fields present in `updates`.

        Nulls are ignored. Nested sections (socialLinks, preferences) replace
        the stored section as a whole. lastActive is set to now and the
        completeness score recomputed.

        Raises:
            ValidationError: Blank nickname, or nickname used by another user (→ 400)
            NotFoundError:   No profile for this user (→ 404)
        """
        try:
            nickname: Optional[str] = None
            if updates.nickname is not None:
                nickname = updates.nickname.strip()
                if not nickname:
                    raise ValidationError(message="Nickname cannot be empty", field="nickname")
                if len(nickname) > NICKNAME_MAX_LENGTH:
                    raise ValidationError(
                        message=f"Nickname must be at most {NICKNAME_MAX_LENGTH} characters",
                        field="nickname",
                    )
                if await self._nickname_taken(db, nickname, exclude_user_id=user_id):
                    raise ValidationError(message="Nickname is already taken", field="nickname")

            profile = await self._find(db, user_id)
            if profile is None:
                raise NotFoundError(resource="user profile", resource_id=user_id)

            applied = applied_fields(updates)
            for field in applied:
                value = getattr(updates, field)
                if field == "nickname":
                    value = nickname
                elif isinstance(value, CamelModel):
                    value = value.model_dump(by_alias=True)
                setattr(profile, field, value)

            now = datetime.now(timezone.utc)
            profile.last_active = now
            profile.updated_at = now
            profile.calculate_completeness()
            await db.flush()

            logger.info(
                "Profile updated for %s (%s), completeness=%d%%",
                user_id,
                ", ".join(applied) or "no fields",
                profile.profile_completeness,
            )
            return to_profile_response(profile)

        except ChartwiseError:
            raise
        except Exception as e:
            logger.error("Error updating user profile %s: %s", user_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to update user profile",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    async def check_nickname(
        self, db: AsyncSession, nickname: Optional[str], user_id: Optional[str] = None
    ) -> NicknameCheckResponse:
        """Report whether a nickname is free; the caller's own nickname counts as free."""
        if not nickname or not nickname.strip():
            raise ValidationError(message="Nickname is required", field="nickname")

        trimmed = nickname.strip()
        try:
            taken = await self._nickname_taken(db, trimmed, exclude_user_id=user_id)
        except Exception as e:
            logger.error("Error checking nickname availability: %s", e, exc_info=True)
            raise DatabaseError(
                message="Failed to check nickname availability",
                context={"error_type": type(e).__name__},
            )

        return NicknameCheckResponse(
            available=not taken,
            nickname=trimmed,
            message="Nickname is already taken" if taken else "Nickname is available",
        )

    async def generate_unique_nickname(self, db: AsyncSession) -> str:
        """
        Random nickname not used by any profile, best effort.

        After NICKNAME_MAX_ATTEMPTS collisions the last candidate is
        suffixed with the current unix time in milliseconds.
        """
        nickname = ""
        for attempt in range(1, settings.nickname_max_attempts + 1):
            nickname = generate_random_nickname()
            if not await self._nickname_taken(db, nickname):
                logger.debug("Unique nickname %s found on attempt %d", nickname, attempt)
                return nickname

        fallback = f"{nickname}_{int(time.time() * 1000)}"
        logger.warning(
            "No unique nickname after %d attempts, using %s",
            settings.nickname_max_attempts,
            fallback,
        )
        return fallback

    async def random_nickname(self, db: AsyncSession) -> str:
        try:
            return await self.generate_unique_nickname(db)
        except Exception as e:
            logger.error("Error generating random nickname: %s", e, exc_info=True)
            raise DatabaseError(
                message="Failed to generate random nickname",
                context={"error_type": type(e).__name__},
            )

    def random_avatar(self) -> AvatarResponse:
        return AvatarResponse(avatar=generate_random_avatar())

    def list_avatars(self) -> AvatarListResponse:
        return AvatarListResponse(avatars=all_avatars())

    async def delete_profile(self, db: AsyncSession, user_id: str) -> None:
        try:
            profile = await self._find(db, user_id)
            if profile is None:
                raise NotFoundError(resource="user profile", resource_id=user_id)
            await db.delete(profile)
            await db.flush()
            logger.info("Profile deleted for %s", user_id)

        except ChartwiseError:
            raise
        except Exception as e:
            logger.error("Error deleting user profile %s: %s", user_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to delete user profile",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    async def _create(
        self, db: AsyncSession, user_id: str, email: Optional[str]
    ) -> UserProfile:
        profile = UserProfile(
            user_id=user_id,
            nickname=await self.generate_unique_nickname(db),
            avatar=generate_random_avatar(),
            email=email or "",
            bio="",
            phone="",
            job_title="",
            company="",
            department="",
            location="",
            social_links=SocialLinks().model_dump(by_alias=True),
            preferences=Preferences().model_dump(by_alias=True),
        )
        profile.calculate_completeness()
        db.add(profile)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            existing = await self._find(db, user_id)
            if existing is None:
                raise
            logger.info("Profile for %s was created concurrently, reusing it", user_id)
            return existing

        logger.info("Profile created for %s (nickname=%s)", user_id, profile.nickname)
        return profile

    async def _find(self, db: AsyncSession, user_id: str) -> Optional[UserProfile]:
        result = await db.execute(
            select(UserProfile).where(UserProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def _nickname_taken(
        self, db: AsyncSession, nickname: str, exclude_user_id: Optional[str] = None
    ) -> bool:
        query = select(UserProfile.id).where(UserProfile.nickname == nickname)
        if exclude_user_id:
            query = query.where(UserProfile.user_id != exclude_user_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None


# ── Singleton Instance ────────────────────────────────────────────────────
profile_service = ProfileService()
