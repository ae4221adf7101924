"""
Chartwise Backend — Profile Service Unit Tests
================================================

What we test:
    ✅ Unique nickname loop: first free candidate, capped retries, timestamp fallback
    ✅ Nickname validation on update (blank, taken, too long) and 404 for unknown users
    ✅ Nickname availability check
    ✅ Profile completeness scoring
    ✅ Get-or-create against a real (SQLite) database
    ✅ Get-or-create reuses the row committed by a concurrent request
    ✅ Only sent, non-null fields are reported as updated
"""

import re
import uuid
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.profile import UserProfile
from app.schemas.profile import ProfileUpdate, SocialLinks
from app.services.profile_service import ProfileService, applied_fields


def _lookup_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


class TestUniqueNickname:

    def setup_method(self):
        self.service = ProfileService()

    @pytest.mark.asyncio
    async def test_first_free_candidate_is_returned(self, mock_db_session):
        mock_db_session.execute.return_value = _lookup_result(None)
        with patch(
            "app.services.profile_service.generate_random_nickname",
            return_value="KeenOracle7",
        ):
            nickname = await self.service.generate_unique_nickname(mock_db_session)

        assert nickname == "KeenOracle7"
        assert mock_db_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_until_a_candidate_is_free(self, mock_db_session):
        mock_db_session.execute.side_effect = [
            _lookup_result(uuid.uuid4()),
            _lookup_result(uuid.uuid4()),
            _lookup_result(None),
        ]
        with patch(
            "app.services.profile_service.generate_random_nickname",
            side_effect=["HappyHero1", "HappyHero2", "HappyHero3"],
        ):
            nickname = await self.service.generate_unique_nickname(mock_db_session)

        assert nickname == "HappyHero3"
        assert mock_db_session.execute.await_count == 3

    @pytest.mark.asyncio
    async def test_falls_back_to_timestamp_suffix_after_ten_attempts(self, mock_db_session):
        mock_db_session.execute.return_value = _lookup_result(uuid.uuid4())
        with patch(
            "app.services.profile_service.generate_random_nickname",
            return_value="QuickWizard5",
        ), patch("app.services.profile_service.time") as mock_time:
            mock_time.time.return_value = 1700000000.5
            nickname = await self.service.generate_unique_nickname(mock_db_session)

        assert mock_db_session.execute.await_count == 10
        assert nickname == "QuickWizard5_1700000000500"


class TestUpdateProfileValidation:

    def setup_method(self):
        self.service = ProfileService()

    @pytest.mark.asyncio
    async def test_blank_nickname_rejected(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_profile(
                mock_db_session, "auth0|1", ProfileUpdate(nickname="   ")
            )
        assert exc_info.value.message == "Nickname cannot be empty"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_taken_nickname_rejected(self, mock_db_session):
        mock_db_session.execute.return_value = _lookup_result(uuid.uuid4())
        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_profile(
                mock_db_session, "auth0|1", ProfileUpdate(nickname="StellarNavigator42")
            )
        assert exc_info.value.message == "Nickname is already taken"
        assert exc_info.value.field == "nickname"

    @pytest.mark.asyncio
    async def test_unknown_user_raises_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = _lookup_result(None)
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.update_profile(
                mock_db_session, "auth0|missing", ProfileUpdate(bio="hello")
            )
        assert exc_info.value.message == "User profile not found"


class TestAppliedFields:

    def test_null_fields_are_not_reported(self):
        updates = ProfileUpdate.model_validate({"bio": None, "company": "Chartwise", "avatar": "🚀|x"})
        assert applied_fields(updates) == ["avatar", "company"]

    def test_unsent_fields_are_not_reported(self):
        assert applied_fields(ProfileUpdate()) == []


class TestCheckNickname:

    def setup_method(self):
        self.service = ProfileService()

    @pytest.mark.asyncio
    async def test_missing_nickname_rejected(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.check_nickname(mock_db_session, None)
        with pytest.raises(ValidationError):
            await self.service.check_nickname(mock_db_session, "  ")

    @pytest.mark.asyncio
    async def test_available_nickname_is_trimmed(self, mock_db_session):
        mock_db_session.execute.return_value = _lookup_result(None)
        result = await self.service.check_nickname(mock_db_session, "  NobleKnight3 ")
        assert result.available is True
        assert result.nickname == "NobleKnight3"
        assert result.message == "Nickname is available"

    @pytest.mark.asyncio
    async def test_taken_nickname_reported(self, mock_db_session):
        mock_db_session.execute.return_value = _lookup_result(uuid.uuid4())
        result = await self.service.check_nickname(mock_db_session, "NobleKnight3", "auth0|2")
        assert result.available is False
        assert result.message == "Nickname is already taken"


class TestCompleteness:

    def _profile(self, **fields):
        defaults = dict(
            user_id="auth0|1",
            nickname="",
            avatar="",
            email="",
            bio="",
            phone="",
            job_title="",
            company="",
            department="",
            location="",
            social_links={},
        )
        defaults.update(fields)
        return UserProfile(**defaults)

    def test_empty_profile_scores_zero(self):
        assert self._profile().calculate_completeness() == 0

    def test_new_profile_with_nickname_avatar_email(self):
        profile = self._profile(nickname="KeenOracle7", avatar="🚀|x", email="a@b.c")
        assert profile.calculate_completeness() == 30
        assert profile.profile_completeness == 30

    def test_whitespace_does_not_count(self):
        profile = self._profile(nickname="KeenOracle7", bio="   ")
        assert profile.calculate_completeness() == 10

    def test_one_social_link_counts_once(self):
        profile = self._profile(
            social_links={"linkedin": "https://linkedin.com/in/x", "github": "https://github.com/x"}
        )
        assert profile.calculate_completeness() == 10

    def test_full_profile_scores_hundred(self):
        profile = self._profile(
            nickname="n", avatar="a", email="e", bio="b", phone="p",
            job_title="j", company="c", department="d", location="l",
            social_links={"website": "https://example.com"},
        )
        assert profile.calculate_completeness() == 100


class TestGetOrCreate:

    def setup_method(self):
        self.service = ProfileService()

    @pytest.mark.asyncio
    async def test_first_access_creates_profile(self, db_session):
        profile = await self.service.get_or_create_profile(db_session, "auth0|new", "new@example.com")

        assert profile.user_id == "auth0|new"
        assert profile.email == "new@example.com"
        assert re.match(r"^[A-Z][a-z]+[A-Z][a-z]+\d{1,3}$", profile.nickname)
        assert "|" in profile.avatar
        assert profile.social_links == SocialLinks()
        assert profile.preferences.theme == "light"
        assert profile.preferences.dashboard.charts_per_page == 12
        # nickname + avatar + email
        assert profile.profile_completeness == 30

    @pytest.mark.asyncio
    async def test_second_access_returns_same_profile(self, db_session):
        first = await self.service.get_or_create_profile(db_session, "auth0|again")
        second = await self.service.get_or_create_profile(db_session, "auth0|again", "late@example.com")

        assert second.id == first.id
        assert second.nickname == first.nickname
        assert second.email == ""

    @pytest.mark.asyncio
    async def test_insert_race_returns_the_winning_profile(self, session_factory, db_session):
        # Another request commits the profile between our lookup and our insert
        async with session_factory() as other:
            winner = await self.service.get_or_create_profile(other, "auth0|race")
            await other.commit()

        real_find = self.service._find
        lookups = []

        async def stale_first_lookup(db, user_id):
            lookups.append(user_id)
            if len(lookups) == 1:
                return None
            return await real_find(db, user_id)

        with patch.object(self.service, "_find", side_effect=stale_first_lookup):
            loser = await self.service.get_or_create_profile(db_session, "auth0|race")

        assert len(lookups) == 2
        assert loser.id == winner.id
        assert loser.nickname == winner.nickname

    @pytest.mark.asyncio
    async def test_integrity_error_without_winner_is_database_error(self, mock_db_session):
        mock_db_session.execute.return_value = _lookup_result(None)
        mock_db_session.flush.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.get_or_create_profile(mock_db_session, "auth0|broken")

        assert exc_info.value.message == "Failed to fetch user profile"
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_rejects_overlong_nickname(self, db_session):
        await self.service.get_or_create_profile(db_session, "auth0|long")
        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_profile(
                db_session, "auth0|long", ProfileUpdate(nickname="N" * 101)
            )
        assert exc_info.value.message == "Nickname must be at most 100 characters"

        accepted = await self.service.update_profile(
            db_session, "auth0|long", ProfileUpdate(nickname=" " + "N" * 100 + " ")
        )
        assert accepted.nickname == "N" * 100

    @pytest.mark.asyncio
    async def test_update_replaces_nested_sections(self, db_session):
        await self.service.get_or_create_profile(db_session, "auth0|nested")
        updated = await self.service.update_profile(
            db_session,
            "auth0|nested",
            ProfileUpdate.model_validate({
                "jobTitle": "Data Analyst",
                "socialLinks": {"github": "https://github.com/analyst"},
                "preferences": {"theme": "dark", "dashboard": {"chartsPerPage": 24}},
            }),
        )

        assert updated.job_title == "Data Analyst"
        assert updated.social_links.github == "https://github.com/analyst"
        assert updated.social_links.linkedin == ""
        assert updated.preferences.theme == "dark"
        assert updated.preferences.dashboard.charts_per_page == 24
        assert updated.last_active is not None
        # nickname + avatar + jobTitle + social link
        assert updated.profile_completeness == 40
