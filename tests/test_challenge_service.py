"""
Tests for the challenge lifecycle.

Tests cover:
1. Creation, validation and the active challenge limit
2. Ownership on read, update and delete
3. Completion: saved amount, streak and badges, exactly once
4. Listing and pagination
5. Generation from the user's config
"""
import asyncio
import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from app.core.config import settings
from app.core.exceptions import (
    ActiveChallengeLimitExceededException,
    BadInputException,
    ChallengeAlreadyCompletedException,
    ChallengeConfigNotFoundException,
    ChallengeNotFoundException,
)
from app.crud.challenge import count_active_challenges
from app.crud.user import get_user_by_username
from app.models.enums import Motivation
from app.schemas.challenge import ChallengeCreate, ChallengeUpdate
from app.schemas.challenge_config import ChallengeConfigCreate
from app.services import challenges as challenge_service
from app.services import challenge_config as config_service

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def challenge_payload(target="100.00", saved="0.00", title="Coffee week", due_date=None):
    return ChallengeCreate(title=title, target=Decimal(target), saved=Decimal(saved), due_date=due_date)


class TestCreateChallenge:
    """Tests for create_challenge"""

    async def test_completion_is_derived(self, db_session, make_user):
        await make_user("alice")
        challenge = await challenge_service.create_challenge(
            challenge_payload("100.00", "50.00"), "alice", db_session, now=NOW
        )

        assert challenge.completion == Decimal("50.00")
        assert challenge.completed_on is None

    async def test_due_date_before_creation_is_bad_input(self, db_session, make_user):
        await make_user("alice")
        with pytest.raises(BadInputException):
            await challenge_service.create_challenge(
                challenge_payload(due_date=date(2026, 10, 18)), "alice", db_session, now=NOW
            )

    async def test_due_date_on_creation_day_is_accepted(self, db_session, make_user):
        await make_user("alice")
        challenge = await challenge_service.create_challenge(
            challenge_payload(due_date=date(2026, 10, 19)), "alice", db_session, now=NOW
        )
        assert challenge.due_date == date(2026, 10, 19)

    async def test_limit_of_active_challenges(self, db_session, make_user):
        user = await make_user("alice")
        user_id = user.id
        for i in range(settings.MAX_ACTIVE_CHALLENGES):
            await challenge_service.create_challenge(challenge_payload(title=f"c{i}"), "alice", db_session)

        with pytest.raises(ActiveChallengeLimitExceededException):
            await challenge_service.create_challenge(challenge_payload(title="one too many"), "alice", db_session)

        assert await count_active_challenges(user_id, db_session) == settings.MAX_ACTIVE_CHALLENGES

    async def test_completed_challenges_do_not_count_toward_limit(self, db_session, make_user):
        await make_user("alice")
        first = await challenge_service.create_challenge(challenge_payload(title="c0"), "alice", db_session)
        for i in range(1, settings.MAX_ACTIVE_CHALLENGES):
            await challenge_service.create_challenge(challenge_payload(title=f"c{i}"), "alice", db_session)
        await challenge_service.complete_challenge(first.id, "alice", db_session)

        challenge = await challenge_service.create_challenge(challenge_payload(title="fits"), "alice", db_session)
        assert challenge.title == "fits"


class TestOwnership:
    """Another user's challenge behaves as if it did not exist"""

    async def test_get_update_complete_delete_as_other_user(self, db_session, make_user):
        await make_user("alice")
        await make_user("bob")
        challenge = await challenge_service.create_challenge(challenge_payload(), "alice", db_session)

        with pytest.raises(ChallengeNotFoundException):
            await challenge_service.get_challenge(challenge.id, "bob", db_session)
        with pytest.raises(ChallengeNotFoundException):
            await challenge_service.update_challenge(challenge.id, ChallengeUpdate(title="mine"), "bob", db_session)
        with pytest.raises(ChallengeNotFoundException):
            await challenge_service.complete_challenge(challenge.id, "bob", db_session)
        with pytest.raises(ChallengeNotFoundException):
            await challenge_service.delete_challenge(challenge.id, "bob", db_session)

        still_there = await challenge_service.get_challenge(challenge.id, "alice", db_session)
        assert still_there.title == "Coffee week"


class TestUpdateChallenge:
    """Tests for update_challenge"""

    async def test_partial_update(self, db_session, make_user):
        await make_user("alice")
        challenge = await challenge_service.create_challenge(challenge_payload("200.00"), "alice", db_session)

        updated = await challenge_service.update_challenge(
            challenge.id, ChallengeUpdate(saved=Decimal("50.00")), "alice", db_session
        )

        assert updated.title == "Coffee week"
        assert updated.saved == Decimal("50.00")
        assert updated.completion == Decimal("25.00")

    async def test_null_required_field_is_bad_input(self, db_session, make_user):
        await make_user("alice")
        challenge = await challenge_service.create_challenge(challenge_payload(), "alice", db_session)
        with pytest.raises(BadInputException):
            await challenge_service.update_challenge(
                challenge.id, ChallengeUpdate(title=None), "alice", db_session
            )

    async def test_completed_challenge_cannot_be_updated(self, db_session, make_user):
        await make_user("alice")
        challenge = await challenge_service.create_challenge(challenge_payload(saved="100.00"), "alice", db_session)
        await challenge_service.complete_challenge(challenge.id, "alice", db_session)

        with pytest.raises(ChallengeAlreadyCompletedException):
            await challenge_service.update_challenge(
                challenge.id, ChallengeUpdate(saved=Decimal("1.00")), "alice", db_session
            )


class TestCompleteChallenge:
    """Tests for complete_challenge"""

    async def test_high_motivation_scenario(self, db_session, make_user, badges):
        """Generated proposal accepted, saved in full, completed"""
        user = await make_user("alice")
        await config_service.create_challenge_config(
            "alice",
            ChallengeConfigCreate(motivation=Motivation.HIGH, target_min=Decimal("100"), target_max=Decimal("500")),
            db_session,
        )
        proposals = await challenge_service.get_generated_challenges("alice", db_session, today=NOW.date())
        assert len(proposals) == 4

        assert all(Decimal("100") <= p.target <= Decimal("500") for p in proposals)

        challenge = await challenge_service.create_challenge(proposals[0], "alice", db_session, now=NOW)
        assert challenge.completion == Decimal("0.00")
        challenge = await challenge_service.update_challenge(
            challenge.id,
            ChallengeUpdate(saved=Decimal("250.00"), target=Decimal("250.00")),
            "alice",
            db_session,
        )
        completed = await challenge_service.complete_challenge(challenge.id, "alice", db_session, now=NOW)

        assert completed.completion == Decimal("100.00")
        assert completed.completed_on is not None
        assert user.saved_amount == Decimal("250.00")
        assert user.streak == 1
        assert [b.name for b in user.badges] == ["FIRST_CHALLENGE"]

    async def test_completing_twice_adds_saved_once(self, db_session, make_user):
        user = await make_user("alice")
        challenge = await challenge_service.create_challenge(challenge_payload(saved="40.00"), "alice", db_session)

        await challenge_service.complete_challenge(challenge.id, "alice", db_session)
        with pytest.raises(ChallengeAlreadyCompletedException):
            await challenge_service.complete_challenge(challenge.id, "alice", db_session)

        assert user.saved_amount == Decimal("40.00")

    async def test_streak_grows_in_next_window_and_resets_after_gap(self, db_session, make_user):
        user = await make_user("alice")
        moments = [NOW, NOW + timedelta(days=2), NOW + timedelta(days=8), NOW + timedelta(days=30)]
        streaks = []
        for i, moment in enumerate(moments):
            challenge = await challenge_service.create_challenge(
                challenge_payload(title=f"c{i}"), "alice", db_session, now=NOW
            )
            await challenge_service.complete_challenge(challenge.id, "alice", db_session, now=moment)
            streaks.append(user.streak)

        assert streaks == [1, 1, 2, 1]

    async def test_saved_amount_badge(self, db_session, make_user, badges):
        user = await make_user("alice")
        challenge = await challenge_service.create_challenge(
            challenge_payload("1200.00", "1200.00"), "alice", db_session
        )
        await challenge_service.complete_challenge(challenge.id, "alice", db_session)

        assert sorted(b.name for b in user.badges) == ["FIRST_CHALLENGE", "SAVED_1000"]

    async def test_badges_are_not_awarded_twice(self, db_session, make_user, badges):
        user = await make_user("alice")
        for i in range(2):
            challenge = await challenge_service.create_challenge(
                challenge_payload(title=f"c{i}"), "alice", db_session
            )
            await challenge_service.complete_challenge(challenge.id, "alice", db_session)

        assert [b.name for b in user.badges] == ["FIRST_CHALLENGE"]

    async def test_delete_after_completion_keeps_saved_amount(self, db_session, make_user):
        user = await make_user("alice")
        challenge = await challenge_service.create_challenge(challenge_payload(saved="75.50"), "alice", db_session)
        await challenge_service.complete_challenge(challenge.id, "alice", db_session)

        await challenge_service.delete_challenge(challenge.id, "alice", db_session)

        with pytest.raises(ChallengeNotFoundException):
            await challenge_service.get_challenge(challenge.id, "alice", db_session)
        assert user.saved_amount == Decimal("75.50")
        assert user.streak == 1
        assert user.completed_challenges == 1

    async def test_deleted_completions_still_count_toward_badges(self, db_session, make_user, badges):
        user = await make_user("alice")
        for i in range(4):
            challenge = await challenge_service.create_challenge(
                challenge_payload(title=f"c{i}"), "alice", db_session
            )
            await challenge_service.complete_challenge(challenge.id, "alice", db_session)
            await challenge_service.delete_challenge(challenge.id, "alice", db_session)

        challenge = await challenge_service.create_challenge(challenge_payload(title="fifth"), "alice", db_session)
        await challenge_service.complete_challenge(challenge.id, "alice", db_session)

        assert user.completed_challenges == 5
        assert "FIVE_CHALLENGES" in {b.name for b in user.badges}


class TestListChallenges:
    """Tests for the list operations"""

    async def test_active_and_completed_split(self, db_session, make_user):
        await make_user("alice")
        await make_user("bob")
        done = await challenge_service.create_challenge(challenge_payload(title="done"), "alice", db_session)
        await challenge_service.create_challenge(challenge_payload(title="open"), "alice", db_session)
        await challenge_service.create_challenge(challenge_payload(title="bob's"), "bob", db_session)
        await challenge_service.complete_challenge(done.id, "alice", db_session)

        everything = await challenge_service.list_challenges("alice", db_session)
        active = await challenge_service.list_active_challenges("alice", db_session)
        completed = await challenge_service.list_completed_challenges("alice", db_session)

        assert everything.total == 2
        assert [c.title for c in active.items] == ["open"]
        assert [c.title for c in completed.items] == ["done"]

    async def test_pagination_newest_first(self, db_session, make_user):
        await make_user("alice")
        for i in range(5):
            await challenge_service.create_challenge(
                challenge_payload(title=f"c{i}"), "alice", db_session, now=NOW + timedelta(minutes=i)
            )

        first = await challenge_service.list_challenges("alice", db_session, page=0, size=2)
        last = await challenge_service.list_challenges("alice", db_session, page=2, size=2)

        assert first.total == 5
        assert first.pages == 3
        assert [c.title for c in first.items] == ["c4", "c3"]
        assert [c.title for c in last.items] == ["c0"]

    async def test_invalid_page_is_bad_input(self, db_session, make_user):
        await make_user("alice")
        with pytest.raises(BadInputException):
            await challenge_service.list_challenges("alice", db_session, page=-1)

    async def test_page_beyond_offset_range_is_bad_input(self, db_session, make_user):
        await make_user("alice")
        with pytest.raises(BadInputException):
            await challenge_service.list_challenges("alice", db_session, page=10 ** 20, size=20)


class TestGenerateChallenges:
    """Tests for get_generated_challenges"""

    async def test_requires_config(self, db_session, make_user):
        await make_user("alice")
        with pytest.raises(ChallengeConfigNotFoundException):
            await challenge_service.get_generated_challenges("alice", db_session)

    async def test_proposals_are_not_persisted(self, db_session, make_user):
        user = await make_user("alice")
        user_id = user.id
        await config_service.create_challenge_config(
            "alice",
            ChallengeConfigCreate(motivation=Motivation.VERY_HIGH, target_min=Decimal("10"), target_max=Decimal("60")),
            db_session,
        )

        proposals = await challenge_service.get_generated_challenges("alice", db_session, today=NOW.date())

        assert len(proposals) == 5
        assert all(isinstance(p, ChallengeCreate) for p in proposals)
        assert await count_active_challenges(user_id, db_session) == 0


class TestConcurrentCompletion:
    """Two sessions completing the same challenge at once"""

    async def test_exactly_one_completion_wins(self, db_session, session_factory, make_user):
        await make_user("alice")
        challenge = await challenge_service.create_challenge(challenge_payload(saved="40.00"), "alice", db_session)

        async def complete_in_own_session():
            async with session_factory() as session:
                try:
                    await challenge_service.complete_challenge(challenge.id, "alice", session)
                    return "ok"
                except ChallengeAlreadyCompletedException:
                    return "already"

        results = await asyncio.gather(complete_in_own_session(), complete_in_own_session())

        assert sorted(results) == ["already", "ok"]
        async with session_factory() as session:
            user = await get_user_by_username("alice", session)
            assert user.saved_amount == Decimal("40.00")
            assert user.completed_challenges == 1
            assert user.streak == 1
