# app/services/challenges.py
"""
Challenge lifecycle: create, read, list, update, complete, delete, generate.

Completion is the only path that touches the owning user's aggregate
(saved_amount, streak, completed_challenges, badges). It happens once per
challenge; deleting a challenge afterwards leaves the aggregate as it is.
"""
import logging
import math
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    ActiveChallengeLimitExceededException,
    BadInputException,
    ChallengeAlreadyCompletedException,
    ChallengeConfigNotFoundException,
    ChallengeNotFoundException,
)
from app.crud import badge as crud_badge
from app.crud import challenge as crud_challenge
from app.crud import challenge_config as crud_config
from app.crud import user as crud_user
from app.models.challenge import Challenge
from app.schemas.challenge import ChallengeCreate, ChallengePage, ChallengeRead, ChallengeUpdate
from app.services.users import resolve_user
from app.utils.badges import newly_earned_badges
from app.utils.challenge_generation import generate_challenges
from app.utils.money import quantize
from app.utils.streaks import advance_streak, as_utc

logger = logging.getLogger(__name__)

# Fields a client may change on update; id, user, created_on and completed_on are not among them
UPDATABLE_FIELDS = ("title", "description", "type", "target", "saved", "due_date")
NON_NULLABLE_FIELDS = {"title", "target", "saved"}
# Largest row offset the database accepts (signed 64-bit)
MAX_OFFSET = 2 ** 63 - 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_due_date(due_date: Optional[date], created_on: datetime) -> None:
    if due_date is not None and due_date < as_utc(created_on).date():
        raise BadInputException("due_date must not be before the creation date")


async def _get_owned(challenge_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession, lock: bool = False) -> Challenge:
    challenge = await crud_challenge.get_challenge_by_id(challenge_id, user_id, db, lock=lock)
    if challenge is None:
        raise ChallengeNotFoundException(challenge_id)
    return challenge


async def create_challenge(
    challenge_in: ChallengeCreate,
    username: str,
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> Challenge:
    user = await resolve_user(username, db)
    created_on = now or _utcnow()
    if challenge_in.target <= 0:
        raise BadInputException("target must be greater than 0")
    if challenge_in.saved < 0:
        raise BadInputException("saved must not be negative")
    _check_due_date(challenge_in.due_date, created_on)

    # Hold the user row so concurrent creates see each other's challenges
    await crud_user.lock_user(user.id, db)
    active = await crud_challenge.count_active_challenges(user.id, db)
    if active >= settings.MAX_ACTIVE_CHALLENGES:
        logger.warning(f"User {username} hit the active challenge limit ({settings.MAX_ACTIVE_CHALLENGES})")
        raise ActiveChallengeLimitExceededException(settings.MAX_ACTIVE_CHALLENGES)

    challenge = Challenge(
        user_id=user.id,
        title=challenge_in.title,
        description=challenge_in.description,
        type=challenge_in.type,
        target=quantize(challenge_in.target),
        saved=quantize(challenge_in.saved),
        due_date=challenge_in.due_date,
        created_on=created_on,
        completed_on=None,
    )
    await crud_challenge.add_challenge(challenge, db)
    await db.commit()
    await db.refresh(challenge)
    logger.info(f"Created challenge {challenge.id} for user {username}")
    return challenge


async def get_challenge(challenge_id: uuid.UUID, username: str, db: AsyncSession) -> Challenge:
    user = await resolve_user(username, db)
    return await _get_owned(challenge_id, user.id, db)


async def _list(username: str, db: AsyncSession, page: int, size: int, completed: Optional[bool]) -> ChallengePage:
    if page < 0 or size < 1:
        raise BadInputException("page must be >= 0 and size >= 1")
    if page * size > MAX_OFFSET:
        raise BadInputException(f"page {page} is out of range for size {size}")
    user = await resolve_user(username, db)
    items, total = await crud_challenge.get_challenges_for_user(user.id, db, page=page, size=size, completed=completed)
    return ChallengePage(
        items=[ChallengeRead.model_validate(c) for c in items],
        total=total,
        page=page,
        size=size,
        pages=math.ceil(total / size),
    )


async def list_challenges(username: str, db: AsyncSession, page: int = 0, size: int = settings.DEFAULT_PAGE_SIZE) -> ChallengePage:
    return await _list(username, db, page, size, completed=None)


async def list_active_challenges(username: str, db: AsyncSession, page: int = 0, size: int = settings.DEFAULT_PAGE_SIZE) -> ChallengePage:
    return await _list(username, db, page, size, completed=False)


async def list_completed_challenges(username: str, db: AsyncSession, page: int = 0, size: int = settings.DEFAULT_PAGE_SIZE) -> ChallengePage:
    return await _list(username, db, page, size, completed=True)


async def update_challenge(
    challenge_id: uuid.UUID,
    challenge_in: ChallengeUpdate,
    username: str,
    db: AsyncSession,
) -> Challenge:
    user = await resolve_user(username, db)
    challenge = await _get_owned(challenge_id, user.id, db, lock=True)
    if challenge.is_completed:
        # completion must keep reflecting the values at completion time
        raise ChallengeAlreadyCompletedException(challenge_id)

    submitted = challenge_in.model_dump(exclude_unset=True)
    changes = {field: submitted[field] for field in UPDATABLE_FIELDS if field in submitted}
    for field, value in changes.items():
        if value is None and field in NON_NULLABLE_FIELDS:
            raise BadInputException(f"{field} cannot be null")
    if changes.get("target") is not None and changes["target"] <= 0:
        raise BadInputException("target must be greater than 0")
    if changes.get("saved") is not None and changes["saved"] < 0:
        raise BadInputException("saved must not be negative")
    if "due_date" in changes:
        _check_due_date(changes["due_date"], challenge.created_on)

    for field, value in changes.items():
        if field in ("target", "saved"):
            value = quantize(value)
        setattr(challenge, field, value)

    await db.commit()
    await db.refresh(challenge)
    logger.info(f"Updated challenge {challenge_id} for user {username}")
    return challenge


async def complete_challenge(
    challenge_id: uuid.UUID,
    username: str,
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> Challenge:
    user = await resolve_user(username, db)
    challenge = await _get_owned(challenge_id, user.id, db, lock=True)
    if challenge.is_completed:
        raise ChallengeAlreadyCompletedException(challenge_id)

    completed_on = now or _utcnow()
    if not await crud_challenge.mark_challenge_completed(challenge_id, user.id, completed_on, db):
        logger.warning(f"Challenge {challenge_id} was completed concurrently")
        raise ChallengeAlreadyCompletedException(challenge_id)

    owner = await crud_user.lock_user(user.id, db)
    owner.saved_amount = quantize(Decimal(owner.saved_amount or 0) + Decimal(challenge.saved))

    state = advance_streak(
        owner.streak or 0,
        owner.streak_start,
        completed_on,
        timedelta(days=settings.STREAK_WINDOW_DAYS),
    )
    owner.streak = state.streak
    owner.streak_start = state.streak_start

    owner.completed_challenges = (owner.completed_challenges or 0) + 1
    earned = newly_earned_badges(
        await crud_badge.get_badges(db),
        {badge.id for badge in owner.badges},
        owner.completed_challenges,
        owner.saved_amount,
        owner.streak,
    )
    owner.badges.extend(earned)

    await db.commit()
    await db.refresh(challenge)
    logger.info(
        f"Challenge {challenge_id} completed by {username}: saved_amount={owner.saved_amount}, "
        f"streak={owner.streak}, new badges={[b.name for b in earned]}"
    )
    return challenge


async def delete_challenge(challenge_id: uuid.UUID, username: str, db: AsyncSession) -> None:
    user = await resolve_user(username, db)
    challenge = await _get_owned(challenge_id, user.id, db)
    await crud_challenge.delete_challenge(challenge, db)
    logger.info(f"Deleted challenge {challenge_id} for user {username}")


async def get_generated_challenges(username: str, db: AsyncSession, today: Optional[date] = None) -> List[ChallengeCreate]:
    """Unsaved proposals derived from the user's challenge config."""
    user = await resolve_user(username, db)
    config = await crud_config.get_config_for_user(user.id, db)
    if config is None:
        raise ChallengeConfigNotFoundException(username)
    return generate_challenges(config, today or _utcnow().date())
