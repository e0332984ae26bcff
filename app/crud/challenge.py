# app/crud/challenge.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from app.models.challenge import Challenge
from typing import List, Optional, Tuple
from datetime import datetime
import uuid

async def get_challenge_by_id(
    challenge_id: uuid.UUID,
    user_id: uuid.UUID,
    db: AsyncSession,
    lock: bool = False,
) -> Optional[Challenge]:
    """Ownership is part of the key: another user's challenge comes back as None."""
    query = select(Challenge).where(Challenge.id == challenge_id, Challenge.user_id == user_id)
    if lock:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()

async def get_challenges_for_user(
    user_id: uuid.UUID,
    db: AsyncSession,
    page: int = 0,
    size: int = 20,
    completed: Optional[bool] = None,
) -> Tuple[List[Challenge], int]:
    """
    Return one page of a user's challenges and the total matching count.

    completed=None returns all, True only completed, False only active.
    Ordered by creation time then id so pages are stable.
    """
    conditions = [Challenge.user_id == user_id]
    if completed is True:
        conditions.append(Challenge.completed_on.is_not(None))
    elif completed is False:
        conditions.append(Challenge.completed_on.is_(None))

    total = (
        await db.execute(select(func.count()).select_from(Challenge).where(*conditions))
    ).scalar_one()

    result = await db.execute(
        select(Challenge)
        .where(*conditions)
        .order_by(Challenge.created_on.desc(), Challenge.id.desc())
        .offset(page * size)
        .limit(size)
    )
    return list(result.scalars().all()), total

async def count_active_challenges(user_id: uuid.UUID, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Challenge)
        .where(Challenge.user_id == user_id, Challenge.completed_on.is_(None))
    )
    return result.scalar_one()

async def add_challenge(challenge: Challenge, db: AsyncSession) -> Challenge:
    """Stage a new challenge; the caller commits."""
    db.add(challenge)
    await db.flush()
    return challenge

async def mark_challenge_completed(
    challenge_id: uuid.UUID,
    user_id: uuid.UUID,
    completed_on: datetime,
    db: AsyncSession,
) -> bool:
    """
    Set completed_on only if it is still NULL.

    Returns False when another transaction completed the challenge first.
    """
    result = await db.execute(
        update(Challenge)
        .where(
            Challenge.id == challenge_id,
            Challenge.user_id == user_id,
            Challenge.completed_on.is_(None),
        )
        .values(completed_on=completed_on)
        .execution_options(synchronize_session="evaluate")
    )
    return result.rowcount == 1

async def delete_challenge(challenge: Challenge, db: AsyncSession) -> None:
    await db.delete(challenge)
    await db.commit()
