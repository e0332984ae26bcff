# app/crud/badge.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.badge import Badge
from app.models.enums import BadgeCriteria
from decimal import Decimal
from typing import List

async def get_badges(db: AsyncSession) -> List[Badge]:
    result = await db.execute(select(Badge).order_by(Badge.criteria, Badge.threshold))
    return list(result.scalars().all())


# Catalog seeded on startup
DEFAULT_BADGES: List[dict] = [
    {"name": "FIRST_CHALLENGE", "description": "Completed your first challenge",
     "criteria": BadgeCriteria.CHALLENGES_COMPLETED, "threshold": Decimal("1")},
    {"name": "FIVE_CHALLENGES", "description": "Completed five challenges",
     "criteria": BadgeCriteria.CHALLENGES_COMPLETED, "threshold": Decimal("5")},
    {"name": "SAVED_1000", "description": "Saved 1 000 in total",
     "criteria": BadgeCriteria.SAVED_AMOUNT, "threshold": Decimal("1000")},
    {"name": "SAVED_10000", "description": "Saved 10 000 in total",
     "criteria": BadgeCriteria.SAVED_AMOUNT, "threshold": Decimal("10000")},
    {"name": "STREAK_3", "description": "Kept a streak for three windows",
     "criteria": BadgeCriteria.STREAK, "threshold": Decimal("3")},
    {"name": "STREAK_10", "description": "Kept a streak for ten windows",
     "criteria": BadgeCriteria.STREAK, "threshold": Decimal("10")},
]

async def seed_default_badges(db: AsyncSession) -> List[Badge]:
    """Ensure the default badges exist; create missing ones.

    Returns the list of badges that were created (empty if none were needed).
    """
    result = await db.execute(select(Badge.name))
    existing_names = {row[0] for row in result.all()}

    badges_to_create: List[Badge] = [
        Badge(**badge) for badge in DEFAULT_BADGES if badge["name"] not in existing_names
    ]

    if badges_to_create:
        db.add_all(badges_to_create)
        await db.commit()

    return badges_to_create
