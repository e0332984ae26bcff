# app/utils/badges.py
from decimal import Decimal
from typing import Iterable, List, Set
import uuid

from app.models.badge import Badge
from app.models.enums import BadgeCriteria


def badge_earned(badge: Badge, completed_challenges: int, saved_amount: Decimal, streak: int) -> bool:
    threshold = Decimal(badge.threshold)
    if badge.criteria == BadgeCriteria.CHALLENGES_COMPLETED:
        return completed_challenges >= threshold
    if badge.criteria == BadgeCriteria.SAVED_AMOUNT:
        return Decimal(saved_amount) >= threshold
    if badge.criteria == BadgeCriteria.STREAK:
        return streak >= threshold
    return False


def newly_earned_badges(
    catalog: Iterable[Badge],
    held: Set[uuid.UUID],
    completed_challenges: int,
    saved_amount: Decimal,
    streak: int,
) -> List[Badge]:
    """Badges whose criterion is met and which the user does not hold yet."""
    return [
        badge for badge in catalog
        if badge.id not in held and badge_earned(badge, completed_challenges, saved_amount, streak)
    ]
