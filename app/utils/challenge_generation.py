# app/utils/challenge_generation.py
"""
Turn a user's challenge config into challenge proposals.

The output depends only on the config and the reference date, so calling it
twice with the same inputs yields the same list. Nothing is persisted here.

Motivation (VERY_LOW=1 .. VERY_HIGH=5) scales the proposals:
  * count      = motivation level
  * targets    = the first ``level`` of five evenly spaced steps through
                 (target_min, target_max], so a higher level only adds
                 larger targets
  * deadline   = shorter for higher levels
"""
import math
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional, Sequence

from app.models.challenge_config import ChallengeConfig, ChallengeTypeConfig
from app.models.enums import Motivation
from app.schemas.challenge import ChallengeCreate
from app.utils.money import quantize

STEPS = 5
# Days until the due date, by motivation level
DURATION_DAYS = {1: 35, 2: 28, 3: 21, 4: 14, 5: 7}


def target_for_step(target_min: Decimal, target_max: Decimal, step: int) -> Decimal:
    """Target of the 1-based ``step`` out of STEPS; step STEPS hits target_max."""
    span = Decimal(target_max) - Decimal(target_min)
    return quantize(Decimal(target_min) + span * step / STEPS)


def _cap_for_type(target: Decimal, target_min: Decimal, type_config: ChallengeTypeConfig) -> Decimal:
    # Cannot save more on a type than is usually spent on it
    if type_config.general_amount is None:
        return target
    return max(Decimal(target_min), min(target, Decimal(type_config.general_amount)))


def _describe(target: Decimal, due_date: date, type_config: Optional[ChallengeTypeConfig]) -> tuple:
    if type_config is None:
        return "Savings challenge", f"Put aside {target} before {due_date.isoformat()}"
    unit_price = Decimal(type_config.specific_amount)
    units = math.ceil(target / unit_price)
    return (
        f"Save on {type_config.type}",
        f"Skip {units} purchases of {type_config.type} ({quantize(unit_price)} each) to save {target}",
    )


def generate_challenges(config: ChallengeConfig, today: date) -> List[ChallengeCreate]:
    motivation = Motivation(config.motivation)
    level = motivation.level
    due_date = today + timedelta(days=DURATION_DAYS[level])
    types: Sequence[ChallengeTypeConfig] = sorted(config.challenge_types, key=lambda t: t.type.lower())

    candidates: List[ChallengeCreate] = []
    for index in range(level):
        type_config = types[index % len(types)] if types else None
        target = target_for_step(config.target_min, config.target_max, index + 1)
        if type_config is not None:
            target = quantize(_cap_for_type(target, config.target_min, type_config))

        title, description = _describe(target, due_date, type_config)
        # Long type names must still fit the title and description columns
        title, description = title[:100], description[:255]
        candidates.append(
            ChallengeCreate(
                title=title,
                description=description,
                type=type_config.type if type_config else None,
                target=target,
                saved=Decimal("0.00"),
                due_date=due_date,
            )
        )
    return candidates
