# app/utils/streaks.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional


def as_utc(moment: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class StreakState:
    streak: int
    streak_start: Optional[datetime]


def advance_streak(
    streak: int,
    streak_start: Optional[datetime],
    completed_at: datetime,
    window: timedelta,
) -> StreakState:
    """
    Evaluate the streak after a completion at ``completed_at``.

    Windows are counted from ``streak_start``: window ``k`` covers
    ``[start + k*window, start + (k+1)*window)``. A streak of ``n`` has
    counted windows ``0..n-1``.

    - completion inside a counted window: unchanged
    - completion in window ``n`` (the next one): streak + 1
    - anything later, or no streak yet: restart at 1 with start = completed_at
    """
    if window <= timedelta(0):
        raise ValueError("Streak window must be positive")

    completed_at = as_utc(completed_at)
    if streak <= 0 or streak_start is None:
        return StreakState(streak=1, streak_start=completed_at)

    start = as_utc(streak_start)
    if completed_at < start:
        # Clock skew; count it toward the current window
        return StreakState(streak=streak, streak_start=start)

    window_index = (completed_at - start) // window
    if window_index < streak:
        return StreakState(streak=streak, streak_start=start)
    if window_index == streak:
        return StreakState(streak=streak + 1, streak_start=start)
    return StreakState(streak=1, streak_start=completed_at)
