# app/models/enums.py
import enum


class Motivation(str, enum.Enum):
    VERY_LOW = "VERY_LOW"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"

    @property
    def level(self) -> int:
        """Ordinal value, VERY_LOW=1 .. VERY_HIGH=5"""
        return list(Motivation).index(self) + 1


class BadgeCriteria(str, enum.Enum):
    CHALLENGES_COMPLETED = "CHALLENGES_COMPLETED"
    SAVED_AMOUNT = "SAVED_AMOUNT"
    STREAK = "STREAK"
