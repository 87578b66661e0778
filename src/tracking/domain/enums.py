from __future__ import annotations

from enum import StrEnum


class EventType(StrEnum):
    FOOD = "food"
    INSULIN = "insulin"
    EXERCISE = "exercise"
    NOTE = "note"


class SourceType(StrEnum):
    MANUAL = "manual"
    IMPORTED = "imported"
    SYSTEM = "system"


class AbsorptionHint(StrEnum):
    RAPID = "rapid"
    NORMAL = "normal"
    SLOW = "slow"
    OTHER = "other"


class InsulinType(StrEnum):
    FAST = "fast"
    LONG = "long"


class IntensityType(StrEnum):
    LIGHT = "light"
    MODERATE = "moderate"
    VIGOROUS = "vigorous"
