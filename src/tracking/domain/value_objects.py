"""
Tracking Value Objects
Self-validating amounts, durations, texts, and identifiers used by events
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from shared.domain.base_value_object import BaseValueObject
from shared.domain.error import Error
from shared.domain.identifiers import UuidIdentifier
from shared.domain.result import Result
from tracking.domain.errors import EventErrors, TirErrors

MAX_CARBOHYDRATE_GRAMS = 300
MAX_INSULIN_UNITS = Decimal("100")
MIN_EXERCISE_MINUTES = 1
MAX_EXERCISE_MINUTES = 300
MAX_NOTE_LENGTH = 500
TIR_MIN = 0
TIR_MAX = 1000


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class EventId(UuidIdentifier):
    """Identity of an Event aggregate."""


@dataclass(frozen=True)
class MealTagId(BaseValueObject):
    value: int

    def _invariant_error(self) -> Error | None:
        if not _is_int(self.value) or self.value < 1:
            return EventErrors.INVALID_MEAL_TAG
        return None

    @classmethod
    def create(cls, value: int) -> Result[MealTagId]:
        return cls._try_create(value)


@dataclass(frozen=True)
class ExerciseTypeId(BaseValueObject):
    value: int

    def _invariant_error(self) -> Error | None:
        if not _is_int(self.value) or self.value < 1:
            return EventErrors.INVALID_EXERCISE_TYPE
        return None

    @classmethod
    def create(cls, value: int) -> Result[ExerciseTypeId]:
        return cls._try_create(value)


@dataclass(frozen=True)
class Carbohydrate(BaseValueObject):
    """Carbohydrate amount in whole grams, 0 to 300."""

    grams: int

    def _invariant_error(self) -> Error | None:
        if not _is_int(self.grams) or not 0 <= self.grams <= MAX_CARBOHYDRATE_GRAMS:
            return EventErrors.INVALID_CARBOHYDRATES
        return None

    @classmethod
    def create(cls, grams: int) -> Result[Carbohydrate]:
        return cls._try_create(grams)


@dataclass(frozen=True)
class InsulinDose(BaseValueObject):
    """
    Insulin dose in units, 0 to 100 in 0.5 increments.

    Stored as ``Decimal`` so that half-unit checks are exact; ``create``
    accepts int, float, str or Decimal and converts through ``str``, which
    keeps ``0.1 + 0.2`` style float noise out of the comparison.
    """

    units: Decimal

    def _invariant_error(self) -> Error | None:
        if not isinstance(self.units, Decimal) or not self.units.is_finite():
            return EventErrors.INVALID_INSULIN_DOSE
        if not Decimal(0) <= self.units <= MAX_INSULIN_UNITS:
            return EventErrors.INVALID_INSULIN_DOSE
        if (self.units * 2) % 1 != 0:
            return EventErrors.INVALID_INSULIN_DOSE
        return None

    @classmethod
    def create(cls, units: int | float | str | Decimal) -> Result[InsulinDose]:
        if isinstance(units, bool):
            return Result.failure(EventErrors.INVALID_INSULIN_DOSE)
        try:
            parsed = units if isinstance(units, Decimal) else Decimal(str(units).strip())
        except InvalidOperation:
            return Result.failure(EventErrors.INVALID_INSULIN_DOSE)
        return cls._try_create(parsed)


@dataclass(frozen=True)
class ExerciseDuration(BaseValueObject):
    """Exercise duration in whole minutes, 1 to 300."""

    minutes: int

    def _invariant_error(self) -> Error | None:
        if not _is_int(self.minutes) or not MIN_EXERCISE_MINUTES <= self.minutes <= MAX_EXERCISE_MINUTES:
            return EventErrors.INVALID_EXERCISE_DURATION
        return None

    @classmethod
    def create(cls, minutes: int) -> Result[ExerciseDuration]:
        return cls._try_create(minutes)


@dataclass(frozen=True)
class NoteText(BaseValueObject):
    """
    Free text, trimmed, 1 to 500 characters.

    Absence of a note is modelled as ``None`` on the owner, never as an
    empty ``NoteText``.
    """

    text: str

    def _invariant_error(self) -> Error | None:
        if not isinstance(self.text, str) or self.text != self.text.strip():
            return EventErrors.INVALID_NOTE_TEXT
        if not 1 <= len(self.text) <= MAX_NOTE_LENGTH:
            return EventErrors.INVALID_NOTE_TEXT
        return None

    @classmethod
    def create(cls, text: str | None) -> Result[NoteText]:
        """Required text; blank or missing input fails."""
        if text is None:
            return Result.failure(EventErrors.INVALID_NOTE_TEXT)
        return cls._try_create(text.strip())

    @classmethod
    def create_optional(cls, text: str | None) -> Result[NoteText | None]:
        """Optional text; blank or missing input is the "no note" state."""
        if text is None or not text.strip():
            return Result.success(None)
        return cls.create(text)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class TirRange(BaseValueObject):
    """Target glucose band in mg/dL used for time-in-range."""

    lower: int
    upper: int

    def _invariant_error(self) -> Error | None:
        if not (_is_int(self.lower) and _is_int(self.upper)):
            return TirErrors.INVALID_TIR_RANGE
        if not TIR_MIN <= self.lower < self.upper <= TIR_MAX:
            return TirErrors.INVALID_TIR_RANGE
        return None

    @classmethod
    def create(cls, lower: int, upper: int) -> Result[TirRange]:
        return cls._try_create(lower, upper)

    @classmethod
    def standard(cls) -> TirRange:
        return cls(70, 180)

    def is_in_range(self, value: int | float) -> bool:
        return self.lower <= value <= self.upper
