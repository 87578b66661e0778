"""
Tracking commands
Raw caller input; handlers turn it into value objects
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from shared.application.base_command import BaseCommand


@dataclass(frozen=True)
class AddFoodEventCommand(BaseCommand):
    user_id: UUID
    event_time: datetime
    carbohydrates_g: int
    meal_tag_id: int = 1
    absorption_hint: str = "normal"
    note: str | None = None
    source: str = "manual"


@dataclass(frozen=True)
class AddInsulinEventCommand(BaseCommand):
    user_id: UUID
    event_time: datetime
    insulin_type: str
    insulin_units: int | float | str | Decimal
    preparation: str | None = None
    delivery: str | None = None
    timing: str | None = None
    note: str | None = None
    source: str = "manual"


@dataclass(frozen=True)
class AddExerciseEventCommand(BaseCommand):
    user_id: UUID
    event_time: datetime
    exercise_type_id: int
    duration_minutes: int
    intensity: str
    note: str | None = None
    source: str = "manual"


@dataclass(frozen=True)
class AddNoteEventCommand(BaseCommand):
    user_id: UUID
    event_time: datetime
    text: str
    source: str = "manual"
