"""
Tracking Domain Events
Raised once per Event aggregate at creation; payloads are flattened copies
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from shared.domain.domain_event import DomainEvent
from tracking.domain.enums import AbsorptionHint, InsulinType, IntensityType, SourceType


@dataclass(frozen=True, kw_only=True)
class EventCreated(DomainEvent):
    """Common payload of every "event created" notification."""

    user_id: UUID
    event_time: datetime
    source: SourceType
    note: str | None = None


@dataclass(frozen=True, kw_only=True)
class FoodEventCreated(EventCreated):
    carbohydrates_g: int
    meal_tag_id: int
    absorption_hint: AbsorptionHint


@dataclass(frozen=True, kw_only=True)
class InsulinEventCreated(EventCreated):
    insulin_type: InsulinType
    insulin_units: Decimal
    preparation: str | None = None
    delivery: str | None = None
    timing: str | None = None


@dataclass(frozen=True, kw_only=True)
class ExerciseEventCreated(EventCreated):
    exercise_type_id: int
    duration_minutes: int
    intensity: IntensityType


@dataclass(frozen=True, kw_only=True)
class NoteEventCreated(EventCreated):
    text: str
