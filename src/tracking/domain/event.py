"""
Event Aggregate
An immutable record of a user action: food, insulin, exercise, or note
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, TypeVar, Union, assert_never
from uuid import UUID

from shared.domain.base_aggregate_root import BaseAggregateRoot
from shared.domain.clock import Clock, ensure_aware
from shared.domain.identifiers import UserId
from shared.domain.result import Result
from tracking.domain.enums import (
    AbsorptionHint,
    EventType,
    InsulinType,
    IntensityType,
    SourceType,
)
from tracking.domain.errors import EventErrors
from tracking.domain.events import (
    EventCreated,
    ExerciseEventCreated,
    FoodEventCreated,
    InsulinEventCreated,
    NoteEventCreated,
)
from tracking.domain.value_objects import (
    Carbohydrate,
    EventId,
    ExerciseDuration,
    ExerciseTypeId,
    InsulinDose,
    MealTagId,
    NoteText,
)

R = TypeVar("R")


@dataclass(frozen=True)
class FoodDetails:
    carbohydrates: Carbohydrate
    meal_tag: MealTagId
    absorption_hint: AbsorptionHint


@dataclass(frozen=True)
class InsulinDetails:
    insulin_type: InsulinType
    dose: InsulinDose
    preparation: str | None = None
    delivery: str | None = None
    timing: str | None = None


@dataclass(frozen=True)
class ExerciseDetails:
    exercise_type: ExerciseTypeId
    duration: ExerciseDuration
    intensity: IntensityType


@dataclass(frozen=True)
class NoteDetails:
    text: NoteText


EventDetails = Union[FoodDetails, InsulinDetails, ExerciseDetails, NoteDetails]


class Event(BaseAggregateRoot[EventId]):
    """
    Event aggregate root.

    One class, four variants: the variant lives in ``details`` and the
    ``event_type`` tag is derived from it, so the two can never disagree.
    Consumers read variant fields through ``match``, which demands a
    handler for every variant.

    Events are immutable once created; a correction is a new event.
    """

    def __init__(
        self,
        id: EventId,
        user_id: UserId,
        event_time: datetime,
        source: SourceType,
        details: EventDetails,
        created_at: datetime,
        note: NoteText | None = None,
    ) -> None:
        if not isinstance(details, (FoodDetails, InsulinDetails, ExerciseDetails, NoteDetails)):
            raise TypeError(f"Unsupported event details: {type(details).__name__}")
        if isinstance(details, NoteDetails) and note is not None:
            raise ValueError("A note event carries its text in details, not in note")
        super().__init__(id=id, created_at=created_at)
        self._user_id = user_id
        self._event_time = ensure_aware(event_time, "event_time")
        self._source = SourceType(source)
        self._details = details
        self._note = note

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def user_id(self) -> UserId:
        return self._user_id

    @property
    def event_time(self) -> datetime:
        return self._event_time

    @property
    def source(self) -> SourceType:
        return self._source

    @property
    def note(self) -> NoteText | None:
        return self._note

    @property
    def details(self) -> EventDetails:
        return self._details

    @property
    def event_type(self) -> EventType:
        return self.match(
            on_food=lambda _: EventType.FOOD,
            on_insulin=lambda _: EventType.INSULIN,
            on_exercise=lambda _: EventType.EXERCISE,
            on_note=lambda _: EventType.NOTE,
        )

    def is_owned_by(self, user_id: UserId) -> bool:
        return self._user_id == user_id

    def match(
        self,
        *,
        on_food: Callable[[FoodDetails], R],
        on_insulin: Callable[[InsulinDetails], R],
        on_exercise: Callable[[ExerciseDetails], R],
        on_note: Callable[[NoteDetails], R],
    ) -> R:
        """Dispatch on the variant; every variant must be handled."""
        details = self._details
        match details:
            case FoodDetails():
                return on_food(details)
            case InsulinDetails():
                return on_insulin(details)
            case ExerciseDetails():
                return on_exercise(details)
            case NoteDetails():
                return on_note(details)
            case _:
                assert_never(details)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def create_food(
        cls,
        user_id: UserId,
        event_time: datetime,
        carbohydrates: Carbohydrate,
        meal_tag: MealTagId,
        absorption_hint: AbsorptionHint,
        note: NoteText | None,
        source: SourceType,
        clock: Clock,
        correlation_id: UUID,
        causation_id: UUID,
    ) -> Result[Event]:
        details = FoodDetails(carbohydrates, meal_tag, absorption_hint)
        return cls._create(user_id, event_time, source, details, note, clock, correlation_id, causation_id)

    @classmethod
    def create_insulin(
        cls,
        user_id: UserId,
        event_time: datetime,
        insulin_type: InsulinType,
        dose: InsulinDose,
        preparation: str | None,
        delivery: str | None,
        timing: str | None,
        note: NoteText | None,
        source: SourceType,
        clock: Clock,
        correlation_id: UUID,
        causation_id: UUID,
    ) -> Result[Event]:
        details = InsulinDetails(insulin_type, dose, preparation, delivery, timing)
        return cls._create(user_id, event_time, source, details, note, clock, correlation_id, causation_id)

    @classmethod
    def create_exercise(
        cls,
        user_id: UserId,
        event_time: datetime,
        exercise_type: ExerciseTypeId,
        duration: ExerciseDuration,
        intensity: IntensityType,
        note: NoteText | None,
        source: SourceType,
        clock: Clock,
        correlation_id: UUID,
        causation_id: UUID,
    ) -> Result[Event]:
        details = ExerciseDetails(exercise_type, duration, intensity)
        return cls._create(user_id, event_time, source, details, note, clock, correlation_id, causation_id)

    @classmethod
    def create_note(
        cls,
        user_id: UserId,
        event_time: datetime,
        text: NoteText,
        source: SourceType,
        clock: Clock,
        correlation_id: UUID,
        causation_id: UUID,
    ) -> Result[Event]:
        return cls._create(user_id, event_time, source, NoteDetails(text), None, clock, correlation_id, causation_id)

    @classmethod
    def _create(
        cls,
        user_id: UserId,
        event_time: datetime,
        source: SourceType,
        details: EventDetails,
        note: NoteText | None,
        clock: Clock,
        correlation_id: UUID,
        causation_id: UUID,
    ) -> Result[Event]:
        ensure_aware(event_time, "event_time")
        now = clock.now()
        if event_time > now:
            return Result.failure(EventErrors.EVENT_IN_FUTURE)

        event = cls(
            id=EventId.new(),
            user_id=user_id,
            event_time=event_time,
            source=source,
            details=details,
            created_at=now,
            note=note,
        )
        event.raise_event(event._created_event(now, correlation_id, causation_id))
        return Result.success(event)

    def _created_event(self, now: datetime, correlation_id: UUID, causation_id: UUID) -> EventCreated:
        common = dict(
            occurred_at=now,
            correlation_id=correlation_id,
            causation_id=causation_id,
            user_id=self._user_id.value,
            event_time=self._event_time,
            source=self._source,
            note=self._note.text if self._note else None,
        )
        return self.match(
            on_food=lambda d: FoodEventCreated(
                **common,
                carbohydrates_g=d.carbohydrates.grams,
                meal_tag_id=d.meal_tag.value,
                absorption_hint=d.absorption_hint,
            ),
            on_insulin=lambda d: InsulinEventCreated(
                **common,
                insulin_type=d.insulin_type,
                insulin_units=d.dose.units,
                preparation=d.preparation,
                delivery=d.delivery,
                timing=d.timing,
            ),
            on_exercise=lambda d: ExerciseEventCreated(
                **common,
                exercise_type_id=d.exercise_type.value,
                duration_minutes=d.duration.minutes,
                intensity=d.intensity,
            ),
            on_note=lambda d: NoteEventCreated(**common, text=d.text.text),
        )
