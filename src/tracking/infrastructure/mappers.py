from __future__ import annotations

from decimal import Decimal

from shared.domain.identifiers import UserId
from tracking.domain.enums import AbsorptionHint, EventType, InsulinType, IntensityType, SourceType
from tracking.domain.event import (
    Event,
    EventDetails,
    ExerciseDetails,
    FoodDetails,
    InsulinDetails,
    NoteDetails,
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
from tracking.infrastructure.models import EventModel


class EventMapper:
    """Translates Event aggregates to and from ``events`` rows."""

    model = EventModel

    def to_model(self, event: Event) -> EventModel:
        row = EventModel(
            id=event.id.value,
            user_id=event.user_id.value,
            event_type=event.event_type.value,
            event_time=event.event_time,
            source=event.source.value,
            note=event.note.text if event.note else None,
            created_at=event.created_at,
        )

        def fill_food(d: FoodDetails) -> None:
            row.carbohydrates_g = d.carbohydrates.grams
            row.meal_tag_id = d.meal_tag.value
            row.absorption_hint = d.absorption_hint.value

        def fill_insulin(d: InsulinDetails) -> None:
            row.insulin_type = d.insulin_type.value
            row.insulin_units = d.dose.units
            row.preparation = d.preparation
            row.delivery = d.delivery
            row.timing = d.timing

        def fill_exercise(d: ExerciseDetails) -> None:
            row.exercise_type_id = d.exercise_type.value
            row.duration_minutes = d.duration.minutes
            row.intensity = d.intensity.value

        def fill_note(d: NoteDetails) -> None:
            row.text = d.text.text

        event.match(on_food=fill_food, on_insulin=fill_insulin, on_exercise=fill_exercise, on_note=fill_note)
        return row

    def to_domain(self, row: EventModel) -> Event:
        # Rows were written from valid aggregates; a bad row raises InvariantViolation
        return Event(
            id=EventId(row.id),
            user_id=UserId(row.user_id),
            event_time=row.event_time,
            source=SourceType(row.source),
            details=self._details(row),
            created_at=row.created_at,
            note=NoteText(row.note) if row.note else None,
        )

    @staticmethod
    def _details(row: EventModel) -> EventDetails:
        match EventType(row.event_type):
            case EventType.FOOD:
                return FoodDetails(
                    carbohydrates=Carbohydrate(row.carbohydrates_g),
                    meal_tag=MealTagId(row.meal_tag_id),
                    absorption_hint=AbsorptionHint(row.absorption_hint),
                )
            case EventType.INSULIN:
                return InsulinDetails(
                    insulin_type=InsulinType(row.insulin_type),
                    dose=InsulinDose(Decimal(str(row.insulin_units))),
                    preparation=row.preparation,
                    delivery=row.delivery,
                    timing=row.timing,
                )
            case EventType.EXERCISE:
                return ExerciseDetails(
                    exercise_type=ExerciseTypeId(row.exercise_type_id),
                    duration=ExerciseDuration(row.duration_minutes),
                    intensity=IntensityType(row.intensity),
                )
            case EventType.NOTE:
                return NoteDetails(text=NoteText(row.text))
