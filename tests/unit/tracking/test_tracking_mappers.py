from decimal import Decimal
from uuid import uuid4

import pytest

from tracking.domain.enums import AbsorptionHint, InsulinType, IntensityType, SourceType
from tracking.domain.event import Event
from tracking.domain.value_objects import (
    Carbohydrate,
    ExerciseDuration,
    ExerciseTypeId,
    InsulinDose,
    MealTagId,
    NoteText,
)
from tracking.infrastructure.mappers import EventMapper


def _ids():
    return {"correlation_id": uuid4(), "causation_id": uuid4()}


def _events(user_id, clock):
    common = {"user_id": user_id, "event_time": clock.now(), "source": SourceType.MANUAL, "clock": clock}
    return [
        Event.create_food(
            carbohydrates=Carbohydrate(30),
            meal_tag=MealTagId(2),
            absorption_hint=AbsorptionHint.RAPID,
            note=NoteText("juice"),
            **common,
            **_ids(),
        ).value,
        Event.create_insulin(
            insulin_type=InsulinType.LONG,
            dose=InsulinDose(Decimal("12.5")),
            preparation=None,
            delivery="pump",
            timing=None,
            note=None,
            **common,
            **_ids(),
        ).value,
        Event.create_exercise(
            exercise_type=ExerciseTypeId(1),
            duration=ExerciseDuration(20),
            intensity=IntensityType.LIGHT,
            note=None,
            **common,
            **_ids(),
        ).value,
        Event.create_note(text=NoteText("headache"), **common, **_ids()).value,
    ]


def test_rows_only_fill_their_variant_columns(user_id, clock):
    food, insulin, exercise, note = (EventMapper().to_model(e) for e in _events(user_id, clock))

    assert (food.event_type, food.carbohydrates_g, food.absorption_hint) == ("food", 30, "rapid")
    assert food.insulin_units is None and food.text is None
    assert (insulin.insulin_type, insulin.insulin_units, insulin.delivery) == ("long", Decimal("12.5"), "pump")
    assert insulin.carbohydrates_g is None
    assert (exercise.exercise_type_id, exercise.duration_minutes, exercise.intensity) == (1, 20, "light")
    assert note.text == "headache" and note.note is None


@pytest.mark.parametrize("index", range(4))
def test_row_maps_back_to_an_equal_aggregate(user_id, clock, index):
    mapper = EventMapper()
    original = _events(user_id, clock)[index]

    restored = mapper.to_domain(mapper.to_model(original))

    assert restored.id == original.id
    assert restored.event_type == original.event_type
    assert restored.details == original.details
    assert restored.note == original.note
    assert restored.event_time == original.event_time
    assert restored.domain_events == ()
