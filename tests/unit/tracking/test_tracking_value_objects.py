from decimal import Decimal

import pytest

from shared.domain.exceptions import InvariantViolation
from tracking.domain.errors import EventErrors, TirErrors
from tracking.domain.value_objects import (
    Carbohydrate,
    ExerciseDuration,
    ExerciseTypeId,
    InsulinDose,
    MealTagId,
    NoteText,
    TirRange,
)


@pytest.mark.parametrize("grams", [0, 1, 150, 300])
def test_carbohydrate_accepts_range(grams):
    assert Carbohydrate.create(grams).value.grams == grams


@pytest.mark.parametrize("grams", [-1, 301, 12.5, True, "40"])
def test_carbohydrate_rejects(grams):
    assert Carbohydrate.create(grams).error == EventErrors.INVALID_CARBOHYDRATES


def test_direct_construction_enforces_invariants():
    with pytest.raises(InvariantViolation) as info:
        Carbohydrate(301)
    assert info.value.error == EventErrors.INVALID_CARBOHYDRATES


@pytest.mark.parametrize("units", [0, "0.5", 2.5, Decimal("99.5"), 100])
def test_insulin_dose_accepts_half_units(units):
    assert InsulinDose.create(units).is_success()


def test_insulin_dose_is_exact_decimal():
    assert InsulinDose.create(2.5).value.units == Decimal("2.5")


@pytest.mark.parametrize("units", [-0.5, 100.5, 0.3, "abc", "NaN", float("inf"), True])
def test_insulin_dose_rejects(units):
    assert InsulinDose.create(units).error == EventErrors.INVALID_INSULIN_DOSE


@pytest.mark.parametrize("minutes, ok", [(0, False), (1, True), (300, True), (301, False)])
def test_exercise_duration_bounds(minutes, ok):
    assert ExerciseDuration.create(minutes).is_success() is ok


def test_ids_must_be_positive():
    assert MealTagId.create(0).error == EventErrors.INVALID_MEAL_TAG
    assert ExerciseTypeId.create(-3).error == EventErrors.INVALID_EXERCISE_TYPE
    assert MealTagId.create(4).value == MealTagId(4)


def test_note_text_is_trimmed():
    assert NoteText.create("  felt dizzy  ").value.text == "felt dizzy"


@pytest.mark.parametrize("text", [None, "", "   ", "x" * 501])
def test_note_text_required_rejects(text):
    assert NoteText.create(text).error == EventErrors.INVALID_NOTE_TEXT


def test_note_text_boundary():
    assert NoteText.create("x" * 500).is_success()


def test_optional_note_blank_is_absent_but_too_long_fails():
    assert NoteText.create_optional(None).value is None
    assert NoteText.create_optional("  ").value is None
    assert NoteText.create_optional("x" * 501).error == EventErrors.INVALID_NOTE_TEXT
    assert NoteText.create_optional(" ok ").value == NoteText("ok")


def test_tir_range():
    standard = TirRange.standard()
    assert (standard.lower, standard.upper) == (70, 180)
    assert standard.is_in_range(70) and standard.is_in_range(180)
    assert not standard.is_in_range(69.9) and not standard.is_in_range(181)


@pytest.mark.parametrize("lower, upper", [(180, 70), (100, 100), (-1, 100), (0, 1001)])
def test_tir_range_rejects(lower, upper):
    assert TirRange.create(lower, upper).error == TirErrors.INVALID_TIR_RANGE


def test_value_objects_compare_by_value():
    assert Carbohydrate(40) == Carbohydrate(40)
    assert hash(NoteText("a")) == hash(NoteText("a"))
