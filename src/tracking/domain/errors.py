"""
Tracking error catalogue
Each error has a stable code and a descriptive message
"""
from __future__ import annotations

from shared.domain.error import Error


class EventErrors:
    EVENT_IN_FUTURE = Error.create(
        "Event.EventInFuture",
        "Event time cannot be in the future.",
    )

    INVALID_CARBOHYDRATES = Error.create(
        "Event.InvalidCarbohydrates",
        "Carbohydrates must be between 0 and 300 grams.",
    )

    INVALID_INSULIN_DOSE = Error.create(
        "Event.InvalidInsulinDose",
        "Insulin dose must be between 0 and 100 units in 0.5 increments.",
    )

    INVALID_EXERCISE_DURATION = Error.create(
        "Event.InvalidExerciseDuration",
        "Exercise duration must be between 1 and 300 minutes.",
    )

    INVALID_NOTE_TEXT = Error.create(
        "Event.InvalidNoteText",
        "Note text must be between 1 and 500 characters.",
    )

    INVALID_INSULIN_DETAILS = Error.create(
        "Event.InvalidInsulinDetails",
        "Preparation and delivery are limited to 100 characters, timing to 50.",
    )

    INVALID_MEAL_TAG = Error.create(
        "Event.InvalidMealTag",
        "Meal tag must be a positive integer.",
    )

    INVALID_EXERCISE_TYPE = Error.create(
        "Event.InvalidExerciseType",
        "Exercise type must be a positive integer.",
    )

    INVALID_EVENT_TYPE = Error.create(
        "Event.InvalidEventType",
        "Unknown event type, source, or variant option.",
    )

    INVALID_DATE_RANGE = Error.create(
        "Event.InvalidDateRange",
        "The start of the range must not be after its end.",
    )

    INVALID_PAGINATION = Error.create(
        "Event.InvalidPagination",
        "Page must be >= 1 and page size between 1 and 100.",
    )

    NOT_FOUND = Error.create(
        "Event.NotFound",
        "The event was not found.",
    )


class TirErrors:
    INVALID_TIR_RANGE = Error.create(
        "User.InvalidTirRange",
        "TIR range lower bound must be less than upper bound, and both must be between 0 and 1000.",
    )
