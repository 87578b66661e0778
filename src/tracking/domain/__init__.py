"""
Tracking Domain Layer
Event aggregate family, its value objects, and domain events
"""
from tracking.domain.enums import AbsorptionHint, EventType, InsulinType, IntensityType, SourceType
from tracking.domain.errors import EventErrors, TirErrors
from tracking.domain.event import (
    Event,
    EventDetails,
    ExerciseDetails,
    FoodDetails,
    InsulinDetails,
    NoteDetails,
)
from tracking.domain.events import (
    EventCreated,
    ExerciseEventCreated,
    FoodEventCreated,
    InsulinEventCreated,
    NoteEventCreated,
)
from tracking.domain.repositories import EventFilter, EventRepository
from tracking.domain.value_objects import (
    Carbohydrate,
    EventId,
    ExerciseDuration,
    ExerciseTypeId,
    InsulinDose,
    MealTagId,
    NoteText,
    TirRange,
)

__all__ = [
    "AbsorptionHint",
    "EventType",
    "InsulinType",
    "IntensityType",
    "SourceType",
    "EventErrors",
    "TirErrors",
    "Event",
    "EventDetails",
    "FoodDetails",
    "InsulinDetails",
    "ExerciseDetails",
    "NoteDetails",
    "EventCreated",
    "FoodEventCreated",
    "InsulinEventCreated",
    "ExerciseEventCreated",
    "NoteEventCreated",
    "EventFilter",
    "EventRepository",
    "Carbohydrate",
    "EventId",
    "ExerciseDuration",
    "ExerciseTypeId",
    "InsulinDose",
    "MealTagId",
    "NoteText",
    "TirRange",
]
