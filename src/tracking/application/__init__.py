"""
Tracking Application Layer
Commands, queries, and their handlers
"""
from tracking.application.commands import (
    AddExerciseEventCommand,
    AddFoodEventCommand,
    AddInsulinEventCommand,
    AddNoteEventCommand,
)
from tracking.application.handlers import (
    AddExerciseEventHandler,
    AddFoodEventHandler,
    AddInsulinEventHandler,
    AddNoteEventHandler,
    GetEventByIdHandler,
    ListEventsHandler,
)
from tracking.application.ports import TrackingUnitOfWork
from tracking.application.queries import EventPage, GetEventByIdQuery, ListEventsQuery

__all__ = [
    "AddFoodEventCommand",
    "AddInsulinEventCommand",
    "AddExerciseEventCommand",
    "AddNoteEventCommand",
    "AddFoodEventHandler",
    "AddInsulinEventHandler",
    "AddExerciseEventHandler",
    "AddNoteEventHandler",
    "GetEventByIdHandler",
    "ListEventsHandler",
    "TrackingUnitOfWork",
    "EventPage",
    "GetEventByIdQuery",
    "ListEventsQuery",
]
