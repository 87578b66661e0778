"""
Tracking command and query handlers
Validate raw input, create or read Event aggregates, commit through the unit of work
"""
from __future__ import annotations

from enum import Enum
from typing import TypeVar

from shared.application.command_handler import CommandHandler
from shared.application.query_handler import QueryHandler
from shared.domain.clock import Clock
from shared.domain.error import CommonErrors
from shared.domain.identifiers import UserId
from shared.domain.result import Result, first_failure
from shared.infrastructure.observability.logger import get_logger
from tracking.application.commands import (
    AddExerciseEventCommand,
    AddFoodEventCommand,
    AddInsulinEventCommand,
    AddNoteEventCommand,
)
from tracking.application.ports import TrackingUnitOfWork
from tracking.application.queries import (
    MAX_PAGE_SIZE,
    EventPage,
    GetEventByIdQuery,
    ListEventsQuery,
)
from tracking.domain.enums import AbsorptionHint, EventType, InsulinType, IntensityType, SourceType
from tracking.domain.errors import EventErrors
from tracking.domain.event import Event
from tracking.domain.repositories import EventFilter
from tracking.domain.value_objects import (
    Carbohydrate,
    EventId,
    ExerciseDuration,
    ExerciseTypeId,
    InsulinDose,
    MealTagId,
    NoteText,
)

logger = get_logger(__name__)

TEnum = TypeVar("TEnum", bound=Enum)

MAX_PREPARATION_LENGTH = 100
MAX_DELIVERY_LENGTH = 100
MAX_TIMING_LENGTH = 50


def parse_enum(enum_type: type[TEnum], raw: str) -> Result[TEnum]:
    try:
        return Result.success(enum_type(str(raw).strip().lower()))
    except ValueError:
        return Result.failure(EventErrors.INVALID_EVENT_TYPE)


def _optional_text(raw: str | None, max_length: int) -> Result[str | None]:
    if raw is None or not raw.strip():
        return Result.success(None)
    text = raw.strip()
    if len(text) > max_length:
        return Result.failure(EventErrors.INVALID_INSULIN_DETAILS)
    return Result.success(text)


class _AddEventHandler:
    """Shared persistence step of the "add event" handlers."""

    def __init__(self, uow: TrackingUnitOfWork, clock: Clock) -> None:
        self.uow = uow
        self.clock = clock

    async def _save(self, created: Result[Event]) -> Result[Event]:
        if created.is_failure():
            return created

        event = created.value
        async with self.uow:
            self.uow.events.add(event)
            committed = await self.uow.commit()

        if committed.is_failure():
            return Result.failure(committed.error)

        logger.info(
            "Event logged",
            extra={"event_id": str(event.id), "event_type": event.event_type.value},
        )
        return Result.success(event)


class AddFoodEventHandler(_AddEventHandler, CommandHandler[AddFoodEventCommand, Event]):
    async def handle(self, command: AddFoodEventCommand) -> Result[Event]:
        user_id = UserId.create(command.user_id)
        carbohydrates = Carbohydrate.create(command.carbohydrates_g)
        meal_tag = MealTagId.create(command.meal_tag_id)
        absorption_hint = parse_enum(AbsorptionHint, command.absorption_hint)
        note = NoteText.create_optional(command.note)
        source = parse_enum(SourceType, command.source)

        failed = first_failure(user_id, carbohydrates, meal_tag, absorption_hint, note, source)
        if failed is not None:
            return Result.failure(failed.error)

        return await self._save(
            Event.create_food(
                user_id=user_id.value,
                event_time=command.event_time,
                carbohydrates=carbohydrates.value,
                meal_tag=meal_tag.value,
                absorption_hint=absorption_hint.value,
                note=note.value,
                source=source.value,
                clock=self.clock,
                correlation_id=command.correlation_id,
                causation_id=command.command_id,
            )
        )


class AddInsulinEventHandler(_AddEventHandler, CommandHandler[AddInsulinEventCommand, Event]):
    async def handle(self, command: AddInsulinEventCommand) -> Result[Event]:
        user_id = UserId.create(command.user_id)
        insulin_type = parse_enum(InsulinType, command.insulin_type)
        dose = InsulinDose.create(command.insulin_units)
        preparation = _optional_text(command.preparation, MAX_PREPARATION_LENGTH)
        delivery = _optional_text(command.delivery, MAX_DELIVERY_LENGTH)
        timing = _optional_text(command.timing, MAX_TIMING_LENGTH)
        note = NoteText.create_optional(command.note)
        source = parse_enum(SourceType, command.source)

        failed = first_failure(user_id, insulin_type, dose, preparation, delivery, timing, note, source)
        if failed is not None:
            return Result.failure(failed.error)

        return await self._save(
            Event.create_insulin(
                user_id=user_id.value,
                event_time=command.event_time,
                insulin_type=insulin_type.value,
                dose=dose.value,
                preparation=preparation.value,
                delivery=delivery.value,
                timing=timing.value,
                note=note.value,
                source=source.value,
                clock=self.clock,
                correlation_id=command.correlation_id,
                causation_id=command.command_id,
            )
        )


class AddExerciseEventHandler(_AddEventHandler, CommandHandler[AddExerciseEventCommand, Event]):
    async def handle(self, command: AddExerciseEventCommand) -> Result[Event]:
        user_id = UserId.create(command.user_id)
        exercise_type = ExerciseTypeId.create(command.exercise_type_id)
        duration = ExerciseDuration.create(command.duration_minutes)
        intensity = parse_enum(IntensityType, command.intensity)
        note = NoteText.create_optional(command.note)
        source = parse_enum(SourceType, command.source)

        failed = first_failure(user_id, exercise_type, duration, intensity, note, source)
        if failed is not None:
            return Result.failure(failed.error)

        return await self._save(
            Event.create_exercise(
                user_id=user_id.value,
                event_time=command.event_time,
                exercise_type=exercise_type.value,
                duration=duration.value,
                intensity=intensity.value,
                note=note.value,
                source=source.value,
                clock=self.clock,
                correlation_id=command.correlation_id,
                causation_id=command.command_id,
            )
        )


class AddNoteEventHandler(_AddEventHandler, CommandHandler[AddNoteEventCommand, Event]):
    async def handle(self, command: AddNoteEventCommand) -> Result[Event]:
        user_id = UserId.create(command.user_id)
        text = NoteText.create(command.text)
        source = parse_enum(SourceType, command.source)

        failed = first_failure(user_id, text, source)
        if failed is not None:
            return Result.failure(failed.error)

        return await self._save(
            Event.create_note(
                user_id=user_id.value,
                event_time=command.event_time,
                text=text.value,
                source=source.value,
                clock=self.clock,
                correlation_id=command.correlation_id,
                causation_id=command.command_id,
            )
        )


class GetEventByIdHandler(QueryHandler[GetEventByIdQuery, Event]):
    def __init__(self, uow: TrackingUnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetEventByIdQuery) -> Result[Event]:
        user_id = UserId.create(query.user_id)
        event_id = EventId.create(query.event_id)
        failed = first_failure(user_id, event_id)
        if failed is not None:
            return Result.failure(failed.error)

        async with self.uow:
            event = await self.uow.events.get_by_id(event_id.value)

        if event is None:
            return Result.failure(EventErrors.NOT_FOUND)
        if not event.is_owned_by(user_id.value):
            return Result.failure(CommonErrors.FORBIDDEN)
        return Result.success(event)


class ListEventsHandler(QueryHandler[ListEventsQuery, EventPage]):
    def __init__(self, uow: TrackingUnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: ListEventsQuery) -> Result[EventPage]:
        user_id = UserId.create(query.user_id)
        if user_id.is_failure():
            return Result.failure(user_id.error)
        if query.page < 1 or not 1 <= query.page_size <= MAX_PAGE_SIZE:
            return Result.failure(EventErrors.INVALID_PAGINATION)
        if query.start is not None and query.end is not None and query.start > query.end:
            return Result.failure(EventErrors.INVALID_DATE_RANGE)

        event_type = None
        if query.event_type is not None:
            parsed = parse_enum(EventType, query.event_type)
            if parsed.is_failure():
                return Result.failure(parsed.error)
            event_type = parsed.value

        criteria = EventFilter(event_type=event_type, start=query.start, end=query.end)
        page_filter = EventFilter(
            event_type=event_type,
            start=query.start,
            end=query.end,
            offset=(query.page - 1) * query.page_size,
            limit=query.page_size,
        )

        async with self.uow:
            total = await self.uow.events.count_by_user(user_id.value, criteria)
            items = await self.uow.events.get_by_user(user_id.value, page_filter)

        return Result.success(EventPage(items=list(items), total=total, page=query.page, page_size=query.page_size))
