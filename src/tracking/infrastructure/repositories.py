"""
Event repositories
SQLAlchemy and in-memory implementations; neither commits, the unit of work does
"""
from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import Select, func, select

from shared.domain.identifiers import UserId
from shared.infrastructure.database.in_memory import InMemoryUnitOfWork
from shared.infrastructure.database.sqlalchemy_unit_of_work import SQLAlchemyUnitOfWork
from tracking.domain.event import Event
from tracking.domain.repositories import EventFilter
from tracking.domain.value_objects import EventId
from tracking.infrastructure.mappers import EventMapper
from tracking.infrastructure.models import EventModel


def _newest_first(events: list[Event]) -> list[Event]:
    return sorted(events, key=lambda e: e.event_time, reverse=True)


class SqlAlchemyEventRepository:
    def __init__(self, uow: SQLAlchemyUnitOfWork, mapper: EventMapper | None = None) -> None:
        self._uow = uow
        self._mapper = mapper or EventMapper()

    def add(self, event: Event) -> None:
        self._uow.track(event)

    def remove(self, event: Event) -> None:
        self._uow.mark_removed(event)

    async def get_by_id(self, event_id: EventId) -> Event | None:
        row = await self._uow.session.get(EventModel, event_id.value)
        if row is None:
            return None
        return self._uow.attach(self._mapper.to_domain(row))

    async def get_by_user(self, user_id: UserId, filters: EventFilter | None = None) -> Sequence[Event]:
        filters = filters or EventFilter()
        stmt = self._filtered(select(EventModel), user_id, filters).order_by(EventModel.event_time.desc())
        if filters.offset:
            stmt = stmt.offset(filters.offset)
        if filters.limit is not None:
            stmt = stmt.limit(filters.limit)

        result = await self._uow.session.execute(stmt)
        loaded = (self._uow.attach(self._mapper.to_domain(row)) for row in result.scalars().all())
        return [event for event in loaded if event is not None]

    async def count_by_user(self, user_id: UserId, filters: EventFilter | None = None) -> int:
        stmt = self._filtered(select(func.count(EventModel.id)), user_id, filters or EventFilter())
        result = await self._uow.session.execute(stmt)
        return int(result.scalar_one())

    @staticmethod
    def _filtered(stmt: Select[Any], user_id: UserId, filters: EventFilter) -> Select[Any]:
        stmt = stmt.where(EventModel.user_id == user_id.value)
        if filters.event_type is not None:
            stmt = stmt.where(EventModel.event_type == filters.event_type.value)
        if filters.start is not None:
            stmt = stmt.where(EventModel.event_time >= filters.start)
        if filters.end is not None:
            stmt = stmt.where(EventModel.event_time <= filters.end)
        return stmt


class InMemoryEventRepository:
    collection = Event.__name__

    def __init__(self, uow: InMemoryUnitOfWork) -> None:
        self._uow = uow

    def add(self, event: Event) -> None:
        self._uow.track(event)

    def remove(self, event: Event) -> None:
        self._uow.mark_removed(event)

    async def get_by_id(self, event_id: EventId) -> Event | None:
        event = self._uow.store.get(self.collection, event_id)
        return self._uow.attach(event) if event is not None else None

    async def get_by_user(self, user_id: UserId, filters: EventFilter | None = None) -> Sequence[Event]:
        filters = filters or EventFilter()
        events = _newest_first(self._matching(user_id, filters))
        end = None if filters.limit is None else filters.offset + filters.limit
        loaded = (self._uow.attach(event) for event in events[filters.offset:end])
        return [event for event in loaded if event is not None]

    async def count_by_user(self, user_id: UserId, filters: EventFilter | None = None) -> int:
        return len(self._matching(user_id, filters or EventFilter()))

    def _matching(self, user_id: UserId, filters: EventFilter) -> list[Event]:
        return self._uow.store.find(
            self.collection,
            lambda e: e.user_id == user_id and filters.matches(e),
        )
