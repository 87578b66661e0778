"""
Tracking Unit of Work
Exposes the event repository within a transaction
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.infrastructure.database.in_memory import InMemoryStore, InMemoryUnitOfWork
from shared.infrastructure.database.sqlalchemy_unit_of_work import SQLAlchemyUnitOfWork
from shared.infrastructure.messaging.event_bus import EventDispatcher
from tracking.domain.event import Event
from tracking.infrastructure.mappers import EventMapper
from tracking.infrastructure.repositories import InMemoryEventRepository, SqlAlchemyEventRepository


class SqlAlchemyTrackingUnitOfWork(SQLAlchemyUnitOfWork):
    """
    Usage:
        async with uow:
            uow.events.add(event)
            await uow.commit()
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        super().__init__(session_factory, dispatcher)
        mapper = EventMapper()
        self.register_mapper(Event, mapper)
        self.events = SqlAlchemyEventRepository(self, mapper)


class InMemoryTrackingUnitOfWork(InMemoryUnitOfWork):
    def __init__(self, store: InMemoryStore, dispatcher: EventDispatcher | None = None) -> None:
        super().__init__(store, dispatcher)
        self.events = InMemoryEventRepository(self)
