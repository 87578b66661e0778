"""
CGM Unit of Work
Exposes the CgmLink repository within a transaction
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.domain.clock import Clock, SystemClock
from shared.infrastructure.database.in_memory import InMemoryStore, InMemoryUnitOfWork
from shared.infrastructure.database.sqlalchemy_unit_of_work import SQLAlchemyUnitOfWork
from shared.infrastructure.messaging.event_bus import EventDispatcher
from cgm.domain.cgm_link import CgmLink
from cgm.infrastructure.mappers import CgmLinkMapper
from cgm.infrastructure.repositories import InMemoryCgmLinkRepository, SqlAlchemyCgmLinkRepository


class SqlAlchemyCgmUnitOfWork(SQLAlchemyUnitOfWork):
    """
    Usage:
        async with uow:
            link = await uow.cgm_links.get_by_id(link_id)
            ...
            await uow.commit()
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dispatcher: EventDispatcher | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(session_factory, dispatcher)
        mapper = CgmLinkMapper()
        self.register_mapper(CgmLink, mapper)
        self.cgm_links = SqlAlchemyCgmLinkRepository(self, clock or SystemClock(), mapper)


class InMemoryCgmUnitOfWork(InMemoryUnitOfWork):
    def __init__(
        self,
        store: InMemoryStore,
        dispatcher: EventDispatcher | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(store, dispatcher)
        self.cgm_links = InMemoryCgmLinkRepository(self, clock or SystemClock())
