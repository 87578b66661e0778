"""
SQLAlchemy Implementation of Unit of Work
Persists tracked aggregates through registered mappers in one async session transaction
"""
from __future__ import annotations

from typing import Any, Generic, Protocol, Sequence, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.domain.base_aggregate_root import BaseAggregateRoot
from shared.infrastructure.database.base_model import Base
from shared.infrastructure.database.unit_of_work import AbstractUnitOfWork
from shared.infrastructure.messaging.event_bus import EventDispatcher
from shared.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)

TAggregate = TypeVar("TAggregate", bound=BaseAggregateRoot[Any])
TModel = TypeVar("TModel", bound=Base)


class AggregateMapper(Protocol, Generic[TAggregate, TModel]):
    """Two-way translation between an aggregate and its ORM row."""

    model: type[TModel]

    def to_model(self, aggregate: TAggregate) -> TModel: ...

    def to_domain(self, model: TModel) -> TAggregate: ...


class SQLAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy-based Unit of Work implementation.

    Opens one session per ``async with`` block. At commit every tracked
    aggregate is translated by the mapper registered for its type and
    merged into the session, removed aggregates are deleted, and the
    session commits once, so all rows land together or not at all.

    Attributes:
        session: Async SQLAlchemy session (only inside ``async with``)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        super().__init__(dispatcher)
        self._session_factory = session_factory
        self._mappers: dict[type, AggregateMapper[Any, Any]] = {}
        self._session: AsyncSession | None = None

    def register_mapper(self, aggregate_type: type, mapper: AggregateMapper[Any, Any]) -> None:
        self._mappers[aggregate_type] = mapper

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("SQLAlchemyUnitOfWork used outside of its 'async with' block")
        return self._session

    def _mapper_for(self, aggregate: BaseAggregateRoot[Any]) -> AggregateMapper[Any, Any]:
        try:
            return self._mappers[type(aggregate)]
        except KeyError:
            raise LookupError(f"No mapper registered for {type(aggregate).__name__}") from None

    async def _begin(self) -> None:
        self._session = self._session_factory()

    async def _close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def _persist(
        self,
        upserts: Sequence[BaseAggregateRoot[Any]],
        removals: Sequence[BaseAggregateRoot[Any]],
    ) -> None:
        session = self.session
        for aggregate in upserts:
            await session.merge(self._mapper_for(aggregate).to_model(aggregate))
        for aggregate in removals:
            mapper = self._mapper_for(aggregate)
            row = await session.get(mapper.model, getattr(aggregate.id, "value", aggregate.id))
            if row is not None:
                await session.delete(row)
        await session.commit()
        logger.debug(
            "UnitOfWork flushed aggregates",
            extra={"upserts": len(upserts), "removals": len(removals)},
        )

    async def _rollback(self) -> None:
        if self._session is None:
            return
        try:
            await self._session.rollback()
        except Exception as e:
            logger.error(
                "UnitOfWork rollback failed",
                extra={"error": str(e)},
            )
            raise
