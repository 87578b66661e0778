"""
Unit of Work Base Class
Stages aggregate changes, persists them atomically, then dispatches domain events
"""
from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Sequence, TypeVar

from shared.domain.base_aggregate_root import BaseAggregateRoot
from shared.domain.domain_event import DomainEvent
from shared.domain.error import UnitOfWorkErrors
from shared.domain.result import Result
from shared.infrastructure.messaging.event_bus import EventDispatcher
from shared.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)

TAggregate = TypeVar("TAggregate", bound=BaseAggregateRoot[Any])


def _identity_of(aggregate: BaseAggregateRoot[Any]) -> tuple[type, Any]:
    return type(aggregate), aggregate.id


class AbstractUnitOfWork(ABC):
    """
    Unit of Work for transaction management.

    Repositories register every aggregate they accept through ``track`` (and
    ``mark_removed`` for deletions) and pass every aggregate they load through
    ``attach``, which keeps one instance per identity for the life of the
    unit. ``commit`` then:

    1. collects and clears the pending domain events of every tracked
       aggregate, in tracking order and queue order;
    2. persists all staged changes in one transaction;
    3. dispatches the collected events, in order, only after step 2 succeeded.

    A failed persistence rolls back and returns ``UnitOfWork.PersistenceFailed``;
    the collected events are dropped (at-most-once delivery). Leaving the
    ``async with`` block without a commit rolls back.

    An instance holds the state of a single operation. Entering it again
    while a block is still open raises, so concurrent callers each need
    their own unit of work.

    Usage:
        async with uow:
            uow.events.add(event)
            result = await uow.commit()
    """

    def __init__(self, dispatcher: EventDispatcher | None = None) -> None:
        self.dispatcher = dispatcher or EventDispatcher()
        self._tracked: list[BaseAggregateRoot[Any]] = []
        self._removed: list[BaseAggregateRoot[Any]] = []
        self._identity: dict[tuple[type, Any], BaseAggregateRoot[Any]] = {}
        self._committed = False
        self._active = False

    async def __aenter__(self) -> AbstractUnitOfWork:
        if self._active:
            raise RuntimeError("UnitOfWork is already in use; build one per operation")
        self._active = True
        self._tracked = []
        self._removed = []
        self._identity = {}
        self._committed = False
        try:
            await self._begin()
        except BaseException:
            self._active = False
            raise
        logger.debug("UnitOfWork transaction started")
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            if exc_type is not None:
                await self.rollback()
                logger.error(
                    "UnitOfWork rolled back due to exception",
                    extra={"exception": str(exc_val)},
                )
            elif not self._committed:
                await self.rollback()
                logger.debug("UnitOfWork rolled back (not committed)")
        finally:
            self._active = False
            await self._close()

    def track(self, aggregate: BaseAggregateRoot[Any]) -> None:
        """Register an aggregate whose changes and events belong to this unit."""
        if not any(tracked is aggregate for tracked in self._tracked):
            self._tracked.append(aggregate)
        self._identity.setdefault(_identity_of(aggregate), aggregate)

    def attach(self, loaded: TAggregate) -> TAggregate | None:
        """
        Reconcile a freshly loaded aggregate with this unit.

        Returns the instance already tracked under the same identity, so a
        second read never hands out a stale copy that would overwrite the
        first one at commit. Returns None when that identity was removed in
        this unit.
        """
        known = self._identity.get(_identity_of(loaded))
        if known is None:
            self.track(loaded)
            return loaded
        if any(known is removed for removed in self._removed):
            return None
        return known

    def mark_removed(self, aggregate: BaseAggregateRoot[Any]) -> None:
        """Stage an aggregate for deletion; its pending events are still dispatched."""
        self.track(aggregate)
        if not any(removed is aggregate for removed in self._removed):
            self._removed.append(aggregate)

    @property
    def tracked(self) -> tuple[BaseAggregateRoot[Any], ...]:
        return tuple(self._tracked)

    def _pending_upserts(self) -> list[BaseAggregateRoot[Any]]:
        return [a for a in self._tracked if not any(a is r for r in self._removed)]

    def _pending_removals(self) -> list[BaseAggregateRoot[Any]]:
        return list(self._removed)

    def _collect_events(self) -> list[DomainEvent]:
        events: list[DomainEvent] = []
        for aggregate in self._tracked:
            events.extend(aggregate.collect_domain_events())
        return events

    async def commit(self) -> Result[None]:
        """
        Persist staged changes, then dispatch the collected domain events.

        Returns:
            Success, or Failure(UnitOfWork.PersistenceFailed) after a rollback
        """
        events = self._collect_events()

        try:
            await self._persist(self._pending_upserts(), self._pending_removals())
        except asyncio.CancelledError:
            await self._rollback()
            raise
        except Exception as e:
            logger.error(
                "UnitOfWork commit failed",
                extra={"error": str(e), "dropped_events": len(events)},
                exc_info=True,
            )
            await self._rollback()
            return Result.failure(UnitOfWorkErrors.PERSISTENCE_FAILED)

        self._committed = True
        self._tracked = self._pending_upserts()
        self._removed = []
        self._identity = {_identity_of(a): a for a in self._tracked}
        logger.debug("UnitOfWork transaction committed", extra={"events": len(events)})

        await self.dispatcher.publish_many(events)
        return Result.success()

    async def rollback(self) -> None:
        """
        Rollback the current transaction.

        Discards every staged change made within this unit of work.
        """
        self._tracked = []
        self._removed = []
        self._identity = {}
        await self._rollback()
        logger.debug("UnitOfWork transaction rolled back")

    async def _begin(self) -> None:
        """Open backend resources; nothing to do by default."""

    async def _close(self) -> None:
        """Release backend resources; nothing to do by default."""

    @abstractmethod
    async def _persist(
        self,
        upserts: Sequence[BaseAggregateRoot[Any]],
        removals: Sequence[BaseAggregateRoot[Any]],
    ) -> None:
        """Write all staged changes in one transaction, or raise."""

    @abstractmethod
    async def _rollback(self) -> None:
        """Discard backend-side changes."""
