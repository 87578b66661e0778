"""
In-Memory Persistence
Process-local store and unit of work for tests and single-process runs
"""
from __future__ import annotations

import copy
from collections import defaultdict
from typing import Any, Callable, Iterator, Sequence

from shared.domain.base_aggregate_root import BaseAggregateRoot
from shared.infrastructure.database.unit_of_work import AbstractUnitOfWork
from shared.infrastructure.messaging.event_bus import EventDispatcher


def _collection_of(aggregate: BaseAggregateRoot[Any]) -> str:
    return type(aggregate).__name__


class InMemoryStore:
    """
    Committed state, one collection per aggregate type.

    Values are snapshots: the store hands out deep copies and keeps deep
    copies, so two units of work never share an aggregate instance and an
    uncommitted mutation is never visible to anyone else.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[Any, BaseAggregateRoot[Any]]] = defaultdict(dict)

    def get(self, collection: str, key: Any) -> BaseAggregateRoot[Any] | None:
        stored = self._collections[collection].get(key)
        return copy.deepcopy(stored) if stored is not None else None

    def find(
        self,
        collection: str,
        predicate: Callable[[Any], bool] = lambda _: True,
    ) -> list[BaseAggregateRoot[Any]]:
        return [copy.deepcopy(a) for a in self._collections[collection].values() if predicate(a)]

    def count(self, collection: str) -> int:
        return len(self._collections[collection])

    def __iter__(self) -> Iterator[str]:
        return iter(self._collections)

    def apply(
        self,
        upserts: Sequence[BaseAggregateRoot[Any]],
        removals: Sequence[BaseAggregateRoot[Any]],
    ) -> None:
        """Apply a whole change set; no await point, so it lands atomically."""
        staged = [(_collection_of(a), a.id, copy.deepcopy(a)) for a in upserts]
        for collection, key, snapshot in staged:
            self._collections[collection][key] = snapshot
        for aggregate in removals:
            self._collections[_collection_of(aggregate)].pop(aggregate.id, None)


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """Unit of work over an ``InMemoryStore``."""

    def __init__(self, store: InMemoryStore, dispatcher: EventDispatcher | None = None) -> None:
        super().__init__(dispatcher)
        self.store = store

    async def _persist(
        self,
        upserts: Sequence[BaseAggregateRoot[Any]],
        removals: Sequence[BaseAggregateRoot[Any]],
    ) -> None:
        self.store.apply(upserts, removals)

    async def _rollback(self) -> None:
        # Nothing reached the store before _persist
        return None
