"""
Aggregate Root Base Class
Consistency boundary that buffers the domain events it raises
"""
from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import TypeVar

from shared.domain.base_entity import BaseEntity
from shared.domain.clock import ensure_aware
from shared.domain.domain_event import DomainEvent

TId = TypeVar("TId")


class BaseAggregateRoot(BaseEntity[TId]):
    """
    Base class for aggregate roots.

    Every state change raises a domain event into a private buffer. The unit
    of work drains the buffer before persisting and dispatches the drained
    events only after the write succeeded, so the buffer never leaks across
    commits.
    """

    def __init__(self, id: TId, created_at: datetime) -> None:
        super().__init__(id=id)
        self._created_at = ensure_aware(created_at, "created_at")
        self._domain_events: list[DomainEvent] = []

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def raise_event(self, event: DomainEvent) -> None:
        """Buffer ``event``, stamping the aggregate id and type when unset."""
        stamp = {}
        if event.aggregate_id is None:
            stamp["aggregate_id"] = getattr(self.id, "value", self.id)
        if not event.aggregate_type:
            stamp["aggregate_type"] = type(self).__name__
        self._domain_events.append(dataclasses.replace(event, **stamp) if stamp else event)

    def collect_domain_events(self) -> list[DomainEvent]:
        """Drain the buffer in raise order. A second call returns []."""
        events, self._domain_events = self._domain_events, []
        return events

    def clear_domain_events(self) -> None:
        self._domain_events.clear()

    @property
    def domain_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._domain_events)

    @property
    def has_domain_events(self) -> bool:
        return bool(self._domain_events)
