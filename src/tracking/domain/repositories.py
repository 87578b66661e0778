"""
Event Repository Interface
Events are immutable, so only add/remove are offered (no update)
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, Sequence

from shared.domain.identifiers import UserId
from tracking.domain.enums import EventType
from tracking.domain.event import Event
from tracking.domain.value_objects import EventId


@dataclass(frozen=True)
class EventFilter:
    """
    Optional criteria for listing a user's events.

    ``start``/``end`` are inclusive bounds on event time. ``offset``/``limit``
    page through the result, which is always ordered newest first.
    """

    event_type: EventType | None = None
    start: datetime | None = None
    end: datetime | None = None
    offset: int = 0
    limit: int | None = None

    def matches(self, event: Event) -> bool:
        if self.event_type is not None and event.event_type != self.event_type:
            return False
        if self.start is not None and event.event_time < self.start:
            return False
        if self.end is not None and event.event_time > self.end:
            return False
        return True


class EventRepository(Protocol):
    def add(self, event: Event) -> None: ...

    def remove(self, event: Event) -> None: ...

    async def get_by_id(self, event_id: EventId) -> Event | None: ...

    async def get_by_user(self, user_id: UserId, filters: EventFilter | None = None) -> Sequence[Event]: ...

    async def count_by_user(self, user_id: UserId, filters: EventFilter | None = None) -> int: ...
