from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from shared.application.base_query import BaseQuery
from tracking.domain.event import Event

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class GetEventByIdQuery(BaseQuery):
    user_id: UUID
    event_id: UUID


@dataclass(frozen=True)
class ListEventsQuery(BaseQuery):
    user_id: UUID
    event_type: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    page: int = 1
    page_size: int = 20


@dataclass(frozen=True)
class EventPage:
    items: list[Event]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size
