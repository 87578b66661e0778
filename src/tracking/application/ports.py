from __future__ import annotations

from typing import Any, Protocol

from shared.domain.result import Result
from tracking.domain.repositories import EventRepository


class TrackingUnitOfWork(Protocol):
    """What tracking handlers need from a unit of work."""

    events: EventRepository

    async def __aenter__(self) -> Any: ...

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...

    async def commit(self) -> Result[None]: ...
