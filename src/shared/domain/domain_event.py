"""
Domain Event Base Class
All domain events inherit from this
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _serialize(value: Any) -> Any:
    """JSON-friendly serializer for event payloads."""
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """
    Base class for all domain events.

    Domain events represent something that happened inside an aggregate.
    They are immutable, queued on the aggregate during an operation and
    released by the unit of work after a successful commit.

    Attributes:
        event_id: Unique identifier for this event occurrence
        occurred_at: Timestamp when event occurred (UTC)
        correlation_id: Id shared by every event of one user interaction
        causation_id: Id of the command that caused this event
        aggregate_id: ID of the aggregate that produced this event
        aggregate_type: Type name of the aggregate
        event_version: Schema version of this event type (for evolution)
    """

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)
    correlation_id: UUID | None = None
    causation_id: UUID | None = None
    aggregate_id: UUID | None = None
    aggregate_type: str = ""
    event_version: int = 1

    def __post_init__(self) -> None:
        if self.occurred_at.tzinfo is None:
            raise ValueError("occurred_at must be timezone-aware (use UTC)")

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        """
        Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of event, payload fields included
        """
        data = {f.name: _serialize(getattr(self, f.name)) for f in fields(self)}
        data["event_type"] = self.event_type
        return data
