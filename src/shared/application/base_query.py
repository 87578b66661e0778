"""
Base Query Contract
All queries (read operations) inherit from this
"""
from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4


@dataclass(frozen=True)
class BaseQuery:
    """
    Base class for all queries in the system.

    Queries represent read operations and never modify state.

    Example:
        @dataclass(frozen=True)
        class GetEventByIdQuery(BaseQuery):
            user_id: UUID
            event_id: UUID
    """

    query_id: UUID = field(default_factory=uuid4, kw_only=True)
