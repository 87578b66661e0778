"""
Base Command Contract
All commands (write operations) inherit from this
"""
from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4


@dataclass(frozen=True)
class BaseCommand:
    """
    Base class for all commands in the system.

    Commands represent write operations. They are immutable data structures
    that carry all necessary information. ``command_id`` becomes the
    causation id of every domain event the command raises; ``correlation_id``
    ties those events to the wider user interaction.

    Example:
        @dataclass(frozen=True)
        class AddNoteEventCommand(BaseCommand):
            user_id: UUID
            event_time: datetime
            text: str
    """

    command_id: UUID = field(default_factory=uuid4, kw_only=True)
    correlation_id: UUID = field(default_factory=uuid4, kw_only=True)
