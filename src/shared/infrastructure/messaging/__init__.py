"""
Shared Messaging Infrastructure
Post-commit domain event dispatch
"""
from shared.infrastructure.messaging.event_bus import EventDispatcher, EventHandler

__all__ = [
    "EventDispatcher",
    "EventHandler",
]
