"""
Domain Event Dispatcher
In-process dispatch of committed domain events to subscribers
"""
from __future__ import annotations

import inspect
from collections import defaultdict
from typing import Any, Awaitable, Callable, Union

from shared.domain.domain_event import DomainEvent
from shared.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)

EventHandler = Callable[[Any], Union[Awaitable[None], None]]


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or handler.__class__.__name__


class EventDispatcher:
    """
    In-memory dispatcher for domain events.

    Subscribers register per event class; an event reaches the subscribers of
    its own class and of every base class (so a ``DomainEvent`` subscriber
    sees everything). Events are dispatched one at a time, subscribers in
    registration order. A failing subscriber is logged and skipped; it never
    stops the remaining subscribers or events.

    Attributes:
        _handlers: Dictionary mapping event classes to handler lists
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribe a handler to an event class.

        Args:
            event_type: Domain event class
            handler: Callable (sync or async) that accepts the event

        Example:
            dispatcher.subscribe(CgmUnlinked, PurgeReadingsOnUnlink(purger))
        """
        self._handlers[event_type].append(handler)
        logger.debug(
            f"Handler subscribed to {event_type.__name__}",
            extra={"handler": _handler_name(handler)},
        )

    def unsubscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event: DomainEvent) -> list[EventHandler]:
        handlers: list[EventHandler] = []
        for cls in type(event).__mro__:
            handlers.extend(self._handlers.get(cls, ()))
        return handlers

    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event to all subscribed handlers.

        Args:
            event: Domain event to publish
        """
        event_type = event.event_type
        handlers = self.handlers_for(event)

        if not handlers:
            logger.debug(
                f"No handlers for event: {event_type}",
                extra={"event_id": str(event.event_id)},
            )
            return

        logger.info(
            f"Publishing event: {event_type}",
            extra={
                "event_id": str(event.event_id),
                "correlation_id": str(event.correlation_id),
                "handler_count": len(handlers),
            },
        )

        for handler in handlers:
            try:
                outcome = handler(event)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                logger.error(
                    f"Event handler failed: {_handler_name(handler)}",
                    extra={
                        "event_type": event_type,
                        "event_id": str(event.event_id),
                        "error": str(e),
                    },
                    exc_info=True,
                )

    async def publish_many(self, events: list[DomainEvent]) -> None:
        """
        Publish multiple domain events, strictly in list order.

        Args:
            events: List of domain events to publish
        """
        for event in events:
            await self.publish(event)

    def clear_handlers(self, event_type: type[DomainEvent] | None = None) -> None:
        """
        Clear all handlers for an event class, or all handlers.

        Args:
            event_type: Event class to clear (None for all)
        """
        if event_type:
            self._handlers.pop(event_type, None)
        else:
            self._handlers.clear()
