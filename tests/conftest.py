from datetime import datetime, timezone
from uuid import uuid4

import pytest

from shared.domain.clock import FixedClock
from shared.domain.domain_event import DomainEvent
from shared.domain.identifiers import UserId
from shared.infrastructure.database.in_memory import InMemoryStore
from shared.infrastructure.messaging.event_bus import EventDispatcher

T0 = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FixedClock(T0)


@pytest.fixture
def user_id():
    return UserId(uuid4())


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def dispatcher():
    return EventDispatcher()


class RecordingSubscriber:
    """Collects every event it receives."""

    def __init__(self):
        self.received = []

    def __call__(self, event):
        self.received.append(event)


@pytest.fixture
def recorder(dispatcher):
    subscriber = RecordingSubscriber()
    dispatcher.subscribe(DomainEvent, subscriber)
    return subscriber
