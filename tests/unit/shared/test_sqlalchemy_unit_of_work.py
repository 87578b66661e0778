from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import Settings
from shared.domain.error import UnitOfWorkErrors
from shared.infrastructure.database.base_model import Base
from shared.infrastructure.database.session import DatabaseSessionFactory
from shared.infrastructure.database.sqlalchemy_unit_of_work import SQLAlchemyUnitOfWork
from tracking.domain.enums import SourceType
from tracking.domain.event import Event
from tracking.domain.value_objects import NoteText
from tracking.infrastructure.mappers import EventMapper
from tracking.infrastructure.models import EventModel
from tracking.infrastructure.unit_of_work import SqlAlchemyTrackingUnitOfWork


def _session():
    session = MagicMock()
    session.merge = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


def _note(user_id, clock):
    return Event.create_note(
        user_id=user_id,
        event_time=clock.now(),
        text=NoteText("hello"),
        source=SourceType.MANUAL,
        clock=clock,
        correlation_id=None,
        causation_id=None,
    ).value


def test_session_is_only_available_inside_the_block():
    uow = SqlAlchemyTrackingUnitOfWork(MagicMock(return_value=_session()))
    with pytest.raises(RuntimeError):
        uow.session


@pytest.mark.anyio
async def test_commit_merges_rows_then_dispatches(user_id, clock, dispatcher, recorder):
    session = _session()
    uow = SqlAlchemyTrackingUnitOfWork(MagicMock(return_value=session), dispatcher)
    event = _note(user_id, clock)

    async with uow:
        uow.events.add(event)
        result = await uow.commit()

    assert result.is_success()
    merged = session.merge.await_args.args[0]
    assert isinstance(merged, EventModel)
    assert merged.id == event.id.value and merged.text == "hello"
    session.commit.assert_awaited_once()
    session.close.assert_awaited_once()
    assert [e.event_type for e in recorder.received] == ["NoteEventCreated"]


@pytest.mark.anyio
async def test_removals_delete_the_loaded_row(user_id, clock, dispatcher):
    session = _session()
    row = MagicMock()
    session.get.return_value = row
    uow = SqlAlchemyTrackingUnitOfWork(MagicMock(return_value=session), dispatcher)
    event = _note(user_id, clock)

    async with uow:
        uow.events.remove(event)
        await uow.commit()

    session.get.assert_awaited_once_with(EventModel, event.id.value)
    session.delete.assert_awaited_once_with(row)
    session.merge.assert_not_awaited()


@pytest.mark.anyio
async def test_database_error_rolls_back_and_fails(user_id, clock, dispatcher, recorder):
    session = _session()
    session.commit.side_effect = RuntimeError("connection reset")
    uow = SqlAlchemyTrackingUnitOfWork(MagicMock(return_value=session), dispatcher)

    async with uow:
        uow.events.add(_note(user_id, clock))
        result = await uow.commit()

    assert result.error == UnitOfWorkErrors.PERSISTENCE_FAILED
    session.rollback.assert_awaited()
    assert recorder.received == []


@pytest.mark.anyio
async def test_unregistered_aggregate_type_fails_the_commit(dispatcher):
    session = _session()
    uow = SQLAlchemyUnitOfWork(MagicMock(return_value=session), dispatcher)

    class Stranger:
        id = None

        def collect_domain_events(self):
            return []

    async with uow:
        uow.track(Stranger())
        result = await uow.commit()

    assert result.error == UnitOfWorkErrors.PERSISTENCE_FAILED
    session.commit.assert_not_awaited()


@pytest.mark.anyio
async def test_session_factory_builds_asyncpg_sessions_without_connecting():
    factory = DatabaseSessionFactory.from_settings(Settings())

    session = factory.session_factory()
    try:
        assert isinstance(session, AsyncSession)
        assert factory.engine.url.drivername == "postgresql+asyncpg"
    finally:
        await session.close()
        await factory.dispose()


@pytest.mark.anyio
async def test_reloading_a_row_returns_the_instance_already_in_the_unit(user_id, clock, dispatcher):
    session = _session()
    event = _note(user_id, clock)
    session.get.side_effect = lambda model, key: EventMapper().to_model(event)
    uow = SqlAlchemyTrackingUnitOfWork(MagicMock(return_value=session), dispatcher)

    async with uow:
        first = await uow.events.get_by_id(event.id)
        second = await uow.events.get_by_id(event.id)
        await uow.commit()

    assert first is second
    assert session.merge.await_count == 1


@pytest.mark.anyio
async def test_create_schema_runs_create_all_in_a_transaction():
    factory = DatabaseSessionFactory.from_settings(Settings())
    await factory.dispose()
    conn = AsyncMock()
    factory.engine = MagicMock()
    factory.engine.begin.return_value.__aenter__.return_value = conn

    await factory.create_schema()

    conn.run_sync.assert_awaited_once_with(Base.metadata.create_all)
