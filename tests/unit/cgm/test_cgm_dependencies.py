from datetime import timedelta

import pytest

from shared.config import Settings, get_settings
from cgm.dependencies import CgmDependencies, get_cgm_dependencies
from cgm.infrastructure.unit_of_work import SqlAlchemyCgmUnitOfWork


@pytest.mark.anyio
async def test_every_handler_gets_its_own_unit_of_work(clock):
    deps = CgmDependencies(Settings(), clock=clock)
    try:
        first, second = deps.link_handler(), deps.link_handler()

        assert isinstance(first.uow, SqlAlchemyCgmUnitOfWork)
        assert first.uow is not second.uow
        assert first.oauth_client is second.oauth_client
        assert first.encryptor is second.encryptor
        assert deps.unlink_handler().clock is clock
        assert deps.refresh_handler().uow.dispatcher is deps.dispatcher
    finally:
        await deps.aclose()


@pytest.mark.anyio
async def test_refresh_threshold_comes_from_settings(clock):
    deps = CgmDependencies(Settings(cgm_refresh_threshold_minutes=30), clock=clock)
    try:
        assert deps.refresh_due_handler().threshold == timedelta(minutes=30)
        assert deps.status_handler().threshold == timedelta(minutes=30)
        assert deps.links_handler().threshold == timedelta(minutes=30)
    finally:
        await deps.aclose()


@pytest.mark.anyio
async def test_process_wiring_is_cached_over_settings(monkeypatch):
    monkeypatch.setenv("CGM_REFRESH_THRESHOLD_MINUTES", "45")
    monkeypatch.setenv("APP_ENV", "test")
    get_settings.cache_clear()
    get_cgm_dependencies.cache_clear()
    try:
        deps = get_cgm_dependencies()

        assert get_cgm_dependencies() is deps
        assert deps.settings is get_settings()
        assert deps.refresh_due_handler().threshold == timedelta(minutes=45)
        await deps.aclose()
    finally:
        get_settings.cache_clear()
        get_cgm_dependencies.cache_clear()
