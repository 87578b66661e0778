"""
CGM Dependencies
Wires settings-driven adapters into handlers; every handler gets its own unit of work
"""
from __future__ import annotations

import functools

from shared.config import Settings, get_settings
from shared.domain.clock import Clock, SystemClock
from shared.infrastructure.database.session import DatabaseSessionFactory
from shared.infrastructure.messaging.event_bus import EventDispatcher
from shared.infrastructure.security.key_provider import key_provider_from_settings
from cgm.application.handlers import (
    GetCgmLinksHandler,
    GetCgmLinkStatusHandler,
    LinkCgmAccountHandler,
    RefreshCgmTokensHandler,
    RefreshDueLinksHandler,
    UnlinkCgmAccountHandler,
)
from cgm.infrastructure.dexcom_client import DexcomOAuthClient
from cgm.infrastructure.token_encryption import TokenEncryptionService
from cgm.infrastructure.unit_of_work import SqlAlchemyCgmUnitOfWork


class CgmDependencies:
    """
    Long-lived adapters (engine, HTTP client, cipher) are built lazily once.
    Handlers and their units of work are cheap and built per operation,
    so two concurrent requests never share transaction state.
    """

    def __init__(
        self,
        settings: Settings,
        dispatcher: EventDispatcher | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.settings = settings
        self.dispatcher = dispatcher or EventDispatcher()
        self.clock = clock or SystemClock()
        self._sessions: DatabaseSessionFactory | None = None
        self._oauth_client: DexcomOAuthClient | None = None
        self._encryptor: TokenEncryptionService | None = None

    @property
    def sessions(self) -> DatabaseSessionFactory:
        if self._sessions is None:
            self._sessions = DatabaseSessionFactory.from_settings(self.settings)
        return self._sessions

    @property
    def oauth_client(self) -> DexcomOAuthClient:
        if self._oauth_client is None:
            self._oauth_client = DexcomOAuthClient.from_settings(self.settings)
        return self._oauth_client

    @property
    def encryptor(self) -> TokenEncryptionService:
        if self._encryptor is None:
            self._encryptor = TokenEncryptionService(
                key_provider_from_settings(self.settings.token_encryption_keys)
            )
        return self._encryptor

    def uow(self) -> SqlAlchemyCgmUnitOfWork:
        return SqlAlchemyCgmUnitOfWork(self.sessions.session_factory, self.dispatcher, self.clock)

    def link_handler(self) -> LinkCgmAccountHandler:
        return LinkCgmAccountHandler(self.uow(), self.oauth_client, self.encryptor, self.clock)

    def unlink_handler(self) -> UnlinkCgmAccountHandler:
        return UnlinkCgmAccountHandler(self.uow(), self.clock)

    def refresh_handler(self) -> RefreshCgmTokensHandler:
        return RefreshCgmTokensHandler(self.uow(), self.oauth_client, self.encryptor, self.clock)

    def refresh_due_handler(self) -> RefreshDueLinksHandler:
        return RefreshDueLinksHandler(
            self.uow(),
            self.oauth_client,
            self.encryptor,
            self.clock,
            threshold=self.settings.cgm_refresh_threshold,
        )

    def status_handler(self) -> GetCgmLinkStatusHandler:
        return GetCgmLinkStatusHandler(self.uow(), self.clock, threshold=self.settings.cgm_refresh_threshold)

    def links_handler(self) -> GetCgmLinksHandler:
        return GetCgmLinksHandler(self.uow(), self.clock, threshold=self.settings.cgm_refresh_threshold)

    async def aclose(self) -> None:
        if self._oauth_client is not None:
            await self._oauth_client.aclose()
            self._oauth_client = None
        if self._sessions is not None:
            await self._sessions.dispose()
            self._sessions = None


@functools.lru_cache(maxsize=1)
def get_cgm_dependencies() -> CgmDependencies:
    """Process-wide wiring from the cached settings."""
    return CgmDependencies(get_settings())
