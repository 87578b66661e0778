"""
CGM application ports
Capabilities the link use cases consume; adapters live in cgm.infrastructure
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Protocol
from uuid import UUID

from shared.domain.result import Result
from cgm.domain.repositories import CgmLinkRepository


@dataclass(frozen=True)
class OAuthTokens:
    """Plaintext tokens as returned by the provider; never persisted as-is."""

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    expires_in_seconds: int
    token_type: str = "Bearer"

    def expires_at(self, obtained_at: datetime) -> datetime:
        return obtained_at + timedelta(seconds=self.expires_in_seconds)


class CgmOAuthClient(Protocol):
    async def exchange_code(self, code: str) -> Result[OAuthTokens]: ...

    async def refresh(self, refresh_token: str) -> Result[OAuthTokens]: ...


class TokenEncryptor(Protocol):
    def encrypt(self, plaintext: str) -> Result[bytes]: ...

    def decrypt(self, ciphertext: bytes) -> Result[str]: ...


class ReadingPurger(Protocol):
    """Deletes stored CGM readings for a user."""

    async def purge_readings(self, user_id: UUID) -> None: ...


class CgmUnitOfWork(Protocol):
    cgm_links: CgmLinkRepository

    async def __aenter__(self) -> Any: ...

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...

    async def commit(self) -> Result[None]: ...
