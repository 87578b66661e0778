from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from shared.domain.domain_event import DomainEvent


@dataclass(frozen=True, kw_only=True)
class CgmLinked(DomainEvent):
    user_id: UUID
    link_id: UUID
    token_expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class CgmTokensRefreshed(DomainEvent):
    user_id: UUID
    link_id: UUID
    token_expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class CgmUnlinked(DomainEvent):
    """Raised once per unlink; subscribers purge readings when ``data_purged`` is set."""

    user_id: UUID
    link_id: UUID
    data_purged: bool
