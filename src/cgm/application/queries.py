from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from shared.application.base_query import BaseQuery
from cgm.domain.cgm_link import LinkStatus


@dataclass(frozen=True)
class GetCgmLinkStatusQuery(BaseQuery):
    user_id: UUID


@dataclass(frozen=True)
class CgmLinkStatus:
    is_linked: bool
    link_id: UUID | None = None
    status: LinkStatus | None = None
    token_expires_at: datetime | None = None
    last_refreshed_at: datetime | None = None
    should_refresh: bool = False


@dataclass(frozen=True)
class RefreshSummary:
    refreshed: list[UUID]
    failed: dict[UUID, str]


@dataclass(frozen=True)
class GetCgmLinksQuery(BaseQuery):
    user_id: UUID


@dataclass(frozen=True)
class CgmLinkSummary:
    link_id: UUID
    user_id: UUID
    status: LinkStatus
    token_expires_at: datetime
    last_refreshed_at: datetime | None
    is_active: bool
    should_refresh: bool
