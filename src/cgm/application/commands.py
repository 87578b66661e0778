from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from shared.application.base_command import BaseCommand


@dataclass(frozen=True)
class LinkCgmAccountCommand(BaseCommand):
    user_id: UUID
    authorization_code: str = field(repr=False)


@dataclass(frozen=True)
class UnlinkCgmAccountCommand(BaseCommand):
    user_id: UUID
    link_id: UUID
    purge_data: bool = False


@dataclass(frozen=True)
class RefreshCgmTokensCommand(BaseCommand):
    user_id: UUID
    link_id: UUID


@dataclass(frozen=True)
class RefreshDueLinksCommand(BaseCommand):
    """Background sweep over every link about to expire."""
