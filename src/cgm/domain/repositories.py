from __future__ import annotations

from datetime import timedelta
from typing import Protocol, Sequence

from shared.domain.identifiers import UserId
from cgm.domain.cgm_link import DEFAULT_REFRESH_THRESHOLD, CgmLink, LinkId


class CgmLinkRepository(Protocol):
    def add(self, link: CgmLink) -> None: ...

    def remove(self, link: CgmLink) -> None: ...

    async def get_by_id(self, link_id: LinkId) -> CgmLink | None: ...

    async def get_active_by_user(self, user_id: UserId) -> CgmLink | None:
        """Latest-expiring link that is neither expired nor unlinked."""
        ...

    async def get_by_user(self, user_id: UserId) -> Sequence[CgmLink]: ...

    async def get_links_needing_refresh(
        self, threshold: timedelta = DEFAULT_REFRESH_THRESHOLD
    ) -> Sequence[CgmLink]:
        """Non-unlinked links expiring at or before now + threshold, soonest first."""
        ...
