from __future__ import annotations

from shared.domain.identifiers import UserId
from cgm.domain.cgm_link import CgmLink, LinkId
from cgm.infrastructure.models import CgmLinkModel


class CgmLinkMapper:
    """Translates CgmLink aggregates to and from ``cgm_links`` rows."""

    model = CgmLinkModel

    def to_model(self, link: CgmLink) -> CgmLinkModel:
        return CgmLinkModel(
            id=link.id.value,
            user_id=link.user_id.value,
            encrypted_access_token=link.encrypted_access_token,
            encrypted_refresh_token=link.encrypted_refresh_token,
            token_expires_at=link.token_expires_at,
            last_refreshed_at=link.last_refreshed_at,
            is_unlinked=link.is_unlinked,
            created_at=link.created_at,
        )

    def to_domain(self, row: CgmLinkModel) -> CgmLink:
        return CgmLink(
            id=LinkId(row.id),
            user_id=UserId(row.user_id),
            encrypted_access_token=row.encrypted_access_token,
            encrypted_refresh_token=row.encrypted_refresh_token,
            token_expires_at=row.token_expires_at,
            created_at=row.created_at,
            last_refreshed_at=row.last_refreshed_at,
            is_unlinked=bool(row.is_unlinked),
        )
