"""
CGM Domain Layer
CgmLink aggregate and its lifecycle events
"""
from cgm.domain.cgm_link import DEFAULT_REFRESH_THRESHOLD, CgmLink, LinkId, LinkStatus
from cgm.domain.errors import CgmLinkErrors, DexcomErrors, TokenEncryptionErrors
from cgm.domain.events import CgmLinked, CgmTokensRefreshed, CgmUnlinked
from cgm.domain.repositories import CgmLinkRepository

__all__ = [
    "DEFAULT_REFRESH_THRESHOLD",
    "CgmLink",
    "LinkId",
    "LinkStatus",
    "CgmLinkErrors",
    "DexcomErrors",
    "TokenEncryptionErrors",
    "CgmLinked",
    "CgmTokensRefreshed",
    "CgmUnlinked",
    "CgmLinkRepository",
]
