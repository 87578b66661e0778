"""
CGM Application Layer
Link lifecycle commands, status and listing queries, handlers and subscribers
"""
from cgm.application.commands import (
    LinkCgmAccountCommand,
    RefreshCgmTokensCommand,
    RefreshDueLinksCommand,
    UnlinkCgmAccountCommand,
)
from cgm.application.handlers import (
    GetCgmLinksHandler,
    GetCgmLinkStatusHandler,
    LinkCgmAccountHandler,
    RefreshCgmTokensHandler,
    RefreshDueLinksHandler,
    UnlinkCgmAccountHandler,
)
from cgm.application.ports import (
    CgmOAuthClient,
    CgmUnitOfWork,
    OAuthTokens,
    ReadingPurger,
    TokenEncryptor,
)
from cgm.application.queries import (
    CgmLinkStatus,
    CgmLinkSummary,
    GetCgmLinksQuery,
    GetCgmLinkStatusQuery,
    RefreshSummary,
)
from cgm.application.subscribers import PurgeReadingsOnUnlink, register_cgm_subscribers

__all__ = [
    "LinkCgmAccountCommand",
    "RefreshCgmTokensCommand",
    "RefreshDueLinksCommand",
    "UnlinkCgmAccountCommand",
    "GetCgmLinksHandler",
    "GetCgmLinkStatusHandler",
    "LinkCgmAccountHandler",
    "RefreshCgmTokensHandler",
    "RefreshDueLinksHandler",
    "UnlinkCgmAccountHandler",
    "CgmOAuthClient",
    "CgmUnitOfWork",
    "OAuthTokens",
    "ReadingPurger",
    "TokenEncryptor",
    "CgmLinkStatus",
    "CgmLinkSummary",
    "GetCgmLinksQuery",
    "GetCgmLinkStatusQuery",
    "RefreshSummary",
    "PurgeReadingsOnUnlink",
    "register_cgm_subscribers",
]
