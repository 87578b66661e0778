"""
CGM Infrastructure Layer
Persistence, token encryption and the Dexcom OAuth adapter
"""
from cgm.infrastructure.dexcom_client import DexcomOAuthClient
from cgm.infrastructure.mappers import CgmLinkMapper
from cgm.infrastructure.models import CgmLinkModel
from cgm.infrastructure.repositories import InMemoryCgmLinkRepository, SqlAlchemyCgmLinkRepository
from cgm.infrastructure.token_encryption import TOKEN_PURPOSE, TokenEncryptionService
from cgm.infrastructure.unit_of_work import InMemoryCgmUnitOfWork, SqlAlchemyCgmUnitOfWork

__all__ = [
    "DexcomOAuthClient",
    "CgmLinkMapper",
    "CgmLinkModel",
    "InMemoryCgmLinkRepository",
    "SqlAlchemyCgmLinkRepository",
    "TOKEN_PURPOSE",
    "TokenEncryptionService",
    "InMemoryCgmUnitOfWork",
    "SqlAlchemyCgmUnitOfWork",
]
