"""
Shared Security Infrastructure
Purpose-scoped encryption keys
"""
from shared.infrastructure.security.key_provider import (
    DerivedKeyProvider,
    KeyProvider,
    StaticKeyProvider,
    key_provider_from_settings,
)

__all__ = [
    "KeyProvider",
    "DerivedKeyProvider",
    "StaticKeyProvider",
    "key_provider_from_settings",
]
