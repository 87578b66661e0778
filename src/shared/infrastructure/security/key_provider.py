"""
Encryption Key Provider
Purpose-scoped Fernet keys derived from configured master keys
"""
from __future__ import annotations

import base64
from typing import Protocol, Sequence, runtime_checkable

from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from shared.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class KeyProvider(Protocol):
    """Source of Fernet keys for one purpose; the first key is the current one."""

    def keys_for(self, purpose: str) -> Sequence[bytes]: ...


class DerivedKeyProvider:
    """
    Derives one Fernet key per purpose from each master key with HKDF-SHA256.

    The purpose string is the HKDF ``info``, so ciphertext sealed for one
    purpose never opens under another. Listing several master keys enables
    rotation: the first derives the sealing key, all of them derive
    opening keys.

    Attributes:
        master_keys: Raw master secrets, current first
    """

    def __init__(self, master_keys: Sequence[str | bytes]) -> None:
        if not master_keys:
            raise ValueError("At least one master key is required")
        self.master_keys = [k.encode("utf-8") if isinstance(k, str) else k for k in master_keys]
        if any(not k for k in self.master_keys):
            raise ValueError("Master keys must be non-empty")

    def keys_for(self, purpose: str) -> Sequence[bytes]:
        if not purpose:
            raise ValueError("A key purpose is required")
        return [self._derive(master, purpose) for master in self.master_keys]

    @staticmethod
    def _derive(master: bytes, purpose: str) -> bytes:
        hkdf = HKDF(
            algorithm=hashes.SHA256(),
            length=32,
            salt=None,
            info=purpose.encode("utf-8"),
        )
        return base64.urlsafe_b64encode(hkdf.derive(master))

    @staticmethod
    def generate_key() -> str:
        """
        Generate a new random master key.

        Returns:
            URL-safe base64 text, suitable for TOKEN_ENCRYPTION_KEYS
        """
        return Fernet.generate_key().decode("utf-8")


class StaticKeyProvider:
    """Hands out the same ready-made Fernet keys for every purpose."""

    def __init__(self, keys: Sequence[bytes]) -> None:
        if not keys:
            raise ValueError("At least one key is required")
        self._keys = list(keys)

    def keys_for(self, purpose: str) -> Sequence[bytes]:
        return list(self._keys)


def key_provider_from_settings(master_keys: Sequence[str]) -> KeyProvider:
    """
    Build the provider for configured master keys.

    Without configured keys a throwaway key is generated; anything sealed
    with it is unreadable after a restart, so this is for local runs only.
    """
    if master_keys:
        return DerivedKeyProvider(master_keys)
    logger.warning(
        "Using generated master key (NOT SECURE FOR PRODUCTION)",
        extra={"action": "set TOKEN_ENCRYPTION_KEYS"},
    )
    return DerivedKeyProvider([DerivedKeyProvider.generate_key()])
