"""
Token Encryption Service
Seals CGM OAuth tokens at rest with Fernet (AES-128-CBC + HMAC-SHA256)
"""
from __future__ import annotations

from cryptography.fernet import Fernet, InvalidToken, MultiFernet

from shared.domain.result import Result
from shared.infrastructure.observability.logger import get_logger
from shared.infrastructure.security.key_provider import KeyProvider
from cgm.domain.errors import TokenEncryptionErrors

logger = get_logger(__name__)

TOKEN_PURPOSE = "glycotrack.cgm-oauth-tokens"


class TokenEncryptionService:
    """
    Authenticated encryption for OAuth tokens.

    Keys come from the key provider under a fixed purpose. The first key
    seals; every key is tried when opening, so old ciphertext stays
    readable across a key rotation. Each call uses a fresh IV, so sealing
    the same token twice gives different payloads.

    Neither plaintext nor ciphertext is ever logged.
    """

    def __init__(self, key_provider: KeyProvider, purpose: str = TOKEN_PURPOSE) -> None:
        keys = list(key_provider.keys_for(purpose))
        if not keys:
            raise ValueError(f"No encryption keys available for purpose {purpose!r}")
        self._cipher = MultiFernet([Fernet(key) for key in keys])
        self.purpose = purpose

    def encrypt(self, plaintext: str) -> Result[bytes]:
        if not plaintext:
            return Result.failure(TokenEncryptionErrors.EMPTY_INPUT)
        try:
            raw = plaintext.encode("utf-8")
        except UnicodeEncodeError:
            return Result.failure(TokenEncryptionErrors.MALFORMED_INPUT)
        return Result.success(self._cipher.encrypt(raw))

    def decrypt(self, ciphertext: bytes) -> Result[str]:
        if not ciphertext:
            return Result.failure(TokenEncryptionErrors.EMPTY_INPUT)
        try:
            plaintext = self._cipher.decrypt(bytes(ciphertext))
        except InvalidToken:
            logger.warning("Token decryption failed", extra={"purpose": self.purpose})
            return Result.failure(TokenEncryptionErrors.DECRYPTION_FAILED)
        try:
            return Result.success(plaintext.decode("utf-8"))
        except UnicodeDecodeError:
            logger.warning("Decrypted token is not UTF-8", extra={"purpose": self.purpose})
            return Result.failure(TokenEncryptionErrors.MALFORMED_INPUT)

    def rotate(self, ciphertext: bytes) -> Result[bytes]:
        """Re-seal a payload under the current key."""
        if not ciphertext:
            return Result.failure(TokenEncryptionErrors.EMPTY_INPUT)
        try:
            return Result.success(self._cipher.rotate(bytes(ciphertext)))
        except InvalidToken:
            return Result.failure(TokenEncryptionErrors.DECRYPTION_FAILED)
