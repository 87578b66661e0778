import pytest
from cryptography.fernet import Fernet, MultiFernet

from shared.infrastructure.security.key_provider import DerivedKeyProvider
from cgm.domain.errors import TokenEncryptionErrors
from cgm.infrastructure.token_encryption import TOKEN_PURPOSE, TokenEncryptionService


@pytest.fixture
def service():
    return TokenEncryptionService(DerivedKeyProvider(["test-master-key"]))


def test_round_trip(service):
    sealed = service.encrypt("access-token-value").value

    assert isinstance(sealed, bytes)
    assert b"access-token-value" not in sealed
    assert service.decrypt(sealed).value == "access-token-value"


def test_each_encryption_uses_a_fresh_iv(service):
    assert service.encrypt("same").value != service.encrypt("same").value


def test_empty_input_fails(service):
    assert service.encrypt("").error == TokenEncryptionErrors.EMPTY_INPUT
    assert service.decrypt(b"").error == TokenEncryptionErrors.EMPTY_INPUT


def test_tampered_ciphertext_fails(service):
    sealed = bytearray(service.encrypt("token").value)
    sealed[-5] = ord("A") if sealed[-5] != ord("A") else ord("B")

    assert service.decrypt(bytes(sealed)).error == TokenEncryptionErrors.DECRYPTION_FAILED


def test_foreign_key_fails(service):
    other = TokenEncryptionService(DerivedKeyProvider(["another-master-key"]))
    assert other.decrypt(service.encrypt("token").value).error == TokenEncryptionErrors.DECRYPTION_FAILED


def test_purposes_are_isolated():
    provider = DerivedKeyProvider(["shared-master"])
    tokens = TokenEncryptionService(provider)
    other = TokenEncryptionService(provider, purpose="something-else")

    assert other.decrypt(tokens.encrypt("token").value).error == TokenEncryptionErrors.DECRYPTION_FAILED


def test_rotation_keeps_old_ciphertext_readable():
    old = TokenEncryptionService(DerivedKeyProvider(["old-master"]))
    rotated = TokenEncryptionService(DerivedKeyProvider(["new-master", "old-master"]))
    legacy = old.encrypt("token").value

    assert rotated.decrypt(legacy).value == "token"

    resealed = rotated.rotate(legacy).value
    assert TokenEncryptionService(DerivedKeyProvider(["new-master"])).decrypt(resealed).value == "token"


def test_unencodable_token_text_fails(service):
    assert service.encrypt("tok\ud800").error == TokenEncryptionErrors.MALFORMED_INPUT


def test_authentic_payload_that_is_not_utf8_fails():
    keys = DerivedKeyProvider(["test-master-key"])
    sealed = MultiFernet([Fernet(k) for k in keys.keys_for(TOKEN_PURPOSE)]).encrypt(b"\xff\xfe")

    assert TokenEncryptionService(keys).decrypt(sealed).error == TokenEncryptionErrors.MALFORMED_INPUT
