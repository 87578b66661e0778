import pytest
from cryptography.fernet import Fernet

from shared.infrastructure.security.key_provider import (
    DerivedKeyProvider,
    StaticKeyProvider,
    key_provider_from_settings,
)


def test_derived_keys_are_valid_fernet_keys():
    provider = DerivedKeyProvider(["master"])
    (key,) = provider.keys_for("purpose-a")
    Fernet(key)


def test_derivation_is_deterministic_and_purpose_scoped():
    provider = DerivedKeyProvider(["master"])
    assert provider.keys_for("a") == DerivedKeyProvider(["master"]).keys_for("a")
    assert provider.keys_for("a") != provider.keys_for("b")


def test_every_master_key_yields_one_key_in_order():
    provider = DerivedKeyProvider(["current", "previous"])
    keys = provider.keys_for("p")
    assert len(keys) == 2
    assert keys[0] == DerivedKeyProvider(["current"]).keys_for("p")[0]


def test_misconfiguration_is_rejected():
    with pytest.raises(ValueError):
        DerivedKeyProvider([])
    with pytest.raises(ValueError):
        DerivedKeyProvider([""])
    with pytest.raises(ValueError):
        DerivedKeyProvider(["k"]).keys_for("")
    with pytest.raises(ValueError):
        StaticKeyProvider([])


def test_provider_from_settings_generates_a_key_when_none_configured():
    provider = key_provider_from_settings(())
    assert len(provider.keys_for("p")) == 1
