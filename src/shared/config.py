"""
Centralized configuration for the glycotrack core.

- Frozen dataclass loaded from OS env, with a .env file read through python-dotenv.
- Strong typing & validation in __post_init__.
- Immutable singleton via functools.lru_cache.
- Secrets never logged (masked).
"""

from __future__ import annotations

import functools
import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Literal, Optional, cast
from urllib.parse import urlparse

from dotenv import load_dotenv

from shared.infrastructure.observability.logger import get_logger

# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------
def _mask_secret(value: Optional[str]) -> str:
    if not value:
        return "<unset>"
    if len(value) <= 8:
        return "***"
    return value[:2] + "…" + value[-2:]


def _get_env_str(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    v = os.getenv(key, default)
    if required and (v is None or str(v).strip() == ""):
        raise ValueError(f"Missing required env var: {key}")
    return v


def _get_env_bool(key: str, default: bool = False) -> bool:
    v = os.getenv(key)
    if v is None:
        return default
    v = v.strip().lower()
    return v in {"1", "true", "t", "yes", "y", "on"}


def _get_env_int(key: str, default: int) -> int:
    v = os.getenv(key)
    if v is None or v.strip() == "":
        return default
    try:
        return int(v)
    except ValueError:
        raise ValueError(f"Env var {key} must be an integer") from None


def _get_env_float(key: str, default: float) -> float:
    v = os.getenv(key)
    if v is None or v.strip() == "":
        return default
    try:
        return float(v)
    except ValueError:
        raise ValueError(f"Env var {key} must be a number") from None


def _get_env_list(key: str) -> tuple[str, ...]:
    v = os.getenv(key) or ""
    return tuple(item.strip() for item in v.split(",") if item.strip())


def _validate_choice(value: str, *, choices: tuple[str, ...], key: str) -> str:
    if value not in choices:
        raise ValueError(f"{key} must be one of {choices}, got {value!r}")
    return value


def _validate_url(value: Optional[str], *, key: str, allowed_schemes: tuple[str, ...]) -> Optional[str]:
    if value in (None, ""):
        return None
    parsed = urlparse(value)
    if parsed.scheme not in allowed_schemes or not parsed.netloc:
        raise ValueError(f"{key} must be a valid URL with scheme in {allowed_schemes}")
    return value


def _validate_postgres_dsn(value: str, *, key: str) -> str:
    if not value.startswith("postgresql+asyncpg://"):
        raise ValueError(f"{key} must start with postgresql+asyncpg://")
    return value


# ------------------------------------------------------------------------------
# Settings dataclass (immutable)
# ------------------------------------------------------------------------------
EnvName = Literal["local", "dev", "staging", "prod", "test"]


@dataclass(frozen=True)
class Settings:
    # Environment
    environment: EnvName = "local"

    # Observability
    log_level: str = "INFO"
    log_json: bool = True

    # Persistence
    database_url: str = "postgresql+asyncpg://localhost:5432/glycotrack"

    # Token encryption master keys; the first one seals, all of them open
    token_encryption_keys: tuple[str, ...] = field(default=())

    # Dexcom OAuth
    dexcom_base_url: str = "https://sandbox-api.dexcom.com"
    dexcom_client_id: str = ""
    dexcom_client_secret: str = ""
    dexcom_redirect_uri: str = ""
    dexcom_timeout_seconds: float = 30.0

    # CGM link lifecycle
    cgm_refresh_threshold_minutes: int = 60

    # Paths
    base_dir: Path = field(default_factory=lambda: Path(__file__).resolve().parent.parent.parent)

    # Derived/computed flags (filled in __post_init__)
    is_prod: bool = field(init=False)
    is_local: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "environment",
            _validate_choice(self.environment, choices=("local", "dev", "staging", "prod", "test"), key="APP_ENV"),
        )
        _validate_postgres_dsn(self.database_url, key="DATABASE_URL")
        _validate_url(self.dexcom_base_url, key="DEXCOM_BASE_URL", allowed_schemes=("http", "https"))
        _validate_url(self.dexcom_redirect_uri, key="DEXCOM_REDIRECT_URI", allowed_schemes=("http", "https"))

        if not re.fullmatch(r"(?i)DEBUG|INFO|WARNING|ERROR|CRITICAL", self.log_level.strip()):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        if self.dexcom_timeout_seconds <= 0:
            raise ValueError("DEXCOM_TIMEOUT_SECONDS must be > 0")
        if self.cgm_refresh_threshold_minutes <= 0:
            raise ValueError("CGM_REFRESH_THRESHOLD_MINUTES must be > 0")

        # Outside local/test the tokens at rest must be sealed with a real key
        if self.environment not in ("local", "test") and not self.token_encryption_keys:
            raise ValueError("TOKEN_ENCRYPTION_KEYS must be set outside local/test environments")

        object.__setattr__(self, "is_prod", self.environment == "prod")
        object.__setattr__(self, "is_local", self.environment == "local")

    @property
    def cgm_refresh_threshold(self) -> timedelta:
        return timedelta(minutes=self.cgm_refresh_threshold_minutes)

    # Safe dict (for debug prints without secrets)
    def safe_dict(self) -> dict:
        return {
            "environment": self.environment,
            "log_level": self.log_level,
            "log_json": self.log_json,
            "database_url": "<masked>" if self.database_url else "<unset>",
            "token_encryption_keys": [_mask_secret(k) for k in self.token_encryption_keys] or "<unset>",
            "dexcom_base_url": self.dexcom_base_url,
            "dexcom_client_id": self.dexcom_client_id or "<unset>",
            "dexcom_client_secret": _mask_secret(self.dexcom_client_secret),
            "dexcom_redirect_uri": self.dexcom_redirect_uri or "<unset>",
            "dexcom_timeout_seconds": self.dexcom_timeout_seconds,
            "cgm_refresh_threshold_minutes": self.cgm_refresh_threshold_minutes,
            "base_dir": str(self.base_dir),
        }


# ------------------------------------------------------------------------------
# Loader (singleton)
# ------------------------------------------------------------------------------
_logger = get_logger(__name__)


def load_settings(env_file: Path | None = None) -> Settings:
    """Build Settings from the environment, reading ``env_file`` first when it exists."""
    if env_file is not None and env_file.exists():
        load_dotenv(dotenv_path=str(env_file), override=False)

    return Settings(
        environment=cast(EnvName, _get_env_str("APP_ENV", "local") or "local"),
        log_level=_get_env_str("LOG_LEVEL", "INFO") or "INFO",
        log_json=_get_env_bool("LOG_JSON", True),
        database_url=_get_env_str("DATABASE_URL", "postgresql+asyncpg://localhost:5432/glycotrack") or "",
        token_encryption_keys=_get_env_list("TOKEN_ENCRYPTION_KEYS"),
        dexcom_base_url=_get_env_str("DEXCOM_BASE_URL", "https://sandbox-api.dexcom.com") or "",
        dexcom_client_id=_get_env_str("DEXCOM_CLIENT_ID", "") or "",
        dexcom_client_secret=_get_env_str("DEXCOM_CLIENT_SECRET", "") or "",
        dexcom_redirect_uri=_get_env_str("DEXCOM_REDIRECT_URI", "") or "",
        dexcom_timeout_seconds=_get_env_float("DEXCOM_TIMEOUT_SECONDS", 30.0),
        cgm_refresh_threshold_minutes=_get_env_int("CGM_REFRESH_THRESHOLD_MINUTES", 60),
    )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Attempt to load .env from repo root (../../.env relative to src/shared/)
    settings = load_settings(Path(__file__).resolve().parent.parent.parent / ".env")

    _logger.info(
        "Settings loaded",
        extra={"settings": settings.safe_dict()},
    )
    return settings
