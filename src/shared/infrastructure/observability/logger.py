"""
Structured Logging Configuration
Centralized structlog setup with correlation context and secret redaction
"""
from __future__ import annotations

import logging
import sys
from typing import Any, Iterable

import structlog

REDACTED = "***REDACTED***"

DEFAULT_SECRET_KEYS: frozenset[str] = frozenset(
    {
        "access_token",
        "refresh_token",
        "code",
        "authorization_code",
        "client_secret",
        "authorization",
        "password",
        "token",
        "plaintext",
    }
)


class SecretRedactionProcessor:
    """
    Structlog processor that masks secret values inside event_dict (recursively).

    Matching is by key name, case-insensitive; any value stored under one
    of ``secret_keys`` is replaced wholesale, so OAuth tokens and client
    secrets never reach a renderer.
    """

    def __init__(self, secret_keys: Iterable[str] = DEFAULT_SECRET_KEYS) -> None:
        self.secret_keys = frozenset(k.lower() for k in secret_keys)

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        return {k: self._redact(k, v) for k, v in event_dict.items()}

    def _redact(self, key: Any, value: Any) -> Any:
        if isinstance(key, str) and key.lower() in self.secret_keys and value is not None:
            return REDACTED
        if isinstance(value, dict):
            return {k: self._redact(k, v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._redact(None, v) for v in value]
        return value


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structured logging for the application.

    Sets up structlog with processors for:
    - Adding timestamps
    - Adding log levels
    - Adding context (correlation_id, user_id)
    - Masking secrets
    - JSON formatting (production) or console (development)

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Whether to output JSON format (True for prod, False for dev)
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        SecretRedactionProcessor(),
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the module)

    Usage:
        logger = get_logger(__name__)
        logger.info("CGM link created", extra={"link_id": str(link.id)})
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """
    Bind context variables to all subsequent log entries.

    Usage:
        bind_context(correlation_id=str(command.correlation_id), user_id=str(user_id))
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
