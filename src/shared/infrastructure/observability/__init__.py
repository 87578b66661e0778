"""
Shared Observability Infrastructure
Structured logging
"""
from shared.infrastructure.observability.logger import (
    SecretRedactionProcessor,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "SecretRedactionProcessor",
]
