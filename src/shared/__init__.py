"""
Shared Kernel - Cross-Cutting Concerns
Domain contracts, application handlers, and infrastructure building blocks
"""

from shared.domain import (
    BaseAggregateRoot,
    BaseEntity,
    BaseValueObject,
    DomainEvent,
    Error,
    Failure,
    Result,
    Success,
)

__all__ = [
    "BaseEntity",
    "BaseValueObject",
    "BaseAggregateRoot",
    "DomainEvent",
    "Error",
    "Result",
    "Success",
    "Failure",
]
