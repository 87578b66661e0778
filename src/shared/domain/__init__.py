"""
Shared Domain Layer
Pure domain contracts with no framework dependencies
"""
from shared.domain.base_aggregate_root import BaseAggregateRoot
from shared.domain.base_entity import BaseEntity
from shared.domain.base_value_object import BaseValueObject
from shared.domain.clock import Clock, FixedClock, SystemClock, ensure_aware
from shared.domain.domain_event import DomainEvent
from shared.domain.error import CommonErrors, Error, UnitOfWorkErrors
from shared.domain.exceptions import InvalidResultAccess, InvariantViolation
from shared.domain.identifiers import UserId, UuidIdentifier
from shared.domain.result import Failure, Result, Success, first_failure

__all__ = [
    "BaseEntity",
    "BaseValueObject",
    "BaseAggregateRoot",
    "DomainEvent",
    "Result",
    "Success",
    "Failure",
    "first_failure",
    "Error",
    "CommonErrors",
    "UnitOfWorkErrors",
    "InvalidResultAccess",
    "InvariantViolation",
    "Clock",
    "SystemClock",
    "FixedClock",
    "ensure_aware",
    "UserId",
    "UuidIdentifier",
]
