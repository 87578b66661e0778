"""
Base Value Object Contract for Domain Layer
Immutable objects defined by their attributes, not identity
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from shared.domain.error import Error
from shared.domain.exceptions import InvariantViolation
from shared.domain.result import Result


@dataclass(frozen=True)
class BaseValueObject(ABC):
    """
    Abstract base class for all value objects.

    Value objects are frozen dataclasses: equality and hashing are
    structural. The invariant check runs on every construction, so an
    invalid instance can never exist; building one directly raises
    ``InvariantViolation`` (a caller bug). Callers holding unvalidated
    input go through ``create``, which returns a ``Result`` instead.
    """

    def __post_init__(self) -> None:
        error = self._invariant_error()
        if error is not None:
            raise InvariantViolation(error)

    @abstractmethod
    def _invariant_error(self) -> Error | None:
        """Return the violated rule, or None when the instance is valid."""

    @classmethod
    def _try_create(cls, *args: Any, **kwargs: Any) -> Result[Any]:
        try:
            return Result.success(cls(*args, **kwargs))
        except InvariantViolation as exc:
            return Result.failure(exc.error)
