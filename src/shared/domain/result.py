"""
Result Monad for Domain Operations
Represents success or failure without exceptions
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from shared.domain.error import Error
from shared.domain.exceptions import InvalidResultAccess

T = TypeVar("T")
U = TypeVar("U")


class Result(ABC, Generic[T]):
    """
    Outcome of a fallible operation.

    Every expected business-rule failure in the core is returned as a
    ``Failure`` carrying an ``Error``; exceptions are reserved for faults.
    ``Success`` and ``Failure`` are the only two shapes.

    Usage:
        result = Carbohydrate.create(45)
        if result.is_failure():
            return Result.failure(result.error)
        carbs = result.value
    """

    @staticmethod
    def success(value: U = None) -> Success[U]:  # type: ignore[assignment]
        """Build a successful result (``None`` payload for void operations)."""
        return Success(value)

    @staticmethod
    def failure(error: Error) -> Failure[Any]:
        """Build a failed result. The error must not be ``Error.NONE``."""
        return Failure(error)

    @abstractmethod
    def is_success(self) -> bool: ...

    def is_failure(self) -> bool:
        return not self.is_success()

    @property
    @abstractmethod
    def value(self) -> T: ...

    @property
    @abstractmethod
    def error(self) -> Error: ...


@dataclass(frozen=True, slots=True)
class Success(Result[T]):
    """
    Represents a successful operation result.

    Attributes:
        payload: The successful result value
    """

    payload: T

    def is_success(self) -> bool:
        """Always returns True for Success."""
        return True

    @property
    def value(self) -> T:
        return self.payload

    @property
    def error(self) -> Error:
        raise InvalidResultAccess("Cannot access the error of a successful result.")

    def map(self, func: Callable[[T], U]) -> Result[U]:
        """
        Transform the success value using the provided function.

        Args:
            func: Function to transform the value

        Returns:
            New Success with transformed value
        """
        return Success(func(self.payload))

    def flat_map(self, func: Callable[[T], Result[U]]) -> Result[U]:
        """
        Chain operations that return Results.

        Args:
            func: Function that returns a Result

        Returns:
            Result from applying func to the value
        """
        return func(self.payload)

    def or_else(self, default: T) -> T:
        """Return the value (ignores default)."""
        return self.payload

    def unwrap(self) -> T:
        """Return the value."""
        return self.payload


@dataclass(frozen=True, slots=True)
class Failure(Result[T]):
    """
    Represents a failed operation result.

    Attributes:
        reason: The error describing the failure
    """

    reason: Error

    def __post_init__(self) -> None:
        if not isinstance(self.reason, Error) or self.reason.is_none:
            raise ValueError("A failed result must carry a non-empty Error.")

    def is_success(self) -> bool:
        """Always returns False for Failure."""
        return False

    @property
    def value(self) -> T:
        raise InvalidResultAccess(
            f"Cannot access the value of a failed result ({self.reason.code})."
        )

    @property
    def error(self) -> Error:
        return self.reason

    def map(self, func: Callable[[Any], Any]) -> Failure[T]:
        """Does nothing for Failure (error propagates)."""
        return self

    def flat_map(self, func: Callable[[Any], Any]) -> Failure[T]:
        """Does nothing for Failure (error propagates)."""
        return self

    def or_else(self, default: T) -> T:
        """Return the default value instead of error."""
        return default

    def unwrap(self) -> T:
        """
        Raise an exception with the error.

        Raises:
            InvalidResultAccess: Always
        """
        raise InvalidResultAccess(f"Attempted to unwrap a Failure: {self.reason.code}")


def first_failure(*results: Result[Any]) -> Failure[Any] | None:
    """Return the first failed result, or None when every result succeeded."""
    for result in results:
        if result.is_failure():
            return result  # type: ignore[return-value]
    return None
