"""
Programming-error exceptions for the domain kernel.

Expected failures are returned as ``Result``; these are raised only when a
caller misuses the API (reading the value of a failure, building a value
object with invalid data, passing a naive datetime).
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.domain.error import Error


class InvalidResultAccess(RuntimeError):
    """Raised when the value of a Failure or the error of a Success is read."""


class InvariantViolation(ValueError):
    """Raised when an object is constructed in a state its invariants forbid."""

    def __init__(self, error: Error) -> None:
        super().__init__(f"{error.code}: {error.message}")
        self.error = error
