"""
Domain Error Value
Code/message pair carried by failed Results
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class Error:
    """
    Expected business-rule failure.

    Errors are values, not exceptions. They travel upward inside a
    ``Failure`` until the outer boundary translates them into a response.

    Attributes:
        code: Stable dotted identifier (e.g. ``"Event.EventInFuture"``)
        message: Human-readable description
    """

    code: str
    message: str

    NONE: ClassVar[Error]

    @classmethod
    def create(cls, code: str, message: str) -> Error:
        return cls(code=code, message=message)

    @property
    def is_none(self) -> bool:
        return self.code == "" and self.message == ""

    def __str__(self) -> str:
        return self.code


Error.NONE = Error("", "")


class CommonErrors:
    """Errors shared by every bounded context."""

    EMPTY_IDENTIFIER = Error.create(
        "Identifier.Empty",
        "Identifier cannot be empty.",
    )

    FORBIDDEN = Error.create(
        "Authorization.Forbidden",
        "User does not own this resource.",
    )


class UnitOfWorkErrors:
    PERSISTENCE_FAILED = Error.create(
        "UnitOfWork.PersistenceFailed",
        "Changes could not be persisted.",
    )
