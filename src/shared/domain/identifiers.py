"""
Identifier Value Objects
Typed UUID wrappers shared across bounded contexts
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar
from uuid import UUID, uuid4

from shared.domain.base_value_object import BaseValueObject
from shared.domain.error import CommonErrors, Error
from shared.domain.result import Result

TIdentifier = TypeVar("TIdentifier", bound="UuidIdentifier")

_NIL = UUID(int=0)


@dataclass(frozen=True)
class UuidIdentifier(BaseValueObject):
    """
    Base for identifiers backed by a non-nil UUID.

    Subclasses only add a name; equality is per type, so a ``UserId`` and an
    ``EventId`` holding the same UUID are never equal.
    """

    value: UUID

    def _invariant_error(self) -> Error | None:
        if not isinstance(self.value, UUID) or self.value == _NIL:
            return CommonErrors.EMPTY_IDENTIFIER
        return None

    @classmethod
    def create(cls: type[TIdentifier], value: UUID) -> Result[TIdentifier]:
        return cls._try_create(value)

    @classmethod
    def new(cls: type[TIdentifier]) -> TIdentifier:
        return cls(uuid4())

    @classmethod
    def from_string(cls: type[TIdentifier], raw: Any) -> Result[TIdentifier]:
        """Parse a textual UUID; malformed input fails like an empty id."""
        try:
            parsed = UUID(str(raw))
        except ValueError:
            return Result.failure(CommonErrors.EMPTY_IDENTIFIER)
        return cls.create(parsed)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId(UuidIdentifier):
    """Identity of the user owning events and CGM links."""
