"""
Base Entity Contract for Domain Layer
Provides typed identity and identity-based equality
"""
from __future__ import annotations

from abc import ABC
from typing import Generic, TypeVar

TId = TypeVar("TId")


class BaseEntity(ABC, Generic[TId]):
    """
    Abstract base class for all domain entities.

    Entities are defined by their identity (id), not their attributes.
    Two entities are equal if they have the same id, regardless of other attributes.

    Attributes:
        id: Typed identifier (e.g. EventId, LinkId)
    """

    def __init__(self, id: TId) -> None:
        self._id = id

    @property
    def id(self) -> TId:
        return self._id

    def __eq__(self, other: object) -> bool:
        """Entities are equal if they have the same id and type."""
        if not isinstance(other, self.__class__):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        """Hash based on id for use in sets/dicts."""
        return hash(self._id)

    def __repr__(self) -> str:
        """String representation showing class name and id."""
        return f"{self.__class__.__name__}(id={self._id})"
