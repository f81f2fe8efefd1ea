"""Ordered, bounded, duplicate-free set of players picked for comparison.

The set stores names only and never looks at the dataset; callers are
responsible for passing names that exist.
"""

from __future__ import annotations

from typing import Iterator

MAX_COMPARISON = 3


class ComparisonError(ValueError):
    """Base class for rejected comparison-set changes."""


class DuplicateError(ComparisonError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} is already in the comparison")


class CapacityError(ComparisonError):
    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        super().__init__(f"Maximum {capacity} players can be compared at once")


class ComparisonSet:
    def __init__(self, capacity: int = MAX_COMPARISON) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._names: list[str] = []

    def add(self, name: str) -> None:
        """Append *name*.  Raises DuplicateError or CapacityError, leaving the set unchanged."""
        if name in self._names:
            raise DuplicateError(name)
        if len(self._names) >= self.capacity:
            raise CapacityError(self.capacity)
        self._names.append(name)

    def remove(self, name: str) -> None:
        if name in self._names:
            self._names.remove(name)

    def clear(self) -> None:
        self._names.clear()

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._names)

    @property
    def is_full(self) -> bool:
        return len(self._names) >= self.capacity

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._names))

    def __repr__(self) -> str:
        return f"ComparisonSet({list(self._names)!r}, capacity={self.capacity})"
