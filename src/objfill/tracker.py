"""
Construction path tracking for circular reference detection.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from .errors import CircularReference


class ConstructionPathTracker:
    """
    Ordered stack of the composite types currently under construction.

    A type is on the stack at most once; finding it there again while building
    is the signal of a circular reference.
    """

    def __init__(self) -> None:
        self._path: list[Any] = []

    def push(self, target_type: Any) -> None:
        """Mark a type as under construction."""
        if target_type in self._path:
            raise CircularReference(target_type, self._path)
        self._path.append(target_type)

    def pop(self) -> Any:
        """Mark the most recently pushed type as complete."""
        if not self._path:
            raise IndexError("pop from an empty construction path")
        return self._path.pop()

    def contains(self, target_type: Any) -> bool:
        """Check whether a type is under construction on the current path."""
        return target_type in self._path

    @contextmanager
    def building(self, target_type: Any) -> Iterator[None]:
        """Keep a type on the path for the duration of the block."""
        self.push(target_type)
        try:
            yield
        finally:
            self.pop()

    @property
    def path(self) -> tuple[Any, ...]:
        """The construction path, root first."""
        return tuple(self._path)

    def __contains__(self, target_type: Any) -> bool:
        return self.contains(target_type)

    def __len__(self) -> int:
        return len(self._path)

    def __repr__(self) -> str:
        names = ", ".join(getattr(tp, "__name__", str(tp)) for tp in self._path)
        return f"ConstructionPathTracker([{names}])"
