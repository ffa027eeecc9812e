"""
Interface mockers: fallback producers for abstract types without an implementation.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable
from unittest import mock


@runtime_checkable
class InterfaceMocker(Protocol):
    """Produces an instance of any interface or abstract type."""

    def create(self, target_type: Any) -> Any:
        """Create an object standing in for `target_type`."""
        ...


class AutospecMocker:
    """InterfaceMocker producing `unittest.mock` autospec instances."""

    def __init__(self, instance: bool = True):
        self._instance = instance

    def create(self, target_type: Any) -> Any:
        return mock.create_autospec(target_type, instance=self._instance)
