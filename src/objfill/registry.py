"""
Setup registry: which setup applies to which type.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .model.setup import FillerSetup


class SetupRegistry:
    """
    Holds the root setup plus optional setups dedicated to specific types.

    When an instance of a type with a dedicated setup is filled, that setup is
    used for it and everything below it; every other type uses the root setup.
    The registry is read-only while a fill is running.
    """

    def __init__(self, root: FillerSetup | None = None, per_type: Mapping[Any, FillerSetup] | None = None):
        self._root = root if root is not None else FillerSetup()
        self._per_type: dict[Any, FillerSetup] = dict(per_type or {})

    @property
    def root(self) -> FillerSetup:
        return self._root

    def get_for(self, target_type: Any) -> FillerSetup:
        """Get the setup used to fill instances of `target_type`."""
        try:
            return self._per_type.get(target_type, self._root)
        except TypeError:
            return self._root

    def has_dedicated(self, target_type: Any) -> bool:
        try:
            return target_type in self._per_type
        except TypeError:
            return False

    def with_setup_for(self, target_type: Any, setup: FillerSetup) -> SetupRegistry:
        """Return a registry that additionally uses `setup` for `target_type`."""
        return SetupRegistry(self._root, {**self._per_type, target_type: setup})

    def __repr__(self) -> str:
        dedicated = ", ".join(getattr(tp, "__name__", str(tp)) for tp in self._per_type)
        return f"SetupRegistry(dedicated=[{dedicated}])"
