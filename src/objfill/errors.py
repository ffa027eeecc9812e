"""
Error taxonomy for object filling.

Every error aborts the whole create/fill call. None of them are retried.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


def type_name(tp: Any) -> str:
    """Human readable name of a type or generic alias."""
    name = getattr(tp, "__name__", None)
    if name is not None and not getattr(tp, "__args__", None):
        return str(name)
    return str(tp).replace("typing.", "")


class FillerError(Exception):
    """Base class for all filling errors."""


class InvalidSetup(FillerError):
    """Raised when a setup carries inconsistent options."""


class UnregisteredType(FillerError):
    """Raised when a type cannot be classified and unknown types are not ignored."""

    def __init__(self, target_type: Any):
        self.target_type = target_type
        super().__init__(
            f"Type {type_name(target_type)} has no registered generator and cannot be filled"
        )


class CircularReference(FillerError):
    """Raised when a type is already under construction on the current path."""

    def __init__(self, target_type: Any, path: Sequence[Any] = ()):
        self.target_type = target_type
        self.path = tuple(path)
        cycle = " -> ".join(type_name(tp) for tp in (*self.path, target_type))
        super().__init__(
            f"Circular reference detected for {type_name(target_type)}: {cycle}. "
            "Ignore the offending properties or register a generator for them"
        )


class NoUsableConstructor(FillerError):
    """Raised when no constructor of a type can be satisfied with the current setup."""

    def __init__(self, target_type: Any):
        self.target_type = target_type
        super().__init__(
            f"No constructor of {type_name(target_type)} takes parameters "
            "that can be filled with the current setup"
        )


class DuplicateKey(FillerError):
    """Raised when key generation for a map or set repeats a key."""

    def __init__(self, key_type: Any, key: Any):
        self.key_type = key_type
        self.key = key
        super().__init__(
            f"Generated duplicate key {key!r} for {type_name(key_type)}; "
            "the generator keeps producing the same data, check the setup"
        )


class UnresolvedPolymorphicType(FillerError):
    """Raised for an interface or abstract type without generator, implementation or mocker."""

    def __init__(self, target_type: Any):
        self.target_type = target_type
        super().__init__(
            f"Abstract type {type_name(target_type)} has no registered implementation "
            "and no interface mocker is configured"
        )
