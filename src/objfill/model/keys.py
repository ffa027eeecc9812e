"""
PropertyKey implementation for per-property configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PropertyKey:
    """A key that identifies a property by its declaring type and name."""

    owner: type
    name: str

    @classmethod
    def of(cls, owner: type, name: str) -> PropertyKey:
        """Create a PropertyKey, checking that the owner actually declares the name."""
        from ..introspection import describe

        if not any(prop.name == name for prop in describe(owner).properties):
            raise ValueError(f"{owner.__name__} has no settable property {name!r}")
        return cls(owner, name)

    def applies_to(self, instance_type: Any, name: str) -> bool:
        """Check whether this key configures property `name` of `instance_type`."""
        if name != self.name or not isinstance(instance_type, type):
            return False
        if instance_type is self.owner:
            return True
        try:
            return issubclass(instance_type, self.owner)
        except TypeError:
            # protocols without @runtime_checkable only match nominal subclasses
            return self.owner in instance_type.__mro__

    def __str__(self) -> str:
        owner_name = getattr(self.owner, "__name__", str(self.owner))
        return f"{owner_name}.{self.name}"

    def __hash__(self) -> int:
        return hash((self.owner, self.name))
