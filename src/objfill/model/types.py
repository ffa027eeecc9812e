"""
Type descriptors: the structural facts about a type needed to classify and fill it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Category(Enum):
    """Classification outcome of a type."""

    GENERATED = "generated"
    MAP = "map"
    SEQUENCE = "sequence"
    POLYMORPHIC = "polymorphic"
    ENUMERATION = "enumeration"
    COMPOSITE = "composite"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class PropertyDescriptor:
    """A settable property of a composite type."""

    name: str
    declared_type: Any
    owner: type
    setter: Callable[[Any, Any], None] | None = field(default=None, compare=False)

    def assign(self, instance: Any, value: Any) -> None:
        """Assign a value to this property on the given instance."""
        if self.setter is not None:
            self.setter(instance, value)
            return
        try:
            setattr(instance, self.name, value)
        except AttributeError:
            # Frozen dataclasses and read-only slots are written through the base object
            object.__setattr__(instance, self.name, value)

    def __str__(self) -> str:
        return f"{self.owner.__name__}.{self.name}"


@dataclass(frozen=True)
class ParameterDescriptor:
    """A required constructor parameter."""

    name: str
    declared_type: Any
    positional_only: bool = False


@dataclass(frozen=True)
class ConstructorDescriptor:
    """A way to create an instance: the class itself or an alternative classmethod constructor."""

    name: str
    factory: Callable[..., Any] = field(compare=False)
    parameters: tuple[ParameterDescriptor, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def invoke(self, arguments: list[Any]) -> Any:
        """Call the constructor with one argument per parameter, in parameter order."""
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for parameter, value in zip(self.parameters, arguments, strict=True):
            if parameter.positional_only:
                args.append(value)
            else:
                kwargs[parameter.name] = value
        return self.factory(*args, **kwargs)


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Read-only structural description of a type.

    Built once per type by `objfill.introspection.describe` and never mutated.
    """

    target_type: Any
    origin: Any = None
    args: tuple[Any, ...] = ()
    is_enum: bool = False
    enum_values: tuple[Any, ...] = ()
    is_mapping: bool = False
    is_sequence: bool = False
    is_unique_collection: bool = False
    is_abstract: bool = False
    is_reserved: bool = False
    properties: tuple[PropertyDescriptor, ...] = ()
    constructors: tuple[ConstructorDescriptor, ...] = ()

    @property
    def key_type(self) -> Any:
        return self.args[0]

    @property
    def value_type(self) -> Any:
        return self.args[1]

    @property
    def element_type(self) -> Any:
        return self.args[0]

    @property
    def is_class(self) -> bool:
        return isinstance(self.target_type, type) and self.origin is None
