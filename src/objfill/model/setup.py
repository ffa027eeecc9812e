"""
Filler setup: the per-type configuration read by the filling engine.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..errors import InvalidSetup
from ..randomizer import RandomSource, StdRandom
from .keys import PropertyKey

if TYPE_CHECKING:
    from ..mocking import InterfaceMocker

Generator = Callable[[], Any]


class PropertyPosition(Enum):
    """Where a property is placed in the fill order."""

    FIRST = "first"
    LAST = "last"


class CircularReferencePolicy(Enum):
    """What to do when a type is met again on its own construction path."""

    FAIL = "fail"
    SUBSTITUTE_DEFAULT = "substitute_default"


def _check_range(name: str, count_range: tuple[int, int]) -> tuple[int, int]:
    try:
        low, high = count_range
    except (TypeError, ValueError):
        raise InvalidSetup(f"{name} must be a (min, max) pair, got {count_range!r}") from None
    if low < 0 or high <= low:
        raise InvalidSetup(f"{name} must satisfy 0 <= min < max, got [{low}, {high})")
    return (low, high)


@dataclass(frozen=True)
class FillerSetup:
    """
    Configuration for one filling target.

    A setup is immutable; use `derive` to obtain a modified copy. Unless
    `use_default_generators` is False, the default primitive generators from
    `objfill.generators` are registered underneath `generators`.
    """

    generators: Mapping[Any, Generator] = field(default_factory=dict)
    property_generators: Mapping[PropertyKey, Generator] = field(default_factory=dict)
    ignored_types: frozenset[Any] = frozenset()
    ignored_properties: frozenset[PropertyKey] = frozenset()
    property_order: Mapping[PropertyKey, PropertyPosition] = field(default_factory=dict)
    sequence_count_range: tuple[int, int] = (1, 25)
    map_key_count_range: tuple[int, int] = (1, 10)
    interface_implementations: Mapping[Any, type] = field(default_factory=dict)
    interface_mocker: InterfaceMocker | None = None
    circular_reference_policy: CircularReferencePolicy = CircularReferencePolicy.FAIL
    ignore_unknown_types: bool = False
    random: RandomSource = field(default_factory=StdRandom)
    use_default_generators: bool = True
    type_generators: Mapping[Any, Generator] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Use object.__setattr__ since we're frozen
        object.__setattr__(self, "generators", dict(self.generators))
        object.__setattr__(self, "property_generators", dict(self.property_generators))
        object.__setattr__(self, "ignored_types", frozenset(self.ignored_types))
        object.__setattr__(self, "ignored_properties", frozenset(self.ignored_properties))
        object.__setattr__(self, "property_order", dict(self.property_order))
        object.__setattr__(self, "interface_implementations", dict(self.interface_implementations))
        object.__setattr__(
            self,
            "sequence_count_range",
            _check_range("sequence_count_range", self.sequence_count_range),
        )
        object.__setattr__(
            self,
            "map_key_count_range",
            _check_range("map_key_count_range", self.map_key_count_range),
        )

        for interface, implementation in self.interface_implementations.items():
            # protocols are structural, a nominal subclass check does not apply
            if getattr(interface, "_is_protocol", False):
                continue
            if isinstance(interface, type) and not issubclass(implementation, interface):
                raise InvalidSetup(
                    f"{implementation.__name__} does not implement {interface.__name__}"
                )

        resolved: dict[Any, Generator] = {}
        if self.use_default_generators:
            from ..generators import default_generators

            resolved.update(default_generators(self.random))
        resolved.update(self.generators)
        object.__setattr__(self, "type_generators", resolved)

    @classmethod
    def seeded(cls, seed: int, **options: Any) -> FillerSetup:
        """Create a setup whose randomness is reproducible from `seed`."""
        return cls(random=StdRandom(seed), **options)

    def derive(self, **changes: Any) -> FillerSetup:
        """Return a copy of this setup with the given options replaced."""
        return dataclasses.replace(self, **changes)

    def with_generators(self, generators: Mapping[Any, Generator]) -> FillerSetup:
        """Return a copy with additional type-level generators."""
        return self.derive(generators={**self.generators, **generators})

    def with_ignored(self, *targets: Any) -> FillerSetup:
        """Return a copy that also ignores the given types and PropertyKeys."""
        keys = [target for target in targets if isinstance(target, PropertyKey)]
        types = [target for target in targets if not isinstance(target, PropertyKey)]
        return self.derive(
            ignored_types=self.ignored_types | set(types),
            ignored_properties=self.ignored_properties | set(keys),
        )

    def ordered(self, position: PropertyPosition, keys: Iterable[PropertyKey]) -> FillerSetup:
        """Return a copy that places the given properties first or last, in the given order."""
        order = dict(self.property_order)
        for key in keys:
            order.pop(key, None)
            order[key] = position
        return self.derive(property_order=order)

    def generator_for(self, target_type: Any) -> Generator | None:
        """Get the type-level generator registered for exactly this type."""
        try:
            return self.type_generators.get(target_type)
        except TypeError:
            # Unhashable type expressions cannot be registered
            return None

    def property_generator_for(self, instance_type: type, name: str) -> Generator | None:
        """Get the generator configured for property `name` of `instance_type`, if any."""
        for key, generator in self.property_generators.items():
            if key.applies_to(instance_type, name):
                return generator
        return None

    def is_property_ignored(self, instance_type: type, name: str) -> bool:
        return any(key.applies_to(instance_type, name) for key in self.ignored_properties)

    def is_type_ignored(self, target_type: Any) -> bool:
        try:
            return target_type in self.ignored_types
        except TypeError:
            return False

    def position_of(self, instance_type: type, name: str) -> tuple[PropertyKey, PropertyPosition] | None:
        for key, position in self.property_order.items():
            if key.applies_to(instance_type, name):
                return key, position
        return None
