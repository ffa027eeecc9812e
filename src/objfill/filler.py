"""
Graph filler - creates instances of arbitrary types and fills their properties recursively.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from .builders import MapBuilder, SequenceBuilder
from .classifier import classify, is_composite
from .constructor import InstanceConstructor
from .errors import CircularReference, UnregisteredType, UnresolvedPolymorphicType
from .introspection import describe, normalize
from .model.setup import CircularReferencePolicy, FillerSetup, PropertyPosition
from .model.types import Category, PropertyDescriptor, TypeDescriptor
from .registry import SetupRegistry
from .tracker import ConstructionPathTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ZERO_VALUE_TYPES = (int, float, complex, bool, str, bytes)

_MISSING = object()


def default_value(target_type: Any) -> Any:
    """The zero value of a type: `tp()` for scalar builtins, None for everything else."""
    target_type = normalize(target_type)
    if target_type in _ZERO_VALUE_TYPES:
        return target_type()
    return None


class GraphFiller:
    """
    Orchestrates classification, construction and recursive filling.

    The filler holds no state between calls: everything specific to one
    construction path lives in the ConstructionPathTracker passed down the calls.
    """

    def __init__(self, registry: SetupRegistry | None = None):
        self._registry = registry if registry is not None else SetupRegistry()
        self._constructor = InstanceConstructor(self.create_and_fill)
        self._sequences = SequenceBuilder(self.create_and_fill)
        self._maps = MapBuilder(self.create_and_fill)
        self._polymorphic_resolvers: tuple[
            Callable[[Any, FillerSetup, ConstructionPathTracker], Any], ...
        ] = (
            self._from_generator,
            self._from_implementation,
            self._from_mocker,
        )

    @property
    def registry(self) -> SetupRegistry:
        return self._registry

    def create_and_fill(self, target_type: Any, setup: FillerSetup, tracker: ConstructionPathTracker) -> Any:
        """Produce a fully filled value of `target_type`."""
        target_type = normalize(target_type)
        category = classify(target_type, setup)

        if category is Category.GENERATED:
            generator = setup.generator_for(target_type)
            assert generator is not None
            return generator()
        if category is Category.MAP:
            return self._maps.build(describe(target_type), setup, tracker)
        if category is Category.SEQUENCE:
            return self._sequences.build(describe(target_type), setup, tracker)
        if category is Category.POLYMORPHIC:
            return self._create_polymorphic(target_type, setup, tracker)
        if category is Category.ENUMERATION:
            return self._random_enum_value(describe(target_type), setup)
        if category is Category.COMPOSITE:
            return self._create_composite(describe(target_type), setup, tracker)
        return self._unknown_value(target_type, setup)

    def fill(self, instance: T, setup: FillerSetup, tracker: ConstructionPathTracker) -> T:
        """Fill the properties of an existing instance in place."""
        runtime_type = type(instance)
        if tracker.contains(runtime_type):
            raise CircularReference(runtime_type, tracker.path)
        with tracker.building(runtime_type):
            return self._fill_instance(instance, setup, tracker)

    def _create_composite(
        self, descriptor: TypeDescriptor, setup: FillerSetup, tracker: ConstructionPathTracker
    ) -> Any:
        target_type = descriptor.target_type
        if tracker.contains(target_type):
            if setup.circular_reference_policy is CircularReferencePolicy.FAIL:
                raise CircularReference(target_type, tracker.path)
            logger.debug("%s is already being built, substituting its default value", target_type)
            return default_value(target_type)

        with tracker.building(target_type):
            instance = self._constructor.construct(descriptor, setup, tracker)
            return self._fill_instance(instance, setup, tracker, descriptor)

    def _fill_instance(
        self,
        instance: Any,
        setup: FillerSetup,
        tracker: ConstructionPathTracker,
        descriptor: TypeDescriptor | None = None,
    ) -> Any:
        runtime_type = type(instance)
        if self._registry.has_dedicated(runtime_type):
            setup = self._registry.get_for(runtime_type)

        generator = setup.generator_for(runtime_type)
        if generator is not None:
            logger.debug("Generator registered for %s replaces the instance", runtime_type)
            return generator()

        if descriptor is None or runtime_type not in (descriptor.target_type, descriptor.origin):
            descriptor = describe(runtime_type)

        self._fill_properties(instance, descriptor, runtime_type, setup, tracker)
        return instance

    def _fill_properties(
        self,
        instance: Any,
        descriptor: TypeDescriptor,
        instance_type: type,
        setup: FillerSetup,
        tracker: ConstructionPathTracker,
    ) -> None:
        """Assign every settable property of `descriptor`, with keys matched against `instance_type`."""
        for prop in self.ordered_properties(descriptor, instance_type, setup):
            if setup.is_type_ignored(prop.declared_type):
                continue
            if setup.is_property_ignored(instance_type, prop.name):
                continue

            property_generator = setup.property_generator_for(instance_type, prop.name)
            if property_generator is not None:
                value = property_generator()
            else:
                value = self.create_and_fill(prop.declared_type, setup, tracker)
            prop.assign(instance, value)

    @staticmethod
    def ordered_properties(
        descriptor: TypeDescriptor, runtime_type: type, setup: FillerSetup
    ) -> list[PropertyDescriptor]:
        """
        Order properties for filling: those marked FIRST in the listed order, then the
        unmarked ones in declaration order, then those marked LAST in the listed order.
        """
        rank = {key: index for index, key in enumerate(setup.property_order)}
        first: list[tuple[int, PropertyDescriptor]] = []
        last: list[tuple[int, PropertyDescriptor]] = []
        unmarked: list[PropertyDescriptor] = []

        for prop in descriptor.properties:
            placement = setup.position_of(runtime_type, prop.name)
            if placement is None:
                unmarked.append(prop)
                continue
            key, position = placement
            bucket = first if position is PropertyPosition.FIRST else last
            bucket.append((rank[key], prop))

        first.sort(key=lambda entry: entry[0])
        last.sort(key=lambda entry: entry[0])
        return [prop for _, prop in first] + unmarked + [prop for _, prop in last]

    def _create_polymorphic(self, target_type: Any, setup: FillerSetup, tracker: ConstructionPathTracker) -> Any:
        for resolve in self._polymorphic_resolvers:
            value = resolve(target_type, setup, tracker)
            if value is not _MISSING:
                return value
        raise UnresolvedPolymorphicType(target_type)

    def _from_generator(self, target_type: Any, setup: FillerSetup, tracker: ConstructionPathTracker) -> Any:  # noqa: ARG002
        generator = setup.generator_for(target_type)
        return generator() if generator is not None else _MISSING

    def _from_implementation(self, target_type: Any, setup: FillerSetup, tracker: ConstructionPathTracker) -> Any:
        implementation = setup.interface_implementations.get(target_type)
        if implementation is None:
            return _MISSING
        logger.debug("Resolving %s with implementation %s", target_type, implementation)
        return self._create_composite(describe(implementation), setup, tracker)

    def _from_mocker(self, target_type: Any, setup: FillerSetup, tracker: ConstructionPathTracker) -> Any:
        if setup.interface_mocker is None:
            return _MISSING
        logger.debug("Mocking %s", target_type)
        mocked = setup.interface_mocker.create(target_type)
        if is_composite(describe(type(mocked))):
            return self.fill(mocked, setup, tracker)

        # a stand-in object: fill the data members the interface declares
        interface = describe(target_type)
        if not interface.properties:
            return mocked
        if tracker.contains(target_type):
            if setup.circular_reference_policy is CircularReferencePolicy.FAIL:
                raise CircularReference(target_type, tracker.path)
            return mocked
        with tracker.building(target_type):
            self._fill_properties(mocked, interface, interface.origin or target_type, setup, tracker)
        return mocked

    @staticmethod
    def _random_enum_value(descriptor: TypeDescriptor, setup: FillerSetup) -> Any:
        if not descriptor.enum_values:
            return 0
        return setup.random.choose(descriptor.enum_values)

    @staticmethod
    def _unknown_value(target_type: Any, setup: FillerSetup) -> Any:
        if setup.ignore_unknown_types:
            logger.debug("Ignoring unknown type %s", target_type)
            return default_value(target_type)
        raise UnregisteredType(target_type)


class Filler[T]:
    """
    Creates and fills instances of one root type.

    Example:
        ```python
        filler = Filler(Person, FillerSetup.seeded(42))
        person = filler.create()
        people = filler.create_many(10)
        ```
    """

    def __init__(
        self,
        target_type: type[T] | Any,
        setup: FillerSetup | None = None,
        registry: SetupRegistry | None = None,
    ):
        """
        Create a new Filler.

        Args:
            target_type: The root type to produce
            setup: Setup used for the whole graph; a default one when omitted
            registry: Registry with dedicated setups per type, instead of `setup`
        """
        if setup is not None and registry is not None:
            raise ValueError("Pass either a setup or a registry, not both")
        self._target_type = target_type
        self._registry = registry if registry is not None else SetupRegistry(setup)
        self._engine = GraphFiller(self._registry)

    @property
    def setup(self) -> FillerSetup:
        return self._registry.get_for(self._target_type)

    def create(self) -> T:
        """Create one fully filled instance of the root type."""
        return self._engine.create_and_fill(self._target_type, self.setup, ConstructionPathTracker())

    def create_many(self, count: int) -> list[T]:
        """Create `count` independent instances, each with its own construction path."""
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")
        return [self.create() for _ in range(count)]

    def fill(self, instance: T) -> T:
        """
        Fill the properties of an existing instance in place and return it.

        When a generator is registered for the instance's type its output is
        returned instead, and the instance is left untouched.
        """
        return self._engine.fill(instance, self._registry.get_for(type(instance)), ConstructionPathTracker())


def create(target_type: type[T] | Any, setup: FillerSetup | None = None) -> T:
    """Create one filled instance of `target_type`."""
    return Filler(target_type, setup).create()


def create_many(target_type: type[T] | Any, count: int, setup: FillerSetup | None = None) -> list[T]:
    """Create `count` filled instances of `target_type`."""
    return Filler(target_type, setup).create_many(count)


def fill(instance: T, setup: FillerSetup | None = None) -> T:
    """Fill an existing instance in place."""
    return Filler(type(instance), setup).fill(instance)
