"""
Builders for sequences, sets and mappings.
"""

from __future__ import annotations

import collections
import inspect
import logging
from collections.abc import Callable, Iterable
from typing import Any

from .classifier import classify
from .errors import CircularReference, DuplicateKey
from .introspection import describe, normalize
from .model.setup import CircularReferencePolicy, FillerSetup
from .model.types import Category, TypeDescriptor
from .tracker import ConstructionPathTracker

logger = logging.getLogger(__name__)

CreateFn = Callable[[Any, FillerSetup, ConstructionPathTracker], Any]


class UniqueValueGenerator:
    """
    Produces distinct values of one type, as needed for map keys and set elements.

    Enumeration values are sampled without replacement, so they are distinct by
    construction. Anything else is generated independently and a repeated value
    is an error: retrying could loop forever on a generator with few outputs.
    """

    def __init__(self, create_and_fill: CreateFn):
        self._create_and_fill = create_and_fill

    def generate(
        self,
        value_type: Any,
        count: int,
        setup: FillerSetup,
        tracker: ConstructionPathTracker,
    ) -> list[Any]:
        if classify(value_type, setup) is Category.ENUMERATION:
            members = describe(value_type).enum_values
            return setup.random.sample(members, min(count, len(members)))

        values: list[Any] = []
        seen: set[Any] = set()
        for _ in range(count):
            value = self._create_and_fill(value_type, setup, tracker)
            if value in seen:
                raise DuplicateKey(value_type, value)
            seen.add(value)
            values.append(value)
        return values


class SequenceBuilder:
    """Builds lists, tuples, deques and sets of generated elements."""

    def __init__(self, create_and_fill: CreateFn):
        self._create_and_fill = create_and_fill
        self._unique = UniqueValueGenerator(create_and_fill)

    def build(
        self,
        descriptor: TypeDescriptor,
        setup: FillerSetup,
        tracker: ConstructionPathTracker,
    ) -> Any:
        element_type = normalize(descriptor.element_type)
        factory = sequence_factory(descriptor)

        if tracker.contains(element_type):
            if setup.circular_reference_policy is CircularReferencePolicy.FAIL:
                raise CircularReference(element_type, tracker.path)
            logger.debug("Element type %s is already being built, leaving sequence empty", element_type)
            return factory([])

        count = setup.random.next_int(*setup.sequence_count_range)
        logger.debug("Filling %s with %d elements", descriptor.target_type, count)

        if descriptor.is_unique_collection:
            elements = self._unique.generate(element_type, count, setup, tracker)
        else:
            elements = [self._create_and_fill(element_type, setup, tracker) for _ in range(count)]
        return factory(elements)


class MapBuilder:
    """Builds mappings with distinct generated keys."""

    def __init__(self, create_and_fill: CreateFn):
        self._create_and_fill = create_and_fill
        self._unique = UniqueValueGenerator(create_and_fill)

    def build(
        self,
        descriptor: TypeDescriptor,
        setup: FillerSetup,
        tracker: ConstructionPathTracker,
    ) -> Any:
        key_type = normalize(descriptor.key_type)
        value_type = normalize(descriptor.value_type)

        count = setup.random.next_int(*setup.map_key_count_range)
        keys = self._unique.generate(key_type, count, setup, tracker)
        logger.debug("Filling %s with %d keys", descriptor.target_type, len(keys))

        items: dict[Any, Any] = {}
        for key in keys:
            items[key] = self._create_and_fill(value_type, setup, tracker)
        return mapping_factory(descriptor)(items)


def sequence_factory(descriptor: TypeDescriptor) -> Callable[[Iterable[Any]], Any]:
    """Get the callable that materialises a sequence of the described type."""
    origin = descriptor.origin
    if inspect.isabstract(origin):
        return set if descriptor.is_unique_collection else list
    return origin


def mapping_factory(descriptor: TypeDescriptor) -> Callable[[dict[Any, Any]], Any]:
    """Get the callable that materialises a mapping of the described type."""
    origin = descriptor.origin
    if inspect.isabstract(origin):
        return dict
    if origin is collections.defaultdict:
        return lambda items: collections.defaultdict(None, items)
    return origin
