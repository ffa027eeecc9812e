"""
Type classification: decides how a type gets its value.
"""

from __future__ import annotations

import logging
from typing import Any

from .introspection import describe, normalize
from .model.setup import FillerSetup
from .model.types import Category, TypeDescriptor

logger = logging.getLogger(__name__)


def classify(target_type: Any, setup: FillerSetup) -> Category:
    """
    Classify a type against a setup. The first matching rule wins:

    1. a generator is registered for exactly this type
    2. a mapping whose key and value types are both fillable
    3. a sequence or set whose element type is fillable
    4. an abstract class or protocol
    5. an enumeration (Enum subclass or Literal)
    6. a non-reserved class with at least one settable property
    7. anything else is unclassified
    """
    target_type = normalize(target_type)
    if setup.generator_for(target_type) is not None:
        return Category.GENERATED

    descriptor = describe(target_type)
    if _is_valid_map(descriptor, setup):
        return Category.MAP
    if _is_valid_sequence(descriptor, setup):
        return Category.SEQUENCE
    if descriptor.is_abstract:
        return Category.POLYMORPHIC
    if descriptor.is_enum:
        return Category.ENUMERATION
    if is_composite(descriptor):
        return Category.COMPOSITE

    logger.debug("Type %s is unclassified", target_type)
    return Category.UNCLASSIFIED


def is_composite(descriptor: TypeDescriptor) -> bool:
    """A composite type is a non-reserved, concrete class with something to fill."""
    return (
        not descriptor.is_reserved
        and not descriptor.is_abstract
        and not descriptor.is_enum
        and bool(descriptor.properties)
    )


def is_fillable(target_type: Any, setup: FillerSetup) -> bool:
    """Check whether the engine can produce a value of this type under the setup."""
    category = classify(target_type, setup)
    if category is Category.POLYMORPHIC:
        return is_resolvable_polymorphic(target_type, setup)
    return category is not Category.UNCLASSIFIED


def is_resolvable_polymorphic(target_type: Any, setup: FillerSetup) -> bool:
    target_type = normalize(target_type)
    return (
        setup.generator_for(target_type) is not None
        or _has_implementation(target_type, setup)
        or setup.interface_mocker is not None
    )


def _has_implementation(target_type: Any, setup: FillerSetup) -> bool:
    try:
        return target_type in setup.interface_implementations
    except TypeError:
        return False


def _is_valid_map(descriptor: TypeDescriptor, setup: FillerSetup) -> bool:
    return (
        descriptor.is_mapping
        and is_fillable(descriptor.key_type, setup)
        and is_fillable(descriptor.value_type, setup)
    )


def _is_valid_sequence(descriptor: TypeDescriptor, setup: FillerSetup) -> bool:
    return descriptor.is_sequence and is_fillable(descriptor.element_type, setup)
