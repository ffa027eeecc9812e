"""
objfill - fills arbitrary object graphs with generated data for tests.

Given a type, objfill constructs an instance and recursively assigns every
settable property a value:
- registered generators for primitive and custom types
- recursive construction for nested classes
- randomly sized sequences, sets and mappings
- detection of circular type references on the construction path
"""

from .classifier import classify, is_fillable
from .errors import (
    CircularReference,
    DuplicateKey,
    FillerError,
    InvalidSetup,
    NoUsableConstructor,
    UnregisteredType,
    UnresolvedPolymorphicType,
)
from .filler import Filler, GraphFiller, create, create_many, default_value, fill
from .generators import constant, cycle_values, default_generators, one_of
from .introspection import describe
from .mocking import AutospecMocker, InterfaceMocker
from .model import (
    Category,
    CircularReferencePolicy,
    FillerSetup,
    PropertyKey,
    PropertyPosition,
    TypeDescriptor,
)
from .randomizer import RandomSource, StdRandom
from .registry import SetupRegistry
from .tracker import ConstructionPathTracker

__all__ = [
    "AutospecMocker",
    "Category",
    "CircularReference",
    "CircularReferencePolicy",
    "ConstructionPathTracker",
    "DuplicateKey",
    "Filler",
    "FillerError",
    "FillerSetup",
    "GraphFiller",
    "InterfaceMocker",
    "InvalidSetup",
    "NoUsableConstructor",
    "PropertyKey",
    "PropertyPosition",
    "RandomSource",
    "SetupRegistry",
    "StdRandom",
    "TypeDescriptor",
    "UnregisteredType",
    "UnresolvedPolymorphicType",
    "classify",
    "constant",
    "create",
    "create_many",
    "cycle_values",
    "default_generators",
    "default_value",
    "describe",
    "fill",
    "is_fillable",
    "one_of",
]
