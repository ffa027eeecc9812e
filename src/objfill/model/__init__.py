"""
Model subpackage containing the data structures read by the filling engine.

Kept free of engine imports so that introspection, classification and the
builders can all depend on it without circular imports.
"""

from .keys import PropertyKey
from .setup import CircularReferencePolicy, FillerSetup, Generator, PropertyPosition
from .types import Category, ConstructorDescriptor, ParameterDescriptor, PropertyDescriptor, TypeDescriptor

__all__ = [
    "Category",
    "CircularReferencePolicy",
    "ConstructorDescriptor",
    "FillerSetup",
    "Generator",
    "ParameterDescriptor",
    "PropertyDescriptor",
    "PropertyKey",
    "PropertyPosition",
    "TypeDescriptor",
]
