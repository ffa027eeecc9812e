"""
Runtime type introspection producing TypeDescriptors.

Descriptors are computed once per type and kept in a bounded cache; they capture everything the
classifier, the constructor and the filler need to know about a type.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import functools
import inspect
import logging
import sys
import types
from enum import Enum
from typing import (
    Annotated,
    Any,
    ClassVar,
    Literal,
    Self,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .model.types import (
    ConstructorDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    TypeDescriptor,
)

logger = logging.getLogger(__name__)

RESERVED_MODULES = frozenset(sys.stdlib_module_names) | {"builtins", "__future__"}

_TEXT_TYPES = (str, bytes, bytearray, memoryview)

_REQUIRED_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)

CACHE_SIZE = 1024


def normalize(target_type: Any) -> Any:
    """Strip `Annotated` metadata and unwrap `Optional[T]` / `T | None` to `T`."""
    while True:
        origin = get_origin(target_type)
        if origin is Annotated:
            target_type = get_args(target_type)[0]
            continue
        if origin is Union or origin is types.UnionType:
            args = get_args(target_type)
            members = [arg for arg in args if arg is not type(None)]
            if len(members) == 1 and len(members) < len(args):
                target_type = members[0]
                continue
        return target_type


def is_reserved_module(module_name: str | None) -> bool:
    """Check whether a module belongs to the standard library (the reserved namespace)."""
    if not module_name or module_name == "__main__":
        return False
    return module_name.split(".")[0] in RESERVED_MODULES


def describe(target_type: Any) -> TypeDescriptor:
    """Get the (cached) TypeDescriptor of a type."""
    target_type = normalize(target_type)
    try:
        hash(target_type)
    except TypeError:
        return TypeIntrospector.describe(target_type)
    return _describe_cached(target_type)


@functools.lru_cache(maxsize=CACHE_SIZE)
def _describe_cached(target_type: Any) -> TypeDescriptor:
    # descriptors refer back to their type, so the cache is bounded rather than weak
    return TypeIntrospector.describe(target_type)


def clear_cache() -> None:
    """Forget all computed descriptors (useful for testing)."""
    _describe_cached.cache_clear()


class TypeIntrospector:
    """Extracts structural facts about types from runtime metadata."""

    @classmethod
    def describe(cls, target_type: Any) -> TypeDescriptor:
        origin = get_origin(target_type)
        args = get_args(target_type)

        if origin is Literal:
            return TypeDescriptor(target_type, origin, args, is_enum=True, enum_values=args)

        if origin is not None:
            if not isinstance(origin, type):
                return TypeDescriptor(target_type, origin, args, is_reserved=True)
            return cls._describe_alias(target_type, origin, args)

        if not isinstance(target_type, type):
            # TypeVars, Any, unions, and other non-class type expressions
            return TypeDescriptor(target_type, is_reserved=True)

        if issubclass(target_type, Enum):
            return TypeDescriptor(
                target_type,
                is_enum=True,
                enum_values=tuple(target_type),
                is_reserved=is_reserved_module(target_type.__module__),
            )

        reserved = is_reserved_module(target_type.__module__)
        abstract = inspect.isabstract(target_type) or bool(getattr(target_type, "_is_protocol", False))
        if reserved:
            return TypeDescriptor(target_type, is_abstract=abstract, is_reserved=True)

        hints = cls.type_hints(target_type)
        if abstract:
            # interfaces are never constructed, but stand-ins for them get their properties filled
            return TypeDescriptor(
                target_type,
                is_abstract=True,
                properties=cls.extract_properties(target_type, hints),
            )

        return TypeDescriptor(
            target_type,
            properties=cls.extract_properties(target_type, hints),
            constructors=cls.extract_constructors(target_type, hints),
        )

    @classmethod
    def _describe_alias(cls, target_type: Any, origin: type, args: tuple[Any, ...]) -> TypeDescriptor:
        reserved = is_reserved_module(origin.__module__)

        if issubclass(origin, collections.abc.Mapping):
            return TypeDescriptor(
                target_type, origin, args, is_mapping=len(args) == 2, is_reserved=reserved
            )

        if origin is tuple:
            homogeneous = len(args) == 2 and args[1] is Ellipsis
            return TypeDescriptor(
                target_type,
                origin,
                args[:1] if homogeneous else args,
                is_sequence=homogeneous,
                is_reserved=reserved,
            )

        if issubclass(origin, collections.abc.Iterable) and not issubclass(origin, _TEXT_TYPES):
            return TypeDescriptor(
                target_type,
                origin,
                args,
                is_sequence=len(args) == 1,
                is_unique_collection=issubclass(origin, collections.abc.Set),
                is_reserved=reserved,
            )

        if reserved:
            return TypeDescriptor(target_type, origin, args, is_reserved=True)

        # A parametrised user generic such as Box[int]: describe Box with T bound to int
        base = describe(origin)
        bindings = dict(zip(getattr(origin, "__parameters__", ()), args, strict=False))
        properties = tuple(
            dataclasses.replace(prop, declared_type=substitute(prop.declared_type, bindings))
            for prop in base.properties
        )
        constructors = tuple(
            ConstructorDescriptor(
                ctor.name,
                target_type if ctor.factory is origin else ctor.factory,
                tuple(
                    dataclasses.replace(param, declared_type=substitute(param.declared_type, bindings))
                    for param in ctor.parameters
                ),
            )
            for ctor in base.constructors
        )
        return TypeDescriptor(
            target_type,
            origin,
            args,
            is_abstract=base.is_abstract,
            properties=properties,
            constructors=constructors,
        )

    @staticmethod
    def type_hints(obj: Any) -> dict[str, Any]:
        """Resolve type hints, falling back to raw annotations if forward references fail."""
        # classes defined inside functions can still refer to themselves
        localns = {klass.__name__: klass for klass in obj.__mro__} if isinstance(obj, type) else None
        try:
            return get_type_hints(obj, localns=localns)
        except (NameError, TypeError) as error:
            logger.warning("Could not resolve type hints of %r: %s", obj, error)
            try:
                raw = inspect.get_annotations(obj)
            except TypeError:
                return {}
            return {name: Any if isinstance(hint, str) else hint for name, hint in raw.items()}

    @classmethod
    def extract_properties(cls, target: type, hints: dict[str, Any]) -> tuple[PropertyDescriptor, ...]:
        """Collect the settable public properties of a class in declaration order."""
        declared: dict[str, type] = {}
        for klass in reversed(target.__mro__):
            if klass is object or is_reserved_module(klass.__module__):
                continue
            names = list(inspect.get_annotations(klass))
            names += [name for name, member in vars(klass).items() if isinstance(member, property)]
            for name in names:
                if not name.startswith("_"):
                    declared.setdefault(name, klass)

        properties: list[PropertyDescriptor] = []
        for name in declared:
            prop = cls._find_property(target, name)
            if prop is None:
                hint = hints.get(name, Any)
                if cls._is_class_level(hint):
                    continue
                owner = cls._declaring_class(target, name)
                properties.append(PropertyDescriptor(name, normalize(hint), owner))
                continue

            owner, setter = cls._find_setter(target, name)
            if setter is None:
                continue
            hint = cls.type_hints(prop.fget).get("return") if prop.fget else None
            if hint is None:
                hint = hints.get(name, Any)
            properties.append(PropertyDescriptor(name, normalize(hint), owner, setter))
        return tuple(properties)

    @staticmethod
    def _is_class_level(hint: Any) -> bool:
        return hint is ClassVar or get_origin(hint) is ClassVar or isinstance(hint, dataclasses.InitVar)

    @staticmethod
    def _find_property(target: type, name: str) -> property | None:
        for klass in target.__mro__:
            if name in vars(klass):
                member = vars(klass)[name]
                return member if isinstance(member, property) else None
        return None

    @staticmethod
    def _find_setter(target: type, name: str) -> tuple[type, Any]:
        """Find the setter of a property, looking through base classes when an override drops it."""
        for klass in target.__mro__:
            member = vars(klass).get(name)
            if isinstance(member, property) and member.fset is not None:
                return klass, member.fset
        return target, None

    @staticmethod
    def _declaring_class(target: type, name: str) -> type:
        for klass in reversed(target.__mro__):
            if name in inspect.get_annotations(klass):
                return klass
        return target

    @classmethod
    def extract_constructors(cls, target: type, hints: dict[str, Any]) -> tuple[ConstructorDescriptor, ...]:
        """
        Collect the ways to construct a class.

        The class itself always comes first; classmethods annotated to return the
        class (or `Self`) are alternative constructors.
        """
        if target.__init__ is not object.__init__:  # type: ignore[misc]
            init: Any = target.__init__  # type: ignore[misc]
        elif target.__new__ is not object.__new__:
            init = target.__new__
        else:
            init = None

        constructors = [
            ConstructorDescriptor(
                target.__name__,
                target,
                cls.extract_parameters(init, hints, skip_first=True) if init else (),
            )
        ]

        seen: set[str] = set()
        for klass in target.__mro__:
            if klass is object or is_reserved_module(klass.__module__):
                continue
            for name, member in vars(klass).items():
                if name in seen or name.startswith("_") or not isinstance(member, classmethod):
                    continue
                seen.add(name)
                returned = cls.type_hints(member.__func__).get("return")
                if returned is not target and returned is not Self:
                    continue
                bound = getattr(target, name)
                constructors.append(
                    ConstructorDescriptor(
                        f"{target.__name__}.{name}",
                        bound,
                        cls.extract_parameters(member.__func__, {}, skip_first=True),
                    )
                )
        return tuple(constructors)

    @classmethod
    def extract_parameters(
        cls, func: Any, fallback_hints: dict[str, Any], skip_first: bool = False
    ) -> tuple[ParameterDescriptor, ...]:
        """Extract the required parameters of a callable with their declared types."""
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            logger.debug("No signature available for %r", func)
            return ()

        hints = cls.type_hints(func)
        parameters = list(signature.parameters.values())
        if skip_first and parameters:
            parameters = parameters[1:]

        required: list[ParameterDescriptor] = []
        for param in parameters:
            if param.kind not in _REQUIRED_KINDS or param.default is not inspect.Parameter.empty:
                continue
            hint = hints.get(param.name, Any)
            if hint is Any:
                # Generated __init__ methods may not resolve forward references on their own
                hint = fallback_hints.get(param.name, Any)
            required.append(
                ParameterDescriptor(
                    param.name,
                    normalize(hint),
                    positional_only=param.kind is inspect.Parameter.POSITIONAL_ONLY,
                )
            )
        return tuple(required)


def substitute(hint: Any, bindings: dict[Any, Any]) -> Any:
    """Replace type variables in a hint with the types bound to them."""
    if not bindings:
        return hint
    if isinstance(hint, TypeVar):
        return bindings.get(hint, hint)
    parameters = getattr(hint, "__parameters__", ())
    if parameters:
        try:
            return hint[tuple(bindings.get(param, param) for param in parameters)]
        except TypeError:
            return hint
    return hint
