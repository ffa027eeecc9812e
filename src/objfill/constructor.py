"""
Instance construction: picks a constructor and resolves its arguments.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .classifier import is_fillable
from .errors import NoUsableConstructor
from .model.setup import FillerSetup
from .model.types import ConstructorDescriptor, TypeDescriptor
from .tracker import ConstructionPathTracker

logger = logging.getLogger(__name__)

CreateFn = Callable[[Any, FillerSetup, ConstructionPathTracker], Any]


class InstanceConstructor:
    """Creates bare instances of composite types."""

    def __init__(self, create_and_fill: CreateFn):
        """
        Create a new InstanceConstructor.

        Args:
            create_and_fill: Function used to build constructor arguments. It must
                run the full create-and-fill path so arguments get the same cycle checks
                as properties.
        """
        self._create_and_fill = create_and_fill

    def construct(
        self,
        descriptor: TypeDescriptor,
        setup: FillerSetup,
        tracker: ConstructionPathTracker,
    ) -> Any:
        """
        Construct a bare instance of the described type.

        A constructor without required parameters is used directly. Otherwise the
        constructors are tried from the fewest parameters up and the first one whose
        parameters are all fillable is invoked with freshly built arguments.

        Raises:
            NoUsableConstructor: If no constructor can be satisfied
        """
        constructor = self.select(descriptor, setup)
        if constructor is None:
            raise NoUsableConstructor(descriptor.target_type)

        logger.debug("Constructing %s via %s", descriptor.target_type, constructor.name)
        arguments: list[Any] = []
        for param in constructor.parameters:
            generator = self.property_generator(descriptor, constructor, param.name, setup)
            if generator is not None:
                arguments.append(generator())
            else:
                arguments.append(self._create_and_fill(param.declared_type, setup, tracker))
        return constructor.invoke(arguments)

    @classmethod
    def select(cls, descriptor: TypeDescriptor, setup: FillerSetup) -> ConstructorDescriptor | None:
        """Pick the constructor to use, or None when none is usable."""
        for constructor in descriptor.constructors:
            if constructor.arity == 0:
                return constructor

        for constructor in sorted(descriptor.constructors, key=lambda c: c.arity):
            if all(
                cls.property_generator(descriptor, constructor, param.name, setup) is not None
                or is_fillable(param.declared_type, setup)
                for param in constructor.parameters
            ):
                return constructor
            logger.debug(
                "Skipping %s: not every parameter of %s can be filled",
                constructor.name,
                descriptor.target_type,
            )
        return None

    @staticmethod
    def property_generator(
        descriptor: TypeDescriptor,
        constructor: ConstructorDescriptor,
        name: str,
        setup: FillerSetup,
    ) -> Callable[[], Any] | None:
        """
        Parameters of the class itself double as properties (dataclass fields, for one),
        so a property generator configured for the name also supplies the argument.
        """
        if constructor.factory is not descriptor.target_type:
            return None
        return setup.property_generator_for(descriptor.origin or descriptor.target_type, name)
