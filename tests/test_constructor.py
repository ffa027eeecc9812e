#!/usr/bin/env python3
"""
Unit tests for constructor selection and instance construction.
"""

import unittest
from dataclasses import dataclass

from objfill import (
    ConstructionPathTracker,
    FillerSetup,
    GraphFiller,
    NoUsableConstructor,
    PropertyKey,
    constant,
    create,
    describe,
)
from objfill.constructor import InstanceConstructor


class Opaque:
    """Nothing to fill here."""


class Money:
    amount: int
    currency: str

    def __init__(self, amount: int, currency: str):
        self.amount = amount
        self.currency = currency

    @classmethod
    def zero(cls, currency: str) -> "Money":
        return cls(0, currency)


class NeedsOpaque:
    name: str

    def __init__(self, opaque: Opaque):
        self.opaque = opaque
        self.name = ""


class PrefersFillable:
    name: str

    def __init__(self, opaque: Opaque):
        self.name = "from-init"

    @classmethod
    def create(cls, first: str, second: str) -> "PrefersFillable":
        instance = cls.__new__(cls)
        instance.name = first + second
        return instance


class Defaulted:
    label: str

    def __init__(self, label: str = "default"):
        self.label = label


@dataclass
class Wallet:
    owner: str
    balance: Money


@dataclass
class Badge:
    label: str
    opaque: Opaque


class TestConstructorSelection(unittest.TestCase):
    """Test which constructor gets picked."""

    def test_zero_argument_constructor_is_used_directly(self):
        constructor = InstanceConstructor.select(describe(Defaulted), FillerSetup())
        self.assertEqual(constructor.name, "Defaulted")
        self.assertEqual(constructor.arity, 0)

    def test_fewest_parameters_first(self):
        constructor = InstanceConstructor.select(describe(Money), FillerSetup())
        self.assertEqual(constructor.name, "Money.zero")

    def test_unfillable_constructor_is_skipped(self):
        constructor = InstanceConstructor.select(describe(PrefersFillable), FillerSetup())
        self.assertEqual(constructor.name, "PrefersFillable.create")

    def test_no_usable_constructor(self):
        self.assertIsNone(InstanceConstructor.select(describe(NeedsOpaque), FillerSetup()))
        self.assertIsNone(InstanceConstructor.select(describe(Badge), FillerSetup()))

    def test_property_generator_satisfies_field_parameter(self):
        setup = FillerSetup(property_generators={PropertyKey(Badge, "opaque"): constant(Opaque())})
        constructor = InstanceConstructor.select(describe(Badge), setup)
        self.assertIsNotNone(constructor)
        self.assertEqual(constructor.name, "Badge")


class TestConstruct(unittest.TestCase):
    """Test constructing instances with generated arguments."""

    def setUp(self):
        self.setup = FillerSetup(generators={str: constant("EUR"), int: constant(5)})
        self.constructor = InstanceConstructor(GraphFiller().create_and_fill)

    def test_arguments_are_generated(self):
        money = self.constructor.construct(describe(Money), self.setup, ConstructionPathTracker())
        self.assertIsInstance(money, Money)
        self.assertEqual(money.currency, "EUR")
        self.assertEqual(money.amount, 0)

    def test_nested_arguments_are_created_and_filled(self):
        wallet = self.constructor.construct(describe(Wallet), self.setup, ConstructionPathTracker())
        self.assertEqual(wallet.owner, "EUR")
        self.assertIsInstance(wallet.balance, Money)
        self.assertEqual(wallet.balance.amount, 5)

    def test_no_usable_constructor_raises(self):
        with self.assertRaises(NoUsableConstructor) as context:
            create(NeedsOpaque)
        self.assertIs(context.exception.target_type, NeedsOpaque)

    def test_ignoring_unknown_types_does_not_make_parameters_fillable(self):
        with self.assertRaises(NoUsableConstructor):
            create(NeedsOpaque, FillerSetup(ignore_unknown_types=True))

    def test_field_parameter_built_by_property_generator(self):
        opaque = Opaque()
        setup = FillerSetup(
            generators={str: constant("gold")},
            property_generators={PropertyKey(Badge, "opaque"): constant(opaque)},
        )
        badge = create(Badge, setup)

        self.assertEqual(badge.label, "gold")
        self.assertIs(badge.opaque, opaque)


if __name__ == "__main__":
    unittest.main()
