#!/usr/bin/env python3
"""
Unit tests for the graph filler and the Filler entry points.
"""

import unittest
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Protocol
from unittest.mock import NonCallableMagicMock

from objfill import (
    AutospecMocker,
    CircularReference,
    CircularReferencePolicy,
    Filler,
    FillerSetup,
    PropertyKey,
    PropertyPosition,
    SetupRegistry,
    UnregisteredType,
    UnresolvedPolymorphicType,
    constant,
    create,
    cycle_values,
    default_value,
    fill,
)


class Status(Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"


class Nothing(Enum):
    pass


@dataclass
class Address:
    street: str
    city: str


class Person:
    name: str
    age: int
    nickname: str | None
    status: Status
    address: Address
    tags: list[str]
    scores: dict[str, int]


class Opaque:
    """Has nothing to fill."""


class Holder:
    name: str
    count: int
    opaque: Opaque | None = None


class Node:
    value: int
    next: "Node | None"


class Parent:
    name: str
    child: "Child"


class Child:
    name: str
    parent: "Parent | None"


class Shape(ABC):
    @abstractmethod
    def area(self) -> float: ...


class Square(Shape):
    side: float

    def area(self) -> float:
        return self.side**2


class Greeter(Protocol):
    def greet(self) -> str: ...


class Canvas:
    title: str
    shape: Shape


class Lobby:
    greeter: Greeter


class EnglishGreeter:
    language: str

    def greet(self) -> str:
        return "hello"


class Named(Protocol):
    name: str


class Tag:
    name: str
    named: Named


class Ordered:
    a: str
    b: str
    c: str
    d: str


class Ticket:
    channel: Literal["email", "phone"]
    priority: Nothing


class Box[T]:
    item: T


def constant_setup(**options) -> FillerSetup:
    return FillerSetup(
        generators={
            str: constant("text"),
            int: constant(42),
            float: constant(1.5),
            Status: constant(Status.ACTIVE),
        },
        sequence_count_range=(3, 4),
        map_key_count_range=(1, 2),
        **options,
    )


class TestCompleteness(unittest.TestCase):
    """Every non-ignored settable property gets a value."""

    def test_create_fills_every_property(self):
        person = create(Person, constant_setup())

        self.assertIsInstance(person, Person)
        self.assertEqual(person.name, "text")
        self.assertEqual(person.age, 42)
        self.assertEqual(person.nickname, "text")
        self.assertIn(person.status, Status)
        self.assertEqual(person.address, Address("text", "text"))
        self.assertEqual(person.tags, ["text", "text", "text"])
        self.assertEqual(person.scores, {"text": 42})

    def test_random_setup_fills_every_property(self):
        person = create(Person, FillerSetup.seeded(1))

        self.assertIsInstance(person.name, str)
        self.assertIsInstance(person.age, int)
        self.assertIsInstance(person.address, Address)
        self.assertTrue(person.tags)
        self.assertTrue(person.scores)

    def test_literal_is_picked_from_its_values(self):
        ticket = create(Ticket)
        self.assertIn(ticket.channel, ("email", "phone"))
        self.assertEqual(ticket.priority, 0)

    def test_generic_class_gets_bound_parameter(self):
        box = create(Box[int], constant_setup())
        self.assertIsInstance(box, Box)
        self.assertEqual(box.item, 42)

    def test_create_many_gives_independent_instances(self):
        people = Filler(Person, constant_setup()).create_many(3)

        self.assertEqual(len(people), 3)
        self.assertEqual(len({id(person) for person in people}), 3)
        self.assertIsNot(people[0].address, people[1].address)

    def test_create_many_rejects_negative_count(self):
        with self.assertRaises(ValueError):
            Filler(Person).create_many(-1)

    def test_generator_errors_propagate(self):
        def broken() -> str:
            raise RuntimeError("generator failed")

        with self.assertRaises(RuntimeError):
            create(Person, FillerSetup(generators={str: broken}))


class TestCircularReferences(unittest.TestCase):
    """Test both circular reference policies."""

    def test_fail_policy_raises(self):
        with self.assertRaises(CircularReference) as context:
            create(Node, FillerSetup(circular_reference_policy=CircularReferencePolicy.FAIL))

        self.assertIs(context.exception.target_type, Node)
        self.assertEqual(context.exception.path, (Node,))

    def test_substitute_policy_uses_default(self):
        setup = constant_setup(circular_reference_policy=CircularReferencePolicy.SUBSTITUTE_DEFAULT)
        node = create(Node, setup)

        self.assertIsInstance(node, Node)
        self.assertEqual(node.value, 42)
        self.assertIsNone(node.next)

    def test_indirect_cycle(self):
        with self.assertRaises(CircularReference) as context:
            create(Parent)
        self.assertEqual(context.exception.path, (Parent, Child))

        setup = FillerSetup(circular_reference_policy=CircularReferencePolicy.SUBSTITUTE_DEFAULT)
        parent = create(Parent, setup)
        self.assertIsInstance(parent.child, Child)
        self.assertIsNone(parent.child.parent)

    def test_ignored_property_breaks_cycle(self):
        setup = FillerSetup(ignored_properties={PropertyKey(Node, "next")})
        node = create(Node, setup)
        self.assertFalse(hasattr(node, "next"))

    def test_same_type_in_sibling_branches_is_not_a_cycle(self):
        @dataclass
        class Pair:
            left: Address
            right: Address

        pair = create(Pair, constant_setup())
        self.assertEqual(pair.left, pair.right)


class TestUnknownTypes(unittest.TestCase):
    """Test the unknown type policy."""

    def test_unknown_type_fails(self):
        with self.assertRaises(UnregisteredType) as context:
            create(Holder, constant_setup())
        self.assertIs(context.exception.target_type, Opaque)

    def test_unknown_type_is_left_at_default(self):
        holder = create(Holder, constant_setup(ignore_unknown_types=True))

        self.assertIsNone(holder.opaque)
        self.assertEqual(holder.name, "text")
        self.assertEqual(holder.count, 42)

    def test_default_values(self):
        self.assertEqual(default_value(int), 0)
        self.assertEqual(default_value(str), "")
        self.assertEqual(default_value(bool), False)
        self.assertIsNone(default_value(Opaque))
        self.assertIsNone(default_value(Node))


class TestPolymorphicTypes(unittest.TestCase):
    """Test resolution of abstract and protocol types."""

    def test_unresolved_abstract_type_fails(self):
        with self.assertRaises(UnresolvedPolymorphicType) as context:
            create(Canvas)
        self.assertIs(context.exception.target_type, Shape)

    def test_generator_for_abstract_type(self):
        square = Square()
        square.side = 2.0
        canvas = create(Canvas, FillerSetup(generators={Shape: constant(square)}))
        self.assertIs(canvas.shape, square)

    def test_implementation_is_created_and_filled(self):
        setup = constant_setup(interface_implementations={Shape: Square})
        canvas = create(Canvas, setup)

        self.assertIsInstance(canvas.shape, Square)
        self.assertEqual(canvas.shape.side, 1.5)
        self.assertEqual(canvas.shape.area(), 2.25)

    def test_mocker_is_the_fallback(self):
        lobby = create(Lobby, FillerSetup(interface_mocker=AutospecMocker()))

        self.assertIsInstance(lobby.greeter, NonCallableMagicMock)
        lobby.greeter.greet.return_value = "hello"
        self.assertEqual(lobby.greeter.greet(), "hello")

    def test_implementation_wins_over_mocker(self):
        setup = constant_setup(interface_implementations={Shape: Square}, interface_mocker=AutospecMocker())
        self.assertIsInstance(create(Canvas, setup).shape, Square)

    def test_protocol_mapped_to_structural_implementation(self):
        setup = constant_setup(interface_implementations={Greeter: EnglishGreeter})
        lobby = create(Lobby, setup)

        self.assertIsInstance(lobby.greeter, EnglishGreeter)
        self.assertEqual(lobby.greeter.language, "text")
        self.assertEqual(lobby.greeter.greet(), "hello")

    def test_mocked_interface_gets_its_data_members_filled(self):
        tag = create(Tag, constant_setup(interface_mocker=AutospecMocker()))

        self.assertIsInstance(tag.named, NonCallableMagicMock)
        self.assertEqual(tag.name, "text")
        self.assertEqual(tag.named.name, "text")

    def test_property_generator_keyed_on_protocol(self):
        setup = constant_setup(
            interface_mocker=AutospecMocker(),
            property_generators={PropertyKey(Named, "name"): constant("tagged")},
        )
        tag = create(Tag, setup)

        self.assertEqual(tag.name, "text")
        self.assertEqual(tag.named.name, "tagged")


class TestPropertyHandling(unittest.TestCase):
    """Test ignoring, per-property generators and ordering."""

    def test_ignored_types_are_skipped(self):
        person = Person()
        fill(person, constant_setup(ignored_types={Address, dict[str, int]}))

        self.assertEqual(person.name, "text")
        self.assertFalse(hasattr(person, "address"))
        self.assertFalse(hasattr(person, "scores"))

    def test_property_generator_wins_over_type_generator(self):
        setup = constant_setup(property_generators={PropertyKey(Person, "name"): constant("Ada")})
        person = create(Person, setup)

        self.assertEqual(person.name, "Ada")
        self.assertEqual(person.nickname, "text")
        self.assertEqual(person.address.street, "text")

    def test_property_generator_on_nested_type(self):
        setup = constant_setup(property_generators={PropertyKey(Address, "city"): constant("Oslo")})
        person = create(Person, setup)
        self.assertEqual(person.address.city, "Oslo")

    def test_first_unmarked_last_order(self):
        calls: list[str] = []

        def recorder(name: str):
            def generate() -> str:
                calls.append(name)
                return name

            return generate

        setup = FillerSetup(
            property_generators={PropertyKey(Ordered, name): recorder(name) for name in "abcd"},
            property_order={
                PropertyKey(Ordered, "d"): PropertyPosition.FIRST,
                PropertyKey(Ordered, "a"): PropertyPosition.LAST,
                PropertyKey(Ordered, "c"): PropertyPosition.FIRST,
            },
        )
        create(Ordered, setup)
        self.assertEqual(calls, ["d", "c", "b", "a"])

    def test_ordered_helper(self):
        setup = FillerSetup().ordered(
            PropertyPosition.LAST, [PropertyKey(Ordered, "b"), PropertyKey(Ordered, "a")]
        )
        filler_order = [
            key.name for key, position in setup.property_order.items() if position is PropertyPosition.LAST
        ]
        self.assertEqual(filler_order, ["b", "a"])


class TestFill(unittest.TestCase):
    """Test filling existing instances."""

    def test_fill_returns_same_instance(self):
        person = Person()
        filled = Filler(Person, constant_setup()).fill(person)

        self.assertIs(filled, person)
        self.assertEqual(person.name, "text")

    def test_refill_is_idempotent_with_deterministic_generators(self):
        filler = Filler(Person, constant_setup())
        person = Person()

        filler.fill(person)
        first = {name: repr(value) for name, value in vars(person).items()}
        filler.fill(person)
        second = {name: repr(value) for name, value in vars(person).items()}

        self.assertEqual(first, second)

    def test_generator_for_runtime_type_replaces_instance(self):
        replacement = Person()
        filler = Filler(Person, FillerSetup(generators={Person: constant(replacement)}))
        original = Person()

        self.assertIs(filler.fill(original), replacement)
        self.assertFalse(hasattr(original, "name"))

    def test_fill_with_self_reference(self):
        setup = constant_setup(circular_reference_policy=CircularReferencePolicy.SUBSTITUTE_DEFAULT)
        node = fill(Node(), setup)
        self.assertIsNone(node.next)


class TestSetupRegistry(unittest.TestCase):
    """Test dedicated setups per type."""

    def test_dedicated_setup_applies_to_its_type(self):
        registry = SetupRegistry(
            constant_setup(),
            {Address: FillerSetup(generators={str: constant("dedicated")})},
        )
        person = Filler(Person, registry=registry).create()

        self.assertEqual(person.name, "text")
        self.assertEqual(person.address, Address("dedicated", "dedicated"))

    def test_setup_and_registry_are_exclusive(self):
        with self.assertRaises(ValueError):
            Filler(Person, FillerSetup(), SetupRegistry())


class TestDeterminism(unittest.TestCase):
    """Test reproducibility with a seeded random source."""

    def test_same_seed_same_graph(self):
        first = Filler(Person, FillerSetup.seeded(1234)).create_many(3)
        second = Filler(Person, FillerSetup.seeded(1234)).create_many(3)

        self.assertEqual([vars(p) for p in first], [vars(p) for p in second])

    def test_cycle_values_generator(self):
        ids = cycle_values([1, 2])
        self.assertEqual([ids(), ids(), ids()], [1, 2, 1])


if __name__ == "__main__":
    unittest.main()
