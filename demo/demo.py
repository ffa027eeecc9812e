#!/usr/bin/env python3
"""
Demonstration of objfill - filling object graphs with generated test data.

This demo shows:
1. Creating a fully filled object graph
2. Deterministic generators, property overrides and mocked interfaces
3. Circular reference detection and substitution
4. Unknown type handling
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from objfill import (
    AutospecMocker,
    CircularReferencePolicy,
    Filler,
    FillerSetup,
    PropertyKey,
    PropertyPosition,
    constant,
    cycle_values,
    fill,
)

# Example domain: a small web shop


class Currency(Enum):
    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"


@dataclass
class Address:
    street: str
    city: str
    postcode: str


class PaymentGateway(ABC):
    """Abstract payment gateway."""

    @abstractmethod
    def charge(self, amount: int) -> bool:
        pass


class CardGateway(PaymentGateway):
    merchant_id: str

    def charge(self, amount: int) -> bool:
        return amount > 0


class Customer:
    id: int
    name: str
    email: str
    address: Address
    balances: dict[Currency, int]
    gateway: PaymentGateway


class Category:
    name: str
    parent: "Category | None"
    children: "list[Category]"


class Legacy:
    """A class without annotated properties."""


class Invoice:
    number: int
    customer: Customer
    legacy: Legacy | None = None


def main():
    """Main demo function."""
    logging.basicConfig(level=logging.INFO)
    print("=== objfill Demo ===\n")

    print("1. Random Customer:")
    print("-" * 30)

    setup = FillerSetup.seeded(2024, interface_implementations={PaymentGateway: CardGateway})
    customer = Filler(Customer, setup).create()
    print(f"Customer {customer.id}: {customer.name} <{customer.email}>")
    print(f"Address: {customer.address}")
    print(f"Balances: {customer.balances}")
    print(f"Gateway: {type(customer.gateway).__name__} ({customer.gateway.merchant_id})")

    print("\n2. Deterministic Generators:")
    print("-" * 30)

    ids = cycle_values(range(1000, 2000))
    setup = FillerSetup(
        generators={int: ids, str: constant("n/a")},
        property_generators={PropertyKey(Customer, "email"): constant("ada@example.org")},
        property_order={PropertyKey(Customer, "id"): PropertyPosition.LAST},
        interface_mocker=AutospecMocker(),
    )
    for customer in Filler(Customer, setup).create_many(3):
        print(f"Customer {customer.id}: {customer.email}, gateway mocked: {customer.gateway}")

    print("\n3. Circular References:")
    print("-" * 30)

    try:
        Filler(Category).create()
        print("This shouldn't print - Category refers to itself")
    except Exception as e:
        print(f"Caught expected circular reference: {e}")

    setup = FillerSetup(circular_reference_policy=CircularReferencePolicy.SUBSTITUTE_DEFAULT)
    category = Filler(Category, setup).create()
    print(f"Substituted: parent={category.parent}, children={category.children}")

    print("\n4. Unknown Types:")
    print("-" * 30)

    setup = FillerSetup(interface_mocker=AutospecMocker())
    try:
        Filler(Invoice, setup).create()
        print("This shouldn't print - Legacy cannot be filled")
    except Exception as e:
        print(f"Caught expected unknown type: {e}")

    invoice = fill(Invoice(), setup.derive(ignore_unknown_types=True))
    print(f"Invoice {invoice.number} for {invoice.customer.name}, legacy={invoice.legacy}")

    print("\nDemo completed successfully!")


if __name__ == "__main__":
    main()
