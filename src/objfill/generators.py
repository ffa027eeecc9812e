"""
Default value generators for primitive types, and helpers for building generators.
"""

from __future__ import annotations

import datetime
import itertools
import uuid
from collections.abc import Callable, Iterable
from decimal import Decimal
from typing import Any, TypeVar

from faker import Faker

from .randomizer import RandomSource

T = TypeVar("T")

INT_RANGE = (-1_000_000, 1_000_000)


def default_generators(random: RandomSource, locale: str | None = None) -> dict[Any, Callable[[], Any]]:
    """
    Build the generators registered by default for primitive types.

    Numbers come straight from `random`; text and temporal values from a Faker
    instance seeded from `random`, so a seeded source reproduces every value.
    """
    faker = Faker(locale)
    faker.seed_instance(random.next_int(0, 2**32))

    return {
        int: lambda: random.next_int(*INT_RANGE),
        float: lambda: faker.pyfloat(left_digits=6, right_digits=4),
        bool: lambda: random.next_int(0, 2) == 1,
        str: lambda: faker.pystr(min_chars=8, max_chars=20),
        bytes: lambda: faker.binary(length=random.next_int(8, 33)),
        Decimal: lambda: faker.pydecimal(left_digits=8, right_digits=2),
        uuid.UUID: lambda: uuid.UUID(int=random.next_int(0, 2**128), version=4),
        datetime.datetime: faker.date_time,
        datetime.date: faker.date_object,
        datetime.time: faker.time_object,
        datetime.timedelta: lambda: datetime.timedelta(seconds=random.next_int(0, 86_400 * 365)),
    }


def constant(value: T) -> Callable[[], T]:
    """Generator that always returns the same value."""
    return lambda: value


def cycle_values(values: Iterable[T]) -> Callable[[], T]:
    """
    Generator that returns the given values in order, starting over after the last one.

    Example:
        ```python
        ids = cycle_values(2**n for n in range(1, 23))
        ids(), ids()  # 2, 4
        ```
    """
    pool = list(values)
    if not pool:
        raise ValueError("cycle_values needs at least one value")
    iterator = itertools.cycle(pool)
    return lambda: next(iterator)


def one_of(random: RandomSource, values: Iterable[T]) -> Callable[[], T]:
    """Generator that picks one of the given values at random on every call."""
    pool = list(values)
    if not pool:
        raise ValueError("one_of needs at least one value")
    return lambda: random.choose(pool)
