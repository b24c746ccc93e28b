"""Helpers for working with lists: pruning, de-duplication, diffs and visiting."""

from __future__ import annotations

import math
import random
import re
import time
from collections.abc import Callable, Iterable, Iterator, Sequence
from itertools import chain
from typing import Any, TypeVar

T = TypeVar("T")

Visitor = Callable[[int, Any], Any]

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def prune_empty_strings(items: Iterable[str]) -> list[str]:
    """Return the items without empty strings."""
    return prune_equal(items, "")


def prune_equal(items: Iterable[T], equal_to: T) -> list[T]:
    """Return the items that are not equal to ``equal_to``."""
    return [item for item in items if item != equal_to]


def dedupe(items: Iterable[T]) -> list[T]:
    """Remove duplicates, keeping the first occurrence of each item in order."""
    return list(dict.fromkeys(items))


def pick_random(items: Sequence[T]) -> T:
    """Return a random element; raises IndexError on an empty sequence."""
    return random.choice(items)


def contains(items: Iterable[T], element: T) -> bool:
    """Tell whether ``element`` is among ``items``."""
    return any(item == element for item in items)


def contains_items(s1: Sequence[T], s2: Iterable[T]) -> bool:
    """Tell whether every element of ``s2`` is present in ``s1``."""
    return all(contains(s1, element) for element in s2)


def to_int(items: Iterable[str]) -> list[int]:
    """Convert decimal strings to integers, raising ValueError on bad input."""
    numbers = []
    for text in items:
        if not _INT_PATTERN.fullmatch(text):
            raise ValueError(f'invalid syntax: "{text}"')
        number = int(text)
        if not _INT64_MIN <= number <= _INT64_MAX:
            raise ValueError(f'value out of range: "{text}"')
        numbers.append(number)
    return numbers


def equal(s1: Sequence[T], s2: Sequence[T]) -> bool:
    """Tell whether two sequences hold equal items in the same order."""
    return len(s1) == len(s2) and all(a == b for a, b in zip(s1, s2))


def is_empty(items: Sequence[Any]) -> bool:
    """Tell whether the sequence has no items."""
    return len(items) == 0


def elements_match(s1: Sequence[T], s2: Sequence[T]) -> bool:
    """Tell whether both sequences hold the same items, ignoring order but counting duplicates."""
    if is_empty(s1) and is_empty(s2):
        return True
    extra1, extra2 = diff(s1, s2)
    return is_empty(extra1) and is_empty(extra2)


def diff(s1: Sequence[T], s2: Sequence[T]) -> tuple[list[T], list[T]]:
    """Return the items only in ``s1`` and the items only in ``s2``, counting duplicates."""
    visited = [False] * len(s2)
    extra1: list[T] = []
    for element in s1:
        for position, candidate in enumerate(s2):
            if not visited[position] and candidate == element:
                visited[position] = True
                break
        else:
            extra1.append(element)
    extra2 = [candidate for candidate, seen in zip(s2, visited) if not seen]
    return extra1, extra2


def merge(*args: Iterable[T]) -> list[T]:
    """Concatenate several iterables and remove duplicates."""
    return dedupe(chain.from_iterable(args))


def merge_items(*args: T) -> list[T]:
    """Collect the given items, removing duplicates."""
    return dedupe(args)


def first_non_zero(inputs: Sequence[T]) -> tuple[T | None, bool]:
    """Return the first truthy item and True, or a zero value and False.

    When nothing is found the zero value is the first (falsy) item, or None
    for an empty sequence.
    """
    for value in inputs:
        if value:
            return value, True
    return (inputs[0] if inputs else None), False


def clone(items: Iterable[T]) -> list[T]:
    """Return a shallow copy as a new list."""
    return list(items)


def visit_sequential(items: Sequence[T], visit: Visitor) -> None:
    """Call ``visit(index, item)`` in order; stops early when it returns False."""
    for index, item in enumerate(items):
        if visit(index, item) is False:
            return


def visit_random(items: Sequence[T], visit: Visitor) -> None:
    """Call ``visit(index, item)`` in a random order; stops early when it returns False."""
    for index in random.sample(range(len(items)), len(items)):
        if visit(index, items[index]) is False:
            return


def visit_random_zero(items: Sequence[T], visit: Visitor) -> None:
    """Like :func:`visit_random` but shuffles indices lazily without building a permutation."""
    size = len(items)
    shuffler = _Blackrock(size, time.time_ns())
    for index in shuffler.indices():
        if visit(index, items[index]) is False:
            return


class _Blackrock:
    """A keyed Feistel permutation of ``range(size)`` with cycle walking."""

    _ROUNDS = 3
    _MASK = (1 << 64) - 1

    def __init__(self, size: int, seed: int) -> None:
        self.size = size
        self.seed = seed & self._MASK
        self.a = max(math.isqrt(size), 1)
        self.b = self.a
        while self.a * self.b <= size:
            self.b += 1

    def _round(self, round_number: int, value: int) -> int:
        x = (value * 0x9E3779B97F4A7C15 + self.seed + (round_number << 32)) & self._MASK
        x ^= x >> 30
        x = (x * 0xBF58476D1CE4E5B9) & self._MASK
        x ^= x >> 27
        x = (x * 0x94D049BB133111EB) & self._MASK
        x ^= x >> 31
        return x

    def _encrypt(self, value: int) -> int:
        left, right = value % self.a, value // self.a
        for round_number in range(1, self._ROUNDS + 1):
            modulus = self.a if round_number % 2 else self.b
            left, right = right, (left + self._round(round_number, right)) % modulus
        return self.a * left + right

    def shuffle(self, value: int) -> int:
        result = self._encrypt(value)
        while result >= self.size:
            result = self._encrypt(result)
        return result

    def indices(self) -> Iterator[int]:
        for value in range(self.size):
            yield self.shuffle(value)