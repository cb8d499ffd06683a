"""
Collection variants understood by the iteration kernel.

A collection is either an ordered sequence (visited by index) or a keyed
mapping (visited by key in insertion order). Callers pass plain Python
objects; ``as_collection`` resolves them once per call into one of the two
variants so the kernel never re-inspects types while iterating.
"""

from __future__ import annotations
from collections.abc import Hashable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .errors import CallerContractViolation

K = TypeVar("K")
V = TypeVar("V")


@dataclass(frozen=True)
class IndexedSequence(Generic[V]):
    """Ordered sequence; entries are keyed by position."""
    source: Sequence[V]

    def entries(self) -> Iterator[tuple[int, V]]:
        for index in range(len(self.source)):
            yield index, self.source[index]


@dataclass(frozen=True)
class KeyedMapping(Generic[K, V]):
    """Key-value mapping; entries follow the mapping's iteration order."""
    source: Mapping[K, V]

    def entries(self) -> Iterator[tuple[K, V]]:
        for key in self.source:
            yield key, self.source[key]


Collection = IndexedSequence | KeyedMapping


def as_collection(value: Any) -> Collection:
    """
    Resolve a caller-supplied object into a collection variant.

    Mappings are checked first so that sequence-like mapping types are
    visited by key.

    Raises:
        CallerContractViolation: if ``value`` is neither a Mapping nor a
            Sequence (sets, generators and scalars are rejected).
    """
    if isinstance(value, (IndexedSequence, KeyedMapping)):
        return value
    if isinstance(value, Mapping):
        return KeyedMapping(value)
    if isinstance(value, Sequence):
        return IndexedSequence(value)
    raise CallerContractViolation(
        f"expected a sequence or a mapping, got {type(value).__name__}"
    )


def is_nested_sequence(value: Any) -> bool:
    """True for the containers flatten descends into (lists and tuples)."""
    return isinstance(value, (list, tuple))


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equal(a: Any, b: Any) -> bool:
    """
    Equality without coercion between types.

    ints and floats form one numeric type, so ``1`` equals ``1.0``, and NaN
    never equals anything, itself included. Other values are equal when they
    are the same object, or share a type and compare equal. ``1`` and
    ``True`` differ, as do ``1`` and ``"1"``.
    """
    if is_number(a) and is_number(b):
        return a == b
    if a is b:
        return True
    return type(a) is type(b) and a == b


def seen_key(value: Any) -> tuple[Any, Any] | None:
    """Hashable key for a seen-set, or None when ``value`` is unhashable."""
    if isinstance(value, Hashable):
        try:
            hash(value)
        except TypeError:
            return None
        return ("number" if is_number(value) else type(value), value)
    return None
