"""
Iteration kernel: the two primitives every other combinator is built on.

``each`` visits; ``reduce`` folds. Both accept a sequence or a mapping and
never mutate it.
"""

from __future__ import annotations
from typing import Any, Callable, TypeVar

from .collection import as_collection
from .errors import CallerContractViolation

T = TypeVar("T")
A = TypeVar("A")

_MISSING: Any = object()


def each(collection: Any, iterator: Callable[[Any, Any, Any], Any]) -> None:
    """
    Call ``iterator(value, key, collection)`` for every entry.

    For sequences ``key`` is the index; for mappings it is the mapping key.
    The third argument is the object the caller passed in. An exception from
    ``iterator`` stops the visit and propagates.
    """
    for key, value in as_collection(collection).entries():
        iterator(value, key, collection)


def reduce(
    collection: Any,
    iterator: Callable[[A, T], A],
    seed: A = _MISSING,
) -> A:
    """
    Fold a collection into a single value with ``iterator(accumulator, item)``.

    When ``seed`` is given, folding starts from it and every item is passed
    to ``iterator``. When omitted, the first item becomes the accumulator and
    is never passed to ``iterator``. ``None`` is a valid seed.

    Example:
        reduce([1, 2, 3], lambda total, n: total + n, 0)   # 6
        reduce([5], lambda total, n: total + n * n)        # 5, iterator unused

    Raises:
        CallerContractViolation: if the collection is empty and no seed was
            given, since there is no value to return.
    """
    entries = as_collection(collection).entries()

    if seed is _MISSING:
        try:
            _, accumulator = next(entries)
        except StopIteration:
            raise CallerContractViolation(
                "reduce of an empty collection with no seed"
            ) from None
    else:
        accumulator = seed

    for _, item in entries:
        accumulator = iterator(accumulator, item)
    return accumulator
