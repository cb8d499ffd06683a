"""
Query and transform combinators built on the iteration kernel.

Each function returns a new list or a plain value; inputs are never mutated.
Results follow the input's iteration order.
"""

from __future__ import annotations
from typing import Any, Callable, Sequence, TypeVar

from .collection import seen_key, strict_equal
from .errors import CallerContractViolation
from .kernel import each, reduce
from .keys import FieldKey

T = TypeVar("T")
U = TypeVar("U")

Predicate = Callable[[Any], Any]


def identity(value: T) -> T:
    """Return the argument unchanged; the default iteratee."""
    return value


def map(collection: Any, iterator: Callable[[Any], U]) -> list[U]:
    """Apply ``iterator(item)`` to each item. Index and collection are not passed."""
    results: list[U] = []
    each(collection, lambda item, _key, _coll: results.append(iterator(item)))
    return results


def filter(collection: Any, predicate: Predicate) -> list[Any]:
    """
    Keep items for which ``predicate(item)`` is exactly ``True``.

    Truthy non-bool results (``1``, ``"yes"``) do not count as a pass.
    """
    passed: list[Any] = []

    def visit(item: Any, _key: Any, _coll: Any) -> None:
        if predicate(item) is True:
            passed.append(item)

    each(collection, visit)
    return passed


def reject(collection: Any, predicate: Predicate) -> list[Any]:
    """
    Keep items ``filter`` would drop.

    ``filter`` and ``reject`` together partition the input: every item lands
    in exactly one of the two results.
    """
    return filter(collection, lambda item: predicate(item) is not True)


def contains(collection: Any, target: Any) -> bool:
    """True if any item strictly equals ``target``."""
    return reduce(
        collection,
        lambda found, item: found or strict_equal(item, target),
        False,
    )


def every(collection: Any, predicate: Predicate | None = None) -> bool:
    """
    True if ``predicate(item)`` is truthy for every item.

    The predicate is not called again once an item fails. Without a
    predicate the items' own truthiness is used. Empty collections pass.
    """
    predicate = predicate or identity
    return reduce(
        collection,
        lambda ok, item: bool(ok and predicate(item)),
        True,
    )


def some(collection: Any, predicate: Predicate | None = None) -> bool:
    """True if ``predicate(item)`` is truthy for at least one item."""
    predicate = predicate or identity
    return not every(collection, lambda item: not predicate(item))


def uniq(
    sequence: Sequence[Any],
    is_sorted: bool = False,
    iterator: Callable[[Any], Any] | None = None,
) -> list[Any]:
    """
    Drop duplicates, keeping the first occurrence of each.

    Duplicates are judged on ``iterator(item)`` (identity by default). With
    ``is_sorted``, an item strictly equal to the raw item right before it is
    skipped up front; this assumes equal items are adjacent.

    Example:
        uniq([1, 2, 1, 3, 1, 4])        # [1, 2, 3, 4]
        uniq([1, 1, 2, 2, 3], True)     # [1, 2, 3]
    """
    iterator = iterator or identity
    results: list[Any] = []
    seen: set[tuple[type, Any]] = set()
    seen_unhashable: list[Any] = []

    def visit(item: Any, index: int, seq: Sequence[Any]) -> None:
        if is_sorted and index > 0 and strict_equal(item, seq[index - 1]):
            return
        iterated = iterator(item)
        key = seen_key(iterated)
        if key is None:
            if any(strict_equal(iterated, prior) for prior in seen_unhashable):
                return
            seen_unhashable.append(iterated)
        elif key in seen:
            return
        else:
            seen.add(key)
        results.append(item)

    each(sequence, visit)
    return results


def index_of(sequence: Sequence[Any], target: Any) -> int:
    """Index of the first item strictly equal to ``target``, or -1."""
    result = -1

    def visit(item: Any, index: int, _seq: Any) -> None:
        nonlocal result
        if result == -1 and strict_equal(item, target):
            result = index

    each(sequence, visit)
    return result


def pluck(collection: Any, key: str) -> list[Any]:
    """Read field ``key`` from every item; missing fields give None."""
    return map(collection, FieldKey(key))


def invoke(
    collection: Any,
    method: str | Callable[..., Any],
    args: Sequence[Any] = (),
) -> list[Any]:
    """
    Call a method on every item and collect the results.

    A string names a method looked up on each item and called with ``args``.
    A callable is called as ``method(item, *args)``.
    """
    if isinstance(method, str):
        name = method
        return map(collection, lambda item: getattr(item, name)(*args))
    if callable(method):
        return map(collection, lambda item: method(item, *args))
    raise CallerContractViolation(
        f"expected a method name or a callable, got {type(method).__name__}"
    )
