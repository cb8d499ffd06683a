"""
Structural algorithms over sequences: zip, flatten, intersection, difference.

Multi-sequence operations take their inputs as one explicit list rather than
as varargs.
"""

from __future__ import annotations
from typing import Any, Iterator, Sequence

from .collection import is_nested_sequence
from .errors import CallerContractViolation
from .kernel import each
from .primitives import every, index_of, map, some


def zip(sequences: Sequence[Sequence[Any]]) -> list[tuple[Any, ...]]:
    """
    Group items that share an index into tuples.

    The result is as long as the longest input; shorter inputs are padded
    with None rather than truncated.

    Example:
        zip([["a", "b", "c", "d"], [1, 2, 3]])
        # [("a", 1), ("b", 2), ("c", 3), ("d", None)]
    """
    if not sequences:
        return []
    end = max(map(sequences, len))
    return [
        tuple(seq[i] if i < len(seq) else None for seq in sequences)
        for i in range(end)
    ]


def flatten(nested: Sequence[Any]) -> list[Any]:
    """
    Flatten arbitrarily nested lists and tuples, depth-first, left to right.

    Strings, mappings and other values are leaves. Inputs must be acyclic;
    nesting depth is limited only by memory, not by the recursion limit.

    Raises:
        CallerContractViolation: if ``nested`` itself is not a list or tuple.
    """
    if not is_nested_sequence(nested):
        raise CallerContractViolation(
            f"flatten expects a list or tuple, got {type(nested).__name__}"
        )
    results: list[Any] = []
    stack: list[Iterator[Any]] = [iter(nested)]

    while stack:
        for item in stack[-1]:
            if is_nested_sequence(item):
                stack.append(iter(item))
                break
            results.append(item)
        else:
            stack.pop()
    return results


def intersection(sequences: Sequence[Sequence[Any]]) -> list[Any]:
    """
    Items of the first sequence that appear in every sequence.

    Membership uses strict equality. Order follows the first sequence, and
    repeats in it are kept.
    """
    if not sequences:
        return []
    results: list[Any] = []

    def visit(item: Any, _index: int, _seq: Any) -> None:
        if every(sequences, lambda seq: index_of(seq, item) != -1):
            results.append(item)

    each(sequences[0], visit)
    return results


def difference(first: Sequence[Any], others: Sequence[Sequence[Any]]) -> list[Any]:
    """Items of ``first`` that appear in none of ``others``, in order."""
    results: list[Any] = []

    def visit(item: Any, _index: int, _seq: Any) -> None:
        if not some(others, lambda seq: index_of(seq, item) != -1):
            results.append(item)

    each(first, visit)
    return results
