"""
Ordering algorithms: key-extraction sort and shuffle.

Both copy their input; the caller's sequence is left as it was.
"""

from __future__ import annotations
import random
from typing import Any, Callable, Sequence, TypeVar

from .kernel import each
from .keys import as_iteratee
from .primitives import identity

T = TypeVar("T")


def sort_by(
    sequence: Sequence[T],
    iteratee: str | Callable[[T], Any] | None = None,
) -> list[T]:
    """
    Stable ascending sort by an extracted key.

    Args:
        sequence: Items to sort.
        iteratee: Field name (``item[name]`` / ``item.name``), a key
                  function, or None to sort the items themselves.

    Items whose key is None go last, in their original relative order,
    whatever the other keys are. Keys that cannot be compared with each
    other raise ``TypeError``.

    Example:
        sort_by([{"k": 2}, {"k": None}, {"k": 1}], "k")
        # [{"k": 1}, {"k": 2}, {"k": None}]
    """
    extract = as_iteratee(iteratee, default=identity)

    keyed: list[tuple[Any, T]] = []
    each(sequence, lambda item, _i, _s: keyed.append((extract(item), item)))

    # None keys compare equal to each other, so < is never applied to them.
    keyed.sort(key=lambda pair: (pair[0] is None, pair[0]))
    return [item for _, item in keyed]


def shuffle(sequence: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """
    Return a shuffled copy (Fisher-Yates).

    Args:
        sequence: Items to shuffle.
        rng: Random source; pass a seeded ``random.Random`` for a
             reproducible order.
    """
    rng = rng or random
    shuffled = list(sequence)
    for i in range(len(shuffled)):
        j = rng.randrange(i, len(shuffled))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
