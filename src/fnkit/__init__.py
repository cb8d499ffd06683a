"""
fnkit: eager collection primitives and function decorators.

Provides an iteration kernel (each, reduce), combinators built on it, a few
structural algorithms over sequences, and decorators that change when a
function runs (once, memoize, delay, throttle).

Usage:
    from fnkit import each, reduce, map, filter, sort_by, flatten, throttle

    # Fold with or without a seed
    total = reduce([1, 2, 3], lambda acc, n: acc + n, 0)

    # Stable sort by field, None keys last
    people = sort_by(people, "age")

    # At most one call per 100ms, with a trailing call
    save = throttle(write_file, 0.1)
"""

from .errors import CallerContractViolation
from .collection import IndexedSequence, KeyedMapping, as_collection, strict_equal
from .keys import FieldKey, Extractor, as_iteratee
from .kernel import each, reduce
from .primitives import (
    identity,
    map,
    filter,
    reject,
    contains,
    every,
    some,
    uniq,
    index_of,
    pluck,
    invoke,
)
from .sort import sort_by, shuffle
from .structural import zip, flatten, intersection, difference
from .decorators import once, memoize, delay, throttle
from .logger import setup_logger

__version__ = "0.1.0"
__all__ = [
    # Kernel
    "each",
    "reduce",
    # Combinators
    "identity",
    "map",
    "filter",
    "reject",
    "contains",
    "every",
    "some",
    "uniq",
    "index_of",
    "pluck",
    "invoke",
    # Structural (built on combinators)
    "sort_by",
    "shuffle",
    "zip",
    "flatten",
    "intersection",
    "difference",
    # Decorators
    "once",
    "memoize",
    "delay",
    "throttle",
    # Types
    "IndexedSequence",
    "KeyedMapping",
    "FieldKey",
    "Extractor",
    "as_collection",
    "as_iteratee",
    "strict_equal",
    "CallerContractViolation",
    "setup_logger",
]
