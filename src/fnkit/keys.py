"""
Iteratee variants.

Several primitives accept either a field name or a callable. The choice is
resolved once per call into ``FieldKey`` or ``Extractor``; the per-item loop
then just calls the resolved object.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from .errors import CallerContractViolation


@dataclass(frozen=True)
class FieldKey:
    """Reads a named field: ``item[name]`` for mappings, else an attribute."""
    name: str

    def __call__(self, item: Any) -> Any:
        if isinstance(item, Mapping):
            return item.get(self.name)
        return getattr(item, self.name, None)


@dataclass(frozen=True)
class Extractor:
    """Wraps a caller-supplied one-argument callable."""
    fn: Callable[[Any], Any]

    def __call__(self, item: Any) -> Any:
        return self.fn(item)


Iteratee = FieldKey | Extractor


def as_iteratee(value: Any, default: Callable[[Any], Any] | None = None) -> Iteratee:
    """
    Resolve a field name, callable or None into an iteratee.

    Args:
        value: A field name, a callable, or None.
        default: Callable used when ``value`` is None. Without one, None is
                 rejected.
    """
    if isinstance(value, (FieldKey, Extractor)):
        return value
    if isinstance(value, str):
        return FieldKey(value)
    if callable(value):
        return Extractor(value)
    if value is None and default is not None:
        return Extractor(default)
    raise CallerContractViolation(
        f"expected a field name or a callable, got {type(value).__name__}"
    )
