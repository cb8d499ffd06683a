"""
Function decorators that change when, or how often, a callable runs.

Each decorator returns a new callable owning its own private state (result
cache, call flag, timestamps); wrappers never share state. Deferred work is
scheduled on an asyncio event loop with ``call_later``; nothing blocks, and
scheduled calls cannot be cancelled.
"""

from __future__ import annotations
import asyncio
import functools
import json
import time
from typing import Any, Callable, Generic, Mapping, Protocol, Sequence, TypeVar

from .errors import CallerContractViolation
from .logger import get_logger

R = TypeVar("R")

logger = get_logger("decorators")

_PRIMITIVES = (bool, int, float, str)


class Scheduler(Protocol):
    """The slice of ``asyncio.AbstractEventLoop`` the decorators rely on."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Any:
        ...


def _check_fn(fn: Any) -> None:
    if not callable(fn):
        raise CallerContractViolation(f"expected a callable, got {type(fn).__name__}")


def _check_wait(wait: Any) -> None:
    if isinstance(wait, bool) or not isinstance(wait, (int, float)) or wait < 0:
        raise CallerContractViolation(f"wait must be a non-negative number, got {wait!r}")


class _Once(Generic[R]):
    """Wrapper that runs ``fn`` until one call succeeds, then replays that result."""

    def __init__(self, fn: Callable[..., R]):
        # fn may be another wrapper; its private state is not copied over.
        functools.update_wrapper(self, fn, updated=())
        self._fn = fn
        self._called = False
        self._result: R | None = None

    def __call__(self, *args: Any, **kwargs: Any) -> R:
        if not self._called:
            # Assigned before the flag so a raising call leaves us uncalled.
            self._result = self._fn(*args, **kwargs)
            self._called = True
        return self._result  # type: ignore[return-value]


def once(fn: Callable[..., R]) -> Callable[..., R]:
    """
    Return a wrapper that calls ``fn`` at most once.

    The first call's result is returned for every later call, whatever the
    arguments. If the first call raises, nothing is cached and the next call
    tries again.

    Example:
        init = once(connect)
        init("a")   # connects
        init("b")   # returns the first connection, connect not called
    """
    _check_fn(fn)
    return _Once(fn)


class _Memoized(Generic[R]):
    """Wrapper holding an append-only cache keyed by encoded arguments."""

    def __init__(self, fn: Callable[..., R]):
        functools.update_wrapper(self, fn, updated=())
        self._fn = fn
        self._cache: dict[str, R] = {}
        self._name = getattr(fn, "__name__", repr(fn))

    @staticmethod
    def _key(args: Sequence[Any], kwargs: Mapping[str, Any]) -> str:
        for value in (*args, *kwargs.values()):
            if value is not None and not isinstance(value, _PRIMITIVES):
                raise CallerContractViolation(
                    f"memoized arguments must be primitives, got {type(value).__name__}"
                )
        return json.dumps([list(args), kwargs], sort_keys=True)

    def __call__(self, *args: Any, **kwargs: Any) -> R:
        key = self._key(args, kwargs)
        if key in self._cache:
            return self._cache[key]
        logger.debug("memoize miss for %s: %s", self._name, key)
        result = self._fn(*args, **kwargs)
        self._cache[key] = result
        return result


def memoize(fn: Callable[..., R]) -> Callable[..., R]:
    """
    Cache ``fn``'s result per distinct argument list.

    Arguments must be None, bool, int, float or str; ``1``, ``1.0`` and
    ``True`` are distinct keys, and keyword order does not matter. The cache
    is never evicted. A call that raises caches nothing.

    Raises:
        CallerContractViolation: on a call with a non-primitive argument,
            before ``fn`` runs.
    """
    _check_fn(fn)
    return _Memoized(fn)


def delay(
    fn: Callable[..., Any],
    wait: float,
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
    *,
    loop: Scheduler | None = None,
) -> None:
    """
    Run ``fn(*args, **kwargs)`` once, at least ``wait`` seconds from now.

    The call is scheduled on ``loop`` (the running asyncio loop by default)
    and its result is discarded. No handle is returned.

    Raises:
        RuntimeError: if no loop is given and none is running.
    """
    _check_fn(fn)
    _check_wait(wait)
    loop = loop or asyncio.get_running_loop()
    loop.call_later(wait, functools.partial(fn, *args, **(kwargs or {})))
    logger.debug("delayed %s by %ss", getattr(fn, "__name__", fn), wait)


class _Throttled(Generic[R]):
    """
    Throttle state machine: idle, leading-fired, pending-trailing.

    ``_last_run`` is the start time of the most recent execution (leading or
    trailing); ``_pending`` holds the arguments for the scheduled trailing
    execution, or None when no timer is outstanding.
    """

    def __init__(
        self,
        fn: Callable[..., R],
        wait: float,
        clock: Callable[[], float],
        loop: Scheduler | None,
    ):
        functools.update_wrapper(self, fn, updated=())
        self._fn = fn
        self._wait = wait
        self._clock = clock
        self._loop = loop
        self._last_run: float | None = None
        self._result: R | None = None
        self._pending: tuple[tuple[Any, ...], dict[str, Any]] | None = None
        self._name = getattr(fn, "__name__", repr(fn))

    def __call__(self, *args: Any, **kwargs: Any) -> R | None:
        if self._pending is None and self._window_elapsed():
            logger.debug("throttle %s: leading call", self._name)
            self._last_run = self._clock()
            self._result = self._fn(*args, **kwargs)
            return self._result

        if self._pending is None:
            loop = self._loop or asyncio.get_running_loop()
            loop.call_later(self._wait, self._run_trailing)
            logger.debug("throttle %s: trailing call in %ss", self._name, self._wait)

        # Later calls in the window replace the trailing call's arguments.
        self._pending = (args, kwargs)
        return self._result

    def _window_elapsed(self) -> bool:
        return self._last_run is None or self._clock() - self._last_run > self._wait

    def _run_trailing(self) -> None:
        args, kwargs = self._pending  # type: ignore[misc]
        self._pending = None
        self._last_run = self._clock()
        logger.debug("throttle %s: trailing call fired", self._name)
        self._result = self._fn(*args, **kwargs)


def throttle(
    fn: Callable[..., R],
    wait: float,
    *,
    clock: Callable[[], float] | None = None,
    loop: Scheduler | None = None,
) -> Callable[..., R | None]:
    """
    Limit ``fn`` to one execution start per ``wait`` seconds.

    A call made when no trailing run is pending and more than ``wait``
    seconds have passed since the last run (or no run yet) executes
    immediately and returns its result. The first call inside the window
    schedules a single trailing run ``wait`` seconds later; further calls
    only update the arguments that trailing run will use. Throttled calls
    return the most recent result (None before any run).

    Args:
        fn: Function to throttle.
        wait: Window length in seconds.
        clock: Monotonic time source in seconds; defaults to
               ``time.monotonic``.
        loop: Where trailing runs are scheduled; defaults to the running
              asyncio loop at scheduling time.

    Example:
        save = throttle(write_file, 0.1)
        save(1)   # runs now
        save(2)   # schedules a trailing run
        save(3)   # trailing run will use 3
    """
    _check_fn(fn)
    _check_wait(wait)
    return _Throttled(fn, wait, clock or time.monotonic, loop)
