"""Tests for once, memoize, delay and throttle."""

import asyncio
import pytest
from fnkit import CallerContractViolation, delay, memoize, once, throttle


class FakeLoop:
    """Manual clock plus call_later queue, driven by advance()."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[tuple[float, int, object, tuple]] = []
        self._seq = 0

    def time(self) -> float:
        return self.now

    def call_later(self, delay, callback, *args):
        self._seq += 1
        self.timers.append((self.now + delay, self._seq, callback, args))

    def advance_to(self, when: float) -> None:
        while True:
            due = sorted(t for t in self.timers if t[0] <= when)
            if not due:
                break
            fire_at, seq, callback, args = due[0]
            self.timers.remove(due[0])
            self.now = fire_at
            callback(*args)
        self.now = when


class Recorder:
    def __init__(self, result=None):
        self.calls = []
        self.result = result

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        return self.result if self.result is not None else len(self.calls)


class TestOnce:
    def test_called_once_over_five_invocations(self):
        fn = Recorder()
        wrapped = once(fn)
        results = [wrapped(i, key=i) for i in range(5)]
        assert fn.calls == [((0,), {"key": 0})]
        assert results == [1, 1, 1, 1, 1]

    def test_none_result_is_cached(self):
        calls = []
        wrapped = once(lambda: calls.append(1))
        assert wrapped() is None
        assert wrapped() is None
        assert calls == [1]

    def test_failing_first_call_allows_retry(self):
        attempts = []

        def flaky(x):
            attempts.append(x)
            if len(attempts) == 1:
                raise ConnectionError("first try fails")
            return x * 2

        wrapped = once(flaky)
        with pytest.raises(ConnectionError):
            wrapped(1)
        assert wrapped(5) == 10
        assert wrapped(7) == 10
        assert attempts == [1, 5]

    def test_wrappers_do_not_share_state(self):
        a = once(lambda x: x)
        b = once(lambda x: x)
        assert a(1) == 1
        assert b(2) == 2

    def test_keeps_metadata(self):
        def compute():
            """Docs."""
            return 1

        wrapped = once(compute)
        assert wrapped.__name__ == "compute"
        assert wrapped.__doc__ == "Docs."

    def test_rejects_non_callable(self):
        with pytest.raises(CallerContractViolation):
            once(42)


class TestMemoize:
    def test_identical_arguments_call_once(self):
        fn = Recorder()
        wrapped = memoize(fn)
        assert wrapped(1, "a") == 1
        assert wrapped(1, "a") == 1
        assert len(fn.calls) == 1

    def test_distinct_arguments_call_again(self):
        fn = Recorder()
        wrapped = memoize(fn)
        wrapped(1)
        wrapped(2)
        wrapped(1)
        assert [args for args, _ in fn.calls] == [(1,), (2,)]

    def test_types_are_distinct_keys(self):
        fn = Recorder()
        wrapped = memoize(fn)
        results = [wrapped(1), wrapped(1.0), wrapped(True), wrapped("1"), wrapped(None)]
        assert results == [1, 2, 3, 4, 5]

    def test_keyword_order_does_not_matter(self):
        fn = Recorder()
        wrapped = memoize(fn)
        wrapped(a=1, b=2)
        wrapped(b=2, a=1)
        assert len(fn.calls) == 1

    def test_positional_and_keyword_are_distinct(self):
        fn = Recorder()
        wrapped = memoize(lambda a=None: fn(a))
        wrapped(1)
        wrapped(a=1)
        assert len(fn.calls) == 2

    def test_expensive_function(self):
        calls = []

        def fib(n):
            calls.append(n)
            return n if n < 2 else fast_fib(n - 1) + fast_fib(n - 2)

        fast_fib = memoize(fib)
        assert fast_fib(30) == 832040
        assert sorted(calls) == list(range(31))

    @pytest.mark.parametrize("bad", [[1], {"a": 1}, (1, 2), object()])
    def test_non_primitive_argument(self, bad):
        fn = Recorder()
        wrapped = memoize(fn)
        with pytest.raises(CallerContractViolation):
            wrapped(bad)
        with pytest.raises(CallerContractViolation):
            wrapped(key=bad)
        assert fn.calls == []

    def test_failure_is_not_cached(self):
        attempts = []

        def flaky(x):
            attempts.append(x)
            if len(attempts) == 1:
                raise ValueError("boom")
            return x

        wrapped = memoize(flaky)
        with pytest.raises(ValueError):
            wrapped(3)
        assert wrapped(3) == 3
        assert wrapped(3) == 3
        assert attempts == [3, 3]


class TestDelay:
    def test_runs_after_wait_with_arguments(self):
        loop = FakeLoop()
        fn = Recorder()
        assert delay(fn, 0.5, ["a", "b"], {"c": 1}, loop=loop) is None
        assert fn.calls == []
        loop.advance_to(0.4)
        assert fn.calls == []
        loop.advance_to(0.5)
        assert fn.calls == [(("a", "b"), {"c": 1})]

    def test_runs_once(self):
        loop = FakeLoop()
        fn = Recorder()
        delay(fn, 1.0, loop=loop)
        loop.advance_to(10.0)
        assert fn.calls == [((), {})]

    def test_negative_wait(self):
        with pytest.raises(CallerContractViolation):
            delay(Recorder(), -1, loop=FakeLoop())

    def test_without_running_loop(self):
        with pytest.raises(RuntimeError):
            delay(Recorder(), 0.1)

    @pytest.mark.asyncio
    async def test_on_running_loop(self):
        fn = Recorder()
        delay(fn, 0.01, (1, 2))
        assert fn.calls == []
        await asyncio.sleep(0.05)
        assert fn.calls == [((1, 2), {})]


class TestThrottle:
    def make(self, wait=1.0):
        loop = FakeLoop()
        fn = Recorder()
        return loop, fn, throttle(fn, wait, clock=loop.time, loop=loop)

    def test_three_calls_in_window_run_twice(self):
        loop, fn, wrapped = self.make()
        wrapped(1)
        loop.advance_to(0.25)
        wrapped(2)
        loop.advance_to(0.5)
        wrapped(3)
        assert len(fn.calls) == 1

        loop.advance_to(2.0)
        assert fn.calls == [((1,), {}), ((3,), {})]

    def test_leading_call_returns_result(self):
        loop, fn, wrapped = self.make()
        assert wrapped("x") == 1

    def test_throttled_calls_return_last_result(self):
        loop, fn, wrapped = self.make()
        assert wrapped() == 1
        assert wrapped() == 1
        assert wrapped() == 1
        loop.advance_to(1.0)
        assert len(fn.calls) == 2
        # window restarted by the trailing run
        assert wrapped() == 2

    def test_at_most_one_pending_timer(self):
        loop, fn, wrapped = self.make()
        for i in range(10):
            wrapped(i)
            assert len(loop.timers) <= 1
        assert len(loop.timers) == 1

    def test_trailing_receives_unpacked_arguments(self):
        loop, fn, wrapped = self.make()
        wrapped("lead")
        wrapped("a", 2, flag=True)
        loop.advance_to(1.0)
        assert fn.calls[-1] == (("a", 2), {"flag": True})

    def test_trailing_fires_wait_after_scheduling_call(self):
        loop, fn, wrapped = self.make()
        wrapped(1)
        loop.advance_to(0.5)
        wrapped(2)
        loop.advance_to(1.25)
        assert len(fn.calls) == 1
        loop.advance_to(1.5)
        assert len(fn.calls) == 2

    def test_leading_again_after_window(self):
        loop, fn, wrapped = self.make()
        wrapped(1)
        loop.advance_to(1.5)
        wrapped(2)
        assert fn.calls == [((1,), {}), ((2,), {})]
        assert loop.timers == []

    def test_exactly_wait_later_is_still_throttled(self):
        loop, fn, wrapped = self.make()
        wrapped(1)
        loop.advance_to(1.0)
        wrapped(2)
        assert len(fn.calls) == 1
        assert len(loop.timers) == 1

    def test_trailing_run_restarts_window(self):
        loop, fn, wrapped = self.make()
        wrapped(1)
        loop.advance_to(0.5)
        wrapped(2)
        loop.advance_to(1.5)
        assert len(fn.calls) == 2

        loop.advance_to(2.0)
        wrapped(3)
        assert len(fn.calls) == 2
        loop.advance_to(3.0)
        assert fn.calls[-1] == ((3,), {})

    def test_single_call_schedules_nothing(self):
        loop, fn, wrapped = self.make()
        wrapped(1)
        loop.advance_to(5.0)
        assert fn.calls == [((1,), {})]

    def test_failing_trailing_call_does_not_wedge(self):
        loop = FakeLoop()
        calls = []

        def fn(x):
            calls.append(x)
            if x == "bad":
                raise RuntimeError("trailing failure")
            return x

        wrapped = throttle(fn, 1.0, clock=loop.time, loop=loop)
        wrapped("ok")
        wrapped("bad")
        with pytest.raises(RuntimeError):
            loop.advance_to(1.0)

        loop.advance_to(2.5)
        assert wrapped("again") == "again"
        assert calls == ["ok", "bad", "again"]

    def test_wrappers_do_not_share_state(self):
        loop = FakeLoop()
        a_fn, b_fn = Recorder(), Recorder()
        a = throttle(a_fn, 1.0, clock=loop.time, loop=loop)
        b = throttle(b_fn, 1.0, clock=loop.time, loop=loop)
        a(1)
        b(1)
        assert len(a_fn.calls) == 1
        assert len(b_fn.calls) == 1

    def test_bad_wait(self):
        with pytest.raises(CallerContractViolation):
            throttle(Recorder(), "100")

    def test_scheduling_without_running_loop(self):
        fn = Recorder()
        wrapped = throttle(fn, 10.0)
        wrapped(1)
        with pytest.raises(RuntimeError):
            wrapped(2)
        assert len(fn.calls) == 1

    @pytest.mark.asyncio
    async def test_on_running_loop(self):
        fn = Recorder()
        wrapped = throttle(fn, 0.05)
        wrapped(1)
        wrapped(2)
        wrapped(3)
        assert len(fn.calls) == 1
        await asyncio.sleep(0.15)
        assert fn.calls == [((1,), {}), ((3,), {})]


class TestComposition:
    def test_memoize_over_once(self):
        calls = []
        wrapped = memoize(once(lambda x: calls.append(x) or x))
        assert wrapped(1) == 1
        assert wrapped(2) == 1
        assert wrapped(2) == 1
        assert calls == [1]

    def test_once_over_throttle(self):
        loop = FakeLoop()
        fn = Recorder()
        throttled = throttle(fn, 1.0, clock=loop.time, loop=loop)
        wrapped = once(throttled)
        assert wrapped.__wrapped__ is throttled
        assert wrapped(1) == 1
        assert wrapped(2) == 1

        # the inner throttle still owns its window
        throttled(3)
        assert len(loop.timers) == 1
        loop.advance_to(1.0)
        assert fn.calls == [((1,), {}), ((3,), {})]
        assert wrapped(4) == 1

    def test_memoize_over_memoize_keeps_separate_caches(self):
        fn = Recorder()
        inner = memoize(fn)
        outer = memoize(inner)
        assert outer._cache is not inner._cache
        assert outer._fn is inner

        outer(1)
        inner(2)
        outer(2)
        assert [args for args, _ in fn.calls] == [(1,), (2,)]

    def test_metadata_survives_stacking(self):
        def compute(x):
            """Docs."""
            return x

        wrapped = memoize(once(compute))
        assert wrapped.__name__ == "compute"
        assert wrapped.__doc__ == "Docs."
