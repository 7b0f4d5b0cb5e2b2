"""
Epoch-millisecond time helpers.

Grace windows are compared against integer millisecond timestamps. These
helpers keep the wall clock behind one function so tests can inject a
deterministic clock instead.
"""

import time
from typing import Callable, Optional

NowFn = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def resolve_now(now: Optional[int] = None, now_fn: Optional[NowFn] = None) -> int:
    """
    Resolve the effective `now` for a query.

    Args:
        now: Explicit timestamp supplied by the caller
        now_fn: Injected clock, used when `now` is not supplied

    Returns:
        `now` if given, else `now_fn()`, else the wall clock
    """
    if now is not None:
        return now

    if now_fn is not None:
        return now_fn()

    return now_ms()


def remaining_ms(until: int, now: int) -> int:
    """Milliseconds left before `until`, never negative."""
    return max(0, until - now)


def is_active(until: int, now: int) -> bool:
    """A window is active strictly before its expiry."""
    return now < until


class FakeClock:
    """Manually advanced millisecond clock for simulations and tests."""

    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.current = start_ms

    def __call__(self) -> int:
        return self.current

    def advance(self, delta_ms: int) -> int:
        self.current += delta_ms
        return self.current
