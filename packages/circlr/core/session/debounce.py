"""Coalescing of rapid parameter input.

Slider drags and key repeats produce a burst of updates; only the state
after the burst should reach the engine. The debouncer holds the latest
value until no new value arrived for the quiet period. It never starts a
timer: the owner calls ``poll`` with the current time.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_QUIET_PERIOD_S = 0.2


class Debouncer(Generic[T]):
    """Latest-value-wins queue with a quiet period.

    Args:
        quiet_period_s: Time without new input before a value is released.
        clock: Monotonic clock in seconds, used when no ``now`` is passed.
        merge: Optional ``merge(pending, newer)``; by default the newer
            value replaces the pending one.

    Example:
        >>> debouncer = Debouncer(quiet_period_s=0.2)
        >>> debouncer.submit("a", now=0.0)
        >>> debouncer.submit("b", now=0.1)
        >>> debouncer.poll(now=0.25) is None
        True
        >>> debouncer.poll(now=0.35)
        'b'
    """

    def __init__(
        self,
        quiet_period_s: float = DEFAULT_QUIET_PERIOD_S,
        clock: Callable[[], float] = time.monotonic,
        merge: Callable[[T, T], T] | None = None,
    ) -> None:
        if quiet_period_s < 0:
            raise ValueError(f"quiet_period_s must be >= 0, got {quiet_period_s}")
        self.quiet_period_s = quiet_period_s
        self._clock = clock
        self._merge = merge
        self._pending: T | None = None
        self._has_pending = False
        self._deadline = 0.0

    @property
    def pending(self) -> T | None:
        """Value waiting to be released, if any."""
        return self._pending if self._has_pending else None

    def submit(self, value: T, now: float | None = None) -> None:
        """Queue ``value`` and restart the quiet period."""
        now = self._clock() if now is None else now
        if self._has_pending and self._merge is not None:
            value = self._merge(self._pending, value)  # type: ignore[arg-type]
        self._pending = value
        self._has_pending = True
        self._deadline = now + self.quiet_period_s

    def poll(self, now: float | None = None) -> T | None:
        """Release the pending value once the quiet period has elapsed."""
        if not self._has_pending:
            return None
        now = self._clock() if now is None else now
        if now < self._deadline:
            return None
        return self.flush()

    def flush(self) -> T | None:
        """Release the pending value immediately."""
        value = self._pending if self._has_pending else None
        self.cancel()
        return value

    def cancel(self) -> None:
        """Drop the pending value."""
        self._pending = None
        self._has_pending = False
