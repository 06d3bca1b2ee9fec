"""
Session countdown.

Time is only consumed while the timer runs (session active). Pausing
freezes the remaining budget; stopping freezes it for good. The clock is
injectable so tests can drive time by hand.
"""

from __future__ import annotations

import time
from collections.abc import Callable


class SessionTimer:
    """Pausable budget timer on a monotonic clock."""

    def __init__(
        self,
        budget_seconds: float | None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if budget_seconds is not None and budget_seconds <= 0:
            raise ValueError(f"time budget must be positive, got {budget_seconds}")
        self.budget_seconds = budget_seconds
        self._clock = clock
        self._consumed = 0.0
        self._running_since: float | None = None
        self._stopped = False

    @property
    def unbounded(self) -> bool:
        return self.budget_seconds is None

    @property
    def running(self) -> bool:
        return self._running_since is not None

    def start(self) -> None:
        if self._stopped or self.running:
            return
        self._running_since = self._clock()

    def pause(self) -> None:
        if self._running_since is None:
            return
        self._consumed += self._clock() - self._running_since
        self._running_since = None

    def resume(self) -> None:
        self.start()

    def stop(self) -> None:
        """Freeze permanently; an exhausted budget reads exactly zero."""
        self.pause()
        self._stopped = True
        if self.budget_seconds is not None:
            self._consumed = min(self._consumed, self.budget_seconds)

    def active_elapsed(self) -> float:
        """Seconds spent running so far."""
        elapsed = self._consumed
        if self._running_since is not None:
            elapsed += self._clock() - self._running_since
        return elapsed

    def remaining(self) -> float | None:
        """Seconds left, never negative; None for an unbounded budget."""
        if self.budget_seconds is None:
            return None
        return max(0.0, self.budget_seconds - self.active_elapsed())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0


def format_time(seconds: float | None) -> str:
    """HH:MM:SS, or '--:--:--' for no limit."""
    if seconds is None:
        return "--:--:--"
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
