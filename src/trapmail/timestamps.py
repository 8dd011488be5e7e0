"""Unique microsecond timestamps for naming captured mail.

A mail's file name is derived from its timestamp and process ids, so two
captures in the same process must never observe the same timestamp. A coarse
system clock combined with back-to-back captures would otherwise collide.

Two strategies are provided:

* ``MonotonicTimestamps`` bumps the value past the previous one instead of
  waiting. This is the default.
* ``SleepingTimestamps`` waits until the clock itself has moved on by at
  least ``min_gap_us``, matching the classic "sleep a microsecond" approach.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol

import structlog

from trapmail.exceptions import ClockError

logger = structlog.get_logger()

Clock = Callable[[], int]


class TimestampSource(Protocol):
    """Anything that hands out unique microsecond timestamps."""

    def next(self) -> int: ...


def system_clock_us() -> int:
    """Return wall-clock microseconds since the UNIX epoch."""
    return time.time_ns() // 1000


class MonotonicTimestamps:
    """Strictly increasing timestamps without artificial delay."""

    def __init__(self, clock: Clock = system_clock_us) -> None:
        self._clock = clock
        self._last: int | None = None

    def next(self) -> int:
        """Return a timestamp greater than every one previously returned.

        Raises:
            ClockError: If the clock reports a time before the epoch.
        """
        now = _read(self._clock)
        if self._last is not None and now <= self._last:
            logger.debug("timestamp_bumped", clock_us=now, previous_us=self._last)
            now = self._last + 1
        self._last = now
        return now


class SleepingTimestamps:
    """Timestamps separated by a real elapsed gap.

    Args:
        clock: Source of microseconds since the epoch.
        sleep: Sleep function taking seconds.
        min_gap_us: Minimum distance from the previous timestamp.
    """

    def __init__(
        self,
        clock: Clock = system_clock_us,
        sleep: Callable[[float], None] = time.sleep,
        min_gap_us: int = 1,
    ) -> None:
        if min_gap_us < 1:
            raise ValueError("min_gap_us must be at least 1")
        self._clock = clock
        self._sleep = sleep
        self._min_gap_us = min_gap_us
        self._last: int | None = None

    def next(self) -> int:
        """Sleep until the clock has advanced far enough, then read it.

        Raises:
            ClockError: If the clock reports a time before the epoch.
        """
        self._sleep(self._min_gap_us / 1_000_000)
        now = _read(self._clock)
        while self._last is not None and now < self._last + self._min_gap_us:
            self._sleep((self._last + self._min_gap_us - now) / 1_000_000)
            now = _read(self._clock)
        self._last = now
        return now


def _read(clock: Clock) -> int:
    now = clock()
    if now < 0:
        raise ClockError("Got current time before 1970; is your clock broken?")
    return now


_default = MonotonicTimestamps()


def default_timestamps() -> MonotonicTimestamps:
    """Return the process-wide timestamp source."""
    return _default
