"""Stopwatch that accumulates time over discontiguous laps.

The timer only accumulates while it is running. ``repeat`` builds the
prepare → measure → verify protocol on top of it: the supplier, the
pre-function and the post-function all run with the clock paused, so only the
measured call contributes to the reported mean.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from types import TracebackType
from typing import TypeVar

from lapbench.errors import InvalidArgumentError, NoLapsRecordedError, TimerStateError

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

Clock = Callable[[], int]

_NANOS_PER_MILLI = 1_000_000


def to_millisecs(ticks: int) -> float:
    """Convert clock ticks (nanoseconds) to milliseconds."""
    return ticks / _NANOS_PER_MILLI


class Timer:
    """Monotonic stopwatch measured in integer nanosecond ticks."""

    def __init__(self, clock: Clock = time.perf_counter_ns) -> None:
        self._clock = clock
        self._ticks = 0
        self._laps = 0
        self._running = False
        self._mark = 0

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def laps(self) -> int:
        return self._laps

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Reset the accumulator and begin timing."""
        if self._running:
            raise TimerStateError("start", running=True)
        self._ticks = 0
        self._laps = 0
        self._begin()

    def resume(self) -> None:
        """Begin timing again without discarding accumulated time."""
        if self._running:
            raise TimerStateError("resume", running=True)
        self._begin()

    def pause(self) -> None:
        """Close the current lap and add its duration to the accumulator."""
        now = self._clock()
        if not self._running:
            raise TimerStateError("pause", running=False)
        self._ticks += now - self._mark
        self._laps += 1
        self._running = False

    def stop(self) -> float:
        """Pause if running and return the total elapsed time in milliseconds."""
        if self._running:
            self.pause()
        return to_millisecs(self._ticks)

    def millisecs(self) -> float:
        """Elapsed milliseconds so far, including a lap still in progress."""
        ticks = self._ticks
        if self._running:
            ticks += self._clock() - self._mark
        return to_millisecs(ticks)

    def mean_lap_time(self) -> float:
        """Mean duration of the completed laps in milliseconds."""
        if self._running:
            raise TimerStateError("compute mean lap time", running=True)
        if self._laps == 0:
            raise NoLapsRecordedError("no laps recorded: pause() has never been called")
        return to_millisecs(self._ticks) / self._laps

    def repeat(
        self,
        n: int,
        supplier: Callable[[], T],
        function: Callable[[T], U],
        pre: Callable[[T], T] | None = None,
        post: Callable[[U], object] | None = None,
    ) -> float:
        """Run ``function`` ``n`` times and return its mean time in milliseconds.

        Each iteration draws a fresh value from ``supplier`` and, when given,
        passes it through ``pre``. Only the call to ``function`` is timed; its
        result is handed to ``post``. Any exception aborts the whole loop.
        """
        if n < 1:
            raise InvalidArgumentError(f"repetitions must be at least 1, got {n}")
        if self._running:
            raise TimerStateError("repeat", running=True)

        logger.debug("repeat: %d runs", n)
        for _ in range(n):
            value = supplier()
            if pre is not None:
                value = pre(value)
            self.resume()
            try:
                result = function(value)
            finally:
                self.pause()
            if post is not None:
                post(result)
        return self.mean_lap_time()

    def _begin(self) -> None:
        self._running = True
        self._mark = self._clock()

    def __enter__(self) -> Timer:
        self.resume()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.pause()

    def __repr__(self) -> str:
        return f"Timer(ticks={self._ticks}, laps={self._laps}, running={self._running})"


__all__ = ["Clock", "Timer", "to_millisecs"]
