"""Exception taxonomy for the benchmark harness."""

from __future__ import annotations


class BenchmarkError(Exception):
    """Base class for errors raised by the harness itself."""


class InvalidArgumentError(BenchmarkError, ValueError):
    """Raised when a benchmark or timer is given an unusable argument."""


class NoLapsRecordedError(BenchmarkError, ZeroDivisionError):
    """Raised when a mean is requested before any lap has been recorded."""


class TimerStateError(BenchmarkError, RuntimeError):
    """Raised when a timer transition is invalid for its current state.

    These indicate a defect in the calling code; the timer never corrects its
    own state because that would corrupt the elapsed-time accounting.
    """

    def __init__(self, operation: str, running: bool) -> None:
        self.operation = operation
        self.running = running
        state = "running" if running else "paused"
        super().__init__(f"cannot {operation}: timer is {state}")


__all__ = [
    "BenchmarkError",
    "InvalidArgumentError",
    "NoLapsRecordedError",
    "TimerStateError",
]
