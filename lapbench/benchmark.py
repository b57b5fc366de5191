"""Named, reusable benchmark definitions.

A benchmark binds three user functions to the timer's repeat protocol:

1. ``prepare`` (optional) turns the supplied input into the argument that is
   measured. It runs with the clock stopped.
2. ``measure`` is the operation under study. It is assumed to work by side
   effect on its argument; its return value is ignored.
3. ``verify`` (optional) checks the argument after ``measure`` has run, again
   with the clock stopped. It is skipped during warmup.

``run`` hands the *same* input object to every iteration. When ``measure``
mutates its argument, pass a ``prepare`` that copies it (``list.copy``,
``copy_input``) so every iteration sees the original data.
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from lapbench.config import WarmupConfig
from lapbench.errors import InvalidArgumentError
from lapbench.logging import run_scope
from lapbench.report import BenchmarkResult
from lapbench.timer import Clock, Timer

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_warmup_runs(m: int, *, minimum: int = 2, maximum: int = 10, divisor: int = 10) -> int:
    """Number of warmup runs for ``m`` timed runs: ``m // divisor`` clamped."""
    return max(minimum, min(maximum, m // divisor))


def copy_input(value: T) -> T:
    """Prepare-function giving each iteration its own deep copy of the input."""
    return copy.deepcopy(value)


@dataclass(frozen=True, slots=True)
class Benchmark(Generic[T]):
    """Benchmark of ``measure`` with untimed ``prepare`` and ``verify`` steps."""

    description: str
    measure: Callable[[T], object]
    prepare: Callable[[T], T] | None = field(default=None, kw_only=True)
    verify: Callable[[T], object] | None = field(default=None, kw_only=True)
    warmup: WarmupConfig = field(default_factory=WarmupConfig, kw_only=True)
    clock: Clock = field(default=time.perf_counter_ns, kw_only=True)

    def __post_init__(self) -> None:
        if not self.description:
            raise InvalidArgumentError("description must not be empty")
        if not callable(self.measure):
            raise InvalidArgumentError("measure must be callable")
        for name in ("prepare", "verify"):
            function = getattr(self, name)
            if function is not None and not callable(function):
                raise InvalidArgumentError(f"{name} must be callable or None")

    def warmup_runs(self, m: int) -> int:
        return get_warmup_runs(
            m,
            minimum=self.warmup.minimum,
            maximum=self.warmup.maximum,
            divisor=self.warmup.divisor,
        )

    def run(self, value: T | None, m: int) -> float:
        """Run the benchmark ``m`` times on ``value``; return the mean in ms."""
        return self.run_from_supplier(self._constant_supplier(value), m)

    def run_from_supplier(self, supplier: Callable[[], T], m: int) -> float:
        """Run the benchmark ``m`` times on values drawn from ``supplier``.

        Returns the mean time of ``measure`` in milliseconds. A warmup pass
        (without ``verify``) runs first and its timing is discarded.
        """
        return self._timed_run(supplier, m).mean_ms

    def run_result(self, value: T | None, m: int) -> BenchmarkResult:
        return self._timed_run(self._constant_supplier(value), m)

    def measure_result(self, supplier: Callable[[], T], m: int) -> BenchmarkResult:
        return self._timed_run(supplier, m)

    def _constant_supplier(self, value: T | None) -> Callable[[], T]:
        if value is None and self.prepare is None:
            raise InvalidArgumentError(
                f"nothing to measure for {self.description!r}: no input and no prepare function"
            )
        return lambda: value  # type: ignore[return-value]

    def _measure_through(self, value: T) -> T:
        self.measure(value)
        return value

    def _timed_run(self, supplier: Callable[[], T], m: int) -> BenchmarkResult:
        if m < 1:
            raise InvalidArgumentError(f"repetitions must be at least 1, got {m}")
        if not callable(supplier):
            raise InvalidArgumentError("supplier must be callable")

        warmup_runs = self.warmup_runs(m)
        logger.info("Begin run: %s with %s runs", self.description, f"{m:,}")

        with run_scope(benchmark=self.description, phase="warmup"):
            if warmup_runs > 0:
                Timer(self.clock).repeat(warmup_runs, supplier, self._measure_through, self.prepare)

        with run_scope(benchmark=self.description, phase="timed"):
            mean_ms = Timer(self.clock).repeat(
                m, supplier, self._measure_through, self.prepare, self.verify
            )
            logger.debug("Mean time: %.6f ms", mean_ms)

        return BenchmarkResult(
            description=self.description,
            repetitions=m,
            warmup_runs=warmup_runs,
            mean_ms=mean_ms,
        )


__all__ = ["Benchmark", "copy_input", "get_warmup_runs"]
