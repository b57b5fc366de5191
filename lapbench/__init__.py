"""Microbenchmarking harness.

Measures the mean running time of a user-supplied operation over repeated
runs, excluding the cost of its prepare and verify steps.
"""

from lapbench.benchmark import Benchmark, copy_input, get_warmup_runs
from lapbench.errors import (
    BenchmarkError,
    InvalidArgumentError,
    NoLapsRecordedError,
    TimerStateError,
)
from lapbench.report import BenchmarkResult
from lapbench.timer import Timer

__all__ = [
    "Benchmark",
    "BenchmarkError",
    "BenchmarkResult",
    "InvalidArgumentError",
    "NoLapsRecordedError",
    "Timer",
    "TimerStateError",
    "copy_input",
    "get_warmup_runs",
]
