"""Benchmark result records and JSON report files."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    """Outcome of one timed benchmark run."""

    description: str
    repetitions: int
    warmup_runs: int
    mean_ms: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "repetitions": self.repetitions,
            "warmup_runs": self.warmup_runs,
            "mean_ms": round(self.mean_ms, 6),
        }


def to_json(results: Iterable[BenchmarkResult]) -> str:
    return json.dumps(
        {
            "timestamp": datetime.now(UTC).isoformat(),
            "benchmarks": [r.to_dict() for r in results],
        },
        indent=2,
    )


def write_report(results: Iterable[BenchmarkResult], directory: str | Path = "reports") -> Path:
    """Write results to a dated JSON file in the given directory."""
    dir_path = Path(directory)
    dir_path.mkdir(parents=True, exist_ok=True)
    date_str = datetime.now(UTC).strftime("%Y-%m-%d")
    path = dir_path / f"benchmarks-{date_str}.json"
    path.write_text(to_json(results), encoding="utf-8")
    return path


__all__ = ["BenchmarkResult", "to_json", "write_report"]
