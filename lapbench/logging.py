"""Logging setup that tags records with the benchmark run in progress.

The harness itself only emits records through ``logging.getLogger``. This
module is the optional process-wide setup used by the CLI: a single stdout
handler whose records carry the benchmark description and the phase
(``warmup`` or ``timed``) they were logged in.
"""

from __future__ import annotations

import contextvars
import dataclasses
import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True, slots=True)
class RunContext:
    """Benchmark and phase a log record belongs to."""

    benchmark: str | None = None
    phase: str | None = None

    def label(self) -> str:
        """``benchmark/phase``, either part omitted when unset."""
        return "/".join(part for part in (self.benchmark, self.phase) if part)


_RUN_CONTEXT: contextvars.ContextVar[RunContext] = contextvars.ContextVar(
    "lapbench_run_context",
    default=RunContext(),
)


def get_run_context() -> RunContext:
    return _RUN_CONTEXT.get()


class RunContextFilter(logging.Filter):
    """Copy the active run context onto each ``LogRecord``."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = get_run_context()
        record.benchmark = context.benchmark
        record.phase = context.phase
        record.run_label = context.label()
        return True


class _TextFormatter(logging.Formatter):
    """Plain text; the run label is bracketed in only while a run is active."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        label = getattr(record, "run_label", "")
        return f"[{label}] {line}" if label else line


class _JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object | None] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "benchmark": getattr(record, "benchmark", None),
            "phase": getattr(record, "phase", None),
        }
        if record.exc_info is not None:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def setup_logging(level: int | str = logging.INFO, json_output: bool = False) -> None:
    """Replace the root logger's handlers with one run-aware stdout handler."""
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(_JsonFormatter() if json_output else _TextFormatter())
    handler.addFilter(RunContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)


@contextmanager
def run_scope(*, benchmark: str | None = None, phase: str | None = None) -> Iterator[None]:
    """Tag records logged inside the block; unset fields keep the outer value."""
    overrides = {"benchmark": benchmark, "phase": phase}
    updated = dataclasses.replace(
        get_run_context(),
        **{name: value for name, value in overrides.items() if value is not None},
    )
    token = _RUN_CONTEXT.set(updated)
    try:
        yield
    finally:
        _RUN_CONTEXT.reset(token)


__all__ = [
    "RunContext",
    "RunContextFilter",
    "get_run_context",
    "run_scope",
    "setup_logging",
]
