from __future__ import annotations

import json
import logging

import pytest

from lapbench.logging import (
    RunContext,
    RunContextFilter,
    _JsonFormatter,
    _TextFormatter,
    get_run_context,
    run_scope,
    setup_logging,
)


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_run_context_filter_injects_fields() -> None:
    run_filter = RunContextFilter()
    record = _record()

    with run_scope(benchmark="sort", phase="timed"):
        assert run_filter.filter(record) is True

    assert record.benchmark == "sort"
    assert record.phase == "timed"


def test_run_scope_sets_and_clears_context() -> None:
    baseline = get_run_context()

    with run_scope(benchmark="bench-1", phase="warmup"):
        current = get_run_context()
        assert current.benchmark == "bench-1"
        assert current.phase == "warmup"

    assert get_run_context() == baseline


def test_run_scope_nested_inherits_and_restores() -> None:
    baseline = get_run_context()

    with run_scope(benchmark="outer"):
        outer = get_run_context()
        assert outer.benchmark == "outer"
        assert outer.phase is None

        with run_scope(phase="timed"):
            inner = get_run_context()
            assert inner.benchmark == "outer"
            assert inner.phase == "timed"

        assert get_run_context() == outer

    assert get_run_context() == baseline


def test_json_formatter_includes_context() -> None:
    record = _record("Begin run")
    with run_scope(benchmark="sort", phase="warmup"):
        RunContextFilter().filter(record)

    payload = json.loads(_JsonFormatter().format(record))
    assert payload["message"] == "Begin run"
    assert payload["level"] == "INFO"
    assert payload["benchmark"] == "sort"
    assert payload["phase"] == "warmup"


def test_setup_logging_installs_single_handler(capsys: pytest.CaptureFixture[str]) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_filters = list(root.filters)
    saved_level = root.level
    try:
        setup_logging(level="DEBUG", json_output=True)
        setup_logging(level="DEBUG", json_output=True)
        assert len(root.handlers) == 1

        with run_scope(benchmark="json-bench", phase="timed"):
            logging.getLogger("lapbench.test").info("emitted")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["logger"] == "lapbench.test"
        assert payload["benchmark"] == "json-bench"
    finally:
        root.handlers[:] = saved_handlers
        root.filters[:] = saved_filters
        root.setLevel(saved_level)


def test_run_context_label() -> None:
    assert RunContext().label() == ""
    assert RunContext(benchmark="sort").label() == "sort"
    assert RunContext(benchmark="sort", phase="timed").label() == "sort/timed"


def test_text_formatter_brackets_active_run() -> None:
    formatter = _TextFormatter()
    run_filter = RunContextFilter()

    outside = _record("idle")
    run_filter.filter(outside)
    assert not formatter.format(outside).startswith("[")

    inside = _record("busy")
    with run_scope(benchmark="sort", phase="warmup"):
        run_filter.filter(inside)
    line = formatter.format(inside)
    assert line.startswith("[sort/warmup] ")
    assert line.endswith("busy")


def test_setup_logging_filters_on_handler_only() -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        setup_logging()
        assert not any(isinstance(f, RunContextFilter) for f in root.filters)
        assert any(isinstance(f, RunContextFilter) for f in root.handlers[0].filters)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
