"""lapbench CLI entry point."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
import yaml

from lapbench.benchmark import Benchmark
from lapbench.config import LapbenchSettings, load_config
from lapbench.errors import BenchmarkError
from lapbench.logging import setup_logging
from lapbench.report import write_report

logger = logging.getLogger(__name__)


def _import_dotted(ref: str) -> tuple[Any, str, str]:
    """Import the longest importable module prefix of a dotted reference."""
    parts = ref.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            return importlib.import_module(module_name), module_name, ".".join(parts[split:])
        except ModuleNotFoundError as exc:
            # Only the prefix itself being absent means a shorter prefix may still import.
            if exc.name is None or not module_name.startswith(exc.name):
                raise click.BadParameter(f"cannot import module {module_name!r}: {exc}") from exc
        except ImportError as exc:
            raise click.BadParameter(f"cannot import module {module_name!r}: {exc}") from exc
    raise click.BadParameter(f"cannot import any module prefix of {ref!r}")


def resolve_callable(ref: str) -> Callable[..., Any]:
    """Import ``module:attr.path`` or ``module.attr.path`` and return the callable."""
    if ":" in ref:
        module_name, _, attr_path = ref.partition(":")
        if not module_name or not attr_path:
            raise click.BadParameter(f"expected 'module:attribute', got {ref!r}")
        try:
            target: Any = importlib.import_module(module_name)
        except ImportError as exc:
            raise click.BadParameter(f"cannot import module {module_name!r}: {exc}") from exc
    else:
        if "." not in ref.strip("."):
            raise click.BadParameter(f"expected 'module:attribute', got {ref!r}")
        target, module_name, attr_path = _import_dotted(ref)

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise click.BadParameter(f"{module_name!r} has no attribute {attr_path!r}") from exc

    if not callable(target):
        raise click.BadParameter(f"{ref!r} is not callable")
    return target


def _load_settings(config_path: Path | None) -> LapbenchSettings:
    if config_path is None:
        return LapbenchSettings()
    try:
        return load_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
def cli() -> None:
    """lapbench microbenchmark CLI."""


@cli.command("run")
@click.argument("target")
@click.option(
    "--prepare", "prepare_ref", default=None, help="Untimed function applied to the input (module:attr.path)."
)
@click.option(
    "--verify", "verify_ref", default=None, help="Untimed check run after each timed call (module:attr.path)."
)
@click.option("--input", "input_text", default=None, help="Input value, parsed as YAML.")
@click.option("--repetitions", "-n", type=int, default=None, help="Timed repetitions.")
@click.option("--description", default=None, help="Benchmark description (defaults to TARGET).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
)
@click.option(
    "--report-dir",
    type=click.Path(path_type=Path, file_okay=False, dir_okay=True),
    default=None,
)
@click.option("--json-logs", is_flag=True, default=False)
def run_command(
    target: str,
    prepare_ref: str | None,
    verify_ref: str | None,
    input_text: str | None,
    repetitions: int | None,
    description: str | None,
    config_path: Path | None,
    report_dir: Path | None,
    json_logs: bool,
) -> None:
    """Benchmark the callable TARGET (``module:attr.path`` or ``module.attr.path``)."""
    settings = _load_settings(config_path)
    setup_logging(
        level=settings.logging.level,
        json_output=json_logs or settings.logging.json_output,
    )

    benchmark: Benchmark[Any] = Benchmark(
        description=description or target,
        measure=resolve_callable(target),
        prepare=resolve_callable(prepare_ref) if prepare_ref else None,
        verify=resolve_callable(verify_ref) if verify_ref else None,
        warmup=settings.warmup,
    )
    try:
        value = yaml.safe_load(input_text) if input_text is not None else None
    except yaml.YAMLError as exc:
        raise click.BadParameter(str(exc), param_hint="--input") from exc

    m = repetitions if repetitions is not None else settings.repetitions

    try:
        result = benchmark.run_result(value, m)
    except BenchmarkError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Mean time: {result.mean_ms:.6f} ms")

    directory = report_dir or settings.report_dir
    if directory is not None:
        path = write_report([result], directory)
        logger.info("Report written to %s", path)
        click.echo(f"Report: {path}")


__all__ = ["cli", "resolve_callable"]


if __name__ == "__main__":
    cli()
