from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WarmupConfig(BaseModel):
    """Bounds for the number of untimed warmup iterations.

    The warmup count is ``repetitions // divisor`` clamped into
    ``[minimum, maximum]``.
    """

    model_config = {"frozen": True}

    minimum: int = Field(default=2, ge=0)
    maximum: int = Field(default=10, ge=0)
    divisor: int = Field(default=10, ge=1)

    @model_validator(mode="after")
    def _validate_bounds(self) -> WarmupConfig:
        if self.maximum < self.minimum:
            raise ValueError("warmup.maximum must not be less than warmup.minimum")
        return self


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return normalized


class LapbenchSettings(BaseSettings):
    repetitions: int = Field(default=30, ge=1)
    warmup: WarmupConfig = Field(default_factory=WarmupConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    report_dir: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="LAPBENCH_",
        env_nested_delimiter="__",
        extra="ignore",
    )


def _coerce_env_value(value: str) -> object:
    parsed = yaml.safe_load(value)
    return value if parsed is None else parsed


def _set_nested(mapping: dict[str, object], path: list[str], value: object) -> None:
    current = mapping
    for key in path[:-1]:
        existing = current.get(key)
        if not isinstance(existing, dict):
            existing = {}
            current[key] = existing
        current = existing
    current[path[-1]] = value


def _apply_env_overrides(data: dict[str, object]) -> dict[str, object]:
    merged = dict(data)
    prefix = "LAPBENCH_"
    for key, raw_value in os.environ.items():
        if not key.startswith(prefix):
            continue
        path = key[len(prefix) :].lower().split("__")
        _set_nested(merged, path, _coerce_env_value(raw_value))
    return merged


def load_config(path: str | Path = "config/lapbench.yaml") -> LapbenchSettings:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")

    loaded = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(loaded, dict):
        raise ValueError("config file must contain a top-level mapping")

    raw = loaded.get("lapbench", loaded)
    if not isinstance(raw, dict):
        raise ValueError("lapbench config section must be a mapping")

    merged = _apply_env_overrides(raw)
    return LapbenchSettings.model_validate(merged)


__all__ = [
    "LapbenchSettings",
    "LoggingConfig",
    "WarmupConfig",
    "load_config",
]
