"""Configuration settings and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from statecheck.enums import Selection, ShrinkStrategy
from statecheck.errors import ConfigValidationError, ErrorContext


class CheckConfig(BaseSettings):
    """Configuration for a stateful check run."""

    model_config = SettingsConfigDict(
        env_prefix="STATECHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sequence generation
    max_length: int | None = Field(
        default=None, description="Fixed sequence length; None draws a bound from the size"
    )
    max_size: int = Field(default=100, description="Upper bound of the size ramp across trials")
    trials: int = Field(default=100, description="Sequences attempted per check")
    seed: int | None = Field(default=None, description="Base seed for reproducible runs")
    max_generation_retries: int = 100
    selection_weighting: Selection = Selection.UNIFORM

    # Shrinking
    shrink: bool = True
    shrink_strategy: ShrinkStrategy = ShrinkStrategy.DDMIN
    shrink_require_same_failure: bool = False
    max_shrink_replays: int = 10_000
    strict_teardown: bool = Field(
        default=False,
        description="Treat SUT teardown errors as inconclusive while shrinking",
    )

    @field_validator("max_length", mode="before")
    @classmethod
    def validate_max_length(cls, v: Any) -> Any:
        if v is not None and _as_int(v, "max_length") < 0:
            raise ConfigValidationError(
                message="max_length cannot be negative",
                field="max_length",
                value=v,
            )
        return v

    @field_validator("max_size", "trials", "max_generation_retries", "max_shrink_replays", mode="before")
    @classmethod
    def validate_positive(cls, v: Any, info: ValidationInfo) -> Any:
        if _as_int(v, info.field_name) < 1:
            raise ConfigValidationError(
                message=f"{info.field_name} must be at least 1",
                field=info.field_name,
                value=v,
                context=ErrorContext(extra={"minimum": 1}),
            )
        return v

    @field_validator("selection_weighting", mode="before")
    @classmethod
    def validate_selection(cls, v: Any) -> Any:
        if isinstance(v, Selection):
            return v
        valid = {s.value for s in Selection}
        if str(v).lower() not in valid:
            raise ConfigValidationError(
                message=f"Invalid selection_weighting: {v!r}. Valid: {sorted(valid)}",
                field="selection_weighting",
                value=v,
                context=ErrorContext(extra={"valid": sorted(valid)}),
            )
        return Selection(str(v).lower())

    @field_validator("shrink_strategy", mode="before")
    @classmethod
    def validate_shrink_strategy(cls, v: Any) -> Any:
        if isinstance(v, ShrinkStrategy):
            return v
        valid = {s.value for s in ShrinkStrategy}
        if str(v).lower() not in valid:
            raise ConfigValidationError(
                message=f"Invalid shrink_strategy: {v!r}. Valid: {sorted(valid)}",
                field="shrink_strategy",
                value=v,
                context=ErrorContext(extra={"valid": sorted(valid)}),
            )
        return ShrinkStrategy(str(v).lower())


def _as_int(v: Any, field: str | None) -> int:
    try:
        return int(v)
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(
            message=f"{field} must be an integer, got {v!r}",
            field=field,
            value=v,
            cause=e,
        ) from e


def load_config(config_path: str | Path | None = None) -> CheckConfig:
    """Load configuration from file and environment.

    Priority: env vars > config file > defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}
            if not isinstance(config_data, dict):
                raise ConfigValidationError(
                    message=f"{config_path} must contain a mapping of settings",
                    value=config_data,
                )

    env_overrides = _get_env_overrides()
    config_data.update(env_overrides)

    return CheckConfig(**config_data)


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        "STATECHECK_SEED": ("seed", int),
        "STATECHECK_TRIALS": ("trials", int),
        "STATECHECK_MAX_LENGTH": ("max_length", int),
        "STATECHECK_MAX_SIZE": ("max_size", int),
        "STATECHECK_SHRINK": ("shrink", lambda x: x.lower() in ("true", "1", "yes")),
        "STATECHECK_SHRINK_STRATEGY": "shrink_strategy",
        "STATECHECK_SELECTION_WEIGHTING": "selection_weighting",
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            if isinstance(config_key, tuple):
                key, converter = config_key
                overrides[key] = converter(value)
            else:
                overrides[config_key] = value

    return overrides
