"""Benchmark configuration and profile loading.

Handles:
- The immutable shared configuration applied to every benchmark in a run.
- Validating it before any benchmark code executes.
- Loading configuration from YAML profiles.
- Merging CLI options with profile values.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger("microbench")

DEFAULT_WARMUP = 10
DEFAULT_ITERATIONS = 100

_PROFILE_KEYS = ("name", "warmup", "iterations", "track_heap", "track_database")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ConfigurationError(ValueError):
    """The benchmark configuration cannot produce a valid result."""


class EmptySampleError(ConfigurationError):
    """Aggregation was attempted over zero samples."""


# ---------------------------------------------------------------------------
# BenchConfig
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchConfig:
    """Shared configuration for a benchmark run.

    Time metrics are always collected; heap and database tracking are
    opt-in families.  Instances are immutable, so a configuration
    captured at the start of a run cannot drift while it executes.
    """

    warmup: int = DEFAULT_WARMUP  # Unmeasured iterations before measurement
    iterations: int = DEFAULT_ITERATIONS  # Measured iterations
    track_heap: bool = False
    track_database: bool = False

    @property
    def total_iterations(self) -> int:
        """Total calls to ``run()`` per benchmark (warmup + measured)."""
        return self.warmup + self.iterations

    @property
    def families(self) -> tuple[str, ...]:
        """Names of the enabled metric families, time first."""
        enabled = ["time"]
        if self.track_heap:
            enabled.append("heap")
        if self.track_database:
            enabled.append("database")
        return tuple(enabled)

    def replace(self, **changes: Any) -> BenchConfig:
        """Return a copy with *changes* applied."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return dataclasses.asdict(self)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(config: BenchConfig) -> list[ValidationError]:
    """Validate a benchmark configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if not _is_count(config.iterations):
        errors.append(
            ValidationError(
                field="iterations",
                message=f"Iteration count must be an integer (got {config.iterations!r}).",
            )
        )
    elif config.iterations < 1:
        errors.append(
            ValidationError(
                field="iterations",
                message=f"Need at least 1 measured iteration (got {config.iterations}).",
            )
        )
    elif config.iterations < 3:
        errors.append(
            ValidationError(
                field="iterations",
                message=(
                    f"Only {config.iterations} measured iteration(s): "
                    f"min/max will say little about variance."
                ),
                severity="warning",
            )
        )

    if not _is_count(config.warmup):
        errors.append(
            ValidationError(
                field="warmup",
                message=f"Warmup count must be an integer (got {config.warmup!r}).",
            )
        )
    elif config.warmup < 0:
        errors.append(
            ValidationError(
                field="warmup",
                message=f"Warmup iterations cannot be negative (got {config.warmup}).",
            )
        )
    elif config.warmup == 0:
        errors.append(
            ValidationError(
                field="warmup",
                message="No warmup iterations: the first measured iteration may be an outlier.",
                severity="warning",
            )
        )

    for flag in ("track_heap", "track_database"):
        value = getattr(config, flag)
        if not isinstance(value, bool):
            errors.append(
                ValidationError(
                    field=flag,
                    message=f"{flag} must be true or false (got {value!r}).",
                )
            )

    return errors


def ensure_valid(config: BenchConfig, *, log_warnings: bool = True) -> BenchConfig:
    """Raise ConfigurationError if *config* has fatal errors.

    Warnings are logged unless *log_warnings* is False.  Returns
    *config* unchanged so the call can be chained.
    """
    errors = validate_config(config)
    fatal = [e for e in errors if e.severity == "error"]
    if log_warnings:
        for w in errors:
            if w.severity == "warning":
                log.warning("Config warning: %s: %s", w.field, w.message)
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise ConfigurationError("Invalid benchmark configuration:\n" + "\n".join(messages))
    return config


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a benchmark profile from a YAML file.

    Profile format::

        name: "parsers"
        warmup: 20
        iterations: 500
        track_heap: true
        track_database: false

    Returns:
        The parsed YAML as a dict.
    """
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    return data


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> BenchConfig:
    """Build a BenchConfig from a parsed YAML profile.

    CLI overrides that are not None take precedence over profile values.
    Unknown profile keys are logged and ignored.

    Args:
        profile_data: Parsed YAML profile dict.
        cli_overrides: CLI option values keyed by BenchConfig field name.
    """
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

    for key in profile_data:
        if key not in _PROFILE_KEYS:
            log.warning("Ignoring unknown profile key '%s'", key)

    def pick(key: str, default: Any) -> Any:
        if key in cli:
            return cli[key]
        return profile_data.get(key, default)

    return BenchConfig(
        warmup=pick("warmup", DEFAULT_WARMUP),
        iterations=pick("iterations", DEFAULT_ITERATIONS),
        track_heap=pick("track_heap", False),
        track_database=pick("track_database", False),
    )


def quick_config(config: BenchConfig) -> BenchConfig:
    """Apply quick mode settings for rapid iteration.

    No warmup and 5 measured iterations: useful to check that a
    benchmark file runs at all, not to draw conclusions.
    """
    return config.replace(warmup=0, iterations=5)
