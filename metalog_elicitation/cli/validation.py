"""CLI validation helpers."""

from __future__ import annotations

from typing import Optional

from metalog_elicitation.exceptions import ConfigValidationError

TIME_UNITS = {"normalized", "years"}


def require_positive(name: str, value: int | float) -> None:
    if value <= 0:
        raise ConfigValidationError(f"{name} must be > 0")


def validate_time_units(time_units: str) -> str:
    normalized = time_units.lower()
    if normalized not in TIME_UNITS:
        raise ConfigValidationError(f"time_units must be one of {sorted(TIME_UNITS)}")
    return normalized


def validate_sample_inputs(*, num_points: int, time_units: str) -> None:
    require_positive("points", num_points)
    validate_time_units(time_units)


def validate_quality_threshold(value: Optional[float]) -> None:
    if value is not None and not (0.0 < value < 1.0):
        raise ConfigValidationError("quality_threshold must be between 0 and 1")


__all__ = [
    "TIME_UNITS",
    "require_positive",
    "validate_quality_threshold",
    "validate_sample_inputs",
    "validate_time_units",
]
