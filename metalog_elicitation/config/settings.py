"""Numeric calibration settings for metalog fitting and interpolation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields

from metalog_elicitation.exceptions import ConfigValidationError


@dataclass(frozen=True, slots=True)
class FitSettings:
    """Tolerances and constants shared by the fitting core.

    ``quality_threshold`` and ``slope_tolerance`` are empirical calibration knobs;
    the defaults reproduce the behaviour experts were surveyed with.
    """

    clamp_low: float = 0.001
    clamp_high: float = 0.999
    derivative_step: float = 1e-8
    pivot_epsilon: float = 1e-12
    k3_ratio_bound: float = 1.66711
    slope_tolerance: float = 1e-10
    quality_threshold: float = 0.025
    root_grid_intervals: int = 100
    bisection_tolerance: float = 1e-10
    bisection_max_iter: int = 50
    logistic_headroom: float = 1.1
    boundary_gap: float = 0.001
    default_plot_points: int = 200
    extend_to_bounds: bool = True

    def __post_init__(self) -> None:
        if not (0.0 < self.clamp_low < 0.5 < self.clamp_high < 1.0):
            raise ConfigValidationError("clamp bounds must satisfy 0 < clamp_low < 0.5 < clamp_high < 1")
        for name in ("derivative_step", "pivot_epsilon", "bisection_tolerance"):
            if getattr(self, name) <= 0:
                raise ConfigValidationError(f"{name} must be > 0")
        if self.k3_ratio_bound <= 0:
            raise ConfigValidationError("k3_ratio_bound must be > 0")
        if self.slope_tolerance < 0:
            raise ConfigValidationError("slope_tolerance must be >= 0")
        if not (0.0 < self.quality_threshold < 1.0):
            raise ConfigValidationError("quality_threshold must be in (0, 1)")
        if self.root_grid_intervals < 2:
            raise ConfigValidationError("root_grid_intervals must be >= 2")
        if self.bisection_max_iter <= 0:
            raise ConfigValidationError("bisection_max_iter must be > 0")
        if self.logistic_headroom <= 1.0:
            raise ConfigValidationError("logistic_headroom must be > 1")
        if not (0.0 <= self.boundary_gap < 0.5):
            raise ConfigValidationError("boundary_gap must be in [0, 0.5)")
        if self.default_plot_points <= 0:
            raise ConfigValidationError("default_plot_points must be > 0")

    @classmethod
    def from_dict(cls, data: dict) -> "FitSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(f"Unknown settings: {sorted(unknown)}")
        try:
            return cls(**data)
        except TypeError as exc:
            raise ConfigValidationError(str(exc)) from exc

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_SETTINGS = FitSettings()


__all__ = ["DEFAULT_SETTINGS", "FitSettings"]
