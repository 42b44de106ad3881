"""Entry points for UI collaborators: fit, evaluate, sample and describe distributions."""

from __future__ import annotations

import math
import time
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from metalog_elicitation.config.settings import DEFAULT_SETTINGS, FitSettings
from metalog_elicitation.distributions.metalog.fit import evaluate_metalog
from metalog_elicitation.distributions.models import (
    INTERPOLATION_STATUS,
    Distribution,
    InterpolationDistribution,
    MetalogDistribution,
)
from metalog_elicitation.distributions.smart_fitter import fit_smart
from metalog_elicitation.exceptions import UnsupportedOperationError
from metalog_elicitation.schema.points import DataPoint, points_from_records, points_to_frame
from metalog_elicitation.utils.logging import get_logger

log = get_logger(__name__, component="distribution")

# Clamp used while extending sampled metalog curves past the evaluation clamp.
_EXTENSION_CLAMP = 1e-12
_EXTENSION_MIN_Y = 1e-10
_EXTENSION_MAX_Y = 0.999999
_EXTENSION_CONVERGED = 1e-9


def fit_distribution(points: Iterable[Any], settings: FitSettings = DEFAULT_SETTINGS) -> Distribution:
    """Fit a Distribution to points in [0,1]² (DataPoints, mappings, pairs or a DataFrame).

    Raises InvalidInputError when the points cannot describe a fittable CDF.
    """

    data = points_from_records(points)
    start = time.perf_counter()
    distribution = fit_smart(data, settings)
    duration_ms = (time.perf_counter() - start) * 1000.0
    extra: Dict[str, Any] = {
        "num_points": len(data),
        "distribution_type": distribution.kind,
        "duration_ms": round(duration_ms, 3),
    }
    if isinstance(distribution, MetalogDistribution):
        extra["num_terms"] = distribution.metalog.num_terms
        log.info("Metalog fitting successful", extra=extra)
    else:
        log.info("Using interpolation fallback", extra=extra)
    return distribution


def evaluate(distribution: Distribution, y: float, settings: FitSettings = DEFAULT_SETTINGS) -> float:
    """Quantile (normalized time) at cumulative probability ``y``.

    Interpolation curves are point-only and raise UnsupportedOperationError.
    """

    if isinstance(distribution, MetalogDistribution):
        return evaluate_metalog(distribution.metalog, y, settings)
    if isinstance(distribution, InterpolationDistribution):
        raise UnsupportedOperationError(
            "Interpolation evaluation not implemented - use the discrete points from get_plot_data"
        )
    raise TypeError(f"Unknown distribution type: {type(distribution).__name__}")


def _extend_metalog(
    distribution: MetalogDistribution,
    start: DataPoint,
    settings: FitSettings,
    toward_zero: bool,
) -> List[DataPoint]:
    wide = replace(settings, clamp_low=_EXTENSION_CLAMP, clamp_high=1 - _EXTENSION_CLAMP)
    extension: List[DataPoint] = []
    y, prev_x = start.y, start.x
    while (y > _EXTENSION_MIN_Y) if toward_zero else (y < _EXTENSION_MAX_Y):
        y = y / 2 if toward_zero else (1 + y) / 2
        x = evaluate_metalog(distribution.metalog, y, wide)
        if not math.isfinite(x) or x < 0 or x > 1:
            break
        extension.append(DataPoint(x=x, y=y))
        if abs(x - prev_x) < _EXTENSION_CONVERGED:
            break
        prev_x = x
    return extension


def _sample_metalog(distribution: MetalogDistribution, num_points: int, settings: FitSettings) -> List[DataPoint]:
    lo, hi = settings.clamp_low, settings.clamp_high
    samples: List[DataPoint] = []
    for i in range(num_points + 1):
        y = lo + (hi - lo) * (i / num_points)
        x = evaluate_metalog(distribution.metalog, y, settings)
        if math.isfinite(x) and 0 <= x <= 1:
            samples.append(DataPoint(x=x, y=y))

    if settings.extend_to_bounds and samples:
        head = _extend_metalog(distribution, samples[0], settings, toward_zero=True)
        tail = _extend_metalog(distribution, samples[-1], settings, toward_zero=False)
        samples = head[::-1] + samples + tail
    return samples


def sample(distribution: Distribution, num_points: int, settings: FitSettings = DEFAULT_SETTINGS) -> List[DataPoint]:
    """Evenly spaced-in-y samples for a metalog; the stored points for an interpolation."""

    if num_points <= 0:
        raise ValueError(f"num_points must be > 0, got {num_points}")
    if isinstance(distribution, MetalogDistribution):
        return _sample_metalog(distribution, num_points, settings)
    if isinstance(distribution, InterpolationDistribution):
        return list(distribution.curve.points)
    raise TypeError(f"Unknown distribution type: {type(distribution).__name__}")


def get_plot_data(
    distribution: Distribution,
    num_points: Optional[int] = None,
    settings: FitSettings = DEFAULT_SETTINGS,
) -> List[DataPoint]:
    return sample(distribution, num_points or settings.default_plot_points, settings)


def plot_data_frame(
    distribution: Distribution,
    num_points: Optional[int] = None,
    settings: FitSettings = DEFAULT_SETTINGS,
) -> pd.DataFrame:
    return points_to_frame(get_plot_data(distribution, num_points, settings))


def get_distribution_info(distribution: Distribution) -> Dict[str, Any]:
    """Diagnostic metadata: variant, order/coefficients or point counts, and the fit attempts."""

    attempts = [a.to_dict() for a in distribution.attempts]
    if isinstance(distribution, MetalogDistribution):
        info: Dict[str, Any] = {
            "type": "metalog",
            "status": "metalog",
            "num_terms": distribution.metalog.num_terms,
            "num_data_points": len(distribution.data_points),
            "coefficients": list(distribution.metalog.coefficients),
            "attempts": attempts,
        }
        if distribution.quality is not None:
            info["max_error"] = distribution.quality.max_error
        return info
    if isinstance(distribution, InterpolationDistribution):
        return {
            "type": "interpolation",
            "status": INTERPOLATION_STATUS,
            "num_points": len(distribution.curve.points),
            "num_data_points": len(distribution.curve.original_data),
            "fallback_reason": distribution.fallback_reason,
            "attempts": attempts,
        }
    return {"type": "unknown"}


__all__ = [
    "evaluate",
    "fit_distribution",
    "get_distribution_info",
    "get_plot_data",
    "plot_data_frame",
    "sample",
]
