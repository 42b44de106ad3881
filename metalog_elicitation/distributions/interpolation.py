"""Monotone interpolation fallback with logistic boundary extrapolation.

Used when no metalog order is feasible or fit quality is poor. The original
points are kept as-is; a logistic curve seeded on three of them supplies the
values at x = 0 and x = 1 so the rendered curve spans the whole time axis.
Only the point sequence is produced, there is no continuous evaluation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from scipy.special import expit

from metalog_elicitation.config.settings import DEFAULT_SETTINGS, FitSettings
from metalog_elicitation.distributions.models import InterpolationCurve
from metalog_elicitation.exceptions import LogisticFitError
from metalog_elicitation.schema.points import DataPoint, sort_by_probability
from metalog_elicitation.utils.logging import get_logger

log = get_logger(__name__, component="interpolation")


@dataclass(frozen=True, slots=True)
class LogisticCurve:
    """L / (1 + exp(-k (x - x0))), clamped to [0.001, 0.999] on evaluation."""

    L: float
    k: float
    x0: float

    def __call__(self, x: float, settings: FitSettings = DEFAULT_SETTINGS) -> float:
        value = self.L * float(expit(self.k * (x - self.x0)))
        return max(settings.clamp_low, min(settings.clamp_high, value))


def select_seed_points(points: Sequence[DataPoint]) -> List[DataPoint]:
    """Three points for the logistic fit: a synthesized midpoint for two, else first/middle/last."""

    if len(points) < 2:
        raise LogisticFitError("Need at least 2 points to seed a logistic curve")
    if len(points) == 2:
        first, last = points
        midpoint = DataPoint(x=(first.x + last.x) / 2, y=(first.y + last.y) / 2)
        return [first, midpoint, last]
    if len(points) == 3:
        return list(points)
    return [points[0], points[len(points) // 2], points[-1]]


def fit_logistic(points: Sequence[DataPoint], settings: FitSettings = DEFAULT_SETTINGS) -> LogisticCurve:
    """Linearize ln(L/y − 1) = −k·x + k·x0 with L = headroom · max(y) and regress."""

    if len(points) != 3:
        raise LogisticFitError("Need exactly 3 points for logistic fitting")

    L = max(p.y for p in points) * settings.logistic_headroom
    xs: List[float] = []
    ts: List[float] = []
    for p in points:
        if p.y <= 0:
            raise LogisticFitError(f"Invalid ratio for logistic transform: L={L}, y={p.y}")
        ratio = L / p.y - 1
        if ratio <= 0:
            raise LogisticFitError(f"Invalid ratio for logistic transform: L={L}, y={p.y}")
        xs.append(p.x)
        ts.append(math.log(ratio))

    n = len(xs)
    sum_x = sum(xs)
    sum_t = sum(ts)
    sum_xt = sum(x * t for x, t in zip(xs, ts))
    sum_x2 = sum(x * x for x in xs)
    denominator = n * sum_x2 - sum_x * sum_x
    if abs(denominator) < 1e-12:
        raise LogisticFitError("Degenerate logistic regression: all seed points share one time")
    slope = (n * sum_xt - sum_x * sum_t) / denominator
    intercept = (sum_t - slope * sum_x) / n
    k = -slope
    if abs(k) < 1e-12:
        raise LogisticFitError("Degenerate logistic regression: zero growth rate")
    x0 = intercept / k
    if not (math.isfinite(k) and math.isfinite(x0)):
        raise LogisticFitError(f"Non-finite logistic parameters: k={k}, x0={x0}")

    log.debug(f"Logistic parameters: k={k:.4f}, x0={x0:.4f}, L={L:.4f}")
    return LogisticCurve(L=L, k=k, x0=x0)


def interpolate(points: Sequence[DataPoint], settings: FitSettings = DEFAULT_SETTINGS) -> InterpolationCurve:
    """Sort by probability and add boundary points at x = 0 and x = 1 when missing.

    Boundary values come from the logistic fit, clamped so the left boundary never
    exceeds the first point and the right boundary never falls below the last. If
    the logistic fit fails the nearest real point's y is copied instead.
    """

    ordered = sort_by_probability(points)
    extended = list(ordered)
    if len(ordered) < 2:
        return InterpolationCurve(points=tuple(extended), original_data=tuple(points))

    first, last = ordered[0], ordered[-1]
    needs_left = first.x > settings.boundary_gap
    needs_right = last.x < 1 - settings.boundary_gap

    try:
        logistic = fit_logistic(select_seed_points(ordered), settings)
        left_y = min(logistic(0.0, settings), first.y)
        right_y = max(logistic(1.0, settings), last.y)
    except LogisticFitError as exc:
        log.warning(f"Logistic fitting failed, using flat extrapolation: {exc}")
        left_y, right_y = first.y, last.y

    if needs_left:
        extended.insert(0, DataPoint(x=0.0, y=left_y))
    if needs_right:
        extended.append(DataPoint(x=1.0, y=right_y))

    log.debug(f"Extended {len(ordered)} points to {len(extended)} with boundary extrapolation")
    return InterpolationCurve(points=tuple(extended), original_data=tuple(points))


__all__ = ["LogisticCurve", "fit_logistic", "interpolate", "select_seed_points"]
