"""Least-squares metalog fitting and quantile evaluation."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from metalog_elicitation.config.settings import DEFAULT_SETTINGS, FitSettings
from metalog_elicitation.distributions.metalog.basis import (
    basis,
    basis_derivative,
    basis_nth_derivative,
)
from metalog_elicitation.distributions.models import Metalog, QualityReport
from metalog_elicitation.exceptions import DistributionFitError
from metalog_elicitation.linalg.matrix import inverse, least_squares, matmul
from metalog_elicitation.schema.points import DataPoint, sort_by_probability
from metalog_elicitation.utils.logging import get_logger

log = get_logger(__name__, component="metalog_fit")


def design_matrix(points: Sequence[DataPoint], num_terms: int, settings: FitSettings = DEFAULT_SETTINGS) -> np.ndarray:
    return np.array(
        [[basis(p.y, j, settings) for j in range(1, num_terms + 1)] for p in points],
        dtype=float,
    )


def fit_metalog(points: Sequence[DataPoint], num_terms: int, settings: FitSettings = DEFAULT_SETTINGS) -> Metalog:
    """Fit an unconstrained ``num_terms`` metalog to ``points``.

    The design matrix row for point i holds gⱼ(yᵢ) and the target is xᵢ. With as
    many points as terms the system is solved exactly, otherwise through the
    normal equations. Raises SingularMatrixError on a degenerate design.
    """

    if num_terms < 1:
        raise DistributionFitError(f"num_terms must be >= 1, got {num_terms}")
    ordered = sort_by_probability(points)
    if not ordered:
        raise DistributionFitError("Cannot fit a metalog without data points")
    k = min(num_terms, len(ordered))

    design = design_matrix(ordered, k, settings)
    target = np.array([p.x for p in ordered], dtype=float)

    if len(ordered) == k:
        coefficients = matmul(inverse(design, settings.pivot_epsilon), target)
    else:
        coefficients = least_squares(design, target, settings.pivot_epsilon)

    if not np.all(np.isfinite(coefficients)):
        raise DistributionFitError(f"Non-finite metalog coefficients for k={k}")

    log.debug(
        f"Fitted metalog k={k}: [{', '.join(f'{c:.4f}' for c in coefficients)}]",
        extra={"num_terms": k, "num_points": len(ordered)},
    )
    return Metalog(
        coefficients=tuple(float(c) for c in coefficients),
        num_terms=k,
        data_points=ordered,
    )


def evaluate_metalog(metalog: Metalog, y: float, settings: FitSettings = DEFAULT_SETTINGS) -> float:
    """Quantile M(y); y is clamped to [clamp_low, clamp_high]."""

    return sum(a * basis(y, j, settings) for j, a in enumerate(metalog.coefficients, start=1))


def metalog_derivative(metalog: Metalog, y: float, settings: FitSettings = DEFAULT_SETTINGS) -> float:
    """Slope M′(y) from the basis first derivatives."""

    return sum(a * basis_derivative(y, j, settings) for j, a in enumerate(metalog.coefficients, start=1))


def metalog_nth_derivative(metalog: Metalog, y: float, n: int, settings: FitSettings = DEFAULT_SETTINGS) -> float:
    return sum(a * basis_nth_derivative(y, j, n, settings) for j, a in enumerate(metalog.coefficients, start=1))


def check_fit_quality(
    metalog: Metalog,
    points: Sequence[DataPoint],
    settings: FitSettings = DEFAULT_SETTINGS,
) -> QualityReport:
    """Absolute error between each point's x and M(y) in normalized-x space."""

    errors = []
    for point in points:
        predicted = evaluate_metalog(metalog, point.y, settings)
        error = abs(point.x - predicted) if math.isfinite(predicted) else math.inf
        errors.append(error)
        log.debug(f"Quality check {point.y * 100:.0f}%: error={error:.4f}")
    return QualityReport(
        errors=tuple(errors),
        max_error=max(errors) if errors else 0.0,
        threshold=settings.quality_threshold,
    )


__all__ = [
    "check_fit_quality",
    "design_matrix",
    "evaluate_metalog",
    "fit_metalog",
    "metalog_derivative",
    "metalog_nth_derivative",
]
