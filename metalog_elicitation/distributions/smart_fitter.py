"""Degrade-and-retry search over metalog order with interpolation fallback."""

from __future__ import annotations

from typing import List, Sequence

from metalog_elicitation.config.settings import DEFAULT_SETTINGS, FitSettings
from metalog_elicitation.distributions.interpolation import interpolate
from metalog_elicitation.distributions.metalog.feasibility import is_feasible
from metalog_elicitation.distributions.metalog.fit import check_fit_quality, fit_metalog
from metalog_elicitation.distributions.models import (
    Distribution,
    FitAttempt,
    InterpolationDistribution,
    Metalog,
    MetalogDistribution,
    QualityReport,
)
from metalog_elicitation.exceptions import (
    DistributionFitError,
    InfeasibleFitError,
    QualityFailureError,
)
from metalog_elicitation.schema.points import DataPoint, validate_points
from metalog_elicitation.utils.logging import get_logger

log = get_logger(__name__, component="smart_fitter")

MIN_TERMS = 2


def certify_metalog(
    metalog: Metalog,
    points: Sequence[DataPoint],
    settings: FitSettings = DEFAULT_SETTINGS,
) -> QualityReport:
    """Return the quality report of a usable fit.

    Raises InfeasibleFitError when the quantile function is not monotone and
    QualityFailureError when a point misses by more than ``quality_threshold``.
    """

    if not is_feasible(metalog, settings):
        raise InfeasibleFitError(f"k={metalog.num_terms} violates feasibility constraints")
    quality = check_fit_quality(metalog, points, settings)
    if not quality.passed:
        raise QualityFailureError(f"max error {quality.max_error:.4f} > {quality.threshold}")
    return quality


def fit_smart(points: Sequence[DataPoint], settings: FitSettings = DEFAULT_SETTINGS) -> Distribution:
    """Fit the highest feasible metalog order, or fall back to interpolation.

    Orders k = n … 2 are tried in turn. A singular design or an infeasible fit
    steps down to k − 1. The first feasible fit is quality-checked; if any point
    misses by more than ``quality_threshold`` metalog fitting is abandoned, since
    fewer terms cannot fit the points more closely.
    """

    ordered = validate_points(points)
    attempts: List[FitAttempt] = []

    for k in range(len(ordered), MIN_TERMS - 1, -1):
        try:
            metalog = fit_metalog(ordered, k, settings)
            quality = certify_metalog(metalog, ordered, settings)
        except InfeasibleFitError as exc:
            log.debug(f"{exc} - stepping down", extra={"num_terms": k, "outcome": "infeasible"})
            attempts.append(FitAttempt(num_terms=k, outcome="infeasible", detail=str(exc)))
            continue
        except QualityFailureError as exc:
            log.info(
                f"k={k} has poor fit quality ({exc}) - abandoning metalogs",
                extra={"num_terms": k, "outcome": "quality_failed"},
            )
            attempts.append(FitAttempt(num_terms=k, outcome="quality_failed", detail=str(exc)))
            return InterpolationDistribution(
                curve=interpolate(ordered, settings),
                attempts=tuple(attempts),
                fallback_reason="quality",
            )
        except DistributionFitError as exc:
            log.debug(f"k={k} failed: {exc}", extra={"num_terms": k, "outcome": "singular"})
            attempts.append(FitAttempt(num_terms=k, outcome="singular", detail=str(exc)))
            continue

        attempts.append(FitAttempt(num_terms=k, outcome="accepted", detail=f"max error {quality.max_error:.4f}"))
        log.debug(f"k={k} accepted", extra={"num_terms": k, "outcome": "accepted"})
        return MetalogDistribution(
            metalog=metalog,
            data_points=ordered,
            attempts=tuple(attempts),
            quality=quality,
        )

    log.info("All k values failed feasibility - abandoning metalogs", extra={"num_points": len(ordered)})
    return InterpolationDistribution(
        curve=interpolate(ordered, settings),
        attempts=tuple(attempts),
        fallback_reason="infeasible",
    )


__all__ = ["MIN_TERMS", "certify_metalog", "fit_smart"]
