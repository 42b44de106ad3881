"""Feasibility certification for fitted metalogs.

A metalog quantile function M(y) is only a valid inverse CDF if it is strictly
increasing on (0, 1). Dense sampling can step over a dip, so the check is
algebraic:

* k = 2: a₂ > 0.
* k ≥ 3: additionally |a₃| / a₂ < 1.66711.
* k ≥ 4: with i = ⌊(k + 1) / 2⌋, the roots in (0, 1) of
  P(y) = yⁱ(1 − y)ⁱ M⁽ⁱ⁾(y) bracket every extremum of M⁽ⁱ⁻¹⁾. Sign changes
  between consecutive candidates are followed down to M″, whose roots are the
  only places M′ can reach a minimum. M′ must be non-negative at each of them,
  and the tails must stay finite with non-negative slope.

P has closed-form coefficients for k = 4, 5, 6. For k ≥ 7 it is approximated by a
least-squares polynomial through samples of yⁱ(1 − y)ⁱ M⁽ⁱ⁾(y), so very high
orders are only approximately certified.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Callable, Dict, List, Sequence

from metalog_elicitation.config.settings import DEFAULT_SETTINGS, FitSettings
from metalog_elicitation.distributions.metalog.fit import (
    evaluate_metalog,
    metalog_derivative,
    metalog_nth_derivative,
)
from metalog_elicitation.distributions.models import Metalog
from metalog_elicitation.linalg.polynomial import (
    Polynomial,
    bisect,
    find_roots_in_interval,
    fit_polynomial,
)
from metalog_elicitation.utils.logging import get_logger

log = get_logger(__name__, component="metalog_feasibility")

# Inward offset used when evaluating derivatives at interval endpoints.
_ENDPOINT_OFFSET = 1e-10
_TAIL_SLOPE_POINTS = (0.001, 0.999)
_TAIL_VALUE_POINTS = (0.0001, 0.9999)
# Tail values are read past the evaluation clamp.
_TAIL_CLAMP = 1e-5


def derivative_order(num_terms: int) -> int:
    return (num_terms + 1) // 2


def _coefficient(metalog: Metalog, j: int) -> float:
    return metalog.coefficients[j - 1] if j <= metalog.num_terms else 0.0


def _polynomial_k4(metalog: Metalog) -> Polynomial:
    # y²(1 − y)² M″(y) = (−a₂ + a₃/2) + 2a₂y
    a2, a3 = _coefficient(metalog, 2), _coefficient(metalog, 3)
    return (-a2 + 0.5 * a3, 2 * a2)


def _polynomial_k5_k6(metalog: Metalog) -> Polynomial:
    # y³(1 − y)³ M‴(y) = a₂(2 − 6y + 6y²) + a₃(2y − 1) + a₆(1 − y + y²)/2
    # g₄ and g₅ are polynomials of degree < 3 and drop out.
    a2, a3, a6 = _coefficient(metalog, 2), _coefficient(metalog, 3), _coefficient(metalog, 6)
    return (
        2 * a2 - a3 + 0.5 * a6,
        -6 * a2 + 2 * a3 - 0.5 * a6,
        6 * a2 + 0.5 * a6,
    )


POLYNOMIAL_BUILDERS: Dict[int, Callable[[Metalog], Polynomial]] = {
    4: _polynomial_k4,
    5: _polynomial_k5_k6,
    6: _polynomial_k5_k6,
}


def numerical_polynomial_approximation(
    metalog: Metalog,
    order: int,
    settings: FitSettings = DEFAULT_SETTINGS,
) -> Polynomial:
    """Least-squares degree ``order - 1`` fit to samples of yⁱ(1 − y)ⁱ M⁽ⁱ⁾(y) on [0.01, 0.99]."""

    samples = max(10, order + 3)
    ys = [0.01 + (0.99 - 0.01) * s / samples for s in range(samples + 1)]
    values = [
        y**order * (1 - y) ** order * metalog_nth_derivative(metalog, y, order, settings)
        for y in ys
    ]
    log.debug(
        f"Approximating inflection polynomial numerically (k={metalog.num_terms}, i={order})",
        extra={"num_terms": metalog.num_terms},
    )
    return fit_polynomial(ys, values, order - 1)


def inflection_polynomial(metalog: Metalog, settings: FitSettings = DEFAULT_SETTINGS) -> Polynomial:
    builder = POLYNOMIAL_BUILDERS.get(metalog.num_terms)
    if builder is not None:
        return builder(metalog)
    return numerical_polynomial_approximation(metalog, derivative_order(metalog.num_terms), settings)


def refine_roots(
    metalog: Metalog,
    roots: Sequence[float],
    order: int,
    settings: FitSettings = DEFAULT_SETTINGS,
) -> List[float]:
    """Roots of M⁽ᵒʳᵈᵉʳ⁾ between consecutive candidates of the next-higher derivative."""

    def func(y: float) -> float:
        return metalog_nth_derivative(metalog, y, order, settings)

    bounds = sorted([0.0, *roots, 1.0])
    refined: List[float] = []
    for lo, hi in zip(bounds, bounds[1:]):
        if hi - lo < _ENDPOINT_OFFSET:
            continue
        lo_in, hi_in = lo + _ENDPOINT_OFFSET, hi - _ENDPOINT_OFFSET
        if func(lo_in) * func(hi_in) < 0:
            root = bisect(
                func,
                lo_in,
                hi_in,
                tolerance=settings.bisection_tolerance,
                max_iter=settings.bisection_max_iter,
            )
            if root is not None and 0 < root < 1:
                refined.append(root)
    return refined


def find_inflection_points(metalog: Metalog, settings: FitSettings = DEFAULT_SETTINGS) -> List[float]:
    order = derivative_order(metalog.num_terms)
    polynomial = inflection_polynomial(metalog, settings)
    roots = find_roots_in_interval(
        polynomial,
        0.0,
        1.0,
        intervals=settings.root_grid_intervals,
        tolerance=settings.bisection_tolerance,
        max_iter=settings.bisection_max_iter,
    )
    log.debug(f"Roots of M^({order}) polynomial in (0,1): {[round(r, 6) for r in roots]}")
    for current in range(order, 2, -1):
        roots = refine_roots(metalog, roots, current - 1, settings)
    return roots


def check_tail_feasibility(metalog: Metalog, settings: FitSettings = DEFAULT_SETTINGS) -> bool:
    for y in _TAIL_SLOPE_POINTS:
        slope = metalog_derivative(metalog, y, settings)
        if not math.isfinite(slope) or slope < 0:
            log.debug(f"Tail feasibility failed: M'({y})={slope}")
            return False
    wide = replace(settings, clamp_low=_TAIL_CLAMP, clamp_high=1 - _TAIL_CLAMP)
    for y in _TAIL_VALUE_POINTS:
        value = evaluate_metalog(metalog, y, wide)
        if not math.isfinite(value):
            log.debug(f"Tail feasibility failed: M({y}) is unbounded")
            return False
    return True


def _check_feasibility(metalog: Metalog, settings: FitSettings) -> bool:
    coefficients = metalog.coefficients
    k = metalog.num_terms
    if k < 2:
        return False
    if not all(math.isfinite(c) for c in coefficients):
        return False

    a2 = coefficients[1]
    if a2 <= 0:
        log.debug("Feasibility failed: a2 <= 0", extra={"num_terms": k})
        return False

    if k >= 3:
        ratio = abs(coefficients[2]) / a2
        if ratio >= settings.k3_ratio_bound:
            log.debug(
                f"Feasibility failed: |a3|/a2 = {ratio:.4f} >= {settings.k3_ratio_bound}",
                extra={"num_terms": k},
            )
            return False

    if k < 4:
        return True

    for y in find_inflection_points(metalog, settings):
        slope = metalog_derivative(metalog, y, settings)
        if not math.isfinite(slope) or slope < -settings.slope_tolerance:
            log.debug(
                f"Feasibility failed: M'({y:.6f}) = {slope:.8f}",
                extra={"num_terms": k},
            )
            return False

    return check_tail_feasibility(metalog, settings)


def is_feasible(metalog: Metalog, settings: FitSettings = DEFAULT_SETTINGS) -> bool:
    """True only if every monotonicity test passes; internal errors count as infeasible."""

    try:
        return _check_feasibility(metalog, settings)
    except Exception as exc:  # noqa: BLE001
        log.warning(
            f"Feasibility check errored, treating as infeasible: {exc}",
            extra={"num_terms": metalog.num_terms},
        )
        return False


__all__ = [
    "POLYNOMIAL_BUILDERS",
    "check_tail_feasibility",
    "derivative_order",
    "find_inflection_points",
    "inflection_polynomial",
    "is_feasible",
    "numerical_polynomial_approximation",
    "refine_roots",
]
