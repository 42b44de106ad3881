"""Polynomial evaluation, fitting and real-root search on an interval.

Polynomials are tuples of coefficients in ascending powers: ``(c0, c1, c2)``
is ``c0 + c1*y + c2*y**2``.
"""

from __future__ import annotations

import math
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from numpy.polynomial import polynomial as npoly

from metalog_elicitation.exceptions import SingularMatrixError
from metalog_elicitation.linalg.matrix import least_squares

Polynomial = Tuple[float, ...]

_DEGENERATE = 1e-12


def evaluate_polynomial(coeffs: Sequence[float], y: float) -> float:
    if len(coeffs) == 0:
        return 0.0
    return float(npoly.polyval(y, np.asarray(coeffs, dtype=float)))


def solve_quadratic(a: float, b: float, c: float) -> List[float]:
    """Real roots of ``a*y**2 + b*y + c``; degrades to the linear case when a ≈ 0."""

    if abs(a) < _DEGENERATE:
        return [-c / b] if abs(b) > _DEGENERATE else []
    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return []
    sqrt_d = math.sqrt(discriminant)
    return [(-b + sqrt_d) / (2 * a), (-b - sqrt_d) / (2 * a)]


def bisect(
    func: Callable[[float], float],
    lo: float,
    hi: float,
    tolerance: float = 1e-10,
    max_iter: int = 50,
) -> Optional[float]:
    """Bisection on a bracketing interval; None when ``func`` does not change sign."""

    f_lo = func(lo)
    f_hi = func(hi)
    if f_lo * f_hi > 0:
        return None
    for _ in range(max_iter):
        mid = (lo + hi) / 2
        f_mid = func(mid)
        if abs(f_mid) < tolerance or (hi - lo) / 2 < tolerance:
            return mid
        if f_lo * f_mid < 0:
            hi, f_hi = mid, f_mid
        else:
            lo, f_lo = mid, f_mid
    return (lo + hi) / 2


def grid_roots(
    func: Callable[[float], float],
    lo: float,
    hi: float,
    intervals: int = 100,
    tolerance: float = 1e-10,
    max_iter: int = 50,
) -> List[float]:
    """Roots of ``func`` located by sign changes over a uniform grid, refined by bisection."""

    roots: List[float] = []
    step = (hi - lo) / intervals
    for i in range(intervals):
        left = lo + i * step
        right = lo + (i + 1) * step
        if func(left) * func(right) < 0:
            root = bisect(func, left, right, tolerance=tolerance, max_iter=max_iter)
            if root is not None:
                roots.append(root)
    return roots


def find_roots_in_interval(
    coeffs: Sequence[float],
    lo: float = 0.0,
    hi: float = 1.0,
    intervals: int = 100,
    tolerance: float = 1e-10,
    max_iter: int = 50,
) -> List[float]:
    """Real roots strictly inside (lo, hi).

    Closed form for degree ≤ 2, grid search plus bisection above that.
    """

    coeffs = [float(c) for c in coeffs]
    if len(coeffs) <= 1:
        return []
    if len(coeffs) == 2:
        if abs(coeffs[1]) < _DEGENERATE:
            return []
        root = -coeffs[0] / coeffs[1]
        return [root] if lo < root < hi else []
    if len(coeffs) == 3:
        roots = solve_quadratic(coeffs[2], coeffs[1], coeffs[0])
        return sorted(r for r in roots if math.isfinite(r) and lo < r < hi)
    return grid_roots(
        lambda y: evaluate_polynomial(coeffs, y),
        lo,
        hi,
        intervals=intervals,
        tolerance=tolerance,
        max_iter=max_iter,
    )


def fit_polynomial(xs: Sequence[float], ys: Sequence[float], degree: int) -> Polynomial:
    """Least-squares polynomial of ``degree``; the zero polynomial if the system is singular."""

    xs_arr = np.asarray(xs, dtype=float)
    vandermonde = np.vander(xs_arr, degree + 1, increasing=True)
    try:
        coeffs = least_squares(vandermonde, np.asarray(ys, dtype=float))
    except SingularMatrixError:
        return (0.0,)
    return tuple(float(c) for c in coeffs)


__all__ = [
    "Polynomial",
    "bisect",
    "evaluate_polynomial",
    "find_roots_in_interval",
    "fit_polynomial",
    "grid_roots",
    "solve_quadratic",
]
