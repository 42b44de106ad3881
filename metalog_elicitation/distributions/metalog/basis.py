"""Metalog basis functions gⱼ(y) and their derivatives.

Every basis term is ``(y - 0.5)**p`` optionally multiplied by ``logit(y)``:

    g1 = 1                  g2 = logit(y)
    g3 = (y - .5) logit(y)  g4 = y - .5
    odd j >= 5:  (y - .5)**((j - 1) / 2)
    even j >= 6: logit(y) (y - .5)**(j/2 - 1)

Inputs are clamped to [clamp_low, clamp_high] so the logit stays finite.
"""

from __future__ import annotations

import math
from typing import Tuple

from scipy.special import logit

from metalog_elicitation.config.settings import DEFAULT_SETTINGS, FitSettings


def clamp_probability(y: float, settings: FitSettings = DEFAULT_SETTINGS) -> float:
    return max(settings.clamp_low, min(settings.clamp_high, float(y)))


def term_shape(j: int) -> Tuple[int, bool]:
    """Return ``(power of (y - 0.5), has logit factor)`` for basis term ``j``."""

    if j < 1:
        raise ValueError(f"Basis index must be >= 1, got {j}")
    if j == 1:
        return 0, False
    if j == 2:
        return 0, True
    if j == 3:
        return 1, True
    if j == 4:
        return 1, False
    if j % 2 == 1:
        return (j - 1) // 2, False
    return j // 2 - 1, True


def _basis_raw(y: float, j: int) -> float:
    power, has_logit = term_shape(j)
    value = (y - 0.5) ** power
    if has_logit:
        value *= float(logit(y))
    return value


def basis(y: float, j: int, settings: FitSettings = DEFAULT_SETTINGS) -> float:
    return _basis_raw(clamp_probability(y, settings), j)


def basis_derivative(y: float, j: int, settings: FitSettings = DEFAULT_SETTINGS) -> float:
    """First derivative dgⱼ/dy.

    Closed form for j ≤ 4. Higher terms use a central difference with
    ``settings.derivative_step``, one-sided where y sits on the clamp.
    """

    y = clamp_probability(y, settings)
    if j < 1:
        raise ValueError(f"Basis index must be >= 1, got {j}")
    if j == 1:
        return 0.0
    if j == 2:
        return 1.0 / (y * (1.0 - y))
    if j == 3:
        return float(logit(y)) + (y - 0.5) / (y * (1.0 - y))
    if j == 4:
        return 1.0
    h = settings.derivative_step
    lo = clamp_probability(y - h, settings)
    hi = clamp_probability(y + h, settings)
    return (_basis_raw(hi, j) - _basis_raw(lo, j)) / (hi - lo)


def _logit_derivative(y: float, order: int) -> float:
    if order == 0:
        return float(logit(y))
    scale = math.factorial(order - 1)
    return scale * ((-1) ** (order - 1) / y**order + 1.0 / (1.0 - y) ** order)


def _power_derivative(y: float, power: int, order: int) -> float:
    if order > power:
        return 0.0
    return math.perm(power, order) * (y - 0.5) ** (power - order)


def basis_nth_derivative(y: float, j: int, n: int, settings: FitSettings = DEFAULT_SETTINGS) -> float:
    """n-th derivative of gⱼ.

    n = 0 and n = 1 defer to :func:`basis` and :func:`basis_derivative`; higher
    orders are exact, expanding the product rule over the power and logit factors.
    """

    if n < 0:
        raise ValueError(f"Derivative order must be >= 0, got {n}")
    if n == 0:
        return basis(y, j, settings)
    if n == 1:
        return basis_derivative(y, j, settings)
    y = clamp_probability(y, settings)
    power, has_logit = term_shape(j)
    if not has_logit:
        return _power_derivative(y, power, n)
    return sum(
        math.comb(n, m) * _power_derivative(y, power, m) * _logit_derivative(y, n - m)
        for m in range(0, min(n, power) + 1)
    )


__all__ = [
    "basis",
    "basis_derivative",
    "basis_nth_derivative",
    "clamp_probability",
    "term_shape",
]
