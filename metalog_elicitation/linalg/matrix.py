"""Dense matrix routines for small least-squares systems.

Gaussian elimination with partial pivoting raises ``SingularMatrixError`` on a
vanishing pivot instead of returning NaN/inf coefficients.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from metalog_elicitation.exceptions import SingularMatrixError

PIVOT_EPSILON = 1e-12


def as_matrix(rows: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    matrix = np.array(rows, dtype=float)
    if matrix.ndim != 2:
        raise ValueError(f"Expected a 2-D matrix, got shape {matrix.shape}")
    return matrix


def transpose(a: np.ndarray) -> np.ndarray:
    return np.asarray(a, dtype=float).T.copy()


def matmul(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape[-1] != b.shape[0]:
        raise ValueError(f"Shape mismatch for product: {a.shape} x {b.shape}")
    return a @ b


def solve(a: np.ndarray, b: np.ndarray, pivot_epsilon: float = PIVOT_EPSILON) -> np.ndarray:
    """Solve ``a @ x = b`` by Gauss-Jordan elimination with partial pivoting.

    ``b`` may be a vector or a matrix of right-hand sides.
    """

    a = as_matrix(a)
    n, m = a.shape
    if n != m:
        raise ValueError(f"Coefficient matrix must be square, got {a.shape}")
    rhs = np.array(b, dtype=float)
    vector_rhs = rhs.ndim == 1
    if vector_rhs:
        rhs = rhs[:, None]
    if rhs.shape[0] != n:
        raise ValueError(f"Right-hand side has {rhs.shape[0]} rows, expected {n}")
    if not (np.all(np.isfinite(a)) and np.all(np.isfinite(rhs))):
        raise SingularMatrixError("Linear system contains non-finite entries")

    augmented = np.hstack([a, rhs])
    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(augmented[col:, col])))
        if pivot_row != col:
            augmented[[col, pivot_row]] = augmented[[pivot_row, col]]
        pivot = augmented[col, col]
        if abs(pivot) < pivot_epsilon:
            raise SingularMatrixError(f"Singular matrix: pivot {pivot:.3e} in column {col}")
        augmented[col] /= pivot
        factors = augmented[:, col].copy()
        factors[col] = 0.0
        augmented -= np.outer(factors, augmented[col])

    solution = augmented[:, n:]
    return solution[:, 0] if vector_rhs else solution


def inverse(a: np.ndarray, pivot_epsilon: float = PIVOT_EPSILON) -> np.ndarray:
    a = as_matrix(a)
    return solve(a, np.eye(a.shape[0]), pivot_epsilon=pivot_epsilon)


def least_squares(a: np.ndarray, b: np.ndarray, pivot_epsilon: float = PIVOT_EPSILON) -> np.ndarray:
    """Ordinary least squares via the normal equations (AᵀA)x = Aᵀb."""

    a = as_matrix(a)
    at = transpose(a)
    return solve(matmul(at, a), matmul(at, np.asarray(b, dtype=float)), pivot_epsilon=pivot_epsilon)


__all__ = ["PIVOT_EPSILON", "as_matrix", "inverse", "least_squares", "matmul", "solve", "transpose"]
