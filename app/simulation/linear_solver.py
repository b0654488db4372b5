"""
simulation/linear_solver.py

Dense complex Gaussian elimination with partial pivoting.

numpy.linalg.solve is not used because singularity must be detected with
an explicit pivot threshold: floating nodes and conflicting voltage
sources show up as a vanishing pivot, not as a LinAlgError.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

SINGULAR = "singular"
NON_FINITE = "non_finite"


@dataclass
class LinearSolution:
    """Result of solving A x = z."""

    success: bool
    x: Optional[np.ndarray] = None
    error_code: Optional[str] = None
    pivot_column: Optional[int] = None


def solve_linear(A: np.ndarray, z: np.ndarray, pivot_epsilon: float = 1e-14) -> LinearSolution:
    """
    Solve A x = z without modifying the inputs.

    Args:
        A: Square complex matrix.
        z: Right-hand side vector.
        pivot_epsilon: Smallest pivot magnitude accepted.

    Returns:
        LinearSolution with x on success; error_code is SINGULAR when a
        pivot is too small or not finite, NON_FINITE when the solution
        contains NaN or infinity.
    """
    M = np.array(A, dtype=np.complex128, copy=True)
    rhs = np.array(z, dtype=np.complex128, copy=True)
    n = M.shape[0]

    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        return _eliminate(M, rhs, n, pivot_epsilon)


def _eliminate(M, rhs, n, pivot_epsilon) -> LinearSolution:
    for k in range(n):
        pivot_row = k + int(np.argmax(np.abs(M[k:, k])))
        pivot = M[pivot_row, k]
        if not np.isfinite(pivot) or abs(pivot) < pivot_epsilon:
            logger.debug("Singular pivot at column %d (|pivot|=%s)", k, abs(pivot))
            return LinearSolution(success=False, error_code=SINGULAR, pivot_column=k)

        if pivot_row != k:
            M[[k, pivot_row]] = M[[pivot_row, k]]
            rhs[[k, pivot_row]] = rhs[[pivot_row, k]]

        factors = M[k + 1:, k] / M[k, k]
        M[k + 1:, k:] -= np.outer(factors, M[k, k:])
        rhs[k + 1:] -= factors * rhs[k]

    x = np.zeros(n, dtype=np.complex128)
    for i in range(n - 1, -1, -1):
        acc = rhs[i] - np.dot(M[i, i + 1:], x[i + 1:])
        x[i] = acc / M[i, i]

    if not np.all(np.isfinite(x)):
        return LinearSolution(success=False, error_code=NON_FINITE)

    return LinearSolution(success=True, x=x)
