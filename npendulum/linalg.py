# npendulum/linalg.py

"""Dense linear solver for the per-step acceleration system  A α = b.

Gaussian elimination with partial pivoting.  Near-zero pivots never abort
the solve: the affected column is skipped during elimination and the
matching unknown is set to exactly zero during back-substitution, so the
result is always finite for finite input.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import PIVOT_TOLERANCE

logger = logging.getLogger(__name__)


class Solution(NamedTuple):
    """Solver output together with the unknowns that were forced to zero."""

    x: NDArray[np.floating]
    degenerate: tuple[int, ...]


def _augment(A: ArrayLike, b: ArrayLike) -> NDArray[np.floating]:
    """Return a fresh N×(N+1) working copy  [A | b]."""
    A = np.asarray(A, dtype=float)
    b = np.asarray(b, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"coefficient matrix must be square, got shape {A.shape}")
    if b.shape != (A.shape[0],):
        raise ValueError(
            f"right-hand side must have shape ({A.shape[0]},), got {b.shape}"
        )
    n = A.shape[0]
    M = np.empty((n, n + 1))
    M[:, :n] = A
    M[:, n] = b
    return M


def solve_with_diagnostics(
    A: ArrayLike,
    b: ArrayLike,
    tol: float = PIVOT_TOLERANCE,
) -> Solution:
    """Solve  A x = b  and report which unknowns were zeroed.

    Parameters
    ----------
    A : array of shape (N, N) – coefficient matrix (left untouched)
    b : array of shape (N,)   – right-hand side (left untouched)
    tol : pivots / diagonal entries with magnitude below this are singular

    Returns
    -------
    Solution(x, degenerate) where *degenerate* lists the indices of the
    unknowns that were set to 0 instead of being divided out.
    """
    M = _augment(A, b)
    n = M.shape[0]

    # Forward elimination
    for i in range(n):
        pivot_row = i + int(np.argmax(np.abs(M[i:, i])))
        if pivot_row != i:
            M[[i, pivot_row]] = M[[pivot_row, i]]

        pivot = M[i, i]
        if abs(pivot) < tol:
            continue

        factors = M[i + 1:, i] / pivot
        M[i + 1:, i:] -= np.outer(factors, M[i, i:])

    # Back-substitution
    x = np.zeros(n)
    degenerate = []
    for i in range(n - 1, -1, -1):
        diag = M[i, i]
        if abs(diag) < tol:
            degenerate.append(i)
            continue
        x[i] = (M[i, n] - M[i, i + 1:n] @ x[i + 1:]) / diag

    if degenerate:
        logger.debug(
            "Near-singular system (tol=%g): zeroed unknowns %s", tol, sorted(degenerate)
        )
    return Solution(x, tuple(sorted(degenerate)))


def solve_linear_system(
    A: ArrayLike,
    b: ArrayLike,
    tol: float = PIVOT_TOLERANCE,
) -> NDArray[np.floating]:
    """Solve  A x = b, substituting zero for ill-defined unknowns."""
    return solve_with_diagnostics(A, b, tol).x
