"""Dense linear system solver used by the polynomial regression.

Gaussian elimination with partial pivoting over an augmented matrix [A | b].
Rank deficient systems do not raise: columns whose pivot vanishes are treated
as free variables and reported as 0.0 in the solution.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

FloatArray = NDArray[np.floating[Any]]

# A pivot is considered zero when it is this small relative to the largest
# entry of its column in the input matrix.
PIVOT_RTOL: float = 1e-12

_LOGGER = logging.getLogger(__name__)


def gaussian_elimination(augmented: ArrayLike) -> FloatArray:
    """Solve A·x = b given the augmented matrix [A | b].

    Parameters
    ----------
    augmented : array_like
        n rows by n+1 columns, the last column being b. The input is copied
        and never modified.

    Returns
    -------
    FloatArray
        The n solution coefficients. Free coefficients of a singular system
        are 0.0; non-finite input yields non-finite output instead of an
        exception.

    Raises
    ------
    ValueError
        If the matrix is not n×(n+1).
    """
    matrix = np.array(augmented, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[1] != matrix.shape[0] + 1:
        raise ValueError(
            f"augmented matrix must have shape (n, n+1), got {matrix.shape}"
        )
    n = matrix.shape[0]
    if n == 0:
        return np.empty(0, dtype=np.float64)

    tolerance = PIVOT_RTOL * np.max(np.abs(matrix[:, :n]), axis=0)
    free = np.zeros(n, dtype=bool)

    with np.errstate(invalid="ignore", over="ignore", divide="ignore"):
        for i in range(n):
            # argmax returns the first maximum, so ties keep the upper row.
            pivot_row = i + int(np.argmax(np.abs(matrix[i:, i])))
            if pivot_row != i:
                matrix[[i, pivot_row]] = matrix[[pivot_row, i]]

            pivot = matrix[i, i]
            if not abs(pivot) > tolerance[i]:
                free[i] = True
                continue

            factors = matrix[i + 1:, i] / pivot
            matrix[i + 1:, i:] -= np.outer(factors, matrix[i, i:])

        coefficients = np.zeros(n, dtype=np.float64)
        for i in range(n - 1, -1, -1):
            if free[i]:
                continue
            total = matrix[i, n] - float(np.dot(matrix[i, i + 1:n], coefficients[i + 1:]))
            coefficients[i] = total / matrix[i, i]

    if free.any():
        _LOGGER.debug(
            "%s(): singular system, %d of %d coefficients left free",
            gaussian_elimination.__name__,
            int(free.sum()),
            n,
        )
    return coefficients
