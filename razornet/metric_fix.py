import logging

import numpy as np

from .matrix import as_square_matrix
from .razor_math import DEFAULT_EPSILON

logger = logging.getLogger(__name__)


def verify_triangle_inequalities(D, eps: float = DEFAULT_EPSILON) -> bool:
    """True iff D[i,j] <= D[i,k] + D[k,j] + eps for all i, j, k."""
    D = as_square_matrix(D)
    for k in range(D.shape[0]):
        via_k = D[:, k, None] + D[None, k, :]
        if np.any(D > via_k + eps):
            return False
    return True


def enforce_triangle_inequalities(D) -> np.ndarray:
    """
    Closest-from-below metric for D, via metric closure.

    1. sanitize: NaN -> inf, negatives -> 0, symmetrize by the minimum of
       both directions, zero diagonal;
    2. Floyd-Warshall: M[i,j] = min(M[i,j], M[i,k] + M[k,j]);
    3. average both directions and clip negative noise to 0.

    The result is element-wise <= the sanitized input, symmetric, has a
    zero diagonal and satisfies all triangle inequalities.
    """
    M = as_square_matrix(D)
    M[np.isnan(M)] = np.inf
    M = np.maximum(M, 0.0)
    M = np.minimum(M, M.T)
    np.fill_diagonal(M, 0.0)

    for k in range(M.shape[0]):
        np.minimum(M, M[:, k, None] + M[None, k, :], out=M)

    M = 0.5 * (M + M.T)
    M[M < 0.0] = 0.0
    np.fill_diagonal(M, 0.0)
    return M
