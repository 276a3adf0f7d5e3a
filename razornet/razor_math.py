"""
Metric slack, auxiliary vertex construction and the essential-edge test.

All functions accept either a MutableD or anything numpy can turn into
a square float matrix.
"""

from typing import Iterable, NamedTuple, Optional, Set

import numpy as np

from .graph import UG
from .matrix import MutableD

DEFAULT_EPSILON = 1e-12


class Slack(NamedTuple):
    """Slack s of a vertex x in a subset, attained by the pair (y, z)."""

    s: float
    y: Optional[int] = None
    z: Optional[int] = None


def _array(matrix) -> np.ndarray:
    if isinstance(matrix, MutableD):
        return matrix.view()
    return np.asarray(matrix, dtype=float)


def full_index_set(n: int) -> Set[int]:
    return set(range(n))


# ----------------------------------------------------------------------
# 1. Slack
# ----------------------------------------------------------------------

def slack_with_argmin(matrix, subset: Iterable[int], x: int) -> Slack:
    """
    Minimal four-point slack of `x` against `subset`.

        s = max(0, min_{y<z in subset\\{x}} (D[x,y] + D[x,z] - D[y,z]) / 2)

    Ties are broken towards the lexicographically smallest (y, z).
    Fewer than two other vertices, or no finite candidate value, give
    zero slack without an attaining pair.
    """
    D = _array(matrix)
    others = sorted(v for v in subset if v != x)
    if len(others) < 2:
        return Slack(0.0)

    dx = D[x, others]
    with np.errstate(invalid="ignore"):
        vals = (dx[:, None] + dx[None, :] - D[np.ix_(others, others)]) / 2.0
    vals[np.isnan(vals)] = np.inf
    vals[np.tril_indices(len(others))] = np.inf

    k = int(np.argmin(vals))
    i, j = divmod(k, len(others))
    best = vals[i, j]
    if not np.isfinite(best):
        return Slack(0.0)
    return Slack(max(0.0, float(best)), others[i], others[j])


# ----------------------------------------------------------------------
# 2. Auxiliary vertex ("max3" rule)
# ----------------------------------------------------------------------

def build_aux_column(matrix, x: int, slack: Slack) -> np.ndarray:
    """
    Distances from a new vertex x' split off `x` by `slack` = (s, y, z).

        d(x', x) = s
        d(x', y) = dy = max(D[y,x] - s, 0)
        d(x', z) = dz = max(D[z,x] - s, 0)
        d(x', a) = max(D[a,x] - s, D[a,y] - dy, D[a,z] - dz, 0)  otherwise
    """
    D = _array(matrix)
    s, y, z = slack
    dy = max(D[y, x] - s, 0.0)
    dz = max(D[z, x] - s, 0.0)

    cand = np.maximum.reduce([D[:, x] - s, D[:, y] - dy, D[:, z] - dz])
    cand = np.maximum(cand, 0.0)
    cand[x] = s
    cand[y] = dy
    cand[z] = dz
    return cand


def coincides_with_existing(matrix, cand, eps: float = DEFAULT_EPSILON) -> Optional[int]:
    """
    Index of an existing vertex that `cand` would duplicate, else None.

    The vertex must be at distance ~0 from the candidate and have the
    same row as the candidate, both within eps.
    """
    D = _array(matrix)
    cand = np.asarray(cand, dtype=float)
    for a in np.flatnonzero(np.abs(cand) <= eps):
        row = D[a]
        with np.errstate(invalid="ignore"):
            same = (np.abs(row - cand) <= eps) | (row == cand)
        if same.all():
            return int(a)
    return None


# ----------------------------------------------------------------------
# 3. Essential / redundant edges and the pre-graph
# ----------------------------------------------------------------------

def _witness_mask(D: np.ndarray, x: int, y: int, eps: float, require_positive_legs: bool):
    legs = D[x] + D[:, y]
    mask = legs <= D[x, y] + eps
    mask[x] = False
    mask[y] = False
    if require_positive_legs:
        mask &= (D[x] > eps) & (D[:, y] > eps)
    return mask


def is_essential_edge(
    matrix,
    x: int,
    y: int,
    eps: float = DEFAULT_EPSILON,
    require_positive_legs: bool = False,
) -> bool:
    """
    True iff no third vertex z satisfies D[x,z] + D[z,y] <= D[x,y] + eps.

    With `require_positive_legs`, witnesses z that sit within eps of x or
    of y are ignored.
    """
    if x == y:
        return False
    D = _array(matrix)
    return not _witness_mask(D, x, y, eps, require_positive_legs).any()


def is_redundant_edge(matrix, x: int, y: int, eps: float = DEFAULT_EPSILON) -> bool:
    return not is_essential_edge(matrix, x, y, eps)


def build_pre_graph(matrix, eps: float = DEFAULT_EPSILON, require_positive_legs: bool = False) -> UG:
    """Graph on all indices keeping exactly the essential edges."""
    D = _array(matrix)
    n = D.shape[0]
    G = UG(n)
    for i in range(n):
        # dominated[k, j]: D[i,k] + D[k,j] <= D[i,j] + eps
        dominated = D[i][:, None] + D <= D[i][None, :] + eps
        dominated[i, :] = False
        np.fill_diagonal(dominated, False)
        if require_positive_legs:
            dominated &= (D[i] > eps)[:, None] & (D > eps)
        essential = ~dominated.any(axis=0)
        for j in range(i + 1, n):
            if essential[j]:
                G.add_edge(i, j)
    return G
