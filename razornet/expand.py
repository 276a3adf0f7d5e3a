"""
Recursive expansion of a distance matrix by auxiliary vertices.

Starting from all indices, each call on a subset

1. computes the slack of every vertex in the subset and stops if none is
   positive,
2. appends one auxiliary vertex per slack vertex (max3 rule), unless it
   would coincide with a vertex that is already present,
3. joins the zero-slack vertices and the new vertices into a complete
   graph,
4. deletes every edge (u, v) for which some vertex z of the whole matrix
   satisfies D[u,z] + D[z,v] <= D[u,v] + eps,
5. confirms every edge with an endpoint of degree <= 2,
6. recurses on each connected component of the unconfirmed edges.

All calls share one growable matrix; recursion only ever appends to it.
razor_expand() repeats the pass over the full index set until a pass
appends nothing, so expanding its output again is a no-op.
"""

import logging
from typing import Dict, Optional, Set

import numpy as np

from .graph import UG
from .matrix import MutableD
from .progress import ProgressListener
from .razor_math import (
    DEFAULT_EPSILON,
    Slack,
    build_aux_column,
    coincides_with_existing,
    full_index_set,
    is_redundant_edge,
    slack_with_argmin,
)

logger = logging.getLogger(__name__)


def razor_expand(
    D,
    progress: Optional[ProgressListener] = None,
    eps: float = DEFAULT_EPSILON,
) -> np.ndarray:
    """
    Expand `D` until every local region is tree-like or unambiguous.

    Parameters
    ----------
    D : array-like (n x n)
        Symmetric distance matrix with zeros on the diagonal.
    progress : ProgressListener, optional
        Receives five ticks per recursive call; cancellation raises
        CanceledError out of this function.
    eps : float
        Tolerance for all comparisons.

    Returns
    -------
    np.ndarray (m x m), m >= n
        The input in the upper-left block, auxiliary vertices appended.
    """
    if progress is None:
        progress = ProgressListener()
    M = MutableD(D)
    n = M.size()
    # a pass over all vertices can leave slack that only a fresh pass sees
    while True:
        size = M.size()
        expand_subset(M, full_index_set(size), progress, eps)
        if M.size() == size:
            break
    logger.info("Razor expansion: %d -> %d vertices", n, M.size())
    return M.to_array()


def expand_subset(M: MutableD, subset: Set[int], progress: ProgressListener, eps: float):
    """One recursion step on `subset`, appending to the shared matrix `M`."""
    progress.set_maximum(5)
    progress.set_progress(0)

    # 1) slack scan
    slack: Dict[int, Slack] = {x: slack_with_argmin(M, subset, x) for x in sorted(subset)}
    if not any(sx.s > eps for sx in slack.values()):
        return

    progress.set_progress(1)

    # 2) auxiliary vertices
    new_vertices = []
    for x, sx in slack.items():
        if sx.s <= eps:
            continue
        cand = build_aux_column(M, x, sx)
        existing = coincides_with_existing(M, cand, eps)
        if existing is not None:
            logger.debug("aux for %s (s=%s) coincides with %s", x, sx.s, existing)
            continue
        xp = M.append_vertex(cand)
        logger.debug("aux %s split off %s: s=%s, y=%s, z=%s", xp, x, sx.s, sx.y, sx.z)
        new_vertices.append(xp)

    progress.set_progress(2)

    # 3) complete graph on zero-slack and new vertices
    local = [x for x, sx in slack.items() if sx.s <= eps] + new_vertices
    G = UG(local)
    for i, u in enumerate(local):
        for v in local[i + 1:]:
            G.add_edge(u, v)

    progress.set_progress(3)

    # 4) prune against the whole current matrix
    for e in G.edges():
        if is_redundant_edge(M, e.u, e.v, eps):
            G.remove_edge(e.u, e.v)

    progress.set_progress(4)

    # 5) confirmation
    unconfirmed = [e for e in G.edges() if G.degree(e.u) > 2 and G.degree(e.v) > 2]
    if not unconfirmed:
        return

    progress.set_progress(5)

    # 6) recurse
    H = G.induced_by_edges(unconfirmed)
    for component in H.components():
        expand_subset(M, component, progress, eps)
