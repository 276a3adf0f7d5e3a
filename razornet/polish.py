import logging
from typing import Optional

import numpy as np

from .matrix import MutableD
from .progress import ProgressListener
from .razor_math import (
    DEFAULT_EPSILON,
    build_aux_column,
    build_pre_graph,
    coincides_with_existing,
    slack_with_argmin,
)

logger = logging.getLogger(__name__)


def polish(
    D,
    progress: Optional[ProgressListener] = None,
    eps: float = DEFAULT_EPSILON,
    min_degree: int = 3,
) -> np.ndarray:
    """
    One hub-centered polishing step.

    Vertices of the pre-graph are visited by decreasing degree. For a hub
    v (degree >= `min_degree`) the slack of every x in {v} + N(v) is
    computed within that set; the first slack vertex whose auxiliary
    vertex does not coincide with an existing one is expanded, and the
    grown matrix is returned at once. Callers rebuild their graph and
    call again until the size stops changing.

    Returns
    -------
    np.ndarray
        D unchanged, or D with exactly one appended vertex.
    """
    if progress is None:
        progress = ProgressListener()
    M = MutableD(D)
    G = build_pre_graph(M, eps)

    # stable: ties keep index order
    order = sorted(range(M.size()), key=lambda v: -G.degree(v))

    progress.set_maximum(len(order))
    progress.set_progress(0)
    for v in order:
        progress.increment_progress()
        if G.degree(v) < min_degree:
            continue
        S = {v} | G.neighbors(v)
        for x in sorted(S):
            sx = slack_with_argmin(M, S, x)
            if sx.s <= eps:
                continue
            cand = build_aux_column(M, x, sx)
            if coincides_with_existing(M, cand, eps) is not None:
                continue
            xp = M.append_vertex(cand)
            logger.debug("polish: hub %s, aux %s split off %s (s=%s)", v, xp, x, sx.s)
            return M.to_array()
    return M.to_array()
