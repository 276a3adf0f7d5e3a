import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import numpy as np

from .graph import UG, Edge
from .matrix import as_square_matrix
from .razor_math import DEFAULT_EPSILON, build_pre_graph
from .shortest_paths import apsp_on_graph

logger = logging.getLogger(__name__)


@dataclass
class CleanResult:
    """
    Output of clean_and_smooth().

    matrix     : distances between surviving vertices (APSP on the graph)
    graph      : cleaned graph, re-indexed to 0..m-1
    new_to_old : new index -> original index
    old_to_new : original index -> new index, -1 for deleted vertices
    """

    matrix: np.ndarray
    graph: UG
    new_to_old: List[int]
    old_to_new: List[int]


def clean_and_smooth(
    D,
    graph: Optional[UG] = None,
    is_labeled: Callable[[int], bool] = lambda v: False,
    eps: float = DEFAULT_EPSILON,
) -> CleanResult:
    """
    Remove unlabeled dangling vertices and smooth unlabeled degree-2 vertices.

    Repeats until nothing changes:
      - unlabeled vertices of degree <= 1 are deleted;
      - an unlabeled vertex v of degree 2 with neighbors a, b is replaced
        by an edge a-b of weight w(a,v) + w(v,b), or, if a-b exists,
        a-b keeps the smaller of its weight and that sum.
    Survivors are then re-indexed in their original order and the new
    distance matrix is the all-pairs shortest paths over the cleaned
    graph. Without `graph`, the pre-graph of D is used.
    """
    D = as_square_matrix(D)
    n = D.shape[0]
    G = build_pre_graph(D, eps) if graph is None else graph.copy()

    weights: Dict[Edge, float] = {}

    def weight(u: int, v: int) -> float:
        return weights.get(Edge.of(u, v), D[u, v])

    alive = [True] * n
    changed = True
    while changed:
        changed = False
        leaves = []
        deg2 = []
        for v in range(n):
            if not alive[v] or is_labeled(v):
                continue
            d = G.degree(v)
            if d <= 1:
                leaves.append(v)
            elif d == 2:
                deg2.append(v)

        for v in leaves:
            G.remove_vertex(v)
            alive[v] = False
            changed = True

        for v in deg2:
            if not alive[v] or G.degree(v) != 2:
                continue
            a, b = sorted(G.neighbors(v))
            length = weight(a, v) + weight(v, b)
            if G.has_edge(a, b):
                length = min(weight(a, b), length)
            else:
                G.add_edge(a, b)
            weights[Edge.of(a, b)] = length
            G.remove_vertex(v)
            alive[v] = False
            changed = True

    new_to_old = [v for v in range(n) if alive[v]]
    old_to_new = [-1] * n
    for i, v in enumerate(new_to_old):
        old_to_new[v] = i

    H = UG(len(new_to_old))
    for e in G.edges():
        H.add_edge(old_to_new[e.u], old_to_new[e.v])

    def new_weight(i: int, j: int) -> float:
        return weight(new_to_old[i], new_to_old[j])

    matrix = apsp_on_graph(H, len(new_to_old), new_weight, eps)
    if len(new_to_old) < n:
        logger.debug("cleaned matrix: %d -> %d vertices", n, len(new_to_old))
    return CleanResult(matrix, H, new_to_old, old_to_new)
