"""
Local redundancy pruning.

An edge e = (s, t) between two unlabeled vertices is redundant when every
pair of its neighbors that e connects "across" (u next to s, v next to t)
has an alternative u-v route, avoiding e, that is no longer than the
route u - s - t - v. Alternatives are searched in the local subgraph
spanned by the neighbors of s and t plus every vertex adjacent to at
least two of those neighbors.

One test, three substrates:

    prune_neighborhood_redundant_edges : UG plus a weight function
    razor_local_prune                  : distance matrix in, matrix out
    prune_on_graph                     : networkx graph with edge weights

Candidates are processed by decreasing edge weight and removed
immediately, so later tests see the pruned graph.
"""

import logging
from typing import Callable, Hashable, Iterable, List, Optional, Tuple

import networkx as nx
import numpy as np

from .cleaning import clean_and_smooth
from .graph import UG
from .matrix import as_square_matrix
from .progress import ProgressListener
from .razor_math import DEFAULT_EPSILON, build_pre_graph
from .shortest_paths import all_shortest_paths, apsp_on_graph

logger = logging.getLogger(__name__)

Neighbors = Callable[[Hashable], Iterable[Hashable]]
PairWeight = Callable[[Hashable, Hashable], float]


# ----------------------------------------------------------------------
# 1. The acceptance test
# ----------------------------------------------------------------------

def local_nodes(neighbor_nodes, neighbors: Neighbors) -> set:
    """Neighbor set plus all vertices adjacent to >= 2 distinct members."""
    members = set(neighbor_nodes)
    result = set(members)
    for u in members:
        for w in neighbors(u):
            if w in result:
                continue
            if sum(1 for x in neighbors(w) if x in members) >= 2:
                result.add(w)
    return result


def is_locally_redundant(
    s: Hashable,
    t: Hashable,
    neighbors: Neighbors,
    weight: PairWeight,
    eps: float = DEFAULT_EPSILON,
) -> bool:
    """
    Whether the edge (s, t) can be removed without lengthening any
    neighbor-to-neighbor distance across it.
    """
    neighbor_nodes = list(dict.fromkeys(
        u for c in (s, t) for u in neighbors(c) if u != s and u != t
    ))
    if len(neighbor_nodes) < 2:
        return False

    local = local_nodes(neighbor_nodes, neighbors)
    center = frozenset((s, t))

    def incident(x):
        return [
            frozenset((x, y)) for y in neighbors(x)
            if y in local and frozenset((x, y)) != center
        ]

    paths = all_shortest_paths(
        neighbor_nodes, local, None,
        lambda e, x: next(iter(e - {x})),
        incident,
        lambda e: weight(*e),
        eps=eps,
    )

    s_nbrs = set(neighbors(s))
    attach = {u: (s if u in s_nbrs else t) for u in neighbor_nodes}
    w_st = weight(s, t)
    for i, u in enumerate(neighbor_nodes):
        for v in neighbor_nodes[i + 1:]:
            if attach[u] == attach[v]:
                continue
            via_e = weight(u, attach[u]) + w_st + weight(v, attach[v])
            if paths[u][v].distance > via_e + eps:
                return False
    return True


def _prune(
    candidates: List[Tuple[Hashable, Hashable]],
    has_edge: Callable[[Hashable, Hashable], bool],
    neighbors: Neighbors,
    weight: PairWeight,
    remove: Callable[[Hashable, Hashable], None],
    progress: ProgressListener,
    eps: float,
) -> int:
    candidates = sorted(candidates, key=lambda e: -weight(*e))
    progress.set_maximum(len(candidates))
    progress.set_progress(0)
    removed = 0
    for s, t in candidates:
        progress.increment_progress()
        if not has_edge(s, t):
            continue
        if is_locally_redundant(s, t, neighbors, weight, eps):
            logger.debug("pruned redundant edge (%s, %s)", s, t)
            remove(s, t)
            removed += 1
    return removed


# ----------------------------------------------------------------------
# 2. Substrates
# ----------------------------------------------------------------------

def prune_neighborhood_redundant_edges(
    graph: UG,
    is_labeled: Callable[[int], bool],
    weight: Callable[[int, int], float],
    eps: float = DEFAULT_EPSILON,
    progress: Optional[ProgressListener] = None,
) -> int:
    """Prune `graph` in place; returns the number of removed edges."""
    candidates = [
        (e.u, e.v) for e in graph.edges()
        if not is_labeled(e.u) and not is_labeled(e.v)
    ]
    return _prune(
        candidates, graph.has_edge, graph.neighbors, weight, graph.remove_edge,
        progress or ProgressListener(), eps,
    )


def razor_local_prune(
    D,
    is_labeled: Callable[[int], bool],
    progress: Optional[ProgressListener] = None,
    eps: float = DEFAULT_EPSILON,
) -> np.ndarray:
    """
    Prune the pre-graph of D and return the resulting distance matrix.

    When an edge was removed, distances are recomputed on the pruned
    graph and then passed through clean_and_smooth(); otherwise D is
    returned as is.
    """
    D = as_square_matrix(D)
    n = D.shape[0]
    G = build_pre_graph(D, eps)

    def weight(u, v):
        return D[u, v]

    removed = prune_neighborhood_redundant_edges(G, is_labeled, weight, eps, progress)
    if not removed:
        return D
    logger.info("local pruning removed %d edges", removed)
    Dp = apsp_on_graph(G, n, weight, eps)
    return clean_and_smooth(Dp, G, is_labeled, eps).matrix


def prune_on_graph(
    graph: nx.Graph,
    is_labeled: Optional[Callable[[Hashable], bool]] = None,
    weight: str = "weight",
    eps: float = DEFAULT_EPSILON,
    progress: Optional[ProgressListener] = None,
) -> int:
    """
    Prune a weighted networkx graph in place.

    Labeled nodes default to those with a "taxon" attribute. After each
    removal, an endpoint left with degree 1 is deleted and one left with
    degree 2 is spliced out (the merged edge keeps the smaller weight if
    its endpoints were already adjacent).

    Returns
    -------
    int
        Number of pruned edges.
    """
    if is_labeled is None:
        def is_labeled(v):
            return "taxon" in graph.nodes[v]

    def edge_weight(u, v):
        return graph.edges[u, v][weight]

    def remove(s, t):
        graph.remove_edge(s, t)
        for u in (s, t):
            if u not in graph:
                continue
            if graph.degree(u) == 1:
                graph.remove_node(u)
            elif graph.degree(u) == 2:
                a, b = graph.neighbors(u)
                length = edge_weight(u, a) + edge_weight(u, b)
                if graph.has_edge(a, b):
                    length = min(length, edge_weight(a, b))
                graph.add_edge(a, b, **{weight: length})
                graph.remove_node(u)

    candidates = [
        (u, v) for u, v in graph.edges()
        if not is_labeled(u) and not is_labeled(v)
    ]
    return _prune(
        candidates, graph.has_edge, graph.neighbors, edge_weight, remove,
        progress or ProgressListener(), eps,
    )
