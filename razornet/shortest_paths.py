"""
Dijkstra-based shortest path utilities.

The searches here do not know any graph class. A caller describes its
graph through three capabilities:

    other_endpoint(edge, node) -> node
    incident_edges(node)       -> iterable of edges
    weight(edge)               -> float

so the same code runs over a UG with matrix weights, over a networkx
graph, or over a locally restricted neighborhood.
"""

import heapq
import itertools
import math
from dataclasses import dataclass
from typing import Callable, Collection, Dict, Hashable, Iterable, List, Optional

import numpy as np

from .graph import UG, Edge
from .razor_math import DEFAULT_EPSILON

Node = Hashable
OtherEndpoint = Callable[[Hashable, Node], Node]
IncidentEdges = Callable[[Node], Iterable[Hashable]]
Weight = Callable[[Hashable], float]


@dataclass(frozen=True)
class ShortestPath:
    """Distance to a target plus the ordered edges of one shortest path."""

    distance: float
    path: Optional[List[Hashable]]


def _checked_weight(weight: Weight, edge) -> float:
    w = weight(edge)
    if w < 0:
        raise ValueError(f"negative edge weight {w} on edge {edge!r}")
    return w


# ----------------------------------------------------------------------
# 1. Single-source Dijkstra with allowed node/edge restriction
# ----------------------------------------------------------------------

def single_source(
    source: Node,
    other_endpoint: OtherEndpoint,
    incident_edges: IncidentEdges,
    weight: Weight,
    allowed_nodes: Optional[Collection[Node]] = None,
    allowed_edges: Optional[Collection[Hashable]] = None,
    eps: float = DEFAULT_EPSILON,
):
    """
    Dijkstra from `source`.

    Returns
    -------
    dist : dict node -> float
    pred : dict node -> edge used to reach the node
    """
    dist = {source: 0.0}
    pred = {}
    done = set()
    tie = itertools.count()
    heap = [(0.0, next(tie), source)]

    while heap:
        d, _, u = heapq.heappop(heap)
        if u in done:
            continue
        done.add(u)
        for e in incident_edges(u):
            if allowed_edges is not None and e not in allowed_edges:
                continue
            v = other_endpoint(e, u)
            if allowed_nodes is not None and v not in allowed_nodes:
                continue
            nd = d + _checked_weight(weight, e)
            if v not in done and nd + eps < dist.get(v, math.inf):
                dist[v] = nd
                pred[v] = e
                heapq.heappush(heap, (nd, next(tie), v))
    return dist, pred


def _reconstruct(source, target, pred, other_endpoint) -> List[Hashable]:
    path = []
    v = target
    while v != source:
        e = pred[v]
        path.append(e)
        v = other_endpoint(e, v)
    path.reverse()
    return path


def all_shortest_paths(
    nodes: Iterable[Node],
    allowed_nodes: Optional[Collection[Node]],
    allowed_edges: Optional[Collection[Hashable]],
    other_endpoint: OtherEndpoint,
    incident_edges: IncidentEdges,
    weight: Weight,
    eps: float = DEFAULT_EPSILON,
) -> Dict[Node, Dict[Node, ShortestPath]]:
    """
    Shortest paths between all pairs of `nodes`.

    One Dijkstra run per source in `nodes` that is also allowed (None
    means no restriction). Each result maps target -> ShortestPath:
    (inf, None) when unreachable, (0, []) for the source itself.

    Raises
    ------
    ValueError
        If a traversed edge has negative weight.
    """
    nodes = list(nodes)
    result: Dict[Node, Dict[Node, ShortestPath]] = {}
    for s in nodes:
        if allowed_nodes is not None and s not in allowed_nodes:
            continue
        dist, pred = single_source(
            s, other_endpoint, incident_edges, weight,
            allowed_nodes=allowed_nodes, allowed_edges=allowed_edges, eps=eps,
        )
        row = {}
        for t in nodes:
            if t == s:
                row[t] = ShortestPath(0.0, [])
            elif t in dist:
                row[t] = ShortestPath(dist[t], _reconstruct(s, t, pred, other_endpoint))
            else:
                row[t] = ShortestPath(math.inf, None)
        result[s] = row
    return result


# ----------------------------------------------------------------------
# 2. Bounded search: is an edge explained by an equal-length detour?
# ----------------------------------------------------------------------

def is_superfluous(
    s: Node,
    t: Node,
    e: Hashable,
    other_endpoint: OtherEndpoint,
    incident_edges: IncidentEdges,
    weight: Weight,
) -> bool:
    """
    True iff some s-t path avoiding `e` has total weight exactly weight(e).

    Meant for integer weights: distances are compared exactly, and the
    search abandons any partial path heavier than weight(e).

    Raises
    ------
    ValueError
        If `e` is not the edge (s, t), or a weight is negative.
    """
    if other_endpoint(e, s) != t:
        raise ValueError(f"edge {e!r} does not connect {s!r} and {t!r}")
    bound = _checked_weight(weight, e)

    dist = {s: 0}
    done = set()
    tie = itertools.count()
    heap = [(0, next(tie), s)]
    while heap:
        d, _, u = heapq.heappop(heap)
        if u in done:
            continue
        if u == t:
            return d == bound
        done.add(u)
        for f in incident_edges(u):
            if f == e:
                continue
            nd = d + _checked_weight(weight, f)
            if nd > bound:
                continue
            v = other_endpoint(f, u)
            if v not in done and nd < dist.get(v, math.inf):
                dist[v] = nd
                heapq.heappush(heap, (nd, next(tie), v))
    return False


# ----------------------------------------------------------------------
# 3. UG adapters
# ----------------------------------------------------------------------

def ug_capabilities(graph: UG, weight: Callable[[int, int], float]):
    """(other_endpoint, incident_edges, weight) triple for a UG."""
    return (
        lambda e, x: e.other(x),
        lambda x: [Edge.of(x, y) for y in graph.neighbors(x)],
        lambda e: weight(e.u, e.v),
    )


def apsp_on_graph(
    graph: UG,
    n: int,
    weight: Callable[[int, int], float],
    eps: float = DEFAULT_EPSILON,
) -> np.ndarray:
    """
    All-pairs shortest path distances on vertices 0..n-1 of `graph`.

    The result is symmetric (minimum of both directions), has a zero
    diagonal and holds inf for disconnected pairs.
    """
    other, incident, w = ug_capabilities(graph, weight)
    R = np.full((n, n), np.inf)
    for s in range(n):
        dist, _ = single_source(s, other, incident, w, eps=eps)
        for t, d in dist.items():
            if 0 <= t < n:
                R[s, t] = d
    R = np.minimum(R, R.T)
    np.fill_diagonal(R, 0.0)
    return R
