"""
Expansion on even integer distances.

Distances are scaled to integers and doubled, so every gromov product
(D[x,y] + D[x,z] - D[y,z]) / 2 is itself an integer and all comparisons
are exact. Instead of a matrix, this expansion reports the weighted
edges of the network as it goes:

1. every slack vertex x either splits off a new vertex x' (edge x-x' of
   length s) or hangs off a vertex of the subset that x' would coincide
   with;
2. working-graph edges explained by an equal-length detour are dropped
   (is_superfluous);
3. vertices left with degree 1 or 2 hand their edges to the output;
4. every remaining component with two or more vertices is expanded
   again on its complete graph.
"""

import logging
from typing import Iterable, List, NamedTuple, Optional, Set

import numpy as np

from .graph import Edge, WeightedUG
from .matrix import MutableD, as_square_matrix
from .progress import ProgressListener
from .razor_math import build_aux_column, full_index_set, slack_with_argmin
from .shortest_paths import is_superfluous

logger = logging.getLogger(__name__)

# largest integer a float64 holds exactly
_MAX_EXACT = 2 ** 53


class OutputEdge(NamedTuple):
    i: int
    j: int
    w: int

    @classmethod
    def of(cls, a: int, b: int, w: int) -> "OutputEdge":
        return cls(a, b, w) if a < b else cls(b, a, w)


class IntegerDistances(NamedTuple):
    """Even integer encoding of a distance matrix; `scale` is 10 ** digits."""

    matrix: np.ndarray
    scale: int

    def to_distance(self, w) -> float:
        return w / (2 * self.scale)


class IntegerExpansion(NamedTuple):
    edges: List[OutputEdge]
    matrix: np.ndarray


# ----------------------------------------------------------------------
# 1. Encoding and checks
# ----------------------------------------------------------------------

def to_even_integer_distances(D, digits: int = 6) -> IntegerDistances:
    """
    Encode D as even integers: 2 * round(D * 10 ** digits).

    Raises
    ------
    ValueError
        If D is not square, has non-finite or negative entries, a non-zero
        diagonal, or values too large to encode exactly.
    """
    if digits < 0:
        raise ValueError(f"digits must be >= 0, got {digits}")
    A = as_square_matrix(D)
    if not np.all(np.isfinite(A)):
        raise ValueError("distances must be finite")
    if np.any(np.abs(np.diag(A)) > 1e-12):
        raise ValueError("distances must have a zero diagonal")
    if np.any(A < 0):
        raise ValueError("distances must be non-negative")

    scale = 10 ** digits
    scaled = np.rint(A * scale)
    if scaled.size and 2 * scaled.max() >= _MAX_EXACT:
        raise ValueError(f"distances too large to encode with {digits} digits")
    encoded = 2 * scaled.astype(np.int64)
    np.fill_diagonal(encoded, 0)
    return IntegerDistances(encoded, scale)


def verify_integer_triangle_inequalities(D) -> bool:
    """True iff D[i,j] <= D[i,k] + D[k,j] holds exactly for all i, j, k."""
    D = np.asarray(D, dtype=np.int64)
    for k in range(D.shape[0]):
        if np.any(D > D[:, k, None] + D[None, k, :]):
            return False
    return True


def _check_even(A: np.ndarray):
    if not np.all(A == np.rint(A)):
        raise ValueError("distances must be integers")
    if np.any(A.astype(np.int64) % 2 != 0):
        raise ValueError("distances must be even")


# ----------------------------------------------------------------------
# 2. Expansion
# ----------------------------------------------------------------------

def razor_expand_integer(D, progress: Optional[ProgressListener] = None) -> IntegerExpansion:
    """
    Expand an even integer distance matrix into weighted network edges.

    Parameters
    ----------
    D : array-like (n x n)
        Even, non-negative integers with a zero diagonal.
    progress : ProgressListener, optional
        Receives four ticks per recursive call.

    Returns
    -------
    IntegerExpansion
        Sorted edges (i < j) over matrix indices, and the expanded matrix
        whose first n rows are the input.
    """
    if progress is None:
        progress = ProgressListener()
    A = as_square_matrix(D)
    _check_even(A)

    M = MutableD(A)
    n = M.size()
    subset = full_index_set(n)
    edges: Set[OutputEdge] = set()
    _expand(M, subset, _complete_graph(M, subset), edges, progress)

    logger.info("Integer expansion: %d -> %d vertices, %d edges", n, M.size(), len(edges))
    return IntegerExpansion(sorted(edges), M.to_array().astype(np.int64))


def _complete_graph(M: MutableD, vertices: Iterable[int]) -> WeightedUG:
    vertices = sorted(vertices)
    G = WeightedUG(vertices)
    for i, u in enumerate(vertices):
        for v in vertices[i + 1:]:
            G.add_edge(u, v, int(M.get(u, v)))
    return G


def _release(G: WeightedUG, u: int, edges: Set[OutputEdge], within=None):
    """Move the edges of `u` (to vertices in `within`, if given) to the output."""
    for v in sorted(G.neighbors(u)):
        if within is None or v in within:
            edges.add(OutputEdge.of(u, v, G.weight(u, v)))
    G.remove_vertex(u)


def _superfluous_edges(G: WeightedUG, subset: Set[int]) -> List[Edge]:
    def incident(x):
        return [Edge.of(x, y) for y in G.neighbors(x) if y in subset]

    def other(e, x):
        return e.other(x)

    def weight(e):
        return G.weight(e.u, e.v)

    return [
        e for e in G.edges()
        if e.u in subset and e.v in subset
        and is_superfluous(e.u, e.v, e, other, incident, weight)
    ]


def _expand(
    M: MutableD,
    subset: Set[int],
    G: WeightedUG,
    edges: Set[OutputEdge],
    progress: ProgressListener,
):
    progress.set_maximum(4)
    progress.set_progress(0)

    slack_vertices = [x for x in sorted(subset) if slack_with_argmin(M, subset, x).s > 0]
    if not slack_vertices:
        # resolved: what the detours do not explain belongs to the network
        for e in _superfluous_edges(G, subset):
            G.remove_edge(e.u, e.v)
        for e in G.edges():
            if e.u in subset and e.v in subset:
                edges.add(OutputEdge.of(e.u, e.v, G.weight(e.u, e.v)))
        return

    progress.set_progress(1)

    for x in slack_vertices:
        # the subset changes as vertices are split off
        sx = slack_with_argmin(M, subset, x)
        if sx.s <= 0:
            logger.debug("%s is no longer slack", x)
            continue
        s = int(sx.s)
        cand = build_aux_column(M, x, sx)
        existing = next((a for a in sorted(subset) if cand[a] == 0), None)
        if existing is None:
            xp = M.append_vertex(cand)
            subset.discard(x)
            subset.add(xp)
            for other in sorted(G.neighbors(x)):
                if other in subset:
                    G.add_edge(xp, other, G.weight(x, other) - s)
            G.remove_vertex(x)
            G.add_edge(x, xp, s)
            edges.add(OutputEdge.of(x, xp, s))
            logger.debug("split %s -> %s, s=%s", x, xp, s)
        else:
            subset.discard(x)
            G.remove_vertex(x)
            G.add_edge(x, existing, s)
            edges.add(OutputEdge.of(x, existing, s))
            logger.debug("joined %s -> %s, s=%s", x, existing, s)

    progress.set_progress(2)

    for e in _superfluous_edges(G, subset):
        G.remove_edge(e.u, e.v)

    progress.set_progress(3)

    # pendant vertices first (twice, to catch the ones exposed by the first
    # round), then vertices of degree 2
    for _ in range(2):
        for u in [u for u in G.vertices() if G.degree(u) == 1]:
            _release(G, u, edges)
    for u in [u for u in G.vertices() if G.degree(u) == 2]:
        _release(G, u, edges, subset)

    for component in G.components():
        if len(component) > 1:
            _expand(M, set(component), _complete_graph(M, component), edges, progress)
