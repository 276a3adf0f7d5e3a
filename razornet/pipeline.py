"""
RazorNet: distance matrix -> weighted phylogenetic network.

The pipeline repairs the metric if needed, expands the matrix with
auxiliary vertices, alternates polishing and local pruning, and finally
realizes the essential edges of the resulting matrix as a networkx graph
whose first ntax nodes are the input taxa. A polishing or pruning step
that would move a taxon-to-taxon distance is discarded.

With `integer_expansion`, distances are rounded to even integers and the
network edges come straight out of razor_expand_integer().
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from .cleaning import clean_and_smooth
from .expand import razor_expand
from .integer_expand import (
    razor_expand_integer,
    to_even_integer_distances,
    verify_integer_triangle_inequalities,
)
from .matrix import as_square_matrix
from .metric_fix import enforce_triangle_inequalities, verify_triangle_inequalities
from .polish import polish
from .progress import ProgressListener
from .pruning import prune_on_graph, razor_local_prune
from .razor_math import DEFAULT_EPSILON, is_essential_edge

logger = logging.getLogger(__name__)


@dataclass
class RazorNetOptions:
    """Configuration of the RazorNet pipeline."""

    epsilon: float = DEFAULT_EPSILON
    min_distance: float = 1e-7
    polish: bool = True
    local_pruning: bool = True
    graph_pruning: bool = False
    min_edge_length: float = 0.0
    max_rounds: int = 5
    integer_expansion: bool = False
    digits: int = 6

    def __post_init__(self):
        if self.digits < 0:
            raise ValueError(f"digits must be >= 0, got {self.digits}")
        if self.epsilon < 0:
            raise ValueError(f"epsilon must be >= 0, got {self.epsilon}")
        if self.min_distance < 0:
            raise ValueError(f"min_distance must be >= 0, got {self.min_distance}")
        if self.min_edge_length < 0:
            raise ValueError(f"min_edge_length must be >= 0, got {self.min_edge_length}")
        if self.max_rounds < 1:
            raise ValueError(f"max_rounds must be >= 1, got {self.max_rounds}")


@dataclass
class RazorNetResult:
    graph: nx.Graph
    matrix: np.ndarray
    ntax: int
    mismatches: List[Tuple[int, int, float, float]] = field(default_factory=list)


# ----------------------------------------------------------------------
# 1. Pipeline
# ----------------------------------------------------------------------

def razor_net(
    distances,
    labels: Optional[Sequence[str]] = None,
    options: Optional[RazorNetOptions] = None,
    progress: Optional[ProgressListener] = None,
) -> RazorNetResult:
    """
    Compute a RazorNet network from a taxon distance matrix.

    Parameters
    ----------
    distances : array-like (n x n)
        Symmetric, non-negative, zero diagonal.
    labels : list[str], optional
        Taxon labels; defaults to T0, T1, ...
    options : RazorNetOptions, optional
    progress : ProgressListener, optional

    Returns
    -------
    RazorNetResult
        Graph on matrix indices (nodes < ntax carry "taxon" and "label"),
        the final expanded matrix and any taxon pairs whose network
        distance differs from the input.
    """
    options = options or RazorNetOptions()
    progress = progress or ProgressListener()
    eps = options.epsilon

    distances = as_square_matrix(distances, "distances")
    ntax = distances.shape[0]
    if labels is None:
        labels = [f"T{i}" for i in range(ntax)]
    labels = [str(label) for label in labels]
    if len(labels) != ntax:
        raise ValueError("len(labels) must match matrix size")

    def is_labeled(v: int) -> bool:
        return v < ntax

    if not verify_triangle_inequalities(distances, eps):
        logger.info("Triangle inequalities violated, applying metric closure")
        distances = enforce_triangle_inequalities(distances)

    if options.integer_expansion:
        graph, D = _integer_network(distances, labels, options, progress)
    else:
        graph, D = _float_network(distances, labels, is_labeled, options, progress)

    if options.graph_pruning:
        progress.set_subtask("graph pruning")
        prune_on_graph(graph, eps=eps, progress=progress)

    if options.min_edge_length > 0:
        contract_short_edges(graph, options.min_edge_length)

    mismatches = check_pairwise_distances(graph, distances, max(eps, options.min_distance))
    return RazorNetResult(graph, D, ntax, mismatches)


def _float_network(distances, labels, is_labeled, options, progress):
    eps = options.epsilon
    ntax = len(labels)
    tol = max(eps, options.min_distance)

    def keeps_taxon_distances(P):
        return np.allclose(P[:ntax, :ntax], distances, rtol=0.0, atol=tol)

    progress.set_subtask("expanding")
    D = razor_expand(distances, progress, eps)
    logger.info("RazorNet expanded: %d -> %d", ntax, len(D))

    for _ in range(options.max_rounds):
        original_size = len(D)
        if options.polish:
            progress.set_subtask("polishing")
            for _ in range(options.max_rounds):
                start_size = len(D)
                P = polish(D, progress, eps)
                if len(P) == start_size:
                    break
                P = clean_and_smooth(P, None, is_labeled, eps).matrix
                if not keeps_taxon_distances(P):
                    logger.info("RazorNet polish step rejected: taxon distances changed")
                    break
                D = P
                logger.info("RazorNet polished: %d -> %d", start_size, len(D))
                if len(D) == start_size:
                    break
        if options.local_pruning:
            progress.set_subtask("pruning")
            start_size = len(D)
            P = razor_local_prune(D, is_labeled, progress, eps)
            if len(P) == start_size:
                break
            if not keeps_taxon_distances(P):
                logger.info("RazorNet pruning step rejected: taxon distances changed")
                break
            D = P
            logger.info("RazorNet pruned: %d -> %d", start_size, len(D))
        if len(D) == original_size:
            break

    return realize_network(D, labels, options.min_distance), D


def _integer_network(distances, labels, options, progress):
    progress.set_subtask("expanding")
    encoded = to_even_integer_distances(distances, options.digits)
    if not verify_integer_triangle_inequalities(encoded.matrix):
        raise ValueError(
            f"triangle inequalities do not hold after rounding to {options.digits} digits")
    expansion = razor_expand_integer(encoded.matrix, progress)

    graph = nx.Graph()
    for i, label in enumerate(labels):
        graph.add_node(i, taxon=i + 1, label=label)
    for i, j, w in expansion.edges:
        graph.add_edge(i, j, weight=encoded.to_distance(w))
    return graph, expansion.matrix / (2 * encoded.scale)


# ----------------------------------------------------------------------
# 2. Network realization and checks
# ----------------------------------------------------------------------

def realize_network(D, labels: Sequence[str], min_distance: float) -> nx.Graph:
    """Graph of essential edges of D (positive legs); taxa are nodes 0..ntax-1."""
    D = as_square_matrix(D)
    graph = nx.Graph()
    for i in range(len(D)):
        if i < len(labels):
            graph.add_node(i, taxon=i + 1, label=labels[i])
        else:
            graph.add_node(i)
    for i in range(len(D)):
        for j in range(i + 1, len(D)):
            if math.isfinite(D[i, j]) and is_essential_edge(D, i, j, min_distance, True):
                graph.add_edge(i, j, weight=float(D[i, j]))
    return graph


def check_pairwise_distances(
    graph: nx.Graph,
    distances,
    eps: float = DEFAULT_EPSILON,
) -> List[Tuple[int, int, float, float]]:
    """
    Compare taxon-to-taxon network distances with the input matrix.

    Returns (i, j, expected, found) for every taxon pair that differs by
    more than eps, logging a warning for each.
    """
    distances = np.asarray(distances, dtype=float)
    taxa = sorted(v for v, data in graph.nodes(data=True) if "taxon" in data)
    mismatches = []
    for i in taxa:
        lengths = nx.single_source_dijkstra_path_length(graph, i, weight="weight")
        for j in taxa:
            if j <= i:
                continue
            found = lengths.get(j, math.inf)
            expected = distances[i, j]
            if abs(found - expected) > eps and not found == expected:
                logger.warning("Distance mismatch (%s,%s): expected %s, network %s",
                               i, j, expected, found)
                mismatches.append((i, j, float(expected), float(found)))
    return mismatches


def contract_short_edges(graph: nx.Graph, min_edge_length: float) -> int:
    """
    Merge the endpoints of edges shorter than `min_edge_length`.

    Only edges that are not isolated (some endpoint has degree > 1) and
    have at least one endpoint without a taxon are contracted. The
    surviving endpoint is the labeled one if there is one.

    Returns
    -------
    int
        Number of contracted edges.
    """
    def is_labeled(v):
        return "taxon" in graph.nodes[v]

    def short_edge():
        for s, t, w in graph.edges(data="weight"):
            if (
                w < min_edge_length
                and (graph.degree(s) > 1 or graph.degree(t) > 1)
                and (not is_labeled(s) or not is_labeled(t))
            ):
                return s, t
        return None

    count = 0
    while True:
        edge = short_edge()
        if edge is None:
            return count
        keep, other = edge
        if is_labeled(other):
            keep, other = other, keep
        for v in list(graph.neighbors(other)):
            if v == keep:
                continue
            w = graph.edges[other, v]["weight"]
            if graph.has_edge(keep, v):
                h = graph.edges[keep, v]
                h["weight"] = 0.5 * (h["weight"] + w)
            else:
                graph.add_edge(keep, v, weight=w)
        graph.remove_node(other)
        count += 1
