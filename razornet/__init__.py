"""RazorNet: phylogenetic networks from distance matrices."""

from .cleaning import CleanResult, clean_and_smooth
from .expand import razor_expand
from .graph import UG, Edge, WeightedUG
from .integer_expand import (
    IntegerDistances,
    IntegerExpansion,
    OutputEdge,
    razor_expand_integer,
    to_even_integer_distances,
    verify_integer_triangle_inequalities,
)
from .matrix import MutableD
from .metric_fix import enforce_triangle_inequalities, verify_triangle_inequalities
from .polish import polish
from .progress import CanceledError, ProgressListener, TqdmProgress
from .pruning import (
    is_locally_redundant,
    prune_neighborhood_redundant_edges,
    prune_on_graph,
    razor_local_prune,
)
from .razor_math import (
    DEFAULT_EPSILON,
    Slack,
    build_aux_column,
    build_pre_graph,
    coincides_with_existing,
    is_essential_edge,
    is_redundant_edge,
    slack_with_argmin,
)
from .pipeline import RazorNetOptions, RazorNetResult, razor_net
from .shortest_paths import ShortestPath, all_shortest_paths, apsp_on_graph, is_superfluous

__all__ = [
    "CanceledError",
    "CleanResult",
    "DEFAULT_EPSILON",
    "Edge",
    "IntegerDistances",
    "IntegerExpansion",
    "MutableD",
    "OutputEdge",
    "ProgressListener",
    "RazorNetOptions",
    "RazorNetResult",
    "ShortestPath",
    "Slack",
    "TqdmProgress",
    "UG",
    "WeightedUG",
    "all_shortest_paths",
    "apsp_on_graph",
    "build_aux_column",
    "build_pre_graph",
    "clean_and_smooth",
    "coincides_with_existing",
    "enforce_triangle_inequalities",
    "is_essential_edge",
    "is_locally_redundant",
    "is_redundant_edge",
    "is_superfluous",
    "polish",
    "prune_neighborhood_redundant_edges",
    "prune_on_graph",
    "razor_expand",
    "razor_expand_integer",
    "razor_local_prune",
    "razor_net",
    "slack_with_argmin",
    "to_even_integer_distances",
    "verify_integer_triangle_inequalities",
    "verify_triangle_inequalities",
]
