from collections import deque
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Set


# ----------------------------------------------------------------------
# 1. Canonical undirected edge
# ----------------------------------------------------------------------

class Edge(NamedTuple):
    """Unordered vertex pair stored as (u, v) with u < v."""

    u: int
    v: int

    @classmethod
    def of(cls, a: int, b: int) -> "Edge":
        return cls(a, b) if a < b else cls(b, a)

    def other(self, x: int) -> int:
        if x == self.u:
            return self.v
        if x == self.v:
            return self.u
        raise ValueError(f"vertex {x} is not incident to edge {tuple(self)}")


# ----------------------------------------------------------------------
# 2. UG: simple undirected unweighted graph on integer vertices
# ----------------------------------------------------------------------

class UG:
    """
    Minimal undirected graph over small integer vertex ids.

    Vertices are created on demand by add_edge(); unknown vertices are
    treated as isolated, so queries never fail.
    """

    __slots__ = ("_adj",)

    def __init__(self, vertices: Iterable[int] = ()):
        if isinstance(vertices, int):
            vertices = range(vertices)
        self._adj: Dict[int, Set[int]] = {v: set() for v in vertices}

    def ensure(self, v: int):
        self._adj.setdefault(v, set())

    def add_edge(self, u: int, v: int):
        if u == v:
            return
        self._adj.setdefault(u, set()).add(v)
        self._adj.setdefault(v, set()).add(u)

    def remove_edge(self, u: int, v: int):
        if u in self._adj:
            self._adj[u].discard(v)
        if v in self._adj:
            self._adj[v].discard(u)

    def remove_vertex(self, v: int):
        for u in self._adj.pop(v, ()):
            self._adj[u].discard(v)

    def has_edge(self, u: int, v: int) -> bool:
        return v in self._adj.get(u, ())

    def neighbors(self, u: int) -> FrozenSet[int]:
        """Snapshot of the neighbors of `u`; later edits do not show up in it."""
        return frozenset(self._adj.get(u, ()))

    def degree(self, u: int) -> int:
        return len(self._adj.get(u, ()))

    def vertices(self) -> List[int]:
        return sorted(self._adj)

    def edges(self) -> List[Edge]:
        return sorted(
            Edge(u, v) for u, nbrs in self._adj.items() for v in nbrs if u < v
        )

    def copy(self) -> "UG":
        g = UG()
        g._adj = {v: set(nbrs) for v, nbrs in self._adj.items()}
        return g

    def induced_by_edges(self, edges: Iterable[Edge]) -> "UG":
        """New graph whose vertex set is exactly the endpoints of `edges`."""
        g = UG()
        for u, v in edges:
            g.add_edge(u, v)
        return g

    def components(self) -> List[Set[int]]:
        """Connected components (BFS), isolated vertices included."""
        seen: Set[int] = set()
        result = []
        for start in self.vertices():
            if start in seen:
                continue
            seen.add(start)
            comp = {start}
            queue = deque([start])
            while queue:
                u = queue.popleft()
                for w in self._adj[u]:
                    if w not in seen:
                        seen.add(w)
                        comp.add(w)
                        queue.append(w)
            result.append(comp)
        return result

    def __len__(self) -> int:
        return len(self._adj)

    def __repr__(self) -> str:
        return f"UG(vertices={len(self._adj)}, edges={len(self.edges())})"


# ----------------------------------------------------------------------
# 3. WeightedUG: UG with integer edge weights
# ----------------------------------------------------------------------

class WeightedUG(UG):
    """UG whose edges carry a weight; removing an edge drops its weight."""

    __slots__ = ("_weights",)

    def __init__(self, vertices: Iterable[int] = ()):
        super().__init__(vertices)
        self._weights: Dict[Edge, int] = {}

    def add_edge(self, u: int, v: int, weight: int = 0):
        if u == v:
            return
        super().add_edge(u, v)
        self._weights[Edge.of(u, v)] = weight

    def remove_edge(self, u: int, v: int):
        super().remove_edge(u, v)
        self._weights.pop(Edge.of(u, v), None)

    def remove_vertex(self, v: int):
        for u in self.neighbors(v):
            self._weights.pop(Edge.of(u, v), None)
        super().remove_vertex(v)

    def weight(self, u: int, v: int) -> int:
        try:
            return self._weights[Edge.of(u, v)]
        except KeyError:
            raise KeyError(f"no edge ({u}, {v})") from None

    def copy(self) -> "WeightedUG":
        g = WeightedUG()
        g._adj = {v: set(nbrs) for v, nbrs in self._adj.items()}
        g._weights = dict(self._weights)
        return g
