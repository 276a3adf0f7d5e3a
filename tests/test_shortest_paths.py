import math
import unittest

import networkx as nx
import numpy as np

from razornet.graph import UG, Edge
from razornet.shortest_paths import (
    all_shortest_paths,
    apsp_on_graph,
    is_superfluous,
    ug_capabilities,
)


def weighted_ug(edges):
    g = UG()
    weights = {}
    for u, v, w in edges:
        g.add_edge(u, v)
        weights[Edge.of(u, v)] = w
    return g, (lambda a, b: weights[Edge.of(a, b)])


class TestAllShortestPaths(unittest.TestCase):

    def test_path_graph(self):
        g, w = weighted_ug([(0, 1, 1.0), (1, 2, 2.0)])
        g.ensure(3)
        other, incident, weight = ug_capabilities(g, w)
        res = all_shortest_paths([0, 1, 2, 3], None, None, other, incident, weight)

        self.assertEqual(res[0][0].distance, 0.0)
        self.assertEqual(res[0][0].path, [])
        self.assertEqual(res[0][2].distance, 3.0)
        self.assertEqual(res[0][2].path, [Edge(0, 1), Edge(1, 2)])
        self.assertEqual(res[2][0].path, [Edge(1, 2), Edge(0, 1)])
        self.assertTrue(math.isinf(res[0][3].distance))
        self.assertIsNone(res[0][3].path)

    def test_allowed_edges_and_nodes(self):
        g, w = weighted_ug([(0, 1, 5.0), (0, 2, 1.0), (2, 1, 1.0)])
        other, incident, weight = ug_capabilities(g, w)

        full = all_shortest_paths([0, 1], None, None, other, incident, weight)
        self.assertEqual(full[0][1].distance, 2.0)

        no_edge = all_shortest_paths(
            [0, 1], None, {Edge(0, 1), Edge(1, 2)}, other, incident, weight)
        self.assertEqual(no_edge[0][1].distance, 5.0)

        no_node = all_shortest_paths([0, 1], {0, 1}, None, other, incident, weight)
        self.assertEqual(no_node[0][1].distance, 5.0)
        self.assertEqual(no_node[0][1].path, [Edge(0, 1)])

    def test_sources_outside_allowed_nodes_are_skipped(self):
        g, w = weighted_ug([(0, 1, 1.0)])
        other, incident, weight = ug_capabilities(g, w)
        res = all_shortest_paths([0, 1], {1}, None, other, incident, weight)
        self.assertEqual(set(res), {1})
        self.assertTrue(math.isinf(res[1][0].distance))

    def test_negative_weight_raises(self):
        g, w = weighted_ug([(0, 1, -1.0)])
        other, incident, weight = ug_capabilities(g, w)
        with self.assertRaises(ValueError):
            all_shortest_paths([0, 1], None, None, other, incident, weight)

    def test_against_networkx(self):
        G = nx.Graph()
        G.add_weighted_edges_from([
            ("a", "b", 3.0), ("b", "c", 1.0), ("a", "c", 5.0),
            ("c", "d", 2.0), ("b", "d", 4.0), ("d", "e", 1.5),
        ])

        def other(e, x):
            return e[1] if e[0] == x else e[0]

        def incident(x):
            return [tuple(sorted((x, y))) for y in G[x]]

        def weight(e):
            return G.edges[e]["weight"]

        nodes = sorted(G.nodes())
        res = all_shortest_paths(nodes, None, None, other, incident, weight)
        for s in nodes:
            ref = nx.single_source_dijkstra_path_length(G, s)
            for t in nodes:
                with self.subTest(s=s, t=t):
                    self.assertAlmostEqual(res[s][t].distance, ref[t])
                    path_len = sum(weight(e) for e in res[s][t].path)
                    self.assertAlmostEqual(path_len, ref[t])


class TestSuperfluousEdge(unittest.TestCase):

    def capabilities(self, edges):
        g, w = weighted_ug(edges)
        return ug_capabilities(g, w)

    def test_equal_length_detour(self):
        caps = self.capabilities([(0, 1, 2), (0, 2, 1), (2, 1, 1)])
        self.assertTrue(is_superfluous(0, 1, Edge(0, 1), *caps))
        self.assertTrue(is_superfluous(1, 0, Edge(0, 1), *caps))

    def test_longer_detour(self):
        caps = self.capabilities([(0, 1, 2), (0, 2, 2), (2, 1, 1)])
        self.assertFalse(is_superfluous(0, 1, Edge(0, 1), *caps))

    def test_shorter_detour(self):
        caps = self.capabilities([(0, 1, 3), (0, 2, 1), (2, 1, 1)])
        self.assertFalse(is_superfluous(0, 1, Edge(0, 1), *caps))

    def test_no_detour(self):
        caps = self.capabilities([(0, 1, 1), (1, 2, 1)])
        self.assertFalse(is_superfluous(0, 1, Edge(0, 1), *caps))

    def test_wrong_edge_raises(self):
        caps = self.capabilities([(0, 1, 2), (0, 2, 1), (2, 1, 1)])
        with self.assertRaises(ValueError):
            is_superfluous(0, 1, Edge(0, 2), *caps)
        with self.assertRaises(ValueError):
            is_superfluous(0, 1, Edge(1, 2), *caps)

    def test_negative_weight_raises(self):
        caps = self.capabilities([(0, 1, -2), (0, 2, 1), (2, 1, 1)])
        with self.assertRaises(ValueError):
            is_superfluous(0, 1, Edge(0, 1), *caps)


class TestApsp(unittest.TestCase):

    def test_apsp_on_graph(self):
        g, w = weighted_ug([(0, 1, 1.0), (1, 2, 2.5)])
        R = apsp_on_graph(g, 4, w)
        expected = np.array([
            [0.0, 1.0, 3.5, np.inf],
            [1.0, 0.0, 2.5, np.inf],
            [3.5, 2.5, 0.0, np.inf],
            [np.inf, np.inf, np.inf, 0.0],
        ])
        np.testing.assert_array_equal(R, expected)


if __name__ == "__main__":
    unittest.main()
