import unittest
import numpy as np

from razornet.cleaning import clean_and_smooth
from razornet.graph import UG


def labeled_below(ntax):
    return lambda v: v < ntax


class TestCleanAndSmooth(unittest.TestCase):

    def test_smooths_path_vertex(self):
        D = np.array([[0, 1, 2], [1, 0, 1], [2, 1, 0]], dtype=float)
        res = clean_and_smooth(D, is_labeled=lambda v: v in (0, 2))

        np.testing.assert_array_equal(res.matrix, [[0, 2], [2, 0]])
        self.assertEqual(res.new_to_old, [0, 2])
        self.assertEqual(res.old_to_new, [0, -1, 1])
        self.assertEqual([tuple(e) for e in res.graph.edges()], [(0, 1)])

    def test_removes_dangling_then_smooths(self):
        # taxa 0, 1 joined through 2; vertex 3 dangles off 2
        D = np.array([
            [0, 2, 1, 2],
            [2, 0, 1, 2],
            [1, 1, 0, 1],
            [2, 2, 1, 0],
        ], dtype=float)
        res = clean_and_smooth(D, is_labeled=labeled_below(2))

        np.testing.assert_array_equal(res.matrix, [[0, 2], [2, 0]])
        self.assertEqual(res.new_to_old, [0, 1])
        self.assertEqual(res.old_to_new, [0, 1, -1, -1])

    def test_existing_edge_keeps_shorter_weight(self):
        D = np.array([[0, 5, 1], [5, 0, 1], [1, 1, 0]], dtype=float)
        G = UG(3)
        G.add_edge(0, 1)
        G.add_edge(0, 2)
        G.add_edge(2, 1)

        res = clean_and_smooth(D, G, labeled_below(2))

        np.testing.assert_array_equal(res.matrix, [[0, 2], [2, 0]])
        # the caller's graph is left alone
        self.assertEqual(len(G.edges()), 3)

    def test_labeled_vertices_survive(self):
        D = np.array([[0, 1], [1, 0]], dtype=float)
        G = UG(2)
        res = clean_and_smooth(D, G, labeled_below(2))

        self.assertEqual(res.new_to_old, [0, 1])
        self.assertEqual(res.matrix[0, 0], 0.0)
        self.assertTrue(np.isinf(res.matrix[0, 1]))

    def test_unlabeled_everything_disappears(self):
        D = np.array([[0, 1, 2], [1, 0, 1], [2, 1, 0]], dtype=float)
        res = clean_and_smooth(D)
        self.assertEqual(res.new_to_old, [])
        self.assertEqual(res.matrix.shape, (0, 0))

    def test_tree_metric_is_preserved(self):
        # A-X 1, B-X 2, X-Y 2, Y-C 1, Y-D 3, plus the two internal vertices
        D = np.array([
            [0, 3, 4, 6, 1, 3],
            [3, 0, 5, 7, 2, 4],
            [4, 5, 0, 4, 3, 1],
            [6, 7, 4, 0, 5, 3],
            [1, 2, 3, 5, 0, 2],
            [3, 4, 1, 3, 2, 0],
        ], dtype=float)
        res = clean_and_smooth(D, is_labeled=labeled_below(4))

        np.testing.assert_array_equal(res.matrix, D)
        self.assertEqual(res.new_to_old, list(range(6)))


if __name__ == "__main__":
    unittest.main()
