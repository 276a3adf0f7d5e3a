import unittest
import numpy as np

from razornet.integer_expand import (
    OutputEdge,
    razor_expand_integer,
    to_even_integer_distances,
    verify_integer_triangle_inequalities,
)
from razornet.progress import CanceledError, ProgressListener

# the quartet ((0,1),(2,3)) with unit pendants and an internal edge of 4, doubled
QUARTET = np.array([
    [0, 4, 12, 12],
    [4, 0, 12, 12],
    [12, 12, 0, 4],
    [12, 12, 4, 0],
])

# unit square, doubled
SQUARE = np.array([
    [0, 2, 4, 2],
    [2, 0, 2, 4],
    [4, 2, 0, 2],
    [2, 4, 2, 0],
])


class TestEncoding(unittest.TestCase):

    def test_even_integers(self):
        D = np.array([[0, 0.5, 1.25], [0.5, 0, 1], [1.25, 1, 0]])
        encoded = to_even_integer_distances(D, digits=2)
        self.assertEqual(encoded.scale, 100)
        np.testing.assert_array_equal(encoded.matrix, [[0, 100, 250], [100, 0, 200], [250, 200, 0]])
        self.assertEqual(encoded.matrix.dtype, np.int64)
        self.assertEqual(encoded.to_distance(250), 1.25)

    def test_zero_digits(self):
        D = np.array([[0, 2], [2, 0]], dtype=float)
        encoded = to_even_integer_distances(D, digits=0)
        np.testing.assert_array_equal(encoded.matrix, [[0, 4], [4, 0]])

    def test_invalid_inputs(self):
        for D in (
            np.array([[0, -1], [-1, 0]], dtype=float),
            np.array([[0, np.inf], [np.inf, 0]]),
            np.array([[1, 2], [2, 0]], dtype=float),
            np.zeros((2, 3)),
        ):
            with self.subTest(D=D), self.assertRaises(ValueError):
                to_even_integer_distances(D)
        with self.assertRaises(ValueError):
            to_even_integer_distances(np.zeros((2, 2)), digits=-1)

    def test_too_large(self):
        D = np.array([[0, 1e12], [1e12, 0]])
        with self.assertRaises(ValueError):
            to_even_integer_distances(D, digits=6)

    def test_triangle_check_is_exact(self):
        self.assertTrue(verify_integer_triangle_inequalities(QUARTET))
        self.assertTrue(verify_integer_triangle_inequalities([[0, 2, 4], [2, 0, 2], [4, 2, 0]]))
        self.assertFalse(verify_integer_triangle_inequalities([[0, 2, 6], [2, 0, 2], [6, 2, 0]]))


class TestRazorExpandInteger(unittest.TestCase):

    def test_quartet(self):
        result = razor_expand_integer(QUARTET)
        self.assertEqual(result.edges, [
            OutputEdge(0, 4, 2), OutputEdge(1, 4, 2),
            OutputEdge(2, 5, 2), OutputEdge(3, 5, 2),
            OutputEdge(4, 5, 8),
        ])
        self.assertEqual(result.matrix.shape, (6, 6))
        np.testing.assert_array_equal(result.matrix[:4, :4], QUARTET)
        np.testing.assert_array_equal(result.matrix[4], [2, 2, 10, 10, 0, 8])
        np.testing.assert_array_equal(result.matrix[5], [10, 10, 2, 2, 8, 0])

    def test_square_without_slack(self):
        result = razor_expand_integer(SQUARE)
        self.assertEqual(result.edges, [
            OutputEdge(0, 1, 2), OutputEdge(0, 3, 2),
            OutputEdge(1, 2, 2), OutputEdge(2, 3, 2),
        ])
        np.testing.assert_array_equal(result.matrix, SQUARE)

    def test_integral_floats_are_accepted(self):
        result = razor_expand_integer(QUARTET.astype(float))
        self.assertEqual(len(result.edges), 5)

    def test_odd_distances_raise(self):
        with self.assertRaises(ValueError):
            razor_expand_integer([[0, 3], [3, 0]])

    def test_fractional_distances_raise(self):
        with self.assertRaises(ValueError):
            razor_expand_integer([[0, 2.5], [2.5, 0]])

    def test_input_not_modified(self):
        D = QUARTET.copy()
        razor_expand_integer(D)
        np.testing.assert_array_equal(D, QUARTET)

    def test_cancel(self):
        progress = ProgressListener()
        progress.cancel()
        with self.assertRaises(CanceledError):
            razor_expand_integer(QUARTET, progress)


if __name__ == "__main__":
    unittest.main()
