import unittest
import numpy as np

from razornet.matrix import MutableD, as_square_matrix


class TestMutableD(unittest.TestCase):

    def setUp(self):
        self.D = np.array([
            [0, 2, 3],
            [2, 0, 4],
            [3, 4, 0],
        ], dtype=float)

    def test_get_and_size(self):
        M = MutableD(self.D)
        self.assertEqual(M.size(), 3)
        self.assertEqual(M.get(1, 2), 4.0)

    def test_set_is_symmetric(self):
        M = MutableD(self.D)
        M.set(0, 2, 7.5)
        self.assertEqual(M.get(0, 2), 7.5)
        self.assertEqual(M.get(2, 0), 7.5)

    def test_input_is_copied(self):
        M = MutableD(self.D)
        M.set(0, 1, 9.0)
        self.assertEqual(self.D[0, 1], 2.0)

    def test_append_vertex(self):
        M = MutableD(self.D)
        idx = M.append_vertex([1.0, 1.5, 2.0])
        self.assertEqual(idx, 3)
        self.assertEqual(M.size(), 4)
        self.assertEqual(M.get(3, 3), 0.0)
        self.assertEqual(M.get(1, 3), 1.5)
        self.assertEqual(M.get(3, 1), 1.5)
        np.testing.assert_array_equal(M.to_array()[:3, :3], self.D)

    def test_many_appends(self):
        M = MutableD([[0.0]])
        for k in range(1, 12):
            idx = M.append_vertex(np.arange(k, dtype=float) + 1)
            self.assertEqual(idx, k)
        A = M.to_array()
        self.assertEqual(A.shape, (12, 12))
        np.testing.assert_array_equal(A, A.T)
        np.testing.assert_array_equal(np.diag(A), np.zeros(12))

    def test_to_array_is_a_snapshot(self):
        M = MutableD(self.D)
        A = M.to_array()
        A[0, 1] = 100.0
        self.assertEqual(M.get(0, 1), 2.0)

    def test_out_of_range(self):
        M = MutableD(self.D)
        with self.assertRaises(IndexError):
            M.get(0, 3)
        with self.assertRaises(IndexError):
            M.set(-1, 0, 1.0)

    def test_wrong_row_length(self):
        M = MutableD(self.D)
        with self.assertRaises(ValueError):
            M.append_vertex([1.0, 2.0])

    def test_non_square_raises(self):
        with self.assertRaises(ValueError):
            MutableD(np.zeros((2, 3)))
        with self.assertRaises(ValueError):
            as_square_matrix([1.0, 2.0])


if __name__ == "__main__":
    unittest.main()
