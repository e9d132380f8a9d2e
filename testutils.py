import unittest
import numpy as np
from utils import *


class TestVectorMath(unittest.TestCase):

    def setUp(self):
        rng = np.random.default_rng(2024)
        self.vectors = [rng.normal(size=3) * s for s in (1e-3, 1.0, 50.0, 5000.0) for _ in range(5)]

    def test_arithmetic(self):
        a = vec([1, 2, 3])
        b = vec([4, -5, 6.5])
        np.testing.assert_array_equal(add(a, b), vec([5, -3, 9.5]))
        np.testing.assert_array_equal(subtract(a, b), vec([-3, 7, -3.5]))
        np.testing.assert_array_equal(scale(a, 2.5), vec([2.5, 5, 7.5]))
        np.testing.assert_array_equal(negate(a), vec([-1, -2, -3]))
        self.assertEqual(dot(a, b), 4 - 10 + 19.5)

    def test_inputs_not_modified(self):
        a = vec([1, 2, 3])
        b = vec([4, 5, 6])
        add(a, b)
        subtract(a, b)
        scale(a, 3)
        negate(a)
        normalize(a)
        np.testing.assert_array_equal(a, vec([1, 2, 3]))
        np.testing.assert_array_equal(b, vec([4, 5, 6]))

    def test_vec_is_double_precision(self):
        self.assertEqual(vec([1, 2, 3]).dtype, np.float64)

    def test_length(self):
        self.assertEqual(length(vec([3, 4, 0])), 5.0)
        self.assertEqual(length(vec([0, 0, 0])), 0.0)

    def test_dot_is_squared_length(self):
        for v in self.vectors:
            self.assertAlmostEqual(dot(v, v), length(v) ** 2, delta=1e-12 * dot(v, v))

    def test_normalize_gives_unit_length(self):
        for v in self.vectors:
            self.assertAlmostEqual(length(normalize(v)), 1.0)

    def test_normalize_unit_vector_is_identity(self):
        for v in self.vectors:
            u = normalize(v)
            self.assertLess(length(subtract(normalize(u), u)), 1e-12)

    def test_normalize_degenerate(self):
        with self.assertRaises(DegenerateVectorError):
            normalize(vec([0, 0, 0]))
        with self.assertRaises(DegenerateVectorError):
            normalize(vec([np.nan, 1, 0]))
        with self.assertRaises(DegenerateVectorError):
            normalize(vec([np.inf, 1, 0]))
        # still a ValueError for callers that don't know the subclass
        with self.assertRaises(ValueError):
            normalize(vec([0, 0, 0]))


if __name__ == '__main__':
    unittest.main()
