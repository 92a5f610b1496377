"""Tests for the independence module.

This module tests the determinant formulas and the vector system,
using hand-picked systems with known verdicts and random systems checked
against numpy's determinant.
"""

import sys
import unittest
from pathlib import Path

import numpy as np
import pytest

# Add parent directory to path
sys.path.append(str(Path(__file__).resolve().parent.parent))

from vecindep import independence
from vecindep.independence import (
    EPSILON,
    IndependenceChecker,
    InvalidConfiguration,
    SystemSize,
)
from vecindep.parsing import ParseError


def make_checker(rows, epsilon=EPSILON):
    checker = IndependenceChecker(len(rows), epsilon=epsilon)
    for i, row in enumerate(rows):
        checker.set_coordinates(i, row)
    return checker


class TestDeterminants(unittest.TestCase):
    """Test the closed-form determinants."""

    def test_det2(self):
        m = np.array([[3.0, 1.0], [2.0, 4.0]])
        self.assertEqual(independence.det2(m), 10.0)

    def test_det3(self):
        m = np.array([
            [2.0, 0.0, 1.0],
            [1.0, 3.0, 2.0],
            [1.0, 1.0, 1.0],
        ])
        # 2*(3-2) - 0*(1-2) + 1*(1-3)
        self.assertEqual(independence.det3(m), 0.0)

    def test_random_matches_numpy(self):
        rng = np.random.default_rng(7)
        for _ in range(50):
            m2 = rng.uniform(-10, 10, size=(2, 2))
            m3 = rng.uniform(-10, 10, size=(3, 3))
            for m, det in ((m2, independence.det2), (m3, independence.det3)):
                expected = np.linalg.det(m)
                self.assertAlmostEqual(det(m), expected, delta=1e-9 * max(1.0, abs(expected)))


class TestConstruction(unittest.TestCase):
    """Test construction of vector systems."""

    def test_sizes(self):
        for size in (2, 3, SystemSize.TWO, np.int64(3)):
            checker = IndependenceChecker(size)
            self.assertEqual(checker.vectors.shape, (int(size), int(size)))
            np.testing.assert_array_equal(checker.vectors, 0.0)
            self.assertFalse(checker.populated)

    def test_invalid_sizes(self):
        for size in (0, 1, 4, -2, 2.0, "2", None, True):
            with self.assertRaises(InvalidConfiguration):
                IndependenceChecker(size)

    def test_invalid_epsilon(self):
        for epsilon in (-1e-9, float("nan"), float("inf"), "tiny"):
            with self.assertRaises(InvalidConfiguration):
                IndependenceChecker(2, epsilon=epsilon)

    def test_invalid_configuration_is_value_error(self):
        with pytest.raises(ValueError):
            IndependenceChecker(5)


class TestSetCoordinates(unittest.TestCase):
    """Test storing vector coordinates."""

    def setUp(self):
        self.checker = make_checker([[1.0, 2.0], [3.0, 4.0]])

    def test_populated(self):
        self.assertTrue(self.checker.populated)
        np.testing.assert_array_equal(self.checker.vectors, [[1, 2], [3, 4]])

    def test_wrong_count_leaves_vector_untouched(self):
        with self.assertRaises(ParseError):
            self.checker.set_coordinates(0, [5.0, 6.0, 7.0])
        with self.assertRaises(ParseError):
            self.checker.set_coordinates(0, [5.0])
        np.testing.assert_array_equal(self.checker.vectors[0], [1, 2])

    def test_non_finite_leaves_vector_untouched(self):
        for bad in ([float("nan"), 1.0], [1.0, float("inf")], [1.0, "x"]):
            with self.assertRaises(ParseError):
                self.checker.set_coordinates(1, bad)
        np.testing.assert_array_equal(self.checker.vectors[1], [3, 4])

    def test_malformed_text_leaves_vector_untouched(self):
        with self.assertRaises(ParseError):
            self.checker.set_coordinates_from_text(0, "1 abc")
        np.testing.assert_array_equal(self.checker.vectors[0], [1, 2])

    def test_text_with_decimal_comma(self):
        self.checker.set_coordinates_from_text(0, "1,5  -2")
        np.testing.assert_array_equal(self.checker.vectors[0], [1.5, -2.0])

    def test_index_out_of_range(self):
        for index in (-1, 2, 3):
            with self.assertRaises(IndexError):
                self.checker.set_coordinates(index, [0.0, 0.0])

    def test_vectors_is_a_copy(self):
        vectors = self.checker.vectors
        with self.assertRaises(ValueError):
            vectors[0, 0] = 100.0
        np.testing.assert_array_equal(self.checker.vectors[0], [1, 2])

    def test_partially_filled(self):
        checker = IndependenceChecker(3)
        checker.set_coordinates(0, [1, 0, 0])
        checker.set_coordinates(2, [0, 0, 1])
        self.assertFalse(checker.populated)
        checker.set_coordinates(1, [0, 1, 0])
        self.assertTrue(checker.populated)


class TestIndependence(unittest.TestCase):
    """Test the independence verdict."""

    def test_standard_basis_2d(self):
        self.assertTrue(make_checker([[1, 0], [0, 1]]).is_linearly_independent())

    def test_standard_basis_3d(self):
        checker = make_checker([[1, 0, 0], [0, 1, 0], [0, 0, 1]])
        self.assertTrue(checker.is_linearly_independent())

    def test_zero_vector_3d(self):
        checker = make_checker([[1, 0, 0], [0, 1, 0], [0, 0, 0]])
        self.assertEqual(checker.determinant(), 0.0)
        self.assertFalse(checker.is_linearly_independent())

    def test_identical_vectors_2d(self):
        rng = np.random.default_rng(3)
        for _ in range(20):
            v = rng.uniform(-100, 100, size=2)
            checker = make_checker([v, v])
            self.assertEqual(checker.determinant(), 0.0)
            self.assertFalse(checker.is_linearly_independent())

    def test_parallel_vectors_3d(self):
        checker = make_checker([[1, 2, 3], [2, 4, 6], [0, 1, 5]])
        self.assertFalse(checker.is_linearly_independent())

    def test_coplanar_vectors_3d(self):
        # C = A + B
        checker = make_checker([[1, 2, 0], [0, 1, 3], [1, 3, 3]])
        self.assertFalse(checker.is_linearly_independent())

    def test_epsilon_boundary_is_dependent(self):
        checker = make_checker([[1, 0], [0, 1e-9]])
        self.assertEqual(checker.determinant(), 1e-9)
        self.assertFalse(checker.is_linearly_independent())

        checker = make_checker([[1, 0], [0, -1e-9]])
        self.assertFalse(checker.is_linearly_independent())

    def test_just_above_epsilon_is_independent(self):
        checker = make_checker([[1, 0], [0, 2e-9]])
        self.assertTrue(checker.is_linearly_independent())

    def test_custom_epsilon(self):
        checker = make_checker([[1, 0], [0, 1]], epsilon=1.0)
        self.assertFalse(checker.is_linearly_independent())
        checker = make_checker([[2, 0], [0, 1]], epsilon=1.0)
        self.assertTrue(checker.is_linearly_independent())

    def test_random_matches_formula(self):
        rng = np.random.default_rng(11)
        for _ in range(100):
            (a0, a1), (b0, b1) = rng.integers(-5, 6, size=(2, 2))
            checker = make_checker([[a0, a1], [b0, b1]])
            expected = abs(a0 * b1 - a1 * b0) > 1e-9
            self.assertEqual(checker.is_linearly_independent(), expected)

            m = rng.integers(-3, 4, size=(3, 3)).astype(float)
            checker = make_checker(m)
            expected = abs(round(np.linalg.det(m))) > 0
            self.assertEqual(checker.is_linearly_independent(), expected)

    def test_scaling_preserves_verdict(self):
        rng = np.random.default_rng(5)
        for _ in range(30):
            m = rng.uniform(-5, 5, size=(3, 3))
            base = make_checker(m).is_linearly_independent()
            for scale in (-3.0, 0.5, 10.0):
                scaled = m.copy()
                scaled[1] *= scale
                self.assertEqual(make_checker(scaled).is_linearly_independent(), base)

    def test_overflowing_products_independent(self):
        checker = make_checker([[1e200, 1e200], [1e200, 2e200]])
        with np.errstate(all="raise"):
            det = checker.determinant()
        self.assertEqual(det, float("inf"))
        self.assertTrue(checker.is_linearly_independent())

    def test_overflowing_products_dependent(self):
        checker = make_checker([[1e200, 2e200], [2e200, 4e200]])
        self.assertEqual(checker.determinant(), 0.0)
        self.assertFalse(checker.is_linearly_independent())

        checker = make_checker([[1e200, 0, 0], [0, 1e200, 0], [3e200, -2e200, 0]])
        self.assertFalse(checker.is_linearly_independent())

    def test_overflowing_products_finite_determinant(self):
        # 1e300 * (1e10 + 16) - 1e300 * 1e10
        checker = make_checker([[1e300, 1e300], [1e10, 1e10 + 16]])
        det = checker.determinant()
        self.assertTrue(np.isfinite(det))
        np.testing.assert_allclose(det, 1.6e301, rtol=1e-5)
        self.assertTrue(checker.is_linearly_independent())

    def test_evaluation_does_not_mutate(self):
        checker = make_checker([[1.23456789, 2], [3, 4]])
        before = checker.vectors
        checker.is_linearly_independent()
        checker.format_vectors(precision=2)
        np.testing.assert_array_equal(checker.vectors, before)
        self.assertTrue(checker.evaluated)

    def test_setting_coordinates_resets_evaluated(self):
        checker = make_checker([[1, 0], [0, 1]])
        checker.is_linearly_independent()
        checker.set_coordinates(1, [1, 0])
        self.assertFalse(checker.evaluated)
        self.assertFalse(checker.is_linearly_independent())


class TestFormatVectors(unittest.TestCase):
    """Test the vector listing."""

    def test_format_2d(self):
        checker = make_checker([[1, 2.5], [-3, 0]])
        self.assertEqual(checker.format_vectors(), "A = (1, 2.5)\nB = (-3, 0)")

    def test_format_3d_rounds_for_display(self):
        checker = make_checker([[1.23456, 0, 0], [0, 1, 0], [0, 0, -0.00001]])
        self.assertEqual(
            checker.format_vectors(precision=4),
            "A = (1.2346, 0, 0)\nB = (0, 1, 0)\nC = (0, 0, 0)",
        )
        self.assertEqual(checker.vectors[0, 0], 1.23456)

    def test_labels(self):
        checker = IndependenceChecker(3)
        self.assertEqual([checker.label(i) for i in range(3)], ["A", "B", "C"])


if __name__ == "__main__":
    unittest.main()
