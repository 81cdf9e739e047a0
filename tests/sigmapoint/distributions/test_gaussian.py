"""
Unit tests for the Gaussian belief and the covariance square root.
"""

import unittest
import warnings

import numpy as np
from numpy.testing import assert_allclose

from sigmapoint.distributions.gaussian import Gaussian
from sigmapoint.exceptions import NumericalWarning
from sigmapoint.utils.linalg import covariance_square_root, symmetrize


class TestGaussianConstruction(unittest.TestCase):

    def test_standard_normal(self):
        g = Gaussian(3)
        self.assertEqual(g.dimension, 3)
        assert_allclose(g.mean, np.zeros(3))
        assert_allclose(g.covariance, np.eye(3))
        assert_allclose(g.square_root(), np.eye(3))

    def test_dimension_inferred_from_mean(self):
        g = Gaussian(mean=[1.0, 2.0])
        self.assertEqual(g.dimension, 2)
        assert_allclose(g.covariance, np.eye(2))

    def test_dimension_inferred_from_covariance(self):
        g = Gaussian(covariance=np.diag([4.0, 9.0]))
        self.assertEqual(g.dimension, 2)
        assert_allclose(g.mean, np.zeros(2))

    def test_missing_dimension_raises(self):
        with self.assertRaises(ValueError):
            Gaussian()

    def test_inconsistent_shapes_raise(self):
        with self.assertRaises(ValueError):
            Gaussian(2, mean=[1.0, 2.0, 3.0])
        with self.assertRaises(ValueError):
            Gaussian(mean=[1.0, 2.0], covariance=np.eye(3))

    def test_asymmetric_covariance_raises(self):
        with self.assertRaises(ValueError):
            Gaussian(covariance=np.array([[1.0, 0.5], [0.0, 1.0]]))

    def test_zero_dimension(self):
        g = Gaussian(0)
        self.assertEqual(g.mean.shape, (0,))
        self.assertEqual(g.square_root().shape, (0, 0))


class TestGaussianSetters(unittest.TestCase):

    def test_square_root_is_cached_until_covariance_changes(self):
        g = Gaussian(mean=[0.0, 0.0], covariance=np.diag([4.0, 9.0]))
        S = g.square_root()
        assert_allclose(S, np.diag([2.0, 3.0]))
        self.assertIs(g.square_root(), S)

        g.covariance = np.diag([1.0, 16.0])
        assert_allclose(g.square_root(), np.diag([1.0, 4.0]))

    def test_mean_setter_copies(self):
        g = Gaussian(2)
        m = np.array([1.0, 2.0])
        g.mean = m
        m[0] = 100.0
        assert_allclose(g.mean, [1.0, 2.0])

    def test_set_standard(self):
        g = Gaussian(mean=[1.0, 2.0], covariance=np.diag([4.0, 9.0]))
        g.set_standard()
        assert_allclose(g.mean, np.zeros(2))
        assert_allclose(g.covariance, np.eye(2))

    def test_copy_is_independent(self):
        g = Gaussian(mean=[1.0, 2.0], covariance=np.diag([4.0, 9.0]))
        h = g.copy()
        h.set_mean([0.0, 0.0])
        assert_allclose(g.mean, [1.0, 2.0])
        self.assertEqual(h.dimension, 2)


class TestCovarianceSquareRoot(unittest.TestCase):

    def test_positive_definite_uses_cholesky(self):
        P = np.array([[4.0, 2.0], [2.0, 3.0]])
        S = covariance_square_root(P)
        assert_allclose(S @ S.T, P, atol=1e-12)
        self.assertEqual(S[0, 1], 0.0)

    def test_semidefinite_falls_back_without_warning(self):
        P = np.array([[1.0, 1.0], [1.0, 1.0]])
        with warnings.catch_warnings():
            warnings.simplefilter("error", NumericalWarning)
            S = covariance_square_root(P)
        assert_allclose(S @ S.T, P, atol=1e-12)

    def test_indefinite_warns(self):
        P = np.diag([1.0, -0.5])
        with self.assertWarns(NumericalWarning):
            S = covariance_square_root(P)
        assert_allclose(S @ S.T, np.diag([1.0, 0.0]), atol=1e-12)

    def test_symmetrize(self):
        P = np.array([[1.0, 2.0], [0.0, 1.0]])
        assert_allclose(symmetrize(P), [[1.0, 1.0], [1.0, 1.0]])


if __name__ == "__main__":
    unittest.main()
