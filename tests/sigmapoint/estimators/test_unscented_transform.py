"""
Unit tests for the unscented transform.

Tests cover:
    - Weight normalization and covariance weight identity
    - Number of points
    - Worked 2D example with standard normal input
    - Augmented layout with dimension offset (padding points)
    - Fixed-size point set violations
"""

import unittest

import numpy as np
import pytest
from numpy.testing import assert_allclose

from sigmapoint.distributions.gaussian import Gaussian
from sigmapoint.estimators.point_set import PointSet, Weight
from sigmapoint.estimators.unscented_transform import UnscentedTransform
from sigmapoint.exceptions import (
    DimensionMismatchError,
    OutOfBoundsError,
    WrongSizeError,
)


@pytest.mark.parametrize("alpha", [1e-3, 0.1, 0.5, 1.0, 2.0])
@pytest.mark.parametrize("beta", [0.0, 2.0])
@pytest.mark.parametrize("kappa", [0.0, 1.0, 3.0])
@pytest.mark.parametrize("D", [1, 2, 5, 12])
def test_mean_weights_sum_to_one(alpha, beta, kappa, D):
    ut = UnscentedTransform(alpha, beta, kappa)
    total = ut.weight_mean_0(D) + 2 * D * ut.weight_mean_i(D)
    assert abs(total - 1.0) < 1e-9


@pytest.mark.parametrize("alpha, beta, kappa", [(1.0, 2.0, 0.0), (0.3, 0.0, 1.0), (1e-3, 2.0, 0.0)])
@pytest.mark.parametrize("D", [1, 3, 8])
def test_covariance_weight_identity(alpha, beta, kappa, D):
    ut = UnscentedTransform(alpha, beta, kappa)
    assert ut.weight_cov_0(D) == pytest.approx(ut.weight_mean_0(D) + (1 - alpha**2 + beta))
    assert ut.weight_cov_i(D) == ut.weight_mean_i(D)


@pytest.mark.parametrize("D", [0, 1, 2, 7, 30])
def test_number_of_points(D):
    assert UnscentedTransform.number_of_points(D) == 2 * D + 1


def test_number_of_points_unknown_dimension():
    assert UnscentedTransform.number_of_points(None) == 0


class TestWorkedExample(unittest.TestCase):
    """alpha=1, beta=2, kappa=0, D=2 with N(0, I)."""

    def setUp(self):
        self.ut = UnscentedTransform(alpha=1.0, beta=2.0, kappa=0.0)

    def test_scalars(self):
        self.assertAlmostEqual(self.ut.lambda_scalar(2), 0.0)
        self.assertAlmostEqual(self.ut.gamma_factor(2), np.sqrt(2.0))
        self.assertAlmostEqual(self.ut.weight_mean_0(2), 0.0)
        self.assertAlmostEqual(self.ut.weight_cov_0(2), 2.0)
        self.assertAlmostEqual(self.ut.weight_mean_i(2), 0.25)
        self.assertAlmostEqual(self.ut.weight_cov_i(2), 0.25)

    def test_points(self):
        X = PointSet.dynamic(dimension=2)
        self.ut.forward(Gaussian(2), X)

        s = np.sqrt(2.0)
        expected = np.array([
            [0.0, 0.0],
            [s, 0.0],
            [0.0, s],
            [-s, 0.0],
            [0.0, -s],
        ])

        self.assertEqual(X.count, 5)
        for i in range(5):
            assert_allclose(X.point(i), expected[i], atol=1e-12)

        self.assertEqual(X.weight(0), Weight(0.0, 2.0))
        for i in range(1, 5):
            self.assertAlmostEqual(X.weight(i).w_mean, 0.25)
            self.assertAlmostEqual(X.weight(i).w_cov, 0.25)

    def test_moments_are_reconstructed(self):
        L = np.array([[2.0, 0.0], [0.5, 1.0]])
        g = Gaussian(mean=[1.0, -2.0], covariance=L @ L.T)

        X = PointSet.dynamic(dimension=2)
        self.ut.forward(g, X)

        C = X.centered_points()
        W = X.covariance_weights_vector()

        assert_allclose(X.mean(), g.mean, atol=1e-12)
        assert_allclose(C @ np.diag(W) @ C.T, g.covariance, atol=1e-12)


class TestAugmentedLayout(unittest.TestCase):
    """Test the padded point layout for a block of an augmented Gaussian."""

    def setUp(self):
        self.ut = UnscentedTransform(alpha=1.0, beta=2.0, kappa=0.0)
        self.mean = np.array([3.0, -1.0])
        self.cov = np.diag([4.0, 9.0])
        self.gaussian = Gaussian(mean=self.mean, covariance=self.cov)

    def test_block_at_offset(self):
        D, offset = 5, 2
        X = PointSet.dynamic(dimension=2)
        self.ut.forward(self.gaussian, X, global_dimension=D, dimension_offset=offset)

        self.assertEqual(X.count, 2 * D + 1)
        gamma = self.ut.gamma_factor(D)
        S = np.diag([2.0, 3.0])

        spread = {offset + 1 + k for k in range(2)}
        for i in range(1, D + 1):
            if i in spread:
                k = i - offset - 1
                assert_allclose(X.point(i), self.mean + gamma * S[:, k])
                assert_allclose(X.point(D + i), self.mean - gamma * S[:, k])
            else:
                assert_allclose(X.point(i), self.mean)
                assert_allclose(X.point(D + i), self.mean)

    def test_all_weights_depend_on_global_dimension(self):
        D = 6
        X = PointSet.dynamic(dimension=2)
        self.ut.forward(self.gaussian, X, global_dimension=D, dimension_offset=4)

        self.assertAlmostEqual(X.weight(0).w_mean, self.ut.weight_mean_0(D))
        self.assertAlmostEqual(X.weight(0).w_cov, self.ut.weight_cov_0(D))
        for i in range(1, 2 * D + 1):
            self.assertAlmostEqual(X.weight(i).w_mean, self.ut.weight_mean_i(D))
        self.assertAlmostEqual(X.mean_weights_vector().sum(), 1.0, places=12)

    def test_blocks_share_index_space(self):
        """Three blocks at consecutive offsets spread disjoint indices."""
        dims = [2, 1, 3]
        D = sum(dims)
        offsets = [0, 2, 3]

        spread_indices = []
        for d, o in zip(dims, offsets):
            g = Gaussian(d)
            X = PointSet.dynamic(dimension=d)
            self.ut.forward(g, X, global_dimension=D, dimension_offset=o)
            moved = [i for i in range(X.count) if np.any(X.point(i) != 0.0)]
            spread_indices.append(set(moved))

        self.assertEqual(set.union(*spread_indices), set(range(1, 2 * D + 1)))
        self.assertFalse(spread_indices[0] & spread_indices[1])
        self.assertFalse(spread_indices[1] & spread_indices[2])

    def test_block_marginal_moments(self):
        """Each block's points reproduce its own mean and covariance."""
        D = 7
        X = PointSet.dynamic(dimension=2)
        self.ut.forward(self.gaussian, X, global_dimension=D, dimension_offset=3)

        C = X.centered_points()
        W = X.covariance_weights_vector()
        assert_allclose(X.mean(), self.mean, atol=1e-12)
        assert_allclose(C @ np.diag(W) @ C.T, self.cov, atol=1e-10)

    def test_invalid_offset_raises(self):
        X = PointSet.dynamic(dimension=2)
        with self.assertRaises(ValueError):
            self.ut.forward(self.gaussian, X, global_dimension=3, dimension_offset=2)
        with self.assertRaises(ValueError):
            self.ut.forward(self.gaussian, X, global_dimension=3, dimension_offset=-1)


class TestFixedSizeViolations(unittest.TestCase):
    """Test size mismatches with fixed-size point sets."""

    def setUp(self):
        self.ut = UnscentedTransform()

    def test_fixed_set_with_wrong_count_raises(self):
        X = PointSet.fixed(dimension=2, count=7)
        with self.assertRaises(WrongSizeError):
            self.ut.forward(Gaussian(2), X)  # needs 5 points

    def test_wrong_size_is_a_value_error(self):
        X = PointSet.fixed(dimension=2, count=3)
        with self.assertRaises(ValueError):
            self.ut.forward(Gaussian(2), X)

    def test_fixed_set_with_matching_count(self):
        X = PointSet.fixed(dimension=2, count=9)
        self.ut.forward(Gaussian(2), X, global_dimension=4, dimension_offset=1)
        self.assertEqual(X.count, 9)

    def test_write_past_fixed_count_records_index(self):
        X = PointSet.fixed(dimension=2, count=5)
        self.ut.forward(Gaussian(2), X)
        with self.assertRaises(OutOfBoundsError) as ctx:
            X.set_point(5, np.zeros(2), Weight(0.0, 0.0))
        self.assertEqual(ctx.exception.index, 5)

    def test_dynamic_set_is_resized(self):
        X = PointSet.dynamic(dimension=3, count=2)
        self.ut.forward(Gaussian(3), X)
        self.assertEqual(X.count, 7)

    def test_dimension_mismatch_raises(self):
        X = PointSet.dynamic(dimension=3)
        with self.assertRaises(DimensionMismatchError):
            self.ut.forward(Gaussian(2), X)


class TestScalingValidation(unittest.TestCase):

    def test_non_positive_alpha_raises(self):
        with self.assertRaises(ValueError):
            UnscentedTransform(alpha=0.0)

    def test_degenerate_scaling_raises(self):
        # D + lambda = alpha^2 (D + kappa) = 0 for kappa = -D
        ut = UnscentedTransform(alpha=1.0, kappa=-2.0)
        with self.assertRaises(ValueError):
            ut.forward(Gaussian(2), PointSet.dynamic(2))


if __name__ == "__main__":
    unittest.main()
