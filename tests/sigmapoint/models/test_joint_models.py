"""
Unit tests for joint models of independent identical copies.
"""

import unittest

import numpy as np
from numpy.testing import assert_allclose

from sigmapoint.distributions.gaussian import Gaussian
from sigmapoint.estimators.gaussian_filter import GaussianFilter
from sigmapoint.estimators.unscented_transform import UnscentedTransform
from sigmapoint.exceptions import DimensionMismatchError
from sigmapoint.models import (
    ConstantVelocityProcessModel,
    JointObservationModel,
    JointProcessModel,
    LinearObservationModel,
    LinearProcessModel,
    ProcessModel,
)


class _BrokenProcessModel(ProcessModel):
    """Returns a state one element too long."""

    def state_dimension(self):
        return 2

    def noise_dimension(self):
        return 1

    def predict_state(self, delta_time, state, noise, input):
        return np.zeros(3)


class TestJointProcessModel(unittest.TestCase):

    def setUp(self):
        self.local = ConstantVelocityProcessModel(spatial_dim=1, q=0.2)
        self.joint = JointProcessModel(self.local, count=3)

    def test_dimensions(self):
        self.assertEqual(self.joint.state_dimension(), 6)
        self.assertEqual(self.joint.noise_dimension(), 6)
        self.assertEqual(self.joint.input_dimension(), 0)
        self.assertEqual(self.joint.count, 3)
        self.assertIs(self.joint.local_model, self.local)

    def test_blockwise_prediction(self):
        state = np.array([0.0, 1.0, 10.0, -1.0, 5.0, 0.0])
        noise = np.array([0.0, 0.0, 1.0, 0.0, 0.0, 0.0])
        dt = 0.5

        x = self.joint.predict_state(dt, state, noise, np.zeros(0))

        for i in range(3):
            expected = self.local.predict_state(
                dt, state[2 * i:2 * i + 2], noise[2 * i:2 * i + 2], np.zeros(0)
            )
            assert_allclose(x[2 * i:2 * i + 2], expected)

    def test_wrong_local_output_raises(self):
        joint = JointProcessModel(_BrokenProcessModel(), count=2)
        with self.assertRaises(DimensionMismatchError):
            joint.predict_state(1.0, np.zeros(4), np.zeros(2), np.zeros(0))

    def test_invalid_count(self):
        with self.assertRaises(ValueError):
            JointProcessModel(self.local, count=0)


class TestJointObservationModel(unittest.TestCase):

    def setUp(self):
        self.local = LinearObservationModel(H=[[1.0, 0.0]], noise_matrix=[[0.5]])
        self.joint = JointObservationModel(self.local, count=2, local_state_dim=2)

    def test_dimensions(self):
        self.assertEqual(self.joint.observation_dimension(), 2)
        self.assertEqual(self.joint.noise_dimension(), 2)

    def test_blockwise_observation(self):
        y = self.joint.predict_observation(
            np.array([1.0, 5.0, 3.0, 7.0]), np.array([2.0, -2.0]), 0.0
        )
        assert_allclose(y, [2.0, 2.0])

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            JointObservationModel(self.local, count=-1, local_state_dim=2)
        with self.assertRaises(ValueError):
            JointObservationModel(self.local, count=2, local_state_dim=-1)


class TestJointFilter(unittest.TestCase):
    """A filter over independent copies behaves like separate filters."""

    def test_independent_copies_match_single_filter(self):
        A = np.array([[1.0, 0.5], [0.0, 1.0]])
        local_process = LinearProcessModel(A=A, noise_matrix=0.2 * np.eye(2))
        local_sensor = LinearObservationModel(H=[[1.0, 0.0]], noise_matrix=[[0.3]])

        single = GaussianFilter(local_process, local_sensor, UnscentedTransform())
        joint = GaussianFilter(
            JointProcessModel(local_process, count=2),
            JointObservationModel(local_sensor, count=2, local_state_dim=2),
            UnscentedTransform(),
        )

        m = np.array([1.0, 0.2, -3.0, 1.0])
        P = np.diag([1.0, 0.5, 2.0, 0.1])
        y = np.array([1.4, -2.5])

        belief = joint.predict_and_update(0.5, None, y, Gaussian(mean=m, covariance=P))

        for i in range(2):
            s = slice(2 * i, 2 * i + 2)
            local = single.predict_and_update(
                0.5, None, y[i:i + 1], Gaussian(mean=m[s], covariance=P[s, s])
            )
            assert_allclose(belief.mean[s], local.mean, atol=1e-9)
            assert_allclose(belief.covariance[s, s], local.covariance, atol=1e-9)

        assert_allclose(belief.covariance[0:2, 2:4], np.zeros((2, 2)), atol=1e-9)


if __name__ == "__main__":
    unittest.main()
