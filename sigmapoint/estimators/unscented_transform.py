"""
Unscented Transform.

Implements the scaled unscented transform used by the Unscented Kalman Filter
(Wan & van der Merwe, 2000) as a PointSetTransform. For a Gaussian N(mu, P)
with square root S (S S^T = P) embedded in an augmented Gaussian of dimension
D, the 2D + 1 sigma points are

    X[0]     = mu
    X[i]     = mu + gamma S[:, k]        i = o + 1 + k
    X[D + i] = mu - gamma S[:, k]        k = 0, ..., d - 1

where o is the dimension offset of the Gaussian within the augmented one and
d its local dimension. All remaining indices are "padding" points equal to mu;
they are the sigma directions of the other blocks of the augmented Gaussian.

Scaling (all functions of the global dimension D):

    lambda = alpha^2 (D + kappa) - D
    gamma  = sqrt(D + lambda)
    Wm[0]  = lambda / (D + lambda)
    Wc[0]  = Wm[0] + (1 - alpha^2 + beta)
    Wm[i]  = Wc[i] = 1 / (2 (D + lambda))
"""

from typing import Optional

import numpy as np

from sigmapoint.distributions.gaussian import Gaussian
from sigmapoint.estimators.base import PointSetTransform
from sigmapoint.estimators.point_set import PointSet, Weight
from sigmapoint.exceptions import DimensionMismatchError, WrongSizeError


class UnscentedTransform(PointSetTransform):
    """
    Scaled unscented transform.

    Attributes:
        alpha: Spread of the sigma points around the mean.
        beta: Prior knowledge of the distribution (2 is optimal for Gaussians).
        kappa: Secondary (higher order) scaling parameter.

    Example:
        >>> ut = UnscentedTransform()
        >>> X = PointSet.dynamic(dimension=2)
        >>> ut.forward(Gaussian(2), X)
        >>> X.count
        5
        >>> X.point(1)
        array([1.41421356, 0.        ])
    """

    def __init__(self, alpha: float = 1.0, beta: float = 2.0, kappa: float = 0.0):
        """
        Create an unscented transform.

        Args:
            alpha: Spread of the sigma points, alpha > 0.
            beta: Prior knowledge parameter. 2.0 is optimal for Gaussians.
            kappa: Secondary scaling parameter.

        Raises:
            ValueError: If alpha is not positive.
        """
        if alpha <= 0:
            raise ValueError(f"alpha must be positive, got {alpha}")

        self.alpha = float(alpha)
        self.beta = float(beta)
        self.kappa = float(kappa)

    def __repr__(self) -> str:
        return (
            f"UnscentedTransform(alpha={self.alpha}, beta={self.beta}, "
            f"kappa={self.kappa})"
        )

    @staticmethod
    def number_of_points(dimension: Optional[int]) -> int:
        """
        Number of sigma points 2D + 1, or 0 if the dimension is unknown.
        """
        if dimension is None or dimension < 0:
            return 0
        return 2 * int(dimension) + 1

    def lambda_scalar(self, dim: float) -> float:
        return self.alpha * self.alpha * (dim + self.kappa) - dim

    def gamma_factor(self, dim: float) -> float:
        return np.sqrt(dim + self.lambda_scalar(dim))

    def weight_mean_0(self, dim: float) -> float:
        lambda_ = self.lambda_scalar(dim)
        return lambda_ / (dim + lambda_)

    def weight_cov_0(self, dim: float) -> float:
        return self.weight_mean_0(dim) + (1.0 - self.alpha * self.alpha + self.beta)

    def weight_mean_i(self, dim: float) -> float:
        return 1.0 / (2.0 * (dim + self.lambda_scalar(dim)))

    def weight_cov_i(self, dim: float) -> float:
        return self.weight_mean_i(dim)

    def forward(
        self,
        gaussian: Gaussian,
        point_set: PointSet,
        global_dimension: Optional[int] = None,
        dimension_offset: int = 0,
    ) -> None:
        """
        Compute the sigma points of gaussian and store them in point_set.

        Args:
            gaussian: Source Gaussian of local dimension d.
            point_set: Destination. A dynamic set is resized to 2D + 1 points.
            global_dimension: Dimension D of the augmented Gaussian, D >= d.
                Defaults to d.
            dimension_offset: Offset o of gaussian within the augmented
                Gaussian, 0 <= o and o + d <= D.

        Raises:
            WrongSizeError: If point_set is fixed and does not hold 2D + 1 points.
            DimensionMismatchError: If point_set.dimension != d.
            ValueError: If offset or scaling parameters are invalid.
        """
        local_dimension = gaussian.dimension
        if global_dimension is None:
            global_dimension = local_dimension

        if dimension_offset < 0 or dimension_offset + local_dimension > global_dimension:
            raise ValueError(
                f"Gaussian of dimension {local_dimension} at offset "
                f"{dimension_offset} does not fit into global dimension "
                f"{global_dimension}"
            )

        dim = float(global_dimension)
        if dim + self.lambda_scalar(dim) <= 0:
            raise ValueError(
                f"Degenerate unscented scaling for dimension {global_dimension}: "
                f"D + lambda = {dim + self.lambda_scalar(dim)} must be positive "
                f"(alpha={self.alpha}, kappa={self.kappa})"
            )

        point_count = self.number_of_points(global_dimension)

        if point_set.is_fixed and point_set.count != point_count:
            raise WrongSizeError(
                f"Incompatible number of points of the specified fixed-size "
                f"PointSet: holds {point_set.count}, transform requires {point_count}"
            )
        if point_set.dimension != local_dimension:
            raise DimensionMismatchError(
                f"PointSet dimension {point_set.dimension} does not match "
                f"Gaussian dimension {local_dimension}"
            )

        point_set.resize(point_count)

        covariance_sqrt = gaussian.square_root() * self.gamma_factor(dim)
        mean = gaussian.mean

        point_set.set_point(0, mean, Weight(self.weight_mean_0(dim), self.weight_cov_0(dim)))

        weight_i = Weight(self.weight_mean_i(dim), self.weight_cov_i(dim))

        limit_1 = 1 + dimension_offset
        limit_2 = limit_1 + local_dimension

        for i in range(1, limit_1):
            point_set.set_point(i, mean, weight_i)
            point_set.set_point(global_dimension + i, mean, weight_i)

        for i in range(limit_1, limit_2):
            point_shift = covariance_sqrt[:, i - limit_1]
            point_set.set_point(i, mean + point_shift, weight_i)
            point_set.set_point(global_dimension + i, mean - point_shift, weight_i)

        for i in range(limit_2, global_dimension + 1):
            point_set.set_point(i, mean, weight_i)
            point_set.set_point(global_dimension + i, mean, weight_i)
