"""
Weighted point sets.

A PointSet is an ordered collection of weighted points representing a discrete
approximation of a continuous Gaussian (e.g. the sigma points of the unscented
transform). Each point carries a pair of weights: one used to compute the mean
and one used to compute the (cross-)covariance.

Points are stored column-wise in a (dimension × count) matrix so that the
centered-points matrix X and the covariance weights W give every second moment
of the filter as X diag(W) Y^T.

A point set is either

- fixed: the number of points is declared once at construction and can never
  change. Its storage is allocated once.
- dynamic: the number of points may be changed with resize(), which
  reallocates storage.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from sigmapoint.exceptions import (
    DimensionMismatchError,
    OutOfBoundsError,
    ResizingFixedSizeEntityError,
)


@dataclass(frozen=True)
class Weight:
    """
    Weight pair of a single point.

    Attributes:
        w_mean: Weight used for the weighted mean.
        w_cov: Weight used for the weighted (cross-)covariance.
    """

    w_mean: float
    w_cov: float


@dataclass(frozen=True)
class WeightedPoint:
    """A point vector together with its weight pair."""

    point: np.ndarray
    weight: Weight


class PointSet:
    """
    Ordered, indexable container of weighted points.

    Attributes:
        dimension: Length of each point vector.
        count: Number of points.
        is_fixed: True if the number of points can not be changed.

    Example:
        >>> X = PointSet.fixed(dimension=2, count=3)
        >>> X.set_point(0, np.array([1.0, 2.0]), Weight(1.0, 1.0))
        >>> X.mean()
        array([1., 2.])
        >>> X.resize(5)
        Traceback (most recent call last):
        ...
        sigmapoint.exceptions.ResizingFixedSizeEntityError: Attempt to resize the fixed-size PointSet from 3 to 5
    """

    def __init__(self, dimension: int, count: int = 0, fixed: bool = False):
        """
        Create a point set with all points and weights zero.

        Args:
            dimension: Length of each point vector.
            count: Number of points.
            fixed: If True, the number of points is fixed to count.

        Raises:
            ValueError: If dimension or count is negative.
        """
        if dimension < 0:
            raise ValueError(f"Point dimension must be non-negative, got {dimension}")
        if count < 0:
            raise ValueError(f"Number of points must be non-negative, got {count}")

        self._dimension = int(dimension)
        self._count = int(count)
        self._fixed = bool(fixed)

        self._points = np.zeros((self._dimension, self._count))
        self._w_mean = np.zeros(self._count)
        self._w_cov = np.zeros(self._count)

    @classmethod
    def fixed(cls, dimension: int, count: int) -> "PointSet":
        """Create a point set whose number of points can never change."""
        return cls(dimension, count, fixed=True)

    @classmethod
    def dynamic(cls, dimension: int, count: int = 0) -> "PointSet":
        """Create a point set which can be resized."""
        return cls(dimension, count, fixed=False)

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_fixed(self) -> bool:
        return self._fixed

    def count_points(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def __getitem__(self, i: int) -> WeightedPoint:
        return WeightedPoint(self.point(i), self.weight(i))

    def __iter__(self) -> Iterator[WeightedPoint]:
        for i in range(self._count):
            yield self[i]

    def __repr__(self) -> str:
        kind = "fixed" if self._fixed else "dynamic"
        return f"PointSet(dimension={self._dimension}, count={self._count}, {kind})"

    def resize(self, count: int) -> None:
        """
        Change the number of points.

        A dynamic set keeps the first min(old, new) points and zero-fills the
        rest. Resizing a fixed set to its own count is a no-op.

        Raises:
            ResizingFixedSizeEntityError: If the set is fixed and count differs.
            ValueError: If count is negative.
        """
        if count == self._count:
            return
        if self._fixed:
            raise ResizingFixedSizeEntityError(self._count, count, "PointSet")
        if count < 0:
            raise ValueError(f"Number of points must be non-negative, got {count}")

        keep = min(count, self._count)

        points = np.zeros((self._dimension, count))
        points[:, :keep] = self._points[:, :keep]
        w_mean = np.zeros(count)
        w_mean[:keep] = self._w_mean[:keep]
        w_cov = np.zeros(count)
        w_cov[:keep] = self._w_cov[:keep]

        self._points, self._w_mean, self._w_cov = points, w_mean, w_cov
        self._count = count

    def set_dimension(self, dimension: int) -> None:
        """
        Change the point dimension. All point vectors are reset to zero,
        weights are kept.
        """
        if dimension < 0:
            raise ValueError(f"Point dimension must be non-negative, got {dimension}")
        if dimension == self._dimension:
            return
        self._dimension = int(dimension)
        self._points = np.zeros((self._dimension, self._count))

    def _check_index(self, i: int) -> None:
        if not 0 <= i < self._count:
            raise OutOfBoundsError(i, self._count)

    def point(self, i: int) -> np.ndarray:
        """
        Return a copy of the i-th point.

        Raises:
            OutOfBoundsError: If i is not in [0, count).
        """
        self._check_index(i)
        return self._points[:, i].copy()

    def weight(self, i: int) -> Weight:
        """
        Return the weight pair of the i-th point.

        Raises:
            OutOfBoundsError: If i is not in [0, count).
        """
        self._check_index(i)
        return Weight(float(self._w_mean[i]), float(self._w_cov[i]))

    def set_point(self, i: int, point: np.ndarray, weight: Optional[Weight] = None) -> None:
        """
        Set the i-th point and, if given, its weight.

        The arguments are validated before anything is written.

        Args:
            i: Point index in [0, count).
            point: Point vector of length dimension.
            weight: Weight pair. The current weight is kept if None.

        Raises:
            OutOfBoundsError: If i is not in [0, count).
            DimensionMismatchError: If the point does not have length dimension.
        """
        self._check_index(i)

        point = np.asarray(point, dtype=float).reshape(-1)
        if point.size != self._dimension:
            raise DimensionMismatchError(
                f"Point of dimension {point.size} does not match the point set "
                f"dimension {self._dimension}"
            )

        self._points[:, i] = point
        if weight is not None:
            self._w_mean[i] = weight.w_mean
            self._w_cov[i] = weight.w_cov

    def set_weight(self, i: int, weight: Weight) -> None:
        """
        Set the weight pair of the i-th point.

        Raises:
            OutOfBoundsError: If i is not in [0, count).
        """
        self._check_index(i)
        self._w_mean[i] = weight.w_mean
        self._w_cov[i] = weight.w_cov

    def points(self) -> np.ndarray:
        """Return a copy of all points as a (dimension × count) matrix."""
        return self._points.copy()

    def mean(self) -> np.ndarray:
        """
        Weighted mean of the points.

            mu = Σ w_mean[i] X[i]

        Returns:
            Mean vector (dimension,).
        """
        return self._points @ self._w_mean

    def centered_points(self) -> np.ndarray:
        """
        Points shifted by the weighted mean.

            X = [X[0] - mu, X[1] - mu, ..., X[count-1] - mu]

        Returns:
            Centered points matrix (dimension × count).
        """
        return self._points - self.mean()[:, np.newaxis]

    def mean_weights_vector(self) -> np.ndarray:
        """Return the mean weights as a vector (count,)."""
        return self._w_mean.copy()

    def covariance_weights_vector(self) -> np.ndarray:
        """
        Return the covariance weights as a vector (count,).

        Used as the diagonal of the weighting matrix in X diag(W) Y^T.
        """
        return self._w_cov.copy()
