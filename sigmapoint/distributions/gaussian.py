"""
Multivariate Gaussian belief with a cached covariance square root.

The Gaussian is the belief type consumed and produced by the sigma-point
filter. Point-set transforms only need its mean and a square root factor S of
its covariance (S @ S.T = P), which is computed lazily and cached until the
covariance changes.
"""

from typing import Optional

import numpy as np

from sigmapoint.utils.linalg import covariance_square_root, symmetrize


class Gaussian:
    """
    Multivariate normal distribution N(mean, covariance).

    Attributes:
        dimension: Dimension n of the random vector.
        mean: Mean vector (n,).
        covariance: Covariance matrix (n×n), symmetric positive semi-definite.

    Example:
        >>> g = Gaussian(2)              # standard normal, N(0, I)
        >>> g.mean
        array([0., 0.])
        >>> g = Gaussian(mean=[1.0, 2.0], covariance=np.diag([4.0, 9.0]))
        >>> g.square_root()
        array([[2., 0.],
               [0., 3.]])
    """

    def __init__(
        self,
        dimension: Optional[int] = None,
        mean: Optional[np.ndarray] = None,
        covariance: Optional[np.ndarray] = None,
    ):
        """
        Create a Gaussian.

        Without mean and covariance the Gaussian is the standard normal of the
        given dimension. If only a mean is given the covariance is identity.

        Args:
            dimension: Dimension n. Inferred from mean/covariance if omitted.
            mean: Mean vector (n,).
            covariance: Covariance matrix (n×n).

        Raises:
            ValueError: If no dimension can be determined or shapes disagree.
        """
        if dimension is None:
            if mean is not None:
                dimension = np.asarray(mean).size
            elif covariance is not None:
                dimension = np.asarray(covariance).shape[0]
            else:
                raise ValueError("Gaussian needs a dimension, a mean or a covariance")

        if dimension < 0:
            raise ValueError(f"Dimension must be non-negative, got {dimension}")

        self._dimension = int(dimension)
        self._square_root: Optional[np.ndarray] = None
        self.set_standard()

        if mean is not None:
            self.set_mean(mean)
        if covariance is not None:
            self.set_covariance(covariance)

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def mean(self) -> np.ndarray:
        return self._mean

    @mean.setter
    def mean(self, value: np.ndarray) -> None:
        self.set_mean(value)

    @property
    def covariance(self) -> np.ndarray:
        return self._covariance

    @covariance.setter
    def covariance(self, value: np.ndarray) -> None:
        self.set_covariance(value)

    def set_mean(self, mean: np.ndarray) -> None:
        """
        Set the mean vector.

        Raises:
            ValueError: If the mean does not have shape (n,).
        """
        mean = np.asarray(mean, dtype=float).reshape(-1)
        if mean.shape != (self._dimension,):
            raise ValueError(
                f"Mean shape {mean.shape} inconsistent with dimension {self._dimension}"
            )
        self._mean = mean.copy()

    def set_covariance(self, covariance: np.ndarray) -> None:
        """
        Set the covariance matrix and invalidate the cached square root.

        Raises:
            ValueError: If the covariance is not (n×n) or not symmetric.
        """
        covariance = np.asarray(covariance, dtype=float)
        n = self._dimension
        if covariance.shape != (n, n):
            raise ValueError(
                f"Covariance shape {covariance.shape} inconsistent with dimension {n}"
            )
        if not np.allclose(covariance, covariance.T, rtol=1e-7, atol=1e-9):
            raise ValueError("Covariance must be symmetric")

        self._covariance = symmetrize(covariance)
        self._square_root = None

    def set_standard(self) -> None:
        """Reset to the standard normal N(0, I)."""
        n = self._dimension
        self._mean = np.zeros(n)
        self._covariance = np.eye(n)
        self._square_root = np.eye(n)

    def square_root(self) -> np.ndarray:
        """
        Return a square root S of the covariance with S @ S.T = covariance.

        The factor is cached until the covariance is changed.
        """
        if self._square_root is None:
            self._square_root = covariance_square_root(self._covariance)
        return self._square_root

    def copy(self) -> "Gaussian":
        return Gaussian(mean=self._mean, covariance=self._covariance)

    def __repr__(self) -> str:
        return (
            f"Gaussian(dimension={self._dimension}, mean={self._mean!r}, "
            f"covariance={self._covariance!r})"
        )
