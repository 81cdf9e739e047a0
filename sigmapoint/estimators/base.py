"""
Base classes for point-set transforms and Gaussian filters.

This module defines the abstract interfaces shared by the sigma-point
filtering engine, so that alternative point-set transforms or filters can be
substituted without touching the code that uses them.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from sigmapoint.distributions.gaussian import Gaussian
from sigmapoint.estimators.point_set import PointSet


class PointSetTransform(ABC):
    """
    Abstract base class for transforms mapping a Gaussian to a point set.

    A transform may be asked to treat the Gaussian as one block of a larger,
    block-diagonal "augmented" Gaussian of dimension global_dimension, starting
    at dimension_offset. The number of points is then determined by the global
    dimension and only the points belonging to the block are spread.
    """

    @staticmethod
    @abstractmethod
    def number_of_points(dimension: Optional[int]) -> int:
        """
        Number of points generated for a Gaussian of the given dimension.

        Args:
            dimension: (Global) dimension, or None if not known yet.

        Returns:
            Number of points, or 0 if the dimension is not known.
        """
        pass

    @abstractmethod
    def forward(
        self,
        gaussian: Gaussian,
        point_set: PointSet,
        global_dimension: Optional[int] = None,
        dimension_offset: int = 0,
    ) -> None:
        """
        Fill point_set with the points representing gaussian.

        Args:
            gaussian: Source Gaussian of (local) dimension d.
            point_set: Destination point set. Resized if dynamic.
            global_dimension: Dimension D >= d of the augmented Gaussian.
                Defaults to d.
            dimension_offset: Offset of gaussian within the augmented Gaussian.
        """
        pass


class GaussianFilterInterface(ABC):
    """Abstract base class for filters with a Gaussian belief."""

    @abstractmethod
    def predict(
        self,
        delta_time: float,
        input: Optional[np.ndarray],
        prior: Gaussian,
        predicted: Optional[Gaussian] = None,
    ) -> Gaussian:
        """
        Perform prediction step (time update).

        Args:
            delta_time: Time step.
            input: Control input vector, or None for a zero input.
            prior: Prior belief.
            predicted: Optional belief to write the result into.

        Returns:
            Predicted belief.
        """
        pass

    @abstractmethod
    def update(
        self,
        observation: np.ndarray,
        predicted: Gaussian,
        posterior: Optional[Gaussian] = None,
    ) -> Gaussian:
        """
        Perform measurement update (correction step).

        Args:
            observation: Observation vector.
            predicted: Predicted belief.
            posterior: Optional belief to write the result into.

        Returns:
            Posterior belief.
        """
        pass

    def predict_and_update(
        self,
        delta_time: float,
        input: Optional[np.ndarray],
        observation: np.ndarray,
        prior: Gaussian,
        posterior: Optional[Gaussian] = None,
    ) -> Gaussian:
        """
        Predict and update in one call, reusing the same belief object.

        Returns:
            Posterior belief.
        """
        belief = self.predict(delta_time, input, prior, posterior)
        return self.update(observation, belief, belief)
