"""
Process and observation model interfaces.

Models are treated as stateless functions with non-additive noise. The noise
arguments are samples of a standard normal N(0, I); a model applies its own
noise scaling inside predict_state / predict_observation. This allows the
filter to precompute the noise sigma points once.
"""

from abc import ABC, abstractmethod

import numpy as np


class ProcessModel(ABC):
    """
    Abstract process (motion) model x_k = f(x_{k-1}, w, u, dt).
    """

    @abstractmethod
    def state_dimension(self) -> int:
        pass

    @abstractmethod
    def noise_dimension(self) -> int:
        pass

    def input_dimension(self) -> int:
        return 0

    @abstractmethod
    def predict_state(
        self,
        delta_time: float,
        state: np.ndarray,
        noise: np.ndarray,
        input: np.ndarray,
    ) -> np.ndarray:
        """
        Propagate a state over delta_time.

        Args:
            delta_time: Time step.
            state: State vector (state_dimension,).
            noise: Standard normal noise sample (noise_dimension,).
            input: Control input (input_dimension,).

        Returns:
            Predicted state vector (state_dimension,).
        """
        pass


class ObservationModel(ABC):
    """
    Abstract observation model y = h(x, v).
    """

    @abstractmethod
    def observation_dimension(self) -> int:
        pass

    @abstractmethod
    def noise_dimension(self) -> int:
        pass

    @abstractmethod
    def predict_observation(
        self,
        state: np.ndarray,
        noise: np.ndarray,
        delta_time: float,
    ) -> np.ndarray:
        """
        Predict the observation of a state.

        Args:
            state: State vector.
            noise: Standard normal noise sample (noise_dimension,).
            delta_time: Time since the last observation.

        Returns:
            Predicted observation (observation_dimension,).
        """
        pass
