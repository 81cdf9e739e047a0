"""
Observation models for the sigma-point filter.

Provides standard observation models with non-additive noise interface:
- Linear observations y = H x + G v
- Range-only observations to fixed anchors (TOA/UWB ranging)

The noise argument v of predict_observation is always a standard normal
sample; each model maps it through its own noise matrix.
"""

from typing import Tuple

import numpy as np

from sigmapoint.models.interfaces import ObservationModel


class LinearObservationModel(ObservationModel):
    """
    Linear observation model.

        y = H x + G v,    v ~ N(0, I)

    The observation noise covariance is therefore R = G G^T.

    Example:
        >>> model = LinearObservationModel(H=np.array([[1.0, 0.0]]), noise_matrix=[[0.5]])
        >>> model.predict_observation(np.array([3.0, 1.0]), np.zeros(1), 0.0)
        array([3.])
    """

    def __init__(self, H: np.ndarray, noise_matrix: np.ndarray):
        """
        Args:
            H: Observation matrix (m×n).
            noise_matrix: Noise input matrix G (m×r).
        """
        self.H = np.atleast_2d(np.asarray(H, dtype=float))
        self.G = np.asarray(noise_matrix, dtype=float).reshape(self.H.shape[0], -1)

    def observation_dimension(self) -> int:
        return self.H.shape[0]

    def noise_dimension(self) -> int:
        return self.G.shape[1]

    def predict_observation(self, state, noise, delta_time):
        return self.H @ state + self.G @ noise


class RangeObservationModel(ObservationModel):
    """
    Range-only observation model for 2D positioning.

    Observation: y_j = ||p - anchor_j|| + sigma v_j
    where p is the position taken from the state.

    Example:
        >>> anchors = np.array([[0, 0], [10, 0], [10, 10], [0, 10]])
        >>> model = RangeObservationModel(anchors, sigma=0.1)
        >>> x = np.array([5, 5, 1, 0.5])  # [px, py, vx, vy]
        >>> model.predict_observation(x, np.zeros(4), 0.0).shape
        (4,)
    """

    def __init__(
        self,
        anchors: np.ndarray,
        sigma: float = 1.0,
        state_position_indices: Tuple[int, int] = (0, 1),
    ):
        """
        Args:
            anchors: Anchor positions, shape (N, 2).
            sigma: Range noise standard deviation.
            state_position_indices: Indices of [px, py] in the state.
        """
        self.anchors = np.asarray(anchors, dtype=float)
        if self.anchors.ndim != 2 or self.anchors.shape[1] != 2:
            raise ValueError(f"Anchors must be (N, 2) array, got shape {self.anchors.shape}")
        if sigma < 0:
            raise ValueError(f"Range noise sigma must be non-negative, got {sigma}")

        self.sigma = sigma
        self.n_anchors = len(self.anchors)
        self.pos_idx = state_position_indices

    def observation_dimension(self) -> int:
        return self.n_anchors

    def noise_dimension(self) -> int:
        return self.n_anchors

    def h(self, x: np.ndarray) -> np.ndarray:
        """Noise-free ranges to all anchors, shape (N,)."""
        position = np.asarray(x)[list(self.pos_idx)]
        return np.linalg.norm(self.anchors - position, axis=1)

    def predict_observation(self, state, noise, delta_time):
        return self.h(state) + self.sigma * noise
