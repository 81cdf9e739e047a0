"""
Process models for the sigma-point filter.

Provides standard process models with non-additive noise interface:
- Linear process model x' = A x + B u + G w
- Constant velocity (1D, 2D and 3D) driven by continuous white acceleration
- Adapter for a plain callable f(x, u, dt) with additive noise

The noise argument w of predict_state is always a standard normal sample;
each model maps it through its own noise matrix.
"""

from typing import Callable, Optional

import numpy as np

from sigmapoint.models.interfaces import ProcessModel
from sigmapoint.utils.linalg import covariance_square_root


def create_process_noise_continuous_white_acceleration(
    dt: float,
    q: float,
    dim: int = 2
) -> np.ndarray:
    """
    Create process noise covariance for continuous white acceleration model.

    State ordering is [positions..., velocities...], e.g. [px, py, vx, vy].

    Args:
        dt: Time step in seconds
        q: Process noise intensity (acceleration variance, m²/s⁴)
        dim: Spatial dimension (1, 2, or 3)

    Returns:
        Process noise covariance matrix (2*dim × 2*dim)

    Example:
        >>> Q = create_process_noise_continuous_white_acceleration(dt=0.1, q=0.5, dim=2)
        >>> Q.shape
        (4, 4)

    References:
        Bar-Shalom et al., "Estimation with Applications to Tracking and Navigation"
    """
    if dim not in [1, 2, 3]:
        raise ValueError(f"Dimension must be 1, 2, or 3, got {dim}")

    I = np.eye(dim)
    return q * np.block([
        [dt**3 / 3 * I, dt**2 / 2 * I],
        [dt**2 / 2 * I, dt * I]
    ])


class LinearProcessModel(ProcessModel):
    """
    Linear process model.

        x_k = A x_{k-1} + B u + G w,    w ~ N(0, I)

    The process noise covariance is therefore Q = G G^T.

    Example:
        >>> model = LinearProcessModel(A=np.eye(2), noise_matrix=0.1 * np.eye(2))
        >>> model.predict_state(1.0, np.array([1.0, 2.0]), np.zeros(2), np.zeros(0))
        array([1., 2.])
    """

    def __init__(
        self,
        A: np.ndarray,
        noise_matrix: np.ndarray,
        B: Optional[np.ndarray] = None,
    ):
        """
        Args:
            A: State transition matrix (n×n).
            noise_matrix: Noise input matrix G (n×q).
            B: Control input matrix (n×p). No input if None.
        """
        self.A = np.atleast_2d(np.asarray(A, dtype=float))
        self.G = np.asarray(noise_matrix, dtype=float).reshape(self.A.shape[0], -1)
        n = self.A.shape[0]

        if self.A.shape != (n, n):
            raise ValueError(f"A must be square, got shape {self.A.shape}")

        if B is None:
            self.B = np.zeros((n, 0))
        else:
            self.B = np.asarray(B, dtype=float).reshape(n, -1)

    def state_dimension(self) -> int:
        return self.A.shape[0]

    def noise_dimension(self) -> int:
        return self.G.shape[1]

    def input_dimension(self) -> int:
        return self.B.shape[1]

    def predict_state(self, delta_time, state, noise, input):
        return self.A @ state + self.B @ input + self.G @ noise


class ConstantVelocityProcessModel(ProcessModel):
    """
    Constant velocity motion model driven by white acceleration noise.

    State: x = [p_1..p_dim, v_1..v_dim]
    Dynamics: p' = p + v dt, v' = v, plus noise L(dt) w with
    L(dt) L(dt)^T = Q(dt) from
    create_process_noise_continuous_white_acceleration().

    Example:
        >>> model = ConstantVelocityProcessModel(spatial_dim=2, q=0.5)
        >>> x = np.array([0.0, 0.0, 1.0, 0.5])
        >>> model.predict_state(0.5, x, np.zeros(4), np.zeros(0))
        array([0.5 , 0.25, 1.  , 0.5 ])
    """

    def __init__(self, spatial_dim: int = 2, q: float = 1.0):
        """
        Args:
            spatial_dim: Number of spatial axes (1, 2 or 3).
            q: Acceleration noise intensity (m²/s⁴).
        """
        if spatial_dim not in [1, 2, 3]:
            raise ValueError(f"Spatial dimension must be 1, 2, or 3, got {spatial_dim}")
        if q < 0:
            raise ValueError(f"Noise intensity must be non-negative, got {q}")

        self.spatial_dim = spatial_dim
        self.q = q

    def state_dimension(self) -> int:
        return 2 * self.spatial_dim

    def noise_dimension(self) -> int:
        return 2 * self.spatial_dim

    def F(self, dt: float) -> np.ndarray:
        """State transition matrix."""
        d = self.spatial_dim
        F = np.eye(2 * d)
        F[:d, d:] = dt * np.eye(d)
        return F

    def Q(self, dt: float) -> np.ndarray:
        """Process noise covariance."""
        return create_process_noise_continuous_white_acceleration(dt, self.q, self.spatial_dim)

    def noise_sqrt(self, dt: float) -> np.ndarray:
        """Square root L of Q(dt) with L @ L.T = Q(dt)."""
        return covariance_square_root(self.Q(dt))

    def predict_state(self, delta_time, state, noise, input):
        return self.F(delta_time) @ state + self.noise_sqrt(delta_time) @ noise


class AdditiveNoiseProcessModel(ProcessModel):
    """
    Wrap a plain process function f(x, u, dt) with additive noise G w.

    Allows reusing motion functions written in the usual f(x, u, dt) form.

    Example:
        >>> def f(x, u, dt):
        ...     return np.array([x[0] + x[1] * dt, x[1]])
        >>> model = AdditiveNoiseProcessModel(f, state_dim=2, noise_matrix=0.1 * np.eye(2))
    """

    def __init__(
        self,
        f: Callable[[np.ndarray, np.ndarray, float], np.ndarray],
        state_dim: int,
        noise_matrix: np.ndarray,
        input_dim: int = 0,
    ):
        self.f = f
        self._state_dim = state_dim
        self._input_dim = input_dim
        self.G = np.asarray(noise_matrix, dtype=float).reshape(state_dim, -1)

    def state_dimension(self) -> int:
        return self._state_dim

    def noise_dimension(self) -> int:
        return self.G.shape[1]

    def input_dimension(self) -> int:
        return self._input_dim

    def predict_state(self, delta_time, state, noise, input):
        return np.asarray(self.f(state, input, delta_time), dtype=float) + self.G @ noise
