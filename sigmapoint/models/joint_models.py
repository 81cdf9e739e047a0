"""
Joint models of independent, identically distributed copies.

A joint model replicates a local model over count independent copies (e.g.
tracking several identical objects). State, noise, input and observation
vectors of the joint model are the concatenation of the local ones; the local
model is applied block-wise to consecutive slices.
"""

import numpy as np

from sigmapoint.exceptions import DimensionMismatchError
from sigmapoint.models.interfaces import ObservationModel, ProcessModel


def _check_count(count: int) -> int:
    if count <= 0:
        raise ValueError(f"Number of joint model copies must be positive, got {count}")
    return int(count)


class JointProcessModel(ProcessModel):
    """
    Process model of count iid copies of a local process model.

    Example:
        >>> local = ConstantVelocityProcessModel(spatial_dim=1)
        >>> joint = JointProcessModel(local, count=3)
        >>> joint.state_dimension()
        6
    """

    def __init__(self, local_model: ProcessModel, count: int):
        self.local_model = local_model
        self.count = _check_count(count)

    def state_dimension(self) -> int:
        return self.local_model.state_dimension() * self.count

    def noise_dimension(self) -> int:
        return self.local_model.noise_dimension() * self.count

    def input_dimension(self) -> int:
        return self.local_model.input_dimension() * self.count

    def predict_state(self, delta_time, state, noise, input):
        state_dim = self.local_model.state_dimension()
        noise_dim = self.local_model.noise_dimension()
        input_dim = self.local_model.input_dimension()

        x = np.zeros(self.state_dimension())
        for i in range(self.count):
            x_i = self.local_model.predict_state(
                delta_time,
                state[i * state_dim:(i + 1) * state_dim],
                noise[i * noise_dim:(i + 1) * noise_dim],
                input[i * input_dim:(i + 1) * input_dim],
            )
            if np.size(x_i) != state_dim:
                raise DimensionMismatchError(
                    f"Local process model returned a state of size {np.size(x_i)}, "
                    f"expected {state_dim}"
                )
            x[i * state_dim:(i + 1) * state_dim] = x_i

        return x


class JointObservationModel(ObservationModel):
    """
    Observation model of count iid copies of a local observation model.

    Each copy observes its own slice of the joint state.

    Args:
        local_model: Local observation model.
        count: Number of copies.
        local_state_dim: State dimension seen by the local model.
    """

    def __init__(self, local_model: ObservationModel, count: int, local_state_dim: int):
        if local_state_dim < 0:
            raise ValueError(f"Local state dimension must be non-negative, got {local_state_dim}")
        self.local_model = local_model
        self.count = _check_count(count)
        self.local_state_dim = local_state_dim

    def observation_dimension(self) -> int:
        return self.local_model.observation_dimension() * self.count

    def noise_dimension(self) -> int:
        return self.local_model.noise_dimension() * self.count

    def predict_observation(self, state, noise, delta_time):
        state_dim = self.local_state_dim
        noise_dim = self.local_model.noise_dimension()
        obsrv_dim = self.local_model.observation_dimension()

        y = np.zeros(self.observation_dimension())
        for i in range(self.count):
            y_i = self.local_model.predict_observation(
                state[i * state_dim:(i + 1) * state_dim],
                noise[i * noise_dim:(i + 1) * noise_dim],
                delta_time,
            )
            if np.size(y_i) != obsrv_dim:
                raise DimensionMismatchError(
                    f"Local observation model returned an observation of size "
                    f"{np.size(y_i)}, expected {obsrv_dim}"
                )
            y[i * obsrv_dim:(i + 1) * obsrv_dim] = y_i

        return y
