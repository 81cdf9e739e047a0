"""
Process and observation models for the sigma-point filter.

This module provides the model interfaces consumed by the filter, a few
standard models used in tracking problems, and joint models replicating a
local model over independent identical copies.
"""

from .interfaces import ObservationModel, ProcessModel

from .motion_models import (
    AdditiveNoiseProcessModel,
    ConstantVelocityProcessModel,
    LinearProcessModel,
    create_process_noise_continuous_white_acceleration,
)

from .measurement_models import (
    LinearObservationModel,
    RangeObservationModel,
)

from .joint_models import JointObservationModel, JointProcessModel

__all__ = [
    # Interfaces
    'ProcessModel',
    'ObservationModel',

    # Process models
    'LinearProcessModel',
    'ConstantVelocityProcessModel',
    'AdditiveNoiseProcessModel',
    'create_process_noise_continuous_white_acceleration',

    # Observation models
    'LinearObservationModel',
    'RangeObservationModel',

    # Joint models
    'JointProcessModel',
    'JointObservationModel',
]
