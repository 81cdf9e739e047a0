"""
Sigma-point state estimation.

Available components:
    - PointSet: weighted point container (fixed or dynamic number of points)
    - PointSetTransform: interface of Gaussian -> point set transforms
    - UnscentedTransform: scaled unscented transform
    - GaussianFilter: sigma-point Kalman filter with augmented noise
"""

from sigmapoint.estimators.point_set import PointSet, Weight, WeightedPoint
from sigmapoint.estimators.base import GaussianFilterInterface, PointSetTransform
from sigmapoint.estimators.unscented_transform import UnscentedTransform
from sigmapoint.estimators.gaussian_filter import (
    FilterWorkspace,
    GaussianFilter,
    OutlierGuard,
)

__all__ = [
    # Point sets
    "PointSet",
    "Weight",
    "WeightedPoint",
    # Transforms
    "PointSetTransform",
    "UnscentedTransform",
    # Filters
    "GaussianFilterInterface",
    "GaussianFilter",
    "FilterWorkspace",
    "OutlierGuard",
]
