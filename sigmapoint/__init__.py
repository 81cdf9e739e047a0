"""Sigma-point Gaussian filtering.

This package contains the reusable components of a sigma-point (unscented)
Kalman filter:
- distributions: Gaussian beliefs
- estimators: point sets, point-set transforms and the Gaussian filter
- models: process/observation model interfaces and standard models
- eval: error and consistency metrics
"""

__version__ = "0.1.0"

from sigmapoint.distributions import Gaussian
from sigmapoint.estimators import (
    GaussianFilter,
    OutlierGuard,
    PointSet,
    UnscentedTransform,
    Weight,
)

__all__ = [
    "Gaussian",
    "GaussianFilter",
    "OutlierGuard",
    "PointSet",
    "UnscentedTransform",
    "Weight",
]
