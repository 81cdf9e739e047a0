"""
Simulation utilities for generating synthetic scenarios and running filters
over them.

Modules:
    range_tracking: 2D constant-velocity target observed by anchor ranges
"""

from sigmapoint.sim.range_tracking import (
    DEFAULT_ANCHORS,
    FilterRun,
    RangeTrackingData,
    run_range_tracking_filter,
    simulate_range_tracking,
)

__all__ = [
    "DEFAULT_ANCHORS",
    "FilterRun",
    "RangeTrackingData",
    "run_range_tracking_filter",
    "simulate_range_tracking",
]
