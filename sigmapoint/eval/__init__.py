"""
Evaluation and Visualization Module.

This module provides error metrics, consistency statistics and plots for
Gaussian filter runs.

Modules:
    metrics: Error metrics (RMSE, NEES, NIS, chi-square bounds)
    plots: Trajectories with belief ellipses, error envelopes, NIS
"""

from .metrics import (
    chi_square_consistency_bounds,
    compute_error_stats,
    compute_errors,
    compute_nees,
    compute_nis,
    compute_rmse,
)
from .plots import (
    add_covariance_ellipse,
    plot_errors_with_bounds,
    plot_nis,
    plot_trajectory_2d,
    save_figure,
)

__all__ = [
    # Metrics
    "compute_errors",
    "compute_rmse",
    "compute_error_stats",
    "compute_nees",
    "compute_nis",
    "chi_square_consistency_bounds",
    # Plots
    "add_covariance_ellipse",
    "plot_trajectory_2d",
    "plot_errors_with_bounds",
    "plot_nis",
    "save_figure",
]
