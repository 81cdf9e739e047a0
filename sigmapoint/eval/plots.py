"""
Plots of Gaussian filter runs.

Trajectories with belief ellipses, per-component errors inside their
covariance envelope, and innovation consistency. Every plotting function
returns the matplotlib Figure; save_figure writes it to disk.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Ellipse


def add_covariance_ellipse(
    ax: plt.Axes,
    mean_xy: np.ndarray,
    covariance_xy: np.ndarray,
    n_sigma: float = 2.0,
    **kwargs,
) -> Ellipse:
    """
    Draw the n_sigma contour of a 2D Gaussian.

    Args:
        ax: Target axes.
        mean_xy: Center (2,).
        covariance_xy: Covariance (2×2).
        n_sigma: Contour radius in standard deviations.
        **kwargs: Passed to matplotlib.patches.Ellipse.

    Returns:
        The added Ellipse patch.
    """
    eigenvalues, eigenvectors = np.linalg.eigh(np.asarray(covariance_xy, dtype=float))
    eigenvalues = np.maximum(eigenvalues, 0.0)

    # eigh sorts ascending; orient the ellipse along the major axis
    major = eigenvectors[:, 1]
    angle = np.degrees(np.arctan2(major[1], major[0]))
    width, height = 2.0 * n_sigma * np.sqrt(eigenvalues[::-1])

    kwargs.setdefault("fill", False)
    ellipse = Ellipse(xy=mean_xy, width=width, height=height, angle=angle, **kwargs)
    ax.add_patch(ellipse)
    return ellipse


def plot_trajectory_2d(
    truth_xy: np.ndarray,
    est_xy_dict: Dict[str, np.ndarray],
    anchors_xy: Optional[np.ndarray] = None,
    covariances_xy: Optional[np.ndarray] = None,
    ellipse_every: int = 10,
    n_sigma: float = 2.0,
    title: str = "2D Trajectory",
) -> plt.Figure:
    """
    Plot true and estimated 2D paths.

    Args:
        truth_xy: True positions, shape (N, 2)
        est_xy_dict: Estimated positions per filter name, each (N, 2)
        anchors_xy: Anchor positions, shape (M, 2)
        covariances_xy: Position covariances (N, 2, 2) of the first
            estimate. Ellipses are drawn every ellipse_every steps.
        ellipse_every: Step between drawn ellipses.
        n_sigma: Ellipse radius in standard deviations.
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(9, 8))

    ax.plot(truth_xy[:, 0], truth_xy[:, 1], color="k", linewidth=2, label="Truth", zorder=10)
    ax.scatter(truth_xy[0, 0], truth_xy[0, 1], color="g", s=60, label="Start", zorder=11)

    styles = ["-", "--", "-.", ":"]
    for i, (name, est_xy) in enumerate(est_xy_dict.items()):
        ax.plot(
            est_xy[:, 0], est_xy[:, 1],
            linestyle=styles[i % len(styles)],
            color=f"C{i}",
            linewidth=1.3,
            alpha=0.8,
            label=name,
        )

    if covariances_xy is not None and est_xy_dict:
        first = next(iter(est_xy_dict.values()))
        for k in range(0, len(first), max(1, ellipse_every)):
            add_covariance_ellipse(
                ax, first[k], covariances_xy[k], n_sigma=n_sigma,
                edgecolor="C0", linewidth=0.8, alpha=0.6,
            )

    if anchors_xy is not None:
        ax.plot(anchors_xy[:, 0], anchors_xy[:, 1], "^", color="tab:red",
                markersize=9, label="Anchors", zorder=12)

    ax.set_xlabel("x [m]")
    ax.set_ylabel("y [m]")
    ax.set_title(title, fontweight="bold")
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")

    fig.tight_layout()
    return fig


def plot_errors_with_bounds(
    errors: np.ndarray,
    covariances: np.ndarray,
    dt: float = 1.0,
    labels: Optional[List[str]] = None,
    n_sigma: float = 3.0,
    title: str = "Estimation Error",
) -> plt.Figure:
    """
    Plot each state error component with its ±n_sigma covariance envelope.

    Args:
        errors: Error vectors, shape (N, n)
        covariances: Filter covariances, shape (N, n, n)
        dt: Time step in seconds
        labels: Component names (default x0, x1, ...)
        n_sigma: Width of the envelope in standard deviations
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    errors = np.asarray(errors)
    n = errors.shape[1]
    labels = labels or [f"x{i}" for i in range(n)]
    time = np.arange(len(errors)) * dt
    sigma = np.sqrt(np.maximum(np.diagonal(covariances, axis1=1, axis2=2), 0.0))

    fig, axes_arr = plt.subplots(n, 1, figsize=(12, 2.5 * n), sharex=True)
    axes_arr = np.atleast_1d(axes_arr)

    for i, ax in enumerate(axes_arr):
        ax.plot(time, errors[:, i], color="blue", linewidth=1.2, label="error")
        ax.fill_between(time, -n_sigma * sigma[:, i], n_sigma * sigma[:, i],
                        color="gray", alpha=0.3, label=f"±{n_sigma:g}σ")
        ax.set_ylabel(labels[i], fontsize=11)
        ax.grid(True, alpha=0.3)
        ax.axhline(y=0, color="k", linestyle="--", linewidth=0.8, alpha=0.5)

    axes_arr[0].legend(fontsize=9)
    axes_arr[-1].set_xlabel("Time (s)", fontsize=11)
    fig.suptitle(title, fontsize=14, fontweight="bold")
    fig.tight_layout()
    return fig


def plot_nis(
    nis: np.ndarray,
    bounds: Tuple[float, float],
    dt: float = 1.0,
    outlier_steps: Optional[Sequence[int]] = None,
    title: str = "Normalized Innovation Squared",
) -> plt.Figure:
    """
    Plot NIS over time against a chi-square acceptance interval.

    Args:
        nis: NIS values, shape (N,)
        bounds: (lower, upper) acceptance interval of a single NIS value,
            e.g. from chi_square_consistency_bounds(m, 1).
        dt: Time step in seconds
        outlier_steps: Steps with a corrupted observation, highlighted.
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    nis = np.asarray(nis, dtype=float)
    time = np.arange(len(nis)) * dt
    lower, upper = bounds

    fig, ax = plt.subplots(figsize=(12, 4))
    ax.semilogy(time, nis, color="C0", linewidth=1.0, label="NIS")
    ax.axhspan(lower, upper, color="green", alpha=0.15, label="acceptance interval")

    if outlier_steps is not None and len(outlier_steps) > 0:
        steps = np.asarray(outlier_steps, dtype=int)
        ax.scatter(time[steps], nis[steps], color="red", s=15, zorder=5, label="outlier")

    ax.set_xlabel("Time (s)")
    ax.set_ylabel("NIS")
    ax.set_title(title, fontweight="bold")
    ax.grid(True, which="both", alpha=0.3)
    ax.legend(loc="upper right")

    fig.tight_layout()
    return fig


def save_figure(
    fig: plt.Figure,
    out_dir: Union[str, Path],
    name: str,
    formats: Sequence[str] = ("png", "pdf"),
    dpi: int = 150,
) -> List[Path]:
    """
    Write a figure as <out_dir>/<name>.<fmt> for every format.

    Returns:
        Paths of the written files.
    """
    target = Path(out_dir)
    target.mkdir(parents=True, exist_ok=True)

    written = [target / f"{name}.{fmt}" for fmt in formats]
    for path in written:
        fig.savefig(path, dpi=dpi, bbox_inches="tight")
    return written
