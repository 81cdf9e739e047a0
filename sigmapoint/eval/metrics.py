"""
Evaluation metrics for Gaussian filters.

This module provides error metrics and consistency statistics (NEES, NIS)
for evaluating filter runs against ground truth.
"""

from typing import Dict, Optional, Tuple, Union

import numpy as np
from scipy import stats


def compute_errors(truth: np.ndarray, estimated: np.ndarray) -> np.ndarray:
    """
    Compute estimation errors.

    Args:
        truth: True states, shape (N, n)
        estimated: Estimated states, shape (N, n)

    Returns:
        errors: Error vectors estimated - truth, shape (N, n)

    Raises:
        ValueError: If inputs have incompatible shapes
    """
    truth = np.asarray(truth, dtype=float)
    estimated = np.asarray(estimated, dtype=float)

    if truth.shape != estimated.shape:
        raise ValueError(
            f"Shape mismatch: truth {truth.shape} vs estimated {estimated.shape}"
        )

    return estimated - truth


def compute_rmse(errors: np.ndarray, axis: Optional[int] = None) -> Union[float, np.ndarray]:
    """
    Compute Root Mean Square Error (RMSE).

    Args:
        errors: Error vectors, shape (N, d) or (N,)
        axis: None for a scalar over all entries, 0 per dimension,
              1 per sample.

    Returns:
        rmse: RMSE value(s)
    """
    errors = np.asarray(errors, dtype=float)

    if axis is None:
        return float(np.sqrt(np.mean(errors**2)))
    return np.sqrt(np.mean(errors**2, axis=axis))


def compute_error_stats(errors: np.ndarray) -> Dict[str, float]:
    """
    Compute statistics of the error magnitudes.

    Args:
        errors: Error vectors, shape (N, d) or (N,)

    Returns:
        stats: Dictionary with keys 'mean', 'median', 'std', 'rmse', 'p95'
               and 'max'.
    """
    errors = np.asarray(errors, dtype=float)

    if errors.ndim > 1:
        error_magnitudes = np.linalg.norm(errors, axis=1)
    else:
        error_magnitudes = np.abs(errors)

    return {
        "mean": float(np.mean(error_magnitudes)),
        "median": float(np.median(error_magnitudes)),
        "std": float(np.std(error_magnitudes)),
        "rmse": float(np.sqrt(np.mean(error_magnitudes**2))),
        "p95": float(np.percentile(error_magnitudes, 95)),
        "max": float(np.max(error_magnitudes)),
    }


def _normalized_squares(vectors: np.ndarray, covariances: np.ndarray) -> np.ndarray:
    out = np.zeros(len(vectors))
    for i, (v, C) in enumerate(zip(vectors, covariances)):
        try:
            out[i] = v @ np.linalg.solve(C, v)
        except np.linalg.LinAlgError:
            out[i] = np.nan
    return out


def compute_nees(
    truth: np.ndarray, estimated: np.ndarray, covariance: np.ndarray
) -> np.ndarray:
    """
    Compute Normalized Estimation Error Squared (NEES).

        NEES = (x_est - x_true)^T P^{-1} (x_est - x_true)

    For a consistent filter NEES follows a chi-squared distribution with n
    degrees of freedom (state dimension).

    Args:
        truth: True states, shape (N, n)
        estimated: Estimated states, shape (N, n)
        covariance: Estimation covariances, shape (N, n, n)

    Returns:
        nees: NEES values, shape (N,). NaN where P is singular.

    Raises:
        ValueError: If inputs have incompatible shapes
    """
    errors = compute_errors(truth, estimated)
    if errors.ndim == 1:
        errors = errors.reshape(-1, 1)
    covariance = np.asarray(covariance, dtype=float)

    N, n = errors.shape
    if covariance.shape != (N, n, n):
        raise ValueError(
            f"covariance must have shape ({N}, {n}, {n}), got {covariance.shape}"
        )

    return _normalized_squares(errors, covariance)


def compute_nis(innovation: np.ndarray, S: np.ndarray) -> np.ndarray:
    """
    Compute Normalized Innovation Squared (NIS).

        NIS = nu^T S^{-1} nu

    where nu is the innovation and S the innovation covariance. For a
    consistent filter NIS follows a chi-squared distribution with m degrees
    of freedom (observation dimension).

    Args:
        innovation: Innovation vectors, shape (N, m)
        S: Innovation covariances, shape (N, m, m)

    Returns:
        nis: NIS values, shape (N,). NaN where S is singular.

    Raises:
        ValueError: If inputs have incompatible shapes
    """
    innovation = np.asarray(innovation, dtype=float)
    S = np.asarray(S, dtype=float)

    if innovation.ndim == 1:
        innovation = innovation.reshape(-1, 1)

    N, m = innovation.shape
    if S.shape != (N, m, m):
        raise ValueError(f"S must have shape ({N}, {m}, {m}), got {S.shape}")

    return _normalized_squares(innovation, S)


def chi_square_consistency_bounds(
    dof: int, n_samples: int = 1, confidence: float = 0.95
) -> Tuple[float, float]:
    """
    Two-sided acceptance interval of the average of n_samples NEES/NIS values.

    The sum of n_samples independent chi2(dof) values is chi2(n_samples * dof),
    so the average lies in the returned interval with the given confidence.

    Args:
        dof: Degrees of freedom of a single value (state or observation dim).
        n_samples: Number of averaged values.
        confidence: Confidence level in (0, 1).

    Returns:
        (lower, upper) bounds of the average.

    Example:
        >>> chi_square_consistency_bounds(dof=4, n_samples=1, confidence=0.95)
        (0.484..., 11.14...)
    """
    if not (0 < confidence < 1):
        raise ValueError(f"Confidence level must be in (0, 1), got {confidence}")
    if dof <= 0 or n_samples <= 0:
        raise ValueError(f"dof and n_samples must be positive, got {dof}, {n_samples}")

    k = dof * n_samples
    tail = 0.5 * (1.0 - confidence)
    lower = stats.chi2.ppf(tail, k) / n_samples
    upper = stats.chi2.ppf(1.0 - tail, k) / n_samples
    return float(lower), float(upper)
