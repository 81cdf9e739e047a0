"""
Small linear-algebra helpers shared by the distributions and the filter.
"""

import warnings

import numpy as np
from scipy.linalg import LinAlgError, cholesky

from sigmapoint.exceptions import NumericalWarning


def symmetrize(P: np.ndarray) -> np.ndarray:
    """
    Return the symmetric part 0.5 * (P + P^T) of a square matrix.

    Args:
        P: Square matrix (n×n).

    Returns:
        Symmetric matrix (n×n).
    """
    P = np.asarray(P, dtype=float)
    return 0.5 * (P + P.T)


def covariance_square_root(P: np.ndarray) -> np.ndarray:
    """
    Compute a square root S of a covariance matrix such that S @ S.T = P.

    The lower Cholesky factor is used when P is positive definite. A positive
    semi-definite P (e.g. a zero-variance component) falls back to the
    eigendecomposition S = V diag(sqrt(max(λ, 0))), which still satisfies
    S @ S.T = P up to the clipped negative eigenvalues.

    Args:
        P: Symmetric positive semi-definite matrix (n×n).

    Returns:
        Square root factor S (n×n).
    """
    P = np.asarray(P, dtype=float)
    if P.size == 0:
        return np.zeros_like(P)

    try:
        return cholesky(P, lower=True)
    except LinAlgError:
        eigenvalues, eigenvectors = np.linalg.eigh(symmetrize(P))
        if np.any(eigenvalues < -1e-9 * max(1.0, np.abs(eigenvalues).max())):
            warnings.warn(
                f"Covariance has negative eigenvalues (min {eigenvalues.min():.3e}); "
                "clipping them to zero for the square root.",
                NumericalWarning,
                stacklevel=2,
            )
        return eigenvectors @ np.diag(np.sqrt(np.maximum(eigenvalues, 0.0)))
