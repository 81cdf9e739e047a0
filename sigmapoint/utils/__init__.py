"""
Utility functions used across the package.
"""

from .linalg import covariance_square_root, symmetrize

__all__ = [
    'covariance_square_root',
    'symmetrize',
]
