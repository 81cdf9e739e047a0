"""
Probability distributions used as filter beliefs.
"""

from .gaussian import Gaussian

__all__ = [
    'Gaussian',
]
