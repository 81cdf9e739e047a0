"""
Exception and warning types raised by the sigma-point filtering engine.

Every error class also derives from the built-in exception a caller would
naturally catch (``ValueError``, ``IndexError``, ``LinAlgError``), so code that
only cares about the broad category keeps working.
"""

from typing import Optional

import numpy as np


class SigmaPointError(Exception):
    """Base class of all errors raised by this package."""


class WrongSizeError(SigmaPointError, ValueError):
    """A fixed-size entity was asked to hold a different number of elements."""


class ResizingFixedSizeEntityError(SigmaPointError, ValueError):
    """Attempt to change the size of a fixed-size entity."""

    def __init__(self, fixed_size: int, new_size: int, entity: str = "entity"):
        self.fixed_size = fixed_size
        self.new_size = new_size
        self.entity = entity
        super().__init__(
            f"Attempt to resize the fixed-size {entity} "
            f"from {fixed_size} to {new_size}"
        )


class OutOfBoundsError(SigmaPointError, IndexError):
    """
    Index out of bounds.

    Attributes:
        index: Offending index, if known.
        size: Number of valid entries, if known. Valid range is [0, size).
    """

    def __init__(self, index: Optional[int] = None, size: Optional[int] = None):
        self.index = index
        self.size = size

        if index is None:
            msg = "Index out of bounds"
        elif size is None:
            msg = f"Index[{index}] out of bounds"
        else:
            msg = f"Index[{index}] out of bounds [0, {size})"

        super().__init__(msg)


class DimensionMismatchError(SigmaPointError, ValueError):
    """A vector's local dimension does not match the container's dimension."""


class SingularInnovationCovarianceError(SigmaPointError, np.linalg.LinAlgError):
    """The innovation covariance is singular or too ill-conditioned to invert."""

    def __init__(self, condition_number: float):
        self.condition_number = condition_number
        super().__init__(
            f"Innovation covariance is numerically singular "
            f"(condition number {condition_number:.3e})"
        )


class NumericalWarning(UserWarning):
    """Emitted when a numerical fallback path was taken."""
