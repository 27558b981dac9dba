"""Exception types raised by numdescent.

Every error derives from :class:`OptimizationError`, and additionally from the
builtin or numpy exception a caller would expect for that condition, so code
written against ``ValueError`` or ``numpy.linalg.LinAlgError`` keeps working.
"""

from __future__ import annotations

from typing import Optional

import numpy as np


class OptimizationError(Exception):
    """Base class for numdescent errors."""


class DimensionMismatchError(OptimizationError, ValueError):
    """Raised when a point or derivative does not have the expected shape."""

    def __init__(self, message: str, expected: Optional[int] = None, actual: Optional[int] = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class SingularMatrixError(OptimizationError, np.linalg.LinAlgError):
    """Raised when a matrix cannot be inverted."""


class LineSearchDivergenceError(OptimizationError, RuntimeError):
    """Raised when backtracking never produces a non-increasing step."""

    def __init__(self, message: str, last_step: float, trials: int):
        super().__init__(message)
        self.last_step = last_step
        self.trials = trials


__all__ = [
    "OptimizationError",
    "DimensionMismatchError",
    "SingularMatrixError",
    "LineSearchDivergenceError",
]
