"""Core interfaces shared across the descent algorithms."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, List, Optional, Union

import numpy as np

from ..errors import DimensionMismatchError

Array = np.ndarray
Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]
Hessian = Callable[[Array], Array]


class Status(Enum):
    """Termination status of a descent run."""

    CONVERGED = "converged"
    GRADIENT_TOLERANCE = "gradient_tolerance"
    MAX_ITER = "max_iter"
    LINE_SEARCH_FAILED = "line_search_failed"


_MESSAGES = {
    Status.CONVERGED: "Step and value change below tolerance on two consecutive iterations.",
    Status.GRADIENT_TOLERANCE: "Gradient tolerance satisfied.",
    Status.MAX_ITER: "Maximum iterations reached.",
    Status.LINE_SEARCH_FAILED: "Backtracking failed to find a non-increasing step.",
}


@dataclass(frozen=True)
class Problem:
    """Container describing an optimization problem.

    ``grad`` and ``hess`` are optional analytic derivatives; when omitted the
    algorithms fall back to finite differences of ``fun``. ``dim`` pins the
    expected length of the starting point.
    """

    fun: Objective
    grad: Optional[Gradient] = None
    hess: Optional[Hessian] = None
    dim: Optional[int] = None


@dataclass
class OptimizeResult:
    """Standard result object returned by all optimizers in this package.

    Unpacks as ``x, nit = result`` for callers that only need the minimizer
    estimate and the iteration count.
    """

    x: Array
    fun: float
    nit: int
    status: Status
    success: bool
    message: str
    grad_norm: float
    nfev: int
    njev: int
    nhev: int
    history: List[Array] = field(default_factory=list)

    def __iter__(self) -> Iterator:
        yield self.x
        yield self.nit


def make_result(status: Status, **kwargs) -> OptimizeResult:
    return OptimizeResult(
        status=status,
        success=status in (Status.CONVERGED, Status.GRADIENT_TOLERANCE),
        message=_MESSAGES[status],
        **kwargs,
    )


class ConvergenceLatch:
    """Two-consecutive-iterations stopping rule.

    A single iteration whose step and value change both fall below ``eps``
    only arms the latch; the run is converged when the next iteration is
    small as well. Any larger step disarms it.
    """

    def __init__(self, eps: float):
        if eps <= 0:
            raise ValueError("eps must be positive")
        self.eps = float(eps)
        self.matching = False

    def update(self, step_norm: float, value_change: float) -> bool:
        if step_norm < self.eps and value_change < self.eps:
            if self.matching:
                return True
            self.matching = True
        else:
            self.matching = False
        return False

    def reset(self) -> None:
        self.matching = False


def as_problem(problem: Union[Problem, Objective]) -> Problem:
    if isinstance(problem, Problem):
        return problem
    if not callable(problem):
        raise TypeError("problem must be a Problem or a callable objective")
    return Problem(fun=problem)


def validate_point(problem: Problem, x0: Array) -> Array:
    """Return a float copy of ``x0`` after checking it fits ``problem``."""
    x = np.array(x0, dtype=float)
    if x.ndim != 1 or x.size == 0:
        raise DimensionMismatchError(
            f"initial point must be a non-empty 1-D vector, got shape {x.shape}"
        )
    if problem.dim is not None and x.size != problem.dim:
        raise DimensionMismatchError(
            f"initial point has dimension {x.size}, problem expects {problem.dim}",
            expected=problem.dim,
            actual=x.size,
        )
    if not np.all(np.isfinite(x)):
        raise ValueError("initial point contains non-finite entries")
    return x


__all__ = [
    "Array",
    "ConvergenceLatch",
    "Gradient",
    "Hessian",
    "Objective",
    "OptimizeResult",
    "Problem",
    "Status",
    "as_problem",
    "make_result",
    "validate_point",
]
