"""Newton and Newton-Raphson optimization routines.

Both methods share :func:`select_newton_direction`: the Newton direction
``-H^-1 grad`` is used when the Hessian can be inverted and its inverse is
positive definite, otherwise the steepest-descent direction ``-grad`` is
substituted. The two methods differ only in how far they move along it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np

from ..errors import SingularMatrixError
from ..logging import get_logger
from .core import Array, Objective, OptimizeResult, Problem
from .iteration import Callback, run_descent
from .line_search import backtracking_halving, exact_step
from .utils import FD_STEP, inverse, is_pos_def

logger = get_logger(__name__)


class DirectionKind(Enum):
    NEWTON_STEP = "newton_step"
    STEEPEST_DESCENT_FALLBACK = "steepest_descent_fallback"


@dataclass(frozen=True)
class DirectionChoice:
    """Search direction picked for one Newton iteration.

    Attributes:
        kind: Which strategy produced ``direction``.
        direction: The search direction.
        reason: ``"positive_definite"`` for a Newton step, ``"singular"`` or
            ``"indefinite"`` for a fallback.
    """

    kind: DirectionKind
    direction: Array
    reason: str

    @property
    def is_newton(self) -> bool:
        return self.kind is DirectionKind.NEWTON_STEP


def select_newton_direction(grad: Array, hess: Array) -> DirectionChoice:
    """Choose between the Newton direction and the steepest-descent fallback.

    Never raises for a singular or indefinite Hessian.
    """
    grad = np.asarray(grad, dtype=float)
    try:
        inv_hess = inverse(hess)
    except SingularMatrixError as exc:
        logger.debug("Hessian is singular (%s)", exc)
        return DirectionChoice(DirectionKind.STEEPEST_DESCENT_FALLBACK, -grad, "singular")
    if not is_pos_def(inv_hess):
        return DirectionChoice(DirectionKind.STEEPEST_DESCENT_FALLBACK, -grad, "indefinite")
    return DirectionChoice(DirectionKind.NEWTON_STEP, -inv_hess @ grad, "positive_definite")


class _FallbackReporter:
    """Warn on the first steepest-descent fallback of a run, DEBUG afterwards."""

    def __init__(self, method: str):
        self.method = method
        self.count = 0

    def __call__(self, k: int, choice: DirectionChoice) -> None:
        if choice.is_newton:
            return
        self.count += 1
        if self.count == 1:
            logger.warning(
                "%s k=%d: Hessian is %s; using steepest descent "
                "(later fallbacks in this run are logged at DEBUG)",
                self.method,
                k,
                choice.reason,
            )
        else:
            logger.debug(
                "%s k=%d: Hessian is %s; using steepest descent (fallback #%d)",
                self.method,
                k,
                choice.reason,
                self.count,
            )


def newton_method(
    problem: Union[Problem, Objective],
    x0: Array,
    eps1: float = 1e-4,
    eps2: float = 1e-6,
    max_iter: int = 1000,
    t0: float = 1.0,
    *,
    fd_step: float = FD_STEP,
    max_halvings: int = 50,
    callback: Optional[Callback] = None,
    history: bool = False,
) -> OptimizeResult:
    """Newton's method guarded by step halving.

    A Newton direction is tried with the full unit step first and halved only
    if the objective would increase, so a quadratic with a positive definite
    Hessian is solved in one iteration. The steepest-descent fallback starts
    its halving search from ``t0`` instead.
    """
    report_fallback = _FallbackReporter("newton")

    def step(fun, k, x, fx, grad, hess):
        choice = select_newton_direction(grad, hess)
        report_fallback(k, choice)
        start = 1.0 if choice.is_newton else t0
        t, x_new, _ = backtracking_halving(
            fun, x, choice.direction, t0=start, fx=fx, max_halvings=max_halvings
        )
        logger.debug("newton k=%d %s t=%.6g", k, choice.kind.value, t)
        return x_new

    return run_descent(
        problem,
        x0,
        step,
        eps1=eps1,
        eps2=eps2,
        max_iter=max_iter,
        fd_step=fd_step,
        need_hessian=True,
        method="newton",
        callback=callback,
        history=history,
    )


def newton_raphson(
    problem: Union[Problem, Objective],
    x0: Array,
    eps1: float = 1e-4,
    eps2: float = 1e-6,
    max_iter: int = 1000,
    *,
    fd_step: float = FD_STEP,
    line_search_resolution: Optional[float] = None,
    step_decimals: int = 4,
    callback: Optional[Callback] = None,
    history: bool = False,
) -> OptimizeResult:
    """Newton-Raphson: Newton direction with a grid line search over ``[0, 1]``."""
    resolution = eps1 if line_search_resolution is None else line_search_resolution
    if resolution <= 0:
        raise ValueError("line search resolution must be positive")
    report_fallback = _FallbackReporter("newton_raphson")

    def step(fun, k, x, fx, grad, hess):
        choice = select_newton_direction(grad, hess)
        report_fallback(k, choice)
        t, _ = exact_step(fun, x, choice.direction, resolution, decimals=step_decimals)
        logger.debug("newton_raphson k=%d %s t=%.6g", k, choice.kind.value, t)
        return x + t * choice.direction

    return run_descent(
        problem,
        x0,
        step,
        eps1=eps1,
        eps2=eps2,
        max_iter=max_iter,
        fd_step=fd_step,
        need_hessian=True,
        method="newton_raphson",
        callback=callback,
        history=history,
    )


__all__ = [
    "DirectionChoice",
    "DirectionKind",
    "newton_method",
    "newton_raphson",
    "select_newton_direction",
]
