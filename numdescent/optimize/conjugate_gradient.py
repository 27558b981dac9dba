"""Fletcher-Reeves nonlinear conjugate gradient."""

from __future__ import annotations

from typing import Optional, Union

from ..logging import get_logger
from .core import Array, Objective, OptimizeResult, Problem
from .iteration import Callback, run_descent
from .line_search import backtracking_halving
from .utils import FD_STEP

logger = get_logger(__name__)


def fletcher_reeves_beta(grad: Array, prev_grad: Array) -> float:
    """Return ``||grad||^2 / ||prev_grad||^2`` (zero when ``prev_grad`` vanishes)."""
    denom = float(prev_grad @ prev_grad)
    if denom == 0.0:
        return 0.0
    return float(grad @ grad) / denom


def fletcher_reeves(
    problem: Union[Problem, Objective],
    x0: Array,
    eps1: float = 1e-4,
    eps2: float = 1e-6,
    max_iter: int = 1000,
    t0: float = 1.0,
    *,
    fd_step: float = FD_STEP,
    max_halvings: int = 50,
    descent_tol: float = 1e-4,
    callback: Optional[Callback] = None,
    history: bool = False,
) -> OptimizeResult:
    """Conjugate gradient with the Fletcher-Reeves ratio and step halving.

    The first direction is ``-grad``; later ones are ``-grad + beta * d_prev``.
    Since the step halving search is inexact, the conjugate direction can stop
    being a descent direction. Whenever ``grad @ d > -descent_tol * ||grad||^2``
    the direction is restarted from ``-grad``.
    """
    if descent_tol < 0:
        raise ValueError("descent_tol must be non-negative")
    prev_grad: Optional[Array] = None
    direction: Optional[Array] = None

    def step(fun, k, x, fx, grad, hess):
        nonlocal prev_grad, direction
        if k == 0 or direction is None or prev_grad is None:
            d = -grad
        else:
            d = -grad + fletcher_reeves_beta(grad, prev_grad) * direction
            if float(grad @ d) > -descent_tol * float(grad @ grad):
                logger.debug("fletcher_reeves: restart at k=%d", k)
                d = -grad
        _, x_new, _ = backtracking_halving(fun, x, d, t0=t0, fx=fx, max_halvings=max_halvings)
        prev_grad = grad.copy()
        direction = d
        return x_new

    return run_descent(
        problem,
        x0,
        step,
        eps1=eps1,
        eps2=eps2,
        max_iter=max_iter,
        fd_step=fd_step,
        method="fletcher_reeves",
        callback=callback,
        history=history,
    )


__all__ = ["fletcher_reeves", "fletcher_reeves_beta"]
