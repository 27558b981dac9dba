"""Outer loop shared by every descent algorithm.

Each algorithm only decides how to move from the current point; this module
owns derivative evaluation, evaluation counting, the stopping rules and the
result object.
"""

from __future__ import annotations

from typing import Callable, Optional, Union

import numpy as np

from ..errors import DimensionMismatchError, LineSearchDivergenceError
from ..logging import get_logger
from .core import (
    Array,
    ConvergenceLatch,
    Objective,
    OptimizeResult,
    Problem,
    Status,
    as_problem,
    make_result,
    validate_point,
)
from .utils import FD_STEP, approx_grad, approx_hessian

logger = get_logger(__name__)

# step(fun, k, x, fx, grad, hess) -> next point
StepFn = Callable[[Objective, int, Array, float, Array, Optional[Array]], Array]
Callback = Callable[[int, Array, float], None]


def _check_shape(value: Array, shape: tuple[int, ...], what: str) -> Array:
    if value.shape != shape:
        raise DimensionMismatchError(
            f"{what} has shape {value.shape}, expected {shape}",
            expected=shape[0],
            actual=value.shape[0] if value.ndim else 0,
        )
    return value


def run_descent(
    problem: Union[Problem, Objective],
    x0: Array,
    step: StepFn,
    *,
    eps1: float,
    eps2: float,
    max_iter: int,
    fd_step: float = FD_STEP,
    need_hessian: bool = False,
    method: str = "descent",
    callback: Optional[Callback] = None,
    history: bool = False,
) -> OptimizeResult:
    """Iterate ``step`` until one of the stopping rules fires.

    A starting point too short for the objective surfaces as
    :class:`DimensionMismatchError` even when ``Problem.dim`` is unset.

    The loop stops when the gradient norm at the current point is at most
    ``eps1``, when ``max_iter`` iterations have run, when the step norm and
    the change in objective value are both below ``eps2`` on two consecutive
    iterations, or when the step raises :class:`LineSearchDivergenceError`.
    Reaching ``max_iter`` is reported through ``Status.MAX_ITER``; the last
    point is returned regardless.
    """
    if eps1 < 0:
        raise ValueError("eps1 must be non-negative")
    if eps2 <= 0:
        raise ValueError("eps2 must be positive")
    if max_iter < 0:
        raise ValueError("max_iter must be non-negative")
    problem = as_problem(problem)
    x = validate_point(problem, x0)
    n = x.size
    nfev = 0
    njev = 0
    nhev = 0

    def fun(point: Array) -> float:
        nonlocal nfev
        nfev += 1
        return float(problem.fun(point))

    def gradient(point: Array) -> Array:
        nonlocal njev
        if problem.grad is not None:
            njev += 1
            return _check_shape(np.asarray(problem.grad(point), dtype=float), (n,), "gradient")
        return approx_grad(fun, point, eps=fd_step)

    def hessian(point: Array) -> Array:
        nonlocal nhev
        if problem.hess is not None:
            nhev += 1
            return _check_shape(np.asarray(problem.hess(point), dtype=float), (n, n), "Hessian")
        return approx_hessian(fun, point, eps=fd_step)

    hist: list[Array] = [x.copy()] if history else []
    latch = ConvergenceLatch(eps2)
    try:
        fx = fun(x)
    except IndexError as exc:
        raise DimensionMismatchError(
            f"objective cannot be evaluated at a point of dimension {n}: {exc}",
            expected=problem.dim,
            actual=n,
        ) from exc
    grad = gradient(x)
    grad_norm = float(np.linalg.norm(grad))
    k = 0
    while True:
        if grad_norm <= eps1:
            status = Status.GRADIENT_TOLERANCE
            break
        if k >= max_iter:
            status = Status.MAX_ITER
            break
        hess = hessian(x) if need_hessian else None
        prev_x, f_prev = x, fx
        try:
            x = np.asarray(step(fun, k, prev_x.copy(), f_prev, grad, hess), dtype=float)
        except LineSearchDivergenceError as exc:
            logger.warning("%s: line search failed at iteration %d: %s", method, k, exc)
            status = Status.LINE_SEARCH_FAILED
            break
        fx = fun(x)
        k += 1
        step_norm = float(np.linalg.norm(x - prev_x))
        value_change = abs(fx - f_prev)
        logger.debug(
            "%s k=%d f=%.10g |step|=%.3e |df|=%.3e", method, k, fx, step_norm, value_change
        )
        if history:
            hist.append(x.copy())
        if callback is not None:
            callback(k, x.copy(), fx)
        if latch.update(step_norm, value_change):
            status = Status.CONVERGED
            grad_norm = float(np.linalg.norm(gradient(x)))
            break
        grad = gradient(x)
        grad_norm = float(np.linalg.norm(grad))

    logger.info("%s finished: %s after %d iterations (f=%.10g)", method, status.value, k, fx)
    return make_result(
        status,
        x=x,
        fun=fx,
        nit=k,
        grad_norm=grad_norm,
        nfev=nfev,
        njev=njev,
        nhev=nhev,
        history=hist,
    )


__all__ = ["Callback", "StepFn", "run_descent"]
