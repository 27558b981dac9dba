"""Steepest-descent algorithms."""

from __future__ import annotations

from typing import Optional, Union

from .core import Array, Objective, OptimizeResult, Problem
from .iteration import Callback, run_descent
from .line_search import backtracking_halving, exact_step
from .utils import FD_STEP


def gradient_descent(
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
    """Gradient descent with step halving.

    Each iteration moves along ``-grad``, starting from step ``t0`` and
    halving it until the objective does not increase.

    Example
    -------
    >>> import numpy as np
    >>> res = gradient_descent(lambda x: (x[0] - 1) ** 2 + (x[1] - 2) ** 2, np.zeros(2))
    >>> bool(np.allclose(res.x, [1.0, 2.0], atol=1e-4))
    True
    """

    def step(fun, k, x, fx, grad, hess):
        _, x_new, _ = backtracking_halving(fun, x, -grad, t0=t0, fx=fx, max_halvings=max_halvings)
        return x_new

    return run_descent(
        problem,
        x0,
        step,
        eps1=eps1,
        eps2=eps2,
        max_iter=max_iter,
        fd_step=fd_step,
        method="gradient_descent",
        callback=callback,
        history=history,
    )


def fast_gradient_descent(
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
    """Steepest descent with a grid line search over ``t`` in ``[0, 1]``.

    The grid resolution defaults to ``eps1``, so every iteration costs about
    ``1 / eps1`` objective evaluations on top of the gradient.
    """
    resolution = eps1 if line_search_resolution is None else line_search_resolution
    if resolution <= 0:
        raise ValueError("line search resolution must be positive")

    def step(fun, k, x, fx, grad, hess):
        t, _ = exact_step(fun, x, -grad, resolution, decimals=step_decimals)
        return x - t * grad

    return run_descent(
        problem,
        x0,
        step,
        eps1=eps1,
        eps2=eps2,
        max_iter=max_iter,
        fd_step=fd_step,
        method="fast_gradient_descent",
        callback=callback,
        history=history,
    )


__all__ = ["fast_gradient_descent", "gradient_descent"]
