"""One-dimensional step selection used by the descent algorithms."""

from __future__ import annotations

import math
from typing import Callable, Optional

import numpy as np

from ..errors import LineSearchDivergenceError
from .core import Array, Objective


def uniform_search(f: Callable[[float], float], a: float, b: float, eps: float) -> float:
    """Minimize ``f`` over a uniform grid on ``[a, b]``.

    The interval is cut into ``n = (b - a) / eps`` steps, with ``n`` kept as
    a float, and ``f`` is evaluated at ``a`` and at ``a + i (b - a) / n`` for
    ``i = 1 .. floor(n)``. The abscissa of the smallest value is returned;
    ties keep the first one seen. There is no refinement, so the answer is
    only as fine as the grid.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    if b < a:
        raise ValueError("interval must satisfy a <= b")
    n = (b - a) / eps
    min_x = a
    min_y = f(a)
    for i in range(1, math.floor(n) + 1):
        x = a + i * (b - a) / n
        y = f(x)
        if min_y > y:
            min_y = y
            min_x = x
    return min_x


def exact_step(
    fun: Objective,
    x: Array,
    direction: Array,
    resolution: float,
    decimals: int = 4,
) -> tuple[float, int]:
    """Pick ``t`` in ``[0, 1]`` minimizing ``fun(x + t * direction)`` on a grid.

    Non-finite objective values never win the grid comparison.

    Returns:
        The step rounded to ``decimals`` places together with the number of
        objective evaluations spent.

    Raises:
        LineSearchDivergenceError: if ``direction`` is not finite or no grid
            point has a finite objective value.
    """
    if not np.all(np.isfinite(direction)):
        raise LineSearchDivergenceError(
            "search direction is not finite", last_step=0.0, trials=0
        )
    nfev = 0
    finite = False

    def phi(t: float) -> float:
        nonlocal nfev, finite
        nfev += 1
        value = fun(x + t * direction)
        if not np.isfinite(value):
            return math.inf
        finite = True
        return value

    t = uniform_search(phi, 0.0, 1.0, resolution)
    if not finite:
        raise LineSearchDivergenceError(
            f"no finite objective value on the grid after {nfev} trials",
            last_step=t,
            trials=nfev,
        )
    return round(t, decimals), nfev


def backtracking_halving(
    fun: Objective,
    x: Array,
    direction: Array,
    t0: float = 1.0,
    fx: Optional[float] = None,
    max_halvings: int = 50,
) -> tuple[float, Array, int]:
    """Halve the step until the objective does not increase.

    Trial steps are ``t0, t0 / 2, ..., t0 / 2**max_halvings``. The first
    candidate with ``fun(x + t d) <= fun(x)`` is accepted; there is no
    sufficient-decrease slope term.

    Returns:
        ``(t, x_new, nfev)``.

    Raises:
        LineSearchDivergenceError: if no trial step is accepted.
    """
    if t0 <= 0:
        raise ValueError("t0 must be positive")
    if max_halvings < 0:
        raise ValueError("max_halvings must be non-negative")
    nfev = 0
    if fx is None:
        fx = fun(x)
        nfev += 1
    t = float(t0)
    for _ in range(max_halvings + 1):
        candidate = x + t * direction
        f_new = fun(candidate)
        nfev += 1
        if np.isfinite(f_new) and f_new <= fx:
            return t, candidate, nfev
        t /= 2.0
    raise LineSearchDivergenceError(
        f"no non-increasing step after {max_halvings + 1} trials (last t={2.0 * t:.3e})",
        last_step=2.0 * t,
        trials=max_halvings + 1,
    )


__all__ = ["backtracking_halving", "exact_step", "uniform_search"]
