"""Derivative-free descent algorithms for unconstrained minimization.

Gradients and Hessians are approximated by finite differences unless the
:class:`Problem` supplies them.

Example
-------
>>> import numpy as np
>>> from numdescent.optimize import newton_method
>>> def bowl(x):
...     return (x[0] - 1) ** 2 + (x[1] - 2) ** 2
>>> res = newton_method(bowl, np.zeros(2), eps1=1e-4, eps2=1e-6, max_iter=1000)
>>> res.nit
1
>>> bool(np.allclose(res.x, [1.0, 2.0], atol=1e-4))
True
"""

from .conjugate_gradient import fletcher_reeves, fletcher_reeves_beta
from .core import ConvergenceLatch, OptimizeResult, Problem, Status
from .factory import METHODS, DescentConfig, minimize
from .gradient import fast_gradient_descent, gradient_descent
from .iteration import run_descent
from .line_search import backtracking_halving, exact_step, uniform_search
from .newton import (
    DirectionChoice,
    DirectionKind,
    newton_method,
    newton_raphson,
    select_newton_direction,
)
from .utils import (
    FD_STEP,
    approx_grad,
    approx_hessian,
    determinant,
    first_partial_derivative,
    inverse,
    is_pos_def,
    second_partial_derivative,
)

__all__ = [
    "ConvergenceLatch",
    "DescentConfig",
    "DirectionChoice",
    "DirectionKind",
    "FD_STEP",
    "METHODS",
    "OptimizeResult",
    "Problem",
    "Status",
    "approx_grad",
    "approx_hessian",
    "backtracking_halving",
    "determinant",
    "exact_step",
    "fast_gradient_descent",
    "first_partial_derivative",
    "fletcher_reeves",
    "fletcher_reeves_beta",
    "gradient_descent",
    "inverse",
    "is_pos_def",
    "minimize",
    "newton_method",
    "newton_raphson",
    "run_descent",
    "second_partial_derivative",
    "select_newton_direction",
    "uniform_search",
]
