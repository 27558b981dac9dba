"""Finite differences and small dense linear algebra helpers.

The differentiator treats the objective as a black box. Gradients use a
forward difference and Hessians the four-point central difference, both with
a fixed perturbation ``eps`` (``FD_STEP`` unless overridden per call). The
step is not scaled to the magnitude of ``x``; callers working far from unit
scale should pass their own ``eps``.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from ..errors import SingularMatrixError

Array = np.ndarray
Objective = Callable[[Array], float]

FD_STEP = 1e-5


def _check_eps(eps: float) -> None:
    if eps <= 0:
        raise ValueError("eps must be positive")


def _shifted(x: Array, index: int, delta: float) -> Array:
    out = x.copy()
    out[index] += delta
    return out


def first_partial_derivative(fun: Objective, x: Array, i: int, eps: float = FD_STEP) -> float:
    """Forward difference ``(f(x + eps e_i) - f(x)) / eps``."""
    _check_eps(eps)
    x = np.asarray(x, dtype=float)
    return (float(fun(_shifted(x, i, eps))) - float(fun(x))) / eps


def second_partial_derivative(
    fun: Objective, x: Array, i: int, j: int, eps: float = FD_STEP
) -> float:
    """Four-point central difference for d^2 f / dx_i dx_j.

    The same stencil is used on the diagonal, where it reduces to a central
    second difference with spacing ``2 * eps``.
    """
    _check_eps(eps)
    x = np.asarray(x, dtype=float)
    f_pp = fun(_shifted(_shifted(x, i, eps), j, eps))
    f_pm = fun(_shifted(_shifted(x, i, eps), j, -eps))
    f_mp = fun(_shifted(_shifted(x, i, -eps), j, eps))
    f_mm = fun(_shifted(_shifted(x, i, -eps), j, -eps))
    return float(f_pp - f_pm - f_mp + f_mm) / (4.0 * eps**2)


def approx_grad(
    fun: Objective, x: Array, eps: float = FD_STEP, return_evals: bool = False
) -> Array | tuple[Array, int]:
    """Compute a forward-difference gradient approximation.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated. Not modified.
    eps:
        Perturbation size for finite differences.
    return_evals:
        Also return the number of objective evaluations (``x.size + 1``).
    """
    _check_eps(eps)
    x = np.asarray(x, dtype=float)
    fx = float(fun(x))
    grad = np.zeros_like(x, dtype=float)
    for i in range(x.size):
        grad[i] = (float(fun(_shifted(x, i, eps))) - fx) / eps
    if return_evals:
        return grad, x.size + 1
    return grad


def approx_hessian(
    fun: Objective, x: Array, eps: float = FD_STEP, return_evals: bool = False
) -> Array | tuple[Array, int]:
    """Approximate the Hessian entry by entry with the four-point stencil.

    Every ``(i, j)`` pair is evaluated independently, so the result is
    symmetric only up to rounding and costs ``4 n^2`` evaluations.
    """
    _check_eps(eps)
    x = np.asarray(x, dtype=float)
    n = x.size
    hess = np.zeros((n, n), dtype=float)
    for i in range(n):
        for j in range(n):
            hess[i, j] = second_partial_derivative(fun, x, i, j, eps=eps)
    if return_evals:
        return hess, 4 * n * n
    return hess


def determinant(mat: Array) -> float:
    return float(np.linalg.det(np.asarray(mat, dtype=float)))


def inverse(mat: Array) -> Array:
    """Invert a square matrix, raising :class:`SingularMatrixError` when undefined."""
    mat = np.asarray(mat, dtype=float)
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        raise SingularMatrixError(f"expected a square matrix, got shape {mat.shape}")
    det = determinant(mat)
    if det == 0.0 or not np.isfinite(det):
        raise SingularMatrixError(f"matrix is singular (det={det})")
    try:
        inv = np.linalg.inv(mat)
    except np.linalg.LinAlgError as exc:
        raise SingularMatrixError(str(exc)) from exc
    if not np.all(np.isfinite(inv)):
        raise SingularMatrixError("matrix inverse is not finite")
    return inv


def is_pos_def(mat: Array, tol: float = 1e-12) -> bool:
    """Check if a matrix is positive definite via eigenvalues of its symmetric part."""
    mat = np.asarray(mat, dtype=float)
    sym = 0.5 * (mat + mat.T)
    eigvals = np.linalg.eigvalsh(sym)
    return bool(np.all(eigvals > tol))


__all__ = [
    "Array",
    "FD_STEP",
    "Objective",
    "approx_grad",
    "approx_hessian",
    "determinant",
    "first_partial_derivative",
    "inverse",
    "is_pos_def",
    "second_partial_derivative",
]
