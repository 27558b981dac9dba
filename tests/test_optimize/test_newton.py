import numpy as np
import pytest

from numdescent.errors import DimensionMismatchError
from numdescent.optimize import (
    DirectionKind,
    Problem,
    newton_method,
    newton_raphson,
    select_newton_direction,
)
from numdescent.optimize import newton as newton_module


def double_well(x: np.ndarray) -> float:
    return float(x[0] ** 4 / 4 - x[0] ** 2 / 2 + x[1] ** 2)


def test_select_direction_positive_definite():
    choice = select_newton_direction(np.array([2.0, 4.0]), np.diag([2.0, 4.0]))
    assert choice.kind is DirectionKind.NEWTON_STEP
    assert choice.is_newton
    assert choice.reason == "positive_definite"
    assert np.allclose(choice.direction, [-1.0, -1.0])


def test_select_direction_singular_falls_back():
    grad = np.array([1.0, -3.0])
    choice = select_newton_direction(grad, np.array([[1.0, 1.0], [1.0, 1.0]]))
    assert choice.kind is DirectionKind.STEEPEST_DESCENT_FALLBACK
    assert choice.reason == "singular"
    assert np.array_equal(choice.direction, -grad)


def test_select_direction_indefinite_falls_back():
    grad = np.array([1.0, -3.0])
    choice = select_newton_direction(grad, np.diag([-1.0, 2.0]))
    assert choice.kind is DirectionKind.STEEPEST_DESCENT_FALLBACK
    assert choice.reason == "indefinite"
    assert np.array_equal(choice.direction, -grad)


def test_newton_bowl_scenario(bowl):
    res = newton_method(bowl, np.zeros(2), eps1=1e-4, eps2=1e-6, max_iter=1000, t0=1.0)
    assert res.success
    assert res.nit == 1
    assert np.allclose(res.x, [1.0, 2.0], atol=1e-4)


def test_newton_raphson_bowl_scenario(bowl):
    res = newton_raphson(bowl, np.zeros(2), eps1=1e-4, eps2=1e-6, max_iter=1000)
    assert res.success
    assert res.nit == 1
    assert np.allclose(res.x, [1.0, 2.0], atol=1e-4)


def test_newton_solves_random_spd_quadratic_in_one_step(rng):
    m = rng.normal(size=(3, 3))
    A = m @ m.T + 3.0 * np.eye(3)
    b = rng.normal(size=3)

    def fun(x: np.ndarray) -> float:
        return float(x @ (A @ x) + b @ x)

    res = newton_method(fun, np.zeros(3), max_iter=50)
    expected = np.linalg.solve(2.0 * A, -b)
    assert res.success
    assert res.nit == 1
    assert np.allclose(res.x, expected, atol=1e-4)


def test_newton_full_step_ignores_small_t0(bowl):
    res = newton_method(bowl, np.zeros(2), t0=1e-3)
    assert res.nit == 1


def test_newton_falls_back_on_indefinite_hessian(monkeypatch: pytest.MonkeyPatch):
    kinds = []
    real_select = newton_module.select_newton_direction

    def spy(grad, hess):
        choice = real_select(grad, hess)
        kinds.append(choice.kind)
        return choice

    monkeypatch.setattr(newton_module, "select_newton_direction", spy)
    res = newton_method(double_well, np.array([0.1, 1.0]), max_iter=100)
    assert res.success
    assert np.allclose(res.x, [1.0, 0.0], atol=1e-3)
    assert kinds[0] is DirectionKind.STEEPEST_DESCENT_FALLBACK
    assert DirectionKind.NEWTON_STEP in kinds


def test_newton_raphson_with_fallback_direction():
    res = newton_raphson(double_well, np.array([0.1, 1.0]), max_iter=100)
    assert res.success
    assert abs(abs(res.x[0]) - 1.0) < 1e-3
    assert abs(res.x[1]) < 1e-3


def test_newton_uses_analytic_derivatives():
    A = np.array([[3.0, 0.5], [0.5, 2.0]])
    b = np.array([1.0, -1.0])

    def fun(x: np.ndarray) -> float:
        return 0.5 * x @ (A @ x) - b @ x

    problem = Problem(fun=fun, grad=lambda x: A @ x - b, hess=lambda x: A, dim=2)
    res = newton_method(problem, np.array([2.0, 2.0]), max_iter=5)
    assert res.success
    assert res.nit == 1
    assert res.nhev == 1
    assert np.allclose(res.x, np.linalg.solve(A, b), atol=1e-10)


def test_newton_hessian_shape_checked():
    problem = Problem(fun=lambda x: float(x @ x), hess=lambda x: np.eye(3))
    with pytest.raises(DimensionMismatchError):
        newton_method(problem, np.ones(2))


def test_newton_zero_iterations_checks_gradient():
    def fun(x: np.ndarray) -> float:
        return float(np.sum(x**2))

    problem = Problem(fun=fun, grad=lambda x: 2 * x, hess=lambda x: 2 * np.eye(2), dim=2)
    res = newton_method(problem, np.zeros(2), max_iter=0)
    assert res.success
    assert res.nit == 0
