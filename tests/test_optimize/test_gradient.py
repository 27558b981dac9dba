import numpy as np
import pytest

from numdescent.errors import DimensionMismatchError
from numdescent.optimize import (
    Problem,
    Status,
    fast_gradient_descent,
    gradient_descent,
    newton_raphson,
)


def test_gradient_descent_bowl_scenario(bowl):
    res = gradient_descent(bowl, np.zeros(2), eps1=1e-4, eps2=1e-6, max_iter=1000, t0=1.0)
    assert res.success
    assert np.allclose(res.x, [1.0, 2.0], atol=1e-4)
    assert res.nit == 2


def test_fast_gradient_descent_bowl_scenario(bowl):
    res = fast_gradient_descent(bowl, np.zeros(2), eps1=1e-4, eps2=1e-6, max_iter=1000)
    assert res.success
    assert np.allclose(res.x, [1.0, 2.0], atol=1e-4)
    assert res.nit == 1


def test_gradient_descent_quadratic_converges(convex_quadratic):
    fun, expected = convex_quadratic
    res = gradient_descent(fun, np.array([3.0, -1.0]), max_iter=1000)
    assert res.success
    assert np.allclose(res.x, expected, atol=1e-3)


def test_fast_gradient_descent_coarse_resolution(convex_quadratic):
    fun, expected = convex_quadratic
    res = fast_gradient_descent(
        fun, np.zeros(2), max_iter=500, line_search_resolution=1e-3, step_decimals=3
    )
    assert res.success
    assert np.allclose(res.x, expected, atol=1e-3)


def test_gradient_descent_uses_analytic_gradient():
    def fun(x: np.ndarray) -> float:
        return float(np.sum((x - 0.5) ** 2))

    def grad(x: np.ndarray) -> np.ndarray:
        return 2 * (x - 0.5)

    res = gradient_descent(Problem(fun=fun, grad=grad, dim=3), np.zeros(3), t0=0.25)
    assert res.success
    assert res.njev >= 1
    assert np.allclose(res.x, 0.5, atol=1e-4)


def test_gradient_descent_deterministic(bowl):
    x0 = np.array([0.5, -0.25])
    res1 = gradient_descent(bowl, x0, history=True)
    res2 = gradient_descent(bowl, x0, history=True)
    assert np.array_equal(res1.x, res2.x)
    assert res1.nit == res2.nit
    assert np.array_equal(res1.history[-1], res2.history[-1])


def test_zero_iterations_returns_start(bowl):
    x0 = np.array([0.0, 0.0])
    for method in (gradient_descent, fast_gradient_descent):
        res = method(bowl, x0, max_iter=0)
        assert res.nit == 0
        assert res.status is Status.MAX_ITER
        assert np.array_equal(res.x, x0)
        assert res.x is not x0


def test_iteration_cap_is_reported(convex_quadratic):
    fun, _ = convex_quadratic
    res = gradient_descent(fun, np.array([3.0, -1.0]), max_iter=2, history=True)
    assert res.nit == 2
    assert res.status is Status.MAX_ITER
    assert not res.success
    assert len(res.history) == 3
    assert np.array_equal(res.x, res.history[-1])
    assert res.fun == fun(res.history[-1])


def test_iteration_cap_returns_last_grid_search_point(convex_quadratic):
    fun, _ = convex_quadratic
    res = fast_gradient_descent(fun, np.zeros(2), max_iter=2, history=True)
    assert res.nit == 2
    assert res.status is Status.MAX_ITER
    assert len(res.history) == 3
    assert np.array_equal(res.x, res.history[-1])
    assert not np.array_equal(res.x, res.history[-2])


def test_history_and_callback(bowl):
    seen = []
    res = gradient_descent(
        bowl, np.zeros(2), history=True, callback=lambda k, x, fx: seen.append((k, fx))
    )
    assert len(res.history) == res.nit + 1
    assert np.array_equal(res.history[0], np.zeros(2))
    assert [k for k, _ in seen] == list(range(1, res.nit + 1))


def test_line_search_failure_is_surfaced():
    def fun(x: np.ndarray) -> float:
        return float(x @ x)

    def uphill(x: np.ndarray) -> np.ndarray:
        return -2 * x

    x0 = np.array([1.0, 1.0])
    res = gradient_descent(Problem(fun=fun, grad=uphill), x0, max_halvings=10)
    assert res.status is Status.LINE_SEARCH_FAILED
    assert not res.success
    assert res.nit == 0
    assert np.array_equal(res.x, x0)


def test_dimension_mismatch_detected_at_entry(bowl):
    with pytest.raises(DimensionMismatchError):
        gradient_descent(Problem(fun=bowl, dim=2), np.zeros(3))


def test_analytic_gradient_shape_checked():
    problem = Problem(fun=lambda x: float(x @ x), grad=lambda x: np.zeros(3))
    with pytest.raises(DimensionMismatchError):
        gradient_descent(problem, np.ones(2))


def test_invalid_tolerances(bowl):
    with pytest.raises(ValueError):
        gradient_descent(bowl, np.zeros(2), eps2=0.0)
    with pytest.raises(ValueError):
        gradient_descent(bowl, np.zeros(2), max_iter=-1)
    with pytest.raises(ValueError):
        fast_gradient_descent(bowl, np.zeros(2), line_search_resolution=0.0)


def test_short_start_point_for_bare_objective(bowl):
    with pytest.raises(DimensionMismatchError) as excinfo:
        gradient_descent(bowl, np.zeros(1))
    assert isinstance(excinfo.value.__cause__, IndexError)
    assert excinfo.value.actual == 1


def _nan_beyond_half(x: np.ndarray) -> float:
    return float("nan") if x[0] > 0.5 else float((x[0] - 1.0) ** 2)


@pytest.mark.parametrize("method", [fast_gradient_descent, newton_raphson])
def test_grid_search_stops_on_non_finite_values(method):
    # The forward difference at x0 steps past 0.5, so the gradient is NaN.
    x0 = np.array([0.4999999])
    res = method(_nan_beyond_half, x0)
    assert res.status is Status.LINE_SEARCH_FAILED
    assert not res.success
    assert res.nit == 0
    assert np.array_equal(res.x, x0)
    assert np.isfinite(res.fun)
