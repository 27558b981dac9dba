"""Pytest configuration and shared fixtures for numdescent tests.

This module provides:
- A deterministic numpy RNG fixture
- Objective functions reused across the optimizer tests
"""

import os

import numpy as np
import pytest


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


def _bowl(x: np.ndarray) -> float:
    return float((x[0] - 1.0) ** 2 + (x[1] - 2.0) ** 2)


@pytest.fixture
def bowl():
    """``(x - 1)^2 + (y - 2)^2`` with its minimum at ``(1, 2)``."""
    return _bowl


@pytest.fixture
def convex_quadratic():
    """``x^T A x + b^T x`` with symmetric positive definite ``A`` and its minimizer."""
    A = np.array([[2.0, 0.5], [0.5, 1.0]])
    b = np.array([-1.0, 2.0])

    def fun(x: np.ndarray) -> float:
        return float(x @ (A @ x) + b @ x)

    expected = np.linalg.solve(2.0 * A, -b)
    return fun, expected
