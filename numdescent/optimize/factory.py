"""Select and run a descent algorithm from configuration."""

from __future__ import annotations

import dataclasses
import inspect
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .conjugate_gradient import fletcher_reeves
from .core import Array, Objective, OptimizeResult, Problem
from .gradient import fast_gradient_descent, gradient_descent
from .iteration import Callback
from .newton import newton_method, newton_raphson
from .utils import FD_STEP

METHODS: dict[str, Callable[..., OptimizeResult]] = {
    "gradient_descent": gradient_descent,
    "fast_gradient_descent": fast_gradient_descent,
    "fletcher_reeves": fletcher_reeves,
    "newton": newton_method,
    "newton_raphson": newton_raphson,
}


@dataclass(frozen=True)
class DescentConfig:
    """
    Configuration for a descent run.

    Options that a method does not use are ignored, e.g. ``t0`` for the grid
    line search variants.

    Args:
        method: One of the keys of ``METHODS``.
        eps1: Gradient-norm tolerance.
        eps2: Tolerance on step norm and objective change.
        max_iter: Maximum number of outer iterations.
        t0: Initial trial step of the halving search.
        fd_step: Finite-difference perturbation.
        max_halvings: Cap on halvings per backtracking search.
        line_search_resolution: Grid spacing for the exact variants. Defaults
            to ``eps1`` when None.
        step_decimals: Rounding applied to grid line search steps.
    """

    method: str = "gradient_descent"
    eps1: float = 1e-4
    eps2: float = 1e-6
    max_iter: int = 1000
    t0: float = 1.0
    fd_step: float = FD_STEP
    max_halvings: int = 50
    line_search_resolution: Optional[float] = None
    step_decimals: int = 4

    def __post_init__(self) -> None:
        if self.method not in METHODS:
            raise ValueError(
                f"Unsupported method '{self.method}'. Supported methods: {sorted(METHODS)}"
            )
        if self.eps1 < 0:
            raise ValueError("eps1 must be non-negative.")
        if self.eps2 <= 0:
            raise ValueError("eps2 must be positive.")
        if self.max_iter < 0:
            raise ValueError("max_iter must be non-negative.")
        if self.t0 <= 0 or self.fd_step <= 0:
            raise ValueError("t0 and fd_step must be positive.")
        if self.max_halvings < 0:
            raise ValueError("max_halvings must be non-negative.")
        if self.line_search_resolution is not None and self.line_search_resolution <= 0:
            raise ValueError("line_search_resolution must be positive.")

    def options_for(self, func: Callable[..., OptimizeResult]) -> dict:
        """Return the config fields that ``func`` accepts as keywords."""
        accepted = inspect.signature(func).parameters
        return {
            f.name: getattr(self, f.name)
            for f in dataclasses.fields(self)
            if f.name != "method" and f.name in accepted
        }


def minimize(
    problem: Union[Problem, Objective],
    x0: Array,
    config: Optional[DescentConfig] = None,
    *,
    callback: Optional[Callback] = None,
    history: bool = False,
    **overrides,
) -> OptimizeResult:
    """
    Minimize ``problem`` starting from ``x0`` with the configured method.

    Keyword overrides replace fields of ``config`` (or of the default config),
    e.g. ``minimize(f, x0, method="newton", max_iter=20)``.

    Raises:
        ValueError: If the method name or an option value is invalid.
        TypeError: If an override is not a config field.
    """
    config = config if config is not None else DescentConfig()
    if overrides:
        config = dataclasses.replace(config, **overrides)
    func = METHODS[config.method]
    return func(problem, x0, callback=callback, history=history, **config.options_for(func))


__all__ = ["DescentConfig", "METHODS", "minimize"]
