"""numdescent - classical descent methods with finite-difference derivatives."""

__version__ = "0.1.0"

from .errors import (
    DimensionMismatchError,
    LineSearchDivergenceError,
    OptimizationError,
    SingularMatrixError,
)
from .logging import configure_logging, get_logger, set_log_level
from .optimize import (
    DescentConfig,
    OptimizeResult,
    Problem,
    Status,
    fast_gradient_descent,
    fletcher_reeves,
    gradient_descent,
    minimize,
    newton_method,
    newton_raphson,
    uniform_search,
)

__all__ = [
    "__version__",
    # Errors
    "DimensionMismatchError",
    "LineSearchDivergenceError",
    "OptimizationError",
    "SingularMatrixError",
    # Logging
    "configure_logging",
    "get_logger",
    "set_log_level",
    # Optimization
    "DescentConfig",
    "OptimizeResult",
    "Problem",
    "Status",
    "fast_gradient_descent",
    "fletcher_reeves",
    "gradient_descent",
    "minimize",
    "newton_method",
    "newton_raphson",
    "uniform_search",
]
