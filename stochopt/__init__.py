"""stochopt - stochastic first-order optimization with adaptive step sizes."""

__version__ = "0.1.0"

# Optimizers
from .optimize import (
    SGD,
    AdaGrad,
    AdaGradConfig,
    AdaGradUpdate,
    ConfigurationError,
    DecomposableFunction,
    DecomposableProblem,
    NumericalDivergenceError,
    OptimizeResult,
    SGDConfig,
    Status,
    UpdatePolicy,
    VanillaUpdate,
    adagrad,
)

# Diagnostics
from .diagnostics import (
    assert_finite,
    debug_context,
    is_debug_enabled,
    is_finite,
    set_debug_enabled,
)

# Objectives and models
from .models import LogisticRegression
from .problems import LogisticRegressionFunction, SGDTestFunction

__all__ = [
    # Version
    "__version__",
    # Optimizers
    "SGD",
    "SGDConfig",
    "AdaGrad",
    "AdaGradConfig",
    "adagrad",
    "UpdatePolicy",
    "VanillaUpdate",
    "AdaGradUpdate",
    "DecomposableFunction",
    "DecomposableProblem",
    "OptimizeResult",
    "Status",
    "ConfigurationError",
    "NumericalDivergenceError",
    # Diagnostics
    "is_finite",
    "assert_finite",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Objectives and models
    "SGDTestFunction",
    "LogisticRegressionFunction",
    "LogisticRegression",
]
