"""Stochastic first-order optimizers for decomposable objectives.

Example
-------
>>> import numpy as np
>>> from stochopt.optimize import DecomposableProblem, adagrad
>>> targets = np.array([1.0, 2.0, 3.0])
>>> problem = DecomposableProblem(
...     fun=lambda x, i: float((x[0] - targets[i]) ** 2),
...     grad=lambda x, i: np.array([2.0 * (x[0] - targets[i])]),
...     n_terms=3,
... )
>>> res = adagrad(problem, np.array([0.0]), step_size=0.5, shuffle=False)
>>> bool(abs(res.x[0] - 2.0) < 0.1)
True
"""

from .core import (
    Array,
    ConfigurationError,
    DecomposableFunction,
    DecomposableProblem,
    NumericalDivergenceError,
    OptimizeResult,
    Status,
    check_convergence,
    full_objective,
)
from .update import AdaGradUpdate, UpdatePolicy, VanillaUpdate
from .sgd import SGD, SGDConfig
from .ada_grad import AdaGrad, AdaGradConfig, adagrad
from .utils import approx_grad, check_term_gradient

__all__ = [
    "Array",
    "ConfigurationError",
    "NumericalDivergenceError",
    "DecomposableFunction",
    "DecomposableProblem",
    "OptimizeResult",
    "Status",
    "check_convergence",
    "full_objective",
    "UpdatePolicy",
    "VanillaUpdate",
    "AdaGradUpdate",
    "SGDConfig",
    "SGD",
    "AdaGradConfig",
    "AdaGrad",
    "adagrad",
    "approx_grad",
    "check_term_gradient",
]
