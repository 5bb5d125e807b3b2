"""Core interfaces shared across the stochastic optimizers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Protocol, runtime_checkable

import numpy as np

Array = np.ndarray
TermObjective = Callable[[Array, int], float]
TermGradient = Callable[[Array, int], Array]


class ConfigurationError(ValueError):
    """Raised when an optimizer cannot run with the inputs it was given.

    Covers objectives with no terms, iterate/gradient/accumulator shape
    mismatches and invalid configuration values.
    """


class NumericalDivergenceError(FloatingPointError):
    """Raised when NaN or infinite values are detected during optimization."""


@runtime_checkable
class DecomposableFunction(Protocol):
    """Objective expressible as a sum of independently differentiable terms.

    ``num_functions`` returns the number of terms ``n``; ``evaluate`` and
    ``gradient`` act on a single term ``i`` in ``[0, n)``. For data-dependent
    objectives a term is usually one point of the dataset, held internally by
    the function object.
    """

    def num_functions(self) -> int:
        ...

    def evaluate(self, coordinates: Array, i: int) -> float:
        ...

    def gradient(self, coordinates: Array, i: int) -> Array:
        ...


@dataclass(frozen=True)
class DecomposableProblem:
    """Container turning plain per-term callables into a decomposable function."""

    fun: TermObjective
    grad: TermGradient
    n_terms: int

    def num_functions(self) -> int:
        return self.n_terms

    def evaluate(self, coordinates: Array, i: int) -> float:
        return float(self.fun(coordinates, i))

    def gradient(self, coordinates: Array, i: int) -> Array:
        return np.asarray(self.grad(coordinates, i), dtype=float)


class Status(Enum):
    """Exit status of a stochastic optimization run."""

    CONVERGED = "converged"
    MAX_ITER = "max_iter"
    DIVERGED = "diverged"


@dataclass
class OptimizeResult:
    """
    Result of a stochastic optimization run.

    Attributes:
        x: Final iterate.
        fun: Objective value (sum over all terms) at ``x``.
        nit: Number of sampled-term updates performed.
        epochs: Number of completed passes over all terms.
        status: Enumeration describing why the run stopped.
        message: Human-readable explanation of the status.
        history: Objective value after each completed epoch.
    """

    x: Array
    fun: float
    nit: int
    epochs: int
    status: Status
    message: str
    history: List[float] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is Status.CONVERGED


def full_objective(function: DecomposableFunction, coordinates: Array, n: int) -> float:
    """Sum the value of every term at ``coordinates``."""
    total = 0.0
    for i in range(n):
        total += function.evaluate(coordinates, i)
    return float(total)


def check_convergence(previous: float, current: float, tolerance: float) -> bool:
    """Return True if the change in objective is below ``tolerance``."""
    return abs(previous - current) < tolerance


def check_same_shape(expected: tuple[int, ...], actual: tuple[int, ...], what: str) -> None:
    """Raise ConfigurationError unless two array shapes agree."""
    if tuple(expected) != tuple(actual):
        raise ConfigurationError(
            f"{what} has shape {tuple(actual)}, expected {tuple(expected)}"
        )


__all__ = [
    "Array",
    "TermObjective",
    "TermGradient",
    "ConfigurationError",
    "NumericalDivergenceError",
    "DecomposableFunction",
    "DecomposableProblem",
    "Status",
    "OptimizeResult",
    "full_objective",
    "check_convergence",
    "check_same_shape",
]
