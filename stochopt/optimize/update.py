"""Per-step update policies for the stochastic descent driver.

A policy turns the gradient of one sampled term into an in-place change of the
iterate. The driver owns sampling and termination; policies own whatever state
the step rule needs (for AdaGrad, the squared-gradient accumulator).
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

import numpy as np

from .core import Array, ConfigurationError, check_same_shape


@runtime_checkable
class UpdatePolicy(Protocol):
    """Step rule used by :class:`stochopt.optimize.SGD`."""

    def initialize(self, shape: tuple[int, ...]) -> None:
        """Prepare state for iterates of the given shape."""
        ...

    def update(self, iterate: Array, step_size: float, gradient: Array) -> None:
        """Apply one step to ``iterate`` in place."""
        ...

    def reset(self) -> None:
        """Forget any state accumulated by previous runs."""
        ...


class VanillaUpdate:
    """Plain stochastic gradient step ``x <- x - step_size * g``."""

    def initialize(self, shape: tuple[int, ...]) -> None:
        del shape

    def update(self, iterate: Array, step_size: float, gradient: Array) -> None:
        check_same_shape(iterate.shape, gradient.shape, "gradient")
        iterate -= step_size * gradient

    def reset(self) -> None:
        pass


class AdaGradUpdate:
    """
    AdaGrad step rule (Duchi, Hazan & Singer, JMLR 2011).

    Every coordinate keeps a running sum of its squared gradients. The step for
    coordinate ``k`` is

        acc[k] += g[k]**2
        x[k]   -= step_size * g[k] / (sqrt(acc[k]) + epsilon)

    so coordinates that have seen large gradients take smaller steps while
    rarely updated coordinates keep a large effective learning rate.

    The accumulator starts at ``epsilon`` rather than zero. It is created by
    :meth:`initialize` and kept across runs until :meth:`reset` is called.

    Args:
        epsilon: Initial accumulator value and denominator floor. Must be
            positive.
    """

    def __init__(self, epsilon: float = 1e-8) -> None:
        if epsilon <= 0.0:
            raise ConfigurationError("epsilon must be positive")
        self.epsilon = float(epsilon)
        self.squared_gradient: Optional[Array] = None

    def initialize(self, shape: tuple[int, ...]) -> None:
        if self.squared_gradient is None:
            self.squared_gradient = np.full(shape, self.epsilon, dtype=float)
            return
        check_same_shape(self.squared_gradient.shape, shape, "iterate")

    def update(self, iterate: Array, step_size: float, gradient: Array) -> None:
        if self.squared_gradient is None:
            raise ConfigurationError("AdaGradUpdate.update called before initialize")
        check_same_shape(iterate.shape, gradient.shape, "gradient")
        check_same_shape(self.squared_gradient.shape, gradient.shape, "gradient")

        self.squared_gradient += gradient * gradient
        iterate -= step_size * gradient / (np.sqrt(self.squared_gradient) + self.epsilon)

    def reset(self) -> None:
        self.squared_gradient = None

    def __repr__(self) -> str:
        return f"AdaGradUpdate(epsilon={self.epsilon!r})"


__all__ = ["UpdatePolicy", "VanillaUpdate", "AdaGradUpdate"]
