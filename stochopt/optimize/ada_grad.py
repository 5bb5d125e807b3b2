"""AdaGrad: stochastic gradient descent with per-coordinate step sizes.

AdaGrad performs larger updates for parameters whose gradients are sparse or
small and smaller updates for parameters that keep receiving large gradients.
See Duchi, Hazan & Singer, "Adaptive Subgradient Methods for Online Learning
and Stochastic Optimization", JMLR 12 (2011).

Example
-------
>>> import numpy as np
>>> from stochopt.optimize import AdaGrad
>>> from stochopt.problems import SGDTestFunction
>>> f = SGDTestFunction()
>>> x = f.initial_point()
>>> optimizer = AdaGrad(step_size=0.99, epsilon=1.0, shuffle=False)
>>> value = optimizer.optimize(f, x)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

import numpy as np

from ..logging import get_logger
from .core import Array, ConfigurationError, DecomposableFunction, OptimizeResult
from .sgd import SGD, EpochCallback, RandomState, SGDConfig
from .update import AdaGradUpdate

logger = get_logger(__name__)


@dataclass(frozen=True)
class AdaGradConfig(SGDConfig):
    """
    SGD configuration plus the AdaGrad epsilon.

    Args:
        epsilon: Initial value of the squared-gradient accumulator, also added
            to its square root before dividing. Must be positive.
    """

    epsilon: float = 1e-8

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.epsilon <= 0.0:
            raise ConfigurationError("epsilon must be positive")

    def with_epsilon(self, epsilon: float) -> "AdaGradConfig":
        return replace(self, epsilon=epsilon)

    def driver_config(self) -> SGDConfig:
        return SGDConfig(
            step_size=self.step_size,
            max_iterations=self.max_iterations,
            tolerance=self.tolerance,
            shuffle=self.shuffle,
            check_finite=self.check_finite,
        )


class AdaGrad:
    """
    AdaGrad optimizer for decomposable objectives.

    This is an :class:`SGD` driver bound to an :class:`AdaGradUpdate` policy.
    The defaults are not necessarily good for a given problem; tailor them to
    the task at hand. ``max_iterations`` counts individual terms processed, so
    one iteration is one point of the dataset rather than one pass over it.

    The squared-gradient accumulator survives between calls to
    :meth:`optimize`. Changing ``epsilon`` through :meth:`reconfigure` starts a
    new accumulator; so does calling ``update_policy.reset()``.

    Args:
        step_size: Step size for each iteration.
        epsilon: Value used to initialise the squared gradient accumulator.
        max_iterations: Maximum number of iterations allowed (0 means no limit).
        tolerance: Maximum absolute change of the objective between epochs at
            which the run is considered converged.
        shuffle: If True, the terms are visited in a random order each epoch;
            otherwise in index order.
        check_finite: Raise instead of stopping when the objective diverges.
        rng: Seed or generator for the visitation order.
        callback: Called as ``callback(epoch, objective)`` after every epoch.
    """

    def __init__(
        self,
        step_size: float = 0.01,
        epsilon: float = 1e-8,
        max_iterations: int = 100000,
        tolerance: float = 1e-5,
        shuffle: bool = True,
        check_finite: bool = False,
        rng: RandomState = None,
        callback: Optional[EpochCallback] = None,
    ) -> None:
        self._config = AdaGradConfig(
            step_size=step_size,
            max_iterations=max_iterations,
            tolerance=tolerance,
            shuffle=shuffle,
            check_finite=check_finite,
            epsilon=epsilon,
        )
        self._sgd = SGD(
            config=self._config.driver_config(),
            update_policy=AdaGradUpdate(epsilon),
            rng=rng,
            callback=callback,
        )

    @classmethod
    def from_config(
        cls,
        config: AdaGradConfig,
        rng: RandomState = None,
        callback: Optional[EpochCallback] = None,
    ) -> "AdaGrad":
        return cls(
            step_size=config.step_size,
            epsilon=config.epsilon,
            max_iterations=config.max_iterations,
            tolerance=config.tolerance,
            shuffle=config.shuffle,
            check_finite=config.check_finite,
            rng=rng,
            callback=callback,
        )

    @property
    def config(self) -> AdaGradConfig:
        return self._config

    @property
    def step_size(self) -> float:
        return self._config.step_size

    @property
    def epsilon(self) -> float:
        return self._config.epsilon

    @property
    def max_iterations(self) -> int:
        return self._config.max_iterations

    @property
    def tolerance(self) -> float:
        return self._config.tolerance

    @property
    def shuffle(self) -> bool:
        return self._config.shuffle

    @property
    def update_policy(self) -> AdaGradUpdate:
        return self._sgd.update_policy

    @property
    def last_result(self) -> Optional[OptimizeResult]:
        return self._sgd.last_result

    def reconfigure(self, **changes: Any) -> None:
        """
        Replace configuration values for subsequent runs.

        Example
        -------
        >>> opt = AdaGrad()
        >>> opt.reconfigure(step_size=0.5, shuffle=False)
        >>> opt.step_size
        0.5
        """
        config = replace(self._config, **changes)
        if config.epsilon != self._config.epsilon:
            logger.debug("epsilon changed to %g, discarding accumulator", config.epsilon)
            self._sgd.update_policy = AdaGradUpdate(config.epsilon)
        self._config = config
        self._sgd.config = config.driver_config()

    def optimize(self, function: DecomposableFunction, iterate: Array) -> float:
        """
        Optimize ``function`` with AdaGrad.

        The given starting point is modified to store the finishing point of
        the algorithm, and the final objective value is returned.
        """
        return self._sgd.optimize(function, iterate)

    def __repr__(self) -> str:
        c = self._config
        return (
            f"AdaGrad(step_size={c.step_size!r}, epsilon={c.epsilon!r}, "
            f"max_iterations={c.max_iterations!r}, tolerance={c.tolerance!r}, "
            f"shuffle={c.shuffle!r})"
        )


def adagrad(
    function: DecomposableFunction,
    x0: Array,
    step_size: float = 0.01,
    epsilon: float = 1e-8,
    max_iterations: int = 100000,
    tolerance: float = 1e-5,
    shuffle: bool = True,
    check_finite: bool = False,
    rng: RandomState = None,
    callback: Optional[EpochCallback] = None,
) -> OptimizeResult:
    """Run AdaGrad from a copy of ``x0`` and return the full result."""
    x = np.array(x0, dtype=float, copy=True)
    optimizer = AdaGrad(
        step_size=step_size,
        epsilon=epsilon,
        max_iterations=max_iterations,
        tolerance=tolerance,
        shuffle=shuffle,
        check_finite=check_finite,
        rng=rng,
        callback=callback,
    )
    optimizer.optimize(function, x)
    result = optimizer.last_result
    assert result is not None
    result.x = x
    return result


__all__ = ["AdaGradConfig", "AdaGrad", "adagrad"]
