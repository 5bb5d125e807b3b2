"""Stochastic gradient descent over decomposable objectives."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Optional, Union

import numpy as np

from ..diagnostics import assert_finite, is_debug_enabled
from ..logging import get_logger
from .core import (
    Array,
    ConfigurationError,
    DecomposableFunction,
    OptimizeResult,
    Status,
    check_convergence,
    check_same_shape,
    full_objective,
)
from .update import UpdatePolicy, VanillaUpdate

logger = get_logger(__name__)

EpochCallback = Callable[[int, float], None]
RandomState = Union[None, int, np.random.Generator]


@dataclass(frozen=True)
class SGDConfig:
    """
    Configuration of the stochastic descent driver.

    Args:
        step_size: Step size applied to every update. Must be positive.
        max_iterations: Maximum number of sampled-term updates (one iteration
            is one term, not one pass over all terms). 0 means no limit.
        tolerance: Stop once the objective changes by less than this between
            two consecutive epochs. Must be positive.
        shuffle: Visit the terms in a fresh random order each epoch instead of
            in index order.
        check_finite: Raise NumericalDivergenceError when the objective becomes
            NaN or infinite instead of stopping with ``Status.DIVERGED``.
    """

    step_size: float = 0.01
    max_iterations: int = 100000
    tolerance: float = 1e-5
    shuffle: bool = True
    check_finite: bool = False

    def __post_init__(self) -> None:
        if self.step_size <= 0.0:
            raise ConfigurationError("step_size must be positive")
        if self.max_iterations < 0:
            raise ConfigurationError("max_iterations must be non-negative (0 means no limit)")
        if self.tolerance <= 0.0:
            raise ConfigurationError("tolerance must be positive")

    def with_step_size(self, step_size: float) -> "SGDConfig":
        return replace(self, step_size=step_size)

    def with_max_iterations(self, max_iterations: int) -> "SGDConfig":
        return replace(self, max_iterations=max_iterations)

    def with_tolerance(self, tolerance: float) -> "SGDConfig":
        return replace(self, tolerance=tolerance)

    def with_shuffle(self, shuffle: bool) -> "SGDConfig":
        return replace(self, shuffle=shuffle)

    def with_check_finite(self, check_finite: bool) -> "SGDConfig":
        return replace(self, check_finite=check_finite)


def _as_generator(rng: RandomState) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


class SGD:
    """
    Stochastic gradient descent driver with a pluggable update policy.

    Each iteration samples one term of the objective, asks it for a gradient
    and hands that gradient to the update policy, which changes the iterate in
    place. Terms are visited in epochs: at the start of every epoch a new
    visitation order is drawn (a random permutation when ``shuffle`` is set,
    index order otherwise), and only at the end of an epoch is the full
    objective recomputed and compared with the previous epoch.

    The update policy is kept between calls to :meth:`optimize`, so stateful
    policies such as :class:`AdaGradUpdate` continue from the state left by the
    previous run.

    Args:
        config: Driver configuration. Defaults to ``SGDConfig()``.
        update_policy: Step rule. Defaults to :class:`VanillaUpdate`.
        rng: Seed or generator used to shuffle the visitation order.
        callback: Called as ``callback(epoch, objective)`` after every
            completed epoch.
    """

    def __init__(
        self,
        config: Optional[SGDConfig] = None,
        update_policy: Optional[UpdatePolicy] = None,
        rng: RandomState = None,
        callback: Optional[EpochCallback] = None,
    ) -> None:
        self.config = config if config is not None else SGDConfig()
        self.update_policy = update_policy if update_policy is not None else VanillaUpdate()
        self.callback = callback
        self.last_result: Optional[OptimizeResult] = None
        self._rng = _as_generator(rng)

    @property
    def step_size(self) -> float:
        return self.config.step_size

    @property
    def max_iterations(self) -> int:
        return self.config.max_iterations

    @property
    def tolerance(self) -> float:
        return self.config.tolerance

    @property
    def shuffle(self) -> bool:
        return self.config.shuffle

    def reconfigure(self, **changes) -> None:
        """Replace configuration fields for subsequent runs."""
        self.config = replace(self.config, **changes)

    def _visitation_order(self, n: int) -> Array:
        if self.config.shuffle:
            return self._rng.permutation(n)
        return np.arange(n)

    def optimize(self, function: DecomposableFunction, iterate: Array) -> float:
        """
        Minimize ``function`` starting from ``iterate``.

        The iterate is modified in place and holds the final point when this
        method returns. A summary of the run is stored in ``last_result``.

        Args:
            function: Decomposable objective to minimize.
            iterate: Starting point, a floating point array. Modified in place.

        Returns:
            Objective value (sum over all terms) at the final iterate.

        Raises:
            ConfigurationError: If the objective has no terms, if the iterate is
                not a floating point array, or if a gradient does not have the
                shape of the iterate.
            NumericalDivergenceError: If the objective becomes non-finite while
                ``check_finite`` or debug mode is enabled.
        """
        config = self.config
        n = int(function.num_functions())
        if n == 0:
            raise ConfigurationError("objective has no terms to optimize")
        if not isinstance(iterate, np.ndarray) or not np.issubdtype(iterate.dtype, np.floating):
            raise ConfigurationError("iterate must be a floating point numpy array")

        check_divergence = config.check_finite or is_debug_enabled()
        self.update_policy.initialize(iterate.shape)

        current = full_objective(function, iterate, n)
        history: list[float] = []
        order = np.arange(n)
        nit = 0
        epochs = 0
        status = Status.MAX_ITER
        logger.debug("starting optimization over %d terms, objective %.6g", n, current)

        while config.max_iterations == 0 or nit < config.max_iterations:
            position = nit % n
            if position == 0:
                order = self._visitation_order(n)

            gradient = np.asarray(function.gradient(iterate, int(order[position])))
            check_same_shape(iterate.shape, gradient.shape, "gradient")
            self.update_policy.update(iterate, config.step_size, gradient)
            nit += 1

            if nit % n != 0:
                continue

            epochs += 1
            objective = full_objective(function, iterate, n)
            history.append(objective)
            logger.debug("epoch %d: objective %.6g", epochs, objective)
            if self.callback is not None:
                self.callback(epochs, objective)

            if not np.isfinite(objective):
                logger.warning("objective became %s after %d iterations", objective, nit)
                if check_divergence:
                    assert_finite(np.asarray(objective), "objective")
                current = objective
                status = Status.DIVERGED
                break

            converged = check_convergence(current, objective, config.tolerance)
            current = objective
            if converged:
                status = Status.CONVERGED
                break

        if status is Status.MAX_ITER and nit % n != 0:
            current = full_objective(function, iterate, n)

        messages = {
            Status.CONVERGED: "Objective change below tolerance.",
            Status.MAX_ITER: "Maximum iterations reached.",
            Status.DIVERGED: "Objective is not finite.",
        }
        self.last_result = OptimizeResult(
            x=iterate.copy(),
            fun=float(current),
            nit=nit,
            epochs=epochs,
            status=status,
            message=messages[status],
            history=history,
        )
        logger.info(
            "%s after %d iterations (%d epochs), objective %.6g",
            messages[status].rstrip("."),
            nit,
            epochs,
            current,
        )
        return float(current)


__all__ = ["SGDConfig", "SGD", "EpochCallback"]
