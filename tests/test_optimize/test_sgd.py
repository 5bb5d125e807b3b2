import math

import numpy as np
import pytest

from stochopt.diagnostics import debug_context
from stochopt.optimize import (
    SGD,
    AdaGradUpdate,
    ConfigurationError,
    DecomposableProblem,
    NumericalDivergenceError,
    SGDConfig,
    Status,
    full_objective,
)


def mean_problem(targets: np.ndarray) -> DecomposableProblem:
    """Sum of squared distances to ``targets``; minimized at their mean."""
    return DecomposableProblem(
        fun=lambda x, i: float((x[0] - targets[i]) ** 2),
        grad=lambda x, i: np.array([2.0 * (x[0] - targets[i])]),
        n_terms=len(targets),
    )


class RecordingFunction:
    """Wraps a decomposable function and records which terms were sampled."""

    def __init__(self, inner):
        self.inner = inner
        self.visited: list[int] = []

    def num_functions(self) -> int:
        return self.inner.num_functions()

    def evaluate(self, coordinates, i):
        return self.inner.evaluate(coordinates, i)

    def gradient(self, coordinates, i):
        self.visited.append(i)
        return self.inner.gradient(coordinates, i)


def test_config_defaults_and_builders():
    config = SGDConfig()
    assert config.step_size == 0.01
    assert config.max_iterations == 100000
    assert config.tolerance == 1e-5
    assert config.shuffle is True

    tuned = config.with_step_size(0.5).with_max_iterations(0).with_tolerance(1e-9).with_shuffle(False)
    assert (tuned.step_size, tuned.max_iterations, tuned.tolerance, tuned.shuffle) == (0.5, 0, 1e-9, False)
    assert config.step_size == 0.01
    assert tuned.with_check_finite(True).check_finite


@pytest.mark.parametrize(
    "kwargs",
    [{"step_size": 0.0}, {"step_size": -1.0}, {"tolerance": 0.0}, {"max_iterations": -1}],
)
def test_config_rejects_invalid_values(kwargs):
    with pytest.raises(ConfigurationError):
        SGDConfig(**kwargs)


def test_zero_term_objective_raises_without_touching_iterate():
    problem = DecomposableProblem(fun=lambda x, i: 0.0, grad=lambda x, i: x, n_terms=0)
    x = np.array([1.0, 2.0])
    with pytest.raises(ConfigurationError):
        SGD().optimize(problem, x)
    assert np.array_equal(x, [1.0, 2.0])


def test_gradient_shape_mismatch_raises():
    problem = DecomposableProblem(
        fun=lambda x, i: float(np.sum(x**2)),
        grad=lambda x, i: np.zeros(3),
        n_terms=2,
    )
    with pytest.raises(ConfigurationError, match="gradient"):
        SGD().optimize(problem, np.ones(2))


def test_integer_iterate_rejected():
    with pytest.raises(ConfigurationError):
        SGD().optimize(mean_problem(np.array([1.0, 2.0])), np.array([1, 2]))


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)


def test_vanilla_sgd_reaches_mean():
    targets = np.array([1.0, 2.0, 6.0])
    x = np.array([0.0])
    optimizer = SGD(SGDConfig(step_size=0.05, tolerance=1e-10, shuffle=False))
    value = optimizer.optimize(mean_problem(targets), x)

    assert optimizer.last_result.status is Status.CONVERGED
    assert abs(x[0] - targets.mean()) < 0.3
    assert value == pytest.approx(full_objective(mean_problem(targets), x, 3))


def test_unshuffled_visits_terms_in_order():
    f = RecordingFunction(mean_problem(np.array([1.0, 2.0, 3.0])))
    SGD(SGDConfig(max_iterations=8, shuffle=False)).optimize(f, np.array([0.0]))
    assert f.visited == [0, 1, 2, 0, 1, 2, 0, 1]


def test_shuffled_epochs_are_permutations():
    n = 5
    f = RecordingFunction(mean_problem(np.arange(n, dtype=float)))
    SGD(SGDConfig(max_iterations=6 * n, shuffle=True), rng=3).optimize(f, np.array([0.0]))
    assert len(f.visited) == 6 * n
    epochs = [f.visited[k : k + n] for k in range(0, 6 * n, n)]
    for order in epochs:
        assert sorted(order) == list(range(n))
    assert any(order != list(range(n)) for order in epochs)


def test_iteration_limit_mid_epoch_returns_final_objective():
    targets = np.array([1.0, 2.0, 3.0])
    problem = mean_problem(targets)
    x = np.array([10.0])
    optimizer = SGD(SGDConfig(step_size=0.01, max_iterations=7, shuffle=False))
    value = optimizer.optimize(problem, x)

    result = optimizer.last_result
    assert result.status is Status.MAX_ITER
    assert result.nit == 7
    assert result.epochs == 2
    assert len(result.history) == 2
    assert value == pytest.approx(full_objective(problem, x, 3))


@pytest.mark.parametrize("max_iterations", [0, 1, 4, 10, 50, 1000])
def test_termination_only_at_epoch_boundaries(max_iterations):
    n = 3
    optimizer = SGD(
        SGDConfig(step_size=0.1, max_iterations=max_iterations, tolerance=1e-6, shuffle=True),
        update_policy=AdaGradUpdate(),
        rng=0,
    )
    optimizer.optimize(mean_problem(np.array([-1.0, 0.5, 4.0])), np.array([3.0]))
    result = optimizer.last_result
    assert result.nit % n == 0 or result.nit == max_iterations
    if result.status is Status.CONVERGED:
        assert result.nit % n == 0


def test_unbounded_iterations_run_until_converged():
    targets = np.array([0.5, 1.5])
    config = SGDConfig(step_size=0.001, max_iterations=0, tolerance=1e-12, shuffle=False)
    optimizer = SGD(config)
    optimizer.optimize(mean_problem(targets), np.array([50.0]))
    unbounded = optimizer.last_result
    assert unbounded.status is Status.CONVERGED
    assert unbounded.nit > 1000

    limited = SGD(config.with_max_iterations(unbounded.nit // 2))
    limited.optimize(mean_problem(targets), np.array([50.0]))
    assert limited.last_result.status is Status.MAX_ITER
    assert limited.last_result.nit == unbounded.nit // 2


def test_unshuffled_runs_are_deterministic():
    targets = np.array([1.0, -2.0, 0.5, 3.0])
    results = []
    for _ in range(2):
        x = np.array([5.0])
        optimizer = SGD(SGDConfig(step_size=0.3, shuffle=False), update_policy=AdaGradUpdate())
        value = optimizer.optimize(mean_problem(targets), x)
        results.append((x.copy(), value, optimizer.last_result.nit))
    assert np.array_equal(results[0][0], results[1][0])
    assert results[0][1] == results[1][1]
    assert results[0][2] == results[1][2]


def test_seeded_shuffle_is_reproducible():
    targets = np.linspace(-3.0, 3.0, 7)
    finals = []
    for _ in range(2):
        x = np.array([2.0])
        SGD(SGDConfig(step_size=0.2), update_policy=AdaGradUpdate(), rng=42).optimize(
            mean_problem(targets), x
        )
        finals.append(x.copy())
    assert np.array_equal(finals[0], finals[1])


def test_iterate_mutated_in_place_and_not_retained():
    x = np.array([4.0])
    optimizer = SGD(SGDConfig(step_size=0.1, shuffle=False))
    optimizer.optimize(mean_problem(np.array([1.0, 3.0])), x)
    assert x[0] != 4.0
    assert optimizer.last_result.x is not x
    assert np.array_equal(optimizer.last_result.x, x)


def test_callback_called_once_per_epoch():
    calls = []
    optimizer = SGD(
        SGDConfig(step_size=0.1, max_iterations=30, shuffle=False),
        callback=lambda epoch, value: calls.append((epoch, value)),
    )
    optimizer.optimize(mean_problem(np.array([1.0, 2.0, 3.0])), np.array([9.0]))
    assert [epoch for epoch, _ in calls] == list(range(1, optimizer.last_result.epochs + 1))
    assert [value for _, value in calls] == optimizer.last_result.history


def diverging_problem() -> DecomposableProblem:
    return DecomposableProblem(
        fun=lambda x, i: math.sqrt(x[0]) if x[0] >= 0 else float("nan"),
        grad=lambda x, i: np.array([1.0]),
        n_terms=1,
    )


def test_non_finite_objective_stops_with_diverged_status():
    x = np.array([1.0])
    optimizer = SGD(SGDConfig(step_size=0.6, shuffle=False))
    value = optimizer.optimize(diverging_problem(), x)
    assert math.isnan(value)
    assert optimizer.last_result.status is Status.DIVERGED
    assert not optimizer.last_result.success
    assert optimizer.last_result.nit == 2


def test_check_finite_raises_on_divergence():
    optimizer = SGD(SGDConfig(step_size=0.6, shuffle=False, check_finite=True))
    with pytest.raises(NumericalDivergenceError):
        optimizer.optimize(diverging_problem(), np.array([1.0]))


def test_debug_mode_raises_on_divergence():
    optimizer = SGD(SGDConfig(step_size=0.6, shuffle=False))
    with debug_context(True):
        with pytest.raises(NumericalDivergenceError):
            optimizer.optimize(diverging_problem(), np.array([1.0]))


def test_reconfigure_between_runs():
    optimizer = SGD()
    optimizer.reconfigure(step_size=0.2, shuffle=False)
    assert optimizer.step_size == 0.2
    assert optimizer.shuffle is False
    assert optimizer.max_iterations == 100000
    assert optimizer.tolerance == 1e-5
    with pytest.raises(ConfigurationError):
        optimizer.reconfigure(tolerance=-1.0)


def test_accumulator_carries_over_between_runs():
    policy = AdaGradUpdate(epsilon=1e-8)
    optimizer = SGD(SGDConfig(step_size=0.5, max_iterations=6, shuffle=False), update_policy=policy)
    problem = mean_problem(np.array([1.0, 2.0]))

    optimizer.optimize(problem, np.array([5.0]))
    after_first = policy.squared_gradient.copy()
    optimizer.optimize(problem, np.array([5.0]))
    assert np.all(policy.squared_gradient > after_first)

    policy.reset()
    optimizer.optimize(problem, np.array([5.0]))
    assert np.allclose(policy.squared_gradient, after_first)
