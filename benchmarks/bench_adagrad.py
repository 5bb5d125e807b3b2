"""Benchmark AdaGrad updates and full optimization runs."""

import time
from typing import Dict

import numpy as np

from stochopt import AdaGrad, AdaGradUpdate, LogisticRegressionFunction


def benchmark_update(dim: int, n_updates: int = 100000) -> Dict[str, float]:
    """Benchmark the AdaGrad step rule alone.

    Args:
        dim: Number of coordinates in the iterate.
        n_updates: Number of updates to time.

    Returns:
        Dictionary with timing results.
    """
    rng = np.random.default_rng(0)
    policy = AdaGradUpdate(epsilon=1e-8)
    policy.initialize((dim,))
    iterate = rng.normal(size=dim)
    gradient = rng.normal(size=dim)

    # Warmup
    for _ in range(100):
        policy.update(iterate, 0.01, gradient)

    start = time.perf_counter()
    for _ in range(n_updates):
        policy.update(iterate, 0.01, gradient)
    total_time = time.perf_counter() - start

    return {
        "dim": dim,
        "n_updates": n_updates,
        "total_time_sec": total_time,
        "time_per_update_sec": total_time / n_updates,
    }


def benchmark_logistic_regression(n_points: int, dim: int = 3, epochs: int = 10) -> Dict[str, float]:
    """Benchmark a fixed number of AdaGrad epochs on a logistic regression loss."""
    rng = np.random.default_rng(0)
    predictors = rng.normal(size=(dim, n_points))
    responses = (predictors.sum(axis=0) > 0).astype(int)
    function = LogisticRegressionFunction(predictors, responses, lambda_=0.5)

    optimizer = AdaGrad(step_size=0.5, max_iterations=epochs * n_points, tolerance=1e-12, rng=0)
    iterate = function.initial_point()

    start = time.perf_counter()
    optimizer.optimize(function, iterate)
    total_time = time.perf_counter() - start

    return {
        "n_points": n_points,
        "iterations": optimizer.last_result.nit,
        "total_time_sec": total_time,
        "iterations_per_sec": optimizer.last_result.nit / total_time,
    }


if __name__ == "__main__":
    print("Benchmarking AdaGrad...")

    for dim in [3, 100, 10000]:
        results = benchmark_update(dim, n_updates=20000)
        print(f"AdaGrad update (dim={dim}):")
        print(f"  Time per update: {results['time_per_update_sec']*1e6:.2f} μs")

    results = benchmark_logistic_regression(n_points=1000)
    print("Logistic regression (1000 points, 10 epochs):")
    print(f"  Iterations per second: {results['iterations_per_sec']:.0f}")
