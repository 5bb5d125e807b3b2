"""
Example: AdaGrad in stochopt

This example fits the three-term SGD test function and a logistic regression
classifier on two Gaussian clusters with the AdaGrad optimizer, printing the
progress of each run.
"""

import numpy as np

from stochopt import AdaGrad, LogisticRegression, SGDTestFunction, adagrad


def example_test_function():
    """Example: minimize a decomposable function with a known minimum."""
    print("=" * 60)
    print("Example 1: SGD test function")
    print("=" * 60)

    f = SGDTestFunction()
    result = adagrad(
        f,
        f.initial_point(),
        step_size=0.99,
        epsilon=1.0,
        max_iterations=30000,
        tolerance=1e-9,
        rng=0,
    )
    print(f"Status: {result.status.value}")
    print(f"Final point: {np.round(result.x, 4)}")
    print(f"Objective: {result.fun:.6f}")
    print(f"Iterations: {result.nit} ({result.epochs} epochs)")
    print()


def gaussian_clusters(rng, n_per_class=500):
    first = rng.normal(loc=1.0, scale=1.0, size=(3, n_per_class))
    second = rng.normal(loc=9.0, scale=1.0, size=(3, n_per_class))
    labels = np.concatenate([np.zeros(n_per_class, dtype=int), np.ones(n_per_class, dtype=int)])
    return np.hstack([first, second]), labels


def example_logistic_regression():
    """Example: train a classifier one point at a time."""
    print("=" * 60)
    print("Example 2: Logistic regression on two Gaussian clusters")
    print("=" * 60)

    rng = np.random.default_rng(0)
    train_data, train_labels = gaussian_clusters(rng)
    order = rng.permutation(train_data.shape[1])
    train_data, train_labels = train_data[:, order], train_labels[order]
    test_data, test_labels = gaussian_clusters(rng)

    optimizer = AdaGrad(step_size=0.99, epsilon=1e-8, max_iterations=20000, tolerance=1e-9, rng=0)
    model = LogisticRegression(train_data, train_labels, optimizer, lambda_=0.5)

    print(f"Parameters: {np.round(model.parameters, 3)}")
    print(f"Training accuracy: {model.compute_accuracy(train_data, train_labels):.2f}%")
    print(f"Test accuracy: {model.compute_accuracy(test_data, test_labels):.2f}%")
    print()


if __name__ == "__main__":
    example_test_function()
    example_logistic_regression()
