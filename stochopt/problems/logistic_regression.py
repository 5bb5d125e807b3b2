"""Per-point logistic regression loss as a decomposable objective."""

from __future__ import annotations

import numpy as np


def sigmoid(z: np.ndarray | float) -> np.ndarray | float:
    """Logistic function evaluated without overflow for large ``|z|``."""
    out = np.exp(-np.logaddexp(0.0, -np.asarray(z, dtype=float)))
    if out.ndim == 0:
        return float(out)
    return out


class LogisticRegressionFunction:
    """
    Negative log-likelihood of an L2-regularized logistic regression model.

    Predictors are stored one point per column, shape ``(d, n)``; responses are
    0/1 labels of length ``n``. Parameters have shape ``(d + 1,)`` with the
    intercept first. Term ``i`` is

        reg - log(sigmoid(z_i))        if y_i == 1
        reg - log(1 - sigmoid(z_i))    if y_i == 0

    with ``z_i = w_0 + w[1:] . x_i`` and ``reg = lambda_ * ||w[1:]||^2 / (2 n)``,
    so the regularization is spread evenly over the terms.

    Args:
        predictors: Array of shape (d, n).
        responses: Labels of length n, each 0 or 1.
        lambda_: L2 regularization strength. Must be non-negative.
    """

    def __init__(
        self,
        predictors: np.ndarray,
        responses: np.ndarray,
        lambda_: float = 0.0,
    ) -> None:
        predictors = np.asarray(predictors, dtype=float)
        responses = np.asarray(responses)
        if predictors.ndim != 2:
            raise ValueError(f"predictors must be 2D (d, n), got shape {predictors.shape}")
        if responses.shape != (predictors.shape[1],):
            raise ValueError(
                f"responses must have shape ({predictors.shape[1]},), got {responses.shape}"
            )
        if not np.all((responses == 0) | (responses == 1)):
            raise ValueError("responses must be 0/1 labels")
        if lambda_ < 0.0:
            raise ValueError("lambda_ must be non-negative")
        self.predictors = predictors
        self.responses = responses.astype(float)
        self.lambda_ = float(lambda_)

    @property
    def dimension(self) -> int:
        return self.predictors.shape[0]

    def num_functions(self) -> int:
        return self.predictors.shape[1]

    def initial_point(self) -> np.ndarray:
        return np.zeros(self.dimension + 1)

    def _check_parameters(self, parameters: np.ndarray) -> None:
        if parameters.shape != (self.dimension + 1,):
            raise ValueError(
                f"parameters must have shape ({self.dimension + 1},), got {parameters.shape}"
            )

    def evaluate(self, parameters: np.ndarray, i: int) -> float:
        self._check_parameters(parameters)
        n = self.num_functions()
        weights = parameters[1:]
        reg = self.lambda_ * float(weights @ weights) / (2.0 * n)
        z = parameters[0] + float(weights @ self.predictors[:, i])
        # -log(sigmoid(z)) = log(1 + exp(-z)); -log(1 - sigmoid(z)) = log(1 + exp(z))
        if self.responses[i] == 1.0:
            return reg + float(np.logaddexp(0.0, -z))
        return reg + float(np.logaddexp(0.0, z))

    def evaluate_all(self, parameters: np.ndarray) -> float:
        """Objective summed over every point, vectorized."""
        self._check_parameters(parameters)
        weights = parameters[1:]
        z = parameters[0] + weights @ self.predictors
        losses = np.where(self.responses == 1.0, np.logaddexp(0.0, -z), np.logaddexp(0.0, z))
        return float(np.sum(losses) + 0.5 * self.lambda_ * float(weights @ weights))

    def gradient(self, parameters: np.ndarray, i: int) -> np.ndarray:
        self._check_parameters(parameters)
        n = self.num_functions()
        weights = parameters[1:]
        point = self.predictors[:, i]
        residual = self.responses[i] - sigmoid(parameters[0] + float(weights @ point))

        grad = np.empty_like(parameters, dtype=float)
        grad[0] = -residual
        grad[1:] = -residual * point + self.lambda_ * weights / n
        return grad


__all__ = ["sigmoid", "LogisticRegressionFunction"]
