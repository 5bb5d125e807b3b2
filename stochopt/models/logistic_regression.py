"""Binary logistic regression classifier trained with a stochastic optimizer."""

from __future__ import annotations

from typing import Optional, Protocol

import numpy as np

from ..logging import get_logger
from ..optimize import AdaGrad, DecomposableFunction
from ..problems.logistic_regression import LogisticRegressionFunction, sigmoid

logger = get_logger(__name__)


class Optimizer(Protocol):
    """Anything that minimizes a decomposable function in place."""

    def optimize(self, function: DecomposableFunction, iterate: np.ndarray) -> float:
        ...


class LogisticRegression:
    """
    L2-regularized logistic regression for 0/1 labels.

    Data follows the column-major convention of
    :class:`~stochopt.problems.LogisticRegressionFunction`: predictors have
    shape ``(d, n)``, one point per column. The fitted ``parameters_`` hold the
    intercept first, followed by one weight per dimension.

    Args:
        predictors: Optional training points, shape (d, n). If given together
            with ``responses`` the model is fitted immediately.
        responses: Optional 0/1 labels of length n.
        optimizer: Optimizer used by :meth:`fit`. Defaults to ``AdaGrad()``.
        lambda_: L2 regularization strength.
        decision_boundary: Probability threshold at or above which a point is
            labeled 1.
    """

    def __init__(
        self,
        predictors: Optional[np.ndarray] = None,
        responses: Optional[np.ndarray] = None,
        optimizer: Optional[Optimizer] = None,
        lambda_: float = 0.0,
        decision_boundary: float = 0.5,
    ) -> None:
        if not 0.0 <= decision_boundary <= 1.0:
            raise ValueError("decision_boundary must lie in [0, 1]")
        self.optimizer = optimizer if optimizer is not None else AdaGrad()
        self.lambda_ = float(lambda_)
        self.decision_boundary = float(decision_boundary)
        self.parameters_: Optional[np.ndarray] = None
        self.objective_: Optional[float] = None

        if (predictors is None) != (responses is None):
            raise ValueError("predictors and responses must be given together")
        if predictors is not None:
            self.fit(predictors, responses)

    def fit(self, predictors: np.ndarray, responses: np.ndarray) -> "LogisticRegression":
        """Train from zero-initialized parameters and return ``self``."""
        function = LogisticRegressionFunction(predictors, responses, self.lambda_)
        parameters = function.initial_point()
        self.objective_ = self.optimizer.optimize(function, parameters)
        self.parameters_ = parameters
        logger.info(
            "fitted logistic regression on %d points, objective %.6g",
            function.num_functions(),
            self.objective_,
        )
        return self

    @property
    def parameters(self) -> np.ndarray:
        if self.parameters_ is None:
            raise AttributeError(
                f"{self.__class__.__name__} instance is not fitted yet. "
                "Missing attributes: ['parameters_']"
            )
        return self.parameters_

    def predict_proba(self, predictors: np.ndarray) -> np.ndarray:
        """Probability of label 1 for every column of ``predictors``."""
        parameters = self.parameters
        predictors = np.asarray(predictors, dtype=float)
        if predictors.ndim != 2 or predictors.shape[0] != parameters.shape[0] - 1:
            raise ValueError(
                f"predictors must have shape ({parameters.shape[0] - 1}, n), "
                f"got {predictors.shape}"
            )
        return np.asarray(sigmoid(parameters[0] + parameters[1:] @ predictors))

    def predict(self, predictors: np.ndarray) -> np.ndarray:
        """Predicted 0/1 labels for every column of ``predictors``."""
        return (self.predict_proba(predictors) >= self.decision_boundary).astype(int)

    def compute_accuracy(self, predictors: np.ndarray, responses: np.ndarray) -> float:
        """Percentage of points whose predicted label matches ``responses``."""
        responses = np.asarray(responses)
        predictions = self.predict(predictors)
        if responses.shape != predictions.shape:
            raise ValueError(
                f"responses must have shape {predictions.shape}, got {responses.shape}"
            )
        return 100.0 * float(np.mean(predictions == responses))


__all__ = ["LogisticRegression"]
