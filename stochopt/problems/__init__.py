"""Decomposable objectives for exercising the stochastic optimizers."""

from .logistic_regression import LogisticRegressionFunction, sigmoid
from .sgd_test_function import SGDTestFunction

__all__ = ["SGDTestFunction", "LogisticRegressionFunction", "sigmoid"]
