"""Models fitted with the stochastic optimizers."""

from .logistic_regression import LogisticRegression

__all__ = ["LogisticRegression"]
