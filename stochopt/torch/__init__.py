"""PyTorch integration for stochopt."""

from .objective import SampleLoss, TermLoss, TorchDecomposableFunction

__all__ = ["TorchDecomposableFunction", "TermLoss", "SampleLoss"]
