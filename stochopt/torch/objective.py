"""Decomposable objectives whose gradients come from PyTorch autograd."""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np
import torch

TermLoss = Callable[[torch.Tensor, int], torch.Tensor]
SampleLoss = Callable[[torch.Tensor, torch.Tensor], torch.Tensor]


class TorchDecomposableFunction:
    """
    Adapt a per-term PyTorch loss to the decomposable function interface.

    ``term_loss(params, i)`` must return a scalar (0-D) tensor. Iterates stay
    NumPy arrays on the optimizer side; they are copied into tensors of
    ``dtype`` for every call and gradients are returned as float64 arrays of
    the iterate's shape.

    Args:
        term_loss: Callable ``(params, i) -> scalar tensor``.
        n_terms: Number of additive terms.
        dtype: Floating dtype used for the parameter tensor.

    Example:
        >>> import numpy as np, torch
        >>> targets = torch.tensor([1.0, 3.0], dtype=torch.float64)
        >>> f = TorchDecomposableFunction(lambda p, i: (p[0] - targets[i]) ** 2, 2)
        >>> f.gradient(np.array([0.0]), 1)
        array([-6.])
    """

    def __init__(self, term_loss: TermLoss, n_terms: int, dtype: torch.dtype = torch.float64) -> None:
        if n_terms < 0:
            raise ValueError("n_terms must be non-negative")
        self.term_loss = term_loss
        self.n_terms = int(n_terms)
        self.dtype = dtype

    @classmethod
    def from_samples(
        cls,
        sample_loss: SampleLoss,
        samples: torch.Tensor | Sequence[torch.Tensor],
        dtype: torch.dtype = torch.float64,
    ) -> "TorchDecomposableFunction":
        """One term per sample: term ``i`` is ``sample_loss(params, samples[i])``."""
        n_terms = len(samples)
        return cls(lambda params, i: sample_loss(params, samples[i]), n_terms, dtype=dtype)

    def num_functions(self) -> int:
        return self.n_terms

    def _as_tensor(self, coordinates: np.ndarray) -> torch.Tensor:
        return torch.as_tensor(np.asarray(coordinates), dtype=self.dtype)

    def _check_scalar(self, value: torch.Tensor) -> None:
        if value.ndim != 0:
            raise ValueError(
                f"term_loss must return a scalar tensor (0D), got shape {tuple(value.shape)}"
            )

    def evaluate(self, coordinates: np.ndarray, i: int) -> float:
        with torch.no_grad():
            value = self.term_loss(self._as_tensor(coordinates), i)
        self._check_scalar(value)
        return float(value.item())

    def gradient(self, coordinates: np.ndarray, i: int) -> np.ndarray:
        params = self._as_tensor(coordinates).clone().detach().requires_grad_(True)
        value = self.term_loss(params, i)
        self._check_scalar(value)
        value.backward()

        grad = params.grad
        if grad is None:
            raise RuntimeError("Autograd did not produce gradients for params.")
        return grad.detach().cpu().numpy().astype(float).reshape(np.shape(coordinates))


__all__ = ["TorchDecomposableFunction", "TermLoss", "SampleLoss"]
