"""Finite-difference helpers for checking hand-written term gradients.

These utilities avoid any dependency on SciPy and provide deterministic,
pure NumPy implementations suitable for small parameter vectors.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from .core import Array, DecomposableFunction

Objective = Callable[[Array], float]


def approx_grad(
    fun: Objective, x: Array, eps: float = 1e-6, return_evals: bool = False
) -> Array | tuple[Array, int]:
    """Compute a central-difference gradient approximation.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated. May have any shape; the
        gradient has the same shape.
    eps:
        Perturbation size for finite differences.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.asarray(x, dtype=float).copy()
    grad = np.zeros_like(x, dtype=float)
    evals = 0
    for idx in np.ndindex(x.shape):
        ei = np.zeros_like(x)
        ei[idx] = eps
        fx_plus = fun(x + ei)
        fx_minus = fun(x - ei)
        evals += 2
        grad[idx] = (fx_plus - fx_minus) / (2.0 * eps)
    if return_evals:
        return grad, evals
    return grad


def check_term_gradient(
    function: DecomposableFunction, x: Array, i: int, eps: float = 1e-6
) -> float:
    """Largest absolute difference between term ``i``'s gradient and finite differences."""
    x = np.asarray(x, dtype=float)
    numeric = approx_grad(lambda point: function.evaluate(point, i), x, eps=eps)
    analytic = np.asarray(function.gradient(x.copy(), i), dtype=float)
    if analytic.shape != x.shape:
        raise ValueError(f"gradient has shape {analytic.shape}, expected {x.shape}")
    return float(np.max(np.abs(analytic - numeric))) if x.size else 0.0


__all__ = ["Objective", "approx_grad", "check_term_gradient"]
