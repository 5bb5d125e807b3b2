"""Finite-value checks for iterates, gradients and objective values."""

from __future__ import annotations

import numpy as np

from ..optimize.core import NumericalDivergenceError


def is_finite(array: np.ndarray) -> bool:
    """Return True if every entry of ``array`` is neither NaN nor infinite."""
    return bool(np.all(np.isfinite(np.asarray(array))))


def assert_finite(array: np.ndarray, name: str = "array") -> None:
    """
    Raise if ``array`` contains NaN or infinite values.

    Parameters
    ----------
    array:
        Scalar or array to check.
    name:
        Label used in the error message.

    Raises
    ------
    NumericalDivergenceError
        If any entry is NaN or infinite.
    """
    values = np.asarray(array)
    if np.all(np.isfinite(values)):
        return
    n_bad = int(values.size - np.count_nonzero(np.isfinite(values)))
    raise NumericalDivergenceError(
        f"{name} contains {n_bad} non-finite value(s); "
        "consider a smaller step size or rescaling the objective"
    )
