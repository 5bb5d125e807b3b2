"""Small three-term objective with a known minimum at the origin."""

from __future__ import annotations

import math

import numpy as np


class SGDTestFunction:
    """
    Decomposable test objective over three coordinates.

    The terms are

        f_0(x) = -exp(-|x_0|)
        f_1(x) = x_1 ** 2
        f_2(x) = x_2 ** 4 + 3 * x_2 ** 2

    each touching a single coordinate, so the sum is minimized at the origin
    with value -1. The first term has a kink at zero and a gradient that
    vanishes far from it, which makes it a useful check of adaptive step sizes.
    """

    def num_functions(self) -> int:
        return 3

    def initial_point(self) -> np.ndarray:
        return np.array([6.0, -45.6, 6.2])

    def evaluate(self, coordinates: np.ndarray, i: int) -> float:
        if i == 0:
            return -math.exp(-abs(coordinates[0]))
        if i == 1:
            return float(coordinates[1] ** 2)
        if i == 2:
            return float(coordinates[2] ** 4 + 3 * coordinates[2] ** 2)
        raise IndexError(f"term index {i} out of range for 3 terms")

    def gradient(self, coordinates: np.ndarray, i: int) -> np.ndarray:
        grad = np.zeros_like(coordinates, dtype=float)
        if i == 0:
            x = coordinates[0]
            grad[0] = math.exp(-x) if x >= 0 else -math.exp(x)
        elif i == 1:
            grad[1] = 2 * coordinates[1]
        elif i == 2:
            grad[2] = 4 * coordinates[2] ** 3 + 6 * coordinates[2]
        else:
            raise IndexError(f"term index {i} out of range for 3 terms")
        return grad


__all__ = ["SGDTestFunction"]
