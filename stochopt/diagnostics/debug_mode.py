"""Debug mode management for stochopt.

When debug mode is on, every optimizer treats a NaN or infinite objective at an
epoch boundary as an error (NumericalDivergenceError) rather than stopping with
``Status.DIVERGED``. The initial state comes from the STOCHOPT_DEBUG
environment variable.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator, Optional

_DEBUG_ENV_VAR = "STOCHOPT_DEBUG"
_TRUTHY = ("1", "true", "yes", "on")


def _flag_from_env(value: Optional[str]) -> bool:
    return (value or "0").strip().lower() in _TRUTHY


_debug_enabled: bool = _flag_from_env(os.getenv(_DEBUG_ENV_VAR))


def is_debug_enabled() -> bool:
    """Return whether divergence checking is forced on for every optimizer."""
    return _debug_enabled


def set_debug_enabled(enabled: bool) -> None:
    """Globally enable or disable stochopt debug mode."""
    global _debug_enabled
    _debug_enabled = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Temporarily set debug mode, restoring the previous value on exit.

    Example
    -------
    >>> with debug_context(True):
    ...     optimizer.optimize(function, iterate)  # raises on divergence
    """
    previous = is_debug_enabled()
    set_debug_enabled(enabled)
    try:
        yield
    finally:
        set_debug_enabled(previous)
