"""Diagnostics and debugging utilities for stochopt."""

from .core import assert_finite, is_finite
from .debug_mode import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

__all__ = [
    "is_finite",
    "assert_finite",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
]
