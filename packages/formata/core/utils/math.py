"""Math utilities for stage coordinates and transitions."""

from __future__ import annotations

from typing import TypeVar

import numpy as np

Number = TypeVar("Number", int, float, np.number)


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Clamp value to range [min_val, max_val].

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def lerp(a: Number, b: Number, t: float) -> float:
    """Linear interpolation between a and b.

    Args:
        a: Start value
        b: End value
        t: Interpolation factor [0, 1]

    Returns:
        Interpolated value
    """
    return float(a) + (float(b) - float(a)) * t


def spread_steps(count: int, extent: float) -> np.ndarray:
    """Evenly spaced offsets covering ``extent`` for ``count`` items.

    A single item sits at offset 0 (the divisor never drops below 1).

    Args:
        count: Number of items
        extent: Total distance covered from first to last item

    Returns:
        Array of ``count`` offsets starting at 0.
    """
    step = extent / (count - 1 if count > 1 else 1)
    return np.arange(count, dtype=float) * step
