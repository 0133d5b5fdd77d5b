"""Transition easing backed by easing-functions."""

from __future__ import annotations

from easing_functions import QuadEaseInOut

from formata.core.utils.math import clamp

_EASE_IN_OUT = QuadEaseInOut(start=0.0, end=1.0, duration=1.0)


def ease_in_out(progress: float) -> float:
    """Symmetric quadratic ease-in-out.

    ``2p²`` below the midpoint and ``-1 + (4 - 2p)p`` above it, so motion starts
    and ends with zero velocity. Input is clamped to [0, 1].

    Args:
        progress: Linear transition progress.

    Returns:
        Eased progress in [0, 1].

    Example:
        >>> ease_in_out(0.5)
        0.5
    """
    return float(_EASE_IN_OUT.ease(clamp(progress, 0.0, 1.0)))
