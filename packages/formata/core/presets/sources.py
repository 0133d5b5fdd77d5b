"""Coordinate sources: pluggable providers of formation coordinates.

A source is untrusted. It may return fewer positions than requested, or
positions off stage; the store truncates and clamps through apply_preset.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import numpy as np

from formata.core.models.formation import Position
from formata.core.presets.geometry import generate_preset, resolve_preset_name

logger = logging.getLogger(__name__)


@runtime_checkable
class CoordinateSource(Protocol):
    """Anything that can propose coordinates for ``count`` performers."""

    def generate(self, count: int) -> list[Position]:
        """Return at most ``count`` positions."""
        ...


class PresetCoordinateSource:
    """Adapts a named geometry preset to the CoordinateSource interface."""

    def __init__(self, name: str, scale: float = 1.0) -> None:
        self.name = resolve_preset_name(name)
        self.scale = scale

    def generate(self, count: int) -> list[Position]:
        return generate_preset(self.name, count, self.scale)


class ScatterCoordinateSource:
    """Uniform random scatter inside a central box.

    Used as the fallback source when nothing smarter is available.

    Example:
        >>> source = ScatterCoordinateSource(seed=7)
        >>> len(source.generate(5))
        5
    """

    def __init__(self, low: float = 20.0, high: float = 80.0, seed: int | None = None) -> None:
        if low > high:
            raise ValueError(f"low ({low}) must be <= high ({high})")
        self.low = low
        self.high = high
        self._rng = np.random.default_rng(seed)

    def generate(self, count: int) -> list[Position]:
        if count <= 0:
            return []
        points = self._rng.uniform(self.low, self.high, size=(count, 2))
        logger.debug(f"Scattered {count} positions in [{self.low}, {self.high}]")
        return [Position(x=float(x), y=float(y)) for x, y in points]
