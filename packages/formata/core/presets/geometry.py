"""Preset formation geometry.

Each preset is a pure function ``(count, scale) -> list[Position]`` returning
exactly ``count`` positions centred on the stage (50, 50). Vertical extents
of the closed shapes are stretched by the stage aspect ratio so they look
regular on a 16:9 stage. Coordinates are not clamped here; the store clamps
when a preset is applied.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import math

import numpy as np

from formata.core.models.formation import Position
from formata.core.utils.math import spread_steps

logger = logging.getLogger(__name__)

STAGE_ASPECT_RATIO = 16 / 9
STAGE_CENTER = 50.0

PresetFn = Callable[[int, float], list[Position]]


class PresetNotFoundError(KeyError):
    """Raised when a preset is not found in the registry."""

    pass


def normalize_key(s: str) -> str:
    """Normalize a preset name to a stable lookup key.

    Args:
        s: Preset display name or user-typed alias.

    Returns:
        Normalized key (lowercase, alphanumeric/underscore only).
    """
    key = "".join(ch.lower() if ch.isalnum() else "_" for ch in s).strip("_")
    while "__" in key:
        key = key.replace("__", "_")
    return key


def _to_positions(xs: np.ndarray, ys: np.ndarray) -> list[Position]:
    return [Position(x=float(x), y=float(y)) for x, y in zip(xs, ys, strict=True)]


# ----------------------------------------------------------------------
# Lines
# ----------------------------------------------------------------------


def horizontal_line(count: int, scale: float = 1.0) -> list[Position]:
    width = 60 * scale
    xs = STAGE_CENTER - width / 2 + spread_steps(count, width)
    return _to_positions(xs, np.full(count, STAGE_CENTER))


def vertical_line(count: int, scale: float = 1.0) -> list[Position]:
    height = 60 * scale
    ys = STAGE_CENTER - height / 2 + spread_steps(count, height)
    return _to_positions(np.full(count, STAGE_CENTER), ys)


def diagonal(count: int, scale: float = 1.0) -> list[Position]:
    """Rising diagonal: bottom-left to top-right."""
    spread = 40 * scale
    height = 60 * scale
    xs = STAGE_CENTER - spread / 2 + spread_steps(count, spread)
    ys = STAGE_CENTER + height / 2 - spread_steps(count, height)
    return _to_positions(xs, ys)


# ----------------------------------------------------------------------
# Outlines
# ----------------------------------------------------------------------


def circle_outline(count: int, scale: float = 1.0) -> list[Position]:
    """Evenly spaced around a circle, starting at the top."""
    r = 30 * scale
    angles = np.arange(count) / max(count, 1) * 2 * np.pi - np.pi / 2
    xs = STAGE_CENTER + r * np.cos(angles)
    ys = STAGE_CENTER + r * np.sin(angles) * STAGE_ASPECT_RATIO
    return _to_positions(xs, ys)


def square_outline(count: int, scale: float = 1.0) -> list[Position]:
    """Perimeter walk: top, right, bottom, left."""
    r = 30 * scale
    ry = r * STAGE_ASPECT_RATIO
    walk = np.arange(count) / max(count, 1) * 4
    sections = np.floor(walk).astype(int)
    progress = walk % 1

    xs = np.select(
        [sections == 0, sections == 1, sections == 2],
        [STAGE_CENTER - r + 2 * r * progress, np.full(count, STAGE_CENTER + r),
         STAGE_CENTER + r - 2 * r * progress],
        default=STAGE_CENTER - r,
    )
    ys = np.select(
        [sections == 0, sections == 1, sections == 2],
        [np.full(count, STAGE_CENTER - ry), STAGE_CENTER - ry + 2 * ry * progress,
         np.full(count, STAGE_CENTER + ry)],
        default=STAGE_CENTER + ry - 2 * ry * progress,
    )
    return _to_positions(xs, ys)


def triangle_outline(count: int, scale: float = 1.0) -> list[Position]:
    """Walk the three edges: top to bottom-right, bottom edge, back to top."""
    r = 30 * scale
    ry = r * STAGE_ASPECT_RATIO
    vertices = np.array(
        [
            [STAGE_CENTER, STAGE_CENTER - ry],
            [STAGE_CENTER + r, STAGE_CENTER + ry],
            [STAGE_CENTER - r, STAGE_CENTER + ry],
        ]
    )
    third = 0.333

    progress = np.arange(count) / max(count, 1)
    edges = np.minimum((progress // third).astype(int), 2)
    local = (progress - edges * third) / third

    starts = vertices[edges]
    ends = vertices[(edges + 1) % 3]
    points = starts + (ends - starts) * local[:, None]
    return _to_positions(points[:, 0], points[:, 1])


# ----------------------------------------------------------------------
# Fills
# ----------------------------------------------------------------------


def circle_fill(count: int, scale: float = 1.0) -> list[Position]:
    """Sunflower spiral: radius grows with sqrt(i/count)."""
    max_r = 30 * scale
    i = np.arange(count)
    radii = np.sqrt(i / max(count, 1)) * max_r
    theta = np.pi * (3 - math.sqrt(5)) * i * 20
    xs = STAGE_CENTER + radii * np.cos(theta)
    ys = STAGE_CENTER + radii * np.sin(theta) * STAGE_ASPECT_RATIO
    return _to_positions(xs, ys)


def square_fill(count: int, scale: float = 1.0) -> list[Position]:
    """Row-major grid with ceil(sqrt(count)) columns."""
    spread = 60 * scale
    cols = max(1, math.ceil(math.sqrt(count)))
    rows = max(1, math.ceil(count / cols))
    i = np.arange(count)
    xs = STAGE_CENTER - spread / 2 + spread_steps(cols, spread)[i % cols]
    ys = STAGE_CENTER - spread / 2 + spread_steps(rows, spread)[i // cols]
    return _to_positions(xs, ys)


def triangle_fill(count: int, scale: float = 1.0) -> list[Position]:
    """Bowling-pin rows: 1, 2, 3, ... performers per row, vertically centred."""
    rows = 1
    while rows * (rows + 1) // 2 < count:
        rows += 1

    spread_x = 10 * scale
    spread_y = 15 * scale
    y_base = STAGE_CENTER - (rows - 1) * spread_y / 2

    row_idx = np.repeat(np.arange(rows), np.arange(1, rows + 1))[:count]
    row_starts = row_idx * (row_idx + 1) // 2
    in_row = np.arange(count) - row_starts

    xs = STAGE_CENTER - row_idx * spread_x / 2 + in_row * spread_x
    ys = y_base + row_idx * spread_y
    return _to_positions(xs, ys)


# ----------------------------------------------------------------------
# Registry
# ----------------------------------------------------------------------

PRESETS: dict[str, PresetFn] = {
    "Horizontal Line": horizontal_line,
    "Vertical Line": vertical_line,
    "Diagonal /": diagonal,
    "Circle (Outline)": circle_outline,
    "Square (Outline)": square_outline,
    "Triangle (Outline)": triangle_outline,
    "Circle (Fill)": circle_fill,
    "Square (Fill)": square_fill,
    "Triangle (Fill)": triangle_fill,
}

_BY_KEY: dict[str, str] = {normalize_key(name): name for name in PRESETS}


def list_presets() -> list[str]:
    """Preset display names in registry order."""
    return list(PRESETS)


def resolve_preset_name(name: str) -> str:
    """Map a display name or alias (any case/punctuation) to its display name.

    Raises:
        PresetNotFoundError: If no preset matches.
    """
    key = normalize_key(name)
    if key not in _BY_KEY:
        raise PresetNotFoundError(f"Unknown preset: {name!r}")
    return _BY_KEY[key]


def get_preset(name: str) -> PresetFn:
    """Look up a preset function by display name or normalized key.

    Raises:
        PresetNotFoundError: If no preset matches.
    """
    return PRESETS[resolve_preset_name(name)]


def generate_preset(name: str, count: int, scale: float = 1.0) -> list[Position]:
    """Generate ``count`` positions for a named preset.

    Args:
        name: Preset display name or alias.
        count: Number of positions (<= 0 yields an empty list).
        scale: Size multiplier (1.0 is the default footprint).

    Returns:
        Exactly ``max(count, 0)`` positions.

    Raises:
        PresetNotFoundError: If no preset matches.
    """
    preset = get_preset(name)
    if count <= 0:
        return []
    positions = preset(count, scale)
    logger.debug(f"Generated {len(positions)} positions for preset {name!r} at scale {scale}")
    return positions
