"""Preset formations and coordinate sources."""

from formata.core.presets.geometry import (
    PRESETS,
    STAGE_ASPECT_RATIO,
    PresetNotFoundError,
    generate_preset,
    get_preset,
    list_presets,
    normalize_key,
    resolve_preset_name,
)
from formata.core.presets.sources import (
    CoordinateSource,
    PresetCoordinateSource,
    ScatterCoordinateSource,
)

__all__ = [
    "PRESETS",
    "STAGE_ASPECT_RATIO",
    "CoordinateSource",
    "PresetCoordinateSource",
    "PresetNotFoundError",
    "ScatterCoordinateSource",
    "generate_preset",
    "get_preset",
    "list_presets",
    "normalize_key",
    "resolve_preset_name",
]
