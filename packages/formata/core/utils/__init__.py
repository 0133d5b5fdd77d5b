"""Shared utilities for Formata."""

from formata.core.utils.ids import new_id
from formata.core.utils.json import read_json, write_json
from formata.core.utils.math import clamp, lerp, spread_steps

__all__ = [
    "clamp",
    "lerp",
    "new_id",
    "read_json",
    "spread_steps",
    "write_json",
]
