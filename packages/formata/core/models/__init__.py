"""Formation data models."""

from formata.core.models.enums import SHAPE_GLYPHS, PerformerShape
from formata.core.models.formation import ClipboardItem, Frame, Performer, Position

__all__ = [
    "SHAPE_GLYPHS",
    "ClipboardItem",
    "Frame",
    "Performer",
    "PerformerShape",
    "Position",
]
