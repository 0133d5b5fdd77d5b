"""Performer vocabulary enums."""

from enum import Enum


class PerformerShape(str, Enum):
    """Marker shape used to draw a performer on stage.

    Presentation only; no core algorithm depends on it.

    Attributes:
        CIRCLE: Round marker (default).
        SQUARE: Square marker.
        TRIANGLE: Triangular marker.
    """

    CIRCLE = "circle"
    SQUARE = "square"
    TRIANGLE = "triangle"


SHAPE_GLYPHS: dict[PerformerShape, str] = {
    PerformerShape.CIRCLE: "●",
    PerformerShape.SQUARE: "■",
    PerformerShape.TRIANGLE: "▲",
}
