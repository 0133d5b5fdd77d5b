"""Formation data models: positions, performers, frames and clipboard items.

All models are immutable. Mutations in the store replace a stored model with
a structurally-cloned successor, so a frame's position map is never shared
with a transient computation buffer.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from formata.core.models.enums import SHAPE_GLYPHS, PerformerShape
from formata.core.utils.math import clamp

_WIRE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class Position(BaseModel):
    """Point on stage in percent of stage extent.

    Coordinates are conceptually in [0, 100]. Producers soft-clamp; the model
    does not enforce bounds.
    """

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def offset(self, dx: float, dy: float) -> Position:
        """Return a new position shifted by (dx, dy)."""
        return Position(x=self.x + dx, y=self.y + dy)

    def clamped(self, lo: float, hi: float) -> Position:
        """Return a new position with both axes clamped to [lo, hi]."""
        return Position(x=clamp(self.x, lo, hi), y=clamp(self.y, lo, hi))


class Performer(BaseModel):
    """A performer on the roster.

    Attributes:
        id: Opaque identifier, stable for the performer's lifetime.
        name: Display name (non-unique).
        color: Display color (hex string).
        label: One-character badge; derived from the name when empty.
        shape: Marker shape.
    """

    model_config = _WIRE_CONFIG

    id: str
    name: str
    color: str = "#EF4444"
    label: str = ""
    shape: PerformerShape = PerformerShape.CIRCLE

    @model_validator(mode="before")
    @classmethod
    def _derive_label(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("label") and data.get("name"):
            data = {**data, "label": str(data["name"])[0].upper()}
        return data

    @property
    def glyph(self) -> str:
        """Glyph for this performer's shape."""
        return SHAPE_GLYPHS[self.shape]


class Frame(BaseModel):
    """A named, time-anchored formation.

    The frame is held over the half-open interval [start_time, end_time).
    A performer missing from ``positions`` is off stage for the whole hold.
    """

    model_config = _WIRE_CONFIG

    id: str
    name: str
    start_time: float = Field(ge=0, description="Absolute start of the hold (ms)")
    duration: float = Field(ge=0, description="Hold length (ms)")
    positions: dict[str, Position] = Field(default_factory=dict)
    notes: str | None = None

    @property
    def end_time(self) -> float:
        """Exclusive end of the hold interval (ms)."""
        return self.start_time + self.duration

    def holds(self, time_ms: float) -> bool:
        """Return True if ``time_ms`` falls inside this frame's hold."""
        return self.start_time <= time_ms < self.end_time

    def with_positions(self, positions: Mapping[str, Position]) -> Frame:
        """Return a copy of this frame with a fresh position map."""
        return self.model_copy(update={"positions": dict(positions)})


class ClipboardItem(BaseModel):
    """Detached snapshot of one performer and its per-frame positions.

    ``positions`` maps frame id to the performer's position in that frame at
    copy time. Frames that did not contain the performer are absent.
    """

    model_config = ConfigDict(frozen=True)

    performer: Performer
    positions: dict[str, Position] = Field(default_factory=dict)
