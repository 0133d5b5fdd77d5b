"""Formation store: the canonical roster, frames and selection.

All mutation goes through this class. Each operation validates its own input
and treats unknown ids as no-ops, so an interactive caller can re-invoke
freely. Frames are immutable models; every change swaps in a new frame with
a fresh position map and invalidates the cached timeline order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import logging
from typing import Any

from formata.core.config.models import EditorConfig
from formata.core.errors import ValidationError
from formata.core.models.enums import PerformerShape
from formata.core.models.formation import ClipboardItem, Frame, Performer, Position
from formata.core.store.clipboard import paste_performers
from formata.core.timeline.evaluator import evaluate_timeline
from formata.core.timeline.gaps import TimelineGap, detect_gaps
from formata.core.timeline.index import Timeline
from formata.core.utils.ids import new_id

logger = logging.getLogger(__name__)

PositionUpdates = Mapping[str, Position] | Iterable[tuple[str, Position]]

_UPDATABLE_PERFORMER_FIELDS = frozenset({"name", "color", "label", "shape"})


class FormationStore:
    """Owns performers, frames and the performer selection.

    Example:
        >>> store = FormationStore()
        >>> frame = store.add_frame(0.0, {})
        >>> dancer = store.add_performer("Ana")
        >>> store.get_frame(frame.id).positions[dancer.id]
        Position(x=50.0, y=50.0)
    """

    def __init__(
        self,
        config: EditorConfig | None = None,
        *,
        performers: Iterable[Performer] = (),
        frames: Iterable[Frame] = (),
    ) -> None:
        """Initialize the store.

        Args:
            config: Editor defaults. Uses EditorConfig() when None.
            performers: Initial roster (e.g. from an imported snapshot).
            frames: Initial frames (e.g. from an imported snapshot).
        """
        self.config = config or EditorConfig()
        self._performers: dict[str, Performer] = {p.id: p for p in performers}
        self._frames: dict[str, Frame] = {f.id: f for f in frames}
        self._selection: list[str] = []
        self._timeline: Timeline | None = None
        self._color_cursor = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def performers(self) -> list[Performer]:
        """Roster in insertion order."""
        return list(self._performers.values())

    @property
    def frames(self) -> list[Frame]:
        """Frames in storage order (not time order; see timeline())."""
        return list(self._frames.values())

    @property
    def selection(self) -> list[str]:
        return list(self._selection)

    @property
    def default_position(self) -> Position:
        return Position(x=self.config.default_x, y=self.config.default_y)

    def get_performer(self, performer_id: str) -> Performer | None:
        return self._performers.get(performer_id)

    def get_frame(self, frame_id: str) -> Frame | None:
        return self._frames.get(frame_id)

    def timeline(self) -> Timeline:
        """Time-ordered view of the frames, rebuilt only after a frame mutation."""
        if self._timeline is None:
            self._timeline = Timeline(self._frames.values())
        return self._timeline

    def latest_frame(self) -> Frame | None:
        """Frame with the latest start time, or None when there are no frames."""
        return self.timeline().last

    def evaluate(self, time_ms: float) -> dict[str, Position]:
        """Positions of every on-stage performer at ``time_ms``."""
        return evaluate_timeline(self.timeline(), self._performers.values(), time_ms)

    def gaps(self) -> list[TimelineGap]:
        """Transitions between holds, in time order."""
        return detect_gaps(self.timeline())

    # ------------------------------------------------------------------
    # Performers
    # ------------------------------------------------------------------

    def add_performer(
        self,
        name: str,
        color: str | None = None,
        shape: PerformerShape | str = PerformerShape.CIRCLE,
    ) -> Performer:
        """Add a performer and place them at the default position in every frame.

        Args:
            name: Display name (must not be blank).
            color: Display color. Cycles through the palette when None.
            shape: Marker shape.

        Returns:
            The new performer.

        Raises:
            ValidationError: If the name is blank or the shape is unknown.
        """
        if not name or not name.strip():
            raise ValidationError("Performer name must not be empty")
        shape = self._coerce_shape(shape)

        if color is None:
            palette = self.config.palette
            color = palette[self._color_cursor % len(palette)]
            self._color_cursor += 1

        performer = Performer(id=new_id(), name=name, color=color, shape=shape)
        self._performers[performer.id] = performer

        default = self.default_position
        for frame in list(self._frames.values()):
            self._replace_frame(frame.with_positions({**frame.positions, performer.id: default}))

        logger.debug(f"Added performer {performer.id} ({name}) to {len(self._frames)} frames")
        return performer

    def remove_performer(self, performer_id: str) -> bool:
        """Remove a performer from the roster, the selection and every frame.

        Returns:
            True if the performer existed.
        """
        if performer_id not in self._performers:
            return False

        del self._performers[performer_id]
        self._selection = [pid for pid in self._selection if pid != performer_id]

        for frame in list(self._frames.values()):
            if performer_id in frame.positions:
                remaining = {k: v for k, v in frame.positions.items() if k != performer_id}
                self._replace_frame(frame.with_positions(remaining))

        logger.debug(f"Removed performer {performer_id}")
        return True

    def update_performer(self, performer_id: str, **updates: Any) -> Performer | None:
        """Merge attribute updates into a performer.

        Args:
            performer_id: Performer to update (unknown id is a no-op).
            **updates: Any of name, color, label, shape.

        Returns:
            The updated performer, or None if the id is unknown.

        Raises:
            ValidationError: If an unknown field or invalid shape is given.
        """
        unknown = set(updates) - _UPDATABLE_PERFORMER_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update performer fields: {sorted(unknown)}")

        performer = self._performers.get(performer_id)
        if performer is None:
            return None

        if "shape" in updates:
            updates["shape"] = self._coerce_shape(updates["shape"])

        updated = performer.model_copy(update=updates)
        self._performers[performer_id] = updated
        return updated

    def toggle_performer_in_frame(self, frame_id: str, performer_id: str) -> bool | None:
        """Toggle whether a performer is on stage in a frame.

        Removing models an exit. Adding looks back through earlier frames (most
        recent first) for the performer's last known position, falling back to
        the default position.

        Returns:
            True if the performer is now in the frame, False if removed,
            None if the frame is unknown.
        """
        frame = self._frames.get(frame_id)
        if frame is None:
            return None

        if performer_id in frame.positions:
            remaining = {k: v for k, v in frame.positions.items() if k != performer_id}
            self._replace_frame(frame.with_positions(remaining))
            logger.debug(f"Performer {performer_id} exits at frame {frame_id}")
            return False

        position = self.default_position
        for earlier in reversed(self.timeline().frames_before(frame.start_time)):
            if performer_id in earlier.positions:
                position = earlier.positions[performer_id]
                break

        self._replace_frame(frame.with_positions({**frame.positions, performer_id: position}))
        logger.debug(f"Performer {performer_id} enters at frame {frame_id}")
        return True

    def set_positions(self, frame_id: str, updates: PositionUpdates) -> Frame | None:
        """Overwrite performer positions in a frame.

        Args:
            frame_id: Frame to edit (unknown id is a no-op).
            updates: Mapping or (performer_id, position) pairs.

        Returns:
            The updated frame, or None if the id is unknown.
        """
        frame = self._frames.get(frame_id)
        if frame is None:
            return None

        pairs = updates.items() if isinstance(updates, Mapping) else updates
        positions = dict(frame.positions)
        for performer_id, position in pairs:
            positions[performer_id] = position

        return self._replace_frame(frame.with_positions(positions))

    def apply_preset(
        self,
        frame_id: str,
        coords: Sequence[Position],
        target_ids: Sequence[str] | None = None,
    ) -> list[str]:
        """Assign preset coordinates to performers in one frame.

        ``coords[i]`` goes to ``target_ids[i]`` for the shorter of the two
        lengths; each coordinate is clamped to the preset bounds on both axes.
        With no explicit targets, the performers currently present in the
        frame are targeted, in roster order.

        Args:
            frame_id: Frame to edit (unknown id is a no-op).
            coords: Coordinates from a preset or any other coordinate source.
            target_ids: Explicit targets, typically the selection.

        Returns:
            Ids of the performers that were moved.
        """
        frame = self._frames.get(frame_id)
        if frame is None:
            return []

        if target_ids:
            targets = list(target_ids)
        else:
            targets = [pid for pid in self._performers if pid in frame.positions]

        limit = min(len(targets), len(coords))
        if limit == 0:
            return []

        lo, hi = self.config.preset_min, self.config.preset_max
        positions = dict(frame.positions)
        for performer_id, coord in zip(targets[:limit], coords[:limit], strict=True):
            positions[performer_id] = coord.clamped(lo, hi)

        self._replace_frame(frame.with_positions(positions))
        logger.debug(f"Applied preset to {limit} performers in frame {frame_id}")
        return targets[:limit]

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def add_frame(
        self,
        at_time: float,
        positions: Mapping[str, Position],
        name: str | None = None,
    ) -> Frame:
        """Capture a new frame.

        Args:
            at_time: Start time in ms (negative values clamp to 0).
            positions: Formation to hold; copied, never aliased.
            name: Display name. Defaults to "Formation N".

        Returns:
            The new frame.
        """
        frame = Frame(
            id=new_id(),
            name=name or f"Formation {len(self._frames) + 1}",
            start_time=max(0.0, float(at_time)),
            duration=self.config.default_frame_duration_ms,
            positions=dict(positions),
        )
        self._replace_frame(frame)
        logger.debug(f"Added frame {frame.id} at {frame.start_time}ms")
        return frame

    def delete_frame(self, frame_id: str) -> bool:
        """Delete a frame. Returns True if it existed."""
        if self._frames.pop(frame_id, None) is None:
            return False
        self._timeline = None
        logger.debug(f"Deleted frame {frame_id}")
        return True

    def duplicate_frame(self, frame_id: str) -> Frame | None:
        """Copy a frame to just after its own hold.

        The copy starts ``duplicate_frame_gap_ms`` after the source's hold ends,
        so it never overlaps the source.

        Returns:
            The new frame, or None if the id is unknown.
        """
        source = self._frames.get(frame_id)
        if source is None:
            return None

        duplicate = source.model_copy(
            update={
                "id": new_id(),
                "name": f"{source.name} (Copy)",
                "start_time": source.end_time + self.config.duplicate_frame_gap_ms,
                "positions": dict(source.positions),
            }
        )
        self._replace_frame(duplicate)
        logger.debug(f"Duplicated frame {frame_id} -> {duplicate.id}")
        return duplicate

    def move_frame(self, frame_id: str, new_start_time: float) -> Frame | None:
        """Shift a frame in time (clamped to >= 0). Duration is untouched."""
        frame = self._frames.get(frame_id)
        if frame is None:
            return None
        return self._replace_frame(
            frame.model_copy(update={"start_time": max(0.0, float(new_start_time))})
        )

    def resize_frame(self, frame_id: str, new_duration: float) -> Frame | None:
        """Change a frame's hold length (floored at the minimum). Start is untouched."""
        frame = self._frames.get(frame_id)
        if frame is None:
            return None
        floor = float(self.config.min_frame_duration_ms)
        return self._replace_frame(
            frame.model_copy(update={"duration": max(floor, float(new_duration))})
        )

    def rename_frame(self, frame_id: str, name: str) -> Frame | None:
        """Rename a frame. Blank names leave the previous name in place."""
        frame = self._frames.get(frame_id)
        if frame is None:
            return None
        cleaned = (name or "").strip()
        if not cleaned:
            return frame
        return self._replace_frame(frame.model_copy(update={"name": cleaned}))

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, performer_ids: Iterable[str]) -> list[str]:
        """Replace the selection. Unknown and repeated ids are dropped."""
        selection: list[str] = []
        for performer_id in performer_ids:
            if performer_id in self._performers and performer_id not in selection:
                selection.append(performer_id)
        self._selection = selection
        return self.selection

    def toggle_selection(self, performer_id: str) -> list[str]:
        """Add or remove one performer from the selection."""
        if performer_id in self._selection:
            self._selection.remove(performer_id)
        elif performer_id in self._performers:
            self._selection.append(performer_id)
        return self.selection

    def clear_selection(self) -> None:
        self._selection = []

    def select_in_region(
        self,
        positions: Mapping[str, Position],
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        additive: bool = False,
    ) -> list[str]:
        """Rubber-band selection over displayed positions.

        Args:
            positions: Currently displayed positions (usually evaluator output).
            x0, y0, x1, y1: Opposite corners of the box, in stage percent.
            additive: Merge with the existing selection instead of replacing it.

        Returns:
            The resulting selection. An empty hit leaves the selection unchanged.
        """
        left, right = sorted((x0, x1))
        top, bottom = sorted((y0, y1))

        hits = [
            pid
            for pid in self._performers
            if (pos := positions.get(pid)) is not None
            and left <= pos.x <= right
            and top <= pos.y <= bottom
        ]
        if not hits:
            return self.selection
        if additive:
            return self.select([*self._selection, *hits])
        return self.select(hits)

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------

    def paste(self, items: Sequence[ClipboardItem]) -> list[Performer]:
        """Re-attach clipboard items as new performers.

        The selection becomes exactly the pasted performers.

        Returns:
            The new performers (empty if there was nothing to paste).
        """
        if not items:
            return []

        new_performers, frame_updates = paste_performers(items, self.frames, self.config)
        for performer in new_performers:
            self._performers[performer.id] = performer
        for frame_id, updates in frame_updates.items():
            self.set_positions(frame_id, updates)

        self._selection = [p.id for p in new_performers]
        logger.debug(f"Pasted {len(new_performers)} performers")
        return new_performers

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _replace_frame(self, frame: Frame) -> Frame:
        self._frames[frame.id] = frame
        self._timeline = None
        return frame

    @staticmethod
    def _coerce_shape(shape: PerformerShape | str) -> PerformerShape:
        try:
            return PerformerShape(shape)
        except ValueError as e:
            raise ValidationError(f"Unknown performer shape: {shape!r}") from e
