"""Editor session: the top-level controller tying store, clock and clipboard.

The session owns the cursor state an interactive editor needs (current frame,
current time, music name) and enforces the cross-component side effects:
editing positions stops playback, seeking follows the playhead with the frame
selection, importing resets the cursor.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any

from formata.core.config.models import AppConfig
from formata.core.io.snapshot import (
    ProjectSnapshot,
    build_snapshot,
    parse_snapshot,
    snapshot_to_dict,
)
from formata.core.models.formation import Frame, Performer, Position
from formata.core.playback.clock import AudioTransport, PlaybackClock, TimeSource
from formata.core.presets.geometry import generate_preset
from formata.core.presets.sources import CoordinateSource
from formata.core.store.clipboard import Clipboard, copy_performers
from formata.core.store.formation_store import FormationStore, PositionUpdates
from formata.core.utils.logging import get_logger

OPENING_FRAME_NAME = "Opening"


class EditorSession:
    """One open choreography project.

    Example:
        >>> session = EditorSession()
        >>> dancer = session.store.add_performer("Ana")
        >>> session.seek(3000)
        >>> frame = session.capture_frame()
        >>> session.displayed_positions()[dancer.id]
        Position(x=50.0, y=50.0)
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        time_source: TimeSource | None = None,
        transport: AudioTransport | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.clock = PlaybackClock(self.config.playback, time_source, transport)
        self.clipboard = Clipboard()
        self.store = FormationStore(self.config.editor)
        self.project_name = self.config.project_name
        self.music_name: str | None = None
        self.current_frame_id: str | None = None
        self.reset()

    @property
    def log(self) -> logging.Logger | logging.LoggerAdapter:
        """Logger tagged with the project name and current frame."""
        return get_logger(__name__, project=self.project_name, frame_id=self.current_frame_id)

    # ------------------------------------------------------------------
    # Project lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Start a fresh project: one empty "Opening" frame at time 0."""
        self.clock.stop()
        self.store = FormationStore(self.config.editor)
        opening = self.store.add_frame(0.0, {}, name=OPENING_FRAME_NAME)
        self.current_frame_id = opening.id
        self.music_name = None
        self.clock.seek(0.0)
        self.log.info("Started new project")

    def export_snapshot(self) -> dict[str, Any]:
        """Serialize the project to its camelCase wire form."""
        snapshot = build_snapshot(
            self.store.performers,
            self.store.frames,
            name=self.project_name,
            music_name=self.music_name,
        )
        self.log.info(
            f"Exported {len(snapshot.performers)} performers and {len(snapshot.frames)} frames"
        )
        return snapshot_to_dict(snapshot)

    def import_snapshot(self, data: Any) -> ProjectSnapshot:
        """Replace the project with a decoded snapshot.

        Time, selection and playback are reset; the first imported frame
        becomes current.

        Raises:
            SchemaError: If the snapshot is malformed (state is left unchanged).
        """
        snapshot = parse_snapshot(data)
        self.load(snapshot)
        return snapshot

    def load(self, snapshot: ProjectSnapshot) -> None:
        """Replace the project with an already-parsed snapshot."""
        self.clock.stop()
        self.store = FormationStore(
            self.config.editor,
            performers=snapshot.performers,
            frames=snapshot.frames,
        )
        self.project_name = snapshot.name
        self.music_name = snapshot.music_name
        self.current_frame_id = snapshot.frames[0].id if snapshot.frames else None
        self.clock.seek(0.0)
        self.log.info(
            f"Imported {len(snapshot.performers)} performers and {len(snapshot.frames)} frames"
        )

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @property
    def current_time(self) -> float:
        return self.clock.current_time_ms

    @property
    def is_playing(self) -> bool:
        return self.clock.is_playing

    @property
    def current_frame(self) -> Frame | None:
        if self.current_frame_id is None:
            return None
        return self.store.get_frame(self.current_frame_id)

    def displayed_positions(self) -> dict[str, Position]:
        """Positions shown on stage at the current time."""
        return self.store.evaluate(self.current_time)

    def visible_performers(self) -> list[Performer]:
        """Roster members present in the current frame."""
        frame = self.current_frame
        if frame is None:
            return []
        return [p for p in self.store.performers if p.id in frame.positions]

    def timeline_duration(self) -> float:
        """Length of the visible timeline: extent plus padding, with a floor."""
        timeline_config = self.config.timeline
        extent = self.store.timeline().total_extent()
        return float(
            max(extent + timeline_config.display_padding_ms, timeline_config.min_display_ms)
        )

    def select_frame(self, frame_id: str) -> Frame | None:
        """Make a frame current and move the playhead to its start.

        Playback stops. Unknown ids are a no-op.
        """
        frame = self.store.get_frame(frame_id)
        if frame is None:
            return None
        self.clock.stop()
        self.current_frame_id = frame.id
        self.clock.seek(frame.start_time)
        return frame

    def seek(self, time_ms: float) -> float:
        """Move the playhead; the frame held there (if any) becomes current."""
        target = self.clock.seek(time_ms)
        under_playhead = self.store.timeline().frame_at(target)
        if under_playhead is not None and under_playhead.id != self.current_frame_id:
            self.current_frame_id = under_playhead.id
        return target

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def capture_frame(self, name: str | None = None) -> Frame:
        """Freeze the displayed formation into a new frame at the playhead."""
        frame = self.store.add_frame(
            self.current_time,
            self.displayed_positions(),
            name=name or f"Formation {len(self.store.frames) + 1}",
        )
        self.current_frame_id = frame.id
        self.log.debug(f"Captured frame at {frame.start_time:.0f}ms")
        return frame

    def delete_frame(self, frame_id: str) -> bool:
        """Delete a frame; if it was current, the latest remaining frame takes over."""
        if not self.store.delete_frame(frame_id):
            return False
        if self.current_frame_id == frame_id:
            latest = self.store.latest_frame()
            self.current_frame_id = latest.id if latest is not None else None
        return True

    def duplicate_frame(self, frame_id: str) -> Frame | None:
        return self.store.duplicate_frame(frame_id)

    # ------------------------------------------------------------------
    # Editing the current frame
    # ------------------------------------------------------------------

    def move_performers(self, updates: PositionUpdates) -> Frame | None:
        """Drag performers in the current frame. Stops playback first."""
        self.clock.stop()
        if self.current_frame_id is None:
            return None
        return self.store.set_positions(self.current_frame_id, updates)

    def toggle_performer(self, performer_id: str) -> bool | None:
        """Toggle a performer's presence in the current frame."""
        if self.current_frame_id is None:
            return None
        return self.store.toggle_performer_in_frame(self.current_frame_id, performer_id)

    def apply_preset(self, coords: Sequence[Position]) -> list[str]:
        """Apply coordinates to the selection (or the visible performers)."""
        if self.current_frame_id is None:
            return []
        return self.store.apply_preset(
            self.current_frame_id, coords, target_ids=self.store.selection or None
        )

    def preset_target_count(self) -> int:
        """Number of performers a coordinate source would place right now."""
        return len(self.store.selection) or len(self.visible_performers())

    def apply_named_preset(self, name: str, scale: float = 1.0) -> list[str]:
        """Generate a named preset and apply it to the current targets.

        The shape is sized for the selection, or for the whole roster when
        nothing is selected. Only performers visible in the frame are moved.

        Raises:
            PresetNotFoundError: If the preset name is unknown.
        """
        count = len(self.store.selection) or len(self.store.performers)
        coords = generate_preset(name, count, scale)
        return self.apply_preset(coords)

    def apply_coordinate_source(self, source: CoordinateSource) -> list[str]:
        """Ask a coordinate source for positions and apply whatever it returns."""
        count = self.preset_target_count()
        if count == 0:
            return []
        return self.apply_preset(source.generate(count))

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------

    def copy_selection(self) -> int:
        return self.clipboard.copy(self.store)

    def paste(self) -> list[Performer]:
        return self.clipboard.paste(self.store)

    def duplicate_selection(self) -> list[Performer]:
        """Copy and immediately paste the selection without touching the clipboard."""
        items = copy_performers(self.store.selection, self.store.frames, self.store.performers)
        return self.store.paste(items)

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def toggle_playback(self) -> bool:
        """Play or pause. Returns True if now playing."""
        playing = self.clock.toggle()
        state = "started" if playing else "paused"
        self.log.debug(f"Playback {state} at {self.current_time:.0f}ms")
        return playing

    def tick(self) -> float | None:
        """Advance the clock on an animation tick; None if ignored."""
        return self.clock.tick(self.store.timeline(), self.clock.token)

    def set_music(self, name: str | None) -> None:
        self.music_name = name

