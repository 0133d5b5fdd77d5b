"""Tests for EditorSession."""

from __future__ import annotations

import logging

import pytest

from formata.core.config.models import AppConfig, TimelineConfig
from formata.core.editor import OPENING_FRAME_NAME, EditorSession
from formata.core.errors import SchemaError
from formata.core.models.formation import Position
from formata.core.presets.geometry import PresetNotFoundError
from formata.core.presets.sources import ScatterCoordinateSource

CENTER = Position(x=50, y=50)


@pytest.fixture
def session(fake_clock) -> EditorSession:
    return EditorSession(time_source=fake_clock)


@pytest.fixture
def loaded(session, snapshot_dict) -> EditorSession:
    session.import_snapshot(snapshot_dict)
    return session


class TestLifecycle:
    """New, import and export."""

    def test_new_project_has_opening_frame(self, session) -> None:
        """A new session holds one empty Opening frame at time 0."""
        frames = session.store.frames
        assert len(frames) == 1
        opening = frames[0]
        assert opening.name == OPENING_FRAME_NAME
        assert (opening.start_time, opening.duration, opening.positions) == (0, 2000, {})
        assert session.current_frame_id == opening.id
        assert session.current_time == 0
        assert session.store.performers == []
        assert session.music_name is None

    def test_reset_clears_everything(self, loaded) -> None:
        """reset drops performers, selection, time and music."""
        loaded.seek(3500)
        loaded.store.select(["p1"])
        loaded.reset()

        assert loaded.store.performers == []
        assert loaded.store.selection == []
        assert loaded.current_time == 0
        assert loaded.music_name is None
        assert [f.name for f in loaded.store.frames] == [OPENING_FRAME_NAME]

    def test_import_resets_cursor(self, session, snapshot_dict) -> None:
        """Importing stops playback and rewinds to the first frame."""
        session.seek(5000)
        session.toggle_playback()

        session.import_snapshot(snapshot_dict)

        assert session.current_time == 0
        assert not session.is_playing
        assert session.current_frame_id == "A"
        assert session.store.selection == []
        assert session.music_name == "track.mp3"
        assert session.project_name == "Spring Show"

    def test_failed_import_leaves_state(self, loaded, snapshot_dict) -> None:
        """A rejected import changes nothing."""
        del snapshot_dict["frames"]
        with pytest.raises(SchemaError):
            loaded.import_snapshot(snapshot_dict)
        assert {f.id for f in loaded.store.frames} == {"A", "B"}

    def test_import_empty_frames(self, session) -> None:
        """Importing no frames leaves no current frame."""
        session.import_snapshot({"performers": [], "frames": []})
        assert session.current_frame_id is None
        assert session.displayed_positions() == {}

    def test_lifecycle_logs_carry_project_context(self, session, snapshot_dict, caplog) -> None:
        """Import logs are tagged with the project name and current frame."""
        caplog.set_level(logging.INFO, logger="formata.core.editor")

        session.import_snapshot(snapshot_dict)

        record = next(r for r in caplog.records if r.getMessage().startswith("Imported"))
        assert record.project == "Spring Show"
        assert record.frame_id == "A"

    def test_log_omits_missing_frame(self, session) -> None:
        """With no current frame only the project tags the logger."""
        session.import_snapshot({"performers": [], "frames": []})
        assert session.log.extra == {"project": session.project_name}

    def test_export_round_trip(self, loaded) -> None:
        """An exported project imports into an equal session."""
        data = loaded.export_snapshot()
        assert data["name"] == "Spring Show"
        assert data["musicName"] == "track.mp3"

        other = EditorSession()
        other.import_snapshot(data)
        assert other.store.performers == loaded.store.performers
        assert other.store.evaluate(2000) == loaded.store.evaluate(2000)


class TestCursor:
    """Seeking, frame selection and display."""

    def test_displayed_positions_follow_time(self, loaded) -> None:
        """Displayed positions track the playhead."""
        loaded.seek(2000)
        assert loaded.displayed_positions()["p1"] == CENTER
        assert "p2" not in loaded.displayed_positions()

    def test_seek_auto_selects_frame_under_playhead(self, loaded) -> None:
        """Seeking into a hold makes that frame current."""
        loaded.seek(3500)
        assert loaded.current_frame_id == "B"

    def test_seek_into_gap_keeps_current_frame(self, loaded) -> None:
        """Seeking into a gap keeps the current frame."""
        loaded.seek(3500)
        loaded.seek(2000)
        assert loaded.current_frame_id == "B"

    def test_seek_clamps_negative(self, loaded) -> None:
        """Negative seeks clamp to zero."""
        assert loaded.seek(-50) == 0

    def test_select_frame_moves_playhead_and_stops(self, loaded) -> None:
        """Selecting a frame stops playback and jumps to its start."""
        loaded.toggle_playback()
        frame = loaded.select_frame("B")

        assert frame.id == "B"
        assert loaded.current_time == 3000
        assert not loaded.is_playing

    def test_select_unknown_frame(self, loaded) -> None:
        """Selecting an unknown frame changes nothing."""
        assert loaded.select_frame("nope") is None
        assert loaded.current_frame_id == "A"

    def test_timeline_duration(self, loaded) -> None:
        """Duration is the extent plus padding, with a floor."""
        assert loaded.timeline_duration() == 30000
        loaded.store.move_frame("B", 50_000)
        assert loaded.timeline_duration() == 61_000

    def test_timeline_duration_custom_config(self) -> None:
        """Padding and floor come from TimelineConfig."""
        config = AppConfig(timeline=TimelineConfig(display_padding_ms=0, min_display_ms=0))
        assert EditorSession(config).timeline_duration() == 2000


class TestFrames:
    """Capture and delete."""

    def test_capture_frame_freezes_displayed_positions(self, loaded) -> None:
        """Capturing stores what is on stage at the playhead."""
        loaded.seek(2000)
        frame = loaded.capture_frame()

        assert frame.name == "Formation 3"
        assert frame.start_time == 2000
        assert frame.positions == {"p1": CENTER}
        assert loaded.current_frame_id == frame.id

    def test_capture_frame_custom_name(self, session) -> None:
        """A captured frame can be named."""
        session.seek(4000)
        assert session.capture_frame("Chorus").name == "Chorus"

    def test_delete_current_frame_falls_back_to_latest(self, loaded) -> None:
        """Deleting the current frame selects the latest remaining one."""
        loaded.seek(8000)
        late = loaded.capture_frame()
        assert loaded.delete_frame(late.id) is True
        assert loaded.current_frame_id == "B"

    def test_delete_last_frame_clears_current(self, session) -> None:
        """With no frames left, frame edits are no-ops."""
        assert session.delete_frame(session.current_frame_id) is True
        assert session.current_frame_id is None
        assert session.toggle_performer("p1") is None
        assert session.move_performers({"p1": CENTER}) is None

    def test_delete_other_frame_keeps_current(self, loaded) -> None:
        """Deleting another frame keeps the current one."""
        assert loaded.delete_frame("B") is True
        assert loaded.current_frame_id == "A"
        assert loaded.delete_frame("B") is False

    def test_duplicate_frame(self, loaded) -> None:
        """Duplicates land after the source."""
        assert loaded.duplicate_frame("A").start_time == 2000


class TestEditing:
    """Edits to the current frame."""

    def test_move_performers_stops_playback(self, loaded) -> None:
        """Dragging stops playback and writes the current frame."""
        loaded.toggle_playback()
        loaded.move_performers([("p1", Position(x=33, y=44))])

        assert not loaded.is_playing
        assert loaded.store.get_frame("A").positions["p1"] == Position(x=33, y=44)

    def test_toggle_performer(self, loaded) -> None:
        """Toggling adds an absent performer to the current frame."""
        assert loaded.toggle_performer("p2") is True
        assert loaded.store.get_frame("A").positions["p2"] == CENTER
        assert [p.id for p in loaded.visible_performers()] == ["p1", "p2"]

    def test_apply_preset_uses_selection(self, loaded) -> None:
        """A selection limits which performers move."""
        loaded.select_frame("B")
        loaded.store.select(["p2"])
        assert loaded.apply_preset([Position(x=1, y=1)]) == ["p2"]
        assert loaded.store.get_frame("B").positions["p2"] == Position(x=2, y=2)

    def test_apply_preset_falls_back_to_visible(self, loaded) -> None:
        """Without a selection the visible performers move."""
        loaded.select_frame("B")
        assert loaded.apply_preset([CENTER, CENTER, CENTER]) == ["p1", "p2"]

    def test_apply_named_preset(self, loaded) -> None:
        """Named presets resolve by key and place the performers."""
        loaded.select_frame("B")
        moved = loaded.apply_named_preset("horizontal_line")

        assert moved == ["p1", "p2"]
        positions = loaded.store.get_frame("B").positions
        assert positions["p1"] == Position(x=20, y=50)
        assert positions["p2"] == Position(x=80, y=50)

    def test_apply_named_preset_sized_for_roster(self, loaded) -> None:
        """Off-stage performers still count toward the generated shape."""
        extra = loaded.store.add_performer("Cy")
        loaded.select_frame("B")
        loaded.toggle_performer(extra.id)

        moved = loaded.apply_named_preset("Horizontal Line")

        assert moved == ["p1", "p2"]
        positions = loaded.store.get_frame("B").positions
        assert [positions[pid].x for pid in moved] == [20.0, 50.0]
        assert extra.id not in positions

    def test_apply_named_preset_sized_for_selection(self, loaded) -> None:
        """A selection sizes the shape by its own length."""
        loaded.store.add_performer("Cy")
        loaded.select_frame("B")
        loaded.store.select(["p1", "p2"])

        loaded.apply_named_preset("Horizontal Line")

        positions = loaded.store.get_frame("B").positions
        assert [positions["p1"].x, positions["p2"].x] == [20.0, 80.0]

    def test_apply_named_preset_unknown(self, loaded) -> None:
        """Unknown preset names raise."""
        with pytest.raises(PresetNotFoundError):
            loaded.apply_named_preset("blob")

    def test_apply_coordinate_source(self, loaded) -> None:
        """Scatter positions stay inside their bounds."""
        loaded.select_frame("B")
        moved = loaded.apply_coordinate_source(ScatterCoordinateSource(seed=3))

        assert moved == ["p1", "p2"]
        for pid in moved:
            pos = loaded.store.get_frame("B").positions[pid]
            assert 20 <= pos.x <= 80 and 20 <= pos.y <= 80

    def test_apply_coordinate_source_short_result(self, loaded) -> None:
        """A short result moves only as many performers as it covers."""
        class OneSpot:
            def generate(self, count: int) -> list[Position]:
                return [Position(x=200, y=-20)]

        loaded.select_frame("B")
        assert loaded.apply_coordinate_source(OneSpot()) == ["p1"]
        assert loaded.store.get_frame("B").positions["p1"] == Position(x=98, y=2)
        assert loaded.store.get_frame("B").positions["p2"] == Position(x=90, y=90)

    def test_apply_coordinate_source_no_targets(self, session) -> None:
        """With nobody on stage nothing moves."""
        assert session.apply_coordinate_source(ScatterCoordinateSource()) == []


class TestClipboard:
    """Copy, paste and duplicate through the session."""

    def test_copy_paste(self, loaded) -> None:
        """Pasting selects the new copies."""
        loaded.store.select(["p1"])
        assert loaded.copy_selection() == 1

        pasted = loaded.paste()

        assert [p.name for p in pasted] == ["Ana (Copy)"]
        assert loaded.store.selection == [pasted[0].id]

    def test_duplicate_selection_bypasses_clipboard(self, loaded) -> None:
        """Duplicating leaves the clipboard empty."""
        loaded.store.select(["p1", "p2"])
        duplicated = loaded.duplicate_selection()

        assert len(duplicated) == 2
        assert loaded.clipboard.is_empty()
        assert loaded.store.selection == [p.id for p in duplicated]

    def test_duplicate_empty_selection(self, loaded) -> None:
        """Duplicating nothing returns nothing."""
        assert loaded.duplicate_selection() == []


class TestPlayback:
    """Playback through the session."""

    def test_tick_advances_time(self, loaded, fake_clock) -> None:
        """Ticks advance time while playing."""
        assert loaded.toggle_playback() is True
        fake_clock.advance(2000)

        assert loaded.tick() == 2000
        assert loaded.displayed_positions()["p1"] == CENTER

    def test_tick_when_stopped(self, loaded) -> None:
        """Ticks are ignored while stopped."""
        assert loaded.tick() is None

    def test_seek_while_playing_reanchors(self, loaded, fake_clock) -> None:
        """Seeking mid-playback continues from the new time."""
        loaded.toggle_playback()
        fake_clock.advance(500)
        loaded.seek(3000)
        fake_clock.advance(100)

        assert loaded.tick() == 3100
        assert loaded.current_frame_id == "B"

    def test_import_empty_music_name_clears_music(self, session, snapshot_dict) -> None:
        """Importing an empty musicName leaves the session without music."""
        session.set_music("old.mp3")
        snapshot_dict["musicName"] = ""

        session.import_snapshot(snapshot_dict)

        assert session.music_name is None
        assert session.export_snapshot()["musicName"] is None

    def test_set_music(self, session) -> None:
        """The music name is exported."""
        session.set_music("song.mp3")
        assert session.export_snapshot()["musicName"] == "song.mp3"
