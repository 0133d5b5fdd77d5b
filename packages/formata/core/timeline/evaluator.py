"""Timeline evaluation: performer positions at an arbitrary time.

The evaluator is pure. It reads frames and the roster and never mutates
either, so it can run on every animation tick and also serve frame capture.

Phases:
    HOLD: time falls inside a frame's hold; that frame's positions are
        returned verbatim.
    GAP: time falls between two holds; performers present in both frames
        slide with an ease-in-out curve. Performers present in only one of
        the two frames are omitted for the whole gap (hard cut for
        entrances and exits).
    BOUNDARY: before the first frame the first formation is shown, after
        the last frame the last formation is shown.
"""

from __future__ import annotations

from collections.abc import Iterable

from formata.core.models.formation import Frame, Performer, Position
from formata.core.timeline.easing import ease_in_out
from formata.core.timeline.index import Timeline
from formata.core.utils.math import lerp


def interpolate_positions(
    prev: Frame,
    next_: Frame,
    performers: Iterable[Performer],
    progress: float,
) -> dict[str, Position]:
    """Blend two frames at a linear progress value.

    Args:
        prev: Frame whose hold ended at the gap start.
        next_: Frame whose hold begins at the gap end.
        performers: Roster, in display order.
        progress: Linear progress through the gap in [0, 1].

    Returns:
        Positions for performers present in both frames only.
    """
    ease = ease_in_out(progress)
    result: dict[str, Position] = {}
    for performer in performers:
        start = prev.positions.get(performer.id)
        end = next_.positions.get(performer.id)
        if start is None or end is None:
            continue
        result[performer.id] = Position(
            x=lerp(start.x, end.x, ease),
            y=lerp(start.y, end.y, ease),
        )
    return result


def evaluate_timeline(
    timeline: Timeline,
    performers: Iterable[Performer],
    time_ms: float,
) -> dict[str, Position]:
    """Evaluate an already-ordered timeline at ``time_ms``.

    Args:
        timeline: Ordered frame view.
        performers: Roster used for gap interpolation.
        time_ms: Query time in milliseconds.

    Returns:
        Fresh mapping of performer id to position.
    """
    if not len(timeline):
        return {}

    holding = timeline.frame_at(time_ms)
    if holding is not None:
        return dict(holding.positions)

    prev = timeline.previous_frame(time_ms)
    next_ = timeline.next_frame(time_ms)

    if prev is not None and next_ is not None:
        gap_start = prev.end_time
        gap_end = next_.start_time
        if gap_end <= gap_start:
            return dict(prev.positions)
        progress = (time_ms - gap_start) / (gap_end - gap_start)
        return interpolate_positions(prev, next_, performers, progress)

    if prev is None:
        first = timeline.first
        assert first is not None
        return dict(first.positions)

    last = timeline.last
    assert last is not None
    return dict(last.positions)


def evaluate(
    frames: Iterable[Frame] | Timeline,
    performers: Iterable[Performer],
    time_ms: float,
) -> dict[str, Position]:
    """Compute every performer's position at ``time_ms``.

    Args:
        frames: Frames in any order, or a prebuilt Timeline.
        performers: Roster used for gap interpolation.
        time_ms: Query time in milliseconds.

    Returns:
        Mapping of performer id to position. Performers off stage at this
        time are absent.

    Example:
        >>> positions = evaluate(frames, performers, 2000.0)
        >>> positions["p1"]
        Position(x=50.0, y=50.0)
    """
    timeline = frames if isinstance(frames, Timeline) else Timeline(frames)
    return evaluate_timeline(timeline, performers, time_ms)
