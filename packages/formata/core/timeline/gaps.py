"""Transition (gap) detection between frame holds.

Identifies every interval where no frame is held and positions are
interpolated instead:
- Leading gap: 0ms → first frame, when the first frame starts after 0
- Between frames: latest hold end so far → next frame start, when positive

Back-to-back or overlapping frames produce no gap.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging

from pydantic import BaseModel, ConfigDict, computed_field

from formata.core.models.formation import Frame
from formata.core.timeline.index import Timeline

logger = logging.getLogger(__name__)


class TimelineGap(BaseModel):
    """Interval between two holds.

    Attributes:
        start_ms: Gap start (previous hold end, or 0 for the leading gap).
        end_ms: Gap end (next frame start).
        prev_id: Frame before the gap (None for the leading gap).
        next_id: Frame after the gap.
    """

    model_config = ConfigDict(frozen=True)

    start_ms: float
    end_ms: float
    prev_id: str | None
    next_id: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration_ms(self) -> float:
        return self.end_ms - self.start_ms


def detect_gaps(frames: Iterable[Frame] | Timeline) -> list[TimelineGap]:
    """Find all transition gaps in a set of frames.

    Args:
        frames: Frames in any order, or a prebuilt Timeline.

    Returns:
        Gaps sorted by start time.

    Example:
        >>> gaps = detect_gaps(frames)
        >>> [(g.start_ms, g.end_ms) for g in gaps]
        [(1000.0, 3000.0)]
    """
    timeline = frames if isinstance(frames, Timeline) else Timeline(frames)
    gaps: list[TimelineGap] = []

    first = timeline.first
    if first is None:
        return gaps

    if first.start_time > 0:
        gaps.append(
            TimelineGap(start_ms=0.0, end_ms=first.start_time, prev_id=None, next_id=first.id)
        )

    # A long hold covers any shorter holds nested inside it.
    latest = first
    for following in timeline.frames[1:]:
        gap_end = following.start_time
        if gap_end > latest.end_time:
            gaps.append(
                TimelineGap(
                    start_ms=latest.end_time,
                    end_ms=gap_end,
                    prev_id=latest.id,
                    next_id=following.id,
                )
            )
        if following.end_time > latest.end_time:
            latest = following

    gaps.sort(key=lambda g: g.start_ms)
    logger.debug(f"Detected {len(gaps)} gaps across {len(timeline)} frames")
    return gaps
