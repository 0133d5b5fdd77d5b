"""Ordered frame index.

Frames are stored unordered; the timeline view sorts them once by
``(start_time, id)`` so that frames sharing a start time resolve
deterministically (lowest id first).
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Iterator

from formata.core.models.formation import Frame


def frame_order_key(frame: Frame) -> tuple[float, str]:
    """Sort key for frames: start time, then id as tie-break."""
    return (frame.start_time, frame.id)


class Timeline:
    """Immutable, time-ordered view over a set of frames.

    Example:
        >>> timeline = Timeline(frames)
        >>> timeline.frame_at(1500.0)
        >>> timeline.total_extent()
    """

    def __init__(self, frames: Iterable[Frame]) -> None:
        self._frames: tuple[Frame, ...] = tuple(sorted(frames, key=frame_order_key))
        self._starts: list[float] = [f.start_time for f in self._frames]

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)

    def __getitem__(self, index: int) -> Frame:
        return self._frames[index]

    @property
    def frames(self) -> tuple[Frame, ...]:
        return self._frames

    @property
    def first(self) -> Frame | None:
        return self._frames[0] if self._frames else None

    @property
    def last(self) -> Frame | None:
        return self._frames[-1] if self._frames else None

    def frame_at(self, time_ms: float) -> Frame | None:
        """Return the frame holding at ``time_ms``, if any.

        When holds overlap, the earliest frame in timeline order wins.
        """
        upper = bisect_right(self._starts, time_ms)
        for frame in self._frames[:upper]:
            if frame.holds(time_ms):
                return frame
        return None

    def previous_frame(self, time_ms: float) -> Frame | None:
        """Return the frame whose hold ended most recently at or before ``time_ms``."""
        best: Frame | None = None
        for frame in self._frames:
            if frame.start_time > time_ms:
                break
            if frame.end_time <= time_ms and (best is None or frame.end_time > best.end_time):
                best = frame
        return best

    def next_frame(self, time_ms: float) -> Frame | None:
        """Return the earliest frame starting strictly after ``time_ms``."""
        index = bisect_right(self._starts, time_ms)
        if index < len(self._frames):
            return self._frames[index]
        return None

    def frames_before(self, start_time: float) -> tuple[Frame, ...]:
        """Frames starting strictly before ``start_time``, in timeline order."""
        return self._frames[: bisect_left(self._starts, start_time)]

    def total_extent(self) -> float:
        """Latest hold end across all frames, or 0 for an empty timeline."""
        return max((f.end_time for f in self._frames), default=0.0)
