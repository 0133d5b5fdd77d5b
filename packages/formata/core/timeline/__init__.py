"""Timeline ordering, evaluation and gap detection."""

from formata.core.timeline.easing import ease_in_out
from formata.core.timeline.evaluator import evaluate, evaluate_timeline, interpolate_positions
from formata.core.timeline.gaps import TimelineGap, detect_gaps
from formata.core.timeline.index import Timeline, frame_order_key

__all__ = [
    "Timeline",
    "TimelineGap",
    "detect_gaps",
    "ease_in_out",
    "evaluate",
    "evaluate_timeline",
    "frame_order_key",
    "interpolate_positions",
]
