"""Playback clock and audio transport interface."""

from formata.core.playback.clock import (
    AudioTransport,
    NullAudioTransport,
    PlaybackClock,
    PlaybackState,
    TickToken,
    monotonic_ms,
)

__all__ = [
    "AudioTransport",
    "NullAudioTransport",
    "PlaybackClock",
    "PlaybackState",
    "TickToken",
    "monotonic_ms",
]
