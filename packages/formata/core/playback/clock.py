"""Playback clock.

Virtual time advances against a monotonic wall clock while playing:
``virtual = now - anchor``. Pausing keeps the last virtual time, and resuming
re-anchors so playback continues from where it stopped.

Every ``play()`` issues a new TickToken. A scheduled tick carries the token it
was issued with; ``stop()`` cancels the live token, so a tick that was already
queued when playback stopped (or restarted) never advances time.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
import logging
import time
from typing import Protocol, runtime_checkable

from formata.core.config.models import PlaybackConfig
from formata.core.timeline.index import Timeline

logger = logging.getLogger(__name__)

TimeSource = Callable[[], float]


def monotonic_ms() -> float:
    """Monotonic wall clock in milliseconds."""
    return time.perf_counter() * 1000.0


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"


class TickToken:
    """Cancellation handle for one playback run."""

    __slots__ = ("generation", "cancelled")

    def __init__(self, generation: int) -> None:
        self.generation = generation
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        return f"TickToken(generation={self.generation}, cancelled={self.cancelled})"


@runtime_checkable
class AudioTransport(Protocol):
    """Audio output driven by the clock.

    ``stop`` must take effect synchronously; the clock always stops the
    transport before re-anchoring.
    """

    def start(self, offset_ms: float) -> None: ...

    def stop(self) -> None: ...


class NullAudioTransport:
    """Transport used when no music is loaded."""

    def start(self, offset_ms: float) -> None:
        pass

    def stop(self) -> None:
        pass


class PlaybackClock:
    """Two-state (stopped/playing) virtual clock.

    Example:
        >>> clock = PlaybackClock()
        >>> token = clock.play()
        >>> clock.tick(timeline, token)
        >>> clock.stop()
    """

    def __init__(
        self,
        config: PlaybackConfig | None = None,
        time_source: TimeSource | None = None,
        transport: AudioTransport | None = None,
    ) -> None:
        """Initialize the clock.

        Args:
            config: Auto-stop limits. Uses PlaybackConfig() when None.
            time_source: Monotonic clock in ms (injectable for tests).
            transport: Audio transport kept in step with the clock.
        """
        self.config = config or PlaybackConfig()
        self._now = time_source or monotonic_ms
        self.transport: AudioTransport = transport or NullAudioTransport()

        self._state = PlaybackState.STOPPED
        self._current_ms = 0.0
        self._anchor_ms = 0.0
        self._generation = 0
        self._token: TickToken | None = None

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    @property
    def current_time_ms(self) -> float:
        return self._current_ms

    @property
    def token(self) -> TickToken | None:
        """Token of the current playback run (None when stopped)."""
        return self._token

    def play(self) -> TickToken:
        """Start playing from the current time. Already playing is a no-op."""
        if self.is_playing and self._token is not None:
            return self._token

        self._anchor_ms = self._now() - self._current_ms
        self._state = PlaybackState.PLAYING
        self._generation += 1
        self._token = TickToken(self._generation)
        self.transport.start(self._current_ms)

        logger.info(f"Playback started at {self._current_ms:.0f}ms")
        return self._token

    def stop(self) -> None:
        """Stop playing, keeping the current time. Safe to call repeatedly."""
        if self._token is not None:
            self._token.cancel()
            self._token = None

        if not self.is_playing:
            return

        self.transport.stop()
        self._state = PlaybackState.STOPPED
        logger.info(f"Playback stopped at {self._current_ms:.0f}ms")

    def toggle(self) -> bool:
        """Flip between playing and stopped. Returns True if now playing."""
        if self.is_playing:
            self.stop()
        else:
            self.play()
        return self.is_playing

    def seek(self, time_ms: float) -> float:
        """Jump to ``time_ms`` (clamped to >= 0).

        While playing, the transport is stopped, the clock re-anchored, and the
        transport restarted at the new offset.
        """
        target = max(0.0, float(time_ms))
        if self.is_playing:
            self.transport.stop()
            self._anchor_ms = self._now() - target
            self._current_ms = target
            self.transport.start(target)
        else:
            self._current_ms = target
        logger.debug(f"Seek to {target:.0f}ms")
        return target

    def end_time(self, timeline: Timeline) -> float | None:
        """Auto-stop point: last frame (by start) end plus the trailing pad."""
        last = timeline.last
        if last is None:
            return None
        return last.end_time + self.config.trailing_pad_ms

    def tick(self, timeline: Timeline, token: TickToken | None = None) -> float | None:
        """Advance virtual time.

        Args:
            timeline: Current frame order, used for auto-stop.
            token: Token the tick was scheduled with. When given, it must be
                the live, uncancelled token of the current run.

        Returns:
            The new current time, or None if the tick was ignored (stopped or
            stale token).
        """
        if not self.is_playing:
            return None
        if token is not None and (token.cancelled or token is not self._token):
            logger.debug(f"Ignoring stale tick {token!r}")
            return None

        virtual = self._now() - self._anchor_ms
        end = self.end_time(timeline)
        if end is not None and virtual > end and end > self.config.min_auto_stop_ms:
            self._current_ms = end
            self.stop()
            logger.info(f"Playback reached end at {end:.0f}ms")
            return self._current_ms

        self._current_ms = virtual
        return self._current_ms
