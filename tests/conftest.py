"""Shared pytest fixtures for formata tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from formata.core.models.formation import Frame, Performer, Position
from formata.core.store.formation_store import FormationStore

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


# ============================================================================
# Formation Fixtures
# ============================================================================


@pytest.fixture
def performers() -> list[Performer]:
    """Two performers: p1 (circle) and p2 (square)."""
    return [
        Performer(id="p1", name="Ana", color="#EF4444"),
        Performer(id="p2", name="Ben", color="#3B82F6", shape="square"),
    ]


@pytest.fixture
def frame_a() -> Frame:
    """Frame A: holds [0, 1000) with p1 at (10, 10)."""
    return Frame(
        id="A",
        name="Opening",
        start_time=0,
        duration=1000,
        positions={"p1": Position(x=10, y=10)},
    )


@pytest.fixture
def frame_b() -> Frame:
    """Frame B: holds [3000, 4000) with p1 at (90, 90) and p2 entering at (90, 90)."""
    return Frame(
        id="B",
        name="Finale",
        start_time=3000,
        duration=1000,
        positions={"p1": Position(x=90, y=90), "p2": Position(x=90, y=90)},
    )


@pytest.fixture
def two_frames(frame_a: Frame, frame_b: Frame) -> list[Frame]:
    """Frames A and B, deliberately out of time order."""
    return [frame_b, frame_a]


@pytest.fixture
def store(performers: list[Performer], two_frames: list[Frame]) -> FormationStore:
    """Store seeded with the two-frame scenario."""
    return FormationStore(performers=performers, frames=two_frames)


@pytest.fixture
def empty_store() -> FormationStore:
    return FormationStore()


class FakeClock:
    """Manually advanced millisecond time source."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock(start=100_000.0)


@pytest.fixture
def snapshot_dict() -> dict:
    """Minimal valid camelCase project snapshot."""
    return {
        "version": "1.0",
        "createdAt": "2026-01-01T00:00:00Z",
        "name": "Spring Show",
        "musicName": "track.mp3",
        "performers": [
            {"id": "p1", "name": "Ana", "color": "#EF4444", "label": "A", "shape": "circle"},
            {"id": "p2", "name": "Ben", "color": "#3B82F6", "label": "B", "shape": "triangle"},
        ],
        "frames": [
            {
                "id": "A",
                "name": "Opening",
                "startTime": 0,
                "duration": 1000,
                "positions": {"p1": {"x": 10, "y": 10}},
            },
            {
                "id": "B",
                "name": "Finale",
                "startTime": 3000,
                "duration": 1000,
                "positions": {"p1": {"x": 90, "y": 90}, "p2": {"x": 90, "y": 90}},
            },
        ],
    }
