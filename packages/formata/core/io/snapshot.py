"""Project snapshot: the flat, camelCase wire format for save/load.

Schema::

    {
      "version": "1.0",
      "createdAt": "2026-01-01T00:00:00Z",
      "name": "Formata Project",
      "musicName": null,
      "performers": [...],
      "frames": [...]
    }

Import is all-or-nothing. ``performers`` and ``frames`` must be present and
be lists, and every entry must read as a performer/frame; otherwise
SchemaError is raised and nothing is returned.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from formata.core.errors import SchemaError
from formata.core.models.formation import Frame, Performer
from formata.core.utils.json import read_json, write_json

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0"
DEFAULT_PROJECT_NAME = "Formata Project"

_REQUIRED_LISTS = ("performers", "frames")


class ProjectSnapshot(BaseModel):
    """Serializable project state."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    version: str = SNAPSHOT_VERSION
    created_at: datetime | None = None
    name: str = DEFAULT_PROJECT_NAME
    music_name: str | None = None
    performers: list[Performer] = Field(default_factory=list)
    frames: list[Frame] = Field(default_factory=list)

    @field_validator("music_name", mode="before")
    @classmethod
    def validate_music_name(cls, v: Any) -> Any:
        """Treat an empty music name as no music."""
        return None if v == "" else v


def build_snapshot(
    performers: Iterable[Performer],
    frames: Iterable[Frame],
    *,
    name: str = DEFAULT_PROJECT_NAME,
    music_name: str | None = None,
) -> ProjectSnapshot:
    """Capture roster and frames into a snapshot stamped with the current UTC time."""
    return ProjectSnapshot(
        created_at=datetime.now(UTC),
        name=name,
        music_name=music_name,
        performers=list(performers),
        frames=list(frames),
    )


def snapshot_to_dict(snapshot: ProjectSnapshot) -> dict[str, Any]:
    """Dump a snapshot to its camelCase JSON-ready form."""
    return snapshot.model_dump(mode="json", by_alias=True)


def parse_snapshot(data: Any) -> ProjectSnapshot:
    """Read a snapshot from decoded JSON.

    Args:
        data: Decoded JSON document.

    Returns:
        Parsed snapshot.

    Raises:
        SchemaError: If the document is not an object, ``performers`` or
            ``frames`` is missing or not a list, or an entry is malformed.
    """
    if not isinstance(data, dict):
        raise SchemaError("Invalid project file: expected a JSON object")

    for key in _REQUIRED_LISTS:
        if not isinstance(data.get(key), list):
            raise SchemaError(f"Invalid project file: missing {key}")

    try:
        snapshot = ProjectSnapshot.model_validate(data)
    except PydanticValidationError as e:
        raise SchemaError(f"Invalid project file: {e.error_count()} malformed entries") from e

    logger.debug(
        f"Parsed snapshot with {len(snapshot.performers)} performers "
        f"and {len(snapshot.frames)} frames"
    )
    return snapshot


def save_project(path: str | Path, snapshot: ProjectSnapshot) -> Path:
    """Write a snapshot as pretty-printed JSON.

    Returns:
        The path written.
    """
    path = Path(path)
    write_json(path, snapshot_to_dict(snapshot))
    logger.info(f"Exported project to {path}")
    return path


def load_project(path: str | Path) -> ProjectSnapshot:
    """Read and validate a snapshot file.

    Raises:
        FileNotFoundError: If the file does not exist.
        SchemaError: If the file is not valid JSON or not a valid snapshot.
    """
    try:
        data = read_json(path)
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid project file: {e.msg}") from e

    snapshot = parse_snapshot(data)
    logger.info(f"Imported project from {path}")
    return snapshot
