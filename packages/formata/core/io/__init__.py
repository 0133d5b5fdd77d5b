"""Project snapshot serialization."""

from formata.core.io.snapshot import (
    DEFAULT_PROJECT_NAME,
    SNAPSHOT_VERSION,
    ProjectSnapshot,
    build_snapshot,
    load_project,
    parse_snapshot,
    save_project,
    snapshot_to_dict,
)

__all__ = [
    "DEFAULT_PROJECT_NAME",
    "SNAPSHOT_VERSION",
    "ProjectSnapshot",
    "build_snapshot",
    "load_project",
    "parse_snapshot",
    "save_project",
    "snapshot_to_dict",
]
