"""Identifier generation."""

from uuid import uuid4


def new_id() -> str:
    """Return a fresh opaque identifier (uuid4 hex)."""
    return uuid4().hex
