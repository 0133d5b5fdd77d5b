"""Clipboard and duplication engine.

Detaches performers together with their full per-frame position history and
re-attaches them as new identities. Pasted copies are nudged by a fixed offset
so they never sit exactly on top of the originals.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
from typing import TYPE_CHECKING

from formata.core.config.models import EditorConfig
from formata.core.models.formation import ClipboardItem, Frame, Performer, Position
from formata.core.utils.ids import new_id

if TYPE_CHECKING:
    from formata.core.store.formation_store import FormationStore

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"

FrameUpdates = dict[str, dict[str, Position]]


def copy_performers(
    selected_ids: Iterable[str],
    frames: Iterable[Frame],
    performers: Iterable[Performer],
) -> list[ClipboardItem]:
    """Snapshot the selected performers and where they stand in every frame.

    Args:
        selected_ids: Performer ids to copy (unknown ids are skipped).
        frames: All current frames.
        performers: Current roster.

    Returns:
        One ClipboardItem per known selected performer, in selection order.
    """
    roster = {p.id: p for p in performers}
    frame_list = list(frames)
    items: list[ClipboardItem] = []

    for performer_id in selected_ids:
        performer = roster.get(performer_id)
        if performer is None:
            continue
        history = {
            f.id: f.positions[performer_id] for f in frame_list if performer_id in f.positions
        }
        items.append(ClipboardItem(performer=performer, positions=history))

    logger.debug(f"Copied {len(items)} performers across {len(frame_list)} frames")
    return items


def paste_performers(
    items: Sequence[ClipboardItem],
    frames: Iterable[Frame],
    config: EditorConfig | None = None,
) -> tuple[list[Performer], FrameUpdates]:
    """Mint new performers from clipboard items.

    Every current frame receives a position for every pasted performer: the
    snapshot position recorded for that frame, or the default stage position
    when the frame was not in the snapshot. Both axes are then offset and
    clamped to the stage bounds.

    Args:
        items: Clipboard contents.
        frames: All current frames.
        config: Editor defaults (offset, default position, stage bounds).

    Returns:
        Tuple of (new performers, frame id -> {performer id -> position}).
    """
    config = config or EditorConfig()
    default = Position(x=config.default_x, y=config.default_y)
    frame_ids = [f.id for f in frames]

    new_performers: list[Performer] = []
    frame_updates: FrameUpdates = {frame_id: {} for frame_id in frame_ids}

    for item in items:
        performer = item.performer.model_copy(
            update={"id": new_id(), "name": f"{item.performer.name}{COPY_SUFFIX}"}
        )
        new_performers.append(performer)

        for frame_id in frame_ids:
            original = item.positions.get(frame_id, default)
            frame_updates[frame_id][performer.id] = original.offset(
                config.paste_offset, config.paste_offset
            ).clamped(config.stage_min, config.stage_max)

    logger.debug(f"Prepared {len(new_performers)} pasted performers")
    return new_performers, frame_updates


class Clipboard:
    """Process-local clipboard holding copied performers.

    Example:
        >>> clipboard = Clipboard()
        >>> clipboard.copy(store)
        >>> pasted = clipboard.paste(store)
    """

    def __init__(self) -> None:
        self._items: list[ClipboardItem] = []

    @property
    def items(self) -> list[ClipboardItem]:
        return list(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        self._items = []

    def copy(self, store: FormationStore) -> int:
        """Copy the store's current selection. Empty selection is a no-op.

        Returns:
            Number of performers now on the clipboard.
        """
        if not store.selection:
            return len(self._items)
        self._items = copy_performers(store.selection, store.frames, store.performers)
        logger.info(f"Copied {len(self._items)} performers.")
        return len(self._items)

    def paste(self, store: FormationStore) -> list[Performer]:
        """Paste clipboard contents into the store. Empty clipboard is a no-op."""
        if not self._items:
            return []
        return store.paste(self._items)

