"""Formation store and clipboard."""

from formata.core.store.clipboard import Clipboard, copy_performers, paste_performers
from formata.core.store.formation_store import FormationStore

__all__ = [
    "Clipboard",
    "FormationStore",
    "copy_performers",
    "paste_performers",
]
