"""Hidden jump entries.

Entries are hidden by ``path:line:column`` for the lifetime of the process;
nothing is written to disk.
"""

import logging
from typing import Iterable, Optional, Set

from jumppack.jumplist import JumpEntry

logger = logging.getLogger(__name__)


class HiddenStore:
    """Set of hidden entry keys shared by every picker session."""

    def __init__(self) -> None:
        self._keys: Set[str] = set()

    def is_hidden(self, item: JumpEntry) -> bool:
        return item.hide_key in self._keys

    def toggle(self, item: JumpEntry) -> bool:
        """Flip the hidden status of an entry. Returns the new status."""
        key = item.hide_key
        if key in self._keys:
            self._keys.discard(key)
            hidden = False
        else:
            self._keys.add(key)
            hidden = True
        logger.debug("toggle_hidden: %s -> %s", key, hidden)
        return hidden

    def mark_items(self, items: Optional[Iterable[JumpEntry]]) -> None:
        """Set ``hidden`` on each entry from the store."""
        if not items:
            return
        for item in items:
            item.hidden = item.hide_key in self._keys

    def clear(self) -> None:
        self._keys.clear()

    def __len__(self) -> int:
        return len(self._keys)


_store = HiddenStore()


def get_store() -> HiddenStore:
    """The process-wide hidden-item store."""
    return _store
