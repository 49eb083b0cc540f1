"""Runtime filters for the picker (current file, working directory, hidden)."""

import logging
import os
from dataclasses import dataclass
from typing import List, Sequence

from jumppack.jumplist import JumpEntry, full_path, is_within

logger = logging.getLogger(__name__)

# Status indicator pieces
FILTER_FILE = "f"
FILTER_CWD = "c"
FILTER_HIDDEN = "."


@dataclass
class FilterState:
    """Which filters are switched on. Reset when the picker closes."""

    file_only: bool = False
    cwd_only: bool = False
    show_hidden: bool = False

    def toggle_file(self) -> None:
        self.file_only = not self.file_only
        logger.info("File filter %s", "enabled" if self.file_only else "disabled")

    def toggle_cwd(self) -> None:
        self.cwd_only = not self.cwd_only
        logger.info("CWD filter %s", "enabled" if self.cwd_only else "disabled")

    def toggle_hidden(self) -> None:
        self.show_hidden = not self.show_hidden
        logger.info("Show hidden %s", "enabled" if self.show_hidden else "disabled")

    def reset(self) -> None:
        """Switch every filter back to its default."""
        self.file_only = False
        self.cwd_only = False
        self.show_hidden = False
        logger.info("All filters reset")

    @property
    def is_active(self) -> bool:
        return self.file_only or self.cwd_only or self.show_hidden

    def active_names(self) -> List[str]:
        names = []
        if self.file_only:
            names.append("file_only")
        if self.cwd_only:
            names.append("cwd_only")
        if self.show_hidden:
            names.append("show_hidden")
        return names

    def status_text(self) -> str:
        """Compact indicator such as ``[f,c] ``; empty when nothing is on."""
        parts = []
        if self.file_only:
            parts.append(FILTER_FILE)
        if self.cwd_only:
            parts.append(FILTER_CWD)
        if self.show_hidden:
            parts.append(FILTER_HIDDEN)
        if not parts:
            return ""
        return "[" + ",".join(parts) + "] "


@dataclass(frozen=True)
class FilterContext:
    """Where the picker was started from.

    Captured once so filters compare against the caller's file and directory
    rather than whatever is current while the picker runs.
    """

    original_file: str = ""
    original_cwd: str = ""


def apply_filters(items: Sequence[JumpEntry], filters: FilterState, context: FilterContext) -> List[JumpEntry]:
    """Entries that pass every active filter, in their original order."""
    if not items:
        return list(items)

    cwd = full_path(context.original_cwd) if context.original_cwd else os.getcwd()
    current_file = full_path(context.original_file, cwd) if context.original_file else ""

    filtered = []
    for item in items:
        item_path = full_path(item.path, cwd)

        if filters.file_only and item_path != current_file:
            continue
        if filters.cwd_only and not is_within(os.path.dirname(item_path), cwd):
            continue
        if not filters.show_hidden and item.hidden:
            continue
        filtered.append(item)

    logger.debug("apply_filters: %d -> %d items (%s)", len(items), len(filtered), filters.active_names())
    if not filtered:
        logger.warning("apply_filters: all items filtered out")
    return filtered
