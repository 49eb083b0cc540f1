"""Jump history normalization and target selection (vim-style Ctrl+O / Ctrl+I)."""

import logging
import os
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class RawJump:
    """One entry of the host editor's jump history, as the host reports it.

    ``column`` is 0-based, like Neovim's ``getjumplist()``.
    """

    container_id: Optional[int]
    path: str
    line: int
    column: int = 0
    listed: bool = True

    @property
    def is_addressable(self) -> bool:
        """Whether the entry points into content that can be navigated to."""
        return (
            self.container_id is not None
            and self.container_id > 0
            and self.listed
            and bool(self.path)
        )


@dataclass
class JumpEntry:
    """A single location in the normalized jumplist."""

    container_id: Any
    path: str
    line: int
    column: int
    history_index: int
    is_current: bool
    offset: int
    hidden: bool = False

    @property
    def hide_key(self) -> str:
        """Identity used by the hidden-item store."""
        return f"{self.path}:{self.line}:{self.column}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "container_id": self.container_id,
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "history_index": self.history_index,
            "is_current": self.is_current,
            "offset": self.offset,
            "hidden": self.hidden,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JumpEntry":
        """Create from dictionary."""
        return cls(
            container_id=data.get("container_id"),
            path=data["path"],
            line=int(data["line"]),
            column=int(data.get("column", 1)),
            history_index=int(data.get("history_index", 0)),
            is_current=bool(data.get("is_current", False)),
            offset=int(data["offset"]),
            hidden=bool(data.get("hidden", False)),
        )


def step_offset(position: int, current_position: int) -> int:
    """Signed navigation steps from the current position to ``position``.

    ``position`` is 1-based in the raw history; ``current_position`` is the
    number of entries older than the current position. Negative offsets are
    reached with Ctrl+O, positive ones with Ctrl+I.
    """
    if position <= current_position:
        return -(current_position - position + 1)
    if position == current_position + 1:
        return 0
    return position - current_position - 1


def full_path(path: str, cwd: Optional[str] = None) -> str:
    """Absolute, normalized form of ``path`` (relative to ``cwd``)."""
    path = os.path.expanduser(path)
    if not os.path.isabs(path):
        path = os.path.join(cwd or os.getcwd(), path)
    return os.path.normpath(path)


def is_within(path: str, root: str) -> bool:
    """Whether absolute ``path`` lies inside directory ``root``."""
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)


def normalize_jumps(
    raw: Sequence[RawJump],
    current_position: int,
    cwd_only: bool = False,
    cwd: Optional[str] = None,
) -> List[JumpEntry]:
    """Turn a raw jump history into offset-addressed entries, newest first.

    Entries whose container cannot be addressed or whose path is empty are
    skipped. With ``cwd_only`` entries outside ``cwd`` are dropped after
    their offsets are assigned, so offsets keep counting real jump steps.

    Args:
        raw: Jump history, oldest first
        current_position: Number of entries older than the current position
        cwd_only: Keep only entries inside the working directory
        cwd: Working directory (defaults to the process cwd)

    Returns:
        Entries with the most recent jump first; an empty list means there is
        nothing to navigate
    """
    root = full_path(cwd or os.getcwd()) if cwd_only else None
    entries: List[JumpEntry] = []

    for position, jump in enumerate(raw, start=1):
        if not jump.is_addressable:
            continue

        entry = JumpEntry(
            container_id=jump.container_id,
            path=jump.path,
            line=jump.line,
            column=jump.column + 1,
            history_index=position,
            is_current=position == current_position + 1,
            offset=step_offset(position, current_position),
        )

        if root is not None and not is_within(full_path(entry.path, root), root):
            continue
        entries.append(entry)

    entries.reverse()
    logger.debug("normalize_jumps: %d raw -> %d entries", len(raw), len(entries))
    return entries


def find_target_offset(items: Sequence[JumpEntry], target_offset: int, wrap_edges: bool = False) -> int:
    """Index of the entry that best matches a requested navigation offset.

    Priority: exact offset; the furthest entry in the requested direction;
    with ``wrap_edges`` the furthest entry in the opposite direction; the
    current position; the first entry. The furthest (not closest) entry is
    chosen on purpose: asking for more steps than exist lands on the edge.

    Returns:
        A valid index for any non-empty ``items`` (0 for an empty one)
    """
    best_same_direction: Optional[int] = None
    current_position: Optional[int] = None
    min_backward: Optional[int] = None
    max_forward: Optional[int] = None

    for i, jump in enumerate(items):
        if jump.offset == target_offset:
            return i

        if jump.offset < 0 and (min_backward is None or jump.offset < items[min_backward].offset):
            min_backward = i
        if jump.offset > 0 and (max_forward is None or jump.offset > items[max_forward].offset):
            max_forward = i

        if target_offset != 0 and jump.offset != 0:
            if (target_offset > 0) == (jump.offset > 0):
                if (
                    best_same_direction is None
                    or (target_offset > 0 and jump.offset > items[best_same_direction].offset)
                    or (target_offset < 0 and jump.offset < items[best_same_direction].offset)
                ):
                    best_same_direction = i

        if jump.offset == 0:
            current_position = i

    if wrap_edges and best_same_direction is None:
        if target_offset > 0 and min_backward is not None:
            return min_backward
        if target_offset < 0 and max_forward is not None:
            return max_forward

    if best_same_direction is not None:
        return best_same_direction
    if current_position is not None:
        return current_position
    return 0
