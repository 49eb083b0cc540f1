"""Jump history sources.

The picker reads the editor's jump history from a JSON export. Both the raw
``getjumplist()`` shape and a keyed object are accepted::

    [[{"bufnr": 3, "filename": "src/app.py", "lnum": 10, "col": 4}, ...], 2]

    {"jumps": [{"bufnr": 3, "path": "src/app.py", "lnum": 10, "col": 4}],
     "current": 2, "current_file": "src/app.py", "cwd": "/home/me/proj"}
"""

import json
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from jumppack.config import Config
from jumppack.errors import HistoryError
from jumppack.hide import HiddenStore, get_store
from jumppack.jumplist import JumpEntry, RawJump, find_target_offset, normalize_jumps

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_NAME = "Jumplist"


@dataclass
class JumpHistory:
    """Raw jump history plus where the editor currently is."""

    jumps: List[RawJump] = field(default_factory=list)
    current: int = 0
    current_file: str = ""
    cwd: str = ""


@dataclass
class Source:
    """Items for one picker session and where to start."""

    items: List[JumpEntry]
    initial_selection: int = 0
    name: str = DEFAULT_SOURCE_NAME
    cwd: str = ""


def _parse_jump(data: Any, index: int) -> RawJump:
    if not isinstance(data, dict):
        raise HistoryError(f"jump #{index} must be an object, got {type(data).__name__}")
    try:
        return RawJump(
            container_id=data.get("bufnr", data.get("container_id")),
            path=str(data.get("path") or data.get("filename") or ""),
            line=int(data.get("lnum", data.get("line", 1))),
            column=int(data.get("col", data.get("column", 0))),
            listed=bool(data.get("listed", True)),
        )
    except (TypeError, ValueError) as e:
        raise HistoryError(f"jump #{index} has invalid fields: {e}") from e


def parse_history(data: Any) -> JumpHistory:
    """Parse a decoded JSON history export.

    Raises:
        HistoryError: if the data has neither accepted shape
    """
    if isinstance(data, list):
        if len(data) != 2 or not isinstance(data[0], list):
            raise HistoryError("expected [jumps, current] as returned by getjumplist()")
        jumps, current = data
        extra: dict = {}
    elif isinstance(data, dict):
        jumps = data.get("jumps", data.get("jumplist", []))
        if not isinstance(jumps, list):
            raise HistoryError("\"jumps\" must be a list")
        current = data.get("current", len(jumps))
        extra = data
    else:
        raise HistoryError(f"history must be a list or an object, got {type(data).__name__}")

    if isinstance(current, bool) or not isinstance(current, int):
        raise HistoryError(f"current position must be an integer, got {current!r}")

    return JumpHistory(
        jumps=[_parse_jump(jump, i) for i, jump in enumerate(jumps, start=1)],
        current=current,
        current_file=str(extra.get("current_file", "")),
        cwd=str(extra.get("cwd", "")),
    )


def load_history(path: str) -> JumpHistory:
    """Read a history export from ``path`` (``-`` for stdin).

    Raises:
        HistoryError: if the file cannot be read or parsed
    """
    try:
        if path == "-":
            data = json.load(sys.stdin)
        else:
            with open(path) as f:
                data = json.load(f)
    except json.JSONDecodeError as e:
        raise HistoryError(f"{path}: not valid JSON: {e}") from e
    except OSError as e:
        raise HistoryError(f"{path}: {e.strerror or e}") from e

    try:
        history = parse_history(data)
    except HistoryError as e:
        raise HistoryError(f"{path}: {e}") from e
    logger.debug("Loaded %d jumps from %s (current=%d)", len(history.jumps), path, history.current)
    return history


def collect_jumps(history: JumpHistory, config: Config, store: Optional[HiddenStore] = None) -> List[JumpEntry]:
    """Normalized entries for a history, newest first, with hidden marks."""
    items = normalize_jumps(
        history.jumps,
        history.current,
        cwd_only=config.options.cwd_only,
        cwd=history.cwd or None,
    )
    (store or get_store()).mark_items(items)
    return items


def create_source(
    history: JumpHistory,
    config: Config,
    offset: int = -1,
    store: Optional[HiddenStore] = None,
) -> Optional[Source]:
    """Build the jumplist source for a session.

    Returns:
        The source, or None when there are no jumps to navigate
    """
    logger.debug("create_source: requested offset=%d", offset)
    items = collect_jumps(history, config, store)
    if not items:
        logger.warning("create_source: no jumps available")
        return None

    initial = find_target_offset(items, offset, config.options.wrap_edges)
    logger.debug("create_source: %d items, initial_selection=%d", len(items), initial)
    return Source(
        items=items,
        initial_selection=initial,
        name=DEFAULT_SOURCE_NAME,
        cwd=history.cwd or os.getcwd(),
    )


def read_lines(path: str, end_line: int, cwd: Optional[str] = None) -> List[str]:
    """First ``end_line`` lines of a file for previews; [] if unreadable."""
    file_path = Path(os.path.expanduser(path))
    if not file_path.is_absolute() and cwd:
        file_path = Path(cwd) / file_path
    lines: List[str] = []
    try:
        with open(file_path, encoding="utf-8", errors="replace") as f:
            for line in f:
                lines.append(line.rstrip("\r\n"))
                if len(lines) >= end_line:
                    break
    except OSError:
        logger.debug("read_lines: cannot read %s", file_path)
        return []
    return lines


def read_line(path: str, line: int, cwd: Optional[str] = None) -> str:
    """A single 1-based line of a file, or '' if it does not exist."""
    lines = read_lines(path, line, cwd)
    if len(lines) < line:
        return ""
    return lines[line - 1]
