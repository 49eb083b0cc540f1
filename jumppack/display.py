"""Text formatting for jump entries and picker status.

Display format: ``[indicator] [icon] [path/name] [lnum:col] [│ line preview]``,
for example ``↑2 src/main.py 45:12 │ def init():``.
"""

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

from jumppack.jumplist import JumpEntry, full_path, is_within
from jumppack.sources import read_line

if TYPE_CHECKING:
    from jumppack.instance import PickerInstance

SYMBOL_CURRENT = "●"
SYMBOL_HIDDEN = "✗"
SYMBOL_UP = "↑"
SYMBOL_DOWN = "↓"
SEPARATOR_SPACED = " │ "

LINE_PREVIEW_WIDTH = 50

DEFAULT_ICONS: Dict[str, str] = {"file": "󰈔 ", "none": "  "}

# File names that say little without their parent directory
AMBIGUOUS_NAMES = {
    "init.lua",
    "index.js",
    "index.ts",
    "index.jsx",
    "index.tsx",
    "__init__.py",
    "__main__.py",
    "main.py",
    "setup.py",
    "index.html",
    "index.css",
    "config.json",
    "package.json",
    "tsconfig.json",
    "Makefile",
    "CMakeLists.txt",
    "Dockerfile",
}


def smart_filename(path: Optional[str], cwd: Optional[str] = None) -> str:
    """Short, still unambiguous name for a path.

    Ambiguous names get their parent directory; files outside ``cwd`` are
    shown relative to home (``~/...``) or as given.
    """
    if not path:
        return ""

    name = os.path.basename(path.rstrip(os.sep))
    if name in AMBIGUOUS_NAMES:
        parent = os.path.basename(os.path.dirname(full_path(path, cwd)))
        return f"{parent}/{name}" if parent else name

    cwd = full_path(cwd or os.getcwd())
    absolute = full_path(path, cwd)
    if not is_within(absolute, cwd):
        home = os.path.expanduser("~")
        if home and home != os.sep and is_within(absolute, home):
            return "~" + absolute[len(home):]
        return path

    return name


def position_marker(item: Optional[JumpEntry]) -> str:
    """``●`` for the current position, ``↑N`` / ``↓N`` for N steps away."""
    if item is None:
        return " "
    if item.is_current or item.offset == 0:
        return SYMBOL_CURRENT
    if item.offset < 0:
        return f"{SYMBOL_UP}{abs(item.offset)}"
    return f"{SYMBOL_DOWN}{item.offset}"


def line_preview(item: JumpEntry, cwd: Optional[str] = None) -> str:
    """Trimmed content of the target line, truncated for list display."""
    content = read_line(item.path, item.line, cwd).strip()
    if len(content) > LINE_PREVIEW_WIDTH:
        content = content[: LINE_PREVIEW_WIDTH - 3] + "..."
    return content


def item_to_string(
    item: Optional[JumpEntry],
    show_preview: bool = True,
    show_icons: bool = False,
    icons: Optional[Dict[str, str]] = None,
    cwd: Optional[str] = None,
) -> str:
    """Format an entry as one display line.

    Args:
        item: Entry to format
        show_preview: Append the target line's content (list mode)
        show_icons: Prefix the name with a file icon
        icons: Icon overrides with ``file`` and ``none`` keys
        cwd: Directory names are shortened against

    Returns:
        The formatted line, '' for no item
    """
    if item is None:
        return ""

    indicator = SYMBOL_HIDDEN if item.hidden else position_marker(item)

    icon = ""
    if show_icons:
        icons = icons or DEFAULT_ICONS
        exists = os.path.isfile(full_path(item.path, cwd))
        icon = icons.get("file" if exists else "none", "  ")

    filename = smart_filename(item.path, cwd)
    core = f"{indicator} {icon}{filename} {item.line}:{item.column or 1}"

    if not show_preview:
        return core
    content = line_preview(item, cwd)
    if not content:
        return core
    return f"{core}{SEPARATOR_SPACED}{content}"


def fit_to_width(text: str, width: int) -> str:
    """Truncate from the left with an ellipsis so ``text`` fits ``width``."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    return "…" + text[len(text) - width + 1:]


@dataclass(frozen=True)
class GeneralInfo:
    """Summary of the picker state shown in the footer."""

    source_name: str
    source_cwd: str
    n_total: int
    relative_current_ind: Optional[int]
    position_indicator: str
    filter_indicator: str

    @property
    def status_text(self) -> str:
        return self.position_indicator + self.filter_indicator


def general_info(instance: "PickerInstance") -> GeneralInfo:
    """Footer information for an instance.

    The position indicator reads ``↑3●↓4``: entries above and below the
    selection, with a pending count appended as ``×N``.
    """
    items = instance.items
    indicator = SYMBOL_CURRENT
    if items:
        selected = instance.current_index or 0
        up_count = selected
        down_count = len(items) - selected - 1
        indicator = f"{SYMBOL_UP}{up_count}{SYMBOL_CURRENT}{SYMBOL_DOWN}{down_count}"
        if instance.pending_count:
            indicator += f"×{instance.pending_count}"

    filter_text = instance.filters.status_text()
    if filter_text:
        filter_text = SEPARATOR_SPACED + filter_text

    cwd = instance.source.cwd
    home = os.path.expanduser("~")
    if cwd and home != os.sep and is_within(cwd, home):
        cwd = "~" + cwd[len(home):]

    return GeneralInfo(
        source_name=instance.source.name or "---",
        source_cwd=cwd or "---",
        n_total=len(items),
        relative_current_ind=instance.current_index,
        position_indicator=indicator,
        filter_indicator=filter_text,
    )


def compose_footer(info: GeneralInfo, width: int) -> str:
    """Source name on the left, status on the right, padded to ``width``."""
    name = f" {info.source_name} "
    status = f" {info.status_text} "
    gap = width - len(name) - len(status)
    if gap <= 0:
        return fit_to_width(name, width)
    return name + " " * gap + status
