"""Picker instance: selection, visible window, view mode and filters."""

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from jumppack.config import Action, Config, ViewMode
from jumppack.display import compose_footer, general_info
from jumppack.filters import FilterContext, FilterState, apply_filters
from jumppack.gateway import RenderGateway, Surface
from jumppack.hide import HiddenStore, get_store
from jumppack.jumplist import JumpEntry
from jumppack.keys import KeySequence
from jumppack.sources import Source

logger = logging.getLogger(__name__)

MESSAGE_NO_MATCHES = "No matching items"
MESSAGE_NO_ITEMS = "No items available"


@dataclass(frozen=True)
class VisibleRange:
    """Inclusive range of item indices shown on the surface."""

    first: int
    last: int

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.first <= index <= self.last

    def __len__(self) -> int:
        return self.last - self.first + 1


def compute_visible_range(index: int, n_items: int, height: int) -> VisibleRange:
    """Range of ``height`` rows that keeps ``index`` roughly centred."""
    height = max(1, height)
    ind = index + 1
    to = min(n_items, math.floor(ind + 0.5 * height))
    start = max(1, to - height + 1)
    to = start + min(height, n_items) - 1
    return VisibleRange(start - 1, to - 1)


def _closest_by_offset(items: Sequence[JumpEntry], offset: int) -> int:
    best = 0
    best_diff = abs(items[0].offset - offset)
    for i, item in enumerate(items):
        diff = abs(item.offset - offset)
        if diff < best_diff:
            best, best_diff = i, diff
    return best


def _index_of(items: Sequence[JumpEntry], target: JumpEntry) -> Optional[int]:
    for i, item in enumerate(items):
        if item.path == target.path and item.line == target.line:
            return i
    return None


def calculate_filtered_initial_selection(
    original_items: Sequence[JumpEntry],
    filtered_items: Sequence[JumpEntry],
    original_selection: Optional[int],
) -> int:
    """Map an index into ``original_items`` onto ``filtered_items``.

    The same entry (path and line) is preferred, then the entry with the
    closest offset. Out-of-range selections are clamped first.
    """
    if original_selection is None or original_selection < 0 or not original_items or not filtered_items:
        return 0

    target = original_items[min(original_selection, len(original_items) - 1)]
    index = _index_of(filtered_items, target)
    if index is not None:
        return index
    return _closest_by_offset(filtered_items, target.offset)


def find_best_selection(current: Optional[JumpEntry], filtered_items: Sequence[JumpEntry]) -> int:
    """Index in ``filtered_items`` to select after filters changed."""
    if not filtered_items:
        return 0
    if current is not None:
        index = _index_of(filtered_items, current)
        if index is not None:
            return index
    return _closest_by_offset(filtered_items, current.offset if current is not None else 0)


class PickerInstance:
    """State of one picker session.

    Mutated only by the dispatcher; the focus tracker may call
    :meth:`destroy` when the dispatcher is not waiting for input.
    """

    def __init__(
        self,
        config: Config,
        gateway: RenderGateway,
        surface: Surface,
        source: Source,
        bindings: Optional[Dict[KeySequence, Action]] = None,
        target_window: Any = None,
        filter_context: Optional[FilterContext] = None,
        hidden_store: Optional[HiddenStore] = None,
    ):
        self.config = config
        self.gateway = gateway
        self.surface = surface
        self.source = source
        self.bindings = bindings if bindings is not None else config.bindings()
        self.target_window = target_window
        self.hidden_store = hidden_store or get_store()

        self.items: List[JumpEntry] = []
        self.original_items: List[JumpEntry] = []
        self.current_index: Optional[int] = None
        self.visible_range: Optional[VisibleRange] = None
        self.view_mode = config.options.default_view

        self.filters = FilterState()
        self.filter_context = filter_context or FilterContext(original_cwd=source.cwd)

        self.pending_count = ""
        self.count_deadline: Optional[float] = None
        self.pending_keys: KeySequence = ()

        self.focus_tracker = None
        self.error: Optional[Exception] = None
        self._on_destroy: List[Callable[[], None]] = []
        self.destroyed = False

    # Items and selection

    def set_items(self, items: Sequence[JumpEntry], initial_selection: int = 0) -> None:
        """Install the session's entries and select the initial one."""
        logger.debug("set_items: %d items, initial_selection=%d", len(items), initial_selection)
        self.original_items = list(items)
        self.items = apply_filters(self.original_items, self.filters, self.filter_context)
        if self.items:
            index = calculate_filtered_initial_selection(self.original_items, self.items, initial_selection)
            self.set_selection(index, force_update=True)
        else:
            self.set_selection(0)
        self.render()
        self.update()

    def set_selection(self, index: Optional[int], force_update: bool = False) -> None:
        """Select ``index`` (wrapped into range) and keep it visible."""
        n_items = len(self.items)
        if n_items == 0 or index is None:
            self.current_index = None
            self.visible_range = None
            return

        index = index % n_items
        needs_update = self.visible_range is None or index not in self.visible_range
        if (force_update or needs_update) and self.surface.is_valid():
            self.visible_range = compute_visible_range(index, n_items, self.surface.get_height())
        self.current_index = index

    def move_selection(self, by: int, to: Optional[int] = None) -> None:
        """Move the selection by ``by`` entries, or straight ``to`` an index."""
        if not self.items:
            return

        n_items = len(self.items)
        if to is None:
            to = (self.current_index or 0) + by
            if self.config.options.wrap_edges:
                if to < 0:
                    to = n_items - 1
                elif to >= n_items:
                    to = 0
        to = min(max(to, 0), n_items - 1)
        logger.debug("move_selection: by=%d -> %d", by, to)

        self.set_selection(to)
        if self.view_mode is ViewMode.PREVIEW:
            self.render_preview()

    def get_selection(self) -> Optional[JumpEntry]:
        if not self.items or self.current_index is None:
            return None
        return self.items[self.current_index]

    # Filters

    def apply_filters(self) -> None:
        """Re-filter the session's entries, keeping the selection if possible."""
        current = self.get_selection()
        self.items = apply_filters(self.original_items, self.filters, self.filter_context)
        if self.items:
            self.set_selection(find_best_selection(current, self.items), force_update=True)
        else:
            self.set_selection(None)
        self.render()
        self.update()

    def empty_message(self) -> str:
        return MESSAGE_NO_MATCHES if self.filters.is_active else MESSAGE_NO_ITEMS

    # Count prefix

    def add_count_digit(self, digit: str) -> None:
        self.pending_count += digit
        timeout = self.config.options.count_timeout_ms / 1000
        self.count_deadline = time.monotonic() + timeout

    def take_count(self) -> int:
        """Pending count (1 when none) and clear it."""
        count = int(self.pending_count) if self.pending_count else 1
        self.clear_count()
        return max(count, 1)

    def clear_count(self) -> None:
        self.pending_count = ""
        self.count_deadline = None

    def expire_count(self, now: Optional[float] = None) -> bool:
        """Drop the pending count once its timeout has passed."""
        if not self.pending_count or self.count_deadline is None:
            return False
        if (now if now is not None else time.monotonic()) < self.count_deadline:
            return False
        logger.debug("Count %s expired", self.pending_count)
        self.clear_count()
        return True

    # Rendering

    def toggle_view(self) -> None:
        if self.view_mode is ViewMode.PREVIEW:
            self.view_mode = ViewMode.LIST
            self.render_list()
        else:
            self.view_mode = ViewMode.PREVIEW
            self.render_preview()
        logger.debug("View mode: %s", self.view_mode.value)

    def render(self) -> None:
        if self.view_mode is ViewMode.PREVIEW:
            self.render_preview()
        else:
            self.render_list()

    def render_list(self) -> None:
        if not self.surface.is_valid():
            return
        self.surface.set_view(ViewMode.LIST)
        self.update_lines()

    def render_preview(self) -> None:
        if not self.surface.is_valid():
            return
        item = self.get_selection()
        if item is None:
            # Nothing to preview; fall back to the message in the list
            self.surface.set_view(ViewMode.LIST)
            self.update_lines()
            return
        self.surface.set_view(ViewMode.PREVIEW)
        self.gateway.preview(self.surface, item)

    def update_lines(self) -> None:
        """Show the visible slice of items and highlight the selection."""
        if not self.surface.is_valid():
            return
        if not self.items:
            self.gateway.show(self.surface, [self.empty_message()])
            return
        if self.visible_range is None or self.current_index is None:
            self.gateway.show(self.surface, [])
            return

        shown = self.items[self.visible_range.first : self.visible_range.last + 1]
        self.gateway.show(self.surface, shown)
        self.surface.set_cursor_line(self.current_index - self.visible_range.first)

    def update_border(self) -> None:
        if not self.surface.is_valid():
            return
        title = ""
        if self.view_mode is ViewMode.PREVIEW:
            item = self.get_selection()
            if item is not None:
                title = self.gateway.item_to_display_text(item)
        footer = compose_footer(general_info(self), self.surface.get_width())
        self.surface.set_border(title, footer)

    def update(self, update_window: bool = False) -> None:
        """Repaint border and lines; ``update_window`` also re-lays out."""
        if not self.surface.is_valid():
            return
        if update_window:
            self.surface.reconfigure(self.config.window)
            if self.items:
                self.set_selection(self.current_index, force_update=True)
        self.update_border()
        self.update_lines()
        self.surface.redraw()

    # Lifecycle

    def on_destroy(self, callback: Callable[[], None]) -> None:
        self._on_destroy.append(callback)

    def destroy(self) -> None:
        """Tear the session down. Safe to call more than once."""
        if self.destroyed:
            return
        self.destroyed = True
        logger.info("Picker closed")

        if self.focus_tracker is not None:
            self.focus_tracker.stop()
        self.clear_count()
        if self.surface.is_valid():
            self.surface.close()
        if self.target_window is not None:
            self.gateway.focus_window(self.target_window)

        for callback in self._on_destroy:
            callback()
        self._on_destroy.clear()
