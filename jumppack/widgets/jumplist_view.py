"""Jumplist view widget: one row per visible jump entry."""

from typing import List, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widget import Widget
from textual.widgets import Static


class JumpListItem(Static):
    """Widget displaying a single list row."""

    DEFAULT_CSS = """
    JumpListItem {
        width: 100%;
        height: 1;
        padding: 0 1;
        background: $surface;
    }

    JumpListItem.selected {
        background: $primary-darken-1;
    }

    JumpListItem.message {
        color: $text-muted;
        text-style: italic;
    }
    """

    def __init__(self, text: Text, is_message: bool = False, **kwargs):
        super().__init__("", **kwargs)
        self._text = text
        self._is_cursor = False
        if is_message:
            self.add_class("message")
        self._render_item()

    def _render_item(self) -> None:
        text = Text()
        prefix = "> " if self._is_cursor else "  "
        text.append(prefix, style="bold yellow" if self._is_cursor else "")
        line = self._text.copy()
        if self._is_cursor:
            line.stylize("bold")
        text.append_text(line)
        self.update(text)

    def select(self) -> None:
        """Mark this row as the cursor row."""
        self._is_cursor = True
        self.add_class("selected")
        self._render_item()

    def deselect(self) -> None:
        self._is_cursor = False
        self.remove_class("selected")
        self._render_item()


class JumpListView(Widget):
    """The rows currently visible in the picker.

    Scrolling is owned by the picker instance, which only ever hands over the
    rows that fit; the view just draws them and marks the cursor row.
    """

    DEFAULT_CSS = """
    JumpListView {
        width: 100%;
        height: 1fr;
        background: $surface;
    }

    JumpListView > #jumplist-content {
        height: auto;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._cursor_row: Optional[int] = None
        self._items: List[JumpListItem] = []
        self._lines: List[Text] = []

    def compose(self) -> ComposeResult:
        yield Vertical(id="jumplist-content")

    def show_lines(self, lines: List[Text], messages: bool = False) -> None:
        """Replace the shown rows.

        Args:
            lines: One rich Text per row
            messages: Rows are status messages rather than entries
        """
        if not messages and lines == self._lines and self._items:
            return
        self._lines = list(lines)

        content = self.query_one("#jumplist-content", Vertical)
        content.remove_children()
        self._items = [JumpListItem(line, is_message=messages) for line in lines]
        if self._items:
            content.mount(*self._items)

        cursor = self._cursor_row
        self._cursor_row = None
        if not messages and cursor is not None:
            self.set_cursor_row(cursor)

    def set_cursor_row(self, row: int) -> None:
        """Move the cursor highlight to ``row``."""
        if self._cursor_row == row:
            return
        if self._cursor_row is not None and 0 <= self._cursor_row < len(self._items):
            self._items[self._cursor_row].deselect()
        self._cursor_row = row
        if 0 <= row < len(self._items):
            self._items[row].select()
