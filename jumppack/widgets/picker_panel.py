"""Picker panel: bordered box holding the list, the preview and the footer."""

from typing import List, Mapping

from rich.console import RenderableType
from rich.text import Text
from textual.app import ComposeResult
from textual.widget import Widget

from jumppack.config import ViewMode
from jumppack.widgets.jumplist_view import JumpListView
from jumppack.widgets.preview_view import PreviewView
from jumppack.widgets.status_bar import StatusBar, format_hints, key_hints

# Window border names -> Textual border types
BORDER_TYPES = {
    "single": "solid",
    "rounded": "round",
    "double": "double",
    "heavy": "heavy",
    "ascii": "ascii",
    "none": "none",
}


class PickerPanel(Widget):
    """The picker surface as drawn by Textual."""

    DEFAULT_CSS = """
    PickerPanel {
        width: 60%;
        height: 60%;
        border: round $primary;
        border-title-align: left;
        border-subtitle-align: right;
        background: $surface;
    }

    PickerPanel.-border-solid {
        border: solid $primary;
    }

    PickerPanel.-border-double {
        border: double $primary;
    }

    PickerPanel.-border-heavy {
        border: heavy $primary;
    }

    PickerPanel.-border-ascii {
        border: ascii $primary;
    }

    PickerPanel.-border-none {
        border: none;
    }
    """

    def __init__(self, mappings: Mapping[str, str], **kwargs):
        super().__init__(**kwargs)
        self._mappings = mappings
        self._mode = ViewMode.PREVIEW

    def compose(self) -> ComposeResult:
        yield JumpListView(id="jump-list")
        yield PreviewView(id="preview")
        yield StatusBar(id="status-bar")

    def on_mount(self) -> None:
        self.set_view(self._mode)

    def apply_window(self, width: int, height: int, border: str) -> None:
        """Size the panel for ``width`` x ``height`` cells inside the border."""
        border_type = BORDER_TYPES.get(border, "round")
        pad = 0 if border_type == "none" else 2
        self.styles.width = width + pad
        self.styles.height = height + pad
        for name in BORDER_TYPES.values():
            self.remove_class(f"-border-{name}")
        if border_type != "round":
            self.add_class(f"-border-{border_type}")

    def set_view(self, mode: ViewMode) -> None:
        self._mode = mode
        self.query_one("#jump-list", JumpListView).display = mode is ViewMode.LIST
        self.query_one("#preview", PreviewView).display = mode is ViewMode.PREVIEW
        self.border_subtitle = format_hints(key_hints(self._mappings, mode))

    def set_border(self, title: str, footer: str) -> None:
        self.border_title = Text(f" {title} ") if title else None
        self.query_one("#status-bar", StatusBar).set_footer(footer)

    def show_lines(self, lines: List[Text], messages: bool = False) -> None:
        self.query_one("#jump-list", JumpListView).show_lines(lines, messages=messages)

    def set_cursor_row(self, row: int) -> None:
        self.query_one("#jump-list", JumpListView).set_cursor_row(row)

    def show_preview(self, renderable: RenderableType) -> None:
        self.query_one("#preview", PreviewView).show_preview(renderable)
