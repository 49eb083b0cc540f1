"""Status bar widget."""

from typing import List, Mapping, Tuple

from rich.text import Text
from textual.widgets import Static

from jumppack.config import Action, ViewMode


class StatusBar(Static):
    """Footer line: source name on the left, position and filters on the right."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: $primary-darken-2;
        color: $text-muted;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self._footer = ""

    def set_footer(self, footer: str) -> None:
        """Set the padded footer text."""
        if footer == self._footer:
            return
        self._footer = footer
        self.update(Text(footer, style="bold", no_wrap=True, overflow="ellipsis"))


def key_hints(mappings: Mapping[str, str], mode: ViewMode) -> List[Tuple[str, str]]:
    """Keybinding hints for the border, from the configured mappings."""
    hints = [
        (Action.CHOOSE, "choose"),
        (Action.JUMP_BACK, "back"),
        (Action.JUMP_FORWARD, "fwd"),
        (Action.TOGGLE_PREVIEW, "list" if mode is ViewMode.PREVIEW else "preview"),
        (Action.STOP, "stop"),
    ]
    return [(mappings[action.value], desc) for action, desc in hints if mappings.get(action.value)]


def format_hints(hints: List[Tuple[str, str]]) -> Text:
    text = Text()
    for i, (key, desc) in enumerate(hints):
        if i > 0:
            text.append(" ", style="dim")
        text.append(key, style="bold yellow")
        text.append(f" {desc}", style="dim")
    return text
