"""Preview widget: file content around the selected jump."""

from typing import List, Optional

from rich.console import RenderableType
from rich.syntax import Syntax
from rich.text import Text
from textual.widgets import Static

PREVIEW_THEME = "ansi_dark"


def build_preview(
    path: str,
    lines: List[str],
    line: int,
    column: int = 1,
    height: int = 20,
) -> RenderableType:
    """Syntax-highlighted excerpt of ``lines`` with ``line`` centred.

    Args:
        path: File path, used to pick the lexer
        lines: File content from the first line on
        line: 1-based line to highlight
        column: 1-based column of the jump, marked on the highlighted line
        height: Rows available for the excerpt

    Returns:
        A renderable; a dim message when the file could not be read
    """
    if not lines:
        return Text(f"Cannot read {path}", style="dim italic")

    line = min(max(line, 1), len(lines))
    start = max(1, line - height // 2)
    end = min(len(lines), start + max(height, 1) - 1)

    code = "\n".join(lines)
    syntax = Syntax(
        code,
        Syntax.guess_lexer(path, code=code),
        theme=PREVIEW_THEME,
        line_numbers=True,
        line_range=(start, end),
        highlight_lines={line},
        word_wrap=False,
    )
    syntax.stylize_range("reverse", (line, column - 1), (line, column))
    return syntax


class PreviewView(Static):
    """Static showing the current preview renderable."""

    DEFAULT_CSS = """
    PreviewView {
        width: 100%;
        height: 1fr;
        padding: 0 1;
        background: $surface;
        overflow: hidden;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)

    def show_preview(self, renderable: Optional[RenderableType]) -> None:
        """Show ``renderable``; None clears the view."""
        self.update(renderable if renderable is not None else "")
