"""Interfaces between the picker and the host that draws it.

The picker never paints or navigates by itself. A host implements
:class:`RenderGateway` (and hands out :class:`Surface` objects from
``open_surface``); the picker calls into it from the dispatcher thread.
"""

from typing import Any, Optional, Sequence, Union

from jumppack.config import ViewMode, WindowConfig
from jumppack.jumplist import JumpEntry

ShowItem = Union[JumpEntry, str]

# Pre-commands for the choose variants
SPLIT_COMMAND = "split"
VSPLIT_COMMAND = "vsplit"
TABPAGE_COMMAND = "tab split"


class Surface:
    """Drawable area owned by one picker session.

    The default implementation is an always-invalid surface, so every render
    against it is a no-op.
    """

    def is_valid(self) -> bool:
        return False

    def get_height(self) -> int:
        return 0

    def get_width(self) -> int:
        return 0

    def set_border(self, title: str, footer: str) -> None:
        pass

    def set_view(self, mode: ViewMode) -> None:
        pass

    def set_cursor_line(self, line: int) -> None:
        """Highlight row ``line`` (0-based, within the shown rows)."""

    def reconfigure(self, window: WindowConfig) -> None:
        pass

    def redraw(self) -> None:
        pass

    def close(self) -> None:
        pass


class RenderGateway:
    """Host operations the picker depends on.

    Subclasses override what their host supports; the defaults do nothing,
    so a minimal gateway only needs ``open_surface`` and ``choose``.
    """

    def show(self, surface: Surface, items: Sequence[ShowItem]) -> None:
        """Show list lines; ``items`` may be message strings, empty clears."""

    def preview(self, surface: Surface, item: Optional[JumpEntry]) -> None:
        """Show the content around ``item`` (None clears the preview)."""

    def choose(self, item: JumpEntry) -> bool:
        """Navigate to ``item``. Return True to keep the picker open."""
        return False

    def item_to_display_text(self, item: Optional[JumpEntry]) -> str:
        return "" if item is None else f"{item.path} {item.line}:{item.column}"

    def open_surface(self, window: WindowConfig) -> Surface:
        return Surface()

    def current_window(self) -> Any:
        return None

    def open_window(self, target: Any, command: str) -> Any:
        """Run a window-opening ``command`` (``split`` etc.) from ``target``.

        Returns the window that is current afterwards, or None to keep
        ``target``.
        """
        return None

    def focus_window(self, target: Any) -> None:
        pass

    def has_focus(self, surface: Surface) -> bool:
        return True

    def notify(self, message: str, level: str = "info") -> None:
        pass

    def report_error(self, message: str) -> None:
        self.notify(message, "error")
