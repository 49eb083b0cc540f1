"""Main Textual application for jumppack."""

import logging
import os
from typing import Any, List, Optional, Sequence

from rich.console import RenderableType
from rich.markup import escape
from rich.text import Text
from textual import events, work
from textual.app import App, ComposeResult
from textual.binding import Binding

from jumppack.config import Config, ViewMode, WindowConfig
from jumppack.display import item_to_string
from jumppack.gateway import RenderGateway, ShowItem, Surface
from jumppack.jumplist import JumpEntry
from jumppack.keys import from_textual
from jumppack.loop import InputChannel, PickResult
from jumppack.picker import Jumppack
from jumppack.sources import JumpHistory, read_lines
from jumppack.widgets import PickerPanel, build_preview

logger = logging.getLogger(__name__)

# Textual notification severities
SEVERITIES = {
    "error": "error",
    "warn": "warning",
    "warning": "warning",
}


class TextualSurface(Surface):
    """The picker panel, driven from the dispatcher thread.

    Every widget call is marshalled to the UI thread with
    ``App.call_from_thread``.
    """

    def __init__(self, app: "JumppackApp", panel: PickerPanel, window: WindowConfig):
        self._app = app
        self._panel = panel
        self._closed = False
        self._width = 0
        self._height = 0
        self.reconfigure(window)

    def _call(self, callback, *args) -> Any:
        if not self.is_valid():
            return None
        return self._app.call_from_thread(callback, *args)

    def is_valid(self) -> bool:
        return not self._closed and self._app.is_running

    def get_height(self) -> int:
        # One row belongs to the status bar
        return max(1, self._height - 1)

    def get_width(self) -> int:
        return self._width

    def set_border(self, title: str, footer: str) -> None:
        self._call(self._panel.set_border, title, footer)

    def set_view(self, mode: ViewMode) -> None:
        self._call(self._panel.set_view, mode)

    def set_cursor_line(self, line: int) -> None:
        self._call(self._panel.set_cursor_row, line)

    def reconfigure(self, window: WindowConfig) -> None:
        size = self._app.size
        self._width, self._height = window.compute(size.width, size.height)
        self._call(self._panel.apply_window, self._width, self._height, window.border)

    def redraw(self) -> None:
        self._call(self._panel.refresh)

    def close(self) -> None:
        self._call(setattr, self._panel, "display", False)
        self._closed = True

    def show_lines(self, lines: List[Text], messages: bool = False) -> None:
        self._call(self._panel.show_lines, lines, messages)

    def show_preview(self, renderable: Optional[RenderableType]) -> None:
        self._call(self._panel.show_preview, renderable)


class TextualGateway(RenderGateway):
    """Gateway for the terminal host.

    Choosing does not navigate by itself: the chosen entry and the window
    command are recorded and printed for the editor once the app exits.
    """

    def __init__(self, app: "JumppackApp", config: Config, cwd: str):
        self.app = app
        self.config = config
        self.cwd = cwd
        self.chosen: Optional[JumpEntry] = None
        self.pre_command: Optional[str] = None
        self.errors: List[str] = []

    def _format(self, item: JumpEntry) -> Text:
        line = item_to_string(
            item,
            show_preview=True,
            show_icons=self.config.options.show_icons,
            cwd=self.cwd,
        )
        if item.hidden:
            return Text(line, style="dim")
        if item.is_current:
            return Text(line, style="cyan")
        return Text(line)

    def show(self, surface: Surface, items: Sequence[ShowItem]) -> None:
        if not isinstance(surface, TextualSurface):
            return
        if any(isinstance(item, str) for item in items):
            surface.show_lines([Text(str(item)) for item in items], messages=True)
            return
        surface.show_lines([self._format(item) for item in items])

    def preview(self, surface: Surface, item: Optional[JumpEntry]) -> None:
        if not isinstance(surface, TextualSurface):
            return
        if item is None:
            surface.show_preview(None)
            return
        height = surface.get_height()
        lines = read_lines(item.path, item.line + height, self.cwd)
        surface.show_preview(build_preview(item.path, lines, item.line, item.column, height))

    def choose(self, item: JumpEntry) -> bool:
        logger.info("Navigating to %s:%d:%d (offset=%d)", item.path, item.line, item.column, item.offset)
        self.chosen = item
        return False

    def item_to_display_text(self, item: Optional[JumpEntry]) -> str:
        return item_to_string(
            item,
            show_preview=False,
            show_icons=self.config.options.show_icons,
            cwd=self.cwd,
        )

    def open_surface(self, window: WindowConfig) -> Surface:
        panel = self.app.call_from_thread(self.app.query_one, PickerPanel)
        return TextualSurface(self.app, panel, window)

    def open_window(self, target: Any, command: str) -> Any:
        self.pre_command = command
        return None

    def has_focus(self, surface: Surface) -> bool:
        return self.app.has_terminal_focus

    def notify(self, message: str, level: str = "info") -> None:
        log = logger.error if level == "error" else logger.info
        log("%s", message)
        if self.app.is_running:
            self.app.call_from_thread(
                self.app.notify,
                escape(message),
                severity=SEVERITIES.get(level, "information"),
            )

    def report_error(self, message: str) -> None:
        self.errors.append(message)
        self.notify(message, "error")


class JumppackApp(App):
    """Jump history picker running in the terminal.

    ``run()`` returns the session's :class:`PickResult`.
    """

    TITLE = "Jumppack"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        align: center middle;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "abort", "Abort", show=False, priority=True),
        Binding("ctrl+q", "abort", "Abort", show=False, priority=True),
    ]

    def __init__(
        self,
        history: JumpHistory,
        config: Config,
        offset: int = -1,
        track_focus: bool = True,
    ) -> None:
        super().__init__()
        self._config = config
        self._history = history
        self._offset = offset
        self._track_focus = track_focus

        self._jumppack = Jumppack(config)
        self._channel = InputChannel()
        self.gateway = TextualGateway(self, config, history.cwd or os.getcwd())

        # Updated from AppFocus/AppBlur; read by the focus tracker thread
        self.has_terminal_focus = True

    def compose(self) -> ComposeResult:
        yield PickerPanel(self._config.mappings, id="picker")

    def on_mount(self) -> None:
        self._run_picker()

    @work(thread=True, exclusive=True)
    def _run_picker(self) -> None:
        """Run the picker session off the UI thread and exit with its result."""
        result: PickResult = self._jumppack.start(
            self.gateway,
            self._channel,
            offset=self._offset,
            history=self._history,
            track_focus=self._track_focus,
        )
        self.call_from_thread(self.exit, result)

    def on_key(self, event: events.Key) -> None:
        """Forward every key to the picker's input channel."""
        event.stop()
        event.prevent_default()
        self._channel.send_key(from_textual(event.key, event.character))

    def on_click(self, event: events.Click) -> None:
        # A click outside the picker ends the session
        widget, _ = self.screen.get_widget_at(event.screen_x, event.screen_y)
        if widget is self.screen:
            self._channel.cancel("mouse")

    def on_resize(self, event: events.Resize) -> None:
        self._jumppack.refresh()

    def on_app_blur(self, event: events.AppBlur) -> None:
        self.has_terminal_focus = False

    def on_app_focus(self, event: events.AppFocus) -> None:
        self.has_terminal_focus = True

    def action_abort(self) -> None:
        """Abort the session without a selection."""
        self._channel.cancel("interrupt")
