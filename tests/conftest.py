"""Shared test doubles for the picker."""

from typing import Callable, List, Optional

import pytest

from jumppack.config import Config, ViewMode, WindowConfig
from jumppack.gateway import RenderGateway, Surface
from jumppack.hide import HiddenStore
from jumppack.instance import PickerInstance
from jumppack.jumplist import JumpEntry, RawJump
from jumppack.sources import JumpHistory, Source


class FakeSurface(Surface):
    """Surface that records what was drawn on it."""

    def __init__(self, height: int = 10, width: int = 80):
        self.height = height
        self.width = width
        self.valid = True
        self.title = ""
        self.footer = ""
        self.view: Optional[ViewMode] = None
        self.cursor_line: Optional[int] = None
        self.reconfigured = 0
        self.redraws = 0
        self.closed = 0

    def is_valid(self) -> bool:
        return self.valid

    def get_height(self) -> int:
        return self.height

    def get_width(self) -> int:
        return self.width

    def set_border(self, title: str, footer: str) -> None:
        self.title = title
        self.footer = footer

    def set_view(self, mode: ViewMode) -> None:
        self.view = mode

    def set_cursor_line(self, line: int) -> None:
        self.cursor_line = line

    def reconfigure(self, window: WindowConfig) -> None:
        self.reconfigured += 1

    def redraw(self) -> None:
        self.redraws += 1

    def close(self) -> None:
        self.closed += 1
        self.valid = False


class FakeGateway(RenderGateway):
    """Gateway that records every call."""

    def __init__(self, surface: Optional[FakeSurface] = None):
        self.surface = surface or FakeSurface()
        self.shown: List[list] = []
        self.previewed: List[Optional[JumpEntry]] = []
        self.chosen: List[JumpEntry] = []
        self.windows: List[tuple] = []
        self.focused_windows: list = []
        self.notifications: List[tuple] = []
        self.errors: List[str] = []
        self.closed_when_reported: List[int] = []
        self.surfaces_opened = 0
        self.focused = True
        self.keep_open = False
        self.choose_error: Optional[Exception] = None
        self.on_choose: Optional[Callable[[JumpEntry], None]] = None

    def show(self, surface, items) -> None:
        self.shown.append(list(items))

    def preview(self, surface, item) -> None:
        self.previewed.append(item)

    def choose(self, item: JumpEntry) -> bool:
        if self.on_choose is not None:
            self.on_choose(item)
        if self.choose_error is not None:
            raise self.choose_error
        self.chosen.append(item)
        return self.keep_open

    def item_to_display_text(self, item) -> str:
        return f"{item.path}:{item.line}"

    def open_surface(self, window) -> Surface:
        self.surfaces_opened += 1
        return self.surface

    def current_window(self):
        return "win-1"

    def open_window(self, target, command):
        self.windows.append((target, command))
        return "win-2"

    def focus_window(self, target) -> None:
        self.focused_windows.append(target)

    def has_focus(self, surface) -> bool:
        return self.focused

    def notify(self, message: str, level: str = "info") -> None:
        self.notifications.append((message, level))

    def report_error(self, message: str) -> None:
        self.closed_when_reported.append(self.surface.closed)
        self.errors.append(message)


def make_entries(offsets, path_prefix: str = "/tmp/jp/file") -> List[JumpEntry]:
    """Entries with the given offsets, in the given (newest-first) order."""
    entries = []
    for i, offset in enumerate(offsets):
        entries.append(
            JumpEntry(
                container_id=i + 1,
                path=f"{path_prefix}{i}.txt",
                line=i + 1,
                column=1,
                history_index=len(offsets) - i,
                is_current=offset == 0,
                offset=offset,
            )
        )
    return entries


def make_history(n: int, current: int, prefix: str = "/tmp/jp/p") -> JumpHistory:
    """History of ``n`` jumps p1..pn; ``current`` entries are older than here."""
    jumps = [RawJump(container_id=i, path=f"{prefix}{i}.txt", line=i * 10, column=0) for i in range(1, n + 1)]
    return JumpHistory(jumps=jumps, current=current, cwd="/tmp/jp")


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def store():
    return HiddenStore()


@pytest.fixture
def make_instance(gateway, store):
    """Factory for an instance over ``items`` with option overrides."""

    def factory(items, initial_selection: int = 0, **options) -> PickerInstance:
        config = Config().with_options(options)
        source = Source(items=items, initial_selection=initial_selection, cwd="/tmp/jp")
        instance = PickerInstance(
            config,
            gateway,
            gateway.surface,
            source,
            target_window="win-1",
            hidden_store=store,
        )
        instance.set_items(items, initial_selection)
        return instance

    return factory
