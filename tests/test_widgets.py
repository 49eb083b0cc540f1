"""Tests for widget helpers that do not need a running app."""

from rich.syntax import Syntax
from rich.text import Text

from jumppack.config import BORDERS, DEFAULT_MAPPINGS, ViewMode
from jumppack.widgets.picker_panel import BORDER_TYPES
from jumppack.widgets.preview_view import build_preview
from jumppack.widgets.status_bar import format_hints, key_hints


class TestKeyHints:
    """Test border hints."""

    def test_from_mappings(self):
        """Hints use the configured key notation."""
        hints = key_hints(DEFAULT_MAPPINGS, ViewMode.PREVIEW)
        assert hints[0] == ("<CR>", "choose")
        assert ("p", "list") in hints

    def test_mode(self):
        """The toggle hint names the other view."""
        assert ("p", "preview") in key_hints(DEFAULT_MAPPINGS, ViewMode.LIST)

    def test_unmapped_skipped(self):
        """Actions without a mapping get no hint."""
        mappings = dict(DEFAULT_MAPPINGS, stop="")
        assert all(desc != "stop" for _, desc in key_hints(mappings, ViewMode.LIST))

    def test_format(self):
        """Hints render as key and description pairs."""
        assert format_hints([("q", "quit"), ("j", "down")]).plain == "q quit j down"


class TestBuildPreview:
    """Test preview renderables."""

    def test_syntax(self):
        """Readable content becomes a Syntax excerpt around the line."""
        lines = [f"x{i} = {i}" for i in range(1, 101)]
        preview = build_preview("mod.py", lines, line=50, column=2, height=10)
        assert isinstance(preview, Syntax)
        assert preview.line_range == (45, 54)
        assert preview.highlight_lines == {50}

    def test_clamped_to_file(self):
        """Lines past the end highlight the last line."""
        preview = build_preview("mod.py", ["a = 1", "b = 2"], line=9, height=10)
        assert preview.line_range == (1, 2)
        assert preview.highlight_lines == {2}

    def test_unreadable(self):
        """No content gives a message."""
        preview = build_preview("/nope.py", [], line=1)
        assert isinstance(preview, Text)
        assert "/nope.py" in preview.plain


class TestBorders:
    """Test border names."""

    def test_every_config_border_mapped(self):
        """Each accepted border has a Textual border type."""
        assert set(BORDERS) == set(BORDER_TYPES)
