"""Tests for history parsing and source creation."""

import io
import json

import pytest

from jumppack.config import Config
from jumppack.errors import HistoryError
from jumppack.hide import HiddenStore
from jumppack.sources import (
    DEFAULT_SOURCE_NAME,
    collect_jumps,
    create_source,
    load_history,
    parse_history,
    read_line,
    read_lines,
)

from conftest import make_history


class TestParseHistory:
    """Test the accepted JSON shapes."""

    def test_getjumplist_shape(self):
        """[jumps, current] as Neovim's getjumplist() returns it."""
        data = [
            [
                {"bufnr": 1, "filename": "a.py", "lnum": 3, "col": 0},
                {"bufnr": 2, "filename": "b.py", "lnum": 7, "col": 4},
            ],
            1,
        ]
        history = parse_history(data)
        assert history.current == 1
        assert [(j.container_id, j.path, j.line, j.column) for j in history.jumps] == [
            (1, "a.py", 3, 0),
            (2, "b.py", 7, 4),
        ]

    def test_object_shape(self):
        """Keyed object with context fields."""
        data = {
            "jumps": [{"container_id": 5, "path": "/x/a.py", "line": 2, "column": 1, "listed": False}],
            "current": 0,
            "current_file": "/x/a.py",
            "cwd": "/x",
        }
        history = parse_history(data)
        assert history.current_file == "/x/a.py"
        assert history.cwd == "/x"
        assert history.jumps[0].listed is False

    def test_current_defaults_past_the_end(self):
        """Without "current" the position is after the newest jump."""
        history = parse_history({"jumps": [{"bufnr": 1, "path": "a"}, {"bufnr": 1, "path": "b"}]})
        assert history.current == 2

    @pytest.mark.parametrize(
        "data",
        [
            "nope",
            [1, 2, 3],
            [{"bufnr": 1}, 0],
            {"jumps": "a"},
            {"jumps": [], "current": "1"},
            {"jumps": [], "current": True},
            {"jumps": ["a.py"]},
            {"jumps": [{"bufnr": 1, "path": "a", "lnum": "x"}]},
        ],
    )
    def test_invalid(self, data):
        """Malformed data raises HistoryError."""
        with pytest.raises(HistoryError):
            parse_history(data)


class TestLoadHistory:
    """Test reading history files."""

    def test_file(self, tmp_path):
        """A JSON file is parsed."""
        path = tmp_path / "history.json"
        path.write_text(json.dumps([[{"bufnr": 1, "filename": "a.py", "lnum": 1, "col": 0}], 0]))
        assert len(load_history(str(path)).jumps) == 1

    def test_stdin(self, monkeypatch):
        """"-" reads from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO('{"jumps": [], "current": 0}'))
        assert load_history("-").jumps == []

    def test_missing_file(self, tmp_path):
        """An unreadable file names the path."""
        with pytest.raises(HistoryError) as exc:
            load_history(str(tmp_path / "nope.json"))
        assert "nope.json" in str(exc.value)

    def test_bad_json(self, tmp_path):
        """Invalid JSON is a HistoryError."""
        path = tmp_path / "history.json"
        path.write_text("[[")
        with pytest.raises(HistoryError):
            load_history(str(path))


class TestCreateSource:
    """Test building a session source."""

    def test_initial_selection(self):
        """The requested offset is preselected."""
        history = make_history(4, current=2)
        source = create_source(history, Config(), offset=-1, store=HiddenStore())
        assert source.name == DEFAULT_SOURCE_NAME
        assert source.cwd == "/tmp/jp"
        assert source.items[source.initial_selection].path == "/tmp/jp/p2.txt"

    def test_forward_offset(self):
        """Positive offsets select newer entries."""
        history = make_history(4, current=2)
        source = create_source(history, Config(), offset=1, store=HiddenStore())
        assert source.items[source.initial_selection].path == "/tmp/jp/p4.txt"

    def test_empty(self):
        """No jumps gives no source."""
        history = make_history(0, current=0)
        assert create_source(history, Config(), store=HiddenStore()) is None

    def test_marks_hidden(self):
        """Entries already hidden in the store are marked."""
        store = HiddenStore()
        history = make_history(3, current=1)
        first = collect_jumps(history, Config(), store)
        store.toggle(first[0])
        again = collect_jumps(history, Config(), store)
        assert [item.hidden for item in again] == [True, False, False]

    def test_cwd_only_option(self):
        """cwd_only drops entries outside the history's cwd."""
        history = make_history(2, current=0)
        history.jumps[0].path = "/elsewhere/x.txt"
        config = Config().with_options({"cwd_only": True})
        items = collect_jumps(history, config, HiddenStore())
        assert [item.path for item in items] == ["/tmp/jp/p2.txt"]


class TestReadLines:
    """Test file reading for previews."""

    def test_read_line(self, tmp_path):
        """Lines are 1-based, without line endings."""
        path = tmp_path / "f.txt"
        path.write_text("one\ntwo\r\nthree\n")
        assert read_line(str(path), 2) == "two"
        assert read_line(str(path), 4) == ""

    def test_relative_to_cwd(self, tmp_path):
        """Relative paths resolve against cwd."""
        (tmp_path / "f.txt").write_text("a\nb\n")
        assert read_lines("f.txt", 5, cwd=str(tmp_path)) == ["a", "b"]

    def test_stops_at_end_line(self, tmp_path):
        """Only the requested number of lines is read."""
        path = tmp_path / "f.txt"
        path.write_text("\n".join(str(i) for i in range(100)))
        assert len(read_lines(str(path), 10)) == 10

    def test_unreadable(self, tmp_path):
        """Missing files read as empty."""
        assert read_lines(str(tmp_path / "nope"), 3) == []
