"""Configuration management for jumppack."""

import json
import logging
import math
import os
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from jumppack.errors import ConfigError
from jumppack.keys import KeySequence, parse_keys

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "jumppack"
CONFIG_FILE = CONFIG_DIR / "config.json"

GOLDEN_RATIO = 0.618

LOG_LEVELS = ("off", "error", "warn", "info", "debug", "trace")
BORDERS = ("single", "rounded", "double", "heavy", "ascii", "none")


class ViewMode(str, Enum):
    """What the picker surface shows."""

    LIST = "list"
    PREVIEW = "preview"


class Action(str, Enum):
    """Logical picker actions; values are the mapping names."""

    JUMP_BACK = "jump_back"
    JUMP_FORWARD = "jump_forward"
    JUMP_TO_TOP = "jump_to_top"
    JUMP_TO_BOTTOM = "jump_to_bottom"
    CHOOSE = "choose"
    CHOOSE_IN_SPLIT = "choose_in_split"
    CHOOSE_IN_TABPAGE = "choose_in_tabpage"
    CHOOSE_IN_VSPLIT = "choose_in_vsplit"
    STOP = "stop"
    TOGGLE_PREVIEW = "toggle_preview"
    TOGGLE_FILE_FILTER = "toggle_file_filter"
    TOGGLE_CWD_FILTER = "toggle_cwd_filter"
    TOGGLE_SHOW_HIDDEN = "toggle_show_hidden"
    RESET_FILTERS = "reset_filters"
    TOGGLE_HIDDEN = "toggle_hidden"


DEFAULT_MAPPINGS: Dict[str, str] = {
    # Navigation
    Action.JUMP_BACK.value: "<C-o>",
    Action.JUMP_FORWARD.value: "<C-i>",
    Action.JUMP_TO_TOP.value: "gg",
    Action.JUMP_TO_BOTTOM.value: "G",
    # Selection
    Action.CHOOSE.value: "<CR>",
    Action.CHOOSE_IN_SPLIT.value: "<C-s>",
    Action.CHOOSE_IN_TABPAGE.value: "<C-t>",
    Action.CHOOSE_IN_VSPLIT.value: "<C-v>",
    # Control
    Action.STOP.value: "<Esc>",
    Action.TOGGLE_PREVIEW.value: "p",
    # Filtering (reset when the picker closes)
    Action.TOGGLE_FILE_FILTER.value: "f",
    Action.TOGGLE_CWD_FILTER.value: "c",
    Action.TOGGLE_SHOW_HIDDEN.value: ".",
    Action.RESET_FILTERS.value: "r",
    # Hide management
    Action.TOGGLE_HIDDEN.value: "x",
}


@dataclass(frozen=True)
class Options:
    """Behaviour options."""

    cwd_only: bool = False
    wrap_edges: bool = False
    default_view: ViewMode = ViewMode.PREVIEW
    count_timeout_ms: int = 1000
    show_icons: bool = False
    log_level: str = "off"


Dimension = Union[int, float, None]


@dataclass(frozen=True)
class WindowConfig:
    """Picker window geometry.

    ``width`` and ``height`` are cell counts when given as ints and screen
    fractions when given as floats in (0, 1]. None means the default
    golden-ratio share of the screen.
    """

    width: Dimension = None
    height: Dimension = None
    border: str = "rounded"

    def compute(self, max_width: int, max_height: int) -> Tuple[int, int]:
        """Resolve the window size for a screen, accounting for the border."""
        width = _resolve_dimension(self.width, max_width)
        height = _resolve_dimension(self.height, max_height)
        # Keep room for the border
        width = max(1, min(width, max_width - 2))
        height = max(1, min(height, max_height - 2))
        return width, height


def _resolve_dimension(value: Dimension, available: int) -> int:
    if value is None:
        return math.floor(GOLDEN_RATIO * available)
    if isinstance(value, float):
        return math.floor(value * available)
    return value


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    options: Options = field(default_factory=Options)
    mappings: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_MAPPINGS))
    window: WindowConfig = field(default_factory=WindowConfig)

    def __post_init__(self) -> None:
        # Read-only view over a private copy
        object.__setattr__(self, "mappings", MappingProxyType(dict(self.mappings)))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Config":
        """Build a validated config, merging ``data`` over the defaults.

        Raises:
            ConfigError: if any field has the wrong shape
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("config", f"must be a table, got {type(data).__name__}")

        _check_keys("config", data, ("options", "mappings", "window"))
        options = _parse_options(data.get("options", {}))
        mappings = _parse_mappings(data.get("mappings", {}))
        window = _parse_window(data.get("window", {}))
        config = cls(options=options, mappings=mappings, window=window)
        # Duplicate keys are only detectable once everything is merged
        config.bindings()
        return config

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load config from file, or return defaults if there is none.

        Raises:
            ConfigError: if the file exists but is not a valid config
        """
        path = path or CONFIG_FILE
        if not path.exists():
            logger.debug("No config file at %s, using defaults", path)
            return cls()

        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError("config", f"in {path} is not valid JSON: {e}") from e
        except OSError as e:
            raise ConfigError("config", f"file {path} could not be read: {e}") from e
        logger.debug("Loaded config from %s", path)
        return cls.from_dict(data)

    def save(self, path: Optional[Path] = None) -> None:
        """Save config to file."""
        path = path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        options = {f.name: getattr(self.options, f.name) for f in fields(Options)}
        options["default_view"] = self.options.default_view.value
        return {
            "options": options,
            "mappings": dict(self.mappings),
            "window": {
                "width": self.window.width,
                "height": self.window.height,
                "border": self.window.border,
            },
        }

    def with_options(self, overrides: Optional[Dict[str, Any]]) -> "Config":
        """Return a copy with per-call option overrides applied and validated."""
        if not overrides:
            return self
        merged = self.to_dict()
        if not isinstance(overrides, dict):
            raise ConfigError("options", f"must be a table, got {type(overrides).__name__}")
        merged["options"].update(overrides)
        return Config.from_dict(merged)

    def bindings(self) -> Dict[KeySequence, Action]:
        """Canonical key sequence -> action table.

        Mappings whose notation cannot be canonicalized are dropped.

        Raises:
            ConfigError: if two actions end up on the same key sequence
        """
        table: Dict[KeySequence, Action] = {}
        for name, notation in self.mappings.items():
            keys = parse_keys(notation)
            if keys is None:
                logger.debug("Dropping mapping %s=%r: not a recognised key", name, notation)
                continue
            action = Action(name)
            other = table.get(keys)
            if other is not None:
                raise ConfigError(
                    f"mappings.{name}",
                    f'uses "{notation}" which is already bound to {other.value}',
                )
            table[keys] = action
        return table


def _check_keys(path: str, data: dict, allowed) -> None:
    for key in data:
        if key not in allowed:
            raise ConfigError(f"{path}.{key}", "is not a known field")


def _check_type(path: str, value: Any, expected: type, name: str) -> None:
    # bool is an int subclass; never accept it where a number is expected
    if expected is not bool and isinstance(value, bool):
        raise ConfigError(path, f"must be {name}, got bool")
    if not isinstance(value, expected):
        raise ConfigError(path, f"must be {name}, got {type(value).__name__}")


def _parse_options(data: Any) -> Options:
    _check_type("options", data, dict, "a table")
    _check_keys("options", data, [f.name for f in fields(Options)])
    defaults = Options()
    values: Dict[str, Any] = {}

    for name in ("cwd_only", "wrap_edges", "show_icons"):
        value = data.get(name, getattr(defaults, name))
        _check_type(f"options.{name}", value, bool, "boolean")
        values[name] = value

    view = data.get("default_view", defaults.default_view.value)
    if isinstance(view, ViewMode):
        view = view.value
    if view not in (ViewMode.LIST.value, ViewMode.PREVIEW.value):
        raise ConfigError("options.default_view", f'must be "list" or "preview", got "{view}"')
    values["default_view"] = ViewMode(view)

    timeout = data.get("count_timeout_ms", defaults.count_timeout_ms)
    _check_type("options.count_timeout_ms", timeout, int, "number")
    if timeout <= 0:
        raise ConfigError("options.count_timeout_ms", f"must be positive, got {timeout}")
    values["count_timeout_ms"] = timeout

    level = data.get("log_level", defaults.log_level)
    _check_type("options.log_level", level, str, "string")
    if level.lower() not in LOG_LEVELS:
        raise ConfigError(
            "options.log_level",
            f'must be one of: {", ".join(LOG_LEVELS)}, got "{level}"',
        )
    values["log_level"] = level.lower()

    return replace(defaults, **values)


def _parse_mappings(data: Any) -> Dict[str, str]:
    _check_type("mappings", data, dict, "a table")
    mappings = dict(DEFAULT_MAPPINGS)
    for name, notation in data.items():
        if not isinstance(name, str):
            raise ConfigError("mappings", f"keys must be strings, got {type(name).__name__}")
        if name not in mappings:
            raise ConfigError(f"mappings.{name}", "is not a known action")
        _check_type(f"mappings.{name}", notation, str, "string")
        if not notation:
            raise ConfigError(f"mappings.{name}", "must be a non-empty key string")
        mappings[name] = notation
    return mappings


def _parse_dimension(path: str, value: Any) -> Dimension:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(path, f"must be a positive integer or a fraction, got {value!r}")
    if isinstance(value, float):
        if not 0 < value <= 1:
            raise ConfigError(path, f"fraction must be in (0, 1], got {value}")
        return value
    if value <= 0:
        raise ConfigError(path, f"must be positive, got {value}")
    return value


def _parse_window(data: Any) -> WindowConfig:
    _check_type("window", data, dict, "a table")
    # Older configs nest geometry under "config"
    if "config" in data:
        inner = data["config"]
        if inner is None:
            inner = {}
        _check_type("window.config", inner, dict, "a table")
        data = dict(inner)
        prefix = "window.config"
    else:
        prefix = "window"
    _check_keys(prefix, data, ("width", "height", "border"))

    border = data.get("border", "rounded")
    _check_type(f"{prefix}.border", border, str, "string")
    if border not in BORDERS:
        raise ConfigError(f"{prefix}.border", f'must be one of: {", ".join(BORDERS)}, got "{border}"')

    return WindowConfig(
        width=_parse_dimension(f"{prefix}.width", data.get("width")),
        height=_parse_dimension(f"{prefix}.height", data.get("height")),
        border=border,
    )


def log_level_from_env(config: Config) -> str:
    """Effective log level: ``JUMPPACK_LOG_LEVEL`` wins over the config."""
    level = os.environ.get("JUMPPACK_LOG_LEVEL", "").strip().lower()
    if level in LOG_LEVELS:
        return level
    return config.options.log_level


def get_config(path: Optional[Path] = None) -> Config:
    """Get the application config."""
    return Config.load(path)
