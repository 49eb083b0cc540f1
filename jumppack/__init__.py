"""Jump history picker with list and preview views."""

from jumppack.config import Action, Config, Options, ViewMode, WindowConfig
from jumppack.errors import ConfigError, HistoryError, JumppackError
from jumppack.gateway import RenderGateway, Surface
from jumppack.jumplist import JumpEntry, RawJump, find_target_offset, normalize_jumps
from jumppack.loop import InputChannel, Outcome, PickResult
from jumppack.picker import Jumppack, PickerState
from jumppack.sources import JumpHistory, Source

__version__ = "0.1.0"

__all__ = [
    "Action",
    "Config",
    "ConfigError",
    "HistoryError",
    "InputChannel",
    "JumpEntry",
    "JumpHistory",
    "Jumppack",
    "JumppackError",
    "Options",
    "Outcome",
    "PickResult",
    "PickerState",
    "RawJump",
    "RenderGateway",
    "Source",
    "Surface",
    "ViewMode",
    "WindowConfig",
    "find_target_offset",
    "normalize_jumps",
]
