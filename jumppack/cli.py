"""Command line entry point."""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from jumppack.app import JumppackApp
from jumppack.config import LOG_LEVELS, Config, get_config, log_level_from_env
from jumppack.errors import ConfigError, HistoryError
from jumppack.jumplist import JumpEntry
from jumppack.loop import Outcome, PickResult
from jumppack.picker import MESSAGE_NO_JUMPS
from jumppack.sources import collect_jumps, load_history

logger = logging.getLogger(__name__)

EXIT_CHOSEN = 0
EXIT_CANCELLED = 1
EXIT_CONFIG_ERROR = 2
EXIT_EMPTY = 3

FORMATS = ("path", "vim", "json")

LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}


def log_file_path() -> Path:
    state_home = os.environ.get("XDG_STATE_HOME") or os.path.expanduser("~/.local/state")
    return Path(state_home) / "jumppack" / "jumppack.log"


def configure_logging(level: str) -> Optional[Path]:
    """Send the package's log records to the log file at ``level``.

    The terminal belongs to the TUI, so nothing is logged to stderr.

    Returns:
        The log file path, or None when logging is off
    """
    package_logger = logging.getLogger("jumppack")
    package_logger.propagate = False
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if level not in LEVELS:
        package_logger.addHandler(logging.NullHandler())
        package_logger.setLevel(logging.CRITICAL + 1)
        return None

    path = log_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(LEVELS[level])
    return path


def vim_command(item: JumpEntry, pre_command: Optional[str] = None) -> str:
    """Ex command that replays the jump in Vim or Neovim."""
    if item.offset < 0:
        command = f'execute "normal! {abs(item.offset)}\\<C-o>"'
    elif item.offset > 0:
        command = f'execute "normal! {item.offset}\\<C-i>"'
    else:
        command = ""
    if pre_command:
        return f"{pre_command} | {command}" if command else pre_command
    return command


def format_result(item: JumpEntry, fmt: str, pre_command: Optional[str] = None) -> str:
    if fmt == "vim":
        return vim_command(item, pre_command)
    if fmt == "json":
        data: Dict[str, Any] = {"item": item.to_dict(), "command": pre_command}
        return json.dumps(data)
    return f"{item.path}:{item.line}:{item.column}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jumppack", description="Jump history picker (Textual)")
    parser.add_argument("history", help="Jump history JSON exported by the editor ('-' for stdin)")
    parser.add_argument("--offset", type=int, default=-1, help="Jump offset to preselect (default: -1)")
    parser.add_argument("--config", type=Path, default=None, help="Config file (default: ~/.config/jumppack/config.json)")
    parser.add_argument("--cwd", default=None, help="Working directory for relative paths and filters")
    parser.add_argument("--format", choices=FORMATS, default="path", help="Output format for the chosen jump")
    parser.add_argument("--view", choices=("list", "preview"), default=None, help="Initial view")
    parser.add_argument("--wrap-edges", action="store_true", default=None, help="Wrap around at list edges")
    parser.add_argument("--cwd-only", action="store_true", default=None, help="Only jumps inside the working directory")
    parser.add_argument("--no-track-focus", action="store_true", help="Keep running when the terminal loses focus")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None, help="Log level for the log file")
    return parser


def _option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.view is not None:
        overrides["default_view"] = args.view
    if args.wrap_edges is not None:
        overrides["wrap_edges"] = True
    if args.cwd_only is not None:
        overrides["cwd_only"] = True
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config: Config = get_config(args.config).with_options(_option_overrides(args))
        history = load_history(args.history)
    except (ConfigError, HistoryError) as e:
        print(f"jumppack: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    level = args.log_level or log_level_from_env(config)
    log_path = configure_logging(level)
    if log_path is not None:
        logger.info("Logging to %s at level %s", log_path, level)

    if args.cwd:
        history.cwd = os.path.abspath(os.path.expanduser(args.cwd))

    if not collect_jumps(history, config):
        print(f"jumppack: {MESSAGE_NO_JUMPS}", file=sys.stderr)
        return EXIT_EMPTY

    app = JumppackApp(history, config, offset=args.offset, track_focus=not args.no_track_focus)
    result: Optional[PickResult] = app.run()

    for message in app.gateway.errors:
        print(f"jumppack: {message}", file=sys.stderr)

    if result is None:
        return EXIT_CANCELLED
    if result.outcome is Outcome.EMPTY:
        print(f"jumppack: {MESSAGE_NO_JUMPS}", file=sys.stderr)
        return EXIT_EMPTY
    if result.outcome is not Outcome.CHOSEN or result.item is None or result.error is not None:
        return EXIT_CANCELLED

    print(format_result(result.item, args.format, app.gateway.pre_command))
    return EXIT_CHOSEN


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
