"""Public entry point: one :class:`Jumppack` per host process."""

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from jumppack.config import Config
from jumppack.display import GeneralInfo, general_info
from jumppack.errors import ConfigError, JumppackError
from jumppack.filters import FilterContext
from jumppack.gateway import RenderGateway
from jumppack.hide import HiddenStore, get_store
from jumppack.instance import PickerInstance
from jumppack.jumplist import JumpEntry
from jumppack.loop import FocusTracker, InputChannel, Outcome, PickResult, run_loop
from jumppack.sources import JumpHistory, Source, create_source

logger = logging.getLogger(__name__)

MESSAGE_NO_JUMPS = "No jumps available"


@dataclass
class Selection:
    index: Optional[int]
    item: Optional[JumpEntry]


@dataclass
class PickerState:
    """Snapshot of the active session."""

    items: List[JumpEntry]
    selection: Selection
    general_info: GeneralInfo


def _validate_call(offset: Any, source: Optional[Source]) -> None:
    """Check per-call arguments before anything is drawn.

    Raises:
        ConfigError: naming the first offending field
    """
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise ConfigError("offset", f"must be an integer, got {offset!r}")
    if source is None:
        return
    if not isinstance(source.items, list):
        raise ConfigError("source.items", f"must be a list, got {type(source.items).__name__}")
    selection = source.initial_selection
    if isinstance(selection, bool) or not isinstance(selection, int):
        raise ConfigError("source.initial_selection", f"must be an integer, got {selection!r}")
    if source.cwd and not os.path.isdir(source.cwd):
        raise ConfigError("source.cwd", f"must be an existing directory, got \"{source.cwd}\"")


class Jumppack:
    """Jump history picker.

    Holds the configuration and at most one active session. Sessions run on
    the calling thread; :meth:`refresh`, :meth:`is_active` and
    :meth:`get_state` may be called from any thread.
    """

    def __init__(self, config: Optional[Config] = None, hidden_store: Optional[HiddenStore] = None):
        self.config = config or Config()
        self.hidden_store = hidden_store or get_store()
        self._lock = threading.Lock()
        self._instance: Optional[PickerInstance] = None
        self._channel: Optional[InputChannel] = None

    def setup(self, config: Optional[Dict[str, Any]] = None) -> Config:
        """Validate ``config`` against the defaults and install it.

        Raises:
            ConfigError: if the config is invalid; the old one stays in place
        """
        self.config = Config.from_dict(config)
        logger.debug("Configuration installed")
        return self.config

    def start(
        self,
        gateway: RenderGateway,
        channel: InputChannel,
        offset: int = -1,
        source: Optional[Source] = None,
        options: Optional[Dict[str, Any]] = None,
        history: Optional[JumpHistory] = None,
        track_focus: bool = True,
    ) -> PickResult:
        """Run a picker session and block until it ends.

        Args:
            gateway: Host that draws the picker and performs the jump
            channel: Where input events for the session arrive
            offset: Navigation offset to preselect (-1 is one Ctrl+O back)
            source: Ready-made items, instead of building them from ``history``
            options: Option overrides for this session only
            history: Jump history to navigate
            track_focus: End the session when the surface loses focus

        Returns:
            PickResult; ``Outcome.EMPTY`` when there is nothing to navigate

        Raises:
            ConfigError: if ``options``, ``offset`` or ``source`` are invalid
                (before anything is drawn)
            JumppackError: if a session is already active
        """
        logger.info("Starting jumplist picker (offset=%s)", offset)
        if self.is_active():
            raise JumppackError("a picker session is already active")

        config = self.config.with_options(options)
        _validate_call(offset, source)
        bindings = config.bindings()
        history = history or JumpHistory()

        if source is None:
            source = create_source(history, config, offset, self.hidden_store)
        if source is None or not source.items:
            gateway.notify(MESSAGE_NO_JUMPS, "info")
            return PickResult(item=None, outcome=Outcome.EMPTY)

        target = gateway.current_window()
        surface = gateway.open_surface(config.window)
        instance = PickerInstance(
            config,
            gateway,
            surface,
            source,
            bindings=bindings,
            target_window=target,
            filter_context=FilterContext(original_file=history.current_file, original_cwd=source.cwd),
            hidden_store=self.hidden_store,
        )
        with self._lock:
            self._instance = instance
            self._channel = channel
        instance.on_destroy(lambda: self._clear_active(instance))

        try:
            instance.set_items(source.items, source.initial_selection)
            if track_focus:
                instance.focus_tracker = FocusTracker(instance, channel)
                instance.focus_tracker.start()
        except Exception:
            instance.destroy()
            raise

        return run_loop(instance, channel)

    def _clear_active(self, instance: PickerInstance) -> None:
        with self._lock:
            if self._instance is instance:
                self._instance = None
                self._channel = None

    def is_active(self) -> bool:
        with self._lock:
            return self._instance is not None

    def refresh(self) -> None:
        """Ask the active session to re-layout; no-op when none is active."""
        with self._lock:
            channel = self._channel
        if channel is not None:
            channel.refresh()

    def get_state(self) -> Optional[PickerState]:
        with self._lock:
            instance = self._instance
        if instance is None:
            return None
        return PickerState(
            items=list(instance.items),
            selection=Selection(index=instance.current_index, item=instance.get_selection()),
            general_info=general_info(instance),
        )
