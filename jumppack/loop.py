"""Input loop: events, the input channel, focus tracking and dispatch."""

import logging
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from jumppack import actions
from jumppack.config import Action
from jumppack.instance import PickerInstance
from jumppack.jumplist import JumpEntry

logger = logging.getLogger(__name__)

LOOP_MAX_ITERATIONS = 1_000_000
IDLE_REDRAW_INTERVAL = 0.25
FOCUS_CHECK_INTERVAL = 1.0

CHOOSE_ACTIONS = (
    Action.CHOOSE,
    Action.CHOOSE_IN_SPLIT,
    Action.CHOOSE_IN_TABPAGE,
    Action.CHOOSE_IN_VSPLIT,
)


@dataclass(frozen=True)
class Key:
    """One canonical key press."""

    key: str


@dataclass(frozen=True)
class Cancel:
    """End the session without a selection."""

    reason: str = ""


@dataclass(frozen=True)
class Refresh:
    """Re-layout and repaint without touching the selection."""


InputEvent = Union[Key, Cancel, Refresh]


class Outcome(str, Enum):
    CHOSEN = "chosen"
    STOPPED = "stopped"
    ABORTED = "aborted"
    EMPTY = "empty"


@dataclass
class PickResult:
    """How a picker session ended."""

    item: Optional[JumpEntry]
    outcome: Outcome
    error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.item is not None and self.error is None


class InputChannel:
    """Thread-safe queue of input events for the dispatcher.

    ``is_waiting`` is True only while the dispatcher is blocked in
    :meth:`wait`.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[InputEvent]" = queue.Queue()
        self._waiting = threading.Event()

    @property
    def is_waiting(self) -> bool:
        return self._waiting.is_set()

    def put(self, event: InputEvent) -> None:
        self._queue.put(event)

    def send_key(self, key: str) -> None:
        self.put(Key(key))

    def send_keys(self, *keys: str) -> None:
        for key in keys:
            self.put(Key(key))

    def cancel(self, reason: str = "") -> None:
        self.put(Cancel(reason))

    def refresh(self) -> None:
        self.put(Refresh())

    def wait(self, timeout: Optional[float] = None) -> Optional[InputEvent]:
        """Next event, or None when ``timeout`` passes first."""
        self._waiting.set()
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        finally:
            self._waiting.clear()

    def clear(self) -> None:
        """Drop queued events left over from an earlier session."""
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return


class FocusTracker:
    """Ends a session when the picker surface loses focus.

    A lost focus while the dispatcher waits for input becomes a
    :class:`Cancel` event; otherwise the instance is torn down directly.
    """

    def __init__(
        self,
        instance: PickerInstance,
        channel: InputChannel,
        interval: float = FOCUS_CHECK_INTERVAL,
    ):
        self.instance = instance
        self.channel = channel
        self.interval = interval
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name="jumppack-focus", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.interval * 2)

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            if self.check():
                return

    def check(self) -> bool:
        """Look at the focus once. Returns True when tracking is over."""
        instance = self.instance
        if instance.destroyed:
            return True
        if instance.gateway.has_focus(instance.surface):
            return False

        logger.debug("Focus lost")
        if self.channel.is_waiting:
            self.channel.cancel("focus lost")
        else:
            instance.destroy()
        return True


def is_count_digit(instance: PickerInstance, key: str) -> bool:
    """Digits 1-9 start a count; 0 only extends one already pending."""
    if len(key) != 1 or not key.isdigit() or instance.pending_keys:
        return False
    return key != "0" or bool(instance.pending_count)


def resolve_key(instance: PickerInstance, key: str) -> Tuple[Optional[Action], bool]:
    """Match ``key`` against the bindings, honouring a pending prefix.

    Returns:
        (action, is_prefix): the bound action if the keys so far complete a
        binding, or is_prefix True when they start a longer one
    """
    keys = instance.pending_keys + (key,)
    instance.pending_keys = ()

    action = instance.bindings.get(keys)
    if action is not None:
        return action, False

    if any(len(seq) > len(keys) and seq[: len(keys)] == keys for seq in instance.bindings):
        instance.pending_keys = keys
        return None, True

    # A broken sequence falls back to the last key alone
    if len(keys) > 1:
        return resolve_key(instance, key)
    return None, False


def _next_event(instance: PickerInstance, channel: InputChannel) -> InputEvent:
    while True:
        event = channel.wait(IDLE_REDRAW_INTERVAL)
        if event is not None:
            return event
        if instance.destroyed:
            return Cancel("destroyed")
        if instance.expire_count():
            instance.update()
        elif instance.surface.is_valid():
            instance.surface.redraw()


def run_loop(instance: PickerInstance, channel: InputChannel) -> PickResult:
    """Dispatch input to ``instance`` until an action ends the session.

    The instance is always destroyed before this returns. Errors raised by
    the gateway's ``choose`` are reported after teardown and carried on the
    result.
    """
    outcome = Outcome.ABORTED
    item: Optional[JumpEntry] = None

    try:
        for _ in range(LOOP_MAX_ITERATIONS):
            if instance.destroyed:
                break
            instance.update()

            event = _next_event(instance, channel)
            if isinstance(event, Cancel):
                logger.debug("Cancelled: %s", event.reason or "interrupt")
                break
            if isinstance(event, Refresh):
                instance.update(update_window=True)
                continue

            key = event.key
            if is_count_digit(instance, key):
                instance.add_count_digit(key)
                continue

            action, is_prefix = resolve_key(instance, key)
            if is_prefix:
                continue
            if action is None:
                instance.clear_count()
                continue

            count = 1 if action is Action.STOP else instance.take_count()
            if not actions.execute(instance, action, count):
                continue

            if instance.error is not None:
                item = instance.get_selection()
            elif action in CHOOSE_ACTIONS:
                item = instance.get_selection()
                outcome = Outcome.CHOSEN if item is not None else Outcome.ABORTED
            else:
                item = instance.get_selection()
                outcome = Outcome.STOPPED
            break
        else:
            logger.warning("Input loop hit the iteration ceiling")
    finally:
        instance.destroy()

    error = instance.error
    if error is not None:
        instance.gateway.report_error(f"Error during choose action: {error}")
    logger.info("Picker finished: %s", outcome.value)
    return PickResult(item=item, outcome=outcome, error=error)
