"""Picker actions.

Every action takes the instance and the pending count and returns True when
the picker should stop.
"""

import logging
from typing import Callable, Dict, Optional

from jumppack.config import Action
from jumppack.gateway import SPLIT_COMMAND, TABPAGE_COMMAND, VSPLIT_COMMAND
from jumppack.instance import PickerInstance

logger = logging.getLogger(__name__)

ActionHandler = Callable[[PickerInstance, int], bool]


def jump_back(instance: PickerInstance, count: int) -> bool:
    # Older entries sit further down the list
    instance.move_selection(count)
    return False


def jump_forward(instance: PickerInstance, count: int) -> bool:
    instance.move_selection(-count)
    return False


def jump_to_top(instance: PickerInstance, count: int) -> bool:
    """Select the newest entry (ignores the count)."""
    instance.move_selection(0, to=0)
    return False


def jump_to_bottom(instance: PickerInstance, count: int) -> bool:
    """Select the oldest entry (ignores the count)."""
    if instance.items:
        instance.move_selection(0, to=len(instance.items) - 1)
    return False


def choose_with_action(instance: PickerInstance, pre_command: Optional[str] = None) -> bool:
    """Hand the selection to the gateway, optionally in a new window.

    Returns:
        True to stop the picker: always, unless the gateway's ``choose``
        returned a truthy value to keep it open
    """
    item = instance.get_selection()
    if item is None:
        return True

    try:
        if pre_command:
            window = instance.gateway.open_window(instance.target_window, pre_command)
            if window is not None:
                instance.target_window = window
        keep_open = instance.gateway.choose(item)
    except Exception as e:
        # Reported once the picker is torn down
        logger.exception("Error during choose action")
        instance.error = e
        return True
    return not keep_open


def choose(instance: PickerInstance, count: int) -> bool:
    return choose_with_action(instance)


def choose_in_split(instance: PickerInstance, count: int) -> bool:
    return choose_with_action(instance, SPLIT_COMMAND)


def choose_in_tabpage(instance: PickerInstance, count: int) -> bool:
    return choose_with_action(instance, TABPAGE_COMMAND)


def choose_in_vsplit(instance: PickerInstance, count: int) -> bool:
    return choose_with_action(instance, VSPLIT_COMMAND)


def stop(instance: PickerInstance, count: int) -> bool:
    """Close the picker, or only clear the count when one is pending."""
    if instance.pending_count:
        instance.clear_count()
        instance.render()
        return False
    return True


def toggle_preview(instance: PickerInstance, count: int) -> bool:
    instance.toggle_view()
    return False


def toggle_file_filter(instance: PickerInstance, count: int) -> bool:
    instance.filters.toggle_file()
    instance.apply_filters()
    return False


def toggle_cwd_filter(instance: PickerInstance, count: int) -> bool:
    instance.filters.toggle_cwd()
    instance.apply_filters()
    return False


def toggle_show_hidden(instance: PickerInstance, count: int) -> bool:
    instance.filters.toggle_hidden()
    instance.apply_filters()
    return False


def reset_filters(instance: PickerInstance, count: int) -> bool:
    instance.filters.reset()
    instance.apply_filters()
    return False


def toggle_hidden(instance: PickerInstance, count: int) -> bool:
    """Hide or unhide the selected entry for the rest of the process."""
    item = instance.get_selection()
    if item is None:
        return False

    hidden = instance.hidden_store.toggle(item)
    instance.hidden_store.mark_items(instance.original_items)
    instance.hidden_store.mark_items(instance.items)
    instance.apply_filters()
    instance.gateway.notify(f"{'Hidden' if hidden else 'Unhidden'}: {item.path}:{item.line}", "info")
    return False


ACTIONS: Dict[Action, ActionHandler] = {
    Action.JUMP_BACK: jump_back,
    Action.JUMP_FORWARD: jump_forward,
    Action.JUMP_TO_TOP: jump_to_top,
    Action.JUMP_TO_BOTTOM: jump_to_bottom,
    Action.CHOOSE: choose,
    Action.CHOOSE_IN_SPLIT: choose_in_split,
    Action.CHOOSE_IN_TABPAGE: choose_in_tabpage,
    Action.CHOOSE_IN_VSPLIT: choose_in_vsplit,
    Action.STOP: stop,
    Action.TOGGLE_PREVIEW: toggle_preview,
    Action.TOGGLE_FILE_FILTER: toggle_file_filter,
    Action.TOGGLE_CWD_FILTER: toggle_cwd_filter,
    Action.TOGGLE_SHOW_HIDDEN: toggle_show_hidden,
    Action.RESET_FILTERS: reset_filters,
    Action.TOGGLE_HIDDEN: toggle_hidden,
}


def execute(instance: PickerInstance, action: Action, count: int = 1) -> bool:
    """Run ``action``; returns True when the picker should stop."""
    handler = ACTIONS.get(action)
    if handler is None:
        logger.warning("No handler for action %s", action)
        return False
    logger.debug("Action %s (count=%d)", action.value, count)
    return handler(instance, count)
