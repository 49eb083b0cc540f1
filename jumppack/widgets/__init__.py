"""Textual widgets for jumppack."""

from jumppack.widgets.jumplist_view import JumpListItem, JumpListView
from jumppack.widgets.picker_panel import PickerPanel
from jumppack.widgets.preview_view import PreviewView, build_preview
from jumppack.widgets.status_bar import StatusBar

__all__ = [
    "JumpListItem",
    "JumpListView",
    "PickerPanel",
    "PreviewView",
    "StatusBar",
    "build_preview",
]
