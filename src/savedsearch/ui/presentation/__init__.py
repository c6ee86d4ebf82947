"""Presentation layer for the saved-search view.

Presenters and widgets translate user gestures into events and reflect
published state back to the user:

    - ItemPresenter / ItemListPresenter: per-entry selection state
    - BusNotifier / QtNotifier: notices and confirmation prompts
    - SavedSearchPanel: the list with its "Save As" and "Save" triggers
"""

from __future__ import annotations

from .dialogs import BusNotifier, QtNotifier
from .item_presenter import ItemListPresenter, ItemPresenter
from .widgets import PanelItem, SavedSearchPanel

__all__ = [
    "BusNotifier",
    "ItemListPresenter",
    "ItemPresenter",
    "PanelItem",
    "QtNotifier",
    "SavedSearchPanel",
]
