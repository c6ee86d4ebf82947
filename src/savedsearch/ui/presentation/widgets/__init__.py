"""Widgets for the saved-search presentation layer."""

from .saved_search_panel import PanelItem, SavedSearchPanel

__all__ = ["PanelItem", "SavedSearchPanel"]
