"""UI package holding the saved-search view's controllers and widgets."""

from .bootstrap import SavedSearchView, create_saved_search_view
from .events import EventBus
from .messages import DEFAULT_MESSAGES, Messages

__all__ = [
    # Bootstrap
    "SavedSearchView",
    "create_saved_search_view",
    # Event Bus
    "EventBus",
    # Messages
    "Messages",
    "DEFAULT_MESSAGES",
]
