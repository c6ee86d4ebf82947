"""Event bus infrastructure for decoupled saved-search component communication.

The registry, the item presenters, the commit controller and the panel never
call each other directly for state changes; they publish and subscribe to the
events defined here.
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Generic,
    TypeVar,
    TYPE_CHECKING,
)
from weakref import WeakMethod

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from typing import DefaultDict

logger = logging.getLogger(__name__)

# Type variable for event types
E = TypeVar("E", bound="Event")

# Handler type: a callable that takes an event and returns None
Handler = Callable[[E], None]


@dataclass(slots=True)
class Event:
    """Base class for all events in the system.

    All event classes should inherit from this base class and use
    the @dataclass decorator with slots=True.

    Example::

        @dataclass(slots=True)
        class EntryAdded(Event):
            entry_id: str
            name: str
            index: int
    """

    pass


# =============================================================================
# Registry Events
# =============================================================================


@dataclass(slots=True)
class RegistryLoadingStarted(Event):
    """Emitted when a fetch collaborator starts refreshing the registry."""

    pass


@dataclass(slots=True)
class EntryAdded(Event):
    """Emitted when a saved search is appended to (or inserted in) the registry.

    Attributes:
        entry_id: Identity of the new entry.
        name: Display name of the new entry.
        index: Position of the entry after insertion.
    """

    entry_id: str
    name: str
    index: int


@dataclass(slots=True)
class EntryRemoved(Event):
    """Emitted when a saved search is removed from the registry.

    Attributes:
        entry_id: Identity of the removed entry.
    """

    entry_id: str


@dataclass(slots=True)
class EntryUpdated(Event):
    """Emitted when an existing entry's name or criteria were replaced.

    Attributes:
        entry_id: Identity of the updated entry.
        name: Display name after the update.
    """

    entry_id: str
    name: str


@dataclass(slots=True)
class RegistryReset(Event):
    """Emitted after the registry contents were replaced in bulk.

    Attributes:
        count: Number of entries after the reset.
    """

    count: int


@dataclass(slots=True)
class RegistryFailed(Event):
    """Emitted when the fetch collaborator reports an error.

    Attributes:
        reason: Human-readable failure description.
    """

    reason: str


# =============================================================================
# Selection Events
# =============================================================================


@dataclass(slots=True)
class ItemClicked(Event):
    """Emitted once per user click on an item presenter.

    Attributes:
        entry_id: Identity of the clicked entry.
    """

    entry_id: str


@dataclass(slots=True)
class SelectionCleared(Event):
    """Emitted when the active item loses its selection.

    This happens when the selection is cleared explicitly or when the active
    entry disappears from the registry.

    Attributes:
        entry_id: Identity of the entry that was active, if known.
    """

    entry_id: str | None = None


@dataclass(slots=True)
class SaveActionStateChanged(Event):
    """Emitted when the "save" trigger becomes enabled or disabled.

    Attributes:
        enabled: Whether the save trigger is currently enabled.
    """

    enabled: bool


# =============================================================================
# View Events
# =============================================================================


@dataclass(slots=True)
class AffordancesChanged(Event):
    """Emitted when the loading/empty/error indicators change visibility.

    Attributes:
        loading_visible: Whether the loading indicator is shown.
        empty_visible: Whether the "no favorites" indicator is shown.
        error_visible: Whether the fetch-error indicator is shown.
        error_message: Reason shown alongside the error indicator.
    """

    loading_visible: bool
    empty_visible: bool
    error_visible: bool = False
    error_message: str = ""


@dataclass(slots=True)
class NoticePosted(Event):
    """Emitted when a non-blocking informational notice should be shown.

    Attributes:
        message: The notice text to display to the user.
        level: Severity hint (``"info"`` for precondition notices).
    """

    message: str
    level: str = "info"


@dataclass(slots=True)
class ConfirmationRequested(Event):
    """Emitted when a yes/no confirmation must be presented to the user.

    Attributes:
        request: The ConfirmationRequest whose continuations resolve it.
    """

    request: Any


@dataclass(slots=True)
class CommitLaunched(Event):
    """Emitted right after the commit executor was handed a request.

    Attributes:
        mode: Search mode value ("basic" or "advanced").
        overwrite: True when an existing entry is being overwritten.
        entry_id: Identity of the overwritten entry, if any.
    """

    mode: str
    overwrite: bool
    entry_id: str | None = None


class EventBus(Generic[E]):
    """Synchronous, main-thread bus keyed by exact event class.

    Bound-method handlers are held weakly so a presenter or panel that goes
    away with its view stops receiving events without unsubscribing. Other
    callables are held as given. A handler that raises is logged and the
    remaining handlers still run.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: DefaultDict[type[Event], list[_Subscription]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Add ``handler`` for ``event_type``; subscribing twice delivers twice."""
        self._handlers[event_type].append(_Subscription(handler))
        logger.debug("%s subscribed to %s", _describe(handler), event_type.__name__)

    def unsubscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Drop the earliest subscription of ``handler``; unknown handlers are ignored."""
        subscriptions = self._handlers.get(event_type, [])
        for index, subscription in enumerate(subscriptions):
            if subscription.target() == handler:
                del subscriptions[index]
                logger.debug("%s unsubscribed from %s", _describe(handler), event_type.__name__)
                return

    def publish(self, event: E) -> None:
        event_type = type(event)
        subscriptions = self._handlers.get(event_type)
        if not subscriptions:
            return

        logger.debug("Publishing %s to %d handler(s)", event_type.__name__, len(subscriptions))
        # Handlers may subscribe or unsubscribe while the event is delivered
        for subscription in list(subscriptions):
            handler = subscription.target()
            if handler is None:
                continue
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "%s failed while handling %s", _describe(handler), event_type.__name__
                )
        subscriptions[:] = [sub for sub in subscriptions if sub.target() is not None]

    def clear(self) -> None:
        self._handlers.clear()

    def handler_count(self, event_type: type[E] | None = None) -> int:
        """Live subscriptions for ``event_type``, or across every type when omitted."""
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(subscriptions) for subscriptions in self._handlers.values())


class _Subscription:
    """A bus entry: a weak reference for bound methods, the callable otherwise."""

    __slots__ = ("_method", "_handler")

    def __init__(self, handler: Handler) -> None:
        self._method: WeakMethod | None = None
        self._handler: Handler | None = None
        if inspect.ismethod(handler):
            self._method = WeakMethod(handler)
        else:
            self._handler = handler

    def target(self) -> Handler | None:
        if self._method is not None:
            return self._method()
        return self._handler


def _describe(handler: Handler) -> str:
    if inspect.ismethod(handler):
        return f"{type(handler.__self__).__name__}.{handler.__name__}"
    return getattr(handler, "__qualname__", repr(handler))


__all__ = [
    # Core infrastructure
    "Event",
    "EventBus",
    "Handler",
    # Registry events
    "RegistryLoadingStarted",
    "EntryAdded",
    "EntryRemoved",
    "EntryUpdated",
    "RegistryReset",
    "RegistryFailed",
    # Selection events
    "ItemClicked",
    "SelectionCleared",
    "SaveActionStateChanged",
    # View events
    "AffordancesChanged",
    "NoticePosted",
    "ConfirmationRequested",
    "CommitLaunched",
]
