"""Per-entry presenters and the list container that scopes their selection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from ..events import (
    EntryAdded,
    EntryRemoved,
    EntryUpdated,
    ItemClicked,
    RegistryReset,
    SelectionCleared,
)

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..domain.entry_registry import EntryRegistry
    from ..events import EventBus
    from ..models.search_models import SavedSearchEntry

LOGGER = logging.getLogger(__name__)

ApplyValue = Callable[[Any], None]


class ItemPresenter:
    """Renders one saved search and tracks its own active state.

    A click marks the presenter active through the container's activation
    hook (which deactivates its siblings) and then publishes exactly one
    ``ItemClicked`` event.
    """

    __slots__ = ("_entry", "_bus", "_active", "_on_activate", "_apply_value")

    def __init__(
        self,
        entry: SavedSearchEntry,
        event_bus: EventBus,
        *,
        on_activate: Callable[["ItemPresenter"], None] | None = None,
        apply_value: ApplyValue | None = None,
    ) -> None:
        self._entry = entry
        self._bus = event_bus
        self._active = False
        self._on_activate = on_activate
        self._apply_value = apply_value

    @property
    def entry(self) -> SavedSearchEntry:
        return self._entry

    @property
    def entry_id(self) -> str:
        return self._entry.id

    @property
    def display_name(self) -> str:
        return self._entry.name

    @property
    def active(self) -> bool:
        return self._active

    def set_active(self, active: bool) -> None:
        self._active = bool(active)

    def rebind(self, entry: SavedSearchEntry) -> None:
        """Point the presenter at a newer version of the same entry."""
        self._entry = entry

    def click(self) -> None:
        if self._on_activate is not None:
            self._on_activate(self)
        else:
            self._active = True
        LOGGER.debug("Item clicked: id=%s", self._entry.id)
        self._bus.publish(ItemClicked(entry_id=self._entry.id))

    def apply(self) -> bool:
        """Load this entry's criteria into the search form, if a hook was given."""
        if self._apply_value is None:
            return False
        self._apply_value(self._entry.criteria)
        return True


class ItemListPresenter:
    """Keeps one presenter per registry entry with a single active scope.

    The list re-renders whenever the registry changes, preserving the active
    entry if it still exists. When the active entry disappears the list
    publishes ``SelectionCleared``.
    """

    _OBSERVED = (EntryAdded, EntryRemoved, EntryUpdated, RegistryReset)

    def __init__(
        self,
        registry: EntryRegistry,
        event_bus: EventBus,
        *,
        apply_value: ApplyValue | None = None,
    ) -> None:
        self._registry = registry
        self._bus = event_bus
        self._apply_value = apply_value
        self._presenters: list[ItemPresenter] = []
        self._active_id: str | None = None
        self._listeners: list[Callable[[], None]] = []
        for event_type in self._OBSERVED:
            event_bus.subscribe(event_type, self._on_registry_changed)
        self.render()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def presenters(self) -> tuple[ItemPresenter, ...]:
        return tuple(self._presenters)

    def presenter_for(self, entry_id: str) -> ItemPresenter | None:
        for presenter in self._presenters:
            if presenter.entry_id == entry_id:
                return presenter
        return None

    def active_presenters(self) -> tuple[ItemPresenter, ...]:
        return tuple(presenter for presenter in self._presenters if presenter.active)

    @property
    def active_id(self) -> str | None:
        return self._active_id

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def click(self, entry_id: str) -> bool:
        presenter = self.presenter_for(entry_id)
        if presenter is None:
            LOGGER.debug("ItemListPresenter.click: unknown id=%s", entry_id)
            return False
        presenter.click()
        return True

    def clear_selection(self) -> None:
        if self._active_id is None:
            return
        previous = self._active_id
        self._active_id = None
        for presenter in self._presenters:
            presenter.set_active(False)
        self._bus.publish(SelectionCleared(entry_id=previous))
        self._notify_listeners()

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback run after every re-render or selection change."""
        self._listeners.append(callback)

    def render(self) -> None:
        """Rebuild presenters from the registry, reusing existing ones by id."""
        existing = {presenter.entry_id: presenter for presenter in self._presenters}
        rendered: list[ItemPresenter] = []
        for entry in self._registry:
            presenter = existing.get(entry.id)
            if presenter is None:
                presenter = ItemPresenter(
                    entry,
                    self._bus,
                    on_activate=self._activate,
                    apply_value=self._apply_value,
                )
            else:
                presenter.rebind(entry)
            presenter.set_active(entry.id == self._active_id)
            rendered.append(presenter)
        self._presenters = rendered

        if self._active_id is not None and self.presenter_for(self._active_id) is None:
            previous = self._active_id
            self._active_id = None
            LOGGER.debug("Active entry %s no longer in registry; clearing selection", previous)
            self._bus.publish(SelectionCleared(entry_id=previous))
        self._notify_listeners()

    def dispose(self) -> None:
        for event_type in self._OBSERVED:
            self._bus.unsubscribe(event_type, self._on_registry_changed)
        self._listeners.clear()
        self._presenters = []

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    def _activate(self, target: ItemPresenter) -> None:
        for presenter in self._presenters:
            presenter.set_active(presenter is target)
        self._active_id = target.entry_id
        self._notify_listeners()

    def _on_registry_changed(self, event: object) -> None:
        self.render()

    def _notify_listeners(self) -> None:
        for callback in list(self._listeners):
            callback()


__all__ = ["ApplyValue", "ItemPresenter", "ItemListPresenter"]
