"""Saved-search view bootstrap.

This module provides the factory that creates and wires together the
components of one saved-search view:

1. Creates (or reuses) the event bus and the entry registry
2. Creates the item list presenter
3. Creates the commit controller and the registry observer
4. Optionally creates the panel widget
5. Triggers the initial fetch

Usage:
    from savedsearch.ui.bootstrap import create_saved_search_view

    view = create_saved_search_view(
        accessor=search_form.get_value,
        notifier=QtNotifier(parent_provider=lambda: window),
        commit_executor=executor,
        fetch_collection=fetcher,
    )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from ..services.settings import Settings
from .application.registry_observer import RegistryObserver
from .application.save_search_ops import SelectionCommitController
from .domain.entry_registry import EntryRegistry
from .events import EventBus
from .models.search_models import EnableMode, SearchMode
from .presentation.item_presenter import ItemListPresenter
from .presentation.widgets.saved_search_panel import SavedSearchPanel

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from .application.save_search_ops import CommitExecutor, CriteriaAccessor, Notifier
    from .messages import Messages
    from .presentation.item_presenter import ApplyValue

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SavedSearchView:
    """Handles to every component of a wired saved-search view."""

    event_bus: EventBus
    registry: EntryRegistry
    items: ItemListPresenter
    controller: SelectionCommitController
    observer: RegistryObserver
    panel: SavedSearchPanel | None = None
    fetch_collection: Callable[[], None] | None = None

    def refresh(self) -> None:
        """Show the loading indicator and ask the fetch collaborator for data."""
        if self.fetch_collection is None:
            _LOGGER.debug("No fetch collaborator configured; nothing to refresh")
            return
        self.registry.begin_loading()
        try:
            self.fetch_collection()
        except Exception as exc:
            _LOGGER.exception("Fetching saved searches failed")
            self.registry.fail(str(exc) or type(exc).__name__)

    def dispose(self) -> None:
        """Tear down subscriptions when the owning view closes."""
        if self.panel is not None:
            self.panel.dispose()
        self.controller.dispose()
        self.observer.detach()
        self.items.dispose()


def create_saved_search_view(
    *,
    accessor: CriteriaAccessor,
    notifier: Notifier,
    commit_executor: CommitExecutor,
    fetch_collection: Callable[[], None] | None = None,
    registry: EntryRegistry | None = None,
    event_bus: EventBus | None = None,
    settings: Settings | None = None,
    messages: Messages | None = None,
    apply_value: ApplyValue | None = None,
    with_panel: bool = False,
    parent: Any | None = None,
    enable_qt: bool | None = None,
    initial_fetch: bool = True,
) -> SavedSearchView:
    """Create and wire the saved-search view components.

    Args:
        accessor: Zero-argument callable returning the current search criteria.
        notifier: Notice/confirmation collaborator.
        commit_executor: Collaborator that performs create/overwrite.
        fetch_collection: Optional fetch collaborator refreshing the registry.
        registry: Existing registry; a new one is created on ``event_bus`` when None.
        event_bus: Existing bus; defaults to the registry's bus, then a new one.
        settings: Settings providing search mode, enable mode and prompt flags.
        messages: Notice/prompt texts.
        apply_value: Hook loading an entry's criteria back into the search form.
        with_panel: Build a :class:`SavedSearchPanel` as well.
        parent: Parent widget for the panel.
        enable_qt: Force Qt widgets on/off for the panel.
        initial_fetch: Trigger ``fetch_collection`` right away.

    Returns:
        The wired :class:`SavedSearchView`.
    """
    active_settings = settings or Settings()
    if event_bus is not None:
        bus = event_bus
    elif registry is not None:
        bus = registry.event_bus
    else:
        bus = EventBus()
    active_registry = registry if registry is not None else EntryRegistry(bus)

    items = ItemListPresenter(active_registry, bus, apply_value=apply_value)
    controller = SelectionCommitController(
        active_registry,
        accessor,
        notifier,
        commit_executor,
        bus,
        mode=SearchMode.parse(active_settings.search_mode, SearchMode.BASIC),
        enable_mode=EnableMode.parse(active_settings.save_enable_mode, EnableMode.LATCH),
        messages=messages,
        confirm_html=active_settings.confirm_html,
        confirm_modal=active_settings.confirm_modal,
    )
    observer = RegistryObserver(active_registry, bus)

    panel: SavedSearchPanel | None = None
    if with_panel:
        panel = SavedSearchPanel(controller, items, bus, parent=parent, enable_qt=enable_qt)

    observer.attach()
    view = SavedSearchView(
        event_bus=bus,
        registry=active_registry,
        items=items,
        controller=controller,
        observer=observer,
        panel=panel,
        fetch_collection=fetch_collection,
    )
    _LOGGER.debug(
        "Saved search view wired (mode=%s, enable_mode=%s, entries=%d)",
        controller.mode.value,
        controller.enable_mode.value,
        len(active_registry),
    )

    if fetch_collection is not None and initial_fetch:
        view.refresh()
    elif fetch_collection is None:
        observer.sync()
    return view


__all__ = ["SavedSearchView", "create_saved_search_view"]
