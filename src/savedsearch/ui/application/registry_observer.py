"""Keeps the loading/empty/error indicators in sync with the registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..events import (
    AffordancesChanged,
    EntryAdded,
    EntryRemoved,
    EntryUpdated,
    RegistryFailed,
    RegistryLoadingStarted,
    RegistryReset,
)
from ..models.search_models import AffordanceState, RegistryStatus

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..domain.entry_registry import EntryRegistry
    from ..events import EventBus

LOGGER = logging.getLogger(__name__)


class RegistryObserver:
    """Derives indicator visibility from the registry's tagged state.

    Until the first registry event arrives the loading indicator is shown.
    Once the registry settles the loading indicator hides. The "empty"
    indicator is shown iff the registry holds no entries, and a failure
    additionally shows the error indicator with its reason.

    Events Emitted:
        - AffordancesChanged: Whenever indicator visibility changes
    """

    _OBSERVED = (
        EntryAdded,
        EntryRemoved,
        EntryUpdated,
        RegistryReset,
        RegistryFailed,
        RegistryLoadingStarted,
    )

    def __init__(self, registry: EntryRegistry, event_bus: EventBus) -> None:
        self._registry = registry
        self._bus = event_bus
        self._state = AffordanceState()
        self._attached = False

    @property
    def affordances(self) -> AffordanceState:
        return self._state

    def attach(self) -> None:
        """Start observing the registry (called once the view has rendered)."""
        if self._attached:
            return
        for event_type in self._OBSERVED:
            self._bus.subscribe(event_type, self._on_registry_event)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        for event_type in self._OBSERVED:
            self._bus.unsubscribe(event_type, self._on_registry_event)
        self._attached = False

    def sync(self) -> AffordanceState:
        """Recompute the indicators from the current registry state."""
        state = self._registry.state
        if state.status is RegistryStatus.LOADING:
            next_state = AffordanceState(loading_visible=True)
        elif state.status is RegistryStatus.FAILED:
            next_state = AffordanceState(
                loading_visible=False,
                empty_visible=not state.entries,
                error_visible=True,
                error_message=state.reason or "",
            )
        else:
            next_state = AffordanceState(
                loading_visible=False,
                empty_visible=state.status is RegistryStatus.EMPTY,
            )

        if next_state != self._state:
            self._state = next_state
            LOGGER.debug(
                "Affordances: loading=%s, empty=%s, error=%s",
                next_state.loading_visible,
                next_state.empty_visible,
                next_state.error_visible,
            )
            self._bus.publish(AffordancesChanged(
                loading_visible=next_state.loading_visible,
                empty_visible=next_state.empty_visible,
                error_visible=next_state.error_visible,
                error_message=next_state.error_message,
            ))
        return self._state

    def _on_registry_event(self, event: object) -> None:
        self.sync()


__all__ = ["RegistryObserver"]
