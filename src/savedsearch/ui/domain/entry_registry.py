"""Entry registry domain manager.

Holds the ordered collection of saved searches known to the view and emits
events on every mutation. This is the single source of truth for which
entries exist; presenters and the commit controller only read from it.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Iterator

from ..events import (
    EntryAdded,
    EntryRemoved,
    EntryUpdated,
    EventBus,
    RegistryFailed,
    RegistryLoadingStarted,
    RegistryReset,
)
from ..models.search_models import (
    RegistryState,
    RegistryStatus,
    SavedSearchEntry,
    SearchCriteria,
)

LOGGER = logging.getLogger(__name__)


class EntryRegistry:
    """Domain manager for the saved-search collection.

    Entries are kept in insertion order and are unique by ``id``. Adding an
    entry whose id already exists replaces it in place, the way a collection
    merge would.

    Events Emitted:
        - RegistryLoadingStarted: When a refresh begins
        - EntryAdded: When a new entry is inserted
        - EntryUpdated: When an existing entry is replaced
        - EntryRemoved: When an entry is removed
        - RegistryReset: After a bulk replace
        - RegistryFailed: When the fetch collaborator reports an error
    """

    def __init__(
        self,
        event_bus: EventBus,
        entries: Iterable[SavedSearchEntry] | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            event_bus: The event bus for publishing events.
            entries: Optional initial contents; no events are emitted for them.
        """
        self._bus = event_bus
        self._entries: list[SavedSearchEntry] = _dedupe(entries or ())
        self._status = (
            RegistryStatus.POPULATED if self._entries else RegistryStatus.EMPTY
        )
        self._failure: str | None = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SavedSearchEntry]:
        return iter(tuple(self._entries))

    def __contains__(self, entry_id: object) -> bool:
        return self.index_of(entry_id) >= 0  # type: ignore[arg-type]

    @property
    def state(self) -> RegistryState:
        """Tagged snapshot of the registry contents and status."""
        entries = tuple(self._entries)
        if self._status is RegistryStatus.LOADING:
            return RegistryState.loading(entries)
        if self._status is RegistryStatus.FAILED:
            return RegistryState.failed(self._failure or "", entries)
        return RegistryState.from_entries(entries)

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def status(self) -> RegistryStatus:
        return self._status

    def entries(self) -> tuple[SavedSearchEntry, ...]:
        return tuple(self._entries)

    def get(self, entry_id: str) -> SavedSearchEntry | None:
        index = self.index_of(entry_id)
        if index < 0:
            return None
        return self._entries[index]

    def index_of(self, entry_id: str) -> int:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        return -1

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def begin_loading(self) -> None:
        """Mark the registry as being refreshed by the fetch collaborator.

        Emits:
            RegistryLoadingStarted
        """
        self._status = RegistryStatus.LOADING
        self._failure = None
        LOGGER.debug("EntryRegistry.begin_loading: %d entries held", len(self._entries))
        self._bus.publish(RegistryLoadingStarted())

    def add(self, entry: SavedSearchEntry, *, index: int | None = None) -> SavedSearchEntry:
        """Insert ``entry``, or replace the existing entry with the same id.

        Args:
            entry: The entry to add.
            index: Optional insert position; appends when omitted.

        Returns:
            The stored entry.

        Emits:
            EntryAdded: For a new id.
            EntryUpdated: When an entry with the same id already existed.
        """
        existing = self.index_of(entry.id)
        if existing >= 0:
            self._entries[existing] = entry
            self._settle_status()
            LOGGER.debug("EntryRegistry.add: merged existing entry id=%s", entry.id)
            self._bus.publish(EntryUpdated(entry_id=entry.id, name=entry.name))
            return entry

        if index is None or index >= len(self._entries):
            self._entries.append(entry)
            position = len(self._entries) - 1
        else:
            position = max(index, 0)
            self._entries.insert(position, entry)
        self._settle_status()

        LOGGER.debug(
            "EntryRegistry.add: id=%s, name=%s, index=%d",
            entry.id,
            entry.name,
            position,
        )
        self._bus.publish(EntryAdded(entry_id=entry.id, name=entry.name, index=position))
        return entry

    def update(
        self,
        entry_id: str,
        *,
        name: str | None = None,
        criteria: SearchCriteria | Any = None,
    ) -> SavedSearchEntry:
        """Replace the name and/or criteria of an existing entry.

        Raises:
            KeyError: If no entry has ``entry_id``.

        Emits:
            EntryUpdated
        """
        index = self.index_of(entry_id)
        if index < 0:
            raise KeyError(entry_id)

        current = self._entries[index]
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if criteria is not None:
            changes["criteria"] = SearchCriteria.coerce(criteria)
        updated = replace(current, **changes) if changes else current
        self._entries[index] = updated

        LOGGER.debug("EntryRegistry.update: id=%s, fields=%s", entry_id, sorted(changes))
        self._bus.publish(EntryUpdated(entry_id=updated.id, name=updated.name))
        return updated

    def remove(self, entry_id: str) -> SavedSearchEntry | None:
        """Remove an entry by id.

        Returns:
            The removed entry, or None if it was not present.

        Emits:
            EntryRemoved: Only when an entry was actually removed.
        """
        index = self.index_of(entry_id)
        if index < 0:
            LOGGER.debug("EntryRegistry.remove: unknown id=%s", entry_id)
            return None

        removed = self._entries.pop(index)
        self._settle_status()
        LOGGER.debug("EntryRegistry.remove: id=%s, remaining=%d", entry_id, len(self._entries))
        self._bus.publish(EntryRemoved(entry_id=entry_id))
        return removed

    def reset(self, entries: Iterable[SavedSearchEntry] = ()) -> None:
        """Replace all entries in bulk.

        Duplicate ids keep the last occurrence at the first occurrence's
        position.

        Emits:
            RegistryReset
        """
        self._entries = _dedupe(entries)
        self._failure = None
        self._settle_status(force=True)
        LOGGER.debug("EntryRegistry.reset: %d entries", len(self._entries))
        self._bus.publish(RegistryReset(count=len(self._entries)))

    def fail(self, reason: str) -> None:
        """Record a fetch failure, keeping whatever entries are already held.

        Emits:
            RegistryFailed
        """
        self._status = RegistryStatus.FAILED
        self._failure = reason
        LOGGER.warning("Saved search registry failed to load: %s", reason)
        self._bus.publish(RegistryFailed(reason=reason))

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    def _settle_status(self, *, force: bool = False) -> None:
        # Only a refetch (reset or begin_loading) leaves FAILED
        if self._status is RegistryStatus.FAILED and not force:
            return
        self._status = (
            RegistryStatus.POPULATED if self._entries else RegistryStatus.EMPTY
        )
        if self._status is RegistryStatus.POPULATED:
            self._failure = None


def _dedupe(entries: Iterable[SavedSearchEntry]) -> list[SavedSearchEntry]:
    ordered: dict[str, SavedSearchEntry] = {}
    for entry in entries:
        ordered[entry.id] = entry
    return list(ordered.values())


__all__ = ["EntryRegistry"]
