"""Shared test helpers and stub classes.

Import from here instead of duplicating these classes in individual test files.
"""

from __future__ import annotations

from typing import Any

from savedsearch.ui.events import Event, EventBus
from savedsearch.ui.models.search_models import SavedSearchEntry, SearchCriteria


class EventRecorder:
    """Collects every published event of the subscribed types."""

    def __init__(self, bus: EventBus, *event_types: type[Event]) -> None:
        self.events: list[Any] = []
        for event_type in event_types:
            bus.subscribe(event_type, self.events.append)


class FakeForm:
    """Stand-in for the search form the accessor reads from."""

    def __init__(self, **fields: Any) -> None:
        self.value: dict[str, Any] = dict(fields)

    def __call__(self) -> dict[str, Any]:
        return dict(self.value)


def make_entry(entry_id: str, name: str | None = None, **criteria: Any) -> SavedSearchEntry:
    return SavedSearchEntry(
        id=entry_id,
        name=name or entry_id.upper(),
        criteria=SearchCriteria(**criteria),
    )
