"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from savedsearch.ui.domain.entry_registry import EntryRegistry
from savedsearch.ui.events import EventBus
from tests.helpers import FakeForm, make_entry


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def registry(event_bus: EventBus) -> EntryRegistry:
    return EntryRegistry(event_bus)


@pytest.fixture
def populated_registry(event_bus: EventBus) -> EntryRegistry:
    return EntryRegistry(
        event_bus,
        [
            make_entry("g1", "Open bugs", type="issue", query="state:open"),
            make_entry("g2", "My tasks", tag="mine"),
        ],
    )


@pytest.fixture
def form() -> FakeForm:
    return FakeForm()
