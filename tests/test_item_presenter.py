"""Tests for the item presenters and their single-active scope."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from savedsearch.ui.domain.entry_registry import EntryRegistry
from savedsearch.ui.events import EventBus, ItemClicked, SelectionCleared
from savedsearch.ui.models.search_models import SearchCriteria
from savedsearch.ui.presentation.item_presenter import ItemListPresenter, ItemPresenter
from tests.helpers import EventRecorder, make_entry


@pytest.fixture
def items(populated_registry: EntryRegistry, event_bus: EventBus) -> ItemListPresenter:
    return ItemListPresenter(populated_registry, event_bus)


class TestItemPresenter:
    def test_click_publishes_exactly_one_event(self, event_bus: EventBus) -> None:
        recorder = EventRecorder(event_bus, ItemClicked)
        presenter = ItemPresenter(make_entry("g1"), event_bus)

        presenter.click()

        assert presenter.active is True
        assert recorder.events == [ItemClicked(entry_id="g1")]

    def test_apply_without_hook(self, event_bus: EventBus) -> None:
        presenter = ItemPresenter(make_entry("g1"), event_bus)
        assert presenter.apply() is False

    def test_apply_loads_criteria(self, event_bus: EventBus) -> None:
        hook = MagicMock()
        presenter = ItemPresenter(make_entry("g1", tag="mine"), event_bus, apply_value=hook)

        assert presenter.apply() is True
        hook.assert_called_once_with(SearchCriteria(tag="mine"))


class TestItemListPresenter:
    def test_renders_one_presenter_per_entry(self, items: ItemListPresenter) -> None:
        assert [p.display_name for p in items.presenters()] == ["Open bugs", "My tasks"]
        assert items.active_presenters() == ()

    def test_at_most_one_active(self, items: ItemListPresenter) -> None:
        items.click("g1")
        items.click("g2")
        items.click("g1")

        assert [p.entry_id for p in items.active_presenters()] == ["g1"]
        assert items.active_id == "g1"

    def test_click_unknown_id(self, items: ItemListPresenter, event_bus: EventBus) -> None:
        recorder = EventRecorder(event_bus, ItemClicked)
        assert items.click("missing") is False
        assert recorder.events == []

    def test_each_click_publishes_once(self, items: ItemListPresenter, event_bus: EventBus) -> None:
        recorder = EventRecorder(event_bus, ItemClicked)

        items.click("g2")
        items.click("g2")

        assert recorder.events == [ItemClicked(entry_id="g2"), ItemClicked(entry_id="g2")]

    def test_added_entry_is_rendered(
        self, items: ItemListPresenter, populated_registry: EntryRegistry
    ) -> None:
        populated_registry.add(make_entry("g3", "New"))
        assert [p.entry_id for p in items.presenters()] == ["g1", "g2", "g3"]

    def test_selection_survives_rerender(
        self, items: ItemListPresenter, populated_registry: EntryRegistry
    ) -> None:
        items.click("g2")
        first = items.presenter_for("g2")

        populated_registry.update("g2", name="Renamed")

        assert items.presenter_for("g2") is first
        assert first is not None and first.active and first.display_name == "Renamed"

    def test_removing_active_entry_clears_selection(
        self,
        items: ItemListPresenter,
        populated_registry: EntryRegistry,
        event_bus: EventBus,
    ) -> None:
        recorder = EventRecorder(event_bus, SelectionCleared)
        items.click("g1")

        populated_registry.remove("g1")

        assert items.active_id is None
        assert recorder.events == [SelectionCleared(entry_id="g1")]

    def test_clear_selection(self, items: ItemListPresenter, event_bus: EventBus) -> None:
        recorder = EventRecorder(event_bus, SelectionCleared)
        items.clear_selection()
        items.click("g1")
        items.clear_selection()

        assert items.active_presenters() == ()
        assert recorder.events == [SelectionCleared(entry_id="g1")]

    def test_listeners_run_on_changes(
        self, items: ItemListPresenter, populated_registry: EntryRegistry
    ) -> None:
        listener = MagicMock()
        items.add_listener(listener)

        items.click("g1")
        populated_registry.reset([])

        assert listener.call_count >= 2

    def test_dispose_stops_rendering(
        self, items: ItemListPresenter, populated_registry: EntryRegistry
    ) -> None:
        items.dispose()
        populated_registry.add(make_entry("g3"))
        assert items.presenters() == ()
