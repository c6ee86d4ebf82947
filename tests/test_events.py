"""Unit tests for :mod:`savedsearch.ui.events`."""

from __future__ import annotations

import gc
from dataclasses import dataclass

import pytest

from savedsearch.ui.events import (
    AffordancesChanged,
    Event,
    EventBus,
    ItemClicked,
    SelectionCleared,
)


@dataclass(slots=True)
class SampleEvent(Event):
    """A sample event for testing."""

    message: str
    value: int = 0


@dataclass(slots=True)
class AnotherEvent(Event):
    data: str


class _Listener:
    def __init__(self) -> None:
        self.received: list[SampleEvent] = []

    def on_event(self, event: SampleEvent) -> None:
        self.received.append(event)


class TestEventDefinitions:
    """Tests for the concrete event dataclasses."""

    def test_events_use_slots(self) -> None:
        assert hasattr(ItemClicked(entry_id="g1"), "__slots__")

    def test_selection_cleared_defaults_to_unknown_entry(self) -> None:
        assert SelectionCleared().entry_id is None

    def test_affordances_default_to_no_error(self) -> None:
        event = AffordancesChanged(loading_visible=False, empty_visible=True)
        assert event.error_visible is False
        assert event.error_message == ""


class TestEventBusSubscription:
    """Tests for EventBus subscription functionality."""

    def test_subscribe_adds_handler(self) -> None:
        bus: EventBus[Event] = EventBus()
        bus.subscribe(SampleEvent, lambda e: None)
        assert bus.handler_count(SampleEvent) == 1

    def test_handlers_for_different_types_are_separate(self) -> None:
        bus: EventBus[Event] = EventBus()
        bus.subscribe(SampleEvent, lambda e: None)
        bus.subscribe(AnotherEvent, lambda e: None)

        assert bus.handler_count(SampleEvent) == 1
        assert bus.handler_count(AnotherEvent) == 1
        assert bus.handler_count() == 2

    def test_unsubscribe_removes_handler(self) -> None:
        bus: EventBus[Event] = EventBus()

        def handler(event: SampleEvent) -> None:
            pass

        bus.subscribe(SampleEvent, handler)
        bus.unsubscribe(SampleEvent, handler)
        assert bus.handler_count(SampleEvent) == 0

    def test_unsubscribe_unknown_handler_is_safe(self) -> None:
        bus: EventBus[Event] = EventBus()
        bus.unsubscribe(SampleEvent, lambda e: None)
        assert bus.handler_count() == 0

    def test_clear_removes_everything(self) -> None:
        bus: EventBus[Event] = EventBus()
        bus.subscribe(SampleEvent, lambda e: None)
        bus.subscribe(AnotherEvent, lambda e: None)
        bus.clear()
        assert bus.handler_count() == 0


class TestEventBusPublish:
    """Tests for EventBus.publish()."""

    def test_publish_delivers_in_subscription_order(self) -> None:
        bus: EventBus[Event] = EventBus()
        order: list[str] = []
        bus.subscribe(SampleEvent, lambda e: order.append("first"))
        bus.subscribe(SampleEvent, lambda e: order.append("second"))

        bus.publish(SampleEvent(message="hi"))

        assert order == ["first", "second"]

    def test_publish_only_reaches_matching_type(self) -> None:
        bus: EventBus[Event] = EventBus()
        received: list[Event] = []
        bus.subscribe(AnotherEvent, received.append)

        bus.publish(SampleEvent(message="ignored"))

        assert received == []

    def test_publish_without_handlers_is_noop(self) -> None:
        bus: EventBus[Event] = EventBus()
        bus.publish(SampleEvent(message="nobody listening"))

    def test_handler_exception_does_not_stop_delivery(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        bus: EventBus[Event] = EventBus()
        received: list[SampleEvent] = []

        def broken(event: SampleEvent) -> None:
            raise RuntimeError("boom")

        bus.subscribe(SampleEvent, broken)
        bus.subscribe(SampleEvent, received.append)

        with caplog.at_level("ERROR"):
            bus.publish(SampleEvent(message="x"))

        assert len(received) == 1
        assert "raised exception" in caplog.text

    def test_handler_may_unsubscribe_while_publishing(self) -> None:
        bus: EventBus[Event] = EventBus()
        calls: list[str] = []

        def once(event: SampleEvent) -> None:
            calls.append("once")
            bus.unsubscribe(SampleEvent, once)

        bus.subscribe(SampleEvent, once)
        bus.subscribe(SampleEvent, lambda e: calls.append("always"))

        bus.publish(SampleEvent(message="a"))
        bus.publish(SampleEvent(message="b"))

        assert calls == ["once", "always", "always"]


class TestEventBusWeakReferences:
    """Bound-method handlers are held weakly."""

    def test_bound_method_handler_receives_events(self) -> None:
        bus: EventBus[Event] = EventBus()
        listener = _Listener()
        bus.subscribe(SampleEvent, listener.on_event)

        bus.publish(SampleEvent(message="hello", value=1))

        assert [event.value for event in listener.received] == [1]

    def test_dead_bound_method_is_pruned(self) -> None:
        bus: EventBus[Event] = EventBus()
        listener = _Listener()
        bus.subscribe(SampleEvent, listener.on_event)

        del listener
        gc.collect()
        bus.publish(SampleEvent(message="after"))

        assert bus.handler_count(SampleEvent) == 0

    def test_unsubscribe_bound_method(self) -> None:
        bus: EventBus[Event] = EventBus()
        listener = _Listener()
        bus.subscribe(SampleEvent, listener.on_event)
        bus.unsubscribe(SampleEvent, listener.on_event)

        bus.publish(SampleEvent(message="x"))

        assert listener.received == []
