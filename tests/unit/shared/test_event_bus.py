"""Unit tests for the in-memory event bus and on-commit publishing."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.events import StatusEntered
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import InMemoryEventBus, event_bus, publish_on_commit

pytestmark = pytest.mark.unit


class Recorder:
    def __init__(self) -> None:
        self.events = []

    def handle(self, event) -> None:
        self.events.append(event)


class Exploding:
    def handle(self, event) -> None:
        raise RuntimeError("handler bug")


def test_event_name_and_identity():
    event = StatusEntered(aggregate_id=uuid4(), status_slug="PAID")
    assert event.event_name == "StatusEntered"
    assert event.event_id != StatusEntered(aggregate_id=event.aggregate_id).event_id


def test_notes_do_not_affect_equality():
    order_id = uuid4()
    a = StatusEntered(aggregate_id=order_id, status_slug="PAID", notes="one")
    b = StatusEntered(
        aggregate_id=order_id,
        status_slug="PAID",
        notes="two",
        event_id=a.event_id,
        occurred_on=a.occurred_on,
    )
    assert a == b


class TestInMemoryEventBus:
    def test_dispatches_by_event_type(self):
        bus = InMemoryEventBus()
        recorder = Recorder()
        bus.subscribe(StatusEntered, recorder)

        event = StatusEntered(aggregate_id=uuid4(), status_slug="PAID")
        bus.publish(event)
        bus.publish(DomainEvent(aggregate_id=uuid4()))

        assert recorder.events == [event]

    def test_subscribe_is_idempotent(self):
        bus = InMemoryEventBus()
        recorder = Recorder()
        bus.subscribe(StatusEntered, recorder)
        bus.subscribe(StatusEntered, recorder)

        bus.publish(StatusEntered(aggregate_id=uuid4()))
        assert len(recorder.events) == 1

    def test_unsubscribe(self):
        bus = InMemoryEventBus()
        recorder = Recorder()
        bus.subscribe(StatusEntered, recorder)
        bus.unsubscribe(StatusEntered, recorder)

        bus.publish(StatusEntered(aggregate_id=uuid4()))
        assert recorder.events == []

    def test_failing_handler_is_isolated(self):
        bus = InMemoryEventBus()
        recorder = Recorder()
        bus.subscribe(StatusEntered, Exploding())
        bus.subscribe(StatusEntered, recorder)

        bus.publish(StatusEntered(aggregate_id=uuid4()))
        assert len(recorder.events) == 1


class TestPublishOnCommit:
    @pytest.fixture()
    def recorder(self):
        recorder = Recorder()
        event_bus.subscribe(StatusEntered, recorder)
        yield recorder
        event_bus.unsubscribe(StatusEntered, recorder)

    def test_deferred_until_commit(self, recorder, django_capture_on_commit_callbacks):
        event = StatusEntered(aggregate_id=uuid4(), status_slug="PAID")
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            publish_on_commit(event)
            assert recorder.events == []

        assert len(callbacks) == 1
        assert event in recorder.events

    def test_dropped_without_commit(self, recorder, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=False):
            publish_on_commit(StatusEntered(aggregate_id=uuid4()))
        assert recorder.events == []
