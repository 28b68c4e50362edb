"""Tests for the in-process event bus."""

import logging
import threading
from uuid import uuid4

import pytest

from setlist_share.adapters.clock import FrozenClock
from setlist_share.adapters.events import InMemoryEventBus
from setlist_share.core.ports.events import DomainEvent, EventType


def _event(event_type: EventType = EventType.SETLIST_UPDATED) -> DomainEvent:
    user = uuid4()
    return DomainEvent(
        type=event_type,
        setlist_id=uuid4(),
        user_ids=(user,),
        occurred_at=FrozenClock().now_utc(),
    )


@pytest.fixture
def bus():
    bus = InMemoryEventBus(poll_interval_seconds=0.05)
    yield bus
    bus.stop()


def test_publish_records_history(bus):
    event = _event()
    bus.publish(event)
    assert bus.published == [event]
    assert bus.of_type(EventType.SETLIST_UPDATED) == [event]
    assert bus.of_type(EventType.SETLIST_DELETED) == []


def test_history_disabled():
    bus = InMemoryEventBus(keep_history=False)
    bus.publish(_event())
    assert bus.published == []
    assert bus.pending == 1


def test_publish_does_not_run_subscribers(bus):
    received = []
    bus.subscribe(received.append)

    bus.publish(_event())

    assert received == []
    assert bus.pending == 1


def test_drain_delivers_queued_events(bus):
    received = []
    bus.subscribe(received.append)
    first, second = _event(), _event(EventType.GRANT_UPSERTED)
    bus.publish(first)
    bus.publish(second)

    assert bus.drain() == 2
    assert received == [first, second]
    assert bus.pending == 0


def test_failing_subscriber_is_isolated(bus, caplog):
    received = []

    def broken(_event):
        raise RuntimeError("socket closed")

    bus.subscribe(broken)
    bus.subscribe(received.append)
    bus.publish(_event())

    with caplog.at_level(logging.ERROR, logger="setlist_share.adapters.events"):
        bus.drain()

    assert len(received) == 1
    assert "Event subscriber failed" in caplog.text


def test_worker_delivers_in_background(bus):
    delivered = threading.Event()
    seen = []

    def subscriber(event):
        seen.append((event, threading.current_thread().name))
        delivered.set()

    bus.subscribe(subscriber)
    bus.start()
    assert bus.is_running

    event = _event()
    bus.publish(event)

    assert delivered.wait(timeout=5)
    assert seen == [(event, "event-bus")]


def test_stop_flushes_pending_events(bus):
    received = []
    bus.subscribe(received.append)
    bus.start()
    bus.stop()
    assert not bus.is_running

    # Queued while stopped; a later start/stop cycle delivers it
    bus.publish(_event())
    bus.start()
    bus.stop()
    assert len(received) == 1
    assert bus.pending == 0


def test_start_is_idempotent(bus):
    bus.start()
    thread = bus._thread
    bus.start()
    assert bus._thread is thread


def test_clear():
    bus = InMemoryEventBus()
    bus.publish(_event())
    bus.clear()
    assert bus.published == []
