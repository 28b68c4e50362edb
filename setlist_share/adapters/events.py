"""
In-process event bus.

Logs domain events and hands them to registered subscribers (the real-time
broadcaster lives behind one of them). Events are also kept in memory for
test assertions.

`publish` only records and enqueues; it never runs a subscriber. Delivery
happens on a background worker thread (`start` / `stop`), or synchronously
through `drain` in tests and scripts. A subscriber that raises is logged and
skipped: the mutation that produced the event has already committed.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from setlist_share.core.ports.events import DomainEvent, EventType

logger = logging.getLogger(__name__)

Subscriber = Callable[[DomainEvent], None]


@dataclass
class InMemoryEventBus:
    """Implements EventPublisherPort."""

    published: list[DomainEvent] = field(default_factory=list)
    keep_history: bool = True
    poll_interval_seconds: float = 0.5
    _subscribers: list[Subscriber] = field(default_factory=list, init=False)
    _queue: queue.Queue[DomainEvent] = field(default_factory=queue.Queue, init=False)
    _stop_event: threading.Event = field(default_factory=threading.Event, init=False)
    _thread: threading.Thread | None = field(default=None, init=False)

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def publish(self, event: DomainEvent) -> None:
        logger.info(
            "Event %s setlist=%s users=%s",
            event.type.value,
            event.setlist_id,
            ",".join(str(u) for u in event.user_ids),
        )
        if self.keep_history:
            self.published.append(event)
        self._queue.put(event)

    # --- Delivery ---

    def start(self) -> None:
        """Start the background delivery worker."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._delivery_loop, name="event-bus", daemon=True
        )
        self._thread.start()
        logger.info("Event bus started")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the worker and deliver whatever is still queued."""
        if not self.is_running:
            return

        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
        self._thread = None
        remaining = self.drain()
        logger.info("Event bus stopped (%d events flushed)", remaining)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def drain(self) -> int:
        """Deliver every queued event on the calling thread. Returns the count."""
        delivered = 0
        while True:
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                return delivered
            self._deliver(event)
            delivered += 1

    def _delivery_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                event = self._queue.get(timeout=self.poll_interval_seconds)
            except queue.Empty:
                continue
            self._deliver(event)

    def _deliver(self, event: DomainEvent) -> None:
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception:
                logger.exception("Event subscriber failed for %s", event.type.value)

    # --- Test helpers ---

    def of_type(self, event_type: EventType) -> list[DomainEvent]:
        return [e for e in self.published if e.type == event_type]

    def clear(self) -> None:
        self.published.clear()
