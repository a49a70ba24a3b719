"""Thread-safe event feed with subscriber callbacks."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SimEvent:
    """A single notification emitted by the simulation core."""

    tick: int
    category: str
    message: str
    entity_ids: tuple[int, ...] = ()
    metadata: dict | None = None
    timestamp: float = field(default_factory=time.time)


Subscriber = Callable[[SimEvent], None]


class EventLog:
    """Bounded event log. Writers append; readers copy a slice; subscribers are pushed each event.

    The core never depends on anyone listening: a failing subscriber is
    logged and skipped.
    """

    __slots__ = ("_buffer", "_lock", "_subscribers")

    def __init__(self, maxlen: int | None = 5000) -> None:
        self._buffer: deque[SimEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def append(self, event: SimEvent) -> None:
        self.append_many([event])

    def append_many(self, events: list[SimEvent]) -> None:
        with self._lock:
            self._buffer.extend(events)
            subscribers = list(self._subscribers)
        for event in events:
            for callback in subscribers:
                try:
                    callback(event)
                except Exception:
                    logger.exception("Event subscriber %r failed on %s", callback, event.category)

    def since_tick(self, tick: int) -> list[SimEvent]:
        """Return all events with tick >= *tick*."""
        with self._lock:
            return [e for e in self._buffer if e.tick >= tick]

    def latest(self, count: int = 50) -> list[SimEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
