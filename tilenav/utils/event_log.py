"""Thread-safe event feed for the API: FSM transitions and level changes."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NavEvent:
    """A single navigation event for the API event feed."""

    tick: int
    category: str
    message: str
    actor: str = ""


class EventLog:
    """Bounded event log. Writers append; readers snapshot a slice.

    Oldest events are dropped once ``maxlen`` is reached.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, maxlen: int = 5000) -> None:
        self._buffer: deque[NavEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def append(self, event: NavEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def since_tick(self, tick: int) -> list[NavEvent]:
        """Return all events with tick >= *tick*."""
        with self._lock:
            return [e for e in self._buffer if e.tick >= tick]

    def latest(self, count: int = 50) -> list[NavEvent]:
        with self._lock:
            items = list(self._buffer)
        return items[-count:] if count > 0 else []

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
