"""Change events and listener registration."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, List, Tuple

from .snapshot import Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """One poll cycle's worth of changes to a feed."""

    feed: Any
    old: Snapshot
    new: Snapshot
    added: Tuple[Any, ...]
    removed: Tuple[Any, ...]


Listener = Callable[[ChangeEvent], Any]


class EventHook:
    """
    Ordered set of listeners for one feed.

    Listeners are called synchronously on the firing thread. A listener
    that raises is logged and skipped; the rest still run.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def add(self, listener: Listener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove(self, listener: Listener) -> bool:
        with self._lock:
            if listener not in self._listeners:
                return False
            self._listeners.remove(listener)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def fire(self, event: ChangeEvent) -> List[Tuple[Listener, Exception]]:
        """Deliver ``event`` to every listener; return the failures."""
        with self._lock:
            listeners = list(self._listeners)

        errors: List[Tuple[Listener, Exception]] = []
        for listener in listeners:
            try:
                listener(event)
            except Exception as err:
                logger.exception("Listener %r on %s failed", listener, self.name or "feed")
                errors.append((listener, err))
        return errors
