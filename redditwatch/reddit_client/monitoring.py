"""Monitor registry and the per-key poll loop."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from . import config

logger = logging.getLogger(__name__)

LoopFactory = Callable[[threading.Event], "PollLoop"]


@dataclass
class MonitorEntry:
    key: str
    subscribers: Set[str] = field(default_factory=set)
    loop: Optional["PollLoop"] = None
    stop_event: threading.Event = field(default_factory=threading.Event)


class MonitorRegistry:
    """
    Table of monitor keys and the feeds subscribed under each.

    A key owns at most one poll loop. The entry disappears as soon as its
    last subscriber stops, which is what tells the loop to exit. Each key
    also has a cycle lock that outlives its entries, so a loop replaced by a
    quick stop/start never polls at the same time as its successor.
    """

    def __init__(self):
        self._entries: Dict[str, MonitorEntry] = {}
        self._cycle_locks: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def start(self, key: str, feed_name: str, loop_factory: Optional[LoopFactory] = None) -> bool:
        """
        Subscribe ``feed_name`` under ``key``.

        Builds and starts a loop through ``loop_factory`` when the key has
        none yet. Returns False if ``feed_name`` was already subscribed.
        """
        spawned = None
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = MonitorEntry(key)
                self._entries[key] = entry
            if feed_name in entry.subscribers:
                return False
            entry.subscribers.add(feed_name)
            if entry.loop is None and loop_factory is not None:
                entry.loop = loop_factory(entry.stop_event)
                spawned = entry.loop

        if spawned is not None:
            spawned.start()
        logger.info("Monitoring started: %s/%s", key, feed_name)
        return True

    def stop(self, key: str, feed_name: str) -> bool:
        """Unsubscribe ``feed_name``; the key is dropped when nobody is left."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or feed_name not in entry.subscribers:
                return False
            entry.subscribers.discard(feed_name)
            if not entry.subscribers:
                del self._entries[key]
                entry.stop_event.set()

        logger.info("Monitoring stopped: %s/%s", key, feed_name)
        return True

    def is_active(self, key: str, feed_name: str, loop: Optional["PollLoop"] = None) -> bool:
        """Membership test; with ``loop`` it must also be the key's current loop."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or feed_name not in entry.subscribers:
                return False
            return loop is None or entry.loop is loop

    def is_key_active(self, key: str, loop: Optional["PollLoop"] = None) -> bool:
        """Whether ``key`` has any subscriber; with ``loop`` it must also be the key's current loop."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not entry.subscribers:
                return False
            return loop is None or entry.loop is loop

    def cycle_lock(self, key: str) -> threading.Lock:
        """The lock every poll cycle for ``key`` runs under."""
        with self._lock:
            return self._cycle_locks.setdefault(key, threading.Lock())

    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def subscribers(self, key: str) -> Set[str]:
        with self._lock:
            entry = self._entries.get(key)
            return set(entry.subscribers) if entry else set()

    def loop(self, key: str) -> Optional["PollLoop"]:
        with self._lock:
            entry = self._entries.get(key)
            return entry.loop if entry else None

    def stop_all(self) -> List["PollLoop"]:
        """Drop every key and return the loops that were running."""
        with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()

        loops = []
        for entry in entries:
            entry.stop_event.set()
            if entry.loop is not None:
                loops.append(entry.loop)
        if entries:
            logger.info("Stopped %d monitor(s)", len(entries))
        return loops


class PollLoop:
    """
    Background thread polling one feed until its key leaves the registry.

    ``poll`` runs one full cycle (fetch, diff, cache write, event). Anything
    it raises is logged and the loop carries on after the usual delay.
    """

    def __init__(
        self,
        registry: MonitorRegistry,
        key: str,
        feed_name: str,
        poll: Callable[[], object],
        base_delay: float = config.MONITORING_WAIT_DELAY,
        start_delay: float = 0.0,
        stop_event: Optional[threading.Event] = None,
    ):
        self.registry = registry
        self.key = key
        self.feed_name = feed_name
        self.poll = poll
        self.base_delay = base_delay
        self.start_delay = start_delay
        self.stop_event = stop_event or threading.Event()
        self.cycles = 0
        self.failures = 0
        self.thread = threading.Thread(target=self.run, name=f"monitor-{key}", daemon=True)

    def start(self) -> None:
        self.thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        self.thread.join(timeout)

    def is_alive(self) -> bool:
        return self.thread.is_alive()

    def run(self) -> None:
        if self.start_delay > 0:
            self.stop_event.wait(self.start_delay)

        cycle_lock = self.registry.cycle_lock(self.key)
        while True:
            # A replaced loop rechecks under the lock and exits before its successor polls.
            with cycle_lock:
                if not self.registry.is_key_active(self.key, self):
                    break
                try:
                    self.poll()
                except Exception:
                    self.failures += 1
                    logger.exception("Poll cycle for %s failed; keeping previous snapshot", self.key)
                self.cycles += 1

            # Sleep grows with the number of active keys.
            self.stop_event.wait(self.registry.count() * self.base_delay)

        logger.debug("Poll loop for %s exited after %d cycle(s)", self.key, self.cycles)
