"""Tests for the monitor registry and the poll loop threads."""

import threading
import time
from unittest.mock import MagicMock

from reddit_client.monitoring import MonitorRegistry, PollLoop


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def loop_factory(registry, key, feed, poll=lambda: None, delay=0.01):
    def build(stop_event):
        return PollLoop(registry, key, feed, poll, base_delay=delay, stop_event=stop_event)

    return build


class TestMonitorRegistry:

    def test_start_then_duplicate_start(self):
        registry = MonitorRegistry()
        assert registry.start("PrivateMessagesInbox", "inbox") is True
        assert registry.start("PrivateMessagesInbox", "inbox") is False
        assert registry.count() == 1

    def test_stop_then_duplicate_stop(self):
        registry = MonitorRegistry()
        registry.start("PrivateMessagesInbox", "inbox")
        assert registry.stop("PrivateMessagesInbox", "inbox") is True
        assert registry.stop("PrivateMessagesInbox", "inbox") is False
        assert registry.count() == 0

    def test_stop_unknown_key(self):
        assert MonitorRegistry().stop("missing", "inbox") is False

    def test_key_survives_until_last_subscriber_leaves(self):
        registry = MonitorRegistry()
        registry.start("shared", "a")
        registry.start("shared", "b")
        assert registry.subscribers("shared") == {"a", "b"}

        registry.stop("shared", "a")
        assert registry.keys() == ["shared"]
        registry.stop("shared", "b")
        assert registry.keys() == []

    def test_factory_called_once_per_key(self):
        registry = MonitorRegistry()
        built = []

        def factory(stop_event):
            loop = MagicMock()
            built.append(loop)
            return loop

        registry.start("shared", "a", factory)
        registry.start("shared", "b", factory)
        assert len(built) == 1
        built[0].start.assert_called_once()
        assert registry.loop("shared") is built[0]

    def test_is_active_rejects_stale_loop(self):
        registry = MonitorRegistry()
        current = MagicMock()
        registry.start("k", "a", lambda stop_event: current)
        assert registry.is_active("k", "a", current) is True
        assert registry.is_active("k", "a", MagicMock()) is False
        assert registry.is_active("k", "other") is False

    def test_stop_all_returns_running_loops(self):
        registry = MonitorRegistry()
        loop = MagicMock()
        registry.start("k1", "a", lambda stop_event: loop)
        registry.start("k2", "b")
        assert registry.stop_all() == [loop]
        assert registry.count() == 0


class TestPollLoop:

    def test_polls_until_stopped_then_never_again(self):
        registry = MonitorRegistry()
        calls = []
        registry.start("k", "inbox", loop_factory(registry, "k", "inbox", lambda: calls.append(1)))
        loop = registry.loop("k")

        assert wait_until(lambda: len(calls) >= 3)
        registry.stop("k", "inbox")
        loop.join(2)
        assert not loop.is_alive()

        settled = len(calls)
        time.sleep(0.05)
        assert len(calls) == settled

    def test_failing_cycle_does_not_end_loop(self):
        registry = MonitorRegistry()
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) <= 2:
                raise ConnectionError("network down")

        registry.start("k", "inbox", loop_factory(registry, "k", "inbox", flaky))
        loop = registry.loop("k")

        assert wait_until(lambda: len(attempts) >= 4)
        registry.stop("k", "inbox")
        loop.join(2)
        assert loop.failures == 2
        assert loop.cycles >= 4

    def test_sleep_scales_with_active_keys(self):
        registry = MonitorRegistry()
        registry.start("other1", "a")
        registry.start("other2", "b")
        stop_event = MagicMock()
        loop = PollLoop(registry, "k", "inbox", lambda: registry.stop("k", "inbox"), base_delay=0.5, stop_event=stop_event)
        loop.start = lambda: None
        registry.start("k", "inbox", lambda event: loop)

        loop.run()

        # Two keys remain active when the cycle's sleep is computed.
        stop_event.wait.assert_called_once_with(1.0)
        assert loop.cycles == 1

    def test_start_delay_waits_before_first_poll(self):
        registry = MonitorRegistry()
        stop_event = MagicMock()
        loop = PollLoop(
            registry, "k", "inbox", lambda: registry.stop("k", "inbox"), start_delay=3.0, stop_event=stop_event
        )
        loop.start = lambda: None
        registry.start("k", "inbox", lambda event: loop)

        loop.run()

        assert stop_event.wait.call_args_list[0].args == (3.0,)

    def test_keys_are_independent(self):
        registry = MonitorRegistry()
        a_calls, b_calls = [], []
        registry.start("a", "inbox", loop_factory(registry, "a", "inbox", lambda: a_calls.append(1)))
        registry.start("b", "sent", loop_factory(registry, "b", "sent", lambda: b_calls.append(1)))
        loop_a = registry.loop("a")
        loop_b = registry.loop("b")

        assert wait_until(lambda: len(a_calls) >= 2 and len(b_calls) >= 2)
        registry.stop("a", "inbox")
        loop_a.join(2)
        assert not loop_a.is_alive()
        assert loop_b.is_alive()

        before = len(b_calls)
        assert wait_until(lambda: len(b_calls) > before)
        registry.stop("b", "sent")
        loop_b.join(2)

    def test_loop_survives_while_another_feed_holds_the_key(self):
        registry = MonitorRegistry()
        calls = []
        factory = loop_factory(registry, "shared", "a", lambda: calls.append(1))
        registry.start("shared", "a", factory)
        registry.start("shared", "b", factory)
        loop = registry.loop("shared")

        registry.stop("shared", "a")
        before = len(calls)
        assert wait_until(lambda: len(calls) >= before + 3)
        assert loop.is_alive()
        assert registry.loop("shared") is loop

        registry.stop("shared", "b")
        loop.join(2)
        assert not loop.is_alive()

    def test_restart_during_cycle_does_not_overlap(self):
        registry = MonitorRegistry()
        guard = threading.Lock()
        in_flight = [0]
        peak = [0]
        calls = []
        entered = threading.Event()
        release = threading.Event()

        def slow():
            with guard:
                in_flight[0] += 1
                peak[0] = max(peak[0], in_flight[0])
                calls.append(1)
                first_call = len(calls) == 1
            if first_call:
                entered.set()
                release.wait(2)
            with guard:
                in_flight[0] -= 1

        factory = loop_factory(registry, "k", "inbox", slow)
        registry.start("k", "inbox", factory)
        first = registry.loop("k")
        assert entered.wait(2)

        registry.stop("k", "inbox")
        registry.start("k", "inbox", factory)
        second = registry.loop("k")
        assert second is not first

        time.sleep(0.05)
        assert len(calls) == 1

        release.set()
        assert wait_until(lambda: len(calls) >= 3)
        first.join(2)
        assert not first.is_alive()
        assert first.cycles == 1

        registry.stop("k", "inbox")
        second.join(2)
        assert peak[0] == 1

    def test_cycle_lock_is_stable_per_key(self):
        registry = MonitorRegistry()
        assert registry.cycle_lock("k") is registry.cycle_lock("k")
        assert registry.cycle_lock("k") is not registry.cycle_lock("other")

    def test_concurrent_start_stop_leaves_no_loop_running(self):
        registry = MonitorRegistry()
        loops = []
        loops_lock = threading.Lock()

        def factory(stop_event):
            loop = PollLoop(registry, "k", "inbox", lambda: None, base_delay=0.001, stop_event=stop_event)
            with loops_lock:
                loops.append(loop)
            return loop

        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            for _ in range(50):
                registry.start("k", "inbox", factory)
                registry.stop("k", "inbox")

        workers = [threading.Thread(target=worker) for _ in range(8)]
        for thread in workers:
            thread.start()
        for thread in workers:
            thread.join()

        registry.stop("k", "inbox")
        for loop in loops:
            loop.join(2)
        assert registry.count() == 0
        assert loops
        assert not any(loop.is_alive() for loop in loops)
