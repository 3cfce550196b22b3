"""Tests for the settle timer registry."""

import threading
import time
from pathlib import Path

import pytest

from fsclip.watchdog.debounce import Countdown, SettleTimerRegistry

from conftest import wait_for


class FireRecorder:
    """Collects fire callbacks from timer threads."""

    def __init__(self):
        self.calls = []
        self.times = []
        self.threads = []
        self.event = threading.Event()
        self._lock = threading.Lock()

    def __call__(self, path):
        with self._lock:
            self.calls.append(path)
            self.times.append(time.monotonic())
            self.threads.append(threading.current_thread())
        self.event.set()


@pytest.fixture
def recorder():
    return FireRecorder()


# -------------------------------------------------------------------------
# Countdown
# -------------------------------------------------------------------------

class TestCountdown:

    def test_fires_once(self, recorder):
        countdown = Countdown(Path("/tmp/a"), 0.05, recorder)
        countdown.start()

        assert recorder.event.wait(2.0)
        time.sleep(0.15)

        assert recorder.calls == [Path("/tmp/a")]
        assert countdown.fire_count == 1

    def test_cancel_prevents_fire(self, recorder):
        countdown = Countdown(Path("/tmp/a"), 0.1, recorder)
        countdown.start()
        countdown.cancel()

        time.sleep(0.3)
        assert recorder.calls == []

    def test_cancelled_countdown_cannot_restart(self, recorder):
        countdown = Countdown(Path("/tmp/a"), 0.02, recorder)
        countdown.cancel()

        assert countdown.start() is False
        assert countdown.reset(0.02) is False

        time.sleep(0.15)
        assert recorder.calls == []

    def test_reset_while_firing_waits_for_callback(self):
        release = threading.Event()
        entered = threading.Event()
        running = []
        overlaps = []
        fired = []

        def slow_fire(path):
            if running:
                overlaps.append(path)
            running.append(path)
            entered.set()
            release.wait(2.0)
            running.pop()
            fired.append(time.monotonic())

        countdown = Countdown(Path("/tmp/slow"), 0.02, slow_fire)
        countdown.start()
        assert entered.wait(2.0)

        entered.clear()
        assert countdown.reset(0.02)
        time.sleep(0.1)
        # Still inside the first callback; no second one has started
        assert fired == []

        released_at = time.monotonic()
        release.set()

        assert entered.wait(2.0)
        assert wait_for(lambda: len(fired) == 2)
        assert overlaps == []
        assert fired[1] - released_at >= 0.02
        countdown.cancel()

    def test_cancel_during_callback_drops_pending_reset(self):
        calls = []

        def fire_and_cancel(path):
            calls.append(path)
            countdown.reset(0.02)
            countdown.cancel()

        countdown = Countdown(Path("/tmp/a"), 0.02, fire_and_cancel)
        countdown.start()

        assert wait_for(lambda: len(calls) == 1)
        time.sleep(0.15)
        assert len(calls) == 1

    def test_reset_after_fire_rearms(self, recorder):
        countdown = Countdown(Path("/tmp/a"), 0.05, recorder)
        countdown.start()
        assert recorder.event.wait(2.0)

        recorder.event.clear()
        countdown.reset(0.05)

        assert recorder.event.wait(2.0)
        assert countdown.fire_count == 2

    def test_stale_expiry_is_discarded(self, recorder):
        countdown = Countdown(Path("/tmp/a"), 10.0, recorder)
        countdown.start()
        # An expiry from an older generation must not fire
        countdown._expire(0)

        assert recorder.calls == []
        countdown.cancel()


# -------------------------------------------------------------------------
# Registry
# -------------------------------------------------------------------------

class TestSettleTimerRegistry:

    def test_arm_fires_after_duration(self, registry, recorder):
        path = Path("/watch/report.txt")
        armed_at = time.monotonic()

        assert registry.arm(path, 0.1, recorder)
        assert path in registry

        assert recorder.event.wait(2.0)
        assert recorder.calls == [path]
        assert recorder.times[0] - armed_at >= 0.09

        time.sleep(0.2)
        assert len(recorder.calls) == 1

    def test_fire_runs_on_timer_thread(self, registry, recorder):
        registry.arm(Path("/watch/a"), 0.02, recorder)

        assert recorder.event.wait(2.0)
        assert recorder.threads[0] is not threading.current_thread()

    def test_writes_debounce_to_single_fire(self, registry, recorder):
        path = Path("/watch/big.bin")
        duration = 0.3

        registry.arm(path, duration, recorder)
        last_reset = time.monotonic()
        for _ in range(5):
            time.sleep(0.1)
            assert registry.reset(path, duration)
            last_reset = time.monotonic()

        assert recorder.event.wait(3.0)
        time.sleep(duration + 0.2)

        assert len(recorder.calls) == 1
        assert recorder.times[0] - last_reset >= duration - 0.05

    def test_reset_unknown_path_is_noop(self, registry, recorder):
        path = Path("/watch/untracked.txt")

        assert registry.reset(path, 0.02) is False
        time.sleep(0.1)

        assert recorder.calls == []
        assert path not in registry
        assert registry.get_stats()['ignored_resets'] == 1

    def test_arm_pending_path_refused(self, registry, recorder):
        path = Path("/watch/a")
        other = FireRecorder()

        assert registry.arm(path, 0.1, recorder)
        assert registry.arm(path, 0.1, other) is False

        assert recorder.event.wait(2.0)
        time.sleep(0.1)
        assert other.calls == []
        assert registry.get_stats()['ignored_arms'] == 1

    def test_remove_cancels_countdown(self, registry, recorder):
        path = Path("/watch/a")
        registry.arm(path, 0.1, recorder)

        assert registry.remove(path)
        assert path not in registry

        time.sleep(0.25)
        assert recorder.calls == []

    def test_reset_after_concurrent_remove_is_noop(self, registry, recorder):
        path = Path("/watch/a")
        registry.arm(path, 10.0, recorder)
        countdown = registry._countdowns[path]
        registry.remove(path)

        # reset() found the entry just before remove() cancelled it
        registry._countdowns[path] = countdown
        assert registry.reset(path, 0.02) is False

        time.sleep(0.15)
        assert recorder.calls == []
        assert registry.get_stats()['ignored_resets'] == 1

    def test_remove_is_idempotent(self, registry):
        assert registry.remove(Path("/watch/nothing")) is False
        assert registry.remove(Path("/watch/nothing")) is False

    def test_entry_survives_fire_until_removed(self, registry, recorder):
        path = Path("/watch/a")
        registry.arm(path, 0.02, recorder)

        assert recorder.event.wait(2.0)
        assert path in registry

        registry.remove(path)
        assert len(registry) == 0

    def test_string_paths_are_normalized(self, registry, recorder):
        registry.arm("/watch/a", 10.0, recorder)

        assert Path("/watch/a") in registry
        assert registry.reset(Path("/watch/a"), 10.0)

    def test_callback_error_is_contained(self, registry, caplog):
        def explode(path):
            raise RuntimeError("boom")

        registry.arm(Path("/watch/a"), 0.02, explode)

        assert wait_for(lambda: registry.get_stats()['fired'] == 1)
        assert wait_for(lambda: "Unhandled error" in caplog.text)

    def test_independent_paths(self, registry, recorder):
        paths = [Path(f"/watch/file{i}") for i in range(5)]
        for path in paths:
            registry.arm(path, 0.05, recorder)

        assert wait_for(lambda: len(recorder.calls) == 5)
        assert sorted(recorder.calls) == sorted(paths)

    def test_cancel_all(self, registry, recorder):
        for i in range(3):
            registry.arm(Path(f"/watch/{i}"), 0.2, recorder)

        assert registry.cancel_all() == 3
        assert len(registry) == 0

        time.sleep(0.35)
        assert recorder.calls == []

    def test_stats(self, registry, recorder):
        path = Path("/watch/a")
        registry.arm(path, 10.0, recorder)
        registry.reset(path, 10.0)
        registry.remove(path)

        stats = registry.get_stats()
        assert stats['armed'] == 1
        assert stats['resets'] == 1
        assert stats['removed'] == 1
        assert stats['pending'] == 0
