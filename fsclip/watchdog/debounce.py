# fsclip/watchdog/debounce.py

"""
Settle detection for files being written

A file is "settled" once no write event has been seen for the debounce
duration. Each managed path owns one resettable countdown; the countdowns
live in a registry shared between the event consumer and the timer
threads.
"""
import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Optional, Any, Union

logger = logging.getLogger(__name__)

FireCallback = Callable[[Path], Any]


class Countdown:
    """
    Resettable one-shot timer for a single path

    Every (re)start bumps a generation counter. An expiry only fires if
    its generation is still current, so a reset racing with an expiry
    always wins. A reset while the fire callback is running is deferred
    until the callback returns, so callbacks for one path never overlap.
    Once cancelled a countdown can not be started again.
    """

    def __init__(self, path: Path, duration: float, on_fire: FireCallback):
        self.path = path
        self.duration = duration
        self.fire_count = 0
        self._on_fire = on_fire
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._firing = False
        self._restart_after_fire = False
        self._closed = False

    def start(self, duration: Optional[float] = None) -> bool:
        """
        Start, or restart, the countdown

        Returns:
            False if the countdown was cancelled
        """
        with self._lock:
            if self._closed:
                return False
            if duration is not None:
                self.duration = duration
            if self._firing:
                self._restart_after_fire = True
                return True
            self._start_timer()
        return True

    reset = start

    def _start_timer(self):
        if self._timer is not None:
            self._timer.cancel()

        self._generation += 1
        timer = threading.Timer(self.duration, self._expire, args=(self._generation,))
        timer.name = f"settle:{self.path.name}"
        # Non-daemon: a pending file still gets handled when the event stream ends
        timer.daemon = False
        self._timer = timer
        timer.start()

    def cancel(self):
        with self._lock:
            self._closed = True
            self._restart_after_fire = False
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _expire(self, generation: int):
        with self._lock:
            if generation != self._generation or self._closed:
                return
            self._timer = None
            self._firing = True
            self.fire_count += 1

        try:
            self._on_fire(self.path)
        finally:
            with self._lock:
                self._firing = False
                if self._restart_after_fire and not self._closed:
                    self._restart_after_fire = False
                    self._start_timer()


class SettleTimerRegistry:
    """
    Thread-safe map of path -> pending countdown

    The lock only guards the dictionary. Countdowns are started, reset and
    cancelled outside of it, and fire callbacks never run while it is held.
    """

    def __init__(self):
        self._countdowns: Dict[Path, Countdown] = {}
        self._lock = threading.Lock()

        # Statistics
        self.stats = {
            'armed': 0,
            'ignored_arms': 0,
            'resets': 0,
            'ignored_resets': 0,
            'fired': 0,
            'removed': 0,
        }

    def arm(self, path: Union[str, Path], duration: float,
            on_fire: FireCallback) -> bool:
        """
        Start managing a path

        Args:
            path: File path
            duration: Seconds without writes before the file counts as settled
            on_fire: Called with the path on a timer thread once settled

        Returns:
            True if a new countdown was started, False if the path was
            already pending
        """
        path = Path(path)
        countdown = Countdown(path, duration, lambda p: self._fire(p, on_fire))

        with self._lock:
            if path in self._countdowns:
                self.stats['ignored_arms'] += 1
                logger.debug(f"Already pending, not re-arming: {path}")
                return False
            self._countdowns[path] = countdown
            self.stats['armed'] += 1

        countdown.start()
        logger.debug(f"Armed {path} ({duration}s)")
        return True

    def reset(self, path: Union[str, Path], duration: float) -> bool:
        """
        Restart the countdown for a path

        Returns:
            False if the path is not managed (the call is a no-op then)
        """
        path = Path(path)
        with self._lock:
            countdown = self._countdowns.get(path)
            if countdown is None:
                self.stats['ignored_resets'] += 1
                return False

        # A concurrent remove() may have cancelled it since the lookup
        restarted = countdown.reset(duration)
        with self._lock:
            self.stats['resets' if restarted else 'ignored_resets'] += 1
        return restarted

    def remove(self, path: Union[str, Path]) -> bool:
        """Stop managing a path. Idempotent."""
        path = Path(path)
        with self._lock:
            countdown = self._countdowns.pop(path, None)
            if countdown is None:
                return False
            self.stats['removed'] += 1

        countdown.cancel()
        logger.debug(f"Removed {path}")
        return True

    def cancel_all(self) -> int:
        """Cancel and forget every countdown"""
        with self._lock:
            countdowns = list(self._countdowns.values())
            self._countdowns.clear()

        for countdown in countdowns:
            countdown.cancel()

        if countdowns:
            logger.info(f"Cancelled {len(countdowns)} pending countdowns")
        return len(countdowns)

    def __contains__(self, path) -> bool:
        with self._lock:
            return Path(path) in self._countdowns

    def __len__(self) -> int:
        with self._lock:
            return len(self._countdowns)

    def _fire(self, path: Path, on_fire: FireCallback):
        with self._lock:
            self.stats['fired'] += 1

        try:
            on_fire(path)
        except Exception:
            # Timer threads have no one to report to
            logger.exception(f"Unhandled error in settle handler for {path}")

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics"""
        with self._lock:
            return {
                **self.stats,
                'pending': len(self._countdowns),
            }
