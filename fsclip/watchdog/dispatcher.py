# fsclip/watchdog/dispatcher.py

"""
Routes watch events to the settle registry and publishes settled files
"""
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Union

from ..clipboard.base import ClipboardPublisher
from ..errors import FsClipError
from ..processing.classifier import ClassifiedPayload, classify_content
from ..utils.file_utils import list_regular_files, read_file_bytes, safe_delete_file
from .debounce import SettleTimerRegistry
from .events import EventType, WatchdogEvent, WatchError

logger = logging.getLogger(__name__)

StreamItem = Union[WatchdogEvent, WatchError]


class EventDispatcher:
    """
    Single consumer of the watch event stream

    Created files are armed in the registry, written files get their
    countdown reset. When a countdown fires, on_settled() copies the file
    to the clipboard and deletes it.
    """

    def __init__(self, registry: SettleTimerRegistry,
                 publisher: ClipboardPublisher,
                 debounce_time: float = 0.1,
                 classifier: Callable[[bytes], ClassifiedPayload] = classify_content):
        """
        Initialize event dispatcher

        Args:
            registry: Store of pending countdowns, owned by the caller
            publisher: Initialized clipboard publisher
            debounce_time: Seconds without writes before a file is settled
            classifier: Maps file content to a clipboard payload
        """
        self.registry = registry
        self.publisher = publisher
        self.debounce_time = debounce_time
        self.classifier = classifier

        # Fire handlers update these from timer threads
        self._stats_lock = threading.Lock()
        self.stats = {
            'events': 0,
            'watch_errors': 0,
            'published': 0,
            'failed': 0,
        }

    def run(self, stream: Iterable[StreamItem]) -> None:
        """Consume the stream until it is exhausted"""
        logger.info("Dispatching watch events")

        for item in stream:
            if isinstance(item, WatchError):
                self._count('watch_errors')
                logger.error(f"File watcher error: {item}")
                continue
            self.dispatch(item)

        logger.info("Watch event stream closed")

    def dispatch(self, event: WatchdogEvent) -> None:
        """Route a single event"""
        self._count('events')

        if event.is_directory:
            logger.debug(f"Skipping directory event: {event}")
            return

        if event.event_type == EventType.CREATED:
            self.registry.arm(event.src_path, self.debounce_time, self.on_settled)
        elif event.event_type == EventType.MODIFIED:
            # Writes to paths we never saw created are ignored
            self.registry.reset(event.src_path, self.debounce_time)
        else:
            logger.debug(f"Ignoring event: {event}")

    def arm_existing(self, directory: Path) -> int:
        """Manage files that were already present before watching started"""
        armed = 0
        for path in list_regular_files(directory):
            if self.registry.arm(path, self.debounce_time, self.on_settled):
                armed += 1

        if armed:
            logger.info(f"Armed {armed} existing files in {directory}")
        return armed

    def on_settled(self, path: Path) -> bool:
        """
        Copy a settled file to the clipboard, then delete it

        Runs on a timer thread. Every failure is reported here and nowhere
        else. When reading, classifying or publishing fails the file and
        its registry entry are left in place.

        Returns:
            True if the file was published
        """
        try:
            payload = self._copy_to_clipboard(path)
        except (FsClipError, OSError) as e:
            self._count('failed')
            logger.error(f"Error while adding file to clipboard: {path}: {e}")
            return False

        self._count('published')
        logger.info(f"Copied {path.name} to clipboard as {payload}")

        # The clipboard already holds the content; a leftover file is only a nuisance
        safe_delete_file(path)
        self.registry.remove(path)
        return True

    def _copy_to_clipboard(self, path: Path) -> ClassifiedPayload:
        data = read_file_bytes(path)
        payload = self.classifier(data)
        self.publisher.publish(payload)
        return payload

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self.stats[key] += 1

    def get_stats(self) -> Dict[str, Any]:
        with self._stats_lock:
            stats = self.stats.copy()
        stats['registry'] = self.registry.get_stats()
        return stats
