# fsclip/watchdog/watcher.py

"""
Directory watcher producing an ordered stream of watch events
"""
import logging
import queue
from pathlib import Path
from typing import Iterator, Optional, Dict, Any, Union
from datetime import datetime

from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from ..errors import WatcherError
from .events import WatchdogEvent, WatchError
from .handlers import WatchEventHandler

logger = logging.getLogger(__name__)

# Marks the end of the event stream
_CLOSED = object()


class DirectoryWatcher:
    """
    Non-recursive watcher for a single directory
    """
    
    def __init__(self, directory: Path,
                 use_polling: bool = False,
                 poll_interval: float = 1.0):
        """
        Initialize directory watcher
        
        Args:
            directory: Directory to watch
            use_polling: Use polling instead of OS events
            poll_interval: Polling interval in seconds
        """
        self.directory = directory
        self.use_polling = use_polling
        self.poll_interval = poll_interval
        
        self.event_queue: queue.Queue = queue.Queue()
        self.handler = WatchEventHandler(self.event_queue)
        
        # Observer instance
        self.observer = None
        
        # State
        self.is_watching = False
        self.start_time: Optional[datetime] = None
    
    def start(self):
        """
        Start watching directory
        
        Raises:
            WatcherError: if the observer cannot be started
        """
        if self.is_watching:
            logger.warning(f"Already watching directory: {self.directory}")
            return
        
        if not self.directory.is_dir():
            raise WatcherError(f"Not a directory: {self.directory}")
        
        try:
            # Create appropriate observer
            if self.use_polling:
                observer = PollingObserver(timeout=self.poll_interval)
                logger.debug(f"Using polling observer (interval: {self.poll_interval}s)")
            else:
                observer = Observer()
                logger.debug("Using OS event observer")
            
            observer.schedule(self.handler, str(self.directory), recursive=False)
            observer.start()
        except Exception as e:
            raise WatcherError(f"Failed to start watching {self.directory}: {e}") from e
        
        self.observer = observer
        self.is_watching = True
        self.start_time = datetime.now()
        logger.info(f"Started watching directory: {self.directory}")
    
    def stop(self):
        """Stop watching and close the event stream"""
        if not self.is_watching:
            return
        
        self.is_watching = False
        try:
            self.observer.stop()
            self.observer.join(timeout=10)
        except Exception as e:
            logger.error(f"Error stopping watcher for {self.directory}: {e}")
        finally:
            self.event_queue.put(_CLOSED)
        
        logger.info(f"Stopped watching directory: {self.directory}")
    
    def events(self, check_interval: float = 0.5) -> Iterator[Union[WatchdogEvent, WatchError]]:
        """
        Yield events and errors in delivery order until the stream closes
        
        The stream closes when stop() is called. An observer that dies on
        its own yields one WatchError and then closes the stream.
        """
        while True:
            try:
                item = self.event_queue.get(timeout=check_interval)
            except queue.Empty:
                if self.is_watching and not self.observer.is_alive():
                    self.is_watching = False
                    yield WatchError(f"Observer for {self.directory} stopped unexpectedly")
                    return
                continue
            
            if item is _CLOSED:
                return
            yield item
    
    def get_status(self) -> Dict[str, Any]:
        """Get watcher status"""
        return {
            'directory': str(self.directory),
            'is_watching': self.is_watching,
            'use_polling': self.use_polling,
            'poll_interval': self.poll_interval if self.use_polling else None,
            'start_time': self.start_time,
            'stats': self.handler.get_stats(),
        }
