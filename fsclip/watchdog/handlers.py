# fsclip/watchdog/handlers.py

"""
Bridges watchdog observer callbacks into an ordered event queue
"""
import os
import logging
import queue
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime

from watchdog.events import FileSystemEvent, FileSystemEventHandler

from .events import WatchdogEvent, WatchError, EventType

logger = logging.getLogger(__name__)


class WatchEventHandler(FileSystemEventHandler):
    """
    Converts watchdog events and puts them on a queue

    Runs on the observer thread and does no other work there, so the
    observer is never blocked by event processing.
    """
    
    def __init__(self, event_queue: queue.Queue):
        self.event_queue = event_queue
        
        # Statistics
        self.stats = {
            'events_received': 0,
            'events_queued': 0,
            'events_ignored': 0,
            'errors': 0,
            'last_event': None,
        }
    
    def on_any_event(self, event: FileSystemEvent):
        """Handle any file system event"""
        self.stats['events_received'] += 1
        self.stats['last_event'] = datetime.now()
        
        try:
            watchdog_event = self._convert_event(event)
        except Exception as e:
            self.report_error("Cannot convert file system event", e)
            return
        
        if watchdog_event is None:
            self.stats['events_ignored'] += 1
            return
        
        self.event_queue.put(watchdog_event)
        self.stats['events_queued'] += 1
    
    def _convert_event(self, event: FileSystemEvent) -> Optional[WatchdogEvent]:
        """Convert watchdog event to our internal format"""
        try:
            event_type = EventType(event.event_type)
        except ValueError:
            # opened, closed_no_write and future event kinds
            return None
        
        return WatchdogEvent(
            event_type=event_type,
            src_path=Path(os.fsdecode(event.src_path)),
            is_directory=event.is_directory,
        )
    
    def report_error(self, message: str, cause: Optional[BaseException] = None):
        """Queue a watch source error behind any events already queued"""
        self.stats['errors'] += 1
        self.event_queue.put(WatchError(message, cause))
    
    def get_stats(self) -> Dict[str, Any]:
        """Get handler statistics"""
        return self.stats.copy()
