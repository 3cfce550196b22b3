# fsclip/watchdog/__init__.py

"""
fs-clip watchdog module
File system monitoring and settle detection
"""
from .events import WatchdogEvent, WatchError, EventType
from .debounce import Countdown, SettleTimerRegistry
from .handlers import WatchEventHandler
from .watcher import DirectoryWatcher
from .dispatcher import EventDispatcher

__all__ = [
    'WatchdogEvent',
    'WatchError',
    'EventType',
    'Countdown',
    'SettleTimerRegistry',
    'WatchEventHandler',
    'DirectoryWatcher',
    'EventDispatcher',
]
