from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional


class EventType(Enum):
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    MOVED = "moved"
    CLOSED = "closed"


@dataclass
class WatchdogEvent:
    event_type: EventType
    src_path: Path
    is_directory: bool = False
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self):
        return f"{self.event_type.value}: {self.src_path}"


@dataclass
class WatchError:
    """Error reported by the watch source, delivered in-stream with events"""
    message: str
    cause: Optional[BaseException] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self):
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message
