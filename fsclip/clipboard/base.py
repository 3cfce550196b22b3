import logging
import threading
from abc import ABC, abstractmethod

from ..errors import PublishError
from ..processing.classifier import ClassifiedPayload, ClipboardFormat

logger = logging.getLogger(__name__)


def decode_text(data: bytes) -> str:
    """Decode text content, honouring a byte order mark if present"""
    if data.startswith((b"\xfe\xff", b"\xff\xfe")):
        return data.decode("utf-16", errors="replace")
    return data.decode("utf-8-sig", errors="replace")


class ClipboardPublisher(ABC):
    """
    Replaces the system clipboard content

    Subclasses implement one platform. publish() either succeeds or raises
    PublishError; on failure the clipboard is presumed unchanged.
    """

    name = "clipboard"

    def __init__(self):
        self._initialized = False
        # Fire handlers of different files may publish at the same time
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """
        Prepare the backend; must be called once before publish()

        Raises:
            ClipboardInitError: if the clipboard cannot be used
        """
        if self._initialized:
            return
        self._initialize()
        self._initialized = True
        logger.info(f"Clipboard backend ready: {self.name}")

    def publish(self, payload: ClassifiedPayload) -> None:
        if not self._initialized:
            raise PublishError("clipboard used before initialization")

        with self._lock:
            try:
                if payload.format is ClipboardFormat.TEXT:
                    self._write_text(payload.data)
                elif payload.format is ClipboardFormat.IMAGE:
                    self._write_image(payload.data)
                else:
                    raise PublishError(f"unknown clipboard format: {payload.format}")
            except PublishError:
                raise
            except Exception as e:
                raise PublishError(f"{self.name} write failed: {e}") from e

        logger.debug(f"Published {payload} via {self.name}")

    @abstractmethod
    def _initialize(self) -> None:
        pass

    @abstractmethod
    def _write_text(self, data: bytes) -> None:
        pass

    @abstractmethod
    def _write_image(self, data: bytes) -> None:
        pass
