"""Shared fixtures for fs-clip tests."""

import io
import logging
import threading
import time
import zipfile

import pytest
from PIL import Image

from fsclip.clipboard.base import ClipboardPublisher
from fsclip.errors import PublishError
from fsclip.watchdog import EventDispatcher, SettleTimerRegistry


# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------

def wait_for(predicate, timeout: float = 5.0, interval: float = 0.01) -> bool:
    """Poll until predicate() is true or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def make_image_bytes(fmt: str = "PNG", mode: str = "RGB", size=(16, 16)) -> bytes:
    image = Image.new(mode, size, color=(200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30))
    output = io.BytesIO()
    image.save(output, format=fmt)
    return output.getvalue()


def make_zip_bytes() -> bytes:
    output = io.BytesIO()
    with zipfile.ZipFile(output, "w") as archive:
        archive.writestr("inner.bin", bytes(range(256)))
    return output.getvalue()


class FakePublisher(ClipboardPublisher):
    """Records payloads instead of touching the system clipboard."""

    name = "fake"

    def __init__(self, fail: bool = False, delay: float = 0.0):
        super().__init__()
        self.fail = fail
        self.delay = delay
        self.published = []
        self.texts = []
        self.images = []
        self.writing = threading.Event()
        self.publish_event = threading.Event()

    def _initialize(self) -> None:
        pass

    def _write(self, data: bytes, sink: list) -> None:
        self.writing.set()
        fail = self.fail
        if self.delay:
            time.sleep(self.delay)
        if fail:
            raise PublishError("clipboard unavailable")
        sink.append(data)

    def _write_text(self, data: bytes) -> None:
        self._write(data, self.texts)

    def _write_image(self, data: bytes) -> None:
        self._write(data, self.images)

    def publish(self, payload) -> None:
        super().publish(payload)
        self.published.append(payload)
        self.publish_event.set()


# -------------------------------------------------------------------------
# Fixtures
# -------------------------------------------------------------------------

@pytest.fixture
def registry():
    registry = SettleTimerRegistry()
    yield registry
    registry.cancel_all()


@pytest.fixture
def publisher():
    publisher = FakePublisher()
    publisher.initialize()
    return publisher


@pytest.fixture
def failing_publisher():
    publisher = FakePublisher(fail=True)
    publisher.initialize()
    return publisher


@pytest.fixture
def dispatcher(registry, publisher):
    return EventDispatcher(registry, publisher, debounce_time=0.05)


@pytest.fixture
def restore_logging():
    """setup_logging() replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
