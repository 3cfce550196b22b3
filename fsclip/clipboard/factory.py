import platform
from typing import Type

from ..errors import ClipboardInitError
from .base import ClipboardPublisher


def get_clipboard_class() -> Type[ClipboardPublisher]:
    system = platform.system()

    if system == "Windows":
        from .windows import WindowsClipboard
        return WindowsClipboard
    elif system == "Linux":
        from .linux import LinuxClipboard
        return LinuxClipboard
    elif system == "Darwin":
        from .macos import MacOSClipboard
        return MacOSClipboard
    else:
        raise ClipboardInitError(f"Platform '{system}' is not supported")


def get_clipboard_publisher() -> ClipboardPublisher:
    """Create and initialize the publisher for this platform"""
    publisher = get_clipboard_class()()
    publisher.initialize()
    return publisher
