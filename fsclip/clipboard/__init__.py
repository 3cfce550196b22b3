from .base import ClipboardPublisher, decode_text
from .factory import get_clipboard_class, get_clipboard_publisher

__all__ = [
    'ClipboardPublisher',
    'decode_text',
    'get_clipboard_class',
    'get_clipboard_publisher',
]
