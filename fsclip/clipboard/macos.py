try:
    from AppKit import NSPasteboard, NSPasteboardTypePNG, NSPasteboardTypeString
    from Foundation import NSData
    HAS_APPKIT = True
except ImportError:
    HAS_APPKIT = False

from ..errors import ClipboardInitError, PublishError
from ..utils.image_utils import to_png
from .base import ClipboardPublisher, decode_text


class MacOSClipboard(ClipboardPublisher):

    name = "NSPasteboard"

    def _initialize(self) -> None:
        if not HAS_APPKIT:
            raise ClipboardInitError("PyObjC (AppKit) is required for the macOS clipboard")
        self._pasteboard = NSPasteboard.generalPasteboard()

    def _write_text(self, data: bytes) -> None:
        self._pasteboard.clearContents()
        if not self._pasteboard.setString_forType_(decode_text(data), NSPasteboardTypeString):
            raise PublishError("pasteboard rejected text")

    def _write_image(self, data: bytes) -> None:
        png = to_png(data)
        ns_data = NSData.dataWithBytes_length_(png, len(png))
        self._pasteboard.clearContents()
        if not self._pasteboard.setData_forType_(ns_data, NSPasteboardTypePNG):
            raise PublishError("pasteboard rejected image")
