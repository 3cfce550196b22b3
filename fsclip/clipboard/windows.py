import time

import win32clipboard as wc
import win32con

from ..errors import ClipboardInitError, PublishError
from ..utils.image_utils import to_dib, to_png
from .base import ClipboardPublisher, decode_text


class WindowsClipboard(ClipboardPublisher):

    name = "win32clipboard"

    OPEN_ATTEMPTS = 3
    OPEN_RETRY_DELAY = 0.05

    def _initialize(self) -> None:
        try:
            self._open()
        except PublishError as e:
            raise ClipboardInitError(str(e)) from e
        wc.CloseClipboard()
        self._png_format = wc.RegisterClipboardFormat("PNG")

    def _open(self) -> None:
        # Another process may hold the clipboard for a moment
        last_error = None
        for _ in range(self.OPEN_ATTEMPTS):
            try:
                wc.OpenClipboard()
                return
            except Exception as e:
                last_error = e
                time.sleep(self.OPEN_RETRY_DELAY)
        raise PublishError(f"cannot open clipboard: {last_error}")

    def _write_text(self, data: bytes) -> None:
        text = decode_text(data)
        self._open()
        try:
            wc.EmptyClipboard()
            wc.SetClipboardData(win32con.CF_UNICODETEXT, text)
        finally:
            wc.CloseClipboard()

    def _write_image(self, data: bytes) -> None:
        # Convert before opening so a bad image leaves the clipboard alone
        dib = to_dib(data)
        png = to_png(data)
        self._open()
        try:
            wc.EmptyClipboard()
            wc.SetClipboardData(win32con.CF_DIB, dib)
            # PNG keeps transparency for applications that understand it
            wc.SetClipboardData(self._png_format, png)
        finally:
            wc.CloseClipboard()
