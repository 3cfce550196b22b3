import os
import shutil
import subprocess
from typing import List, Optional

from ..errors import ClipboardInitError, PublishError
from ..utils.image_utils import to_png
from .base import ClipboardPublisher, decode_text


class LinuxClipboard(ClipboardPublisher):
    """
    Writes through wl-copy (Wayland) or xclip (X11)

    Both tools fork a background process that keeps serving the selection,
    so their output streams are never captured.
    """

    COMMAND_TIMEOUT = 2.0

    def __init__(self):
        super().__init__()
        self.tool: Optional[str] = None

    @property
    def name(self) -> str:
        return self.tool or "linux"

    def _initialize(self) -> None:
        if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
            self.tool = "wl-copy"
        elif os.environ.get("DISPLAY") and shutil.which("xclip"):
            self.tool = "xclip"
        else:
            raise ClipboardInitError(
                "no usable clipboard: need wl-copy under Wayland or xclip under X11"
            )

    def _command(self, mime: Optional[str]) -> List[str]:
        if self.tool == "wl-copy":
            command = ["wl-copy"]
            if mime:
                command.extend(["--type", mime])
        else:
            command = ["xclip", "-selection", "clipboard"]
            if mime:
                command.extend(["-t", mime])
        return command

    def _write_text(self, data: bytes) -> None:
        self._run(self._command(None), decode_text(data).encode("utf-8"))

    def _write_image(self, data: bytes) -> None:
        self._run(self._command("image/png"), to_png(data))

    def _run(self, command: List[str], data: bytes) -> None:
        try:
            subprocess.run(
                command,
                input=data,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
                timeout=self.COMMAND_TIMEOUT,
            )
        except subprocess.CalledProcessError as e:
            raise PublishError(f"{command[0]} exited with status {e.returncode}") from e
        except subprocess.TimeoutExpired as e:
            raise PublishError(f"{command[0]} timed out after {self.COMMAND_TIMEOUT}s") from e
        except OSError as e:
            raise PublishError(f"cannot run {command[0]}: {e}") from e
