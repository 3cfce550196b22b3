# fsclip/errors.py

"""
Exception hierarchy for fs-clip
"""
from typing import Optional


class FsClipError(Exception):
    """Base class for all fs-clip errors"""


class WatchRootError(FsClipError):
    """Watch root cannot be used as a directory"""


class WatcherError(FsClipError):
    """File system observer could not be started"""


class ClipboardInitError(FsClipError):
    """No usable clipboard backend on this system"""


class ConfigError(FsClipError):
    """Configuration file could not be loaded"""


class ContentError(FsClipError):
    """File content cannot be put on the clipboard"""


class EmptyContentError(ContentError):

    def __init__(self, message: str = "file content is empty"):
        super().__init__(message)


class UnsupportedContentError(ContentError):

    def __init__(self, content_type: str, message: Optional[str] = None):
        self.content_type = content_type
        super().__init__(message or f"unsupported content type: {content_type}")


class PublishError(FsClipError):
    """Clipboard write failed; the clipboard is presumed unchanged"""
