# fsclip/processing/classifier.py

"""
Maps file content onto a clipboard format
"""
import json
from dataclasses import dataclass
from enum import Enum

from ..errors import EmptyContentError, UnsupportedContentError
from .sniff import detect_content_type


class ClipboardFormat(Enum):
    TEXT = "text"
    IMAGE = "image"


# Non text/* types that are still useful as clipboard text
TEXT_LIKE_TYPES = {
    "application/rtf",
    "application/json",
    "application/xml",
    "application/pdf",
}

VENDOR_PREFIX = "application/vnd."

RTF_MAGIC = b"{\\rtf"


@dataclass(frozen=True)
class ClassifiedPayload:
    """Bytes ready for the clipboard"""
    data: bytes
    format: ClipboardFormat
    content_type: str

    def __str__(self):
        return f"{self.format.value} ({self.content_type}, {len(self.data)} bytes)"


def media_type(content_type: str) -> str:
    """Strip parameters: 'text/plain; charset=utf-8' -> 'text/plain'"""
    return content_type.split(";", 1)[0].strip().lower()


def _looks_like_json(data: bytes) -> bool:
    stripped = data.lstrip()
    if not stripped or stripped[:1] not in (b"{", b"["):
        return False
    try:
        json.loads(data.decode("utf-8-sig"))
    except ValueError:
        return False
    return True


def refine_content_type(content_type: str, data: bytes) -> str:
    """
    Name RTF and JSON documents that libmagic reports as generic text

    JSON is checked against the whole buffer, not just the sniffed head.
    """
    mtype = media_type(content_type)

    if mtype == "text/rtf" or data.startswith(RTF_MAGIC):
        return "application/rtf"
    if mtype in ("text/plain", "application/json") and _looks_like_json(data):
        return "application/json"
    return content_type


def clipboard_format_for(content_type: str) -> ClipboardFormat:
    """
    Decide the clipboard format for a detected content type

    Raises:
        UnsupportedContentError: if the type is neither text-like nor an image
    """
    mtype = media_type(content_type)

    if (mtype.startswith("text/")
            or mtype.startswith(VENDOR_PREFIX)
            or mtype in TEXT_LIKE_TYPES):
        return ClipboardFormat.TEXT

    if mtype.startswith("image/"):
        return ClipboardFormat.IMAGE

    raise UnsupportedContentError(content_type)


def classify_content(data: bytes) -> ClassifiedPayload:
    """
    Classify raw file content

    Args:
        data: Full file content

    Returns:
        Classified payload wrapping the same bytes

    Raises:
        EmptyContentError: if data is empty
        ContentError: if the content type cannot be detected
        UnsupportedContentError: if the detected type has no clipboard format
    """
    if not data:
        raise EmptyContentError()

    content_type = refine_content_type(detect_content_type(data), data)
    return ClassifiedPayload(
        data=data,
        format=clipboard_format_for(content_type),
        content_type=content_type,
    )
