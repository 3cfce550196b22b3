# fsclip/processing/sniff.py

"""
Content type detection from raw bytes, backed by libmagic
"""
import logging
from functools import lru_cache

import magic

from ..errors import ContentError

logger = logging.getLogger(__name__)

# Only the head of the buffer is inspected
SNIFF_LEN = 512

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@lru_cache(maxsize=None)
def _get_magic() -> magic.Magic:
    return magic.Magic(mime=True)


def detect_content_type(data: bytes) -> str:
    """
    Detect the MIME type of a byte buffer

    Args:
        data: Raw file content

    Returns:
        MIME type reported by libmagic for the first SNIFF_LEN bytes,
        "application/octet-stream" when libmagic has no answer

    Raises:
        ContentError: if libmagic fails on the buffer
    """
    head = data[:SNIFF_LEN]

    try:
        mime_type = _get_magic().from_buffer(head)
    except magic.MagicException as e:
        raise ContentError(f"cannot detect content type: {e}") from e

    logger.debug(f"libmagic reported {mime_type} for {len(data)} bytes")
    return mime_type or DEFAULT_CONTENT_TYPE
