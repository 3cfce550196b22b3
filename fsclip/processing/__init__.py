# fsclip/processing/__init__.py

"""
fs-clip content processing
"""
from .classifier import (
    ClassifiedPayload, ClipboardFormat, classify_content, clipboard_format_for,
    refine_content_type
)
from .sniff import detect_content_type

__all__ = [
    'ClassifiedPayload',
    'ClipboardFormat',
    'classify_content',
    'clipboard_format_for',
    'refine_content_type',
    'detect_content_type',
]
