# fsclip/utils/__init__.py

"""
fs-clip utilities
"""
from .config import Config, PathConfig, WatchdogConfig, load_config
from .logger import setup_logging
from .file_utils import (
    resolve_watch_path, ensure_watch_dir, read_file_bytes,
    safe_delete_file, list_regular_files
)
from .image_utils import to_png, to_dib

__all__ = [
    'Config', 'PathConfig', 'WatchdogConfig', 'load_config',
    'setup_logging',
    'resolve_watch_path', 'ensure_watch_dir', 'read_file_bytes',
    'safe_delete_file', 'list_regular_files',
    'to_png', 'to_dib',
]
