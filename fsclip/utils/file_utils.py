"""
File utilities for fs-clip
"""
import os
import logging
from pathlib import Path
from typing import List, Union

from ..errors import WatchRootError

logger = logging.getLogger(__name__)

DEFAULT_WATCH_DIR_NAME = "fs-clip-watch"

# Owner only; dropped files may hold anything that ends up on the clipboard
WATCH_DIR_MODE = 0o700


def default_watch_dir() -> Path:
    return Path.home() / DEFAULT_WATCH_DIR_NAME


def resolve_watch_path(path: Union[str, Path, None] = None) -> Path:
    """
    Turn a configured watch directory into an absolute path
    
    Args:
        path: Directory from CLI or config; None or "" means the default
        
    Returns:
        Absolute path with ~ and environment variables expanded
    """
    if not path:
        return default_watch_dir()
    
    expanded = os.path.expandvars(os.path.expanduser(str(path)))
    return Path(expanded).absolute()


def ensure_watch_dir(path: Path) -> Path:
    """
    Create the watch directory if needed and check it is a directory
    
    Raises:
        WatchRootError: if the path exists but is not a directory, or
            cannot be created
    """
    try:
        path.mkdir(mode=WATCH_DIR_MODE, parents=True)
        logger.info(f"Created watch directory: {path}")
        return path
    except FileExistsError:
        pass
    except OSError as e:
        raise WatchRootError(f"cannot create watch directory {path}: {e}") from e
    
    if not path.is_dir():
        raise WatchRootError(f"path exists but is not a directory: {path}")
    
    return path


def read_file_bytes(path: Path) -> bytes:
    with open(path, 'rb') as f:
        return f.read()


def safe_delete_file(path: Path) -> bool:
    """Delete a file, logging instead of raising on failure"""
    try:
        path.unlink()
        logger.debug(f"Deleted file: {path}")
        return True
    except OSError as e:
        logger.error(f"Error while removing file {path}: {e}")
        return False


def list_regular_files(directory: Path) -> List[Path]:
    """Regular files directly inside directory, sorted by name"""
    try:
        return sorted(p for p in directory.iterdir() if p.is_file())
    except OSError as e:
        logger.error(f"Error listing directory {directory}: {e}")
        return []
