# fsclip/utils/config.py

"""
Configuration management for fs-clip
"""
import os
import sys
import json
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, asdict
import logging

from ..errors import ConfigError
from .file_utils import default_watch_dir

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "color", "json")


@dataclass
class PathConfig:
    """Path configuration"""
    watch_dir: Path = field(default_factory=default_watch_dir)

    def __post_init__(self):
        if isinstance(self.watch_dir, str):
            self.watch_dir = Path(self.watch_dir)


@dataclass
class WatchdogConfig:
    """File watchdog configuration"""
    debounce_time: float = 0.1  # seconds
    use_polling: bool = False
    poll_interval: float = 1.0  # seconds, polling observer only
    process_existing: bool = False

    def __post_init__(self):
        self.debounce_time = float(self.debounce_time)
        self.poll_interval = float(self.poll_interval)
        if self.debounce_time <= 0:
            raise ConfigError(f"debounce_time must be positive, got {self.debounce_time}")
        if self.poll_interval <= 0:
            raise ConfigError(f"poll_interval must be positive, got {self.poll_interval}")


@dataclass
class Config:
    """Main configuration class"""
    paths: PathConfig = field(default_factory=PathConfig)
    watchdog: WatchdogConfig = field(default_factory=WatchdogConfig)

    # Only warnings by default, don't write too much to the user's disk
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    log_format: str = "text"  # text, color or json

    def __post_init__(self):
        self.log_level = normalize_log_level(self.log_level)
        if self.log_format not in LOG_FORMATS:
            raise ConfigError(f"unknown log format: {self.log_format}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        def serialize(obj):
            if isinstance(obj, Path):
                return str(obj)
            if isinstance(obj, dict):
                return {k: serialize(v) for k, v in obj.items()}
            return obj

        return serialize(asdict(self))

    def update_from_dict(self, data: Dict[str, Any]):
        """
        Update config from a (possibly partial) nested dictionary

        Raises:
            ConfigError: on unknown keys or invalid values
        """
        sections = {
            'paths': PathConfig,
            'watchdog': WatchdogConfig,
        }

        for key, value in data.items():
            if key in sections:
                if not isinstance(value, dict):
                    raise ConfigError(f"section '{key}' must be a mapping")
                current = asdict(getattr(self, key))
                unknown = set(value) - set(current)
                if unknown:
                    raise ConfigError(f"unknown keys in '{key}': {', '.join(sorted(unknown))}")
                current.update(value)
                try:
                    setattr(self, key, sections[key](**current))
                except (TypeError, ValueError) as e:
                    raise ConfigError(f"invalid value in '{key}': {e}") from e
            elif key in ('log_level', 'log_file', 'log_format'):
                setattr(self, key, value)
            else:
                raise ConfigError(f"unknown configuration key: {key}")

        # Re-validate top level values
        self.__post_init__()


def normalize_log_level(level: str) -> str:
    """Accept any case and the WARN alias"""
    name = str(level).strip().upper()
    if name == "WARN":
        name = "WARNING"
    if name not in LOG_LEVELS:
        raise ConfigError(f"unknown log level: {level}")
    return name


def get_default_config_paths() -> List[Path]:
    """Candidate config file locations, most specific first"""
    config_paths = [
        Path("fs-clip.yaml"),
        Path("fs-clip.json"),
    ]

    if sys.platform == "win32":
        appdata = Path(os.environ.get('LOCALAPPDATA', Path.home()))
        config_paths.extend([
            appdata / "fs-clip" / "config.yaml",
            appdata / "fs-clip" / "config.json",
        ])
    elif sys.platform == "darwin":
        support = Path.home() / "Library" / "Application Support" / "fs-clip"
        config_paths.extend([
            support / "config.yaml",
            support / "config.json",
        ])
    else:  # linux
        config_home = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / ".config"))
        config_paths.extend([
            config_home / "fs-clip" / "config.yaml",
            config_home / "fs-clip" / "config.json",
        ])

    return config_paths


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            if config_path.suffix.lower() in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            else:  # JSON
                data = json.load(f)
    except (OSError, yaml.YAMLError, ValueError) as e:
        raise ConfigError(f"error loading configuration from {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"configuration in {config_path} must be a mapping")
    return data


def load_config(path: Union[str, Path, None] = None) -> Config:
    """
    Load configuration from file or fall back to defaults

    Args:
        path: Explicit config file. It must exist; when omitted the
            platform default locations are searched.

    Raises:
        ConfigError: if a config file exists but cannot be used
    """
    config = Config()

    if path:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"configuration file not found: {config_path}")
        candidates = [config_path]
    else:
        candidates = get_default_config_paths()

    for config_path in candidates:
        if config_path.exists():
            logger.info(f"Loading configuration from {config_path}")
            config.update_from_dict(_read_config_file(config_path))
            return config

    logger.debug("No configuration file found, using defaults")
    return config
