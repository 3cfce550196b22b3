# fsclip/main.py

"""
fs-clip - copies files dropped into a watched directory to the clipboard
"""
import argparse
import logging
from typing import List, Optional

from . import __version__
from .clipboard import get_clipboard_publisher
from .errors import ConfigError, FsClipError
from .utils.config import Config, LOG_FORMATS, load_config, normalize_log_level
from .utils.file_utils import ensure_watch_dir, resolve_watch_path
from .utils.logger import setup_logging
from .watchdog import DirectoryWatcher, EventDispatcher, SettleTimerRegistry

logger = logging.getLogger(__name__)


def _log_level(value: str) -> str:
    try:
        return normalize_log_level(value)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e))


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fs-clip",
        description="Watch a directory and copy each new file to the clipboard, then delete it.",
    )
    parser.add_argument("--watch-dir", help="Directory to watch for files (default: ~/fs-clip-watch)")
    parser.add_argument("--log-level", type=_log_level,
                        help="Log level: DEBUG, INFO, WARN, ERROR (default: WARN)")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--log-format", choices=LOG_FORMATS, help="Log output format")
    parser.add_argument("--config", help="Path to a YAML or JSON configuration file")
    parser.add_argument("--debounce", type=_positive_float,
                        help="Seconds without writes before a file counts as complete")
    parser.add_argument("--polling", action="store_true", default=None,
                        help="Poll the directory instead of using OS notifications")
    parser.add_argument("--process-existing", action="store_true", default=None,
                        help="Also copy files already in the directory at startup")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Command line values win over the configuration file"""
    if args.watch_dir:
        config.paths.watch_dir = args.watch_dir
    if args.log_level:
        config.log_level = args.log_level
    if args.log_file:
        config.log_file = args.log_file
    if args.log_format:
        config.log_format = args.log_format
    if args.debounce is not None:
        config.watchdog.debounce_time = args.debounce
    if args.polling is not None:
        config.watchdog.use_polling = args.polling
    if args.process_existing is not None:
        config.watchdog.process_existing = args.process_existing
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = apply_overrides(load_config(args.config), args)
    except ConfigError as e:
        setup_logging()
        logger.critical(f"Invalid configuration: {e}")
        return 1

    setup_logging(config.log_level, config.log_file, config.log_format)
    logger.info("Starting up fs-clip.")
    logger.debug(f"Configuration: {config.to_dict()}")

    watch_path = resolve_watch_path(config.paths.watch_dir)
    registry = SettleTimerRegistry()
    watcher = None

    try:
        ensure_watch_dir(watch_path)
        publisher = get_clipboard_publisher()

        dispatcher = EventDispatcher(registry, publisher, config.watchdog.debounce_time)
        watcher = DirectoryWatcher(
            watch_path,
            use_polling=config.watchdog.use_polling,
            poll_interval=config.watchdog.poll_interval,
        )
        watcher.start()

        if config.watchdog.process_existing:
            dispatcher.arm_existing(watch_path)

        dispatcher.run(watcher.events())
        logger.debug(f"Dispatcher stats: {dispatcher.get_stats()}")

    except FsClipError as e:
        logger.critical(str(e))
        return 1

    except KeyboardInterrupt:
        logger.info("Shutting down")
        registry.cancel_all()

    finally:
        if watcher:
            watcher.stop()

    return 0
