"""
Logging setup shared by the indexer, the search CLI and the web app.

Log records go to stderr and to a rotating file under the configured
logs directory. Stdout is left to the scripts, which print search
results and progress bars there.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


LOG_FILENAME = "jsonsearch.log"
CONSOLE_HANDLER_NAME = "jsonsearch.console"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_logger_initialized = False


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def _console_handler() -> Optional[logging.Handler]:
    for handler in logging.getLogger().handlers:
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            return handler
    return None


def setup_logging(
    log_level: str = "INFO",
    log_format: str = DEFAULT_FORMAT,
    logs_directory: Path = None,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    console_level: str = None
) -> None:
    """
    Attach the console and rotating file handlers to the root logger.

    Runs once per process; later calls are ignored until the
    initialization flag is reset.

    Args:
        log_level: Level of the root logger and of the log file.
        log_format: Format string shared by both handlers.
        logs_directory: Directory of the log file. None disables the file.
        max_file_size_mb: Size at which the log file is rotated.
        backup_count: Number of rotated files kept.
        console_level: Level of the stderr handler, defaults to log_level.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    file_level = _to_level(log_level)
    stderr_level = _to_level(console_level) if console_level else file_level
    formatter = logging.Formatter(log_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(min(file_level, stderr_level))

    console = logging.StreamHandler(sys.stderr)
    console.set_name(CONSOLE_HANDLER_NAME)
    console.setLevel(stderr_level)
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    if logs_directory:
        log_path = Path(logs_directory) / LOG_FILENAME
        log_path.parent.mkdir(parents=True, exist_ok=True)

        rotating = RotatingFileHandler(
            log_path,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        rotating.setLevel(file_level)
        rotating.setFormatter(formatter)
        root_logger.addHandler(rotating)

    _logger_initialized = True


def set_console_level(level: Union[str, int]) -> None:
    """
    Change how much reaches stderr without touching the log file.

    Used by the scripts: --quiet keeps warnings only while a progress
    bar is drawn, --verbose shows how each clause became an FTS5 query.
    """
    console = _console_handler()
    if console is None:
        return

    numeric = _to_level(level)
    console.setLevel(numeric)

    root_logger = logging.getLogger()
    if numeric < root_logger.level:
        root_logger.setLevel(numeric)


def _setup_from_config() -> None:
    from .config_loader import get_config
    from .exceptions import ConfigurationError

    try:
        config = get_config()
    except ConfigurationError:
        # No usable config yet: stderr only, the caller reports the error
        setup_logging()
        return

    setup_logging(
        log_level=config.logging.level,
        log_format=config.logging.format,
        logs_directory=config.paths.logs_directory,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger, configuring logging from config.json on first use.

    Args:
        name: Logger name, usually the module's __name__.
    """
    if not _logger_initialized:
        _setup_from_config()

    return logging.getLogger(name)
