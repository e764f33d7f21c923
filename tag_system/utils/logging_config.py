"""
Centralized logging configuration for the tag system.

Provides console output and optional rotating log files under
the ``tag_system`` logger namespace, with one consistent format.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Union


# Log format with timestamp, level, module, and message
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAMESPACE = "tag_system"

DEFAULT_LOG_DIR = Path("logs")


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[Path] = None,
    console: bool = True,
    file: bool = False,
    max_bytes: int = 5 * 1024 * 1024,  # 5 MB
    backup_count: int = 3,
) -> logging.Logger:
    """
    Configure logging for the tag system.

    Args:
        level: Logging level, as an int or a level name such as "DEBUG"
        log_dir: Directory for log files (default: ./logs)
        console: Enable console output
        file: Enable file output with rotation
        max_bytes: Max size per log file before rotation
        backup_count: Number of backup files to keep

    Returns:
        Root logger for the tag_system namespace
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    root_logger.setLevel(level)

    # Clear any existing handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if file:
        log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "tag_system.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        # Error-only file handler
        error_handler = logging.handlers.RotatingFileHandler(
            log_dir / "tag_system_errors.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (e.g., "registry", "tag_store")

    Returns:
        Logger instance under the tag_system namespace

    Example:
        >>> logger = get_logger("registry")
        >>> logger.warning("Tag name 'Enemy' already exists")
    """
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
