"""Logging setup for OpenShelf with file and console output"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import TextIO

from ..config import LoggingConfig


def setup_logging(
    log_level: str = "INFO",
    log_file: str | None = "logs/openshelf.log",
    log_to_console: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    log_format: str | None = None,
    console_stream: TextIO | None = None,
) -> logging.Logger:
    """
    Set up logging for the OpenShelf process.

    Writes to the console (stdout by default) and, when ``log_file`` is
    set, to a rotating file.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (absolute or relative); None disables file logging
        log_to_console: Whether to log to console
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
        log_format: Custom log format string
        console_stream: Stream for console output (default sys.stdout)

    Returns:
        Configured root logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    if log_to_console:
        console_handler = logging.StreamHandler(console_stream or sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_file_path = Path(log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

    root_logger.debug(
        f"Logging initialized - Level: {log_level}, file: {log_file or 'disabled'}"
    )
    return root_logger


def setup_logging_from_config(
    logging_config: LoggingConfig,
    log_to_console: bool = True,
    console_stream: TextIO | None = None,
) -> logging.Logger:
    """Configure logging from the ``logging`` config section."""
    return setup_logging(
        log_level=logging_config.level,
        log_file=logging_config.file or None,
        log_to_console=log_to_console,
        max_bytes=logging_config.max_bytes,
        backup_count=logging_config.backup_count,
        log_format=logging_config.format,
        console_stream=console_stream,
    )

