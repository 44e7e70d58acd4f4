"""Logging setup for Handpicked with file and console output"""

import logging
import logging.handlers
import sys
from pathlib import Path

from handpicked.config import LoggingConfig


def setup_logging(
    logging_config: LoggingConfig | None = None,
    log_level: str | None = None,
) -> logging.Logger:
    """
    Set up logging for the Handpicked application.

    This configures logging to write to:
    - Console (stdout)
    - File with rotation

    Args:
        logging_config: Logging section of the configuration (defaults apply if None)
        log_level: Overrides the configured level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured root logger
    """
    logging_config = logging_config or LoggingConfig()
    level_name = (log_level or logging_config.level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(logging_config.format, datefmt="%Y-%m-%d %H:%M:%S")
    console_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    if logging_config.to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    log_file_path = Path(logging_config.file)
    if logging_config.to_file:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file_path,
            maxBytes=logging_config.max_bytes,
            backupCount=logging_config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

    root_logger.info(f"Handpicked logging initialized - Level: {level_name}")
    if logging_config.to_file:
        root_logger.info(
            f"Log file: {log_file_path} "
            f"(max {logging_config.max_bytes / (1024 * 1024):.1f} MB, "
            f"{logging_config.backup_count} backups)"
        )

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module."""
    return logging.getLogger(name)
