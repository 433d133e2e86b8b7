"""Logging configuration for the wordset prompt generation job."""

import logging
import sys
from datetime import datetime

import config

DEFAULT_LOGGER_NAME = "wordprompt"


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    log_file: str | None = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Set up and return a configured logger.

    Args:
        name: Logger name
        log_file: Optional specific log file name. If None, generates timestamp-based name.
        level: Logging level

    Returns:
        Configured logger instance
    """
    config.LOGS_DIR.mkdir(parents=True, exist_ok=True)

    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = f"run_{timestamp}.log"

    log_path = config.LOGS_DIR / log_file

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_formatter = logging.Formatter("%(message)s")

    # File handler - captures everything
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    # Console handler - for user-facing output
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    logger.info(f"Log file: {log_path}")

    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Get an existing logger by name."""
    return logging.getLogger(name)


def setup_loop_logger(mode: str) -> logging.Logger:
    """
    Set up logger for continuous mode with a mode-specific log file.

    Args:
        mode: Run mode ("prompts" or "images")

    Returns:
        Configured logger instance
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = f"loop_{mode}_{timestamp}.log"
    return setup_logger(log_file=log_file)
