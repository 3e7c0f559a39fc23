"""Centralized logging utilities."""

import logging
import sys
from typing import Dict, List, Optional
from pathlib import Path

# Handlers added by setup_logger, per logger name
_installed_handlers: Dict[str, List[logging.Handler]] = {}


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up a logger with console and optional file output.

    Args:
        name: Logger name
        level: Logging level
        log_file: Optional file to write logs to
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Replace handlers installed by an earlier call
    for handler in _installed_handlers.pop(name, []):
        logger.removeHandler(handler)
        handler.close()
    installed = _installed_handlers.setdefault(name, [])

    if format_string is None:
        format_string = '[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s'

    formatter = logging.Formatter(format_string, datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    installed.append(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        installed.append(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the given name.

    Module loggers carry no handlers of their own; they propagate to the root
    logger, which gets a console handler on first use unless the entry point
    already configured it with setup_logger('').

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    root = logging.getLogger()
    if not root.handlers:
        setup_logger('')
    return logging.getLogger(name)
