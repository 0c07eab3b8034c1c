"""
Logging configuration for AndroPrint Service.

Listing printers probes every device from a worker thread and Flask serves
requests on its own threads, so every record carries the thread name.

Log Format:
    2026-10-19 10:15:30 [INFO    ] [MainThread] andro_print_service.app - Loaded 2 printer(s)
    2026-10-19 10:15:31 [WARNING ] [probe_0] andro_print_service.liveness - ...

Usage:
    from andro_print_service.logging_config import setup_logging

    setup_logging(log_level='DEBUG')
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


LOGGER_NAMESPACE = 'andro_print_service'


class ThreadContextFilter(logging.Filter):
    """Adds ``thread_name`` to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.thread_name = threading.current_thread().name
        return True


def setup_logging(
    log_level: Union[int, str] = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        log_level: Minimum level, as int or level name
        log_dir: Directory for rotating log files (None = console only)

    Returns:
        The configured package logger
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    thread_filter = ThreadContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(thread_filter)
    logger.addHandler(console_handler)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=log_dir / f'{LOGGER_NAMESPACE}.log',
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(thread_filter)
        logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            filename=log_dir / f'{LOGGER_NAMESPACE}_error.log',
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        error_handler.addFilter(thread_filter)
        logger.addHandler(error_handler)

        logger.info(f"File logging enabled: {log_dir}")

    logger.debug(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger
