"""Centralized logging configuration for the reviewclient application.

Every record goes to stdout; when ``logging.file`` is configured, records
are also written to a size-rotated log file. Technical failure detail
(timeouts, status codes, transport errors) only ever reaches these
handlers, never the user-facing messages.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_MAX_BYTES = 1_000_000
LOG_FILE_BACKUPS = 3

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(RotatingFileHandler(
            log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding='utf-8'
        ))
    return handlers


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None,
) -> None:
    """Replaces the root logger's handlers with the configured ones.

    Args:
        log_level: Minimum level for the root logger and its handlers.
        log_format: Format string shared by all handlers.
        log_file: Optional path of a rotating log file. A file that cannot
            be opened is reported and skipped; console logging still works.
    """
    try:
        handlers = _build_handlers(log_file)
        file_error = None
    except OSError as e:
        handlers = _build_handlers(None)
        file_error = e

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
    root.setLevel(log_level)

    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    if file_error is not None:
        logging.error(f"Could not open log file {log_file}: {file_error}")
    elif log_file:
        logging.info(f"Logging to file: {log_file}")
    logging.debug(f"Logging configured at {logging.getLevelName(log_level)}")


def level_from_name(name: Optional[str], default: int = DEFAULT_LOG_LEVEL) -> int:
    """Maps 'debug' / 'INFO' / ... to a logging level, falling back to default."""
    if not name:
        return default
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default
