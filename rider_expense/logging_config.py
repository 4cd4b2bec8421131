"""
Logging for the Rider Expense service.

Everything goes through the root logger, which gets three handlers:

- console, short format, at the configured level
- ``rider_expense.log``, rotating, detailed format, at the configured level
- ``errors.log``, rotating, detailed format, ERROR and above

Modules obtain their logger with ``get_logger(__name__)``.
"""

import logging
import logging.handlers
import os
from typing import Optional

APP_LOG_NAME = "rider_expense.log"
ERROR_LOG_NAME = "errors.log"

DETAILED_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

# (file name, max bytes, backups, minimum level or None for the configured one)
_FILE_HANDLERS = (
    (APP_LOG_NAME, 10 * 1024 * 1024, 5, None),
    (ERROR_LOG_NAME, 5 * 1024 * 1024, 3, logging.ERROR),
)

# Third party loggers that are too chatty at INFO
_QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "passlib": logging.ERROR,
}


def _rotating_handler(path: str, max_bytes: int, backups: int, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(level: str = "INFO", log_dir: Optional[str] = "logs"):
    """
    Configure application-wide logging. Safe to call more than once.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating files, created if missing;
            falsy to log to the console only
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(log_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    root_logger.addHandler(console)

    paths = []
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        for name, max_bytes, backups, min_level in _FILE_HANDLERS:
            path = os.path.join(log_dir, name)
            root_logger.addHandler(_rotating_handler(path, max_bytes, backups, min_level or log_level))
            paths.append(path)

    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    root_logger.info(f"Logging configured at level: {level}")
    if paths:
        root_logger.info(f"Log files: {', '.join(paths)}")


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; pass ``__name__``."""
    return logging.getLogger(name)
