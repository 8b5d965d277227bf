# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-07
# Description: logging_utils.py
# -----------------------------------------------------------------------------
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

import colorlog

BASE_LOGGER_NAME = "simsearch"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "y")


def _console_handler() -> logging.Handler:
    handler = colorlog.StreamHandler()
    handler.setFormatter(
        colorlog.ColoredFormatter(
            fmt=(
                "%(log_color)s%(asctime)s [%(levelname)s] "
                "%(name)s:%(lineno)d:%(reset)s %(message_log_color)s%(message)s"
            ),
            datefmt=DATE_FORMAT,
            log_colors=LOG_COLORS,
            secondary_log_colors={
                "message": {
                    "INFO": "white",
                    "WARNING": "yellow",
                    "ERROR": "light_red",
                    "CRITICAL": "red",
                }
            },
            style="%",
        )
    )
    return handler


def _file_handler() -> logging.Handler:
    """
    Rotating plain-text log. Off unless SIMSEARCH_LOG_TO_FILE is set, since
    a library should not write files its host did not ask for.
    """
    log_path = Path(os.getenv("SIMSEARCH_LOG_FILE", "./logs/simsearch.log"))
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=int(os.getenv("SIMSEARCH_LOG_MAX_BYTES", str(5 * 1024 * 1024))),  # 5MB
        backupCount=int(os.getenv("SIMSEARCH_LOG_BACKUP_COUNT", "5")),
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s",
            datefmt=DATE_FORMAT,
        )
    )
    return handler


def _create_logger(full_name: str) -> logging.Logger:
    """
    Configure `full_name` on first use only; later calls return it untouched.
    """
    logger = logging.getLogger(full_name)
    if logger.handlers:
        return logger

    logger.addHandler(_console_handler())
    if _env_flag("SIMSEARCH_LOG_TO_FILE"):
        logger.addHandler(_file_handler())

    level_name = os.getenv("SIMSEARCH_LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    logger.propagate = False

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Generic logger that does not include a class name.
    """
    full_name = f"{BASE_LOGGER_NAME}.{name}" if name else BASE_LOGGER_NAME
    return _create_logger(full_name)


def get_class_logger(cls: type) -> logging.Logger:
    """
    Returns a logger whose name includes module + class, e.g.:

      simsearch.index.SimilarityIndex.SimilarityIndex
      simsearch.persistence.JsonStore.JsonStore
    """
    module = getattr(cls, "__module__", "unknown_module")
    classname = getattr(cls, "__name__", "UnknownClass")
    return _create_logger(f"{BASE_LOGGER_NAME}.{module}.{classname}")


def set_log_level(level: int | str) -> None:
    """Change the level of every simsearch logger created so far."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    prefix = f"{BASE_LOGGER_NAME}."
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and (name == BASE_LOGGER_NAME or name.startswith(prefix)):
            logger.setLevel(level)
