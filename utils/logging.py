"""
Logging setup for the Camino Planner trail store.

Every logger gets a stdout handler and, when its file can be opened, a
size-rotated log file. The store and the importer each have a named logger
with its own file; anything else logs to logs/<name>.log.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from config.settings import config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

TRAIL_STORE_LOGGER = "trail_store"
IMPORTER_LOGGER = "waypoint_importer"


def _default_log_file(logger_name: str | None) -> str:
    """Map a logger name to its configured log file."""
    known_files = {
        TRAIL_STORE_LOGGER: config.LOG_FILE,
        IMPORTER_LOGGER: config.IMPORTER_LOG_FILE,
    }
    return known_files.get(logger_name, f"logs/{logger_name or 'default'}.log")


def _attach_rotating_file(
    logger: logging.Logger,
    log_file: str,
    max_bytes: int,
    backup_count: int,
    formatter: logging.Formatter,
) -> bool:
    """
    Add a RotatingFileHandler for *log_file*, creating its directory.

    Returns:
        bool: False if the file could not be opened; the logger is left as is
    """
    try:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
    except OSError as e:
        logger.warning(f"Cannot write log file {log_file}: {e}; logging to console only")
        return False

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return True


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    logger_name: str | None = None,
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> logging.Logger:
    """
    Configure a logger with console and rotating-file output.

    Calling this again for the same logger replaces its handlers rather than
    stacking new ones.

    Args:
        log_level (str, optional): Level name such as 'INFO' or 'DEBUG'.
                                   Defaults to config.LOG_LEVEL
        log_file (str, optional): Log file path. Defaults to the file configured
                                  for *logger_name*
        logger_name (str, optional): Logger to configure. None means the root logger
        max_bytes (int, optional): Rotation size. Defaults to config.LOG_MAX_BYTES
        backup_count (int, optional): Rotated files kept. Defaults to config.LOG_BACKUP_COUNT

    Returns:
        logging.Logger: The configured logger

    Example:
        >>> logger = setup_logging('DEBUG', 'logs/pace.log', 'pace')
        >>> logger.debug("Cascade from Siena")
    """
    log_level = (log_level or config.LOG_LEVEL).upper()
    log_file = log_file or _default_log_file(logger_name)

    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, log_level))

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    rotating = _attach_rotating_file(
        logger,
        log_file,
        config.LOG_MAX_BYTES if max_bytes is None else max_bytes,
        config.LOG_BACKUP_COUNT if backup_count is None else backup_count,
        formatter,
    )
    if rotating:
        logger.debug(f"Logging at {log_level} to console and {log_file}")
    return logger


def setup_trail_store_logging(log_level: str | None = None) -> logging.Logger:
    """Logger used by TrailDatabase when the host application supplies none."""
    return setup_logging(log_level=log_level, logger_name=TRAIL_STORE_LOGGER)


def setup_importer_logging(log_level: str | None = None) -> logging.Logger:
    """Logger used by a standalone WaypointCSVImporter; writes config.IMPORTER_LOG_FILE."""
    return setup_logging(log_level=log_level, logger_name=IMPORTER_LOGGER)
