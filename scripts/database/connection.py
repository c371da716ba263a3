"""
SQLite engine construction for the trail data store.

The store lives in a single local file. Every new DBAPI connection gets the
configured journal mode (WAL by default, for crash safety) and foreign-key
enforcement before SQLAlchemy hands it out.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from config.settings import config
from scripts.database.errors import StoreConnectionError

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


def _apply_pragmas(dbapi_connection, connection_record) -> None:
    """Set journal mode and foreign-key enforcement on a fresh connection."""
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute(f"PRAGMA journal_mode = {config.SQLITE_JOURNAL_MODE}")
        foreign_keys = "ON" if config.SQLITE_FOREIGN_KEYS else "OFF"
        cursor.execute(f"PRAGMA foreign_keys = {foreign_keys}")
    finally:
        cursor.close()


def get_sqlite_engine(db_path: Optional[str] = None) -> Engine:
    """
    Create a SQLAlchemy engine for the local SQLite store.

    Args:
        db_path (Optional[str]): Path to the SQLite file. If None, uses the
                                 per-user location from configuration.
                                 Pass ":memory:" for an in-process database.

    Returns:
        Engine: SQLAlchemy engine with pragmas applied on every connection

    Raises:
        StoreConnectionError: If the data directory cannot be created
    """
    path = db_path or config.get_database_path()

    if path != MEMORY_DATABASE:
        db_dir = os.path.dirname(os.path.abspath(path))
        try:
            os.makedirs(db_dir, exist_ok=True)
        except OSError as e:
            raise StoreConnectionError(
                f"Cannot create data directory {db_dir}: {e}"
            ) from e

    engine = create_engine(config.get_database_url(path))
    event.listen(engine, "connect", _apply_pragmas)

    logger.debug(f"Created SQLite engine for {path}")
    return engine


def check_connection(engine: Engine) -> None:
    """
    Verify the store is reachable by running a trivial query.

    Args:
        engine (Engine): Engine to test

    Raises:
        StoreConnectionError: If a connection cannot be established
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed for {engine.url}: {e}")
        raise StoreConnectionError(f"Database connection failed: {e}") from e


def is_connected(engine: Engine) -> bool:
    """Return True if the store answers a trivial query."""
    try:
        check_connection(engine)
    except StoreConnectionError:
        return False
    return True


def dispose_engine(engine: Engine) -> None:
    """Close every pooled connection held by *engine*."""
    engine.dispose()
    logger.debug(f"Disposed SQLite engine for {engine.url}")
