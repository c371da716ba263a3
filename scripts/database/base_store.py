"""
Common plumbing for the trail store components.

Each store holds the shared engine, provisioner and logger, and runs its
single-statement reads and writes through the helpers below so that every
failure is logged and translated the same way.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import Engine, Table, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from scripts.database.errors import translate_storage_error
from scripts.database.provisioner import SchemaProvisioner


class BaseStore:
    """Engine, provisioner and logger wiring plus id-keyed CRUD helpers."""

    def __init__(
        self,
        engine: Engine,
        provisioner: Optional[SchemaProvisioner] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            engine (Engine): SQLAlchemy engine for the SQLite store
            provisioner (Optional[SchemaProvisioner]): Shared provisioner. If None,
                                                       one is created for this engine.
            logger (Optional[logging.Logger]): Logger instance for operation tracking
        """
        self.engine = engine
        self.logger = logger or logging.getLogger(type(self).__module__)
        self.provisioner = provisioner or SchemaProvisioner(engine, self.logger)

    def _insert(self, table: Table, values: dict, action: str) -> int:
        """Insert one row and return its id_no."""
        try:
            with self.engine.begin() as conn:
                result = conn.execute(insert(table).values(**values))
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to {action}: {e}")
            raise translate_storage_error(e, action) from e
        return result.inserted_primary_key[0]

    def _update(self, table: Table, id_no: int, values: dict, action: str) -> bool:
        """Update the row with *id_no*. Returns False if there is no such row."""
        try:
            with self.engine.begin() as conn:
                updated = conn.execute(
                    update(table).where(table.c.id_no == id_no).values(**values)
                ).rowcount
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to {action}: {e}")
            raise translate_storage_error(e, action) from e
        return updated > 0

    def _select_all(self, table: Table, action: str, *order_by) -> list:
        """Return every row of *table*, ordered by *order_by* or by id_no."""
        query = select(table).order_by(*(order_by or (table.c.id_no,)))
        try:
            with self.engine.connect() as conn:
                return conn.execute(query).mappings().all()
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to {action}: {e}")
            raise translate_storage_error(e, action) from e
