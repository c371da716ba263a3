"""
Schema provisioning for the trail data store.

The provisioner creates the fixed global tables once per process and, on first
use of each trail name, that trail's waypoint/trip/zero/attraction tables and
waypoint indexes. It also brings older databases up to date by adding columns
and indexes the current table templates define but the file lacks.

Example Usage:
    engine = get_sqlite_engine()
    provisioner = SchemaProvisioner(engine, logger)

    tables = provisioner.ensure("viafrancigena")
    with engine.connect() as conn:
        conn.execute(select(tables.waypoints))
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from sqlalchemy import Engine, MetaData, Table, inspect, text
from sqlalchemy.exc import SQLAlchemyError

from scripts.database.errors import SchemaError
from scripts.database.schema import (
    GlobalTables,
    TrailTables,
    define_global_tables,
    define_trail_tables,
    validate_trail_name,
)


class SchemaProvisioner:
    """
    Idempotently creates and migrates the store's tables.

    Calling ensure() on every operation entry is cheap: once a trail has been
    provisioned in this process its TrailTables are returned from memory.
    """

    def __init__(self, engine: Engine, logger: Optional[logging.Logger] = None):
        """
        Initialize the provisioner.

        Args:
            engine (Engine): SQLAlchemy engine for the SQLite store
            logger (Optional[logging.Logger]): Logger instance for operation tracking.
                                             If None, creates a default logger.
        """
        self.engine = engine
        self.logger = logger or logging.getLogger(__name__)
        self.metadata = MetaData()
        self.global_tables: GlobalTables = define_global_tables(self.metadata)
        self._globals_ready = False
        self._trail_tables: Dict[str, TrailTables] = {}

    def ensure_global(self) -> GlobalTables:
        """
        Create the reference, journal and app_config tables if absent.

        Returns:
            GlobalTables: The global table definitions

        Raises:
            SchemaError: If table creation fails
        """
        if not self._globals_ready:
            self._create_tables(self.global_tables.all(), "global tables")
            self._globals_ready = True
        return self.global_tables

    def ensure(self, trail: str) -> TrailTables:
        """
        Ensure the table family for *trail* (and the global tables) exist.

        Args:
            trail (str): Trail name

        Returns:
            TrailTables: Table definitions for the trail

        Raises:
            InvalidTrailNameError: If the trail name is not a safe identifier
            SchemaError: If table creation or migration fails
        """
        trail = validate_trail_name(trail)
        self.ensure_global()

        tables = self._trail_tables.get(trail)
        if tables is not None:
            return tables

        tables = define_trail_tables(self.metadata, trail)
        self._create_tables(tables.all(), f"tables for trail '{trail}'")
        self._trail_tables[trail] = tables
        self.logger.info(f"Trail tables ready for: {trail}")
        return tables

    def is_provisioned(self, trail: str) -> bool:
        """Return True if *trail* has been ensured by this provisioner."""
        return trail.lower() in self._trail_tables

    def _create_tables(self, tables: list[Table], description: str) -> None:
        """
        Create *tables* and their indexes, then add any missing columns.

        Args:
            tables (list[Table]): Tables to create
            description (str): Human-readable label for log messages

        Raises:
            SchemaError: If any DDL statement fails
        """
        try:
            self.metadata.create_all(self.engine, tables=tables, checkfirst=True)
            for table in tables:
                self._add_missing_columns(table)
                self._create_missing_indexes(table)
            self.logger.debug(f"Ensured {description}")
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to create {description}: {e}")
            raise SchemaError(f"Failed to create {description}: {e}") from e

    def _add_missing_columns(self, table: Table) -> None:
        """
        Add columns defined in *table* that the existing database table lacks.

        Names are compared case-insensitively, as SQLite resolves them.

        Columns are added as nullable, with their server default where one is
        defined, since SQLite cannot add a NOT NULL column without a default.

        Args:
            table (Table): Table definition to compare against the database
        """
        inspector = inspect(self.engine)
        existing = {col["name"].lower() for col in inspector.get_columns(table.name)}
        missing = [col for col in table.columns if col.name.lower() not in existing]
        if not missing:
            return

        preparer = self.engine.dialect.identifier_preparer
        with self.engine.begin() as conn:
            for column in missing:
                column_type = column.type.compile(dialect=self.engine.dialect)
                ddl = (
                    f"ALTER TABLE {preparer.format_table(table)} "
                    f"ADD COLUMN {preparer.format_column(column)} {column_type}"
                )
                if column.server_default is not None:
                    default = column.server_default.arg
                    default_sql = (
                        default.text
                        if hasattr(default, "text")
                        else "'" + str(default).replace("'", "''") + "'"
                    )
                    ddl += f" DEFAULT {default_sql}"
                conn.execute(text(ddl))
                self.logger.info(f"Added missing column {column.name} to {table.name}")

    def _create_missing_indexes(self, table: Table) -> None:
        """Create the indexes of *table* whose names (in any case) are not in the database."""
        existing = {
            index["name"].lower() for index in inspect(self.engine).get_indexes(table.name)
        }
        with self.engine.begin() as conn:
            for index in table.indexes:
                if index.name.lower() not in existing:
                    index.create(conn)
