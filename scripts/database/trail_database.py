"""
Trail Database: single entry point to the Camino Planner store.

Owns the SQLAlchemy engine and wires every component to it and to one shared
SchemaProvisioner, so trail tables are provisioned once per process no matter
which component touches a trail first.

Example Usage:
    with TrailDatabase() as db:
        result = db.importer.import_file("viafrancigena", "via_francigena.csv")
        db.trails.update_waypoint_pace("viafrancigena", "Siena", 25, 400)
        cities = db.trails.get_hiking_cities("viafrancigena")
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import Engine

from config.settings import config
from scripts.collectors.waypoint_csv_importer import WaypointCSVImporter
from scripts.database.app_config import AppConfigStore
from scripts.database.connection import check_connection, dispose_engine, get_sqlite_engine
from scripts.database.journal_store import JournalStore
from scripts.database.provisioner import SchemaProvisioner
from scripts.database.reference_store import ReferenceStore
from scripts.database.trail_store import TrailStore
from scripts.processors.pace_cascade import PaceCascadeEngine
from utils.logging import setup_trail_store_logging


class TrailDatabase:
    """Open/close lifecycle and component wiring for the trail store."""

    def __init__(
        self, db_path: Optional[str] = None, logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            db_path (Optional[str]): SQLite file path. If None, uses
                                     config.get_database_path().
            logger (Optional[logging.Logger]): Logger shared by every component. If None,
                                               sets up the trail store log file.
        """
        self.db_path = db_path or config.get_database_path()
        self.logger = logger or setup_trail_store_logging()

        self.engine: Optional[Engine] = None
        self.provisioner: Optional[SchemaProvisioner] = None
        self.pace: Optional[PaceCascadeEngine] = None
        self.trails: Optional[TrailStore] = None
        self.reference: Optional[ReferenceStore] = None
        self.journal: Optional[JournalStore] = None
        self.app_config: Optional[AppConfigStore] = None
        self.importer: Optional[WaypointCSVImporter] = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> "TrailDatabase":
        """
        Connect to the store and build the components.

        Returns:
            TrailDatabase: self, for chaining

        Raises:
            StoreConnectionError: If the SQLite file cannot be opened
            SchemaError: If the global tables cannot be created
        """
        if self.is_open:
            return self

        self.logger.info(
            f"Opening {config.APP_NAME} {config.APP_VERSION} trail database at {self.db_path}"
        )
        engine = get_sqlite_engine(self.db_path)
        try:
            check_connection(engine)
            provisioner = SchemaProvisioner(engine, self.logger)
            provisioner.ensure_global()
        except Exception:
            dispose_engine(engine)
            raise

        self.engine = engine
        self.provisioner = provisioner
        self.pace = PaceCascadeEngine(engine, provisioner, self.logger)
        self.trails = TrailStore(engine, provisioner, self.pace, self.logger)
        self.reference = ReferenceStore(engine, provisioner, self.logger)
        self.journal = JournalStore(engine, provisioner, self.logger)
        self.app_config = AppConfigStore(engine, provisioner, self.logger)
        self.importer = WaypointCSVImporter(engine, provisioner, self.logger)
        return self

    def close(self) -> None:
        """Release the engine's connections. Safe to call more than once."""
        if self.engine is None:
            return

        dispose_engine(self.engine)
        self.logger.info(f"Closed trail database at {self.db_path}")
        self.engine = None
        self.provisioner = None
        self.pace = None
        self.trails = None
        self.reference = None
        self.journal = None
        self.app_config = None
        self.importer = None

    def __enter__(self) -> "TrailDatabase":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
