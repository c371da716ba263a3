"""
Configuration settings for the Camino Planner trail data store.

This module centralizes all configuration values and provides a single source of truth for all
configurable parameters.
"""

import os
import re
from typing import Optional

from dotenv import load_dotenv

# Explicitly load .env from the project root
load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))


class Config:
    """
    Central configuration class for the Camino Planner project.

    This class consolidates all configuration values including storage location,
    SQLite connection settings, CSV import parameters, trip defaults and logging.
    """

    # Application
    APP_NAME: str = "Camino-Planner"
    APP_VERSION: str = "1.0"

    # Storage location
    DATA_DIR: Optional[str] = None
    DB_FILENAME: str = "CaminoPlanner.sqlite"
    DB_PATH: Optional[str] = None

    # SQLite connection settings
    SQLITE_JOURNAL_MODE: str = "WAL"
    SQLITE_FOREIGN_KEYS: bool = True
    VALID_JOURNAL_MODES: tuple = ("DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF")

    # Trails
    DEFAULT_TRAIL: str = "viafrancigena"
    TRAIL_NAME_MAX_LENGTH: int = 64

    # Waypoint CSV import
    WAYPOINT_REQUIRED_HEADERS: list = [
        "latitude",
        "longitude",
        "elevation",
        "distance",
        "hike_city",
        "gain",
        "loss",
        "pace_dist",
        "pace_gain",
        "fme",
        "facilities",
    ]
    IMPORT_PROGRESS_INTERVAL: int = 1000

    # Trip settings defaults
    DEFAULT_DISTANCE_UOM: str = "km"
    DEFAULT_TEMP_UOM: str = "C"
    DEFAULT_WEIGHT_UOM: str = "kg"
    DEFAULT_PLANNING_RANGE: float = 50.0
    DEFAULT_CATEGORY_TYPE: str = "Expense"

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/camino_planner.log"
    IMPORTER_LOG_FILE: str = "logs/waypoint_importer.log"
    LOG_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB
    LOG_BACKUP_COUNT: int = 3

    def __init__(self):
        """Initialize configuration by loading from environment variables."""
        self._load_from_env()
        self._validate()

    def _load_from_env(self):
        """Load configuration values from environment variables."""
        # Storage settings
        data_dir = os.getenv("CAMINO_DATA_DIR")
        if data_dir:
            self.DATA_DIR = data_dir

        db_path = os.getenv("CAMINO_DB_PATH")
        if db_path:
            self.DB_PATH = db_path

        journal_mode = os.getenv("SQLITE_JOURNAL_MODE")
        if journal_mode:
            self.SQLITE_JOURNAL_MODE = journal_mode.upper()

        # Trail settings
        default_trail = os.getenv("CAMINO_DEFAULT_TRAIL")
        if default_trail:
            self.DEFAULT_TRAIL = default_trail

        progress_interval = os.getenv("IMPORT_PROGRESS_INTERVAL")
        if progress_interval:
            self.IMPORT_PROGRESS_INTERVAL = int(progress_interval)

        log_level = os.getenv("LOG_LEVEL")
        if log_level:
            self.LOG_LEVEL = log_level

    def _validate(self):
        """
        Validate configuration values.

        Raises:
            ValueError: If a configuration value is out of range.
        """
        if self.SQLITE_JOURNAL_MODE not in self.VALID_JOURNAL_MODES:
            raise ValueError(
                f"SQLITE_JOURNAL_MODE must be one of {', '.join(self.VALID_JOURNAL_MODES)}, "
                f"got '{self.SQLITE_JOURNAL_MODE}'"
            )

        if self.TRAIL_NAME_MAX_LENGTH < 1:
            raise ValueError("TRAIL_NAME_MAX_LENGTH must be a positive integer")

        if self.IMPORT_PROGRESS_INTERVAL < 1:
            raise ValueError("IMPORT_PROGRESS_INTERVAL must be a positive integer")

        if not re.fullmatch(r"[A-Za-z0-9_]+", self.DEFAULT_TRAIL) or (
            len(self.DEFAULT_TRAIL) > self.TRAIL_NAME_MAX_LENGTH
        ):
            raise ValueError(
                f"CAMINO_DEFAULT_TRAIL '{self.DEFAULT_TRAIL}' may only contain "
                "letters, digits and underscores"
            )

    def get_data_directory(self) -> str:
        """
        Resolve the per-user application data directory.

        Returns:
            str: CAMINO_DATA_DIR if set, else $XDG_DATA_HOME/camino-planner,
                 else ~/.local/share/camino-planner
        """
        if self.DATA_DIR:
            return self.DATA_DIR

        xdg_data_home = os.getenv("XDG_DATA_HOME") or os.path.join(
            os.path.expanduser("~"), ".local", "share"
        )
        return os.path.join(xdg_data_home, "camino-planner")

    def get_database_path(self) -> str:
        """
        Resolve the SQLite file location.

        Returns:
            str: Path to the database file
        """
        if self.DB_PATH:
            return self.DB_PATH
        return os.path.join(self.get_data_directory(), self.DB_FILENAME)

    def get_database_url(self, db_path: Optional[str] = None) -> str:
        """
        Generate database connection URL.

        Args:
            db_path (Optional[str]): File to connect to. If None, uses get_database_path()

        Returns:
            str: SQLite connection URL
        """
        return f"sqlite:///{db_path or self.get_database_path()}"


# Global configuration instance
config = Config()
