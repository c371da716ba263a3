"""
Shared test fixtures and configuration for the Camino Planner test suite.

This file contains pytest fixtures that can be used across all test modules.
Fixtures defined here are automatically available to all test files.
Every store fixture works against a fresh SQLite file under tmp_path.
"""

import logging
import os

import pytest
from dotenv import load_dotenv

from scripts.collectors.waypoint_csv_importer import WaypointCSVImporter
from scripts.database.app_config import AppConfigStore
from scripts.database.connection import get_sqlite_engine
from scripts.database.journal_store import JournalStore
from scripts.database.provisioner import SchemaProvisioner
from scripts.database.reference_store import ReferenceStore
from scripts.database.trail_store import TrailStore
from scripts.processors.pace_cascade import PaceCascadeEngine

# Load test environment variables (if any)
load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

WAYPOINT_HEADER = (
    "latitude,longitude,elevation,distance,hike_city,gain,loss,"
    "pace_dist,pace_gain,fme,facilities"
)


@pytest.fixture
def test_logger():
    """Provide a quiet logger for components under test."""
    logger = logging.getLogger("camino_planner_tests")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def db_path(tmp_path):
    """Path to a not-yet-created SQLite file."""
    return str(tmp_path / "data" / "CaminoPlanner.sqlite")


@pytest.fixture
def engine(db_path):
    """SQLAlchemy engine for a fresh SQLite file, disposed after the test."""
    engine = get_sqlite_engine(db_path)
    yield engine
    engine.dispose()


@pytest.fixture
def provisioner(engine, test_logger):
    return SchemaProvisioner(engine, test_logger)


@pytest.fixture
def pace_engine(engine, provisioner, test_logger):
    return PaceCascadeEngine(engine, provisioner, test_logger)


@pytest.fixture
def trail_store(engine, provisioner, pace_engine, test_logger):
    return TrailStore(engine, provisioner, pace_engine, test_logger)


@pytest.fixture
def reference_store(engine, provisioner, test_logger):
    return ReferenceStore(engine, provisioner, test_logger)


@pytest.fixture
def journal_store(engine, provisioner, test_logger):
    return JournalStore(engine, provisioner, test_logger)


@pytest.fixture
def app_config_store(engine, provisioner, test_logger):
    return AppConfigStore(engine, provisioner, test_logger)


@pytest.fixture
def importer(engine, provisioner, test_logger):
    return WaypointCSVImporter(engine, provisioner, test_logger)


@pytest.fixture
def waypoint_header():
    """The required waypoint CSV header, in canonical column order."""
    return WAYPOINT_HEADER


@pytest.fixture
def sample_waypoints_csv():
    """
    Provide a small route with two named stops.

    Siena appears twice (seq 2 and 4) to exercise first-occurrence lookups;
    the last row has no city.
    """
    return "\n".join(
        [
            WAYPOINT_HEADER,
            "43.7696,11.2558,50.0,0.0,Firenze,0,0,20,500,F,B|R",
            "43.3188,11.3308,322.0,68.5,Siena,410,138,20,500,F,B|R|W",
            "43.1000,11.5000,280.0,25.1,,120,162,20,500,,",
            "43.0900,11.5100,282.0,1.2,Siena,5,3,20,500,M,",
            "42.9000,11.7000,300.0,24.0,,80,62,20,500,,W",
        ]
    )


@pytest.fixture
def make_csv():
    """Build a CSV payload from data rows, prefixed with the standard header."""

    def _make(*rows: str, header: str = WAYPOINT_HEADER) -> str:
        return "\n".join([header, *rows])

    return _make
