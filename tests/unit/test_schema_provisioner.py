"""
Unit tests for schema.py and provisioner.py modules.

Tests cover trail-name validation, the per-trail table template, idempotent
provisioning and migration of older database files.
"""

from unittest.mock import patch

import pytest
from sqlalchemy import MetaData, inspect, text
from sqlalchemy.exc import OperationalError

from scripts.database.errors import InvalidTrailNameError, SchemaError
from scripts.database.provisioner import SchemaProvisioner
from scripts.database.schema import define_trail_tables, validate_trail_name

# Waypoint table as created before fme and variant_city existed
LEGACY_WAYPOINTS_DDL = (
    "CREATE TABLE {table} ("
    "id_no INTEGER PRIMARY KEY, seq INTEGER NOT NULL, "
    "latitude FLOAT NOT NULL, longitude FLOAT NOT NULL, "
    "elevation FLOAT NOT NULL, distance FLOAT NOT NULL, hike_city TEXT, "
    "gain FLOAT NOT NULL, loss FLOAT NOT NULL, "
    "pace_dist INTEGER NOT NULL, pace_gain INTEGER NOT NULL, "
    "facilities TEXT)"
)


class TestValidateTrailName:
    """Test cases for trail-name validation."""

    @pytest.mark.parametrize("trail", ["viafrancigena", "Camino_Frances", "gr10", "x" * 64])
    def test_valid_names(self, trail):
        assert validate_trail_name(trail) == trail.lower()

    def test_names_fold_to_lowercase(self):
        assert validate_trail_name("Camino") == validate_trail_name("camino") == "camino"

    @pytest.mark.parametrize(
        "trail",
        ["", "via francigena", "via-francigena", "x" * 65, "a;DROP TABLE plan", "città", None],
    )
    def test_invalid_names(self, trail):
        with pytest.raises(InvalidTrailNameError):
            validate_trail_name(trail)

    def test_invalid_name_is_value_error(self):
        """Test callers catching ValueError also catch bad trail names."""
        with pytest.raises(ValueError):
            validate_trail_name("bad name")


class TestTrailTableTemplate:
    """Test cases for define_trail_tables."""

    def test_table_names(self):
        tables = define_trail_tables(MetaData(), "viafrancigena")

        assert [t.name for t in tables.all()] == [
            "viafrancigena_waypoints",
            "viafrancigena_trip",
            "viafrancigena_zeros",
            "viafrancigena_attractions",
        ]

    def test_waypoint_columns_and_indexes(self):
        tables = define_trail_tables(MetaData(), "viafrancigena")

        columns = [c.name for c in tables.waypoints.columns]
        assert columns[:3] == ["id_no", "seq", "latitude"]
        assert "variant_city" in columns
        assert {i.name for i in tables.waypoints.indexes} == {
            "idx_viafrancigena_waypoints_seq",
            "idx_viafrancigena_waypoints_city",
        }

    def test_redefining_does_not_duplicate_indexes(self):
        """Test the template can be applied twice to the same metadata."""
        metadata = MetaData()
        define_trail_tables(metadata, "viafrancigena")
        tables = define_trail_tables(metadata, "viafrancigena")

        assert len(tables.waypoints.indexes) == 2


class TestSchemaProvisioner:
    """Test cases for SchemaProvisioner."""

    def test_ensure_creates_global_and_trail_tables(self, provisioner, engine):
        provisioner.ensure("viafrancigena")

        table_names = set(inspect(engine).get_table_names())
        assert {
            "app_config",
            "category",
            "currency",
            "payment",
            "plan",
            "mileage",
            "expense",
            "viafrancigena_waypoints",
            "viafrancigena_trip",
            "viafrancigena_zeros",
            "viafrancigena_attractions",
        } <= table_names

    def test_ensure_creates_indexes(self, provisioner, engine):
        provisioner.ensure("viafrancigena")

        index_names = {i["name"] for i in inspect(engine).get_indexes("viafrancigena_waypoints")}
        assert index_names == {
            "idx_viafrancigena_waypoints_seq",
            "idx_viafrancigena_waypoints_city",
        }

    def test_ensure_is_cached(self, provisioner):
        """Test that a provisioned trail is not re-created in the same process."""
        first = provisioner.ensure("viafrancigena")

        with patch.object(provisioner, "_create_tables") as mock_create:
            second = provisioner.ensure("viafrancigena")

        mock_create.assert_not_called()
        assert first is second
        assert provisioner.is_provisioned("viafrancigena")
        assert not provisioner.is_provisioned("caminofrances")

    def test_second_provisioner_on_existing_file(self, engine, test_logger):
        """Test provisioning an already provisioned file is a no-op."""
        SchemaProvisioner(engine, test_logger).ensure("viafrancigena")

        tables = SchemaProvisioner(engine, test_logger).ensure("viafrancigena")

        assert tables.waypoints.name == "viafrancigena_waypoints"

    def test_invalid_trail_never_reaches_sql(self, provisioner, engine):
        with pytest.raises(InvalidTrailNameError):
            provisioner.ensure("x; DROP TABLE category")

        assert inspect(engine).get_table_names() == []

    def test_adds_missing_columns_to_old_table(self, engine, test_logger):
        """Test migration of a waypoint table created before fme/variant_city existed."""
        with engine.begin() as conn:
            conn.execute(text(LEGACY_WAYPOINTS_DDL.format(table="viafrancigena_waypoints")))
            conn.execute(
                text(
                    "INSERT INTO viafrancigena_waypoints "
                    "(seq, latitude, longitude, elevation, distance, hike_city, "
                    "gain, loss, pace_dist, pace_gain) "
                    "VALUES (1, 43.7, 11.2, 50.0, 0.0, 'Firenze', 0, 0, 20, 500)"
                )
            )

        SchemaProvisioner(engine, test_logger).ensure("viafrancigena")

        columns = {c["name"] for c in inspect(engine).get_columns("viafrancigena_waypoints")}
        assert {"fme", "variant_city"} <= columns
        with engine.connect() as conn:
            fme = conn.execute(text("SELECT fme FROM viafrancigena_waypoints")).scalar_one()
        assert fme == ""

    def test_uppercase_column_in_old_table_is_not_re_added(self, engine, test_logger):
        """Test that an existing "FME" column counts as fme instead of being added again."""
        with engine.begin() as conn:
            conn.execute(text(LEGACY_WAYPOINTS_DDL.format(table="viafrancigena_waypoints")))
            conn.execute(text("ALTER TABLE viafrancigena_waypoints ADD COLUMN FME TEXT"))

        SchemaProvisioner(engine, test_logger).ensure("viafrancigena")

        columns = [c["name"].lower() for c in inspect(engine).get_columns("viafrancigena_waypoints")]
        assert columns.count("fme") == 1
        assert "variant_city" in columns

    def test_trail_name_case_shares_tables(self, provisioner, engine):
        """Test that "Camino" and "camino" resolve to one table family."""
        first = provisioner.ensure("Camino")
        second = provisioner.ensure("camino")

        assert first is second
        assert provisioner.is_provisioned("CAMINO")
        assert first.waypoints.name == "camino_waypoints"
        assert "camino_waypoints" in inspect(engine).get_table_names()

    def test_mixed_case_tables_from_older_file_are_reused(self, engine, test_logger):
        """Test provisioning over tables and indexes created under a mixed-case name."""
        with engine.begin() as conn:
            conn.execute(text(LEGACY_WAYPOINTS_DDL.format(table="Camino_waypoints")))
            conn.execute(
                text(
                    "CREATE INDEX idx_Camino_waypoints_seq ON Camino_waypoints (seq)"
                )
            )

        SchemaProvisioner(engine, test_logger).ensure("Camino")
        SchemaProvisioner(engine, test_logger).ensure("camino")

        index_names = {
            i["name"].lower() for i in inspect(engine).get_indexes("camino_waypoints")
        }
        assert index_names == {"idx_camino_waypoints_seq", "idx_camino_waypoints_city"}
        columns = {c["name"] for c in inspect(engine).get_columns("camino_waypoints")}
        assert {"fme", "variant_city"} <= columns

    def test_ddl_failure_raises_schema_error(self, provisioner):
        failure = OperationalError("CREATE TABLE", {}, Exception("disk I/O error"))
        with patch.object(provisioner.metadata, "create_all", side_effect=failure):
            with pytest.raises(SchemaError):
                provisioner.ensure("viafrancigena")

        assert not provisioner.is_provisioned("viafrancigena")
