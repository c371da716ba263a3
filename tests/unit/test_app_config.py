"""
Unit tests for app_config.py module.
"""

from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from scripts.database.app_config import CURRENT_TRAIL_KEY
from scripts.database.errors import InvalidTrailNameError


class TestAppConfigStore:
    """Test cases for key/value settings."""

    def test_missing_key_returns_none(self, app_config_store):
        assert app_config_store.get_value("theme") is None

    def test_set_value_overwrites(self, app_config_store):
        app_config_store.set_value("theme", "light")
        app_config_store.set_value("theme", "dark")

        assert app_config_store.get_value("theme") == "dark"

    def test_set_current_trail_twice_keeps_one_row(
        self, app_config_store, provisioner, engine
    ):
        """Test that the upsert never duplicates the current_trail key."""
        app_config_store.set_current_trail("viafrancigena")
        app_config_store.set_current_trail("caminofrances")

        app_config = provisioner.ensure_global().app_config
        with engine.connect() as conn:
            count = conn.execute(select(func.count()).select_from(app_config)).scalar_one()

        assert count == 1
        assert app_config_store.get_current_trail() == "caminofrances"

    def test_current_trail_falls_back_to_default(self, app_config_store):
        """Test that an unset selection reads back as the configured default trail."""
        with patch("scripts.database.app_config.config") as mock_config:
            mock_config.DEFAULT_TRAIL = "caminoportugues"

            assert app_config_store.get_current_trail() == "caminoportugues"

        assert app_config_store.get_value(CURRENT_TRAIL_KEY) is None

    def test_stored_trail_wins_over_default(self, app_config_store):
        app_config_store.set_current_trail("caminofrances")

        with patch("scripts.database.app_config.config") as mock_config:
            mock_config.DEFAULT_TRAIL = "caminoportugues"

            assert app_config_store.get_current_trail() == "caminofrances"

    def test_current_trail_stored_lowercase(self, app_config_store):
        app_config_store.set_current_trail("CaminoFrances")

        assert app_config_store.get_value(CURRENT_TRAIL_KEY) == "caminofrances"

    @pytest.mark.parametrize("trail", ["", "via francigena", "x" * 65, "trail'--"])
    def test_invalid_current_trail_rejected(self, app_config_store, trail):
        """Test that only valid trail names can be selected."""
        with pytest.raises(InvalidTrailNameError):
            app_config_store.set_current_trail(trail)

        assert app_config_store.get_value(CURRENT_TRAIL_KEY) is None
