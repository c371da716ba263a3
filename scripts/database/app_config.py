"""
App Config Store: application-wide key/value settings.

Holds one row per key, most notably the trail currently selected in the
planner. Values are stored as text.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError

from config.settings import config
from scripts.database.base_store import BaseStore
from scripts.database.errors import translate_storage_error
from scripts.database.schema import validate_trail_name

CURRENT_TRAIL_KEY = "current_trail"


class AppConfigStore(BaseStore):
    """Key/value access to the app_config table."""

    def get_value(self, key: str) -> Optional[str]:
        """Return the value stored under *key*, or None if it was never set."""
        app_config = self.provisioner.ensure_global().app_config
        query = select(app_config.c["value"]).where(app_config.c["key"] == key)
        try:
            with self.engine.connect() as conn:
                return conn.execute(query).scalar()
        except SQLAlchemyError as e:
            self.logger.error(f"Error reading app config {key}: {e}")
            raise translate_storage_error(e, f"read app config {key}") from e

    def set_value(self, key: str, value: str) -> None:
        """
        Store *value* under *key*, replacing any previous value.

        Args:
            key (str): Setting name
            value (str): Setting value
        """
        app_config = self.provisioner.ensure_global().app_config
        stmt = insert(app_config).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=["key"], set_={"value": stmt.excluded["value"]}
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as e:
            self.logger.error(f"Error writing app config {key}: {e}")
            raise translate_storage_error(e, f"write app config {key}") from e

        self.logger.debug(f"Set app config {key}={value}")

    def get_current_trail(self) -> str:
        """Return the selected trail, or the configured default if none was chosen."""
        return self.get_value(CURRENT_TRAIL_KEY) or config.DEFAULT_TRAIL

    def set_current_trail(self, trail: str) -> None:
        """
        Remember *trail* as the selected trail.

        Raises:
            InvalidTrailNameError: If the name cannot form a table name
        """
        trail = validate_trail_name(trail)
        self.set_value(CURRENT_TRAIL_KEY, trail)
        self.logger.info(f"Current trail set to {trail}")
