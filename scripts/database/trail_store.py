"""
Trail Store: CRUD over one trail's table family.

Every public method ensures the trail's schema first, so a trail comes into
existence the first time any operation names it. Storage failures are logged
and re-raised as StorageError subclasses; "nothing stored yet" is reported as
None or an empty list.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd
from sqlalchemy import Engine, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from scripts.database.base_store import BaseStore
from scripts.database.errors import ConstraintError, translate_storage_error
from scripts.database.models import (
    AttractionItem,
    PaceCascadeResult,
    PaceSettings,
    TripSettings,
    TripTotals,
    Waypoint,
    ZeroItem,
)
from scripts.database.provisioner import SchemaProvisioner
from scripts.processors.pace_cascade import PaceCascadeEngine

_SETTINGS_FIELDS = [
    "select_trail",
    "trip_title",
    "distance_uom",
    "temp_uom",
    "weight_uom",
    "planning_range",
]

_WAYPOINT_FIELDS = list(Waypoint.model_fields)


class TrailStore(BaseStore):
    """Reads and writes trip settings, waypoints, zeros and attractions for a trail."""

    def __init__(
        self,
        engine: Engine,
        provisioner: Optional[SchemaProvisioner] = None,
        pace_engine: Optional[PaceCascadeEngine] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the trail store.

        Args:
            engine (Engine): SQLAlchemy engine for the SQLite store
            provisioner (Optional[SchemaProvisioner]): Shared provisioner. If None,
                                                       one is created for this engine.
            pace_engine (Optional[PaceCascadeEngine]): Engine used by
                                                       update_waypoint_pace
            logger (Optional[logging.Logger]): Logger instance for operation tracking
        """
        super().__init__(engine, provisioner, logger)
        self.pace_engine = pace_engine or PaceCascadeEngine(
            engine, self.provisioner, self.logger
        )

    # ------------------------------------------------------------------
    # Trip settings
    # ------------------------------------------------------------------

    def load_trip_settings(self, trail: str) -> Optional[TripSettings]:
        """
        Read the trail's trip settings row.

        Args:
            trail (str): Trail name

        Returns:
            Optional[TripSettings]: The settings, or None if never saved
        """
        trip = self.provisioner.ensure(trail).trip
        try:
            with self.engine.connect() as conn:
                row = conn.execute(select(trip).limit(1)).mappings().first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading trip settings for {trail}: {e}")
            raise translate_storage_error(e, f"load trip settings for {trail}") from e

        if row is None:
            return None

        values = {key: row[key] for key in TripSettings.model_fields}
        if values["planning_range"] is None:
            values.pop("planning_range")
        return TripSettings(**values)

    def save_trip_settings(self, trail: str, settings: TripSettings) -> None:
        """
        Insert the settings row if the trail has none, otherwise update it.

        Only the settings fields are written on update; the totals columns keep
        their stored values. A fresh row starts with zero/blank totals.

        Args:
            trail (str): Trail name
            settings (TripSettings): Settings to store
        """
        trip = self.provisioner.ensure(trail).trip
        values = settings.model_dump(include=set(_SETTINGS_FIELDS))

        try:
            with self.engine.begin() as conn:
                count = conn.execute(select(func.count()).select_from(trip)).scalar_one()
                if count == 0:
                    conn.execute(insert(trip).values(**values, **TripTotals().model_dump()))
                    self.logger.info(f"Created trip settings for {trail}")
                else:
                    conn.execute(update(trip).values(**values))
                    self.logger.info(f"Updated trip settings for {trail}")
        except SQLAlchemyError as e:
            self.logger.error(f"Error saving trip settings for {trail}: {e}")
            raise translate_storage_error(e, f"save trip settings for {trail}") from e

    def save_trip_totals(self, trail: str, totals: TripTotals) -> bool:
        """
        Write the computed totals onto the trail's settings row.

        Args:
            trail (str): Trail name
            totals (TripTotals): Totals to store

        Returns:
            bool: False if the trail has no settings row yet
        """
        trip = self.provisioner.ensure(trail).trip
        try:
            with self.engine.begin() as conn:
                result = conn.execute(update(trip).values(**totals.model_dump()))
        except SQLAlchemyError as e:
            self.logger.error(f"Error saving trip totals for {trail}: {e}")
            raise translate_storage_error(e, f"save trip totals for {trail}") from e
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Waypoints
    # ------------------------------------------------------------------

    def get_hiking_cities(self, trail: str) -> List[str]:
        """
        Return the distinct named stops of the trail in lexicographic order.

        Args:
            trail (str): Trail name

        Returns:
            List[str]: Sorted, duplicate-free city names
        """
        waypoints = self.provisioner.ensure(trail).waypoints
        query = (
            select(waypoints.c.hike_city)
            .where(waypoints.c.hike_city.is_not(None))
            .distinct()
        )
        try:
            with self.engine.connect() as conn:
                cities = conn.execute(query).scalars().all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting hiking cities for {trail}: {e}")
            raise translate_storage_error(e, f"get hiking cities for {trail}") from e
        return sorted(cities)

    def get_pace_settings(self, trail: str, city: str) -> Optional[PaceSettings]:
        """
        Return the pace pair of the first waypoint (lowest seq) at *city*.

        Args:
            trail (str): Trail name
            city (str): City name

        Returns:
            Optional[PaceSettings]: Pace targets, or None if the city is not on the trail
        """
        waypoints = self.provisioner.ensure(trail).waypoints
        query = (
            select(waypoints.c.pace_dist, waypoints.c.pace_gain)
            .where(waypoints.c.hike_city == city)
            .order_by(waypoints.c.seq.asc())
            .limit(1)
        )
        try:
            with self.engine.connect() as conn:
                row = conn.execute(query).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting pace settings for {trail}/{city}: {e}")
            raise translate_storage_error(e, f"get pace settings for {trail}") from e

        if row is None:
            return None
        return PaceSettings(distance=row.pace_dist, gain=row.pace_gain)

    def update_waypoint_pace(
        self, trail: str, from_city: str, new_distance: int, new_gain: int
    ) -> PaceCascadeResult:
        """Apply new pace targets from *from_city* to the end of the route."""
        return self.pace_engine.cascade_pace(trail, from_city, new_distance, new_gain)

    def list_waypoints(self, trail: str) -> List[Waypoint]:
        """Return every waypoint of the trail in route order."""
        waypoints = self.provisioner.ensure(trail).waypoints
        query = select(*[waypoints.c[name] for name in _WAYPOINT_FIELDS]).order_by(
            waypoints.c.seq.asc()
        )
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(query).mappings().all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing waypoints for {trail}: {e}")
            raise translate_storage_error(e, f"list waypoints for {trail}") from e
        return [Waypoint(**row) for row in rows]

    def count_waypoints(self, trail: str) -> int:
        waypoints = self.provisioner.ensure(trail).waypoints
        try:
            with self.engine.connect() as conn:
                return conn.execute(
                    select(func.count()).select_from(waypoints)
                ).scalar_one()
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting waypoints for {trail}: {e}")
            raise translate_storage_error(e, f"count waypoints for {trail}") from e

    def get_waypoints_dataframe(self, trail: str) -> pd.DataFrame:
        """
        Load the trail's route as a DataFrame, ordered by seq.

        Args:
            trail (str): Trail name

        Returns:
            pd.DataFrame: One row per waypoint with the Waypoint field columns.
                          Empty (with columns) if nothing has been imported.
        """
        waypoints = self.provisioner.ensure(trail).waypoints
        query = select(*[waypoints.c[name] for name in _WAYPOINT_FIELDS]).order_by(
            waypoints.c.seq.asc()
        )
        try:
            with self.engine.connect() as conn:
                df = pd.read_sql(query, conn)
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading waypoints for {trail}: {e}")
            raise translate_storage_error(e, f"load waypoints for {trail}") from e
        return df

    def clear_trail(self, trail: str) -> None:
        """
        Delete every waypoint, attraction and zero of the trail.

        The tables themselves (and the trip settings row) are kept.

        Args:
            trail (str): Trail name

        Raises:
            ConstraintError: If any delete fails; nothing is removed in that case
        """
        tables = self.provisioner.ensure(trail)
        try:
            with self.engine.begin() as conn:
                for table in (tables.waypoints, tables.attractions, tables.zeros):
                    deleted = conn.execute(table.delete()).rowcount
                    self.logger.info(f"Deleted {deleted} rows from {table.name}")
        except SQLAlchemyError as e:
            self.logger.error(f"Error clearing {trail} tables: {e}")
            raise ConstraintError(f"Failed to clear {trail} tables: {e}") from e

    # ------------------------------------------------------------------
    # Zeros
    # ------------------------------------------------------------------

    def add_zero(self, trail: str, city: str) -> int:
        """Add a rest-day city and return its id."""
        zeros = self.provisioner.ensure(trail).zeros
        return self._insert(zeros, {"zero_city": city}, f"add zero for {trail}")

    def update_zero(self, trail: str, id_no: int, city: str) -> bool:
        """Rename a rest-day city. Returns False if *id_no* does not exist."""
        zeros = self.provisioner.ensure(trail).zeros
        return self._update(zeros, id_no, {"zero_city": city}, f"update zero for {trail}")

    def list_zeros(self, trail: str) -> List[ZeroItem]:
        zeros = self.provisioner.ensure(trail).zeros
        rows = self._select_all(zeros, f"list zeros for {trail}")
        return [ZeroItem(id_no=row["id_no"], city=row["zero_city"]) for row in rows]

    # ------------------------------------------------------------------
    # Attractions
    # ------------------------------------------------------------------

    def add_attraction(
        self, trail: str, city: str, attraction: str, map: Optional[str] = None
    ) -> int:
        """Add a point of interest and return its id."""
        attractions = self.provisioner.ensure(trail).attractions
        values = {"attraction_city": city, "attraction": attraction, "attraction_map": map}
        return self._insert(attractions, values, f"add attraction for {trail}")

    def update_attraction(
        self,
        trail: str,
        id_no: int,
        city: str,
        attraction: str,
        map: Optional[str] = None,
    ) -> bool:
        """Replace a point of interest. Returns False if *id_no* does not exist."""
        attractions = self.provisioner.ensure(trail).attractions
        values = {"attraction_city": city, "attraction": attraction, "attraction_map": map}
        return self._update(attractions, id_no, values, f"update attraction for {trail}")

    def list_attractions(self, trail: str) -> List[AttractionItem]:
        attractions = self.provisioner.ensure(trail).attractions
        rows = self._select_all(attractions, f"list attractions for {trail}")
        return [
            AttractionItem(
                id_no=row["id_no"],
                city=row["attraction_city"],
                attraction=row["attraction"],
                map=row["attraction_map"],
            )
            for row in rows
        ]

    def list_attraction_cities(self, trail: str) -> List[str]:
        """Return the distinct attraction cities in lexicographic order."""
        attractions = self.provisioner.ensure(trail).attractions
        query = select(attractions.c.attraction_city).distinct()
        try:
            with self.engine.connect() as conn:
                cities = conn.execute(query).scalars().all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting attraction cities for {trail}: {e}")
            raise translate_storage_error(e, f"get attraction cities for {trail}") from e
        return sorted(cities)

