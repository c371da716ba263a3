"""
Table templates for the trail data store.

Global tables (reference data, journal, app config) are defined once. The
per-trail family is produced by a single template function applied to a
validated trail name, so table and index identifiers are always built and
quoted by SQLAlchemy rather than pasted into SQL text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from sqlalchemy import (
    Boolean,
    Column,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    text,
)

from config.settings import config
from scripts.database.errors import InvalidTrailNameError

_TRAIL_NAME_PATTERN = re.compile(r"[A-Za-z0-9_]+")


def validate_trail_name(trail: str) -> str:
    """
    Check that *trail* can safely be used to name a table family.

    SQLite table and index names are case-insensitive, so names are folded to
    lowercase; "Camino" and "camino" address the same tables.

    Args:
        trail (str): Candidate trail name

    Returns:
        str: The trail name in lowercase

    Raises:
        InvalidTrailNameError: If the name is empty, too long, or contains
                               anything other than ASCII letters, digits and underscores
    """
    if not isinstance(trail, str) or not trail:
        raise InvalidTrailNameError("Trail name must be a non-empty string")

    if len(trail) > config.TRAIL_NAME_MAX_LENGTH:
        raise InvalidTrailNameError(
            f"Trail name is {len(trail)} characters long "
            f"(maximum {config.TRAIL_NAME_MAX_LENGTH})"
        )

    if not _TRAIL_NAME_PATTERN.fullmatch(trail):
        raise InvalidTrailNameError(
            f"Trail name '{trail}' may only contain letters, digits and underscores"
        )

    return trail.lower()


def _add_index(table: Table, name: str, column: str) -> None:
    """Attach a single-column index to *table* unless it is already defined."""
    if any(index.name == name for index in table.indexes):
        return
    Index(name, table.c[column])


@dataclass(frozen=True)
class TrailTables:
    """The table family owned by one trail."""

    trail: str
    waypoints: Table
    trip: Table
    zeros: Table
    attractions: Table

    def all(self) -> list[Table]:
        return [self.waypoints, self.trip, self.zeros, self.attractions]


@dataclass(frozen=True)
class GlobalTables:
    """Trail-independent tables."""

    app_config: Table
    category: Table
    currency: Table
    payment: Table
    plan: Table
    mileage: Table
    expense: Table

    def all(self) -> list[Table]:
        return [
            self.app_config,
            self.category,
            self.currency,
            self.payment,
            self.plan,
            self.mileage,
            self.expense,
        ]


def define_trail_tables(metadata: MetaData, trail: str) -> TrailTables:
    """
    Define the waypoint, trip, zero and attraction tables for *trail*.

    Args:
        metadata (MetaData): Metadata collection the tables are registered in
        trail (str): Trail name, validated before use

    Returns:
        TrailTables: Table objects for the trail
    """
    trail = validate_trail_name(trail)

    waypoints = Table(
        f"{trail}_waypoints",
        metadata,
        Column("id_no", Integer, primary_key=True, autoincrement=True),
        Column("seq", Integer, nullable=False),
        Column("latitude", Float, nullable=False),
        Column("longitude", Float, nullable=False),
        Column("elevation", Float, nullable=False),
        Column("distance", Float, nullable=False),  # from previous waypoint
        Column("hike_city", Text),
        Column("gain", Float, nullable=False),
        Column("loss", Float, nullable=False),
        Column("pace_dist", Integer, nullable=False),
        Column("pace_gain", Integer, nullable=False),
        Column("fme", Text, nullable=False, server_default=text("''")),
        Column("facilities", Text),
        Column("variant_city", Text),
        extend_existing=True,
    )
    _add_index(waypoints, f"idx_{trail}_waypoints_seq", "seq")
    _add_index(waypoints, f"idx_{trail}_waypoints_city", "hike_city")

    trip = Table(
        f"{trail}_trip",
        metadata,
        Column("id_no", Integer, primary_key=True, autoincrement=True),
        Column("trip_start_date", String, nullable=False, server_default=text("''")),
        Column("trip_return_date", String, nullable=False, server_default=text("''")),
        Column("trip_distance", Float, nullable=False, server_default=text("0.0")),
        Column("trip_gain", Float, nullable=False, server_default=text("0.0")),
        Column("trip_loss", Float, nullable=False, server_default=text("0.0")),
        Column("trip_slope", Float, nullable=False, server_default=text("0.0")),
        Column("trip_days", Integer, nullable=False, server_default=text("0")),
        Column("select_trail", String, nullable=False),
        Column("trip_title", Text, nullable=False),
        Column(
            "distance_uom",
            String,
            nullable=False,
            server_default=config.DEFAULT_DISTANCE_UOM,
        ),
        Column("temp_uom", String, nullable=False, server_default=config.DEFAULT_TEMP_UOM),
        Column(
            "weight_uom", String, nullable=False, server_default=config.DEFAULT_WEIGHT_UOM
        ),
        Column(
            "planning_range",
            Float,
            server_default=text(str(config.DEFAULT_PLANNING_RANGE)),
        ),
        extend_existing=True,
    )

    zeros = Table(
        f"{trail}_zeros",
        metadata,
        Column("id_no", Integer, primary_key=True, autoincrement=True),
        Column("zero_city", Text, nullable=False),
        extend_existing=True,
    )

    attractions = Table(
        f"{trail}_attractions",
        metadata,
        Column("id_no", Integer, primary_key=True, autoincrement=True),
        Column("attraction_city", Text, nullable=False),
        Column("attraction", Text, nullable=False),
        Column("attraction_map", Text),
        extend_existing=True,
    )

    return TrailTables(
        trail=trail,
        waypoints=waypoints,
        trip=trip,
        zeros=zeros,
        attractions=attractions,
    )


def define_global_tables(metadata: MetaData) -> GlobalTables:
    """
    Define the reference, journal and app-config tables.

    Args:
        metadata (MetaData): Metadata collection the tables are registered in

    Returns:
        GlobalTables: Table objects shared by every trail
    """
    app_config = Table(
        "app_config",
        metadata,
        Column("key", String, primary_key=True),
        Column("value", Text, nullable=False),
        extend_existing=True,
    )

    # Reference tables: never seeded, disabled instead of deleted
    category = Table(
        "category",
        metadata,
        Column("id_no", Integer, primary_key=True, autoincrement=True),
        Column("category", Text, nullable=False),
        Column("category_type", String),
        Column("enabled", Boolean, nullable=False, server_default=text("1")),
        extend_existing=True,
    )

    currency = Table(
        "currency",
        metadata,
        Column("id_no", Integer, primary_key=True, autoincrement=True),
        Column("currency", Text, nullable=False),
        Column("exchange_rate", Float, nullable=False, server_default=text("1.0")),
        Column("enabled", Boolean, nullable=False, server_default=text("1")),
        extend_existing=True,
    )

    payment = Table(
        "payment",
        metadata,
        Column("id_no", Integer, primary_key=True, autoincrement=True),
        Column("payment_type", Text, nullable=False),
        Column("payment", Text, nullable=False),
        Column("enabled", Boolean, nullable=False, server_default=text("1")),
        extend_existing=True,
    )

    # Journal tables
    plan = Table(
        "plan",
        metadata,
        Column("id_no", Integer, primary_key=True, autoincrement=True),
        Column("date", String, nullable=False),
        Column("stop_city", Text, nullable=False),
        Column("plan_distance", Float, nullable=False),
        Column("plan_gain", Float, nullable=False),
        Column("plan_loss", Float, nullable=False),
        Column("plan_slope", Float, nullable=False),
        Column("plan_duration", String, nullable=False),
        Column("stop_type", String, nullable=False),
        extend_existing=True,
    )
    _add_index(plan, "idx_plan_date", "date")

    mileage = Table(
        "mileage",
        metadata,
        Column("id_no", Integer, primary_key=True, autoincrement=True),
        Column("date", String, nullable=False),
        Column("stop_city", Text, nullable=False),
        Column("stop_type", String, nullable=False),
        Column("start_time", String),
        Column("stop_time", String),
        Column("actual_distance", Float),
        Column("actual_gain", Float),
        Column("actual_loss", Float),
        Column("actual_slope", Float),
        Column("actual_duration", String),
        Column("actual_moving", String),
        Column("actual_pace", String),
        Column("zero_distance", Float),
        Column("high_temp", String),
        Column("pilgrims", Integer),
        Column("note_mileage", Text),
        extend_existing=True,
    )
    _add_index(mileage, "idx_mileage_date", "date")

    expense = Table(
        "expense",
        metadata,
        Column("id_no", Integer, primary_key=True, autoincrement=True),
        Column("date", String, nullable=False),
        Column("stop_city", Text, nullable=False),
        Column("stop_type", String, nullable=False),
        Column("payment", Text, nullable=False),
        Column("payment_type", Text, nullable=False),
        Column("expense_category", Text, nullable=False),
        Column("expense_type", Text, nullable=False),
        Column("vendor", Text),
        Column("local_amount", Float, nullable=False),
        Column("currency", Text, nullable=False),
        Column("usd_amount", Float, nullable=False),
        Column("note_expense", Text),
        extend_existing=True,
    )
    _add_index(expense, "idx_expense_date", "date")

    return GlobalTables(
        app_config=app_config,
        category=category,
        currency=currency,
        payment=payment,
        plan=plan,
        mileage=mileage,
        expense=expense,
    )
