"""
Pydantic models for trail store entities and operation results.

These models are what the stores accept and return; the SQLAlchemy tables in
schema.py are never exposed to callers.
"""

from pydantic import BaseModel, Field

from config.settings import config


class Waypoint(BaseModel):
    """
    A point along a trail's route.

    ``seq`` is the canonical route position assigned at import time; it is
    unrelated to the storage row id.
    """

    seq: int = Field(..., ge=1, description="Route order, dense from 1", examples=[1])
    latitude: float = Field(..., description="Latitude in degrees", examples=[45.8326])
    longitude: float = Field(..., description="Longitude in degrees", examples=[6.8652])
    elevation: float = Field(..., description="Elevation in meters", examples=[1042.0])
    distance: float = Field(
        ..., description="Distance from the previous waypoint", examples=[0.12]
    )
    hike_city: str | None = Field(
        None, description="Named stop at this waypoint, if any", examples=["Siena"]
    )
    gain: float = Field(..., description="Elevation gain for the segment", examples=[4.0])
    loss: float = Field(..., description="Elevation loss for the segment", examples=[0.0])
    pace_dist: int = Field(..., description="Planned daily distance target", examples=[20])
    pace_gain: int = Field(..., description="Planned daily gain target", examples=[500])
    fme: str = Field("", description="Free-text source marker", examples=["F"])
    facilities: str | None = Field(
        None, description="Facilities available at this waypoint", examples=["B|R|W"]
    )
    variant_city: str | None = Field(
        None, description="Variant-route city label (not set by CSV import)"
    )


class TripSettings(BaseModel):
    """
    Trip-level configuration for one trail, plus its computed totals.

    Saving settings only writes the first six fields; totals are written with
    TripTotals.
    """

    select_trail: str = Field(..., description="Trail chosen for this trip")
    trip_title: str = Field(..., description="Display title", examples=["Via Francigena 2025"])
    distance_uom: str = Field(config.DEFAULT_DISTANCE_UOM, examples=["km"])
    temp_uom: str = Field(config.DEFAULT_TEMP_UOM, examples=["C"])
    weight_uom: str = Field(config.DEFAULT_WEIGHT_UOM, examples=["kg"])
    planning_range: float = Field(config.DEFAULT_PLANNING_RANGE, ge=0)

    trip_start_date: str = ""
    trip_return_date: str = ""
    trip_distance: float = 0.0
    trip_gain: float = 0.0
    trip_loss: float = 0.0
    trip_slope: float = 0.0
    trip_days: int = Field(0, ge=0)


class TripTotals(BaseModel):
    """Aggregate trip figures computed outside the store."""

    trip_start_date: str = ""
    trip_return_date: str = ""
    trip_distance: float = 0.0
    trip_gain: float = 0.0
    trip_loss: float = 0.0
    trip_slope: float = 0.0
    trip_days: int = Field(0, ge=0)


class PaceSettings(BaseModel):
    """Pace targets read from the first waypoint at a city."""

    distance: int
    gain: int


class PaceCascadeResult(BaseModel):
    """Outcome of a forward pace rewrite."""

    trail: str
    from_city: str
    anchor_seq: int = Field(..., ge=0, description="0 when the city was not found")
    anchor_found: bool
    updated_count: int = Field(..., ge=0)


class ImportResult(BaseModel):
    """Counts reported by a waypoint CSV import."""

    trail: str
    imported_count: int = Field(0, ge=0)
    skipped_count: int = Field(0, ge=0)
    blank_count: int = Field(0, ge=0, description="Blank lines, not counted as skipped")

    @property
    def success(self) -> bool:
        """An import succeeds only if at least one waypoint was written."""
        return self.imported_count > 0


# Reference data


class CategoryItem(BaseModel):
    id_no: int
    name: str
    category_type: str = config.DEFAULT_CATEGORY_TYPE
    enabled: bool = True


class CurrencyItem(BaseModel):
    id_no: int
    name: str
    exchange_rate: float = 1.0
    enabled: bool = True


class PaymentItem(BaseModel):
    id_no: int
    name: str
    payment_type: str
    enabled: bool = True


# Trail sub-records


class ZeroItem(BaseModel):
    """A rest-day city."""

    id_no: int
    city: str


class AttractionItem(BaseModel):
    """A point of interest in a city along the trail."""

    id_no: int
    city: str
    attraction: str
    map: str | None = None


# Journal rows


class PlanEntry(BaseModel):
    """Planned progress for one day."""

    id_no: int | None = None
    date: str = Field(..., description="ISO date", examples=["2025-05-01"])
    stop_city: str
    plan_distance: float = 0.0
    plan_gain: float = 0.0
    plan_loss: float = 0.0
    plan_slope: float = 0.0
    plan_duration: str = ""
    stop_type: str = ""


class MileageEntry(BaseModel):
    """Actual progress for one day."""

    id_no: int | None = None
    date: str = Field(..., description="ISO date", examples=["2025-05-01"])
    stop_city: str
    stop_type: str = ""
    start_time: str | None = None
    stop_time: str | None = None
    actual_distance: float | None = None
    actual_gain: float | None = None
    actual_loss: float | None = None
    actual_slope: float | None = None
    actual_duration: str | None = None
    actual_moving: str | None = None
    actual_pace: str | None = None
    zero_distance: float | None = None
    high_temp: str | None = None
    pilgrims: int | None = Field(None, ge=0)
    note: str | None = None


class ExpenseEntry(BaseModel):
    """
    A single expense.

    Payment, category and currency are stored by name, so disabling a
    reference item never orphans an expense.
    """

    id_no: int | None = None
    date: str = Field(..., description="ISO date", examples=["2025-05-01"])
    stop_city: str
    stop_type: str = ""
    payment: str
    payment_type: str
    expense_category: str
    expense_type: str
    vendor: str | None = None
    local_amount: float
    currency: str
    usd_amount: float
    note: str | None = None
