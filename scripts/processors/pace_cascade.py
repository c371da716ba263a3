"""
Pace Cascade Engine

Pace targets (daily distance and daily gain) are a step function over route
order: changing them at a town applies from that town to the end of the trail
and leaves everything before it untouched. The anchor is the first waypoint,
by seq, whose hike_city matches; later repeats of the same city name are
ignored. If the city is not on the route the anchor is seq 0 and the whole
table is rewritten.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import Engine, select, update
from sqlalchemy.exc import SQLAlchemyError

from scripts.database.errors import translate_storage_error
from scripts.database.models import PaceCascadeResult
from scripts.database.provisioner import SchemaProvisioner


class PaceCascadeEngine:
    """Rewrites pace targets on a suffix of a trail's waypoint sequence."""

    def __init__(
        self,
        engine: Engine,
        provisioner: Optional[SchemaProvisioner] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.engine = engine
        self.logger = logger or logging.getLogger(__name__)
        self.provisioner = provisioner or SchemaProvisioner(engine, self.logger)

    def cascade_pace(
        self, trail: str, from_city: str, new_distance: int, new_gain: int
    ) -> PaceCascadeResult:
        """
        Set pace_dist/pace_gain on every waypoint from *from_city* onwards.

        Args:
            trail (str): Trail name
            from_city (str): City whose first occurrence anchors the update
            new_distance (int): New daily distance target
            new_gain (int): New daily gain target

        Returns:
            PaceCascadeResult: Anchor seq and number of waypoints rewritten

        Raises:
            StorageError: If the lookup or the update fails
        """
        waypoints = self.provisioner.ensure(trail).waypoints

        anchor_query = (
            select(waypoints.c.seq)
            .where(waypoints.c.hike_city == from_city)
            .order_by(waypoints.c.seq.asc())
            .limit(1)
        )

        try:
            with self.engine.begin() as conn:
                anchor_seq = conn.execute(anchor_query).scalar()
                anchor_found = anchor_seq is not None
                if not anchor_found:
                    anchor_seq = 0

                updated_count = conn.execute(
                    update(waypoints)
                    .where(waypoints.c.seq >= anchor_seq)
                    .values(pace_dist=int(new_distance), pace_gain=int(new_gain))
                ).rowcount
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating waypoint pace for {trail}: {e}")
            raise translate_storage_error(e, f"update waypoint pace for {trail}") from e

        if anchor_found:
            self.logger.info(
                f"Updated pace settings from {from_city} (seq {anchor_seq}) onwards: "
                f"{updated_count} waypoints"
            )
        else:
            self.logger.warning(
                f"City {from_city} not found on {trail}; "
                f"updated pace settings on all {updated_count} waypoints"
            )

        return PaceCascadeResult(
            trail=trail,
            from_city=from_city,
            anchor_seq=anchor_seq,
            anchor_found=anchor_found,
            updated_count=updated_count,
        )
