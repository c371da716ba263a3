"""
Waypoint CSV Importer

This module loads a trail's route from a comma-separated waypoint file into the
trail's waypoint table. An import is a full replace: the previous waypoint set
is deleted and the accepted rows are inserted, numbered 1..N in input order,
inside a single transaction.

Input format:
    UTF-8 text, first line is the header. Required columns (any order, case and
    surrounding whitespace ignored):
        latitude, longitude, elevation, distance, hike_city, gain, loss,
        pace_dist, pace_gain, fme, facilities
    Extra columns are allowed and ignored. Quoting is not supported: a comma
    inside a field is treated as a delimiter, which changes the column count
    and causes that row to be skipped.

Failure policy:
    - Empty payload or missing header columns abort before anything is written.
    - A malformed data row (wrong column count, unparseable number) is skipped
      and counted; the rest of the file is still imported.
    - Blank lines are ignored and not counted as skipped.
    - The transaction commits even when every row was skipped, leaving the
      trail with no waypoints; the result then reports success == False.
    - A storage failure during the transaction rolls back the delete and the
      inserts and raises ConstraintError.

Usage:
    importer = WaypointCSVImporter(engine, provisioner, logger)
    result = importer.import_file("viafrancigena", "routes/via_francigena.csv")
    if not result.success:
        ...
"""

from __future__ import annotations

import logging
import math
import re
import time
from typing import Dict, List, Optional, Union

from sqlalchemy import Engine, insert
from sqlalchemy.exc import SQLAlchemyError

from config.settings import config
from scripts.database.errors import (
    ConstraintError,
    EmptyInputError,
    HeaderMismatchError,
    RowParseError,
)
from scripts.database.models import ImportResult, Waypoint
from scripts.database.provisioner import SchemaProvisioner
from scripts.database.schema import validate_trail_name
from utils.logging import setup_importer_logging

_FLOAT_FIELDS = ["latitude", "longitude", "elevation", "distance", "gain", "loss"]
_INT_FIELDS = ["pace_dist", "pace_gain"]
_OPTIONAL_TEXT_FIELDS = ["hike_city", "facilities"]

# Plain ASCII decimals only: no "nan"/"inf", digit separators or non-ASCII digits
_FLOAT_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_INT_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)


class WaypointCSVImporter:
    """Import a waypoint CSV payload into a trail's waypoint table."""

    def __init__(
        self,
        engine: Engine,
        provisioner: Optional[SchemaProvisioner] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the importer.

        Args:
            engine (Engine): SQLAlchemy engine for the SQLite store
            provisioner (Optional[SchemaProvisioner]): Shared provisioner. If None,
                                                       one is created for this engine.
            logger (Optional[logging.Logger]): Logger instance for operation tracking.
                                             If None, sets up the importer log file.
        """
        self.engine = engine
        self.logger = logger or setup_importer_logging()
        self.provisioner = provisioner or SchemaProvisioner(engine, self.logger)
        self.required_headers: List[str] = list(config.WAYPOINT_REQUIRED_HEADERS)
        self.progress_interval = config.IMPORT_PROGRESS_INTERVAL

        # Statistics for summary report
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, Union[int, float]]:
        return {
            "total_lines": 0,
            "imported": 0,
            "skipped": 0,
            "blank": 0,
            "processing_time": 0.0,
        }

    def import_file(
        self, trail: str, csv_path: str, encoding: str = "utf-8-sig"
    ) -> ImportResult:
        """
        Read a waypoint CSV file and import it.

        Args:
            trail (str): Trail name
            csv_path (str): Path to the CSV file
            encoding (str): File encoding. The default also drops a UTF-8 BOM.

        Returns:
            ImportResult: Imported and skipped counts
        """
        self.logger.info(f"Reading waypoint file: {csv_path}")
        with open(csv_path, "r", encoding=encoding, newline="") as f:
            payload = f.read()
        return self.import_waypoints(trail, payload)

    def import_waypoints(self, trail: str, payload: Union[str, bytes]) -> ImportResult:
        """
        Replace the trail's waypoints with the rows of *payload*.

        Args:
            trail (str): Trail name
            payload (Union[str, bytes]): CSV text; bytes are decoded as UTF-8

        Returns:
            ImportResult: Imported, skipped and blank line counts.
                          result.success is False when nothing was imported.

        Raises:
            InvalidTrailNameError: If the trail name is not a safe identifier
            SchemaError: If the trail's tables cannot be created
            EmptyInputError: If there is no header plus at least one more line
            HeaderMismatchError: If required header columns are missing
            ConstraintError: If the storage layer fails during the transaction
        """
        start_time = time.monotonic()
        self.stats = self._empty_stats()

        trail = validate_trail_name(trail)
        waypoints_table = self.provisioner.ensure(trail).waypoints

        lines = self._split_lines(payload)
        if len(lines) < 2:
            self.logger.error("CSV payload appears to be empty or has no data rows")
            raise EmptyInputError(
                f"CSV payload has {len(lines)} line(s); a header and at least one data row are required"
            )

        headers = self._parse_header(lines[0])
        columns = self._resolve_columns(headers)
        self.logger.info(
            f"Column mapping successful - expecting {len(headers)} columns per row"
        )

        total_lines = len(lines) - 1
        self.stats["total_lines"] = total_lines
        self.logger.info(f"Starting import of {total_lines} waypoint records for {trail}...")

        rows: List[dict] = []
        for index, line in enumerate(lines[1:], start=1):
            line_number = index + 1
            if not line.strip():
                self.stats["blank"] += 1
                continue

            try:
                row = self.parse_row(line, headers, columns, line_number)
            except RowParseError as e:
                self.logger.warning(f"Skipping {e}")
                self.stats["skipped"] += 1
                continue

            row["seq"] = len(rows) + 1
            rows.append(Waypoint(**row).model_dump())

            imported = len(rows)
            if imported <= 3 or imported % self.progress_interval == 0:
                self.logger.info(
                    f"Parsed waypoint {imported}: {row['hike_city'] or 'no city'} "
                    f"at {row['latitude']}, {row['longitude']}"
                )

        self._replace_waypoints(trail, waypoints_table, rows)

        self.stats["imported"] = len(rows)
        self.stats["processing_time"] = time.monotonic() - start_time

        result = ImportResult(
            trail=trail,
            imported_count=self.stats["imported"],
            skipped_count=self.stats["skipped"],
            blank_count=self.stats["blank"],
        )
        self._log_summary(result)
        return result

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @staticmethod
    def _split_lines(payload: Union[str, bytes]) -> List[str]:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        return payload.lstrip("\ufeff").splitlines()

    @staticmethod
    def _parse_header(header_line: str) -> List[str]:
        return [token.strip().lower() for token in header_line.split(",")]

    def _resolve_columns(self, headers: List[str]) -> Dict[str, int]:
        """
        Map each required field to its first column index in *headers*.

        Raises:
            HeaderMismatchError: If any required field is absent
        """
        missing = [field for field in self.required_headers if field not in headers]
        if missing:
            self.logger.error(f"Missing required headers: {missing}")
            self.logger.error(f"Available headers: {headers}")
            raise HeaderMismatchError(missing, headers)

        return {field: headers.index(field) for field in self.required_headers}

    def parse_row(
        self,
        line: str,
        headers: List[str],
        columns: Dict[str, int],
        line_number: int,
    ) -> dict:
        """
        Parse one data line into waypoint field values (without seq).

        Args:
            line (str): Raw data line
            headers (List[str]): Parsed header tokens
            columns (Dict[str, int]): Field name to column index
            line_number (int): 1-based line number, for messages

        Returns:
            dict: Field values ready for the Waypoint model

        Raises:
            RowParseError: If the column count is wrong or a number cannot be parsed
        """
        values = line.split(",")
        if len(values) != len(headers):
            raise RowParseError(
                line_number,
                f"wrong column count ({len(values)} vs {len(headers)})",
            )

        def field(name: str) -> str:
            return values[columns[name]].strip()

        row: dict = {}
        for name in _FLOAT_FIELDS:
            text = field(name)
            value = float(text) if _FLOAT_PATTERN.fullmatch(text) else math.nan
            if not math.isfinite(value):
                raise RowParseError(line_number, f"invalid {name} '{text}'")
            row[name] = value

        for name in _INT_FIELDS:
            text = field(name)
            if not _INT_PATTERN.fullmatch(text):
                raise RowParseError(line_number, f"invalid {name} '{text}'")
            row[name] = int(text)

        for name in _OPTIONAL_TEXT_FIELDS:
            row[name] = field(name) or None

        row["fme"] = field("fme")
        row["variant_city"] = None
        return row

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def _replace_waypoints(self, trail: str, waypoints_table, rows: List[dict]) -> None:
        """
        Delete the trail's waypoints and insert *rows* in one transaction.

        The transaction commits even if *rows* is empty.

        Raises:
            ConstraintError: If the delete or any insert fails; everything is rolled back
        """
        try:
            with self.engine.begin() as conn:
                deleted = conn.execute(waypoints_table.delete()).rowcount
                self.logger.info(f"Cleared {deleted} existing waypoints for {trail}")
                if rows:
                    conn.execute(insert(waypoints_table), rows)
        except SQLAlchemyError as e:
            self.logger.error(f"Waypoint import for {trail} rolled back: {e}")
            raise ConstraintError(f"Waypoint import for {trail} failed: {e}") from e

    def _log_summary(self, result: ImportResult) -> None:
        """Log import summary."""
        self.logger.info("=" * 50)
        self.logger.info("WAYPOINT IMPORT SUMMARY")
        self.logger.info("=" * 50)
        self.logger.info(f"Trail: {result.trail}")
        self.logger.info(f"Data lines read: {self.stats['total_lines']}")
        self.logger.info(f"Waypoints imported: {result.imported_count}")
        self.logger.info(f"Rows skipped: {result.skipped_count}")
        self.logger.info(f"Blank lines ignored: {result.blank_count}")
        self.logger.info(f"Processing time: {self.stats['processing_time']:.2f} seconds")
        if not result.success:
            self.logger.warning(f"No waypoints imported for {result.trail}")
        self.logger.info("=" * 50)
