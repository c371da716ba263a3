"""
Error taxonomy for the trail data store.

Every failure raised by the store, the importer and the pace cascade is a
TrailStoreError, so callers can tell "no data" (None / empty list) apart from
"store unreachable" (StoreConnectionError) and from "partial import"
(an ImportResult with skipped rows).
"""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError


class TrailStoreError(Exception):
    """Base class for all trail data store errors."""


class StorageError(TrailStoreError):
    """The storage layer rejected or failed an operation."""


class StoreConnectionError(StorageError):
    """The SQLite file could not be opened or the store is unreachable."""


class ConstraintError(StorageError):
    """An integrity failure, or a storage failure inside a multi-statement transaction."""


class SchemaError(TrailStoreError):
    """Table or index creation (or migration) failed."""


class InvalidTrailNameError(TrailStoreError, ValueError):
    """A trail name contains characters that cannot form a table name."""


class CSVValidationError(TrailStoreError):
    """The CSV payload is structurally unusable; nothing was written."""


class EmptyInputError(CSVValidationError):
    """The payload has no header plus data row."""


class HeaderMismatchError(CSVValidationError):
    """The header is missing one or more required columns."""

    def __init__(self, missing: list[str], available: list[str]):
        self.missing = missing
        self.available = available
        super().__init__(
            f"Missing required headers: {', '.join(missing)} "
            f"(available: {', '.join(available)})"
        )


class RowParseError(TrailStoreError):
    """A single CSV data row could not be parsed; the importer skips it."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Line {line_number}: {reason}")


def translate_storage_error(exc: SQLAlchemyError, action: str) -> StorageError:
    """
    Map a SQLAlchemy exception onto the store's error taxonomy.

    Args:
        exc: The exception raised by SQLAlchemy
        action: Short description of what was being attempted, used in the message

    Returns:
        StorageError: The translated exception, ready to be raised ``from exc``
    """
    message = f"Failed to {action}: {exc}"

    if isinstance(exc, IntegrityError):
        return ConstraintError(message)

    if isinstance(exc, OperationalError) and "unable to open" in str(exc).lower():
        return StoreConnectionError(message)

    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return StoreConnectionError(message)

    return StorageError(message)
