"""
Journal Store: day-by-day plan, mileage and expense records.

The journal tables are shared by every trail. Entries are appended and edited
in place; lists come back ordered by date and then by insertion.
"""

from __future__ import annotations

from typing import List, Type

from pydantic import BaseModel
from sqlalchemy import Table

from scripts.database.base_store import BaseStore
from scripts.database.models import ExpenseEntry, MileageEntry, PlanEntry

# Model field -> column name, where they differ
_NOTE_COLUMNS = {
    "mileage": "note_mileage",
    "expense": "note_expense",
}


class JournalStore(BaseStore):
    """Append, update and list journal entries."""

    # Plan

    def add_plan_entry(self, entry: PlanEntry) -> int:
        return self._add_entry("plan", entry)

    def update_plan_entry(self, id_no: int, entry: PlanEntry) -> bool:
        return self._update_entry("plan", id_no, entry)

    def list_plan_entries(self) -> List[PlanEntry]:
        return self._list_entries("plan", PlanEntry)

    # Mileage

    def add_mileage_entry(self, entry: MileageEntry) -> int:
        return self._add_entry("mileage", entry)

    def update_mileage_entry(self, id_no: int, entry: MileageEntry) -> bool:
        return self._update_entry("mileage", id_no, entry)

    def list_mileage_entries(self) -> List[MileageEntry]:
        return self._list_entries("mileage", MileageEntry)

    # Expenses

    def add_expense_entry(self, entry: ExpenseEntry) -> int:
        return self._add_entry("expense", entry)

    def update_expense_entry(self, id_no: int, entry: ExpenseEntry) -> bool:
        return self._update_entry("expense", id_no, entry)

    def list_expense_entries(self) -> List[ExpenseEntry]:
        return self._list_entries("expense", ExpenseEntry)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _table(self, kind: str) -> Table:
        return getattr(self.provisioner.ensure_global(), kind)

    @staticmethod
    def _to_row(kind: str, entry: BaseModel) -> dict:
        """Convert an entry model to column values (id_no excluded)."""
        values = entry.model_dump(exclude={"id_no"})
        note_column = _NOTE_COLUMNS.get(kind)
        if note_column:
            values[note_column] = values.pop("note")
        return values

    @staticmethod
    def _from_row(kind: str, row, model: Type[BaseModel]) -> BaseModel:
        values = dict(row)
        note_column = _NOTE_COLUMNS.get(kind)
        if note_column:
            values["note"] = values.pop(note_column)
        return model(**values)

    def _add_entry(self, kind: str, entry: BaseModel) -> int:
        """
        Insert a journal entry.

        Args:
            kind (str): Journal table name ("plan", "mileage" or "expense")
            entry (BaseModel): Entry to insert; its id_no is ignored

        Returns:
            int: id_no assigned to the new row
        """
        values = self._to_row(kind, entry)
        id_no = self._insert(self._table(kind), values, f"add {kind} entry for {entry.date}")
        self.logger.debug(f"Added {kind} entry {id_no} for {entry.date}")
        return id_no

    def _update_entry(self, kind: str, id_no: int, entry: BaseModel) -> bool:
        """
        Overwrite every field of an existing journal entry.

        Returns:
            bool: False if no entry has *id_no*
        """
        values = self._to_row(kind, entry)
        return self._update(self._table(kind), id_no, values, f"update {kind} entry {id_no}")

    def _list_entries(self, kind: str, model: Type[BaseModel]) -> list:
        table = self._table(kind)
        rows = self._select_all(
            table, f"list {kind} entries", table.c.date.asc(), table.c.id_no.asc()
        )
        return [self._from_row(kind, row, model) for row in rows]
