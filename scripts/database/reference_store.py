"""
Reference Store: payment methods, expense categories and currencies.

Reference rows are never deleted, only disabled, so expenses that name an
item keep resolving. Lists return every row, enabled or not, in insertion
order; filtering for pickers is up to the caller.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import Table

from config.settings import config
from scripts.database.base_store import BaseStore
from scripts.database.models import CategoryItem, CurrencyItem, PaymentItem


class ReferenceStore(BaseStore):
    """CRUD (minus delete) over the category, currency and payment tables."""

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def list_categories(self) -> List[CategoryItem]:
        category = self.provisioner.ensure_global().category
        rows = self._select_all(category, "list categories")
        return [
            CategoryItem(
                id_no=row["id_no"],
                name=row["category"],
                category_type=row["category_type"] or config.DEFAULT_CATEGORY_TYPE,
                enabled=bool(row["enabled"]),
            )
            for row in rows
        ]

    def add_category(
        self, name: str, category_type: str = config.DEFAULT_CATEGORY_TYPE
    ) -> int:
        """
        Add an enabled expense category.

        Args:
            name (str): Category name
            category_type (str): Grouping label, "Expense" unless given

        Returns:
            int: id_no of the new row
        """
        category = self.provisioner.ensure_global().category
        values = {"category": name, "category_type": category_type, "enabled": True}
        return self._insert(category, values, f"add category {name}")

    def update_category_enabled(self, id_no: int, enabled: bool) -> bool:
        category = self.provisioner.ensure_global().category
        return self._set_enabled(category, id_no, enabled, "category")

    # ------------------------------------------------------------------
    # Currencies
    # ------------------------------------------------------------------

    def list_currencies(self) -> List[CurrencyItem]:
        currency = self.provisioner.ensure_global().currency
        rows = self._select_all(currency, "list currencies")
        return [
            CurrencyItem(
                id_no=row["id_no"],
                name=row["currency"],
                exchange_rate=row["exchange_rate"],
                enabled=bool(row["enabled"]),
            )
            for row in rows
        ]

    def add_currency(self, name: str, exchange_rate: float = 1.0) -> int:
        """
        Add an enabled currency.

        Args:
            name (str): Currency code or name, e.g. "EUR"
            exchange_rate (float): Units of the home currency per unit of this one

        Returns:
            int: id_no of the new row
        """
        currency = self.provisioner.ensure_global().currency
        values = {"currency": name, "exchange_rate": exchange_rate, "enabled": True}
        return self._insert(currency, values, f"add currency {name}")

    def update_currency_enabled(self, id_no: int, enabled: bool) -> bool:
        currency = self.provisioner.ensure_global().currency
        return self._set_enabled(currency, id_no, enabled, "currency")

    # ------------------------------------------------------------------
    # Payment methods
    # ------------------------------------------------------------------

    def list_payments(self) -> List[PaymentItem]:
        payment = self.provisioner.ensure_global().payment
        rows = self._select_all(payment, "list payments")
        return [
            PaymentItem(
                id_no=row["id_no"],
                name=row["payment"],
                payment_type=row["payment_type"],
                enabled=bool(row["enabled"]),
            )
            for row in rows
        ]

    def add_payment(self, name: str, payment_type: str) -> int:
        """
        Add an enabled payment method.

        Args:
            name (str): Display name, e.g. "Visa ...1234"
            payment_type (str): Kind of payment, e.g. "Credit Card" or "Cash"

        Returns:
            int: id_no of the new row
        """
        payment = self.provisioner.ensure_global().payment
        values = {"payment": name, "payment_type": payment_type, "enabled": True}
        return self._insert(payment, values, f"add payment {name}")

    def update_payment_enabled(self, id_no: int, enabled: bool) -> bool:
        payment = self.provisioner.ensure_global().payment
        return self._set_enabled(payment, id_no, enabled, "payment")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _set_enabled(self, table: Table, id_no: int, enabled: bool, label: str) -> bool:
        """
        Toggle the enabled flag of a single row.

        Returns:
            bool: False if no row has *id_no*
        """
        action = f"update {label} {id_no} enabled={enabled}"
        if not self._update(table, id_no, {"enabled": enabled}, action):
            self.logger.warning(f"No {label} with id {id_no}")
            return False
        self.logger.info(f"{label.capitalize()} {id_no} {'enabled' if enabled else 'disabled'}")
        return True

