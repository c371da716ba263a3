"""
Unit tests for base_store.py module.

The CRUD helpers are shared by every store, so they are exercised here once
through a bare BaseStore against the reference tables.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from scripts.database.app_config import AppConfigStore
from scripts.database.base_store import BaseStore
from scripts.database.errors import ConstraintError
from scripts.database.journal_store import JournalStore
from scripts.database.reference_store import ReferenceStore
from scripts.database.trail_store import TrailStore


@pytest.fixture
def base_store(engine, provisioner, test_logger):
    return BaseStore(engine, provisioner, test_logger)


class TestBaseStore:
    """Test cases for the shared insert/update/select helpers."""

    @pytest.mark.parametrize(
        "store_class", [TrailStore, ReferenceStore, JournalStore, AppConfigStore]
    )
    def test_every_store_uses_the_shared_helpers(self, store_class):
        assert issubclass(store_class, BaseStore)
        for helper in ("_insert", "_update", "_select_all"):
            assert helper not in vars(store_class)

    def test_default_logger_named_after_subclass_module(self, engine):
        store = ReferenceStore(engine)

        assert store.logger.name == "scripts.database.reference_store"
        assert store.provisioner.engine is engine

    def test_insert_update_select_round(self, base_store, provisioner):
        currency = provisioner.ensure_global().currency

        eur = base_store._insert(
            currency, {"currency": "EUR", "exchange_rate": 1.08, "enabled": True}, "add EUR"
        )
        base_store._insert(
            currency, {"currency": "CHF", "exchange_rate": 1.12, "enabled": True}, "add CHF"
        )
        assert base_store._update(currency, eur, {"exchange_rate": 1.1}, "update EUR")

        rows = base_store._select_all(currency, "list currencies")
        assert [row["currency"] for row in rows] == ["EUR", "CHF"]
        assert rows[0]["exchange_rate"] == 1.1

        by_name = base_store._select_all(currency, "list currencies", currency.c.currency)
        assert [row["currency"] for row in by_name] == ["CHF", "EUR"]

    def test_update_missing_id_returns_false(self, base_store, provisioner):
        category = provisioner.ensure_global().category

        assert base_store._update(category, 999, {"enabled": False}, "disable 999") is False

    def test_failure_is_logged_and_translated(self, base_store, provisioner):
        category = provisioner.ensure_global().category
        failure = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed"))

        with patch("scripts.database.base_store.insert", side_effect=failure):
            with patch.object(base_store.logger, "error") as mock_error:
                with pytest.raises(ConstraintError, match="Failed to add Food"):
                    base_store._insert(category, {"category": "Food"}, "add Food")

        mock_error.assert_called_once()
