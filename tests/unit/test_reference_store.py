"""
Unit tests for reference_store.py module.

Tests cover adding, listing and enabling/disabling categories, currencies and
payment methods.
"""

from scripts.database.models import CategoryItem


class TestCategories:
    """Test cases for expense categories."""

    def test_add_and_list_in_insertion_order(self, reference_store):
        food = reference_store.add_category("Food")
        lodging = reference_store.add_category("Lodging", "Lodging")

        categories = reference_store.list_categories()

        assert [c.id_no for c in categories] == [food, lodging]
        assert categories[0] == CategoryItem(
            id_no=food, name="Food", category_type="Expense", enabled=True
        )
        assert categories[1].category_type == "Lodging"

    def test_disabled_category_still_listed(self, reference_store):
        """Test that disabling never removes an item from the list."""
        food = reference_store.add_category("Food")

        assert reference_store.update_category_enabled(food, False) is True
        categories = reference_store.list_categories()

        assert len(categories) == 1
        assert categories[0].enabled is False

    def test_reenable_category(self, reference_store):
        food = reference_store.add_category("Food")
        reference_store.update_category_enabled(food, False)

        reference_store.update_category_enabled(food, True)

        assert reference_store.list_categories()[0].enabled is True

    def test_toggle_missing_category(self, reference_store):
        assert reference_store.update_category_enabled(99, False) is False

    def test_toggle_affects_only_one_row(self, reference_store):
        food = reference_store.add_category("Food")
        reference_store.add_category("Transport")

        reference_store.update_category_enabled(food, False)

        assert [c.enabled for c in reference_store.list_categories()] == [False, True]


class TestCurrencies:
    """Test cases for currencies."""

    def test_add_and_list(self, reference_store):
        eur = reference_store.add_currency("EUR", 1.08)
        reference_store.add_currency("CHF")

        currencies = reference_store.list_currencies()

        assert currencies[0].id_no == eur
        assert currencies[0].exchange_rate == 1.08
        assert currencies[1].exchange_rate == 1.0

    def test_disable_currency(self, reference_store):
        eur = reference_store.add_currency("EUR", 1.08)

        assert reference_store.update_currency_enabled(eur, False) is True
        assert reference_store.list_currencies()[0].enabled is False
        assert reference_store.update_currency_enabled(eur + 1, False) is False


class TestPayments:
    """Test cases for payment methods."""

    def test_add_and_list(self, reference_store):
        visa = reference_store.add_payment("Visa 1234", "Credit Card")
        reference_store.add_payment("Wallet", "Cash")

        payments = reference_store.list_payments()

        assert [(p.name, p.payment_type) for p in payments] == [
            ("Visa 1234", "Credit Card"),
            ("Wallet", "Cash"),
        ]
        assert payments[0].id_no == visa

    def test_disabled_payment_still_listed(self, reference_store):
        visa = reference_store.add_payment("Visa 1234", "Credit Card")

        reference_store.update_payment_enabled(visa, False)

        payments = reference_store.list_payments()
        assert len(payments) == 1
        assert payments[0].enabled is False

    def test_empty_tables(self, reference_store):
        """Test that nothing is seeded."""
        assert reference_store.list_payments() == []
        assert reference_store.list_currencies() == []
        assert reference_store.list_categories() == []
