"""Tests for recurring-payment classification."""

from decimal import Decimal

import pytest

from transaction_analytics.config import AnalyticsConfig, Config
from transaction_analytics.models.transaction import Transaction
from transaction_analytics.processing.recurrence import (
    RecurrenceClassifier,
    normalize_description,
    tag_recurring,
)


def create_transaction(
    description: str,
    amount: Decimal = Decimal("-15.99"),
    trans_date: str = "2024-02-01",
) -> Transaction:
    """Helper to create a Transaction for testing."""
    return Transaction(
        date=trans_date,
        description=description,
        amount=amount,
        category="entertainment",
    )


class TestNormalizeDescription:
    """Tests for normalize_description."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Netflix Subscription 123", "netflix subscription"),
            ("NETFLIX SUBSCRIPTION 456", "netflix subscription"),
            ("  Spotify  ", "spotify"),
            ("Uber 12 Trip 34", "uber  trip"),
            ("12345", ""),
            ("", ""),
        ],
    )
    def test_normalization(self, raw: str, expected: str) -> None:
        """Test lower-casing, digit removal and trimming."""
        assert normalize_description(raw) == expected

    def test_non_ascii_digits_removed(self) -> None:
        """Test that decimal digits from other scripts are removed too."""
        assert normalize_description("Rent ١٢٣") == "rent"


class TestRecurrenceClassifier:
    """Tests for RecurrenceClassifier."""

    def test_empty_batch(self) -> None:
        """Test that an empty batch yields no flags."""
        assert RecurrenceClassifier().recurring_flags([]) == []
        assert tag_recurring([]) == []

    def test_digit_variants_grouped(self) -> None:
        """Test that descriptions differing only in digits and case recur."""
        transactions = [
            create_transaction("Netflix Subscription 123"),
            create_transaction("NETFLIX SUBSCRIPTION 456"),
            create_transaction("Grocery Store"),
        ]

        assert RecurrenceClassifier().recurring_flags(transactions) == [True, True, False]

    def test_singleton_not_recurring(self) -> None:
        """Test that a description seen once is not recurring."""
        assert RecurrenceClassifier().recurring_flags([create_transaction("Gym")]) == [False]

    def test_amount_and_date_ignored(self) -> None:
        """Test that amounts and dates play no part in grouping."""
        transactions = [
            create_transaction("Hardware Store", Decimal("-5"), "2024-01-01"),
            create_transaction("Hardware Store", Decimal("-900"), "2024-06-30"),
        ]

        assert RecurrenceClassifier().recurring_flags(transactions) == [True, True]

    def test_inner_whitespace_matters(self) -> None:
        """Test that inner whitespace is not collapsed."""
        transactions = [
            create_transaction("Coffee Shop"),
            create_transaction("Coffee  Shop"),
        ]

        assert RecurrenceClassifier().recurring_flags(transactions) == [False, False]

    def test_all_digit_descriptions_share_empty_key(self) -> None:
        """Test that purely numeric descriptions group under the empty key."""
        transactions = [create_transaction("1001"), create_transaction("2002")]

        assert RecurrenceClassifier().recurring_flags(transactions) == [True, True]

    def test_min_occurrences_configurable(self) -> None:
        """Test a higher minimum group size."""
        config = Config(analytics=AnalyticsConfig(recurring_min_occurrences=3))
        transactions = [
            create_transaction("Spotify 1"),
            create_transaction("Spotify 2"),
            create_transaction("Rent"),
            create_transaction("Rent"),
            create_transaction("Rent"),
        ]

        flags = RecurrenceClassifier(config).recurring_flags(transactions)

        assert flags == [False, False, True, True, True]

    def test_get_recurring_groups(self) -> None:
        """Test grouping of recurring records by key."""
        transactions = [
            create_transaction("Netflix 1"),
            create_transaction("Bakery"),
            create_transaction("Netflix 2"),
        ]

        groups = RecurrenceClassifier().get_recurring_groups(transactions)

        assert list(groups) == ["netflix"]
        assert [t.description for t in groups["netflix"]] == ["Netflix 1", "Netflix 2"]

    def test_tag_recurring_sets_field(self) -> None:
        """Test that tag_recurring returns records carrying the flag."""
        transactions = [create_transaction("Gym 01"), create_transaction("Gym 02")]

        result = tag_recurring(transactions)

        assert [t.is_recurring for t in result] == [True, True]
        assert [t.duplicate_flag for t in result] == [False, False]
