"""Tests for the analysis orchestrator."""

from decimal import Decimal

import pytest

from transaction_analytics.models.batch import TransactionBatch
from transaction_analytics.models.transaction import (
    AnalyzedTransaction,
    InvalidTransactionError,
    Transaction,
)
from transaction_analytics.processing.analyzer import Analyzer, analyze, coerce_transactions


def create_transaction(
    amount: Decimal,
    description: str = "Coffee Shop",
    trans_date: str = "2024-01-15",
    category: str = "dining",
) -> Transaction:
    """Helper to create a Transaction for testing."""
    return Transaction(
        date=trans_date,
        description=description,
        amount=amount,
        category=category,
    )


class TestAnalyze:
    """Tests for analyze."""

    def test_empty_batch(self) -> None:
        """Test that an empty batch analyzes to an empty list."""
        assert analyze([]) == []
        assert analyze(TransactionBatch.empty()) == []

    def test_order_and_fields_preserved(self) -> None:
        """Test that records come back in input order with raw fields intact."""
        transactions = [
            create_transaction(Decimal("-3.50"), "Bakery", "2024-01-03"),
            create_transaction(Decimal("2500"), "Salary", "2024-01-01", "salary"),
            create_transaction(Decimal("-60"), "Gas Station", "2024-01-02", "transport"),
        ]

        result = analyze(transactions)

        assert len(result) == 3
        assert all(isinstance(t, AnalyzedTransaction) for t in result)
        assert [t.description for t in result] == ["Bakery", "Salary", "Gas Station"]
        assert [t.raw() for t in result] == transactions

    def test_all_passes_applied(self) -> None:
        """Test that duplicate, anomaly and recurrence fields are all set."""
        transactions = [
            create_transaction(Decimal("-100"), "Netflix 1"),
            create_transaction(Decimal("-300"), "Netflix 2"),
            create_transaction(Decimal("-100"), "Netflix 1"),
            create_transaction(Decimal("-300"), "Rent"),
        ]

        result = analyze(transactions)

        assert [t.duplicate_flag for t in result] == [True, False, True, False]
        assert [t.anomaly_score for t in result] == [-1.0, 1.0, -1.0, 1.0]
        assert [t.is_recurring for t in result] == [True, True, True, False]

    def test_idempotent(self) -> None:
        """Test that analyzing the output again gives the same result."""
        transactions = [
            create_transaction(Decimal("-100"), "Store A"),
            create_transaction(Decimal("-100"), "Store A"),
            create_transaction(Decimal("-950"), "Laptop"),
        ]

        first = analyze(transactions)
        second = analyze(first)

        assert second == first

    def test_stale_flags_are_recomputed(self) -> None:
        """Test that derived fields on the input are ignored and recomputed."""
        stale = AnalyzedTransaction.from_transaction(
            create_transaction(Decimal("-10")),
            duplicate_flag=True,
            anomaly_score=9.99,
            is_recurring=True,
        )

        result = analyze([stale])

        assert result[0].duplicate_flag is False
        assert result[0].anomaly_score == 0.0
        assert result[0].is_recurring is False

    def test_passes_are_independent(self) -> None:
        """Test that a duplicate pair still counts twice in the statistics."""
        # Duplicates are not removed before scoring: abs amounts 10, 10, 30
        transactions = [
            create_transaction(Decimal("-10"), "Cafe"),
            create_transaction(Decimal("-10"), "Cafe"),
            create_transaction(Decimal("-30"), "Bar"),
        ]

        result = analyze(transactions)

        # mean 50/3, population std dev sqrt(800/9): scores -0.71, -0.71, 1.41
        assert [t.anomaly_score for t in result] == [-0.71, -0.71, 1.41]

    def test_reanalysis_after_extend(self) -> None:
        """Test that appending a copy flags the earlier record too."""
        batch = TransactionBatch.empty().extend([create_transaction(Decimal("-5"))])
        assert analyze(batch)[0].duplicate_flag is False

        batch = batch.extend([create_transaction(Decimal("-5"))])
        result = analyze(batch)

        assert [t.duplicate_flag for t in result] == [True, True]

    def test_mapping_records_accepted(self) -> None:
        """Test that extractor mappings are analyzed like transactions."""
        records = [
            {"date": "2024-01-15", "description": "Coffee", "amount": -4.5, "category": "dining", "notes": ""},
            {"date": "2024-01-15", "description": "Coffee", "amount": -4.50, "category": "dining", "notes": ""},
        ]

        result = analyze(records)

        assert result[0].amount == Decimal("-4.5")
        assert result[0].date == "2024-01-15"
        assert [t.duplicate_flag for t in result] == [True, True]

    def test_unparseable_date_does_not_abort_batch(self) -> None:
        """Test that a bad date is carried through and still analyzed."""
        records = [
            {"date": "2024-02-30", "description": "Coffee", "amount": -4.5},
            {"date": "2024-02-30", "description": "Coffee", "amount": -4.5},
            {"date": "2024-01-15", "description": "Rent", "amount": -1200},
        ]

        result = analyze(records)

        assert [t.date for t in result] == ["2024-02-30", "2024-02-30", "2024-01-15"]
        assert [t.duplicate_flag for t in result] == [True, True, False]

    def test_invalid_amount_raises(self) -> None:
        """Test that a non-numeric amount is rejected, not treated as zero."""
        records = [
            {"date": "2024-01-15", "description": "Coffee", "amount": -4.5},
            {"date": "2024-01-16", "description": "Tea", "amount": "abc"},
        ]

        with pytest.raises(InvalidTransactionError) as exc_info:
            analyze(records)

        assert exc_info.value.index == 1
        assert exc_info.value.field_name == "amount"

    def test_unsupported_record_type_raises(self) -> None:
        """Test that a non-mapping record is rejected."""
        with pytest.raises(InvalidTransactionError, match="Record 0"):
            coerce_transactions(["2024-01-15,Coffee,-4.50"])  # type: ignore[list-item]

    def test_inputs_not_modified(self) -> None:
        """Test that analysis leaves its input records untouched."""
        transactions = [create_transaction(Decimal("-5")), create_transaction(Decimal("-5"))]

        analyze(transactions)

        assert all(type(t) is Transaction for t in transactions)

    def test_analyzer_reusable(self) -> None:
        """Test that one Analyzer serves several batches."""
        analyzer = Analyzer()
        small = [create_transaction(Decimal("-1"))]
        large = [create_transaction(Decimal("-1")), create_transaction(Decimal("-3"), "Other")]

        assert analyzer.analyze(small)[0].anomaly_score == 0.0
        assert analyzer.analyze(large)[1].anomaly_score == 1.0
        assert analyzer.analyze(small)[0].anomaly_score == 0.0
