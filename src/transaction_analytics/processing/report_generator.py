"""Summary aggregations over an analyzed batch.

Single source of truth for the totals shown by the console report and
written by the exporters.
"""

from collections.abc import Sequence
from decimal import Decimal

from transaction_analytics.config import Config
from transaction_analytics.models.report import (
    AnomalyPoint,
    CategoryTotal,
    SpikePoint,
    Summary,
)
from transaction_analytics.models.transaction import AnalyzedTransaction, Transaction
from transaction_analytics.utils.date_utils import date_sort_key
from transaction_analytics.utils.decimal_utils import ZERO, round_half_up
from transaction_analytics.utils.logging_config import get_logger

logger = get_logger(__name__)


def _display_category(key: str) -> str:
    """Upper-case the first letter of a lower-cased category key."""
    return key[:1].upper() + key[1:]


def category_totals(transactions: Sequence[Transaction]) -> list[CategoryTotal]:
    """Total expenses per category, largest first.

    Categories are grouped case-insensitively and shown with the first
    letter capitalized (``"DINING"`` and ``"dining"`` both feed ``"Dining"``).
    Totals are rounded to cents; equal totals keep first-appearance order.
    Income records are ignored.

    Args:
        transactions: Analyzed (or raw) batch.

    Returns:
        Category totals sorted by amount descending.
    """
    by_category: dict[str, Decimal] = {}
    for txn in transactions:
        if txn.amount < 0:
            key = txn.category.lower()
            by_category[key] = by_category.get(key, ZERO) + abs(txn.amount)

    totals = [
        CategoryTotal(name=_display_category(key), amount=round_half_up(total, 2))
        for key, total in by_category.items()
    ]
    return sorted(totals, key=lambda t: t.amount, reverse=True)


def daily_spending(transactions: Sequence[Transaction]) -> list[SpikePoint]:
    """Total absolute spend per date string, in chronological order.

    Dates are grouped by their exact text, so ``"2024-01-15"`` and
    ``"01/15/2024"`` are separate points. Points are ordered by calendar
    day; dates that do not parse come last.

    Args:
        transactions: Analyzed (or raw) batch.

    Returns:
        One point per date that has at least one expense.
    """
    by_date: dict[str, Decimal] = {}
    for txn in transactions:
        if txn.amount < 0:
            by_date[txn.date] = by_date.get(txn.date, ZERO) + abs(txn.amount)

    return [
        SpikePoint(date=d, amount=amount)
        for d, amount in sorted(by_date.items(), key=lambda item: date_sort_key(item[0]))
    ]


def anomaly_series(
    transactions: Sequence[AnalyzedTransaction],
    threshold: float = 1.0,
) -> list[AnomalyPoint]:
    """Records scoring strictly above ``threshold``, in batch order.

    Args:
        transactions: Analyzed batch.
        threshold: Minimum score (exclusive).

    Returns:
        Points carrying each record's index in ``transactions``.
    """
    return [
        AnomalyPoint(index=i, score=txn.anomaly_score, description=txn.description)
        for i, txn in enumerate(transactions)
        if txn.anomaly_score > threshold
    ]


def summarize(
    transactions: Sequence[AnalyzedTransaction],
    config: Config | None = None,
) -> Summary | None:
    """Build the summary of an analyzed batch.

    Args:
        transactions: Output of ``analyze`` (any display order; indices in
            the anomaly series refer to this sequence).
        config: Application configuration (for thresholds).

    Returns:
        The summary, or None when the batch is empty. No summary is a
        normal state, not an error.
    """
    if not transactions:
        return None

    analytics = (config or Config()).analytics

    total_income = sum((t.amount for t in transactions if t.amount > 0), ZERO)
    total_spending = sum((abs(t.amount) for t in transactions if t.amount < 0), ZERO)
    duplicates = sum(1 for t in transactions if t.duplicate_flag)
    suspicious = sum(
        1 for t in transactions if t.anomaly_score > analytics.suspicious_threshold
    )

    # max()/min() return the first of equal elements
    highest = max(transactions, key=lambda t: t.amount)
    lowest = min(transactions, key=lambda t: t.amount)

    summary = Summary(
        total_records=len(transactions),
        total_income=total_income,
        total_spending=total_spending,
        duplicates=duplicates,
        suspicious=suspicious,
        highest=highest,
        lowest=lowest,
        spikes=daily_spending(transactions),
        anomalies=anomaly_series(transactions, analytics.anomaly_series_threshold),
    )

    logger.info(
        f"Summarized {summary.total_records} records: "
        f"{duplicates} duplicates, {suspicious} suspicious, "
        f"{len(summary.spikes)} spending days"
    )
    return summary
