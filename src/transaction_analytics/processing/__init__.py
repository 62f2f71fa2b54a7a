"""Transaction analytics passes and summary builder."""

from transaction_analytics.processing.analyzer import (
    Analyzer,
    analyze,
    coerce_transactions,
)
from transaction_analytics.processing.anomaly_scorer import (
    AmountStatistics,
    AnomalyScorer,
    score_anomalies,
)
from transaction_analytics.processing.deduplicator import (
    Deduplicator,
    tag_duplicates,
)
from transaction_analytics.processing.recurrence import (
    RecurrenceClassifier,
    normalize_description,
    tag_recurring,
)
from transaction_analytics.processing.report_generator import (
    anomaly_series,
    category_totals,
    daily_spending,
    summarize,
)

__all__ = [
    "Deduplicator",
    "tag_duplicates",
    "AmountStatistics",
    "AnomalyScorer",
    "score_anomalies",
    "RecurrenceClassifier",
    "normalize_description",
    "tag_recurring",
    "Analyzer",
    "analyze",
    "coerce_transactions",
    "summarize",
    "category_totals",
    "daily_spending",
    "anomaly_series",
]
