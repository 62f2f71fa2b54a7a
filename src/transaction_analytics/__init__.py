"""Transaction analytics: duplicate, anomaly and recurrence overlay for extracted transactions."""

__version__ = "1.2.0"

from transaction_analytics.models import (  # noqa: E402
    AnalyzedTransaction,
    InvalidTransactionError,
    Summary,
    Transaction,
    TransactionBatch,
)
from transaction_analytics.processing import (  # noqa: E402
    analyze,
    category_totals,
    score_anomalies,
    summarize,
    tag_duplicates,
    tag_recurring,
)

__all__ = [
    "__version__",
    "Transaction",
    "AnalyzedTransaction",
    "InvalidTransactionError",
    "TransactionBatch",
    "Summary",
    "analyze",
    "summarize",
    "category_totals",
    "tag_duplicates",
    "score_anomalies",
    "tag_recurring",
]
