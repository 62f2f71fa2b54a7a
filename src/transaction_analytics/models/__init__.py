"""Data models for transactions, batches and summaries."""

from transaction_analytics.models.batch import TransactionBatch
from transaction_analytics.models.report import (
    AnomalyPoint,
    CategoryTotal,
    SpikePoint,
    Summary,
)
from transaction_analytics.models.transaction import (
    AnalyzedTransaction,
    InvalidTransactionError,
    Transaction,
)

__all__ = [
    "Transaction",
    "AnalyzedTransaction",
    "InvalidTransactionError",
    "TransactionBatch",
    "Summary",
    "CategoryTotal",
    "SpikePoint",
    "AnomalyPoint",
]
