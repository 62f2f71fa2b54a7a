"""Analytics orchestration: one full pass over a batch."""

from collections.abc import Iterable, Mapping

from transaction_analytics.config import Config
from transaction_analytics.models.transaction import (
    AnalyzedTransaction,
    InvalidTransactionError,
    Transaction,
)
from transaction_analytics.processing.anomaly_scorer import AnomalyScorer
from transaction_analytics.processing.deduplicator import Deduplicator
from transaction_analytics.processing.recurrence import RecurrenceClassifier
from transaction_analytics.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)


def coerce_transactions(
    records: Iterable[Transaction | Mapping[str, object]],
) -> list[Transaction]:
    """Turn a batch into plain Transactions, dropping any derived fields.

    Args:
        records: Transactions, analyzed transactions or extractor mappings.

    Returns:
        Raw transactions in the same order.

    Raises:
        InvalidTransactionError: If a record is not a valid transaction.
    """
    result: list[Transaction] = []
    for index, record in enumerate(records):
        if isinstance(record, Transaction):
            result.append(record.raw())
        elif isinstance(record, Mapping):
            result.append(Transaction.from_dict(record, index=index))
        else:
            raise InvalidTransactionError(
                f"Unsupported record type {type(record).__name__}", index=index
            )
    return result


class Analyzer:
    """Runs duplicate, anomaly and recurrence analysis over a whole batch.

    All three passes read the same raw snapshot and none sees another's
    output. Every call recomputes everything from scratch, so re-running
    on the same batch gives the same result and re-running after records
    were appended refreshes the derived fields of every record.

    Holds only read-only configuration; one instance can serve concurrent
    calls on different (or identical) snapshots.
    """

    def __init__(self, config: Config | None = None):
        """Initialize analyzer.

        Args:
            config: Application configuration.
        """
        self.config = config or Config()
        self.deduplicator = Deduplicator(self.config)
        self.scorer = AnomalyScorer(self.config)
        self.classifier = RecurrenceClassifier(self.config)

    def analyze(
        self, records: Iterable[Transaction | Mapping[str, object]]
    ) -> list[AnalyzedTransaction]:
        """Analyze a batch.

        Args:
            records: The whole current batch, in arrival order.

        Returns:
            Analyzed records in the original order. Empty for an empty batch.

        Raises:
            InvalidTransactionError: If a record is not a valid transaction.
        """
        transactions = coerce_transactions(records)
        if not transactions:
            return []

        with LogContext(logger, "analyze", records=len(transactions)):
            duplicate_flags = self.deduplicator.duplicate_flags(transactions)
            scores = self.scorer.scores(transactions)
            recurring_flags = self.classifier.recurring_flags(transactions)

            return [
                AnalyzedTransaction.from_transaction(
                    txn,
                    duplicate_flag=is_duplicate,
                    anomaly_score=score,
                    is_recurring=is_recurring,
                )
                for txn, is_duplicate, score, is_recurring in zip(
                    transactions, duplicate_flags, scores, recurring_flags
                )
            ]


def analyze(
    records: Iterable[Transaction | Mapping[str, object]],
    config: Config | None = None,
) -> list[AnalyzedTransaction]:
    """Convenience function to analyze a batch.

    Args:
        records: The whole current batch.
        config: Application configuration.

    Returns:
        Analyzed records in the original order.
    """
    return Analyzer(config).analyze(records)
