"""Statistical anomaly scoring for transaction amounts."""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from transaction_analytics.config import Config
from transaction_analytics.models.transaction import AnalyzedTransaction, Transaction
from transaction_analytics.utils.decimal_utils import ZERO, round_half_up
from transaction_analytics.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AmountStatistics:
    """Population statistics of abs(amount) over one batch.

    Attributes:
        count: Number of records.
        mean: Mean of absolute amounts.
        std_dev: Population standard deviation (divides by count).
    """

    count: int
    mean: Decimal
    std_dev: Decimal


class AnomalyScorer:
    """Scores each record by the z-score of its absolute amount.

    The mean and standard deviation come from the batch being scored, so a
    record's score changes as the batch grows. Large amounts score
    positive, unusually small ones negative. When every absolute amount is
    equal (a single record included) the standard deviation is zero and
    every score is 0.
    """

    def __init__(self, config: Config | None = None):
        """Initialize anomaly scorer.

        Args:
            config: Application configuration with analytics settings.
        """
        self.config = config or Config()
        self.analytics_config = self.config.analytics

    def statistics(self, transactions: Sequence[Transaction]) -> AmountStatistics | None:
        """Compute population mean and standard deviation of abs(amount).

        Args:
            transactions: The whole batch.

        Returns:
            Statistics, or None for an empty batch.
        """
        if not transactions:
            return None

        amounts = [abs(txn.amount) for txn in transactions]
        count = Decimal(len(amounts))
        mean = sum(amounts, ZERO) / count
        variance = sum(((a - mean) ** 2 for a in amounts), ZERO) / count
        std_dev = variance.sqrt()

        logger.debug(f"Amount statistics: n={len(amounts)}, mean={mean}, std_dev={std_dev}")
        return AmountStatistics(count=len(amounts), mean=mean, std_dev=std_dev)

    def scores(self, transactions: Sequence[Transaction]) -> list[float]:
        """Compute the anomaly score of every record.

        Scores are rounded half away from zero to the configured number of
        decimal places.

        Args:
            transactions: The whole batch.

        Returns:
            One score per record, in batch order.
        """
        stats = self.statistics(transactions)
        if stats is None:
            return []

        places = self.analytics_config.score_decimal_places
        if stats.std_dev == 0:
            logger.info("All amounts have equal magnitude; anomaly scores are 0")
            return [0.0] * len(transactions)

        results = [
            float(round_half_up((abs(txn.amount) - stats.mean) / stats.std_dev, places))
            for txn in transactions
        ]

        suspicious = sum(1 for s in results if s > self.analytics_config.suspicious_threshold)
        logger.info(f"Scored {len(results)} transactions, {suspicious} above suspicious threshold")
        return results

    def score_anomalies(
        self, transactions: Sequence[Transaction]
    ) -> list[AnalyzedTransaction]:
        """Return the batch with ``anomaly_score`` set on every record.

        Args:
            transactions: The whole batch.

        Returns:
            New records in the same order; inputs are not modified.
        """
        scores = self.scores(transactions)
        return [
            AnalyzedTransaction.from_transaction(txn, anomaly_score=score)
            for txn, score in zip(transactions, scores)
        ]


def score_anomalies(
    transactions: Sequence[Transaction],
    config: Config | None = None,
) -> list[AnalyzedTransaction]:
    """Convenience function to score anomalies.

    Args:
        transactions: The whole batch.
        config: Application configuration.

    Returns:
        The batch with anomaly scores set.
    """
    return AnomalyScorer(config).score_anomalies(list(transactions))
