"""Exact-fingerprint duplicate detection."""

from collections import Counter
from collections.abc import Sequence

from transaction_analytics.config import Config
from transaction_analytics.models.transaction import AnalyzedTransaction, Transaction
from transaction_analytics.utils.logging_config import get_logger

logger = get_logger(__name__)


class Deduplicator:
    """Flags records whose fingerprint appears more than once in a batch.

    The fingerprint is ``(date, description, amount)`` compared exactly:
    - description is not case-folded or trimmed, so ``"Coffee"`` and
      ``"coffee"`` on the same day for the same amount are not duplicates
    - every member of a repeated fingerprint is flagged, including the
      first occurrence, however far apart the copies are in the batch
    - three or more copies are flagged the same way as two

    Duplicates are flagged, never removed.
    """

    def __init__(self, config: Config | None = None):
        """Initialize deduplicator.

        Args:
            config: Application configuration.
        """
        self.config = config or Config()

    def duplicate_flags(self, transactions: Sequence[Transaction]) -> list[bool]:
        """Compute the duplicate flag of every record.

        Args:
            transactions: The whole batch.

        Returns:
            One flag per record, in batch order.
        """
        counts = Counter(txn.fingerprint for txn in transactions)
        flags = [counts[txn.fingerprint] > 1 for txn in transactions]

        repeated = sum(1 for count in counts.values() if count > 1)
        logger.info(
            f"Found {sum(flags)} duplicate transactions in {repeated} repeated fingerprints"
        )
        return flags

    def tag_duplicates(
        self, transactions: Sequence[Transaction]
    ) -> list[AnalyzedTransaction]:
        """Return the batch with ``duplicate_flag`` set on every record.

        Args:
            transactions: The whole batch.

        Returns:
            New records in the same order; inputs are not modified.
        """
        flags = self.duplicate_flags(transactions)
        return [
            AnalyzedTransaction.from_transaction(txn, duplicate_flag=flag)
            for txn, flag in zip(transactions, flags)
        ]


def tag_duplicates(
    transactions: Sequence[Transaction],
    config: Config | None = None,
) -> list[AnalyzedTransaction]:
    """Convenience function to flag duplicates.

    Args:
        transactions: The whole batch.
        config: Application configuration.

    Returns:
        The batch with duplicate flags set.
    """
    return Deduplicator(config).tag_duplicates(list(transactions))
