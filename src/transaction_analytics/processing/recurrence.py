"""Recurring-payment classification by normalized description."""

import re
from collections import Counter
from collections.abc import Sequence

from transaction_analytics.config import Config
from transaction_analytics.models.transaction import AnalyzedTransaction, Transaction
from transaction_analytics.utils.logging_config import get_logger

logger = get_logger(__name__)

_DIGITS_PATTERN = re.compile(r"\d+")


def normalize_description(description: str) -> str:
    """Normalize a description into its recurrence grouping key.

    Lower-cases, removes every decimal digit and trims surrounding
    whitespace. Inner whitespace is left as is::

        >>> normalize_description("Netflix Subscription 123")
        'netflix subscription'

    Args:
        description: Raw description.

    Returns:
        The grouping key.
    """
    return _DIGITS_PATTERN.sub("", description.lower()).strip()


class RecurrenceClassifier:
    """Flags records whose normalized description occurs repeatedly.

    This is a heuristic: it does not compare amounts, dates or the spacing
    between occurrences. Two one-off purchases at the same merchant are
    reported as recurring.
    """

    def __init__(self, config: Config | None = None):
        """Initialize recurrence classifier.

        Args:
            config: Application configuration with analytics settings.
        """
        self.config = config or Config()
        self.min_occurrences = self.config.analytics.recurring_min_occurrences

    def recurring_flags(self, transactions: Sequence[Transaction]) -> list[bool]:
        """Compute the recurring flag of every record.

        Args:
            transactions: The whole batch.

        Returns:
            One flag per record, in batch order.
        """
        keys = [normalize_description(txn.description) for txn in transactions]
        counts = Counter(keys)
        flags = [counts[key] >= self.min_occurrences for key in keys]

        groups = sum(1 for count in counts.values() if count >= self.min_occurrences)
        logger.info(f"Found {sum(flags)} recurring transactions in {groups} description groups")
        return flags

    def get_recurring_groups(
        self, transactions: Sequence[Transaction]
    ) -> dict[str, list[Transaction]]:
        """Group recurring records by normalized description.

        Args:
            transactions: The whole batch.

        Returns:
            Mapping of normalized description to its records, in order of
            first appearance. Only groups that qualify as recurring.
        """
        groups: dict[str, list[Transaction]] = {}
        for txn in transactions:
            groups.setdefault(normalize_description(txn.description), []).append(txn)
        return {
            key: members
            for key, members in groups.items()
            if len(members) >= self.min_occurrences
        }

    def tag_recurring(
        self, transactions: Sequence[Transaction]
    ) -> list[AnalyzedTransaction]:
        """Return the batch with ``is_recurring`` set on every record.

        Args:
            transactions: The whole batch.

        Returns:
            New records in the same order; inputs are not modified.
        """
        flags = self.recurring_flags(transactions)
        return [
            AnalyzedTransaction.from_transaction(txn, is_recurring=flag)
            for txn, flag in zip(transactions, flags)
        ]


def tag_recurring(
    transactions: Sequence[Transaction],
    config: Config | None = None,
) -> list[AnalyzedTransaction]:
    """Convenience function to flag recurring payments.

    Args:
        transactions: The whole batch.
        config: Application configuration.

    Returns:
        The batch with recurring flags set.
    """
    return RecurrenceClassifier(config).tag_recurring(list(transactions))
