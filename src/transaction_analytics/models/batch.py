"""Caller-owned, versioned transaction batch."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from transaction_analytics.models.transaction import Transaction


@dataclass(frozen=True)
class TransactionBatch:
    """An immutable snapshot of the records collected in one session.

    Each ``extend`` returns a new batch with the version bumped; the old
    snapshot stays valid, so an analysis running against it is never
    affected by records appended later. The analytics functions accept a
    batch anywhere they accept a sequence of transactions.

    Attributes:
        transactions: Records in arrival order.
        version: Number of extensions applied since the empty batch.
    """

    transactions: tuple[Transaction, ...] = ()
    version: int = 0

    @classmethod
    def empty(cls) -> "TransactionBatch":
        """Start a new session."""
        return cls()

    def extend(
        self, records: Iterable[Transaction | Mapping[str, object]]
    ) -> "TransactionBatch":
        """Return a new batch with ``records`` appended in order.

        Mappings are converted with ``Transaction.from_dict``; analyzed
        records are reduced to their raw fields.

        Args:
            records: Newly extracted records.

        Returns:
            The next version of the batch.

        Raises:
            InvalidTransactionError: If a mapping is not a valid record. The
                current batch is left untouched.
        """
        offset = len(self.transactions)
        appended: list[Transaction] = []
        for i, record in enumerate(records):
            if isinstance(record, Transaction):
                appended.append(record.raw())
            else:
                appended.append(Transaction.from_dict(record, index=offset + i))
        return TransactionBatch(
            transactions=self.transactions + tuple(appended),
            version=self.version + 1,
        )

    def __len__(self) -> int:
        return len(self.transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.transactions)

    def __getitem__(self, index: int) -> Transaction:
        return self.transactions[index]
