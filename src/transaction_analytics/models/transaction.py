"""Transaction data models for extracted and analyzed records."""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from decimal import Decimal

from transaction_analytics.utils.date_utils import as_date_string
from transaction_analytics.utils.decimal_utils import to_decimal


class InvalidTransactionError(ValueError):
    """Raised when a record cannot be turned into a Transaction."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        field_name: str | None = None,
    ):
        """Initialize InvalidTransactionError.

        Args:
            message: Error message.
            index: Position of the offending record in its batch, if known.
            field_name: Name of the offending field, if known.
        """
        self.index = index
        self.field_name = field_name
        if index is not None:
            message = f"Record {index}: {message}"
        super().__init__(message)


@dataclass(frozen=True)
class Transaction:
    """A single extracted transaction. Immutable once created.

    Attributes:
        date: Date as the extractor wrote it. Kept verbatim; a ``date`` or
            ``datetime`` given in code is stored in ISO form.
        description: Free-text merchant/payee description, kept verbatim.
        amount: Signed amount (negative = expense, positive = income).
        category: Category label, passed through without validation.
        notes: Free-text notes, may be empty.
    """

    date: str
    description: str
    amount: Decimal
    category: str = ""
    notes: str = ""

    def __post_init__(self) -> None:
        try:
            amount = to_decimal(self.amount)
        except ValueError as e:
            raise InvalidTransactionError(str(e), field_name="amount") from e
        try:
            txn_date = as_date_string(self.date)
        except ValueError as e:
            raise InvalidTransactionError(str(e), field_name="date") from e
        if not isinstance(self.description, str):
            raise InvalidTransactionError(
                f"Description must be a string, got {type(self.description).__name__}",
                field_name="description",
            )

        # Frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "date", txn_date)
        object.__setattr__(self, "category", "" if self.category is None else str(self.category))
        object.__setattr__(self, "notes", "" if self.notes is None else str(self.notes))

    @property
    def fingerprint(self) -> tuple[str, str, Decimal]:
        """Exact-match duplicate key ``(date, description, amount)``.

        No normalization is applied: descriptions that differ only in case
        or surrounding whitespace produce different fingerprints, and so do
        ``"2024-01-15"`` and ``"01/15/2024"``. Amounts
        compare numerically, so ``-5`` and ``-5.00`` are the same amount.
        """
        return (self.date, self.description, self.amount)

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @classmethod
    def from_dict(cls, data: Mapping[str, object], index: int | None = None) -> "Transaction":
        """Create a Transaction from an extractor record.

        Keys are matched case-insensitively (``Date`` and ``date`` both work).

        Args:
            data: Mapping with date, description, amount, category and notes.
            index: Optional position of the record, used in error messages.

        Returns:
            The parsed Transaction.

        Raises:
            InvalidTransactionError: If a required field is missing or invalid.
        """
        if not isinstance(data, Mapping):
            raise InvalidTransactionError(
                f"Record must be a mapping, got {type(data).__name__}", index=index
            )
        record = {str(k).strip().lower(): v for k, v in data.items()}

        for required in ("date", "description", "amount"):
            if record.get(required) is None:
                raise InvalidTransactionError(
                    f"Missing required field '{required}'", index=index, field_name=required
                )

        try:
            return cls(
                date=record["date"],  # type: ignore[arg-type]
                description=record["description"],  # type: ignore[arg-type]
                amount=record["amount"],  # type: ignore[arg-type]
                category=record.get("category") or "",  # type: ignore[arg-type]
                notes=record.get("notes") or "",  # type: ignore[arg-type]
            )
        except InvalidTransactionError as e:
            raise InvalidTransactionError(
                str(e), index=index, field_name=e.field_name
            ) from e

    def to_dict(self) -> dict[str, object]:
        """Return the record in the extractor's JSON shape."""
        return {
            "date": self.date,
            "description": self.description,
            "amount": float(self.amount),
            "category": self.category,
            "notes": self.notes,
        }

    def raw(self) -> "Transaction":
        """Return the plain input fields as a Transaction."""
        return Transaction(
            date=self.date,
            description=self.description,
            amount=self.amount,
            category=self.category,
            notes=self.notes,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(date={self.date}, "
            f"description={self.description[:30]!r}, "
            f"amount={self.amount}, "
            f"category={self.category!r})"
        )


@dataclass(frozen=True, repr=False)
class AnalyzedTransaction(Transaction):
    """A Transaction plus the derived analytics fields.

    The derived fields are always computed together over a whole batch and
    are never updated one record at a time.

    Attributes:
        duplicate_flag: Another record in the batch has the same fingerprint.
        anomaly_score: Z-score of abs(amount) within the batch, 2 decimals.
        is_recurring: Another record in the batch has the same normalized
            description.
    """

    duplicate_flag: bool = False
    anomaly_score: float = 0.0
    is_recurring: bool = False

    @classmethod
    def from_transaction(cls, txn: Transaction, **derived: object) -> "AnalyzedTransaction":
        """Build from the raw fields of ``txn`` and the given derived values.

        Derived fields already present on ``txn`` are carried over unless
        overridden in ``derived``.
        """
        values = {f.name: getattr(txn, f.name) for f in fields(Transaction)}
        if isinstance(txn, AnalyzedTransaction):
            values.update(
                duplicate_flag=txn.duplicate_flag,
                anomaly_score=txn.anomaly_score,
                is_recurring=txn.is_recurring,
            )
        values.update(derived)
        return cls(**values)  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, object]:
        """Return the record with derived fields under their camelCase keys."""
        data = super().to_dict()
        data["duplicateFlag"] = self.duplicate_flag
        data["anomalyScore"] = self.anomaly_score
        data["isRecurring"] = self.is_recurring
        return data

    def __repr__(self) -> str:
        return (
            f"AnalyzedTransaction(date={self.date}, "
            f"description={self.description[:30]!r}, "
            f"amount={self.amount}, "
            f"duplicate={self.duplicate_flag}, "
            f"score={self.anomaly_score}, "
            f"recurring={self.is_recurring})"
        )
