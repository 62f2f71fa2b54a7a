"""Summary data models built from an analyzed batch."""

from dataclasses import dataclass, field
from decimal import Decimal

from transaction_analytics.models.transaction import AnalyzedTransaction


@dataclass(frozen=True)
class CategoryTotal:
    """Total expense for one category (display name, capitalized)."""

    name: str
    amount: Decimal

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "value": float(self.amount)}


@dataclass(frozen=True)
class SpikePoint:
    """Total absolute spend recorded under one date string."""

    date: str
    amount: Decimal

    def to_dict(self) -> dict[str, object]:
        return {"date": self.date, "amount": float(self.amount)}


@dataclass(frozen=True)
class AnomalyPoint:
    """A record whose anomaly score crossed the series threshold.

    ``index`` is the record's position in the analyzed batch that was
    summarized, not in any re-sorted view of it.
    """

    index: int
    score: float
    description: str

    def to_dict(self) -> dict[str, object]:
        return {"index": self.index, "score": self.score, "desc": self.description}


@dataclass
class Summary:
    """Aggregations over one analyzed batch.

    Entirely derived: rebuild it from the batch whenever the batch changes.

    Attributes:
        total_records: Number of records in the batch.
        total_income: Sum of positive amounts.
        total_spending: Sum of abs() of negative amounts.
        duplicates: Number of records flagged as duplicates.
        suspicious: Number of records with an anomaly score above the
            suspicious threshold.
        highest: Record with the largest signed amount (first on ties).
        lowest: Record with the smallest signed amount (first on ties).
        spikes: Per-date expense totals in chronological order.
        anomalies: Records above the anomaly series threshold, batch order.
    """

    total_records: int
    total_income: Decimal
    total_spending: Decimal
    duplicates: int
    suspicious: int
    highest: AnalyzedTransaction
    lowest: AnalyzedTransaction
    spikes: list[SpikePoint] = field(default_factory=list)
    anomalies: list[AnomalyPoint] = field(default_factory=list)

    @property
    def net(self) -> Decimal:
        """Total income minus total spending."""
        return self.total_income - self.total_spending

    def to_dict(self) -> dict[str, object]:
        """Return the summary with camelCase keys for JSON output."""
        return {
            "totalRecords": self.total_records,
            "totalSpending": float(self.total_spending),
            "totalIncome": float(self.total_income),
            "duplicates": self.duplicates,
            "suspicious": self.suspicious,
            "highest": self.highest.to_dict(),
            "lowest": self.lowest.to_dict(),
            "spikesData": [point.to_dict() for point in self.spikes],
            "anomalyData": [point.to_dict() for point in self.anomalies],
        }
