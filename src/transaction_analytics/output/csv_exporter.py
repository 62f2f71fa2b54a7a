"""CSV exporter for analyzed transaction batches."""

import csv
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import Optional

from transaction_analytics.config import Config
from transaction_analytics.models.transaction import Transaction
from transaction_analytics.utils.logging_config import get_logger
from transaction_analytics.utils.sanitize import neutralize_formula

logger = get_logger(__name__)

CSV_HEADERS = ["Date", "Description", "Amount", "Category", "Notes"]


class CSVExporter:
    """Exports transactions in the statement CSV layout.

    Columns: ``Date, Description, Amount, Category, Notes``. Every field is
    quoted and embedded double quotes are doubled, so descriptions and notes
    containing commas, quotes or newlines survive a round trip. Dates and
    amounts are written exactly as stored, so an export reads back as the
    same records. Formula-like text is only prefixed when
    ``sanitize_formulas`` is enabled. Records are written in the order
    given; callers sort for display beforehand.
    """

    def __init__(self, config: Optional[Config] = None):
        """Initialize CSV exporter.

        Args:
            config: Application configuration.
        """
        self.config = config or Config()
        self.output_config = self.config.output

    def default_filename(self, today: Optional[date] = None) -> str:
        """Return ``<prefix>_YYYY-MM-DD.csv`` for the given day (default today)."""
        today = today or date.today()
        return f"{self.output_config.csv_filename_prefix}_{today.isoformat()}.csv"

    def export(self, output_path: Path, transactions: Sequence[Transaction]) -> Path:
        """Write transactions to a CSV file.

        Args:
            output_path: Destination file, or a directory to receive a file
                with the default name.
            transactions: Records to write (analyzed or raw).

        Returns:
            Path of the written file.
        """
        if output_path.is_dir():
            output_path = output_path / self.default_filename()
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n")
            writer.writerow(CSV_HEADERS)
            for txn in transactions:
                writer.writerow(self._row(txn))

        logger.info(f"Exported {len(transactions)} transactions to {output_path}")
        return output_path

    def _row(self, txn: Transaction) -> list[str]:
        return [
            txn.date,
            self._text(txn.description),
            str(txn.amount),
            self._text(txn.category),
            self._text(txn.notes),
        ]

    def _text(self, value: str) -> str:
        if self.output_config.sanitize_formulas:
            return neutralize_formula(value)
        return value
