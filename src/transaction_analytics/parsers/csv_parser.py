"""Parser for CSV files in the export layout."""

import csv
from collections.abc import Mapping
from pathlib import Path

from transaction_analytics.models.transaction import InvalidTransactionError, Transaction
from transaction_analytics.parsers.base import BaseParser, ParseError
from transaction_analytics.utils.decimal_utils import parse_amount

REQUIRED_COLUMNS = ("date", "description", "amount")


class CSVParser(BaseParser):
    """Reads records from a CSV with a header row.

    Header names are matched case-insensitively; the export layout
    ``Date, Description, Amount, Category, Notes`` round-trips. Amounts may
    carry currency symbols, thousands separators or parentheses.
    """

    @property
    def supported_extensions(self) -> list[str]:
        return [".csv"]

    def read_records(self, file_path: Path) -> list[Mapping[str, object]]:
        # utf-8-sig drops the BOM that spreadsheet exports often prepend
        with open(file_path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                return []

            columns = {name.strip().lower() for name in reader.fieldnames if name}
            missing = [c for c in REQUIRED_COLUMNS if c not in columns]
            if missing:
                raise ParseError(
                    f"{file_path.name}: missing column(s): {', '.join(missing)}",
                    file_path,
                )

            return [
                {k.strip().lower(): v for k, v in row.items() if k}
                for row in reader
                if any((v or "").strip() for v in row.values() if isinstance(v, str))
            ]

    def _to_transaction(self, record: Mapping[str, object], index: int) -> Transaction:
        values = dict(record)
        raw_amount = values.get("amount")
        if isinstance(raw_amount, str) and raw_amount.strip():
            try:
                values["amount"] = parse_amount(raw_amount)
            except ValueError as e:
                raise InvalidTransactionError(str(e), index=index, field_name="amount") from e
        return super()._to_transaction(values, index)
