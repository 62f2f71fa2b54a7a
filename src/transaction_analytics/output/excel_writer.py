"""Excel workbook writer for analyzed transaction batches."""

from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from transaction_analytics.config import Config
from transaction_analytics.models.report import CategoryTotal, Summary
from transaction_analytics.models.transaction import AnalyzedTransaction
from transaction_analytics.utils.date_utils import parse_date
from transaction_analytics.utils.logging_config import get_logger
from transaction_analytics.utils.sanitize import neutralize_formula

logger = get_logger(__name__)


class ExcelWriter:
    """Writes an analyzed batch and its summary to a multi-sheet workbook.

    Generates sheets:
    - Transactions (with analytics columns; duplicate rows orange,
      suspicious rows red)
    - Summary
    - Category Spending
    - Daily Spending
    - Anomalies
    """

    SHEET_TRANSACTIONS = "Transactions"
    SHEET_SUMMARY = "Summary"
    SHEET_CATEGORIES = "Category Spending"
    SHEET_DAILY = "Daily Spending"
    SHEET_ANOMALIES = "Anomalies"

    def __init__(self, config: Optional[Config] = None):
        """Initialize Excel writer.

        Args:
            config: Application configuration.
        """
        self.config = config or Config()
        self.output_config = self.config.output
        self.analytics_config = self.config.analytics

        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(
            start_color="141414", end_color="141414", fill_type="solid"
        )
        self.duplicate_fill = PatternFill(
            start_color="FFEDD5", end_color="FFEDD5", fill_type="solid"
        )  # Orange
        self.suspicious_fill = PatternFill(
            start_color="FEE2E2", end_color="FEE2E2", fill_type="solid"
        )  # Red
        self.centered = Alignment(horizontal="center")

    def write(
        self,
        output_path: Path,
        transactions: Sequence[AnalyzedTransaction],
        summary: Optional[Summary],
        categories: Sequence[CategoryTotal],
    ) -> Path:
        """Write all data to an Excel workbook.

        Args:
            output_path: Path for output file.
            transactions: Analyzed records, in the order to display them.
            summary: Summary of the same records (None when empty).
            categories: Category totals of the same records.

        Returns:
            Path of the written workbook.
        """
        logger.info(f"Writing Excel workbook to {output_path}")

        wb = Workbook()
        if wb.active:
            wb.remove(wb.active)

        self._create_transactions_sheet(wb, transactions)
        self._create_summary_sheet(wb, summary)
        self._create_category_sheet(wb, categories)
        self._create_daily_sheet(wb, summary)
        self._create_anomalies_sheet(wb, summary)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        logger.info(f"Excel workbook saved: {output_path}")
        return output_path

    def _write_headers(self, ws: Worksheet, headers: list[str], row: int = 1) -> None:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.centered

    def _set_widths(self, ws: Worksheet, widths: list[int]) -> None:
        for i, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(i)].width = width

    def _create_transactions_sheet(
        self, wb: Workbook, transactions: Sequence[AnalyzedTransaction]
    ) -> None:
        """Create the Transactions sheet.

        Args:
            wb: Workbook to add sheet to.
            transactions: Analyzed records.
        """
        ws = wb.create_sheet(self.SHEET_TRANSACTIONS)
        self._write_headers(ws, [
            "Date", "Description", "Amount", "Category", "Notes",
            "Duplicate", "Anomaly Score", "Recurring",
        ])

        for row, txn in enumerate(transactions, 2):
            ws.cell(row=row, column=1, value=self._date_value(txn.date)).number_format = "yyyy-mm-dd"
            ws.cell(row=row, column=2, value=self._text(txn.description))
            amount_cell = ws.cell(row=row, column=3, value=float(txn.amount))
            amount_cell.number_format = self._money_format()
            ws.cell(row=row, column=4, value=self._text(txn.category))
            ws.cell(row=row, column=5, value=self._text(txn.notes))
            ws.cell(row=row, column=6, value="Yes" if txn.duplicate_flag else "")
            score_cell = ws.cell(row=row, column=7, value=txn.anomaly_score)
            score_cell.number_format = "0.00"
            ws.cell(row=row, column=8, value="Yes" if txn.is_recurring else "")

            # Suspicious wins over duplicate when both apply
            fill = None
            if txn.anomaly_score > self.analytics_config.suspicious_threshold:
                fill = self.suspicious_fill
            elif txn.duplicate_flag:
                fill = self.duplicate_fill
            if fill is not None:
                for col in range(1, 9):
                    ws.cell(row=row, column=col).fill = fill

        self._set_widths(ws, [12, 40, 14, 16, 30, 11, 14, 11])
        ws.freeze_panes = "A2"
        if transactions:
            ws.auto_filter.ref = f"A1:H{len(transactions) + 1}"

    def _create_summary_sheet(self, wb: Workbook, summary: Optional[Summary]) -> None:
        """Create the Summary sheet.

        Args:
            wb: Workbook to add sheet to.
            summary: Batch summary, or None for an empty batch.
        """
        ws = wb.create_sheet(self.SHEET_SUMMARY)
        ws.cell(row=1, column=1, value="ANALYTICS SUMMARY").font = Font(bold=True, size=14)

        if summary is None:
            ws.cell(row=3, column=1, value="No data")
            return

        rows: list[tuple[str, object, bool]] = [
            ("Total Records", summary.total_records, False),
            ("Total Income", float(summary.total_income), True),
            ("Total Spending", float(summary.total_spending), True),
            ("Net", float(summary.net), True),
            ("Duplicates", summary.duplicates, False),
            ("Suspicious", summary.suspicious, False),
            ("Highest", float(summary.highest.amount), True),
            ("Highest Description", self._text(summary.highest.description), False),
            ("Lowest", float(summary.lowest.amount), True),
            ("Lowest Description", self._text(summary.lowest.description), False),
        ]
        for row, (label, value, is_money) in enumerate(rows, 3):
            ws.cell(row=row, column=1, value=label).font = Font(bold=True)
            cell = ws.cell(row=row, column=2, value=value)
            if is_money:
                cell.number_format = self._money_format()

        self._set_widths(ws, [24, 40])

    def _create_category_sheet(
        self, wb: Workbook, categories: Sequence[CategoryTotal]
    ) -> None:
        """Create the Category Spending sheet."""
        ws = wb.create_sheet(self.SHEET_CATEGORIES)
        self._write_headers(ws, ["Category", "Total"])

        for row, total in enumerate(categories, 2):
            ws.cell(row=row, column=1, value=self._text(total.name))
            ws.cell(row=row, column=2, value=float(total.amount)).number_format = self._money_format()

        self._set_widths(ws, [24, 16])

    def _create_daily_sheet(self, wb: Workbook, summary: Optional[Summary]) -> None:
        """Create the Daily Spending sheet (chronological)."""
        ws = wb.create_sheet(self.SHEET_DAILY)
        self._write_headers(ws, ["Date", "Spending"])

        spikes = summary.spikes if summary else []
        for row, point in enumerate(spikes, 2):
            ws.cell(row=row, column=1, value=point.date)
            ws.cell(row=row, column=2, value=float(point.amount)).number_format = self._money_format()

        self._set_widths(ws, [14, 16])
        ws.freeze_panes = "A2"

    def _create_anomalies_sheet(self, wb: Workbook, summary: Optional[Summary]) -> None:
        """Create the Anomalies sheet.

        The index column refers to the row order of the Transactions sheet
        (0-based), since both are written from the same sequence.
        """
        ws = wb.create_sheet(self.SHEET_ANOMALIES)
        self._write_headers(ws, ["Index", "Score", "Description"])

        anomalies = summary.anomalies if summary else []
        for row, point in enumerate(anomalies, 2):
            ws.cell(row=row, column=1, value=point.index)
            score_cell = ws.cell(row=row, column=2, value=point.score)
            score_cell.number_format = "0.00"
            if point.score > self.analytics_config.suspicious_threshold:
                score_cell.fill = self.suspicious_fill
            ws.cell(row=row, column=3, value=self._text(point.description))

        self._set_widths(ws, [8, 10, 40])

    def _date_value(self, raw_date: str) -> date | str:
        """Real date cell when the text parses, otherwise the text as written."""
        try:
            return parse_date(raw_date)
        except ValueError:
            return raw_date

    def _text(self, value: str) -> str:
        # openpyxl stores any string starting with "=" as a formula
        return neutralize_formula(value)

    def _money_format(self) -> str:
        """Get number format for money values.

        Returns:
            Excel number format string.
        """
        symbol = self.output_config.currency_symbol
        return f'{symbol}#,##0.00_);[Red]({symbol}#,##0.00)'
