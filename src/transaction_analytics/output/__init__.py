"""Output generation for console, CSV and Excel."""

from transaction_analytics.output.console_report import ConsoleReport, display_order
from transaction_analytics.output.csv_exporter import CSVExporter
from transaction_analytics.output.excel_writer import ExcelWriter

__all__ = ["ConsoleReport", "display_order", "CSVExporter", "ExcelWriter"]
