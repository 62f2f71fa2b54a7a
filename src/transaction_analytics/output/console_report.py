"""Rich console rendering of an analyzed batch."""

from collections.abc import Sequence
from decimal import Decimal
from typing import Optional, TypeVar

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from transaction_analytics.config import Config
from transaction_analytics.models.report import CategoryTotal, Summary
from transaction_analytics.models.transaction import AnalyzedTransaction, Transaction
from transaction_analytics.utils.date_utils import date_sort_key, display_date
from transaction_analytics.utils.decimal_utils import format_currency


T = TypeVar("T", bound=Transaction)


def display_order(transactions: Sequence[T]) -> list[T]:
    """Sort records newest first for display.

    Records on the same calendar day keep batch order. Records whose date
    does not parse come last, also in batch order.
    """
    def newest_first(txn: T) -> tuple[int, int]:
        unparsed, ordinal, _ = date_sort_key(txn.date)
        return (unparsed, -ordinal)

    return sorted(transactions, key=newest_first)


class ConsoleReport:
    """Prints transactions, the summary and the breakdown tables."""

    def __init__(self, console: Console, config: Optional[Config] = None):
        """Initialize console report.

        Args:
            console: Rich console to print to.
            config: Application configuration.
        """
        self.console = console
        self.config = config or Config()
        self.output_config = self.config.output
        self.analytics_config = self.config.analytics

    def _money(self, amount: Decimal) -> str:
        return format_currency(
            amount,
            decimal_places=self.output_config.decimal_places,
            currency_symbol=self.output_config.currency_symbol,
        )

    def print_transactions(
        self, transactions: Sequence[AnalyzedTransaction], limit: Optional[int] = None
    ) -> None:
        """Print the transaction table with analytics badges."""
        table = Table(title=f"Transactions ({len(transactions)} items)")
        table.add_column("Date", style="cyan", no_wrap=True)
        table.add_column("Description")
        table.add_column("Amount", justify="right")
        table.add_column("Category")
        table.add_column("Analytics")

        shown = transactions if limit is None else transactions[:limit]
        for txn in shown:
            badges = []
            if txn.duplicate_flag:
                badges.append("[bold orange3]DUPLICATE[/bold orange3]")
            if txn.anomaly_score > self.analytics_config.anomaly_series_threshold:
                color = (
                    "red"
                    if txn.anomaly_score > self.analytics_config.suspicious_threshold
                    else "yellow"
                )
                badges.append(f"[{color}]Score: {txn.anomaly_score}[/{color}]")
            if txn.is_recurring:
                badges.append("[blue]RECURRING[/blue]")

            description = escape(txn.description)
            if txn.notes:
                description += f"\n[dim italic]{escape(txn.notes)}[/dim italic]"

            amount_style = "red" if txn.amount < 0 else "green"
            sign = "+" if txn.amount > 0 else ""
            table.add_row(
                display_date(txn.date, self.output_config.date_format),
                description,
                f"[{amount_style}]{sign}{self._money(txn.amount)}[/{amount_style}]",
                escape(txn.category),
                " ".join(badges),
            )

        self.console.print(table)
        if limit is not None and len(transactions) > limit:
            self.console.print(f"[dim]... and {len(transactions) - limit} more[/dim]")

    def print_summary(self, summary: Optional[Summary]) -> None:
        """Print the summary figures."""
        if summary is None:
            self.console.print("[yellow]No transactions to summarize.[/yellow]")
            return

        self.console.print("\n[bold]Analytics Summary[/bold]")
        self.console.print(f"  Total records: {summary.total_records}")
        self.console.print(f"  Total income: [green]{self._money(summary.total_income)}[/green]")
        self.console.print(f"  Total spending: [red]{self._money(summary.total_spending)}[/red]")
        self.console.print(f"  Duplicates flagged: {summary.duplicates}")
        self.console.print(f"  Suspicious (score > {self.analytics_config.suspicious_threshold:g}): {summary.suspicious}")
        self.console.print(
            f"  Max: {self._money(summary.highest.amount)} ({escape(summary.highest.description)})"
        )
        self.console.print(
            f"  Min: {self._money(summary.lowest.amount)} ({escape(summary.lowest.description)})"
        )

    def print_categories(self, categories: Sequence[CategoryTotal]) -> None:
        """Print spending per category."""
        if not categories:
            return
        table = Table(title="Spending by Category")
        table.add_column("Category")
        table.add_column("Total", justify="right")
        for total in categories:
            table.add_row(escape(total.name), self._money(total.amount))
        self.console.print(table)

    def print_spikes(self, summary: Optional[Summary]) -> None:
        """Print spending per day, chronologically."""
        if summary is None or not summary.spikes:
            return
        table = Table(title="Daily Spending")
        table.add_column("Date", style="cyan")
        table.add_column("Spending", justify="right")
        for point in summary.spikes:
            table.add_row(display_date(point.date, self.output_config.date_format), self._money(point.amount))
        self.console.print(table)
