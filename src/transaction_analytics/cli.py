"""Command-line interface for the transaction analytics engine."""

import argparse
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from transaction_analytics import __version__
from transaction_analytics.config import Config, ConfigError, load_config
from transaction_analytics.models.batch import TransactionBatch
from transaction_analytics.models.transaction import AnalyzedTransaction, InvalidTransactionError
from transaction_analytics.output import ConsoleReport, CSVExporter, ExcelWriter, display_order
from transaction_analytics.parsers import FileDetector, ParseError
from transaction_analytics.processing import Analyzer, category_totals, summarize
from transaction_analytics.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

console = Console()
error_console = Console(stderr=True)
logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="transaction-analytics",
        description=(
            "Flag duplicates, score anomalies and detect recurring payments "
            "in extracted bank statement transactions"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -i statement_jan.json -i statement_feb.json
  %(prog)s -i ./extracted -o report.xlsx
  %(prog)s -i ./extracted -o ./exports/ --json
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-i", "--input",
        type=Path,
        action="append",
        default=None,
        dest="inputs",
        help="Extracted records file (.json/.csv) or directory; repeat for several",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Export path: .csv, .xlsx, or a directory for the default CSV name",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings.yaml (default: config/settings.yaml)",
    )

    parser.add_argument(
        "--config-dir",
        type=Path,
        default=Path("config"),
        help="Base config directory (default: ./config)",
    )

    parser.add_argument(
        "--suspicious-threshold",
        type=float,
        default=None,
        help="Override the anomaly score above which records count as suspicious",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print analyzed records and summary as JSON instead of tables",
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=50,
        help="Maximum number of transactions shown in the table (default: 50)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate configuration files only",
    )

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def create_progress(disable: bool = False) -> Progress:
    """Create a progress display.

    Args:
        disable: Suppress the display entirely (e.g. for JSON output).

    Returns:
        Rich Progress instance.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        console=console,
        transient=True,
        disable=disable,
    )


def validate_config(args: argparse.Namespace) -> int:
    """Validate configuration files.

    Args:
        args: Parsed command-line arguments.

    Returns:
        0 if valid, 1 if errors found.
    """
    console.print("[bold]Validating configuration...[/bold]\n")

    settings_path = args.config or (args.config_dir / "settings.yaml")
    if not settings_path.exists():
        console.print(f"[yellow]Settings file not found: {settings_path} (defaults apply)[/yellow]")
        return 0

    try:
        config = load_config(settings_path=settings_path)
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"[red]Errors:[/red]\n  - {e}")
        return 1

    console.print(f"[green]✓[/green] Settings: {settings_path}")
    console.print(f"  - suspicious threshold: {config.analytics.suspicious_threshold:g}")
    console.print(f"  - anomaly series threshold: {config.analytics.anomaly_series_threshold:g}")
    console.print(f"  - recurring after: {config.analytics.recurring_min_occurrences} occurrences")
    console.print("\n[green]Configuration is valid.[/green]")
    return 0


def collect_files(inputs: list[Path], detector: FileDetector) -> list[Path]:
    """Expand input arguments into the ordered list of files to read.

    Raises:
        FileNotFoundError: If an input path does not exist.
    """
    files: list[Path] = []
    for path in inputs:
        if not path.exists():
            raise FileNotFoundError(f"Input not found: {path}")
        files.extend(detector.discover_files(path))
    return files


def run_analysis(
    files: list[Path],
    config: Config,
    detector: Optional[FileDetector] = None,
    show_progress: bool = True,
) -> tuple[TransactionBatch, list[AnalyzedTransaction], list[str]]:
    """Read files as successive chunks and re-analyze the batch after each.

    Every chunk extends the batch and the whole batch is analyzed again,
    so earlier records are re-scored against everything seen so far. A
    file that fails to parse stops the run; chunks read before it are kept.

    Args:
        files: Input files, one chunk each.
        config: Application configuration.
        detector: File detector (default: JSON and CSV parsers).
        show_progress: Whether to show a progress bar.

    Returns:
        Tuple of (final batch, analyzed records in batch order, errors).
    """
    detector = detector or FileDetector()
    analyzer = Analyzer(config)
    batch = TransactionBatch.empty()
    analyzed: list[AnalyzedTransaction] = []
    errors: list[str] = []

    with create_progress(disable=not show_progress) as progress:
        task = progress.add_task("Analyzing...", total=len(files))
        for file_path in files:
            progress.update(task, description=f"Processing {file_path.name}...")
            try:
                chunk = detector.parse_file(file_path)
            except ParseError as e:
                errors.append(f"Error processing file {file_path.name}: {e}")
                logger.warning(f"Stopping after parse failure: {e}")
                break

            batch = batch.extend(chunk)
            analyzed = analyzer.analyze(batch)
            logger.info(
                f"Batch v{batch.version}: {len(batch)} records after {file_path.name}"
            )
            progress.update(task, advance=1)

    return batch, analyzed, errors


def export_results(
    output: Path,
    records: list[AnalyzedTransaction],
    config: Config,
) -> Path:
    """Write the display-ordered records to CSV or Excel by extension."""
    if output.suffix.lower() == ".xlsx":
        writer = ExcelWriter(config)
        return writer.write(
            output, records, summarize(records, config), category_totals(records)
        )
    return CSVExporter(config).export(output, records)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(level=get_log_level(args.verbose), console_output=args.verbose > 0)

    if args.validate_only:
        return validate_config(args)

    if not args.inputs:
        console.print("[red]Error: at least one --input is required[/red]")
        parser.print_usage()
        return 1

    try:
        config = load_config(settings_path=args.config, config_dir=args.config_dir)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("Run with --validate-only to check configuration files.")
        return 1

    if config.logging.file:
        setup_logging(
            level=get_log_level(args.verbose),
            log_file=config.logging.file,
            console_output=args.verbose > 0,
        )

    if args.suspicious_threshold is not None:
        config.analytics.suspicious_threshold = args.suspicious_threshold

    detector = FileDetector()
    try:
        files = collect_files(args.inputs, detector)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    if not files:
        console.print("[yellow]No supported files (.json, .csv) found.[/yellow]")
        return 0

    if not args.json:
        console.print(f"[bold]Transaction Analytics v{__version__}[/bold]\n")
        console.print(f"Found {len(files)} file(s) to process")

    try:
        batch, analyzed, errors = run_analysis(
            files, config, detector, show_progress=not args.json
        )
    except InvalidTransactionError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    # Summary indices refer to this display order
    records = display_order(analyzed)
    summary = summarize(records, config)
    categories = category_totals(records)

    if args.json:
        console.print_json(data={
            "transactions": [txn.to_dict() for txn in records],
            "summary": summary.to_dict() if summary else None,
            "categories": [total.to_dict() for total in categories],
            "errors": errors,
        })
    else:
        report = ConsoleReport(console, config)
        if records:
            report.print_transactions(records, limit=args.limit)
        report.print_summary(summary)
        report.print_categories(categories)
        report.print_spikes(summary)

    if args.output is not None and records:
        written = export_results(args.output, records, config)
        if not args.json:
            console.print(f"\n[green]Output written to {written}[/green]")

    for error in errors:
        error_console.print(f"[red]{error}[/red]")

    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
