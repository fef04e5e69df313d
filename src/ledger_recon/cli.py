"""
Command-line interface for the bank statement / general ledger reconciliation tool.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Optional
import json
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .analytics.dashboard import (
    amount_breakdown,
    count_breakdown,
    top_outliers,
    variance_check,
)
from .classification.service import ReconciliationService
from .config import AppConfig, ProcessingMode, generate_default_config, load_config
from .ingestion.documents import DocumentPart
from .ingestion.sanitizer import sanitize
from .models.transaction import (
    DocumentExportConfig,
    ReconciliationResult,
    ReviewCollection,
    ReviewStatus,
)
from .reports.csv_generator import CsvReportGenerator
from .reports.excel_generator import ExcelReportGenerator
from .reports.formatting import format_currency
from .reports.pdf_generator import PdfReportGenerator
from .review.filters import ALL_STATUSES
from .review.session import ReconciliationSession, SessionSettings
from .review.state import ReviewState
from .samples import write_samples
from .utils.exceptions import ReconciliationError
from .utils.logging_config import setup_logging

console = Console()

EXPORT_FORMATS = ("csv", "pdf", "xlsx")
STATUS_CHOICES = [ALL_STATUSES] + [s.value for s in ReviewStatus]


@click.group()
@click.version_option(version=__version__)
def main():
    """Bank statement to general ledger reconciliation tool."""
    pass


@main.command()
@click.argument("bank_statement", type=click.Path(exists=True, path_type=Path))
@click.argument("ledger", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--as-at",
    "as_at_date",
    default=lambda: date.today().isoformat(),
    show_default="today",
    help="Reconciliation cutoff date (YYYY-MM-DD)",
)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in ProcessingMode]),
    default=ProcessingMode.FAST.value,
    show_default=True,
    help="fast = quicker, lower fidelity; pro = slower, higher fidelity",
)
@click.option("--company", default="", help="Company name used to label exports")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory for export files",
)
@click.option(
    "-f",
    "--format",
    "formats",
    type=click.Choice(EXPORT_FORMATS),
    multiple=True,
    default=("csv", "pdf"),
    show_default=True,
    help="Export format (repeatable)",
)
@click.option(
    "--save-result",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also save the sanitized result as JSON",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def reconcile(
    bank_statement: Path,
    ledger: Path,
    as_at_date: str,
    mode: str,
    company: str,
    config: Optional[Path],
    output_dir: Path,
    formats: tuple[str, ...],
    save_result: Optional[Path],
    verbose: bool,
):
    """
    Reconcile a bank statement with a general ledger.

    BANK_STATEMENT: Path to the bank statement (PDF or CSV)
    LEDGER: Path to the general ledger (Excel, CSV or PDF)
    """
    # The SDK import is slow and only this command needs it
    from .classification.gemini import GeminiClassifier

    app_config = _load(config, verbose)

    try:
        bank_part = DocumentPart.from_path(bank_statement)
        ledger_part = DocumentPart.from_path(ledger)

        service = ReconciliationService(GeminiClassifier(app_config.classification))
        session = ReconciliationSession(
            SessionSettings(as_at_date=as_at_date, mode=ProcessingMode(mode), company_name=company)
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Reconciling documents...", total=None)
            result = session.run(service, bank_part, ledger_part)
            progress.update(task, completed=True)

        _display_dashboard(result, company)

        if save_result:
            save_result.parent.mkdir(parents=True, exist_ok=True)
            save_result.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
            console.print(f"[green]Result saved: {escape(str(save_result))}[/green]")

        _write_exports(app_config, result, session.review, company, output_dir, formats)

    except ReconciliationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command()
@click.argument("result_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--company", default="", help="Company name used to label exports")
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory for export files",
)
@click.option(
    "-f",
    "--format",
    "formats",
    type=click.Choice(EXPORT_FORMATS),
    multiple=True,
    help="Export format (repeatable); nothing is written when omitted",
)
@click.option("--search", default="", help="Free-text filter for the item listings")
@click.option(
    "--status",
    "status_filter",
    type=click.Choice(STATUS_CHOICES),
    default=ALL_STATUSES,
    help="Status filter for the unmatched listings",
)
@click.option("--bank-items", default="", help="Comma-separated unmatched bank indices to select")
@click.option(
    "--ledger-items", default="", help="Comma-separated unmatched ledger indices to select"
)
@click.option(
    "--mark",
    type=click.Choice([s.value for s in ReviewStatus]),
    help="Apply this status to the selected items before exporting",
)
@click.option("--only-selected", is_flag=True, help="Restrict PDF unmatched sections to selection")
@click.option("--no-summary", is_flag=True, help="Omit the executive summary from the PDF")
@click.option("--no-matches", is_flag=True, help="Omit verified matches from the PDF")
@click.option("--no-bank", is_flag=True, help="Omit unmatched bank items from the PDF")
@click.option("--no-ledger", is_flag=True, help="Omit unmatched ledger entries from the PDF")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def report(
    result_file: Path,
    company: str,
    config: Optional[Path],
    output_dir: Path,
    formats: tuple[str, ...],
    search: str,
    status_filter: str,
    bank_items: str,
    ledger_items: str,
    mark: Optional[str],
    only_selected: bool,
    no_summary: bool,
    no_matches: bool,
    no_bank: bool,
    no_ledger: bool,
    verbose: bool,
):
    """
    Review a saved classification payload and export reports offline.

    RESULT_FILE: JSON output of the classification service (or --save-result)
    """
    app_config = _load(config, verbose)

    try:
        raw = json.loads(result_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        console.print(f"[red]Error reading {escape(str(result_file))}: {escape(str(e))}[/red]")
        sys.exit(1)

    result = sanitize(raw)
    review = ReviewState(result)

    try:
        for collection, indices_text in (
            (ReviewCollection.BANK, bank_items),
            (ReviewCollection.LEDGER, ledger_items),
        ):
            for index in _parse_indices(indices_text):
                review.toggle_selection(collection, index)
    except click.BadParameter as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        sys.exit(2)

    # Snapshot before bulk status, which ends the selection
    selection = review.snapshot()
    if mark:
        for collection in ReviewCollection:
            review.apply_status_to_selection(collection, ReviewStatus(mark))

    _display_dashboard(result, company)
    _display_items(review, search, status_filter)

    pdf_config = DocumentExportConfig(
        include_summary=not no_summary,
        include_matches=not no_matches,
        include_unmatched_bank=not no_bank,
        include_unmatched_ledger=not no_ledger,
        only_selected_items=only_selected,
    )

    try:
        _write_exports(
            app_config,
            result,
            review,
            company,
            output_dir,
            formats,
            pdf_config=pdf_config,
            selection=selection,
        )
    except ReconciliationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


@main.command("sample-data")
@click.option(
    "-o", "--output-dir", type=click.Path(file_okay=False, path_type=Path), default=Path("samples")
)
def sample_data(output_dir: Path):
    """Write a sample bank statement, general ledger and classification payload."""
    for path in write_samples(output_dir):
        console.print(f"[green]Written: {escape(str(path))}[/green]")


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {escape(str(output))}[/green]")


def _load(config_path: Optional[Path], verbose: bool) -> AppConfig:
    """Load configuration and set up logging."""
    try:
        app_config = load_config(config_path)
    except ReconciliationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    level = logging.DEBUG if verbose else getattr(logging, app_config.logging.level, logging.INFO)
    setup_logging(level, log_format=app_config.logging.format)
    return app_config


def _parse_indices(text: str) -> list[int]:
    """Parse ``"0,2, 5"`` into ``[0, 2, 5]``."""
    indices = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit():
            raise click.BadParameter(f"Not an item index: {part!r}")
        indices.append(int(part))
    return indices


def _write_exports(
    app_config: AppConfig,
    result: ReconciliationResult,
    review: Optional[ReviewState],
    company: str,
    output_dir: Path,
    formats: tuple[str, ...],
    pdf_config: Optional[DocumentExportConfig] = None,
    selection=None,
) -> None:
    """Write each requested export format."""
    generated_at = datetime.now()
    review = review or ReviewState(result)
    selection = selection or review.snapshot()

    for fmt in dict.fromkeys(formats):
        if fmt == "csv":
            path = CsvReportGenerator(app_config).write(result, output_dir, company, generated_at)
        elif fmt == "pdf":
            path = PdfReportGenerator(app_config).write(
                result,
                output_dir,
                company,
                pdf_config,
                selection.bank_selection,
                selection.ledger_selection,
                generated_at,
            )
        else:
            path = ExcelReportGenerator(app_config).write(
                result, output_dir, company, review.snapshot(), generated_at
            )
        console.print(f"[green]Report generated: {escape(str(path))}[/green]")


def _display_dashboard(result: ReconciliationResult, company: str) -> None:
    """Display reconciliation metrics in the console."""
    summary = result.summary
    title = "Reconciliation Summary"
    if company:
        title += f" - {escape(company)}"

    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Amount", justify="right")

    for counts, amounts in zip(count_breakdown(result), amount_breakdown(result)):
        table.add_row(counts.label, str(counts.value), format_currency(amounts.value))

    as_at = escape(str(summary.as_at_date or "-"))
    console.print(f"Reconciliation period ending: [bold]{as_at}[/bold]")
    console.print(table)

    check = variance_check(result)
    balances = Table(title="Closing Balances")
    balances.add_column("Balance", style="cyan")
    balances.add_column("Amount", justify="right")
    balances.add_row(
        "Bank Statement Balance",
        format_currency(check.bank_balance) if check.bank_balance is not None else "-",
    )
    balances.add_row(
        "General Ledger Balance",
        format_currency(check.ledger_balance) if check.ledger_balance is not None else "-",
    )
    style = "green" if check.is_balanced else "red"
    variance = format_currency(check.variance) if check.variance is not None else "-"
    balances.add_row("Total Variance", f"[{style}]{variance} ({check.status.value})[/{style}]")
    console.print(balances)

    outliers = Table(title="Top 5 Largest Unmatched Transactions")
    outliers.add_column("Source")
    outliers.add_column("Date")
    outliers.add_column("Description")
    outliers.add_column("Amount", justify="right")
    for outlier in top_outliers(result):
        tx = outlier.transaction
        color = "dark_orange" if outlier.collection is ReviewCollection.BANK else "yellow"
        outliers.add_row(
            outlier.collection.value,
            escape(tx.date),
            escape(tx.description),
            f"[{color}]{format_currency(tx.amount)}[/{color}]",
        )
    if not outliers.row_count:
        console.print("[dim]No unmatched transactions.[/dim]")
    else:
        console.print(outliers)


def _display_items(review: ReviewState, search: str, status_filter: str) -> None:
    """List matched and unmatched items passing the active filters."""
    result = review.result

    matched = review.visible_matches(search)
    table = Table(title=f"Matched Transactions ({len(matched)})")
    for column in ("Bank Date", "Bank Description", "Ledger Description", "Amount"):
        table.add_column(column)
    for index in matched:
        pair = result.matched_transactions[index]
        table.add_row(
            escape(pair.bank_transaction.date),
            escape(pair.bank_transaction.description),
            escape(pair.ledger_transaction.description),
            format_currency(pair.bank_transaction.amount),
        )
    console.print(table)

    for collection, label in (
        (ReviewCollection.BANK, "Unmatched Bank Transactions"),
        (ReviewCollection.LEDGER, "Unmatched Ledger Entries"),
    ):
        visible = review.visible_indices(collection, search, status_filter)
        table = Table(title=f"{label} ({len(visible)})")
        for column in ("#", "Date", "Description", "Amount", "Status", "Selected"):
            table.add_column(column)
        selection = review.selection(collection)
        items = result.unmatched(collection)
        for index in visible:
            tx = items[index]
            status = review.status_of(collection, index)
            table.add_row(
                str(index),
                escape(tx.date),
                escape(tx.description),
                format_currency(tx.amount),
                "" if status is ReviewStatus.DEFAULT else status.value,
                "*" if index in selection else "",
            )
        console.print(table)


if __name__ == "__main__":
    main()
