"""
Report content shared by the export generators.

Builds the ordered, numbered sections of the document report from a result,
an export configuration and the selection sets. Rendering is left to the
generators so the section content can be checked without parsing a PDF.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import AbstractSet

from ..models.transaction import (
    DocumentExportConfig,
    ReconciliationResult,
    ReconciliationSummary,
    Transaction,
)
from .formatting import DEFAULT_CURRENCY_LABEL, format_currency

SUMMARY = "summary"
MATCHES = "matches"
UNMATCHED_BANK = "unmatched_bank"
UNMATCHED_LEDGER = "unmatched_ledger"

FILTERED_MARKER = " [Filtered]"


@dataclass(frozen=True)
class ReportSection:
    """One numbered section of the document report."""

    key: str
    number: int
    title: str
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]

    @property
    def heading(self) -> str:
        return f"{self.number}. {self.title}"


def summary_rows(summary: ReconciliationSummary) -> list[tuple[str, int, Decimal]]:
    """The fixed three-row summary table: label, count, total."""
    return [
        ("Successfully Matched", summary.matched_count, summary.matched_total),
        ("Outstanding Bank Items", summary.unmatched_bank_count, summary.unmatched_bank_total),
        (
            "Outstanding Ledger Items",
            summary.unmatched_ledger_count,
            summary.unmatched_ledger_total,
        ),
    ]


def summary_headers(currency_label: str = DEFAULT_CURRENCY_LABEL) -> tuple[str, str, str]:
    return ("Metric", "Transaction Count", f"Net Value ({currency_label})")


def select_items(
    items: tuple[Transaction, ...],
    selected_indices: AbstractSet[int],
    only_selected: bool,
) -> list[Transaction]:
    """
    Restrict an unmatched collection to the selected positions.

    Selection indices refer to positions in the full collection, not to a
    filtered view.
    """
    if not only_selected:
        return list(items)
    return [tx for i, tx in enumerate(items) if i in selected_indices]


def build_sections(
    result: ReconciliationResult,
    config: DocumentExportConfig,
    selected_bank_indices: AbstractSet[int] = frozenset(),
    selected_ledger_indices: AbstractSet[int] = frozenset(),
    currency_label: str = DEFAULT_CURRENCY_LABEL,
) -> list[ReportSection]:
    """
    Build the document sections in their fixed order.

    Sections are numbered 1-4 whether or not earlier ones are included.
    Unmatched sections are dropped when their row list is empty; matches are
    never restricted by selection.

    Args:
        result: Sanitized reconciliation result
        config: Which sections to include and whether to honour selection
        selected_bank_indices: Selected positions in the unmatched bank items
        selected_ledger_indices: Selected positions in the unmatched ledger entries
        currency_label: Label used in amount columns

    Returns:
        The sections to render, in order
    """

    def money(amount: Decimal) -> str:
        return format_currency(amount, currency_label)

    sections: list[ReportSection] = []
    filtered = FILTERED_MARKER if config.only_selected_items else ""

    if config.include_summary:
        sections.append(
            ReportSection(
                key=SUMMARY,
                number=1,
                title="Executive Summary",
                headers=summary_headers(currency_label),
                rows=tuple(
                    (label, str(count), money(total))
                    for label, count, total in summary_rows(result.summary)
                ),
            )
        )

    matches = result.matched_transactions
    if config.include_matches and matches:
        sections.append(
            ReportSection(
                key=MATCHES,
                number=2,
                title=f"Verified Matches ({len(matches)})",
                headers=(
                    "Bank Date",
                    "Statement Narrative",
                    "Ledger Date",
                    "Internal Reference",
                    "Amount",
                ),
                rows=tuple(
                    (
                        p.bank_transaction.date,
                        p.bank_transaction.description,
                        p.ledger_transaction.date,
                        p.ledger_transaction.description,
                        money(p.bank_transaction.amount),
                    )
                    for p in matches
                ),
            )
        )

    if config.include_unmatched_bank:
        bank_items = select_items(
            result.unmatched_bank_transactions,
            selected_bank_indices,
            config.only_selected_items,
        )
        if bank_items:
            sections.append(
                ReportSection(
                    key=UNMATCHED_BANK,
                    number=3,
                    title=f"Unmatched Bank Items ({len(bank_items)}){filtered}",
                    headers=("Date", "Transaction Description", "Value"),
                    rows=tuple((tx.date, tx.description, money(tx.amount)) for tx in bank_items),
                )
            )

    if config.include_unmatched_ledger:
        ledger_items = select_items(
            result.unmatched_ledger_entries,
            selected_ledger_indices,
            config.only_selected_items,
        )
        if ledger_items:
            sections.append(
                ReportSection(
                    key=UNMATCHED_LEDGER,
                    number=4,
                    title=f"Unmatched Ledger Entries ({len(ledger_items)}){filtered}",
                    headers=("Date", "General Ledger Description", "Value"),
                    rows=tuple(
                        (tx.date, tx.description, money(tx.amount)) for tx in ledger_items
                    ),
                )
            )

    return sections
