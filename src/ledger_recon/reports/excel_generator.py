"""
Excel workbook generator for reconciliation review.
Creates a multi-sheet workbook including each unmatched item's review status.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
import logging

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..config import AppConfig
from ..models.transaction import (
    MatchedPair,
    ReconciliationResult,
    ReviewCollection,
    ReviewSnapshot,
    ReviewStatus,
)
from ..utils.exceptions import ReportGenerationError
from .formatting import export_filename
from .layout import summary_headers, summary_rows

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="1E40AF", end_color="1E40AF", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
MATCH_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
VARIANCE_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
STATUS_FILLS = {
    ReviewStatus.INVESTIGATING: PatternFill(
        start_color="FFC7CE", end_color="FFC7CE", fill_type="solid"
    ),
    ReviewStatus.CLEARED: MATCH_FILL,
    ReviewStatus.REVIEWED: PatternFill(
        start_color="DDEBF7", end_color="DDEBF7", fill_type="solid"
    ),
}
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
AMOUNT_FORMAT = "#,##0.00"

SHEET_NAMES = {
    "summary": "Summary",
    "matched": "Matched Transactions",
    ReviewCollection.BANK: "Unmatched Bank",
    ReviewCollection.LEDGER: "Unmatched Ledger",
}


class ExcelReportGenerator:
    """Generates the review workbook with one sheet per collection."""

    def __init__(self, config: AppConfig):
        """
        Initialize the workbook generator.

        Args:
            config: Application configuration
        """
        self.config = config
        self.export_config = config.export

    def build_workbook(
        self,
        result: ReconciliationResult,
        company_name: str = "",
        review: Optional[ReviewSnapshot] = None,
        generated_at: Optional[datetime] = None,
    ) -> Workbook:
        """
        Build the workbook in memory.

        Args:
            result: Sanitized reconciliation result
            company_name: Optional company name for the summary sheet
            review: Review overlay to include (statuses and selection)
            generated_at: Timestamp shown on the summary sheet

        Returns:
            The populated workbook
        """
        review = review or ReviewSnapshot()
        generated_at = generated_at or datetime.now()

        wb = Workbook()
        # Remove default sheet
        if wb.active:
            wb.remove(wb.active)

        self._create_summary_sheet(wb, result, company_name, generated_at)
        self._create_matched_sheet(wb, result.matched_transactions)
        for collection in ReviewCollection:
            self._create_unmatched_sheet(wb, result, collection, review)

        return wb

    def write(
        self,
        result: ReconciliationResult,
        output_dir: Path,
        company_name: str = "",
        review: Optional[ReviewSnapshot] = None,
        generated_at: Optional[datetime] = None,
    ) -> Path:
        """
        Write the workbook to ``output_dir`` using the standard filename.

        Returns:
            Path to the written file
        """
        generated_at = generated_at or datetime.now()
        output_path = output_dir / export_filename(
            company_name, "xlsx", generated_at.date(), self.export_config.base_filename
        )
        logger.info(f"Generating Excel workbook: {output_path}")

        wb = self.build_workbook(result, company_name, review, generated_at)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            wb.save(output_path)
        except OSError as e:
            raise ReportGenerationError(f"Cannot write {output_path}: {e}") from e

        logger.info(f"Workbook saved: {output_path}")
        return output_path

    def _create_summary_sheet(
        self,
        wb: Workbook,
        result: ReconciliationResult,
        company_name: str,
        generated_at: datetime,
    ) -> None:
        """Create the summary sheet with key metrics and closing balances."""
        ws = wb.create_sheet(SHEET_NAMES["summary"])
        summary = result.summary

        ws["A1"] = self.export_config.report_title
        ws["A1"].font = Font(size=16, bold=True)
        ws.merge_cells("A1:C1")

        info = [
            ("Company:", _clean(company_name or self.export_config.default_company_label)),
            ("As At Date:", "" if summary.as_at_date is None else _clean(str(summary.as_at_date))),
            ("Generated:", generated_at.strftime("%Y-%m-%d %H:%M:%S")),
        ]
        for i, (label, value) in enumerate(info, start=3):
            ws[f"A{i}"] = label
            ws[f"B{i}"] = value

        header_row = 7
        self._write_headers(ws, header_row, summary_headers(self.export_config.currency_label))
        for row_num, (label, count, total) in enumerate(summary_rows(summary), start=header_row + 1):
            ws.cell(row=row_num, column=1, value=label).border = THIN_BORDER
            ws.cell(row=row_num, column=2, value=count).border = THIN_BORDER
            self._amount_cell(ws, row_num, 3, total)

        ws["A12"] = "Closing Balances"
        ws["A12"].font = Font(bold=True)
        balances = [
            ("Bank Statement Balance:", summary.bank_balance),
            ("General Ledger Balance:", summary.ledger_balance),
        ]
        for i, (label, value) in enumerate(balances, start=13):
            ws[f"A{i}"] = label
            # Balances are passed through unchecked and may be any JSON value
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                ws[f"B{i}"] = value
                ws[f"B{i}"].number_format = AMOUNT_FORMAT
            else:
                ws[f"B{i}"] = "" if value is None else _clean(str(value))

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 22
        ws.column_dimensions["C"].width = 22

    def _create_matched_sheet(self, wb: Workbook, matches: tuple[MatchedPair, ...]) -> None:
        """Create the matched transactions sheet."""
        ws = wb.create_sheet(SHEET_NAMES["matched"])

        headers = [
            "Bank Date",
            "Bank Description",
            "Bank Type",
            "Bank Amount",
            "Ledger Date",
            "Ledger Description",
            "Ledger Type",
            "Ledger Amount",
            "Difference",
        ]
        self._write_headers(ws, 1, headers)

        for row_num, pair in enumerate(matches, start=2):
            bank_txn = pair.bank_transaction
            ledger_txn = pair.ledger_transaction
            difference = pair.amount_difference

            row_data = [
                _clean(bank_txn.date),
                _clean(bank_txn.description),
                _clean(bank_txn.type_label),
                None,
                _clean(ledger_txn.date),
                _clean(ledger_txn.description),
                _clean(ledger_txn.type_label),
                None,
                None,
            ]
            for col, value in enumerate(row_data, start=1):
                ws.cell(row=row_num, column=col, value=value).border = THIN_BORDER

            self._amount_cell(ws, row_num, 4, bank_txn.amount)
            self._amount_cell(ws, row_num, 8, ledger_txn.amount)
            diff_cell = self._amount_cell(ws, row_num, 9, difference)

            # Highlight legs that disagree
            fill = VARIANCE_FILL if difference else MATCH_FILL
            for col in range(1, len(headers) + 1):
                ws.cell(row=row_num, column=col).fill = fill
            diff_cell.font = Font(bold=bool(difference))

        self._auto_fit_columns(ws)

    def _create_unmatched_sheet(
        self,
        wb: Workbook,
        result: ReconciliationResult,
        collection: ReviewCollection,
        review: ReviewSnapshot,
    ) -> None:
        """Create an unmatched items sheet with status and selection columns."""
        ws = wb.create_sheet(SHEET_NAMES[collection])

        headers = ["#", "Date", "Description", "Type", "Amount", "Status", "Selected"]
        self._write_headers(ws, 1, headers)

        selection = review.selection(collection)
        for row_num, (index, txn) in enumerate(enumerate(result.unmatched(collection)), start=2):
            status = review.status_of(collection, index)
            row_data = [
                index,
                _clean(txn.date),
                _clean(txn.description),
                _clean(txn.type_label),
                None,
                "" if status is ReviewStatus.DEFAULT else status.value,
                "Yes" if index in selection else "",
            ]
            for col, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_num, column=col, value=value)
                cell.border = THIN_BORDER
            self._amount_cell(ws, row_num, 5, txn.amount)

            fill = STATUS_FILLS.get(status)
            if fill:
                ws.cell(row=row_num, column=6).fill = fill

        self._auto_fit_columns(ws)

    def _write_headers(self, ws: Worksheet, row: int, headers) -> None:
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = THIN_BORDER

    def _amount_cell(self, ws: Worksheet, row: int, column: int, amount):
        cell = ws.cell(row=row, column=column, value=float(amount))
        cell.number_format = AMOUNT_FORMAT
        cell.border = THIN_BORDER
        return cell

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.columns:
            max_length = max(
                (len(str(cell.value)) for cell in column_cells if cell.value is not None),
                default=0,
            )
            ws.column_dimensions[column_cells[0].column_letter].width = min(max_length + 2, 50)


def _clean(text: str) -> str:
    """Drop control characters that openpyxl refuses to store in a cell."""
    return ILLEGAL_CHARACTERS_RE.sub("", text)
