"""
Delimited text report generator.

Writes the full reconciliation summary; selection and filters do not apply.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
import csv
import io
import logging

from ..config import AppConfig
from ..models.transaction import ReconciliationResult
from ..utils.exceptions import ReportGenerationError
from .formatting import export_filename, format_amount
from .layout import summary_headers, summary_rows

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class CsvReportGenerator:
    """Generates the CSV summary report."""

    def __init__(self, config: AppConfig):
        self.config = config
        self.export_config = config.export

    def generate(
        self,
        result: ReconciliationResult,
        company_name: str = "",
        generated_at: Optional[datetime] = None,
    ) -> str:
        """
        Render the report text.

        Layout: optional company line, title, generation timestamp, blank
        line, then the summary table with every field quoted.

        Args:
            result: Sanitized reconciliation result
            company_name: Optional company name for the first line
            generated_at: Timestamp for the metadata line (defaults to now)

        Returns:
            The CSV text
        """
        generated_at = generated_at or datetime.now()
        output = io.StringIO()
        meta = csv.writer(output, lineterminator="\n")
        table = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")

        if company_name:
            meta.writerow(["Company Name", company_name])
        meta.writerow([self.export_config.report_title])
        meta.writerow(["Generated on", generated_at.strftime(TIMESTAMP_FORMAT)])
        output.write("\n")

        output.write("Summary\n")
        table.writerow(summary_headers(self.export_config.currency_label))
        for label, count, total in summary_rows(result.summary):
            table.writerow([label, count, format_amount(total, grouping=False)])
        output.write("\n")

        return output.getvalue()

    def write(
        self,
        result: ReconciliationResult,
        output_dir: Path,
        company_name: str = "",
        generated_at: Optional[datetime] = None,
    ) -> Path:
        """
        Write the report to ``output_dir`` using the standard filename.

        Returns:
            Path to the written file
        """
        generated_at = generated_at or datetime.now()
        output_path = output_dir / export_filename(
            company_name,
            "csv",
            generated_at.date(),
            self.export_config.base_filename,
        )
        logger.info(f"Generating CSV report: {output_path}")

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            output_path.write_text(
                self.generate(result, company_name, generated_at), encoding="utf-8"
            )
        except OSError as e:
            raise ReportGenerationError(f"Cannot write {output_path}: {e}") from e

        return output_path
