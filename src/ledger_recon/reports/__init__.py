"""Export artifacts: CSV summary, PDF report and review workbook."""

from .csv_generator import CsvReportGenerator
from .excel_generator import ExcelReportGenerator
from .formatting import export_filename, format_amount, format_currency
from .layout import ReportSection, build_sections
from .pdf_generator import PdfReportGenerator

__all__ = [
    "CsvReportGenerator",
    "ExcelReportGenerator",
    "PdfReportGenerator",
    "ReportSection",
    "build_sections",
    "export_filename",
    "format_amount",
    "format_currency",
]
