"""
PDF report generator for reconciliation results.
Creates a paginated, sectioned document with a header band and page footers.
"""

from datetime import datetime
from functools import partial
from pathlib import Path
from typing import AbstractSet, Optional
from xml.sax.saxutils import escape
import io
import logging

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    BaseDocTemplate,
    CondPageBreak,
    Frame,
    NextPageTemplate,
    PageTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)

from ..config import AppConfig
from ..models.transaction import DocumentExportConfig, ReconciliationResult
from ..utils.exceptions import ReportGenerationError
from .formatting import export_filename
from .layout import (
    MATCHES,
    SUMMARY,
    UNMATCHED_BANK,
    UNMATCHED_LEDGER,
    ReportSection,
    build_sections,
)

logger = logging.getLogger(__name__)

# Colour palette
HEADER_BLUE = colors.HexColor("#1E40AF")
TEXT_MAIN = colors.HexColor("#1F2937")
TEXT_LIGHT = colors.HexColor("#6B7280")
LINE_GRAY = colors.HexColor("#E5E7EB")

SECTION_COLORS = {
    # key: (heading text, table header fill)
    SUMMARY: (TEXT_MAIN, colors.HexColor("#1E293B")),
    MATCHES: (colors.HexColor("#059669"), colors.HexColor("#10B981")),
    UNMATCHED_BANK: (colors.HexColor("#D97706"), colors.HexColor("#F59E0B")),
    UNMATCHED_LEDGER: (colors.HexColor("#4F46E5"), colors.HexColor("#6366F1")),
}

COLUMN_FRACTIONS = {
    SUMMARY: (0.45, 0.25, 0.30),
    MATCHES: (0.14, 0.30, 0.14, 0.24, 0.18),
    UNMATCHED_BANK: (0.18, 0.57, 0.25),
    UNMATCHED_LEDGER: (0.18, 0.57, 0.25),
}

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 15 * mm
HEADER_BAND_HEIGHT = 40 * mm
FIRST_PAGE_TOP = 50 * mm
LATER_PAGE_TOP = 15 * mm
FOOTER_BAND = 20 * mm
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

# Longer cell text is cut so a single row always fits on one page
MAX_CELL_CHARS = 1000

_HEADING_STYLE = ParagraphStyle(
    "SectionHeading", fontName="Helvetica-Bold", fontSize=14, leading=17, alignment=TA_LEFT
)
_CELL_STYLE = ParagraphStyle("Cell", fontName="Helvetica", fontSize=8, leading=10)
_AMOUNT_STYLE = ParagraphStyle(
    "AmountCell", parent=_CELL_STYLE, fontName="Helvetica-Bold", alignment=TA_RIGHT
)


class _FooterCanvas(canvas.Canvas):
    """
    Canvas that defers page output so every footer can show the page total.
    """

    def __init__(self, *args, footer_label: str = "", export_date: str = "", **kwargs):
        super().__init__(*args, **kwargs)
        self._footer_label = footer_label
        self._export_date = export_date
        self._page_states: list[dict] = []

    def showPage(self):
        self._page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._page_states)
        for state in self._page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total_pages: int) -> None:
        y = 10 * mm
        self.saveState()
        self.setStrokeColor(LINE_GRAY)
        self.line(MARGIN, 15 * mm, PAGE_WIDTH - MARGIN, 15 * mm)
        self.setFont("Helvetica", 8)
        self.setFillColor(TEXT_LIGHT)
        self.drawString(MARGIN, y, self._footer_label)
        self.drawCentredString(
            PAGE_WIDTH / 2, y, f"Page {self._pageNumber} of {total_pages}"
        )
        self.drawRightString(PAGE_WIDTH - MARGIN, y, f"Export Date: {self._export_date}")
        self.restoreState()


class PdfReportGenerator:
    """Generates the sectioned PDF reconciliation report."""

    def __init__(self, config: AppConfig):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
        """
        self.config = config
        self.export_config = config.export

    def generate(
        self,
        result: ReconciliationResult,
        company_name: str = "",
        export_config: Optional[DocumentExportConfig] = None,
        selected_bank_indices: AbstractSet[int] = frozenset(),
        selected_ledger_indices: AbstractSet[int] = frozenset(),
        generated_at: Optional[datetime] = None,
    ) -> bytes:
        """
        Render the report as PDF bytes.

        The output depends only on the arguments: the same inputs and
        timestamp always give the same bytes.

        Args:
            result: Sanitized reconciliation result
            company_name: Optional company name for header and footer
            export_config: Section selection (defaults to everything)
            selected_bank_indices: Selected unmatched bank positions
            selected_ledger_indices: Selected unmatched ledger positions
            generated_at: Timestamp shown in the header and footer

        Returns:
            The PDF document
        """
        export_config = export_config or DocumentExportConfig()
        generated_at = generated_at or datetime.now()

        buffer = io.BytesIO()
        doc = BaseDocTemplate(
            buffer,
            pagesize=A4,
            title=self.export_config.report_title,
            author=company_name or self.export_config.default_company_label,
            invariant=1,
        )
        doc.addPageTemplates(
            [
                PageTemplate(
                    id="first",
                    frames=[self._frame(FIRST_PAGE_TOP, "first")],
                    onPage=partial(
                        self._draw_header, company_name=company_name, generated_at=generated_at
                    ),
                ),
                PageTemplate(id="later", frames=[self._frame(LATER_PAGE_TOP, "later")]),
            ]
        )

        footer_label = f"{company_name or self.export_config.default_company_label} Report"
        try:
            sections = build_sections(
                result,
                export_config,
                frozenset(selected_bank_indices),
                frozenset(selected_ledger_indices),
                self.export_config.currency_label,
            )
            story: list = [NextPageTemplate("later")]
            for section in sections:
                story.extend(self._section_flowables(section))

            if len(story) == 1:
                # Keep an otherwise empty report to a single page
                story.append(Spacer(1, 1))

            doc.build(
                story,
                canvasmaker=partial(
                    _FooterCanvas,
                    footer_label=footer_label,
                    export_date=generated_at.strftime(DATE_FORMAT),
                ),
            )
        except Exception as e:
            raise ReportGenerationError(f"PDF generation failed: {e}") from e

        logger.info(
            f"PDF report rendered: {len(sections)} section(s), {len(buffer.getvalue())} bytes"
        )
        return buffer.getvalue()

    def write(
        self,
        result: ReconciliationResult,
        output_dir: Path,
        company_name: str = "",
        export_config: Optional[DocumentExportConfig] = None,
        selected_bank_indices: AbstractSet[int] = frozenset(),
        selected_ledger_indices: AbstractSet[int] = frozenset(),
        generated_at: Optional[datetime] = None,
    ) -> Path:
        """Render the report and write it to ``output_dir``."""
        generated_at = generated_at or datetime.now()
        output_path = output_dir / export_filename(
            company_name, "pdf", generated_at.date(), self.export_config.base_filename
        )
        logger.info(f"Generating PDF report: {output_path}")

        content = self.generate(
            result,
            company_name,
            export_config,
            selected_bank_indices,
            selected_ledger_indices,
            generated_at,
        )
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(content)
        except OSError as e:
            raise ReportGenerationError(f"Cannot write {output_path}: {e}") from e

        return output_path

    def _frame(self, top: float, frame_id: str) -> Frame:
        return Frame(
            MARGIN,
            FOOTER_BAND,
            CONTENT_WIDTH,
            PAGE_HEIGHT - top - FOOTER_BAND,
            leftPadding=0,
            rightPadding=0,
            topPadding=0,
            bottomPadding=0,
            id=frame_id,
        )

    def _section_flowables(self, section: ReportSection) -> list:
        """Heading and table for one section, preceded by a conditional page break."""
        heading_color, header_fill = SECTION_COLORS[section.key]
        # Less than the threshold left above the page bottom starts a new page
        min_space = max(self.export_config.section_break_threshold_mm * mm - FOOTER_BAND, 0)

        heading_style = ParagraphStyle(
            f"{section.key}_heading", parent=_HEADING_STYLE, textColor=heading_color
        )
        return [
            CondPageBreak(min_space),
            Paragraph(escape(section.heading), heading_style),
            Spacer(1, 4 * mm),
            self._table(section, header_fill),
            Spacer(1, 12 * mm),
        ]

    def _table(self, section: ReportSection, header_fill) -> Table:
        last = len(section.headers) - 1
        body = [
            [
                Paragraph(escape(_clip(value)), _AMOUNT_STYLE if col == last else _CELL_STYLE)
                for col, value in enumerate(row)
            ]
            for row in section.rows
        ]
        table = Table(
            [list(section.headers)] + body,
            colWidths=[CONTENT_WIDTH * f for f in COLUMN_FRACTIONS[section.key]],
            repeatRows=1,
            hAlign="LEFT",
        )
        font_size = 10 if section.key == SUMMARY else 8
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), header_fill),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), font_size + 1),
                    ("TEXTCOLOR", (0, 1), (-1, -1), TEXT_MAIN),
                    ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("ALIGN", (-1, 0), (-1, -1), "RIGHT"),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        return table

    def _draw_header(self, pdf: canvas.Canvas, doc, company_name: str, generated_at: datetime):
        """Header band on the first page."""
        pdf.saveState()
        pdf.setFillColor(HEADER_BLUE)
        pdf.rect(0, PAGE_HEIGHT - HEADER_BAND_HEIGHT, PAGE_WIDTH, HEADER_BAND_HEIGHT, stroke=0, fill=1)

        pdf.setFillColor(colors.white)
        pdf.setFont("Helvetica-Bold", 28)
        pdf.drawString(MARGIN, PAGE_HEIGHT - 22 * mm, self.export_config.report_title)
        pdf.setFont("Helvetica", 14)
        pdf.drawString(MARGIN, PAGE_HEIGHT - 32 * mm, company_name or "Financial Report")

        pdf.setFont("Helvetica", 8)
        pdf.drawRightString(
            PAGE_WIDTH - MARGIN,
            PAGE_HEIGHT - 18 * mm,
            f"Classification: {self.export_config.classification_label}",
        )
        pdf.drawRightString(
            PAGE_WIDTH - MARGIN,
            PAGE_HEIGHT - 24 * mm,
            f"Generated: {generated_at.strftime(TIMESTAMP_FORMAT)}",
        )
        pdf.restoreState()


def _clip(text: str) -> str:
    if len(text) <= MAX_CELL_CHARS:
        return text
    return text[: MAX_CELL_CHARS - 3] + "..."
