"""
Sample input documents for trying the tool without real data.

The scenario: three movements appear in both documents, the bank charges a
service fee the ledger does not know about, and a cheque recorded in the
ledger has not cleared the bank yet.
"""

from pathlib import Path
import csv
import io
import json
import logging

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger(__name__)

BANK_STATEMENT_FILENAME = "Sample_Bank_Statement.pdf"
LEDGER_FILENAME = "Sample_General_Ledger.csv"
CLASSIFICATION_FILENAME = "Sample_Classification.json"

BANK_ROWS = [
    ("2024-03-01", "Opening Balance", "", "", "5,000.00"),
    ("2024-03-03", "INV-2024-001 Tech Solutions", "1,250.00", "", "3,750.00"),
    ("2024-03-05", "Client Payment - Acme Corp", "", "3,500.00", "7,250.00"),
    ("2024-03-10", "Monthly Service Fee", "25.00", "", "7,225.00"),
    ("2024-03-15", "Office Supplies Depot", "145.50", "", "7,079.50"),
]

LEDGER_ROWS = [
    ("2024-03-03", "Payment to Tech Sol", "-1250.00", "EXP-500"),
    ("2024-03-05", "Deposit Acme Corp", "3500.00", "INC-100"),
    ("2024-03-15", "Supplies - Office Depot", "-145.50", "EXP-200"),
    ("2024-03-28", "Check #5055 Consultant", "-500.00", "EXP-600"),
]

# What a well-behaved classification of the two sample documents looks like
SAMPLE_CLASSIFICATION = {
    "summary": {"ledgerBalance": 6604.5, "bankBalance": 7079.5, "asAtDate": "2024-03-31"},
    "matchedTransactions": [
        {
            "bankTransaction": {
                "date": "2024-03-03",
                "description": "INV-2024-001 Tech Solutions",
                "amount": 1250.0,
                "type": "debit",
            },
            "ledgerTransaction": {
                "date": "2024-03-03",
                "description": "Payment to Tech Sol",
                "amount": 1250.0,
                "type": "credit",
            },
        },
        {
            "bankTransaction": {
                "date": "2024-03-05",
                "description": "Client Payment - Acme Corp",
                "amount": 3500.0,
                "type": "credit",
            },
            "ledgerTransaction": {
                "date": "2024-03-05",
                "description": "Deposit Acme Corp",
                "amount": 3500.0,
                "type": "debit",
            },
        },
        {
            "bankTransaction": {
                "date": "2024-03-15",
                "description": "Office Supplies Depot",
                "amount": 145.5,
                "type": "debit",
            },
            "ledgerTransaction": {
                "date": "2024-03-15",
                "description": "Supplies - Office Depot",
                "amount": 145.5,
                "type": "credit",
            },
        },
    ],
    "unmatchedBankTransactions": [
        {"date": "2024-03-10", "description": "Monthly Service Fee", "amount": 25.0, "type": "debit"}
    ],
    "unmatchedLedgerEntries": [
        {
            "date": "2024-03-28",
            "description": "Check #5055 Consultant",
            "amount": 500.0,
            "type": "credit",
        }
    ],
}


def bank_statement_pdf() -> bytes:
    """Render the sample bank statement."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, invariant=1, title="Global Bank Statement")
    styles = getSampleStyleSheet()

    elements = [
        Paragraph("Global Bank", styles["Title"]),
        Paragraph("123 Financial District, New York, NY", styles["Normal"]),
        Paragraph("Statement Period: March 1, 2024 - March 31, 2024", styles["Normal"]),
        Paragraph("Account: 8888-1234-5678", styles["Normal"]),
        Spacer(1, 12),
    ]

    table = Table([["Date", "Description", "Withdrawals", "Deposits", "Balance"], *BANK_ROWS])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2C3E50")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
            ]
        )
    )
    elements.append(table)
    doc.build(elements)
    return buffer.getvalue()


def general_ledger_csv() -> str:
    """Render the sample general ledger."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["Date", "Description", "Amount", "Reference"])
    writer.writerows(LEDGER_ROWS)
    return output.getvalue()


def write_samples(output_dir: Path) -> list[Path]:
    """
    Write the sample documents and the sample classification payload.

    Args:
        output_dir: Directory to write into (created if missing)

    Returns:
        Paths of the written files
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    bank_path = output_dir / BANK_STATEMENT_FILENAME
    bank_path.write_bytes(bank_statement_pdf())

    ledger_path = output_dir / LEDGER_FILENAME
    ledger_path.write_text(general_ledger_csv(), encoding="utf-8")

    classification_path = output_dir / CLASSIFICATION_FILENAME
    classification_path.write_text(json.dumps(SAMPLE_CLASSIFICATION, indent=2), encoding="utf-8")

    logger.info(f"Sample files written to {output_dir}")
    return [bank_path, ledger_path, classification_path]
