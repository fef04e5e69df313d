"""Shared fixtures for the reconciliation test suite."""

import copy
from datetime import datetime

import pytest

from ledger_recon.config import AppConfig
from ledger_recon.ingestion.sanitizer import sanitize
from ledger_recon.samples import SAMPLE_CLASSIFICATION


@pytest.fixture
def end_to_end_payload():
    """Raw classification output with one match and one bank-only fee."""
    return {
        "matchedTransactions": [
            {
                "bankTransaction": {
                    "date": "2024-03-05",
                    "description": "Acme",
                    "amount": "3500.00",
                    "type": "credit",
                },
                "ledgerTransaction": {
                    "date": "2024-03-05",
                    "description": "Acme Corp",
                    "amount": -3500,
                    "type": "debit",
                },
            }
        ],
        "unmatchedBankTransactions": [
            {"date": "2024-03-10", "description": "Fee", "amount": 25, "type": "debit"}
        ],
        "unmatchedLedgerEntries": [],
        "summary": {"ledgerBalance": 7079.5, "bankBalance": 7079.5, "asAtDate": "2024-03-31"},
    }


@pytest.fixture
def sample_payload():
    return copy.deepcopy(SAMPLE_CLASSIFICATION)


@pytest.fixture
def sample_result(sample_payload):
    """Sanitized result of the bundled sample classification."""
    return sanitize(sample_payload)


@pytest.fixture
def two_bank_items_result():
    """Result with two unmatched bank items and one of everything else."""
    return sanitize(
        {
            "matchedTransactions": [
                {
                    "bankTransaction": {"date": "2024-03-05", "description": "Acme", "amount": 100},
                    "ledgerTransaction": {"date": "2024-03-05", "description": "Acme", "amount": 100},
                }
            ],
            "unmatchedBankTransactions": [
                {"date": "2024-03-10", "description": "Service Fee", "amount": 25},
                {"date": "2024-03-12", "description": "Wire Charge", "amount": 40},
            ],
            "unmatchedLedgerEntries": [
                {"date": "2024-03-28", "description": "Check #5055", "amount": 500}
            ],
            "summary": {"ledgerBalance": 1000, "bankBalance": 1000, "asAtDate": "2024-03-31"},
        }
    )


@pytest.fixture
def app_config():
    return AppConfig()


@pytest.fixture
def generated_at():
    return datetime(2024, 3, 31, 9, 30, 0)
