"""
Tests for the result sanitizer.

These tests validate that:
1. Missing or malformed collections become empty instead of raising
2. Amounts are always non-negative Decimals
3. Summary counts and totals are recomputed from the collections
4. Closing balances and the as-at date pass through untouched
"""

from decimal import Decimal

import pytest

from ledger_recon.ingestion.sanitizer import (
    ResultSanitizer,
    parse_amount,
    parse_transaction_type,
    sanitize,
    to_decimal,
)
from ledger_recon.models.transaction import TransactionType


class TestAmountCoercion:
    """Tests for the amount helpers."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (25, Decimal("25")),
            (-3500, Decimal("3500")),
            ("3500.00", Decimal("3500.00")),
            ("-1,250.50", Decimal("1250.50")),
            ("GHS 1,250.00", Decimal("1250.00")),
            ("$ 99.99", Decimal("99.99")),
            (145.5, Decimal("145.5")),
        ],
    )
    def test_numeric_values_become_absolute_decimals(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", "N/A", True, float("nan"), {"x": 1}, [1]])
    def test_unusable_values_become_zero(self, raw):
        assert parse_amount(raw) == Decimal("0")

    def test_to_decimal_rejects_booleans_and_infinity(self):
        assert to_decimal(False) is None
        assert to_decimal(float("inf")) is None
        assert to_decimal("12.5") == Decimal("12.5")

    @pytest.mark.parametrize("raw", ["1e9999999", "-1E+100", 10**120])
    def test_out_of_range_magnitudes_become_zero(self, raw):
        assert to_decimal(raw) is None
        assert parse_amount(raw) == Decimal("0")

    def test_large_but_bounded_magnitudes_are_kept(self):
        assert to_decimal("1e30") == Decimal("1e30")
        assert to_decimal("9.9e99") == Decimal("9.9e99")

    def test_sanitize_survives_out_of_range_amounts(self):
        # Act
        result = sanitize(
            {
                "unmatchedBankTransactions": [
                    {"date": "2024-03-01", "description": "Huge", "amount": "1e9999999"},
                    {"date": "2024-03-02", "description": "Fee", "amount": 25},
                ]
            }
        )

        # Assert
        assert [t.amount for t in result.unmatched_bank_transactions] == [
            Decimal("0"),
            Decimal("25"),
        ]
        assert result.summary.unmatched_bank_total == Decimal("25")

    def test_transaction_type_is_case_insensitive(self):
        assert parse_transaction_type("Credit") is TransactionType.CREDIT
        assert parse_transaction_type(" debit ") is TransactionType.DEBIT
        assert parse_transaction_type("transfer") is None
        assert parse_transaction_type(None) is None


class TestMissingCollections:
    """Tests for structurally incomplete input."""

    @pytest.mark.parametrize("raw", [None, [], "not json", 42, {}])
    def test_non_object_or_empty_input_gives_empty_result(self, raw):
        # Act
        result = sanitize(raw)

        # Assert
        assert result.matched_transactions == ()
        assert result.unmatched_bank_transactions == ()
        assert result.unmatched_ledger_entries == ()
        assert result.summary.matched_count == 0
        assert result.summary.matched_total == Decimal("0")

    def test_missing_collection_is_empty_and_others_kept(self, end_to_end_payload):
        # Arrange
        del end_to_end_payload["matchedTransactions"]
        del end_to_end_payload["summary"]

        # Act
        result = sanitize(end_to_end_payload)

        # Assert
        assert result.matched_transactions == ()
        assert len(result.unmatched_bank_transactions) == 1
        assert result.summary.bank_balance is None
        assert result.summary.as_at_date is None

    def test_non_list_collection_is_treated_as_empty(self):
        result = sanitize({"unmatchedBankTransactions": {"date": "2024-03-01"}})
        assert result.unmatched_bank_transactions == ()

    def test_non_object_items_and_legs_get_defaults(self):
        # Arrange
        raw = {
            "matchedTransactions": [{"bankTransaction": None}],
            "unmatchedLedgerEntries": ["garbage"],
        }

        # Act
        result = sanitize(raw)

        # Assert
        pair = result.matched_transactions[0]
        assert pair.bank_transaction.amount == Decimal("0")
        assert pair.ledger_transaction.description == ""
        assert result.unmatched_ledger_entries[0].date == ""
        assert result.unmatched_ledger_entries[0].type is None


class TestSummaryRecomputation:
    """Tests for derived summary fields."""

    def test_end_to_end_scenario(self, end_to_end_payload):
        """One match, one bank-only fee and no ledger-only entries."""
        # Act
        result = sanitize(end_to_end_payload)
        summary = result.summary

        # Assert
        assert summary.matched_count == 1
        assert summary.matched_total == Decimal("3500")
        assert summary.unmatched_bank_count == 1
        assert summary.unmatched_bank_total == Decimal("25")
        assert summary.unmatched_ledger_count == 0
        assert summary.unmatched_ledger_total == Decimal("0")

        ledger_leg = result.matched_transactions[0].ledger_transaction
        assert ledger_leg.amount == Decimal("3500")
        assert ledger_leg.type is TransactionType.DEBIT

    def test_service_supplied_counts_and_totals_are_ignored(self, end_to_end_payload):
        # Arrange
        end_to_end_payload["summary"].update(
            {"matchedCount": 99, "matchedTotal": 1.0, "unmatchedBankTotal": "lots"}
        )

        # Act
        summary = sanitize(end_to_end_payload).summary

        # Assert
        assert summary.matched_count == 1
        assert summary.matched_total == Decimal("3500")
        assert summary.unmatched_bank_total == Decimal("25")

    def test_matched_total_uses_bank_leg(self):
        # Arrange
        raw = {
            "matchedTransactions": [
                {"bankTransaction": {"amount": 100}, "ledgerTransaction": {"amount": 90}},
                {"bankTransaction": {"amount": "0.10"}, "ledgerTransaction": {"amount": 0}},
                {"bankTransaction": {"amount": "0.20"}, "ledgerTransaction": {"amount": 0}},
            ]
        }

        # Act
        summary = sanitize(raw).summary

        # Assert
        assert summary.matched_count == 3
        # Exact decimal arithmetic, no float drift
        assert summary.matched_total == Decimal("100.30")

    def test_balances_pass_through_untouched(self):
        raw = {"summary": {"ledgerBalance": "n/a", "bankBalance": 7079.5, "asAtDate": "31/03/2024"}}

        summary = sanitize(raw).summary

        assert summary.ledger_balance == "n/a"
        assert summary.bank_balance == 7079.5
        assert summary.as_at_date == "31/03/2024"

    def test_sanitizer_does_not_mutate_input(self, end_to_end_payload):
        before = repr(end_to_end_payload)

        ResultSanitizer().sanitize(end_to_end_payload)

        assert repr(end_to_end_payload) == before

    def test_result_serializes_in_service_shape(self, sample_result):
        """A saved result sanitizes back to the same content."""
        again = sanitize(sample_result.to_dict())

        assert again == sample_result
