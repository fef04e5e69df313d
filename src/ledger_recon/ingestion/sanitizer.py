"""
Sanitizer for raw classification output.

The classification service returns a best-effort, untyped structure. This is
the single place where that structure is validated and coerced into the
canonical result model; nothing downstream re-checks field presence.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional
import logging
import re

from ..models.transaction import (
    MatchedPair,
    ReconciliationResult,
    ReconciliationSummary,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Largest accepted order of magnitude; arithmetic below it cannot overflow
MAX_EXPONENT = 99

# Currency symbols, thousands separators, whitespace and accounting parentheses
_AMOUNT_NOISE = re.compile(r"[\s,$£€₵()]")
_CURRENCY_CODE_PREFIX = re.compile(r"^[A-Za-z]{3}(?=[-+.\d])")


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a loosely-typed numeric value to a Decimal.

    Accepts ints, floats, Decimals and numeric strings (currency symbols,
    a leading three-letter currency code and thousands separators are
    ignored). Booleans, non-finite numbers, magnitudes above
    1e99 and anything unparseable give None.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    elif isinstance(value, str):
        text = _AMOUNT_NOISE.sub("", value)
        text = _CURRENCY_CODE_PREFIX.sub("", text)
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not number.is_finite() or number.adjusted() > MAX_EXPONENT:
        return None
    return number


def parse_amount(value: Any) -> Decimal:
    """Coerce an amount to a non-negative Decimal, defaulting to zero."""
    number = to_decimal(value)
    if number is None:
        if value is not None:
            logger.debug(f"Non-numeric amount {value!r} coerced to 0")
        return ZERO
    return abs(number)


def parse_transaction_type(value: Any) -> Optional[TransactionType]:
    """Map the service's type string onto TransactionType, or None."""
    if isinstance(value, str):
        try:
            return TransactionType(value.strip().lower())
        except ValueError:
            pass
    return None


class ResultSanitizer:
    """Normalizes raw classification output into a ReconciliationResult."""

    def sanitize(self, raw: Any) -> ReconciliationResult:
        """
        Build a canonical result from raw classification output.

        Missing collections become empty, every amount is coerced to a
        non-negative Decimal, and the summary counts and totals are recomputed
        from the coerced collections. Never raises.

        Args:
            raw: Parsed output of the classification service (any shape)

        Returns:
            Sanitized reconciliation result
        """
        payload = raw if isinstance(raw, dict) else {}
        if not isinstance(raw, dict):
            logger.warning(f"Classification output is {type(raw).__name__}, expected an object")

        matched = tuple(
            self._build_pair(item) for item in _as_list(payload.get("matchedTransactions"))
        )
        unmatched_bank = tuple(
            self._build_transaction(item)
            for item in _as_list(payload.get("unmatchedBankTransactions"))
        )
        unmatched_ledger = tuple(
            self._build_transaction(item)
            for item in _as_list(payload.get("unmatchedLedgerEntries"))
        )

        raw_summary = payload.get("summary")
        if not isinstance(raw_summary, dict):
            raw_summary = {}

        summary = ReconciliationSummary(
            matched_count=len(matched),
            unmatched_bank_count=len(unmatched_bank),
            unmatched_ledger_count=len(unmatched_ledger),
            # The bank leg is the canonical source for matched totals
            matched_total=_total(p.bank_transaction for p in matched),
            unmatched_bank_total=_total(unmatched_bank),
            unmatched_ledger_total=_total(unmatched_ledger),
            ledger_balance=raw_summary.get("ledgerBalance"),
            bank_balance=raw_summary.get("bankBalance"),
            as_at_date=raw_summary.get("asAtDate"),
        )

        logger.info(
            f"Sanitized result: {summary.matched_count} matched, "
            f"{summary.unmatched_bank_count} unmatched bank, "
            f"{summary.unmatched_ledger_count} unmatched ledger"
        )

        return ReconciliationResult(
            summary=summary,
            matched_transactions=matched,
            unmatched_bank_transactions=unmatched_bank,
            unmatched_ledger_entries=unmatched_ledger,
        )

    def _build_pair(self, item: Any) -> MatchedPair:
        data = item if isinstance(item, dict) else {}
        return MatchedPair(
            bank_transaction=self._build_transaction(data.get("bankTransaction")),
            ledger_transaction=self._build_transaction(data.get("ledgerTransaction")),
        )

    def _build_transaction(self, item: Any) -> Transaction:
        data = item if isinstance(item, dict) else {}
        return Transaction(
            date=_as_text(data.get("date")),
            description=_as_text(data.get("description")),
            amount=parse_amount(data.get("amount")),
            type=parse_transaction_type(data.get("type")),
        )


def sanitize(raw: Any) -> ReconciliationResult:
    """Module-level shortcut for ResultSanitizer().sanitize(raw)."""
    return ResultSanitizer().sanitize(raw)


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _total(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), ZERO)
