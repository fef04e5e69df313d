"""Free-text and status filters for the review views."""

from decimal import Decimal
from typing import Union

from ..models.transaction import MatchedPair, ReviewStatus, Transaction

ALL_STATUSES = "all"

StatusFilter = Union[ReviewStatus, str]


def amount_search_text(amount: Decimal) -> str:
    """Plain decimal text of an amount without exponent or trailing zeros."""
    return format(amount.normalize(), "f")


def _amount_matches(amount: Decimal, term: str) -> bool:
    # Match what the reviewer may have typed: "145.5" or "145.50"
    return term in amount_search_text(amount) or term in f"{amount:.2f}"


def transaction_matches_search(transaction: Transaction, term: str) -> bool:
    """
    Check a transaction against a free-text search term.

    An empty term matches everything. Descriptions match case-insensitively,
    dates and amounts by plain substring.
    """
    if not term:
        return True
    return (
        term.lower() in transaction.description.lower()
        or term in transaction.date
        or _amount_matches(transaction.amount, term)
    )


def pair_matches_search(pair: MatchedPair, term: str) -> bool:
    """Check a matched pair: either leg's description or date, or the bank amount."""
    if not term:
        return True
    lowered = term.lower()
    bank = pair.bank_transaction
    ledger = pair.ledger_transaction
    return (
        lowered in bank.description.lower()
        or lowered in ledger.description.lower()
        or term in bank.date
        or term in ledger.date
        or _amount_matches(bank.amount, term)
    )


def status_matches(status: ReviewStatus, status_filter: StatusFilter) -> bool:
    """True when the filter is "all" or equals the item's effective status."""
    if status_filter == ALL_STATUSES:
        return True
    if isinstance(status_filter, str):
        status_filter = ReviewStatus(status_filter)
    return status is status_filter
