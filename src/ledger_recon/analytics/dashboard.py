"""
Dashboard metrics derived from a reconciliation result.

All functions are pure and read counts and totals from the summary, which
the sanitizer has already recomputed.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from ..ingestion.sanitizer import to_decimal
from ..models.transaction import ReconciliationResult, ReviewCollection, Transaction

BALANCE_TOLERANCE = Decimal("0.01")
DEFAULT_OUTLIER_COUNT = 5


class BalanceStatus(Enum):
    BALANCED = "balanced"
    OUT_OF_BALANCE = "out of balance"


@dataclass(frozen=True)
class Outlier:
    """An unmatched item together with the collection it came from."""

    transaction: Transaction
    collection: ReviewCollection
    index: int


@dataclass(frozen=True)
class VarianceCheck:
    """Difference between the bank and ledger closing balances."""

    bank_balance: Optional[Decimal]
    ledger_balance: Optional[Decimal]
    variance: Optional[Decimal]
    status: BalanceStatus

    @property
    def is_balanced(self) -> bool:
        return self.status is BalanceStatus.BALANCED


@dataclass(frozen=True)
class BreakdownItem:
    label: str
    value: Decimal


def top_outliers(result: ReconciliationResult, n: int = DEFAULT_OUTLIER_COUNT) -> list[Outlier]:
    """
    Largest unmatched items across both collections.

    Bank items come before ledger items in the candidate list; the sort is
    stable so equal amounts keep that order.

    Args:
        result: Sanitized reconciliation result
        n: Number of items to return

    Returns:
        Up to ``n`` outliers ordered by amount, largest first
    """
    candidates = [
        Outlier(transaction=tx, collection=ReviewCollection.BANK, index=i)
        for i, tx in enumerate(result.unmatched_bank_transactions)
    ] + [
        Outlier(transaction=tx, collection=ReviewCollection.LEDGER, index=i)
        for i, tx in enumerate(result.unmatched_ledger_entries)
    ]
    candidates.sort(key=lambda o: o.transaction.amount, reverse=True)
    return candidates[: max(n, 0)]


def variance_check(result: ReconciliationResult) -> VarianceCheck:
    """
    Compare closing balances: bank minus ledger.

    Balanced when the absolute variance is below 0.01. If either balance is
    missing or not numeric the variance is unknown and the result is
    reported out of balance.
    """
    bank = to_decimal(result.summary.bank_balance)
    ledger = to_decimal(result.summary.ledger_balance)

    if bank is None or ledger is None:
        return VarianceCheck(bank, ledger, None, BalanceStatus.OUT_OF_BALANCE)

    variance = bank - ledger
    status = (
        BalanceStatus.BALANCED if abs(variance) < BALANCE_TOLERANCE else BalanceStatus.OUT_OF_BALANCE
    )
    return VarianceCheck(bank, ledger, variance, status)


def count_breakdown(result: ReconciliationResult) -> list[BreakdownItem]:
    """Item counts per collection, for charting."""
    summary = result.summary
    return [
        BreakdownItem("Matched", Decimal(summary.matched_count)),
        BreakdownItem("Unmatched (Bank)", Decimal(summary.unmatched_bank_count)),
        BreakdownItem("Unmatched (Ledger)", Decimal(summary.unmatched_ledger_count)),
    ]


def amount_breakdown(result: ReconciliationResult) -> list[BreakdownItem]:
    """Amount totals per collection, for charting."""
    summary = result.summary
    return [
        BreakdownItem("Matched", summary.matched_total),
        BreakdownItem("Bank", summary.unmatched_bank_total),
        BreakdownItem("Ledger", summary.unmatched_ledger_total),
    ]
