"""Data models for reconciliation transactions and results."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


class TransactionType(Enum):
    """
    Transaction direction.

    The meaning depends on the document the transaction came from: on a bank
    statement a credit is money received and a debit is money paid out, while
    on a general ledger a debit is a receipt and a credit is a payment.
    """

    CREDIT = "credit"
    DEBIT = "debit"


class ReviewStatus(Enum):
    """Annotation a reviewer can attach to an unmatched item."""

    DEFAULT = "default"
    INVESTIGATING = "investigating"
    CLEARED = "cleared"
    REVIEWED = "reviewed"


class ReviewCollection(Enum):
    """The two unmatched collections that support review annotations."""

    BANK = "bank"
    LEDGER = "ledger"


@dataclass(frozen=True)
class Transaction:
    """
    A single financial movement as proposed by the classification service.

    The date is kept exactly as the service returned it. The amount is always
    non-negative; direction lives only in ``type``.
    """

    date: str
    description: str
    amount: Decimal
    # None when the service omitted the type or returned something unknown
    type: Optional[TransactionType] = None

    @property
    def type_label(self) -> str:
        return self.type.value if self.type else ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "description": self.description,
            "amount": float(self.amount),
            "type": self.type.value if self.type else None,
        }


@dataclass(frozen=True)
class MatchedPair:
    """A proposed correspondence between a bank transaction and a ledger entry."""

    bank_transaction: Transaction
    ledger_transaction: Transaction

    @property
    def amount_difference(self) -> Decimal:
        """Bank amount minus ledger amount (the legs are not guaranteed to agree)."""
        return self.bank_transaction.amount - self.ledger_transaction.amount

    def to_dict(self) -> dict[str, Any]:
        return {
            "bankTransaction": self.bank_transaction.to_dict(),
            "ledgerTransaction": self.ledger_transaction.to_dict(),
        }


@dataclass(frozen=True)
class ReconciliationSummary:
    """
    Summary of a reconciliation result.

    Counts and totals are always derived from the result collections. The
    closing balances and the as-at date are passed through from the
    classification service untouched, so they may be missing or non-numeric.
    """

    # Derived counts
    matched_count: int
    unmatched_bank_count: int
    unmatched_ledger_count: int

    # Derived totals
    matched_total: Decimal
    unmatched_bank_total: Decimal
    unmatched_ledger_total: Decimal

    # Passed through from the service
    ledger_balance: Any = None
    bank_balance: Any = None
    as_at_date: Any = None

    @property
    def total_items(self) -> int:
        """Number of items across all three collections."""
        return self.matched_count + self.unmatched_bank_count + self.unmatched_ledger_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "ledgerBalance": self.ledger_balance,
            "bankBalance": self.bank_balance,
            "asAtDate": self.as_at_date,
            "matchedCount": self.matched_count,
            "unmatchedBankCount": self.unmatched_bank_count,
            "unmatchedLedgerCount": self.unmatched_ledger_count,
            "matchedTotal": float(self.matched_total),
            "unmatchedBankTotal": float(self.unmatched_bank_total),
            "unmatchedLedgerTotal": float(self.unmatched_ledger_total),
        }


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Canonical reconciliation outcome.

    Collections are tuples so that positional indices used by review overlays
    stay valid for the lifetime of the result.
    """

    summary: ReconciliationSummary
    matched_transactions: tuple[MatchedPair, ...] = ()
    unmatched_bank_transactions: tuple[Transaction, ...] = ()
    unmatched_ledger_entries: tuple[Transaction, ...] = ()

    def unmatched(self, collection: ReviewCollection) -> tuple[Transaction, ...]:
        """Return the unmatched collection a review overlay refers to."""
        if collection is ReviewCollection.BANK:
            return self.unmatched_bank_transactions
        return self.unmatched_ledger_entries

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the same shape the classification service returns."""
        return {
            "summary": self.summary.to_dict(),
            "matchedTransactions": [p.to_dict() for p in self.matched_transactions],
            "unmatchedBankTransactions": [
                t.to_dict() for t in self.unmatched_bank_transactions
            ],
            "unmatchedLedgerEntries": [t.to_dict() for t in self.unmatched_ledger_entries],
        }


@dataclass
class DocumentExportConfig:
    """Controls which sections the document report contains."""

    include_summary: bool = True
    include_matches: bool = True
    include_unmatched_bank: bool = True
    include_unmatched_ledger: bool = True
    only_selected_items: bool = False


@dataclass(frozen=True)
class ReviewSnapshot:
    """Point-in-time copy of the review overlay used by exporters."""

    bank_selection: frozenset[int] = field(default_factory=frozenset)
    ledger_selection: frozenset[int] = field(default_factory=frozenset)
    # Statuses are read-only views and take no part in hashing
    bank_statuses: Mapping[int, ReviewStatus] = field(default_factory=dict, hash=False)
    ledger_statuses: Mapping[int, ReviewStatus] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "bank_selection", frozenset(self.bank_selection))
        object.__setattr__(self, "ledger_selection", frozenset(self.ledger_selection))
        object.__setattr__(self, "bank_statuses", MappingProxyType(dict(self.bank_statuses)))
        object.__setattr__(self, "ledger_statuses", MappingProxyType(dict(self.ledger_statuses)))

    def selection(self, collection: ReviewCollection) -> frozenset[int]:
        if collection is ReviewCollection.BANK:
            return self.bank_selection
        return self.ledger_selection

    def status_of(self, collection: ReviewCollection, index: int) -> ReviewStatus:
        statuses = (
            self.bank_statuses if collection is ReviewCollection.BANK else self.ledger_statuses
        )
        return statuses.get(index, ReviewStatus.DEFAULT)
