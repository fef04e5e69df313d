"""Data models for reconciliation."""

from .transaction import (
    DocumentExportConfig,
    MatchedPair,
    ReconciliationResult,
    ReconciliationSummary,
    ReviewCollection,
    ReviewSnapshot,
    ReviewStatus,
    Transaction,
    TransactionType,
)

__all__ = [
    "DocumentExportConfig",
    "MatchedPair",
    "ReconciliationResult",
    "ReconciliationSummary",
    "ReviewCollection",
    "ReviewSnapshot",
    "ReviewStatus",
    "Transaction",
    "TransactionType",
]
