"""Review workflow: status tags, selection and filtering."""

from .filters import ALL_STATUSES, pair_matches_search, transaction_matches_search
from .session import ReconciliationSession, SessionSettings
from .state import ReviewState

__all__ = [
    "ALL_STATUSES",
    "ReconciliationSession",
    "ReviewState",
    "SessionSettings",
    "pair_matches_search",
    "transaction_matches_search",
]
