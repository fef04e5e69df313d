"""Dashboard analytics."""

from .dashboard import (
    BalanceStatus,
    Outlier,
    VarianceCheck,
    amount_breakdown,
    count_breakdown,
    top_outliers,
    variance_check,
)

__all__ = [
    "BalanceStatus",
    "Outlier",
    "VarianceCheck",
    "amount_breakdown",
    "count_breakdown",
    "top_outliers",
    "variance_check",
]
