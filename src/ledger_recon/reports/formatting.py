"""Number and filename formatting shared by the console view and all exports."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional
import re

DEFAULT_CURRENCY_LABEL = "GHS"
DEFAULT_BASE_FILENAME = "reconciliation_report"

_CENTS = Decimal("0.01")
_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def format_amount(amount: Decimal, grouping: bool = True) -> str:
    """Fixed-point, two-decimal rendering of an amount (half-up rounding)."""
    value = Decimal(amount)
    with localcontext() as ctx:
        # Enough digits for the integer part plus cents
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        value = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    return f"{value:,.2f}" if grouping else f"{value:.2f}"


def format_currency(amount: Decimal, currency_label: str = DEFAULT_CURRENCY_LABEL) -> str:
    """Amount prefixed with the currency label, e.g. ``GHS 1,250.00``."""
    return f"{currency_label} {format_amount(amount)}"


def company_slug(company_name: Optional[str]) -> str:
    """Filename prefix for a company: non-alphanumerics become ``_``, lower case."""
    if not company_name:
        return ""
    return _NON_ALPHANUMERIC.sub("_", company_name).lower() + "_"


def export_filename(
    company_name: Optional[str],
    extension: str,
    on_date: Optional[date] = None,
    base_filename: str = DEFAULT_BASE_FILENAME,
) -> str:
    """
    Build an export filename.

    Args:
        company_name: Optional company name used as a prefix
        extension: File extension without the dot
        on_date: Date stamped into the name (defaults to today)
        base_filename: Fixed base name

    Returns:
        Name such as ``acme_corp_reconciliation_report_2024-03-31.pdf``
    """
    stamp = (on_date or date.today()).isoformat()
    return f"{company_slug(company_name)}{base_filename}_{stamp}.{extension}"
