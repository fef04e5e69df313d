"""Bank statement to general ledger reconciliation."""

__version__ = "0.1.0"
