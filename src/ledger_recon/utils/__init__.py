"""Utility modules."""

from .exceptions import (
    ConfigurationError,
    DocumentLoadError,
    ReconciliationError,
    ReconciliationFailedError,
    ReportGenerationError,
)
from .logging_config import setup_logging

__all__ = [
    "ConfigurationError",
    "DocumentLoadError",
    "ReconciliationError",
    "ReconciliationFailedError",
    "ReportGenerationError",
    "setup_logging",
]
