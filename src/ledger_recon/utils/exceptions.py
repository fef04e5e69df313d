"""Custom exceptions for the reconciliation application."""


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class ReconciliationFailedError(ReconciliationError):
    """The classification call failed or returned an unusable response."""

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"Reconciliation failed: {cause}")


class DocumentLoadError(ReconciliationError):
    """Error reading an input document."""

    pass


class ConfigurationError(ReconciliationError):
    """Error in configuration."""

    pass


class ReportGenerationError(ReconciliationError):
    """Error generating an export artifact."""

    pass
