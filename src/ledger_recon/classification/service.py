"""
Reconciliation service: one classification call, then sanitization.

The external call is made exactly once per attempt. Any failure from the
call or from decoding its response is reported as a single
ReconciliationFailedError; no partial result is produced.
"""

from typing import Optional
import logging

from ..config import ProcessingMode
from ..ingestion.documents import DocumentPart
from ..ingestion.sanitizer import ResultSanitizer
from ..models.transaction import ReconciliationResult
from ..utils.exceptions import ReconciliationFailedError
from .base import Classifier

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Runs a classifier and turns its output into a canonical result."""

    def __init__(self, classifier: Classifier, sanitizer: Optional[ResultSanitizer] = None):
        self.classifier = classifier
        self.sanitizer = sanitizer or ResultSanitizer()

    def reconcile(
        self,
        bank_statement: DocumentPart,
        ledger: DocumentPart,
        as_at_date: str,
        mode: ProcessingMode = ProcessingMode.FAST,
    ) -> ReconciliationResult:
        """
        Reconcile a bank statement against a general ledger.

        Args:
            bank_statement: The bank statement document
            ledger: The general ledger document
            as_at_date: Cutoff date (YYYY-MM-DD)
            mode: Processing mode passed through to the classifier

        Returns:
            Sanitized reconciliation result

        Raises:
            ReconciliationFailedError: If the classification call fails
        """
        logger.info(
            f"Starting reconciliation as at {as_at_date} ({mode.value}): "
            f"{bank_statement.name} vs {ledger.name}"
        )

        try:
            raw = self.classifier.classify(bank_statement, ledger, as_at_date, mode)
        except Exception as e:
            logger.error(f"Classification failed: {type(e).__name__}: {e}")
            raise ReconciliationFailedError(str(e) or type(e).__name__) from e

        return self.sanitizer.sanitize(raw)
