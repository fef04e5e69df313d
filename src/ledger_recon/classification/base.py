"""Interface for the external transaction classification service."""

from abc import ABC, abstractmethod
from typing import Any

from ..config import ProcessingMode
from ..ingestion.documents import DocumentPart


class Classifier(ABC):
    """Proposes a pairing between bank statement and ledger transactions."""

    @abstractmethod
    def classify(
        self,
        bank_statement: DocumentPart,
        ledger: DocumentPart,
        as_at_date: str,
        mode: ProcessingMode,
    ) -> Any:
        """
        Ask the service for a reconciliation of the two documents.

        Args:
            bank_statement: The bank statement document
            ledger: The general ledger document
            as_at_date: Cutoff date (YYYY-MM-DD); later transactions are ignored
            mode: Processing mode (fast or thorough)

        Returns:
            The service's parsed output. Its shape is not trusted and must
            go through the sanitizer.
        """
        pass
