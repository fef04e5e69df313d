"""Reconciliation session: owns at most one live result and its review state."""

from dataclasses import dataclass
from typing import Optional
import itertools
import logging

from ..classification.service import ReconciliationService
from ..config import ProcessingMode
from ..ingestion.documents import DocumentPart
from ..models.transaction import ReconciliationResult
from ..utils.exceptions import ReconciliationFailedError
from .state import ReviewState

logger = logging.getLogger(__name__)


@dataclass
class SessionSettings:
    """Caller-supplied inputs for a reconciliation session."""

    as_at_date: str
    mode: ProcessingMode = ProcessingMode.FAST
    company_name: str = ""


class ReconciliationSession:
    """
    Tracks the current reconciliation attempt and its outcome.

    Each attempt gets a token. Only the outcome of the most recent attempt is
    accepted; results or errors delivered for an older token are dropped.
    A new attempt discards the previous result and review state.
    """

    def __init__(self, settings: SessionSettings):
        self.settings = settings
        self.result: Optional[ReconciliationResult] = None
        self.review: Optional[ReviewState] = None
        self.error: Optional[str] = None
        self._tokens = itertools.count(1)
        self._current_attempt: Optional[int] = None

    @property
    def is_pending(self) -> bool:
        return self._current_attempt is not None

    def start_attempt(self) -> int:
        """Begin a new attempt, clearing any previous outcome."""
        self.result = None
        self.review = None
        self.error = None
        self._current_attempt = next(self._tokens)
        logger.debug(f"Started reconciliation attempt {self._current_attempt}")
        return self._current_attempt

    def complete(self, token: int, result: ReconciliationResult) -> bool:
        """
        Deliver the result of an attempt.

        Returns:
            True if the result was accepted, False if the attempt is stale
        """
        if token != self._current_attempt:
            logger.info(f"Discarding result of abandoned attempt {token}")
            return False
        self.result = result
        self.review = ReviewState(result)
        self._current_attempt = None
        return True

    def fail(self, token: int, message: str) -> bool:
        """Deliver a failure for an attempt; stale failures are ignored."""
        if token != self._current_attempt:
            logger.info(f"Discarding failure of abandoned attempt {token}")
            return False
        self.error = message
        self._current_attempt = None
        return True

    def reset(self) -> None:
        """Abandon any pending attempt and drop the result and review state."""
        self.result = None
        self.review = None
        self.error = None
        self._current_attempt = None

    def run(
        self,
        service: ReconciliationService,
        bank_statement: DocumentPart,
        ledger: DocumentPart,
    ) -> ReconciliationResult:
        """
        Run one attempt synchronously with the session settings.

        Raises:
            ReconciliationFailedError: If the service fails; the message is
                also kept on ``error``
        """
        token = self.start_attempt()
        try:
            result = service.reconcile(
                bank_statement, ledger, self.settings.as_at_date, self.settings.mode
            )
        except ReconciliationFailedError as e:
            self.fail(token, str(e))
            raise
        self.complete(token, result)
        return result
