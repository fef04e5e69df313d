"""External classification service and the reconciliation service around it."""

from .base import Classifier
from .service import ReconciliationService

__all__ = ["Classifier", "ReconciliationService"]
