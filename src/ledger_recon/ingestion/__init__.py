"""Input handling: source documents and classification output."""

from .documents import DocumentPart
from .sanitizer import ResultSanitizer, parse_amount, sanitize, to_decimal

__all__ = ["DocumentPart", "ResultSanitizer", "parse_amount", "sanitize", "to_decimal"]
