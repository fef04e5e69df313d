"""Loading of source documents for the classification service."""

from dataclasses import dataclass
from pathlib import Path
import logging

from ..utils.exceptions import DocumentLoadError

logger = logging.getLogger(__name__)

SUPPORTED_MEDIA_TYPES = {
    ".pdf": "application/pdf",
    ".csv": "text/csv",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
}


@dataclass(frozen=True)
class DocumentPart:
    """Binary content of one source document plus its media type."""

    name: str
    mime_type: str
    data: bytes

    @classmethod
    def from_path(cls, path: Path) -> "DocumentPart":
        """
        Read a document from disk.

        Args:
            path: Path to a PDF, CSV or Excel file

        Returns:
            DocumentPart with the file's bytes and media type

        Raises:
            DocumentLoadError: If the file is missing, empty or of an
                unsupported type
        """
        mime_type = SUPPORTED_MEDIA_TYPES.get(path.suffix.lower())
        if mime_type is None:
            supported = ", ".join(sorted(SUPPORTED_MEDIA_TYPES))
            raise DocumentLoadError(
                f"Unsupported document type '{path.suffix}' for {path.name} "
                f"(supported: {supported})"
            )

        try:
            data = path.read_bytes()
        except OSError as e:
            raise DocumentLoadError(f"Cannot read {path}: {e}") from e

        if not data:
            raise DocumentLoadError(f"Document is empty: {path}")

        logger.debug(f"Loaded {path.name}: {len(data)} bytes as {mime_type}")
        return cls(name=path.name, mime_type=mime_type, data=data)
