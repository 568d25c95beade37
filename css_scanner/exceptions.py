"""Package-specific exception types."""

from __future__ import annotations


class ScanError(ValueError):
    """Base class for scanner errors.

    Stylesheet content never raises; these signal misuse of the API.
    """


class InvalidRangeError(ScanError):
    """Raised when a scan range does not fit inside the document.

    Args:
        start: First position requested.
        length: Number of characters requested.
        document_length: Length of the document.
    """

    def __init__(self, start: int, length: int, document_length: int):
        self.start = start
        self.length = length
        self.document_length = document_length
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Scan range [{self.start}, {self.start + self.length}) is outside "
            f"the document of length {self.document_length}"
        )


class LineStateError(ScanError):
    """Raised when a per-line value cannot be packed or unpacked."""


class KeywordFileError(ScanError):
    """Raised when a keyword file cannot be read or has an invalid layout."""
