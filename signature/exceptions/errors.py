"""Signature feature exceptions.

Every compose failure is terminal for the call; no partial output exists.
"""
from __future__ import annotations


class CompositingError(Exception):
    """Base exception for the compositing engine."""


class DocumentLoadError(CompositingError):
    """Raised when the input buffer cannot be read as a PDF."""


class InvalidPageIndex(CompositingError, IndexError):
    """Raised when a reference or annotation page index is out of range."""

    def __init__(self, page_index: int, page_count: int, *, what: str = "page") -> None:
        super().__init__(
            f"{what} index {page_index} out of range (document has {page_count} pages)"
        )
        self.page_index = page_index
        self.page_count = page_count


class FontResolutionError(CompositingError):
    """Raised when a standard font cannot be prepared."""


class ImageDecodeError(CompositingError):
    """Raised when the signature bytes are not valid PNG/JPEG data."""


class TextEncodingError(CompositingError):
    """Raised when annotation text has characters the standard fonts cannot show."""

    def __init__(self, text: str, char: str) -> None:
        super().__init__(f"Character {char!r} in {text!r} is not available in the standard PDF fonts")
        self.text = text
        self.char = char


class SerializationError(CompositingError):
    """Raised when the output buffer cannot be produced."""


class ExportError(Exception):
    """Base exception for caller-side export guards."""


class NothingToExportError(ExportError):
    """Raised when neither a signature nor text annotations are present."""


class ExportInProgressError(ExportError):
    """Raised when an export is requested while another one is pending."""
