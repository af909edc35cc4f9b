"""core/contracts/document_backend.py
==================================

Capability set the compositing engine needs from a PDF library.

One backend instance serves exactly one compose call: it is opened on the
source bytes, receives draw operations and is serialized once. Coordinates
are document points, origin bottom-left, y-up.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(frozen=True)
class PageSize:
    """Page size in points (1 pt = 1/72 inch)."""

    width: float
    height: float


@dataclass(frozen=True)
class EmbeddedFont:
    """A font resource prepared once per document and shared by all draws."""

    family: str          # requested family after fallback (e.g. "Courier")
    font_name: str       # backend font name
    ascent: float        # per 1000 units of font size
    descent: float       # per 1000 units, negative below baseline

    def height_at_size(self, size: float) -> float:
        """Ascent-to-descent height at ``size`` points."""
        return (self.ascent - self.descent) / 1000.0 * size


@dataclass(frozen=True)
class EmbeddedImage:
    """An image resource sized to its intrinsic pixel dimensions."""

    width: int
    height: int
    payload: Any = None  # backend-specific decoded image


class IDocumentBackend(ABC):
    """Open / measure / embed / draw / serialize."""

    @abstractmethod
    def open(self, data: bytes) -> None:
        """Load the document from bytes."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages of the opened document."""

    @abstractmethod
    def get_page_size(self, page_index: int) -> PageSize:
        """Return the size of page ``page_index`` in points."""

    @abstractmethod
    def embed_font(self, family: str) -> EmbeddedFont:
        """Prepare a standard font resource for ``family``."""

    @abstractmethod
    def embed_image(self, data: bytes, image_format: str) -> EmbeddedImage:
        """Decode ``data`` as ``image_format`` ("PNG" or "JPEG")."""

    @abstractmethod
    def draw_text(self, page_index: int, text: str, *, x: float, y: float,
                  font: EmbeddedFont, size: float,
                  color: Tuple[float, float, float] = (0.0, 0.0, 0.0)) -> None:
        """Draw ``text`` with its baseline starting at ``(x, y)``."""

    @abstractmethod
    def draw_image(self, page_index: int, image: EmbeddedImage, *,
                   x: float, y: float, width: float, height: float) -> None:
        """Draw ``image`` with its bottom-left corner at ``(x, y)``."""

    @abstractmethod
    def serialize(self) -> bytes:
        """Write the mutated document to a byte buffer."""
