"""
Viewport -> document coordinate conversion.

Viewport space: pixels, origin top-left, y grows downwards.
Document space: points, origin bottom-left, y grows upwards.

The scale factors are derived from the reference page only and applied to
every overlay, whatever page it targets. Documents mixing page sizes will
therefore drift on non-reference pages.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from core.contracts.document_backend import PageSize
from ..models.viewport_frame import ViewportFrame


@dataclass(frozen=True)
class ViewportTransform:
    page_width: float
    page_height: float
    scale_x: float
    scale_y: float

    @classmethod
    def for_page(cls, page: PageSize, viewport: ViewportFrame) -> "ViewportTransform":
        return cls(
            page_width=page.width,
            page_height=page.height,
            scale_x=page.width / viewport.width,
            scale_y=page.height / viewport.height,
        )

    # -------- points ---------------------------------------------------------
    def to_document(self, x: float, y: float) -> Tuple[float, float]:
        """Map a viewport point to the document point at the same spot."""
        return x * self.scale_x, self.page_height - y * self.scale_y

    def to_viewport(self, doc_x: float, doc_y: float) -> Tuple[float, float]:
        """Inverse of :meth:`to_document`."""
        return doc_x / self.scale_x, (self.page_height - doc_y) / self.scale_y

    def scale_size(self, width: float, height: float) -> Tuple[float, float]:
        return width * self.scale_x, height * self.scale_y

    # -------- anchors --------------------------------------------------------
    def text_baseline(self, x: float, y: float, *, text_height: float,
                      padding_left: float, padding_top: float) -> Tuple[float, float]:
        """
        Baseline origin for a text box whose top-left corner is at viewport (x, y).

        Padding is in viewport pixels and applied before scaling; ``text_height``
        is in points and moves the anchor from the box top down to the baseline.
        """
        doc_x = (x + padding_left) * self.scale_x
        doc_y = self.page_height - (y + padding_top) * self.scale_y - text_height
        return doc_x, doc_y

    def image_origin(self, x: float, y: float, *, display_height: float) -> Tuple[float, float]:
        """Bottom-left corner of an image box whose top-left is at viewport (x, y)."""
        doc_x = x * self.scale_x
        doc_y = self.page_height - y * self.scale_y - display_height * self.scale_y
        return doc_x, doc_y
