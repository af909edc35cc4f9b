"""core.contracts

Stable interfaces (ABCs) shared across features.

Features depend on these contracts, not on concrete implementations: the
compositing engine only talks to :class:`IDocumentBackend`, so any PDF
library offering that capability set can stand in for the pypdf/reportlab
backend.
"""

from .document_backend import EmbeddedFont, EmbeddedImage, IDocumentBackend, PageSize

__all__ = ["EmbeddedFont", "EmbeddedImage", "IDocumentBackend", "PageSize"]
