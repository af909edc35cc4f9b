from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from core.contracts.document_backend import EmbeddedFont, IDocumentBackend
from ..exceptions.errors import CompositingError, FontResolutionError
from ..models.signature_enums import FontFamily

logger = logging.getLogger(__name__)

FALLBACK_FAMILY = FontFamily.HELVETICA


def resolve_font_family(value: Optional[str]) -> FontFamily:
    """Map a font-family selector onto the closed set; unknown values become Helvetica."""
    try:
        return FontFamily(value)
    except ValueError:
        logger.debug("Unknown font family %r, falling back to %s", value, FALLBACK_FAMILY.value)
        return FALLBACK_FAMILY


class FontResolver:
    """
    Prepares one font resource per distinct resolved family for a single document.
    """

    def __init__(self, backend: IDocumentBackend) -> None:
        self._backend = backend
        self._embedded: Dict[FontFamily, EmbeddedFont] = {}

    def prepare(self, families: Iterable[Optional[str]]) -> Dict[Optional[str], EmbeddedFont]:
        """Embed the fonts for ``families`` and return them keyed by the raw selector."""
        resolved: Dict[Optional[str], EmbeddedFont] = {}
        for family in families:
            if family not in resolved:
                resolved[family] = self.font_for(family)
        return resolved

    def font_for(self, family: Optional[str]) -> EmbeddedFont:
        target = resolve_font_family(family)
        font = self._embedded.get(target)
        if font is None:
            try:
                font = self._backend.embed_font(target.value)
            except CompositingError:
                raise
            except Exception as exc:
                raise FontResolutionError(f"Cannot prepare font {target.value!r}: {exc}") from exc
            self._embedded[target] = font
        return font

    @property
    def embedded_count(self) -> int:
        return len(self._embedded)
