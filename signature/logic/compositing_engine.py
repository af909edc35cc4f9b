# signature/logic/compositing_engine.py
from __future__ import annotations
import asyncio
import hashlib
import logging
from typing import Callable, Iterable, Optional, Sequence

from core.contracts.document_backend import IDocumentBackend
from ..exceptions.errors import (
    CompositingError,
    DocumentLoadError,
    ImageDecodeError,
    InvalidPageIndex,
    SerializationError,
)
from ..models.compositing_settings import ComposeResult, CompositingSettings
from ..models.signature_placement import SignaturePlacement
from ..models.text_annotation import TextAnnotation
from ..models.viewport_frame import ViewportFrame

from .coordinate_transform import ViewportTransform
from .font_resolver import FontResolver
from .image_sizing import clamp_display_size
from .naming_strategy import DefaultSuffixStrategy, NamingContext, NamingStrategy
from .pdf_signer import PdfSigner

logger = logging.getLogger(__name__)

BLACK = (0.0, 0.0, 0.0)


class CompositingEngine:
    """
    Bakes viewport-space overlays into a copy of a PDF (no UI, no state).

    Every call opens a fresh backend, so the engine may be shared and called
    concurrently; calls are not serialized against each other.
    """

    def __init__(self, *,
                 backend_factory: Callable[[], IDocumentBackend] = PdfSigner,
                 settings: Optional[CompositingSettings] = None,
                 naming: Optional[NamingStrategy] = None) -> None:
        self._backend_factory = backend_factory
        self._settings = settings or CompositingSettings()
        self._naming = naming or DefaultSuffixStrategy(self._settings.output_suffix)

    @property
    def settings(self) -> CompositingSettings:
        return self._settings

    # -------- Public API -----------------------------------------------------
    def compose(self, document_bytes: bytes,
                signature: Optional[SignaturePlacement] = None,
                text_annotations: Iterable[TextAnnotation] = (),
                *,
                reference_page_index: int,
                viewport: ViewportFrame,
                output_name_hint: str) -> ComposeResult:
        """
        Draw ``text_annotations`` on their own pages and ``signature`` on the
        reference page, then serialize.

        Raises a :class:`CompositingError` subclass on any failure; nothing is
        returned unless the whole document was written.
        """
        annotations = list(text_annotations)
        s = self._settings

        backend = self._backend_factory()
        try:
            backend.open(document_bytes)
        except CompositingError:
            raise
        except Exception as exc:
            raise DocumentLoadError(f"Cannot open document: {exc}") from exc

        page_count = backend.page_count
        self._check_page(reference_page_index, page_count, what="reference page")
        for a in annotations:
            self._check_page(a.page_index, page_count, what=f"annotation {a.id!r} page")

        transform = ViewportTransform.for_page(backend.get_page_size(reference_page_index), viewport)
        logger.debug("Reference page %d: scale_x=%.6f scale_y=%.6f",
                     reference_page_index, transform.scale_x, transform.scale_y)

        # -------- text
        fonts = FontResolver(backend)
        font_map = fonts.prepare(a.font_family for a in annotations)

        for a in annotations:
            font = font_map[a.font_family]
            text_height = font.height_at_size(a.font_size)
            x, y = transform.text_baseline(
                a.x, a.y, text_height=text_height,
                padding_left=s.padding_left, padding_top=s.padding_top,
            )
            logger.debug("Text %s -> page %d at (%.2f, %.2f) %s %.1fpt",
                         a.id, a.page_index, x, y, font.family, a.font_size)
            backend.draw_text(a.page_index, a.text, x=x, y=y,
                              font=font, size=a.font_size, color=BLACK)

        # -------- signature
        if signature is not None:
            try:
                image = backend.embed_image(signature.image.data, signature.image.image_format.value)
            except CompositingError:
                raise
            except Exception as exc:
                raise ImageDecodeError(f"Cannot embed signature image: {exc}") from exc
            display_w, display_h = clamp_display_size(
                image.width, image.height,
                max_width=s.signature_max_width, max_height=s.signature_max_height,
            )
            x, y = transform.image_origin(signature.x, signature.y, display_height=display_h)
            width, height = transform.scale_size(display_w, display_h)
            logger.debug("Signature %dx%d px -> page %d at (%.2f, %.2f) size %.2fx%.2f",
                         image.width, image.height, reference_page_index, x, y, width, height)
            backend.draw_image(reference_page_index, image, x=x, y=y, width=width, height=height)

        # -------- output
        try:
            data = backend.serialize()
        except CompositingError:
            raise
        except Exception as exc:
            raise SerializationError(f"Cannot serialize document: {exc}") from exc

        file_name = self._naming.propose_output_name(NamingContext(input_name=output_name_hint))
        self._audit(file_name, annotations, signature, reference_page_index, fonts.embedded_count)
        return ComposeResult(data=data, file_name=file_name)

    async def compose_async(self, document_bytes: bytes,
                            signature: Optional[SignaturePlacement] = None,
                            text_annotations: Iterable[TextAnnotation] = (),
                            *,
                            reference_page_index: int,
                            viewport: ViewportFrame,
                            output_name_hint: str) -> ComposeResult:
        """:meth:`compose` as one awaitable unit, run off the event loop."""
        return await asyncio.to_thread(
            self.compose, document_bytes, signature, list(text_annotations),
            reference_page_index=reference_page_index,
            viewport=viewport,
            output_name_hint=output_name_hint,
        )

    # -------- Internal helpers ----------------------------------------------
    @staticmethod
    def _check_page(page_index: int, page_count: int, *, what: str) -> None:
        if isinstance(page_index, bool) or not isinstance(page_index, int) \
                or not 0 <= page_index < page_count:
            raise InvalidPageIndex(page_index, page_count, what=what)

    @staticmethod
    def _audit(file_name: str, annotations: Sequence[TextAnnotation],
               signature: Optional[SignaturePlacement], reference_page_index: int,
               font_count: int) -> None:
        pages = sorted({a.page_index for a in annotations}
                       | ({reference_page_index} if signature else set()))
        logger.info(
            "Composed %s: %d text annotation(s), %d font(s), signature=%s, pages=%s",
            file_name, len(annotations), font_count,
            hashlib.sha256(signature.image.data).hexdigest() if signature else None,
            pages,
        )
