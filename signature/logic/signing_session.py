# signature/logic/signing_session.py
from __future__ import annotations
import logging
from typing import Callable, List, Optional

from core.config.config_service import ConfigService, config_service
from core.contracts.document_backend import IDocumentBackend

from ..exceptions.errors import (
    CompositingError,
    DocumentLoadError,
    ExportError,
    ExportInProgressError,
    NothingToExportError,
)
from ..models.compositing_settings import ComposeResult, CompositingSettings
from ..models.signature_enums import FONT_SIZE_CHOICES, FontFamily
from ..models.signature_placement import SignatureImage, SignaturePlacement
from ..models.text_annotation import TextAnnotation, TextAnnotationDraft
from ..models.viewport_frame import ViewportFrame

from .annotation_store import AnnotationStore
from .compositing_engine import CompositingEngine
from .pdf_signer import PdfSigner

logger = logging.getLogger(__name__)


class SigningSession:
    """
    State of one open document in the signing tool (no UI).

    Holds the page being viewed, its rendered size, the signature and the text
    annotations, and drives the export. A failed export leaves all of that
    untouched so the user can simply try again.
    """

    def __init__(self, document_bytes: bytes, file_name: str, *,
                 page_count: Optional[int] = None,
                 engine: Optional[CompositingEngine] = None,
                 config: Optional[ConfigService] = None,
                 backend_factory: Callable[[], IDocumentBackend] = PdfSigner) -> None:
        cfg = config or config_service
        self._document = document_bytes
        self._file_name = file_name
        self._engine = engine or CompositingEngine(
            backend_factory=backend_factory,
            settings=CompositingSettings.from_config(cfg),
        )
        self._page_count = page_count if page_count is not None \
            else self._count_pages(document_bytes, backend_factory)

        self._page_index = 0
        self._viewport: Optional[ViewportFrame] = None

        self._signature_x = cfg.session.signature_x
        self._signature_y = cfg.session.signature_y
        self._signature: Optional[SignatureImage] = None

        self.annotations = AnnotationStore()
        self._adding_text = False
        self._font_size = cfg.session.default_font_size
        self._font_family = FontFamily(cfg.session.default_font_family).value

        self._exporting = False

    # -------- Document / navigation -----------------------------------------
    @staticmethod
    def _count_pages(data: bytes, backend_factory: Callable[[], IDocumentBackend]) -> int:
        backend = backend_factory()
        backend.open(data)
        count = backend.page_count
        if count < 1:
            raise DocumentLoadError("Document has no pages")
        return count

    @property
    def file_name(self) -> str:
        return self._file_name

    @property
    def page_count(self) -> int:
        return self._page_count

    @property
    def page_index(self) -> int:
        return self._page_index

    def go_to_page(self, page_index: int) -> int:
        """Switch the viewed page (clamped). The new page's size must be reported again."""
        target = max(0, min(self._page_count - 1, int(page_index)))
        if target != self._page_index:
            self._page_index = target
            self._viewport = None
        return self._page_index

    def next_page(self) -> int:
        return self.go_to_page(self._page_index + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self._page_index - 1)

    def set_viewport(self, width: float, height: float) -> ViewportFrame:
        """Record the rendered pixel size of the viewed page."""
        self._viewport = ViewportFrame(width, height)
        return self._viewport

    @property
    def viewport(self) -> Optional[ViewportFrame]:
        return self._viewport

    # -------- Signature ------------------------------------------------------
    def set_signature(self, image: Optional[SignatureImage]) -> None:
        self._signature = image

    def set_signature_data_url(self, data_url: str) -> SignatureImage:
        image = SignatureImage.from_data_url(data_url)
        self._signature = image
        return image

    @property
    def signature_position(self) -> tuple[float, float]:
        return self._signature_x, self._signature_y

    def move_signature(self, dx: float, dy: float) -> tuple[float, float]:
        self._signature_x += dx
        self._signature_y += dy
        return self.signature_position

    @property
    def signature_placement(self) -> Optional[SignaturePlacement]:
        if self._signature is None:
            return None
        return SignaturePlacement(image=self._signature, x=self._signature_x, y=self._signature_y)

    # -------- Text annotations ----------------------------------------------
    @property
    def font_size(self) -> float:
        return self._font_size

    @font_size.setter
    def font_size(self, value: float) -> None:
        if value not in FONT_SIZE_CHOICES:
            raise ValueError(f"Font size must be one of {FONT_SIZE_CHOICES}, got {value!r}")
        self._font_size = value

    @property
    def font_family(self) -> str:
        return self._font_family

    @font_family.setter
    def font_family(self, value: str) -> None:
        self._font_family = FontFamily(value).value

    @property
    def adding_text(self) -> bool:
        return self._adding_text

    def toggle_adding_text(self) -> bool:
        self._adding_text = not self._adding_text
        return self._adding_text

    def place_text(self, x: float, y: float) -> Optional[TextAnnotationDraft]:
        """Click on the page while in add-text mode: open a draft there."""
        if not self._adding_text:
            return None
        self._adding_text = False
        return self.annotations.begin_draft(
            x, y, self._page_index,
            font_size=self._font_size, font_family=self._font_family,
        )

    def visible_annotations(self) -> List[TextAnnotation]:
        return self.annotations.for_page(self._page_index)

    # -------- Export ---------------------------------------------------------
    @property
    def is_exporting(self) -> bool:
        return self._exporting

    @property
    def has_content(self) -> bool:
        return self._signature is not None or len(self.annotations) > 0

    @property
    def can_export(self) -> bool:
        return not self._exporting and self.has_content and self._viewport is not None

    async def export(self) -> ComposeResult:
        """
        Compose the signed document for the page currently viewed.

        Raises NothingToExportError / ExportInProgressError before touching the
        document, and the engine's CompositingError if composing fails.
        """
        if self._exporting:
            raise ExportInProgressError("An export is already running")
        if not self.has_content:
            raise NothingToExportError("Please add a signature or text annotations before exporting.")
        if self._viewport is None:
            raise ExportError("The current page has not been rendered yet")

        self._exporting = True
        try:
            result = await self._engine.compose_async(
                self._document,
                self.signature_placement,
                self.annotations.annotations(),
                reference_page_index=self._page_index,
                viewport=self._viewport,
                output_name_hint=self._file_name,
            )
        except CompositingError:
            logger.exception("Error exporting %s", self._file_name)
            raise
        finally:
            self._exporting = False
        return result
