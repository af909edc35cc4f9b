from __future__ import annotations
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Dict, List, Optional, Tuple, Union

from pypdf import PdfReader, PdfWriter
from PIL import Image, UnidentifiedImageError
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas
from reportlab.lib.utils import ImageReader

from core.contracts.document_backend import (
    EmbeddedFont,
    EmbeddedImage,
    IDocumentBackend,
    PageSize,
)
from ..exceptions.errors import (
    DocumentLoadError,
    FontResolutionError,
    ImageDecodeError,
    InvalidPageIndex,
    SerializationError,
    TextEncodingError,
)
from ..models.signature_enums import ImageFormat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _TextOp:
    text: str
    x: float
    y: float
    font: EmbeddedFont
    size: float
    color: Tuple[float, float, float]


@dataclass(frozen=True)
class _ImageOp:
    image: EmbeddedImage
    x: float
    y: float
    width: float
    height: float


_DrawOp = Union[_TextOp, _ImageOp]


class PdfSigner(IDocumentBackend):
    """
    pypdf + reportlab backend.

    Draw calls are recorded per page. On serialize, every touched page gets a
    reportlab overlay of the same size that is merged onto it; untouched pages
    are passed through as they are.
    """

    def __init__(self) -> None:
        self._reader: Optional[PdfReader] = None
        self._ops: Dict[int, List[_DrawOp]] = {}

    # -------- open / measure -------------------------------------------------
    def open(self, data: bytes) -> None:
        try:
            reader = PdfReader(BytesIO(data))
            if reader.is_encrypted:
                raise DocumentLoadError("Encrypted PDFs are not supported")
            # touch the page tree so broken documents fail here, not mid-draw
            if len(reader.pages) == 0:
                raise DocumentLoadError("Document has no pages")
        except DocumentLoadError:
            raise
        except Exception as exc:
            raise DocumentLoadError(f"Cannot read PDF: {exc}") from exc
        self._reader = reader
        self._ops = {}

    @property
    def _doc(self) -> PdfReader:
        if self._reader is None:
            raise DocumentLoadError("No document opened")
        return self._reader

    @property
    def page_count(self) -> int:
        return len(self._doc.pages)

    def get_page_size(self, page_index: int) -> PageSize:
        self._check_index(page_index)
        box = self._doc.pages[page_index].mediabox
        return PageSize(width=float(box.width), height=float(box.height))

    # -------- resources ------------------------------------------------------
    def embed_font(self, family: str) -> EmbeddedFont:
        """Standard Type1 fonts need no embedding; validate and read their metrics."""
        try:
            pdfmetrics.getFont(family)
            ascent, descent = pdfmetrics.getAscentDescent(family)
        except (KeyError, ValueError) as exc:
            raise FontResolutionError(f"Unknown standard font {family!r}") from exc
        return EmbeddedFont(family=family, font_name=family,
                            ascent=float(ascent), descent=float(descent))

    def embed_image(self, data: bytes, image_format: str) -> EmbeddedImage:
        fmt = ImageFormat(str(image_format).upper())
        try:
            img = Image.open(BytesIO(data), formats=[fmt.value])
            img.load()
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
            raise ImageDecodeError(f"Signature is not a valid {fmt.value} image: {exc}") from exc

        if fmt is ImageFormat.PNG:
            img = img.convert("RGBA")
        elif img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        return EmbeddedImage(width=img.width, height=img.height, payload=img)

    # -------- drawing --------------------------------------------------------
    def draw_text(self, page_index: int, text: str, *, x: float, y: float,
                  font: EmbeddedFont, size: float,
                  color: Tuple[float, float, float] = (0.0, 0.0, 0.0)) -> None:
        self._check_index(page_index)
        # standard Type1 fonts are WinAnsi encoded; anything else renders as boxes
        try:
            text.encode("cp1252")
        except UnicodeEncodeError as exc:
            raise TextEncodingError(text, text[exc.start]) from exc
        self._ops.setdefault(page_index, []).append(
            _TextOp(text=text, x=x, y=y, font=font, size=size, color=color))

    def draw_image(self, page_index: int, image: EmbeddedImage, *,
                   x: float, y: float, width: float, height: float) -> None:
        self._check_index(page_index)
        self._ops.setdefault(page_index, []).append(
            _ImageOp(image=image, x=x, y=y, width=width, height=height))

    # -------- output ---------------------------------------------------------
    def serialize(self) -> bytes:
        try:
            writer = PdfWriter(clone_from=self._doc)
            for i, page in enumerate(writer.pages):
                ops = self._ops.get(i)
                if not ops:
                    continue
                box = page.mediabox
                overlay_pdf = self._make_overlay(float(box.width), float(box.height), ops)
                page.merge_page(PdfReader(BytesIO(overlay_pdf)).pages[0])
                logger.debug("Merged %d overlay op(s) onto page %d", len(ops), i)

            out = BytesIO()
            writer.write(out)
            return out.getvalue()
        except Exception as exc:
            raise SerializationError(f"Cannot write PDF: {exc}") from exc

    @staticmethod
    def _make_overlay(page_w: float, page_h: float, ops: List[_DrawOp]) -> bytes:
        """
        Render an overlay page (same size as the target page) holding the
        recorded text and images in call order.
        """
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=(page_w, page_h), invariant=1)

        for op in ops:
            if isinstance(op, _TextOp):
                c.setFillColorRGB(*op.color)
                c.setFont(op.font.font_name, op.size)
                c.drawString(op.x, op.y, op.text)
            else:
                c.drawImage(ImageReader(op.image.payload), op.x, op.y,
                            width=op.width, height=op.height, mask="auto")

        c.showPage()
        c.save()
        return buf.getvalue()

    def _check_index(self, page_index: int) -> None:
        count = self.page_count
        if not isinstance(page_index, int) or page_index < 0 or page_index >= count:
            raise InvalidPageIndex(page_index, count)
