# signature/models/signature_enums.py
from __future__ import annotations
from enum import Enum


class FontFamily(str, Enum):
    """Standard PDF fonts offered for text annotations."""
    HELVETICA = "Helvetica"
    COURIER = "Courier"
    TIMES_ROMAN = "Times-Roman"


class ImageFormat(str, Enum):
    """Encodings accepted for the signature image."""
    PNG = "PNG"
    JPEG = "JPEG"


# Font sizes (pt) the annotation toolbar offers.
FONT_SIZE_CHOICES: tuple[int, ...] = (12, 14, 16, 18, 24)
