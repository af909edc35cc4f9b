from __future__ import annotations
import base64
import binascii
from dataclasses import dataclass, replace
from urllib.parse import unquote_to_bytes

from .signature_enums import ImageFormat


def detect_image_format(data_url: str) -> ImageFormat:
    """
    Map a data URI's MIME prefix to the decoder to use.
    Anything that is not recognisably JPEG is decoded as PNG.
    """
    head = (data_url or "").lstrip().lower()
    if head.startswith("data:image/png"):
        return ImageFormat.PNG
    if head.startswith("data:image/jpeg") or head.startswith("data:image/jpg"):
        return ImageFormat.JPEG
    return ImageFormat.PNG


@dataclass(frozen=True)
class SignatureImage:
    """Raw image bytes plus the declared encoding."""
    data: bytes
    image_format: ImageFormat = ImageFormat.PNG

    @classmethod
    def from_data_url(cls, data_url: str) -> "SignatureImage":
        """
        Decode ``data:[<mime>][;base64],<payload>``.
        Raises ValueError when the string is not a data URI.
        """
        if not data_url or not data_url.lstrip().lower().startswith("data:"):
            raise ValueError("Signature source is not a data: URI")
        header, sep, payload = data_url.strip().partition(",")
        if not sep:
            raise ValueError("Malformed data: URI (missing ',')")
        if header.lower().endswith(";base64"):
            try:
                raw = base64.b64decode(payload, validate=False)
            except (binascii.Error, ValueError) as exc:
                raise ValueError(f"Malformed base64 payload: {exc}") from exc
        else:
            raw = unquote_to_bytes(payload)
        return cls(data=raw, image_format=detect_image_format(header))


@dataclass(frozen=True)
class SignaturePlacement:
    """
    Top-left anchor of the signature in viewport pixels (origin top-left, y-down).
    Always bound to the reference page of the export.
    """
    image: SignatureImage
    x: float = 50.0
    y: float = 50.0

    def moved(self, dx: float, dy: float) -> "SignaturePlacement":
        """Apply a drag delta."""
        return replace(self, x=self.x + dx, y=self.y + dy)
