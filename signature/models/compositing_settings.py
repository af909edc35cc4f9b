# signature/models/compositing_settings.py
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from core.config.config_service import ConfigService


@dataclass(frozen=True)
class CompositingSettings:
    """
    Constants the engine applies while baking overlays.

    Padding mirrors the rendered padding of the on-screen text box and is
    expressed in viewport pixels. The signature caps are in the same pixel
    space as the signature anchor.
    """
    padding_top: float = 4.0
    padding_left: float = 8.0
    signature_max_width: float = 200.0
    signature_max_height: float = 100.0
    output_suffix: str = "-signed"

    @classmethod
    def from_config(cls, config: Optional["ConfigService"] = None) -> "CompositingSettings":
        if config is None:
            from core.config.config_service import config_service as config
        c = config.compositing
        return cls(
            padding_top=c.padding_top,
            padding_left=c.padding_left,
            signature_max_width=c.signature_max_width,
            signature_max_height=c.signature_max_height,
            output_suffix=c.output_suffix,
        )


@dataclass(frozen=True)
class ComposeResult:
    """Serialized output of one export."""
    data: bytes
    file_name: str
