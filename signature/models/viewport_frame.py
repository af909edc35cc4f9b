from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ViewportFrame:
    """
    Pixel size of the on-screen rendering of the reference page.
    """
    width: float
    height: float

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            raise ValueError(f"Viewport size must be positive, got {self.width}x{self.height}")
