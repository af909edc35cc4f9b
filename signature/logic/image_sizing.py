from __future__ import annotations

from typing import Tuple


def clamp_display_size(width: float, height: float, *,
                       max_width: float = 200.0,
                       max_height: float = 100.0) -> Tuple[float, float]:
    """
    Shrink an image box in two passes, width cap first, then height cap.

    400x100 -> 200x50; 150x300 -> 50x100. The passes are not a single
    fit-in-box computation: the height pass runs on the output of the
    width pass.
    """
    w, h = float(width), float(height)
    if w > max_width:
        h = (max_width / w) * h
        w = max_width
    if h > max_height:
        w = (max_height / h) * w
        h = max_height
    return w, h
