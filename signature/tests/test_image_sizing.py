from __future__ import annotations

import pytest

from signature.logic.image_sizing import clamp_display_size


def test_wide_image_is_clamped_by_width_first() -> None:
    assert clamp_display_size(400, 100) == (200.0, 50.0)


def test_tall_image_is_clamped_by_height_second() -> None:
    assert clamp_display_size(150, 300) == (50.0, 100.0)


def test_height_pass_runs_on_width_pass_output() -> None:
    # width pass: 500x400 -> 200x160, height pass: -> 125x100
    assert clamp_display_size(500, 400) == (125.0, 100.0)


@pytest.mark.parametrize("size", [(200, 100), (10, 10), (199.5, 99.5)])
def test_small_images_keep_their_size(size) -> None:
    assert clamp_display_size(*size) == (float(size[0]), float(size[1]))


def test_custom_caps() -> None:
    assert clamp_display_size(300, 300, max_width=150, max_height=100) == (100.0, 100.0)
