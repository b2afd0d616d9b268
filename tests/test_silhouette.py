"""Test silhouette extraction (alpha-preserving recolor).

Tests for icon_library.silhouette:
    - Opaque and translucent pixels take the silhouette color, alpha kept
    - Transparent source pixels and pixels outside the rect stay transparent
    - No third color appears, even with fractional placement
    - Upscaled sources keep their alpha up to the rect boundary

Run:
    pytest tests/test_silhouette.py -v
"""
import numpy as np
import pytest

from icon_library.fitter import FitRect
from icon_library.silhouette import extract_silhouette
from icon_library.canvas import SourceImage

STICKER = (10, 200, 30, 255)


@pytest.fixture
def patterned_source():
    """8x8 source with random colors and a mix of alpha levels."""
    rng = np.random.default_rng(7)
    rgba = rng.integers(0, 256, size=(8, 8, 4), dtype=np.uint8)
    rgba[..., 3] = rng.choice(np.array([0, 64, 128, 255], dtype=np.uint8), size=(8, 8))
    return SourceImage(rgba)


def test_alpha_preserved_and_color_replaced(patterned_source):
    silhouette = extract_silhouette(patterned_source, FitRect(x=4, y=4, width=8, height=8), STICKER, (16, 16))
    out = silhouette.to_array()
    region = out[4:12, 4:12]

    np.testing.assert_array_equal(region[..., 3], patterned_source.pixels[..., 3])
    visible = region[..., 3] > 0
    assert (region[visible][:, :3] == STICKER[:3]).all()
    assert not region[~visible].any()


def test_outside_rect_is_transparent(patterned_source):
    out = extract_silhouette(patterned_source, FitRect(x=4, y=4, width=8, height=8), STICKER, (16, 16)).to_array()
    mask = np.ones((16, 16), dtype=bool)
    mask[4:12, 4:12] = False
    assert not out[mask].any()


def test_size_matches_destination(patterned_source):
    silhouette = extract_silhouette(patterned_source, FitRect(x=0, y=0, width=8, height=8), STICKER, (30, 20))
    assert silhouette.size == (30, 20)


@pytest.mark.parametrize("color", [(255, 255, 255, 255), (0, 0, 0, 255), (17, 99, 250, 255), (200, 10, 10, 128)])
def test_only_silhouette_color_or_transparent(patterned_source, color):
    # Fractional scale and offset exercise the bilinear path
    rect = FitRect(x=3.3, y=2.7, width=13.1, height=13.1)
    out = extract_silhouette(patterned_source, rect, color, (20, 20)).to_array()

    visible = out[..., 3] > 0
    assert visible.any()
    assert (out[visible][:, :3] == color[:3]).all()
    assert not out[~visible].any()


def test_translucent_color_scales_alpha():
    source = SourceImage(np.full((4, 4, 4), [9, 9, 9, 255], dtype=np.uint8))
    out = extract_silhouette(source, FitRect(x=0, y=0, width=4, height=4), "#ff000080", (4, 4)).to_array()
    assert (out == [255, 0, 0, 128]).all()


def test_upscaled_opaque_source_stays_opaque():
    source = SourceImage(np.full((4, 4, 4), [0, 0, 0, 255], dtype=np.uint8))
    out = extract_silhouette(source, FitRect(x=0, y=0, width=64, height=64), "#ffffff", (64, 64)).to_array()
    assert out[..., 3].min() == 255
    assert (out == [255, 255, 255, 255]).all()


def test_upscaled_interior_keeps_source_alpha():
    source = SourceImage(np.full((4, 4, 4), [50, 60, 70, 128], dtype=np.uint8))
    out = extract_silhouette(source, FitRect(x=8, y=8, width=48, height=48), STICKER, (64, 64)).to_array()
    assert (out[8:56, 8:56, 3] == 128).all()
    assert (out[8:56, 8:56, :3] == STICKER[:3]).all()
    assert not out[:8].any()
    assert not out[:, 56:].any()


def test_fully_transparent_source_gives_empty_silhouette():
    source = SourceImage(np.zeros((6, 6, 4), dtype=np.uint8))
    out = extract_silhouette(source, FitRect(x=1, y=1, width=6, height=6), STICKER, (8, 8)).to_array()
    assert not out.any()
