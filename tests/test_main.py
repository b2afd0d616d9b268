"""Test the icon rendering HTTP endpoint.

Tests for main:
    - GET usage information
    - POST renders a PNG download with the requested size
    - Sticker form fields are honored
    - Non-SVG uploads, bad colors, broken SVG, oversized canvases and out-of-range steps are rejected

Requires the native cairo library; skipped when it cannot be loaded.

Run:
    pytest tests/test_main.py -v
"""
import io

import pytest
from PIL import Image

try:
    import cairosvg  # noqa: F401
except (ImportError, OSError) as e:
    pytest.skip(f"cairosvg is not usable here: {e}", allow_module_level=True)

import main

from fastapi.testclient import TestClient

BLUE_SQUARE = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="20" height="20">'
    b'<rect width="20" height="20" fill="#0000ff"/></svg>'
)


@pytest.fixture
def client():
    return TestClient(main.app)


def post_svg(client, data=None, content=BLUE_SQUARE, filename="logo.svg", content_type="image/svg+xml"):
    return client.post(
        "/render-icon/",
        files={"file": (filename, content, content_type)},
        data=data or {},
    )


def test_usage(client):
    response = client.get("/render-icon/")
    assert response.status_code == 200
    body = response.json()
    assert "usage" in body
    assert body["defaults"]["width"] == 128


def test_render_default_icon(client):
    response = post_svg(client)
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert 'filename="icon.png"' in response.headers["content-disposition"]

    image = Image.open(io.BytesIO(response.content)).convert("RGBA")
    assert image.size == (128, 128)
    assert image.getpixel((64, 64)) == (0, 0, 255, 255)
    assert image.getpixel((1, 1))[3] == 0


def test_render_sticker_icon(client):
    response = post_svg(client, data={
        "width": "64",
        "height": "48",
        "padding": "2",
        "sticker_effect": "true",
        "sticker_color": "#ff0000",
        "sticker_padding": "6",
    })
    assert response.status_code == 200

    image = Image.open(io.BytesIO(response.content)).convert("RGBA")
    assert image.size == (64, 48)
    # Artwork is a 32px square at x=16..48; the outline reaches 6px past its left edge
    assert image.getpixel((32, 24)) == (0, 0, 255, 255)
    assert image.getpixel((11, 24)) == (255, 0, 0, 255)


def test_background_color(client):
    response = post_svg(client, data={"background_color": "#00ff00", "padding": "70"})
    assert response.status_code == 200
    image = Image.open(io.BytesIO(response.content)).convert("RGBA")
    assert image.getpixel((64, 64)) == (0, 255, 0, 255)


def test_rejects_non_svg(client):
    response = post_svg(client, content=b"\x89PNG....", filename="logo.png", content_type="image/png")
    assert response.status_code == 400


def test_rejects_bad_color(client):
    response = post_svg(client, data={"sticker_color": "not-a-color"})
    assert response.status_code == 400


def test_rejects_broken_svg(client):
    response = post_svg(client, content=b"<svg><broken></svg>")
    assert response.status_code == 400


def test_rejects_zero_width(client):
    response = post_svg(client, data={"width": "0"})
    assert response.status_code == 400


def test_rejects_huge_canvas(client):
    response = post_svg(client, data={"width": str(main.MAX_CANVAS_SIZE + 1)})
    assert response.status_code == 400


@pytest.mark.parametrize("steps", ["0", str(main.MAX_STROKE_STEPS + 1)])
def test_rejects_out_of_range_steps(client, steps):
    response = post_svg(client, data={"steps": steps})
    assert response.status_code == 400
    assert str(main.MAX_STROKE_STEPS) in response.json()["detail"]


def test_rejects_empty_upload(client):
    response = post_svg(client, content=b"")
    assert response.status_code == 400
