from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from nobg.models import Failure
from nobg.preview import composite_np, make_checkerboard, render_preview, thumbnail_from_data_url
from nobg.transport import encode_data_url


def _png_data_url(img):
    buf = BytesIO()
    img.save(buf, format="PNG")
    return encode_data_url(buf.getvalue(), "image/png")


def test_checkerboard_shape_and_tiles():
    board = make_checkerboard(30, 20, tile=10)
    assert board.shape == (20, 30, 3)
    assert board.dtype == np.uint8
    assert tuple(board[0, 0]) == (200, 200, 200)
    assert tuple(board[0, 10]) == (155, 155, 155)
    assert tuple(board[10, 10]) == (200, 200, 200)


def test_composite_respects_alpha():
    rgba = np.zeros((4, 4, 4), dtype=np.uint8)
    rgba[..., 0] = 255
    rgba[:2, :, 3] = 255
    out = composite_np(rgba)
    checker = make_checkerboard(4, 4)
    assert (out[:2] == [255, 0, 0]).all()
    assert (out[2:] == checker[2:]).all()


def test_thumbnail_fits_and_is_rgb():
    url = _png_data_url(Image.new("RGBA", (800, 400), (0, 0, 0, 0)))
    thumb = thumbnail_from_data_url(url, 200)
    assert thumb.size == (200, 100)
    assert thumb.mode == "RGB"


def test_thumbnail_without_checker_keeps_alpha():
    url = _png_data_url(Image.new("RGBA", (50, 50), (10, 20, 30, 0)))
    thumb = thumbnail_from_data_url(url, 100, checker=False)
    assert thumb.mode == "RGBA"
    assert thumb.size == (50, 50)


def test_render_preview_returns_image():
    url = _png_data_url(Image.new("RGBA", (40, 20), (0, 0, 0, 255)))
    thumb = render_preview(url, 10)
    assert isinstance(thumb, Image.Image)
    assert thumb.size == (10, 5)


def test_oversized_canvas_becomes_a_message(monkeypatch):
    # A small file can still declare a huge canvas; shrink the limit so the
    # bomb check trips on a tiny image.
    url = _png_data_url(Image.new("L", (60, 60)))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(Image.DecompressionBombError):
        thumbnail_from_data_url(url, 32)

    result = render_preview(url, 32)
    assert isinstance(result, Failure)
    assert result.kind == "validation"
    assert result.reason.startswith("Image too large to preview")


def test_undecodable_payload_becomes_a_message():
    result = render_preview(encode_data_url(b"not an image", "image/png"), 32)
    assert isinstance(result, Failure)
    assert result.kind == "io"
    assert result.reason.startswith("Cannot show preview")
