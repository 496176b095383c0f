# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

from io import BytesIO
import logging
from typing import Union

from PIL import Image
import numpy as np

from .models import Failure, failure_from_exception
from .transport import decode_data_url

logger = logging.getLogger(__name__)


def make_checkerboard(width: int, height: int, tile: int = 12, dark: bool = False) -> np.ndarray:
    """Generate an RGB checkerboard numpy array (fast, no Python loops)."""
    xs   = np.arange(width)  // tile
    ys   = np.arange(height) // tile
    mask = (xs[np.newaxis, :] + ys[:, np.newaxis]) % 2 == 0

    c1, c2 = (60, 40) if dark else (200, 155)

    arr  = np.where(mask[:, :, np.newaxis], c1, c2).astype(np.uint8)
    return np.repeat(arr, 3, axis=2)


def composite_np(rgba_np: np.ndarray, dark_bg: bool = False) -> np.ndarray:
    """Composite an RGBA numpy array onto a checkerboard so transparency is visible."""
    h, w    = rgba_np.shape[:2]
    checker = make_checkerboard(w, h, dark=dark_bg)
    alpha   = rgba_np[:, :, 3:4].astype(np.float32) / 255.0
    rgb     = rgba_np[:, :, :3].astype(np.float32)
    result  = rgb * alpha + checker.astype(np.float32) * (1.0 - alpha)
    return np.clip(result, 0, 255).astype(np.uint8)


def thumbnail_from_data_url(data_url: str, size: int, checker: bool = True) -> Image.Image:
    """
    Decode a data URL into a display-sized RGB image.

    With ``checker`` set, transparent regions are shown over a checkerboard.
    """
    with Image.open(BytesIO(decode_data_url(data_url))) as src:
        img = src.convert("RGBA")
    img.thumbnail((size, size), Image.Resampling.LANCZOS)
    if checker:
        return Image.fromarray(composite_np(np.array(img, dtype=np.uint8)))
    return img


def render_preview(data_url: str, size: int, checker: bool = True) -> Union[Image.Image, Failure]:
    """Like thumbnail_from_data_url, but an undisplayable image becomes a Failure."""
    try:
        return thumbnail_from_data_url(data_url, size, checker=checker)
    except Image.DecompressionBombError as e:
        logger.warning("Preview refused, image too large: %s", e)
        return failure_from_exception(e, kind="validation", prefix="Image too large to preview")
    except Exception as e:
        logger.exception("Cannot render preview")
        return failure_from_exception(e, kind="io", prefix="Cannot show preview")
