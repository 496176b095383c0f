# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

"""
Thin adapter over rembg.

The segmentation itself is rembg's business. This module only fixes the
I/O contract used by the worker: a file path goes in, PNG bytes come out,
and a ``progress(phase_key, current, total)`` callback is ticked as the
model is acquired and the mask is computed.
"""

from io import BytesIO
import logging
from typing import Callable, Optional

from PIL import Image, ImageOps
from rembg import new_session, remove

from . import config

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


def _noop(key: str, current: int, total: int) -> None:
    pass


def remove_background(path: str, progress: Optional[ProgressCallback] = None,
                      model_name: Optional[str] = None) -> bytes:
    """
    Takes an image path, returns PNG bytes with the background removed.
    """
    progress = progress or _noop
    model_name = model_name or config.get_settings().model_name

    with Image.open(path) as src:
        image = ImageOps.exif_transpose(src)
        image.load()

    # First use downloads the ONNX weights into rembg's cache
    progress(config.PHASE_MODEL, 0, 1)
    session = new_session(model_name)
    progress(config.PHASE_MODEL, 1, 1)
    logger.info("Model ready: %s", model_name)

    progress(config.PHASE_COMPUTE, 0, 1)
    result = remove(image, session=session)
    progress(config.PHASE_COMPUTE, 1, 1)

    buf = BytesIO()
    result.save(buf, format="PNG")
    return buf.getvalue()
