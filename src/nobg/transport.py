# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

"""
Data-URL helpers.

Image bytes never cross the process boundary raw: they travel as
``data:<mime>;base64,<payload>`` strings, which are also what the preview
and save paths consume.
"""

import base64
import binascii
import os
import re

DATA_URL_PATTERN = re.compile(r"^data:image/\w+;base64,")

_MIME_BY_EXT = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}


def mime_type_for(path: str) -> str:
    """Derive the image MIME type from a file extension."""
    ext = os.path.splitext(path)[1][1:].lower()
    return _MIME_BY_EXT.get(ext, f"image/{ext}" if ext else "application/octet-stream")


def encode_data_url(data: bytes, mime_type: str) -> str:
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def decode_data_url(text: str) -> bytes:
    """
    Strip the data-URL prefix and return the raw bytes.

    Raises:
        ValueError: when the prefix is missing or the payload is not base64.
    """
    match = DATA_URL_PATTERN.match(text)
    if not match:
        raise ValueError("Not an image data URL")
    try:
        return base64.b64decode(text[match.end():], validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 payload: {exc}") from exc
