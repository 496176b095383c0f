# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

"""Validation of input images and writing of results to disk."""

import logging
import os
from typing import Optional, Union

from . import config
from .models import Failure, ImageRecord, Saved, failure_from_exception
from .transport import decode_data_url, encode_data_url, mime_type_for

logger = logging.getLogger(__name__)


def validate_image(path: str) -> Union[ImageRecord, Failure]:
    """
    Turn a chosen or dropped path into an ImageRecord.

    Bad extensions and oversize files come back as a validation Failure,
    unreadable files as an io Failure. Nothing here raises for those cases.
    """
    if not path.lower().endswith(config.SUPPORTED_EXT):
        return Failure("Unsupported file type. Use JPG, PNG, or WebP.", kind="validation")

    try:
        size = os.path.getsize(path)
    except OSError as e:
        return failure_from_exception(e, kind="io", prefix="Cannot read file")

    if size > config.MAX_FILE_SIZE:
        return Failure(
            f"File too large. Maximum size is {config.MAX_FILE_SIZE_MB} MiB.",
            kind="validation",
        )

    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        return failure_from_exception(e, kind="io", prefix="Cannot read file")

    mime = mime_type_for(path)
    logger.debug("Loaded %s (%d bytes, %s)", path, len(data), mime)
    return ImageRecord(
        source_path=os.path.abspath(path),
        encoded_bytes=encode_data_url(data, mime),
        display_name=os.path.basename(path),
        byte_size=len(data),
        mime_type=mime,
    )


def default_save_name(original_name: Optional[str]) -> str:
    """``photo.jpg`` -> ``photo_no_bg.png``."""
    if not original_name:
        return config.DEFAULT_SAVE_NAME
    stem = os.path.splitext(os.path.basename(original_name))[0]
    return (stem or "image") + config.SAVE_SUFFIX


def write_data_url(data_url: str, dest: str) -> Union[Saved, Failure]:
    """Decode a data URL and write the raw bytes to ``dest``."""
    try:
        data = decode_data_url(data_url)
        with open(dest, "wb") as f:
            f.write(data)
    except (OSError, ValueError) as e:
        logger.warning("Failed to save %s: %s", dest, e)
        return failure_from_exception(e, kind="io")
    logger.info("Saved %d bytes to %s", len(data), dest)
    return Saved(path=dest)
