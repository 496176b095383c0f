# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

"""
Child-process side of a background-removal job.

``run_job`` is the process target. It talks to the dispatcher only through
``channel`` using two picklable message shapes:

    ("progress", phase_key, percent)
    ("complete", Success | Failure)

Exactly one "complete" message is posted per job, after which the process
returns and exits.
"""

import logging
from typing import Callable, Optional

from . import config
from .models import JobRequest, Success, failure_from_exception
from .transport import encode_data_url

logger = logging.getLogger(__name__)

MSG_PROGRESS = "progress"
MSG_COMPLETE = "complete"

Backend = Callable[..., bytes]


def to_percent(current: float, total: float) -> int:
    """Convert a ``current/total`` tick to an integer in [0, 100]."""
    if total <= 0:
        return 0
    return max(0, min(100, round(current / total * 100)))


def _default_backend() -> Backend:
    # Imported here so the GUI process never pays for loading rembg
    from .inference import remove_background
    return remove_background


def run_job(request: JobRequest, channel, backend: Optional[Backend] = None,
            log_level: Optional[str] = None) -> None:
    """Run one job and post its progress and terminal result to ``channel``."""
    if log_level:
        logging.basicConfig(level=getattr(logging, log_level, logging.INFO))

    def on_progress(key: str, current: float, total: float) -> None:
        channel.put((MSG_PROGRESS, key, to_percent(current, total)))

    try:
        remove_bg = backend or _default_backend()
        png_bytes = remove_bg(request.source_path, progress=on_progress)
        result = Success(encode_data_url(png_bytes, config.PNG_MIME))
    except Exception as e:
        logger.exception("Background removal failed for %s", request.source_path)
        result = failure_from_exception(e, kind="inference")

    channel.put((MSG_COMPLETE, result))
