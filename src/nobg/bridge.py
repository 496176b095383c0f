# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

"""
The capability surface handed to the UI.

The window code never touches the file system or spawns processes itself.
It holds a Bridge, and the Bridge exposes exactly four things: pick an
image, start a job on a picked image, save a result, and subscribe to
progress. Every argument coming from the UI is checked here.
"""

from __future__ import annotations

from concurrent.futures import Future
import logging
import os
from typing import Callable, Optional

from .dispatcher import JobDispatcher
from .files import default_save_name, validate_image, write_data_url
from .models import (Canceled, Failure, ImageRecord, JobResult, ProgressEvent,
                     SaveResult, SelectResult)
from .transport import DATA_URL_PATTERN

logger = logging.getLogger(__name__)


class Dialogs:
    """Native dialogs. Both methods return a falsy value when dismissed."""

    def ask_open_path(self) -> Optional[str]:
        raise NotImplementedError

    def ask_save_path(self, default_name: str) -> Optional[str]:
        raise NotImplementedError


def _resolved(result: JobResult) -> "Future[JobResult]":
    future: Future = Future()
    future.set_result(result)
    return future


class Bridge:
    def __init__(self, dialogs: Dialogs, dispatcher: JobDispatcher):
        self._dialogs = dialogs
        self._dispatcher = dispatcher
        self._approved: Optional[str] = None
        self._progress_listener: Optional[Callable[[ProgressEvent], None]] = None

    def select_image(self, dropped_path: Optional[str] = None) -> SelectResult:
        """
        Open the picker, or validate a dropped path when one is given.

        Returns an ImageRecord, a Failure explaining why the file was refused,
        or Canceled when the picker was dismissed.
        """
        path = dropped_path if dropped_path is not None else self._dialogs.ask_open_path()
        if not path:
            return Canceled()
        if not isinstance(path, str):
            return Failure("Invalid file path.", kind="validation")

        result = validate_image(path)
        if isinstance(result, ImageRecord):
            self._approved = result.source_path
        else:
            logger.info("Refused %s: %s", path, result.reason)
        return result

    def remove_background(self, path: str) -> "Future[JobResult]":
        """Start a job. Only the image most recently returned by select_image is accepted."""
        if not isinstance(path, str) or os.path.abspath(path) != self._approved:
            logger.warning("Rejected job for unapproved path %r", path)
            return _resolved(Failure("Image was not selected in this session.",
                                     kind="validation"))
        return self._dispatcher.submit(os.path.abspath(path))

    def save_image(self, data_url: str, original_name: Optional[str] = None) -> SaveResult:
        if not isinstance(data_url, str) or not DATA_URL_PATTERN.match(data_url):
            return Failure("There is no image to save.", kind="io")

        dest = self._dialogs.ask_save_path(default_save_name(original_name))
        if not dest:
            return Canceled()
        return write_data_url(data_url, dest)

    def on_progress(self, callback: Callable[[ProgressEvent], None]) -> None:
        """Subscribe to progress. A new subscription replaces the previous one."""
        self.remove_progress_listener()
        self._progress_listener = callback
        self._dispatcher.add_listener(callback)

    def remove_progress_listener(self) -> None:
        if self._progress_listener is not None:
            self._dispatcher.remove_listener(self._progress_listener)
            self._progress_listener = None

    def close(self) -> None:
        """Drop the UI subscription and stop any running worker."""
        self.remove_progress_listener()
        self._dispatcher.shutdown()
