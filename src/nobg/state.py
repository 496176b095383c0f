# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

"""
UI state owner.

    IDLE -> LOADED -> PROCESSING -> DONE | FAILED
              ^                        |
              +------- load / start ---+

Only one job can be PROCESSING; the window asks ``busy`` before reacting to
clicks and drops.
"""

from enum import Enum
from typing import Optional

from .models import Failure, ImageRecord, JobResult, ProgressEvent, Success


class Phase(str, Enum):
    IDLE = "idle"
    LOADED = "loaded"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


class StateError(RuntimeError):
    """Raised on a transition the current phase does not allow."""


class UIState:
    def __init__(self):
        self._reset()

    def _reset(self):
        self.phase = Phase.IDLE
        self.current_image: Optional[ImageRecord] = None
        self.processed_image: Optional[str] = None
        self.last_error: Optional[str] = None
        self.progress: Optional[ProgressEvent] = None

    @property
    def busy(self) -> bool:
        return self.phase is Phase.PROCESSING

    @property
    def can_start(self) -> bool:
        return self.current_image is not None and not self.busy

    @property
    def can_save(self) -> bool:
        return self.phase is Phase.DONE and self.processed_image is not None

    def _require_idle(self, action: str):
        if self.busy:
            raise StateError(f"cannot {action} while a job is running")

    def load(self, record: ImageRecord):
        self._require_idle("load an image")
        self.current_image = record
        self.processed_image = None
        self.last_error = None
        self.progress = None
        self.phase = Phase.LOADED

    def start(self):
        if not self.can_start:
            raise StateError(f"cannot start a job from {self.phase.value}")
        self.processed_image = None
        self.last_error = None
        self.progress = None
        self.phase = Phase.PROCESSING

    def apply_progress(self, event: ProgressEvent) -> bool:
        """Record the latest tick. Late ticks after a result are dropped."""
        if not self.busy:
            return False
        self.progress = event
        return True

    def finish(self, result: JobResult):
        if not self.busy:
            raise StateError("no job is running")
        if isinstance(result, Success):
            self.processed_image = result.encoded_image_bytes
            self.phase = Phase.DONE
        elif isinstance(result, Failure):
            self.last_error = result.reason
            self.phase = Phase.FAILED
        else:
            raise TypeError(f"unexpected job result: {result!r}")
        self.progress = None

    def clear(self):
        self._require_idle("clear")
        self._reset()
