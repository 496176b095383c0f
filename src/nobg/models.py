# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

"""Value objects passed between the UI, the bridge and the worker process."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Union

FailureKind = Literal["validation", "io", "inference"]


@dataclass(frozen=True)
class ImageRecord:
    source_path: str
    encoded_bytes: str   # data URL
    display_name: str
    byte_size: int
    mime_type: str


@dataclass(frozen=True)
class JobRequest:
    source_path: str


@dataclass(frozen=True)
class ProgressEvent:
    phase_key: str
    percent_complete: int


@dataclass(frozen=True)
class Success:
    encoded_image_bytes: str

    ok = True


@dataclass(frozen=True)
class Failure:
    reason: str
    kind: FailureKind = "inference"

    ok = False


@dataclass(frozen=True)
class Saved:
    path: str


@dataclass(frozen=True)
class Canceled:
    """A dialog was dismissed by the user. Not an error."""


JobResult = Union[Success, Failure]
SelectResult = Union[ImageRecord, Failure, Canceled]
SaveResult = Union[Saved, Failure, Canceled]


def failure_from_exception(exc: BaseException, kind: FailureKind = "inference",
                           prefix: Optional[str] = None) -> Failure:
    """Build a Failure with a readable reason, falling back to the exception type."""
    reason = str(exc) or type(exc).__name__
    if prefix:
        reason = f"{prefix}: {reason}"
    return Failure(reason=reason, kind=kind)
