# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

"""
Configuration for nobg.

Fixed values that define the application's behaviour live here as module
constants. A small set of operational knobs can be tuned through ``NOBG_*``
environment variables; nothing is ever written back to disk.
"""

from functools import lru_cache
import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_EXT = (".jpg", ".jpeg", ".png", ".webp")
MAX_FILE_SIZE_MB = 20
MAX_FILE_SIZE = MAX_FILE_SIZE_MB * 1024 * 1024
PREVIEW_SIZE = 420

OPEN_FILETYPES = [("Images", "*.jpg *.jpeg *.png *.webp")]
SAVE_FILETYPES = [("PNG Image", "*.png")]
SAVE_SUFFIX = "_no_bg.png"
DEFAULT_SAVE_NAME = "image" + SAVE_SUFFIX

PNG_MIME = "image/png"

# Progress phase keys reported by the inference adapter
PHASE_MODEL = "model-acquisition"
PHASE_COMPUTE = "computation"

WORKER_CRASHED = "worker terminated unexpectedly"
JOB_IN_PROGRESS = "a job is already in progress"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NOBG_", case_sensitive=False)

    # rembg model used by the worker
    model_name: str = "u2net"
    log_level: str = "INFO"

    # Dispatcher tuning
    poll_interval_seconds: float = 0.1
    drain_grace_seconds: float = 0.5
    start_method: str = "spawn"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v}")
        return level

    @field_validator("start_method")
    @classmethod
    def validate_start_method(cls, v: str) -> str:
        if v not in {"spawn", "fork", "forkserver"}:
            raise ValueError("NOBG_START_METHOD must be one of spawn|fork|forkserver")
        return v

    @field_validator("poll_interval_seconds", "drain_grace_seconds")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("intervals must be positive")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings to avoid reparsing env on every call."""
    return Settings()
