"""Runtime settings, read from the environment.

    TRADERS_VOICE_LOG_LEVEL     – logging level for the service and CLI (default INFO)
    TRADERS_VOICE_CORS_ORIGINS  – comma-separated origins allowed by the API
    TRADERS_VOICE_MODEL         – transcription model named in JSON exports

Every variable is optional; missing ones fall back to local-dev defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_MODEL = "Xenova/whisper-base.en"
DEFAULT_CORS_ORIGINS = ("http://localhost:5173",)
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    model: str = DEFAULT_MODEL


def load_settings() -> Settings:
    origins = os.environ.get("TRADERS_VOICE_CORS_ORIGINS", "")
    return Settings(
        log_level=os.environ.get("TRADERS_VOICE_LOG_LEVEL", "INFO").upper(),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or DEFAULT_CORS_ORIGINS,
        model=os.environ.get("TRADERS_VOICE_MODEL") or DEFAULT_MODEL,
    )


def configure_logging(settings: Settings) -> None:
    """basicConfig for entry points; unknown level names fall back to INFO."""
    level = getattr(logging, settings.log_level, None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
