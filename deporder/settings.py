"""Runtime configuration.

Values come from ``DEPORDER_*`` environment variables (optionally populated
from a ``.env`` file by the CLI); command-line options take precedence.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "DEPORDER_"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_logging_configured = False


class Settings(BaseModel):
    log_level: str = Field(default="WARNING", description="Python logging level")
    max_workers: int | None = Field(
        default=None, ge=1, description="Concurrent source scans (None = unbounded)"
    )
    queue_size: int = Field(default=10, ge=1, description="Signal queue capacity")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"Invalid log level '{v}' (expected one of {LOG_LEVELS})")
        return v

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        data = {}
        for field_name in cls.model_fields:
            raw = env.get(ENV_PREFIX + field_name.upper())
            if raw not in (None, ""):
                data[field_name] = raw
        return cls.model_validate(data)


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging once, then only adjust the level."""
    global _logging_configured
    level_value = getattr(logging, level.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    if not _logging_configured:
        logging.basicConfig(level=level_value, format=LOG_FORMAT)
        _logging_configured = True
    root_logger.setLevel(level_value)
    for handler in root_logger.handlers:
        handler.setLevel(level_value)


__all__ = ["ENV_PREFIX", "LOG_LEVELS", "Settings", "configure_logging"]
