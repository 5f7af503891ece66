"""Process-wide defaults for the accessor composer.

Settings are read from the environment once and cached:

    CHAINABLE_UNKNOWN_FIELDS   "raise" (default) or "ignore"; what bulk writes
                               do with keys that have no accessor.
    CHAINABLE_LOG_LEVEL        level of the ``chainable`` logger (default WARNING).
    CHAINABLE_QUIET            "TRUE" disables call tracing by ``log_debug``.

The logging variables are also read on their own when the package is
imported (`LoggingSettings`), so a bad policy value only fails at the
first composition. Per-call options passed to :func:`chainable.compose`
take precedence.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

__all__ = [
    "UnknownFieldPolicy",
    "LoggingSettings",
    "ComposerSettings",
    "get_settings",
    "reset_settings",
    "resolve_unknown_fields",
]

UnknownFieldPolicy = Literal["raise", "ignore"]


class LoggingSettings(BaseModel):
    """Logger level and call tracing; read when the package is imported."""

    model_config = ConfigDict(frozen=True)

    log_level: str = "WARNING"
    quiet: bool = False

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        """Build logging settings from ``CHAINABLE_LOG_LEVEL`` and ``CHAINABLE_QUIET``."""
        return cls(
            log_level=os.getenv("CHAINABLE_LOG_LEVEL", "WARNING"),
            quiet=os.getenv("CHAINABLE_QUIET", "FALSE").upper() == "TRUE",
        )


class ComposerSettings(LoggingSettings):
    """Defaults applied to every composition unless overridden per call."""

    unknown_fields: UnknownFieldPolicy = "raise"

    @classmethod
    def from_env(cls) -> "ComposerSettings":
        """Build settings from ``CHAINABLE_*`` environment variables."""
        return cls(
            unknown_fields=os.getenv("CHAINABLE_UNKNOWN_FIELDS", "raise").lower(),
            **LoggingSettings.from_env().model_dump(),
        )


@lru_cache(maxsize=None)
def get_settings() -> ComposerSettings:
    """Return the cached process-wide settings."""
    return ComposerSettings.from_env()


def reset_settings() -> None:
    """Drop cached settings so the next lookup re-reads the environment."""
    get_settings.cache_clear()


def resolve_unknown_fields(policy: Optional[str] = None) -> UnknownFieldPolicy:
    """Validate a per-call policy, falling back to the configured default.

    Raises:
        pydantic.ValidationError: if ``policy`` is not "raise" or "ignore".
    """
    if policy is None:
        return get_settings().unknown_fields
    return ComposerSettings.model_validate({"unknown_fields": policy}).unknown_fields
