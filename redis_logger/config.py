"""Environment-driven settings for the Redis logger.

Centralized config using pydantic-settings.  Reads from a .env file and
REDIS_LOGGER_* environment variables.  List settings are JSON arrays.

Examples
--------
Override via environment::

    export REDIS_LOGGER_URL=redis://:secret@redis.internal:6379/2
    export REDIS_LOGGER_CHANNELS='["logging"]'
    export REDIS_LOGGER_STREAMS='["logs", "audit"]'
    export REDIS_LOGGER_LEVEL=DEBUG

Then::

    settings = LoggerSettings()
    config = RedisLoggerConfigBuilder.from_settings(settings).build()
    RedisLogger.init(settings.threshold, config)
"""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from redis_logger.models.record import LevelFilter


class LoggerSettings(BaseSettings):
    """Connection, destinations and threshold of a Redis logger."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="REDIS_LOGGER_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = "redis://localhost:6379/0"
    channels: list[str] = []
    streams: list[str] = []
    level: str = "INFO"
    transaction: bool = False

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        LevelFilter.parse(value)  # raises ValueError on unknown names
        return value.upper()

    @property
    def threshold(self) -> LevelFilter:
        """The parsed ``level`` setting."""
        return LevelFilter.parse(self.level)
