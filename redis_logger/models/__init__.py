"""redis_logger data models: all Pydantic v2, all frozen (immutable)."""

from redis_logger.models.record import Level, LevelFilter, LogRecord
from redis_logger.models.config import ChannelSet, RedisLoggerConfig, StreamSet

__all__ = [
    # record
    "Level",
    "LevelFilter",
    "LogRecord",
    # config
    "ChannelSet",
    "StreamSet",
    "RedisLoggerConfig",
]
