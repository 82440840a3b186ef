"""redis_logger: forward ``logging`` records to Redis pub/sub channels and streams.

Each admitted record is encoded once per delivery mode and sent as a single
pipeline (N ``PUBLISH`` + M ``XADD``) in one network round trip.

Quick start::

    import logging
    from redis_logger import LevelFilter, RedisLogger, RedisLoggerConfigBuilder

    config = RedisLoggerConfigBuilder.with_pubsub_and_streams_default(
        "redis://localhost:6379/0", ["logging"], ["logs"]
    ).build()
    RedisLogger.init(LevelFilter.DEBUG, config)
    logging.getLogger("my_app").info("hello")
"""

__version__ = "0.4.1"
__description__ = (
    "A logging handler that writes records to Redis pub/sub channels, "
    "streams, or both"
)

from redis_logger.config import LoggerSettings
from redis_logger.core.builder import RedisLoggerConfigBuilder
from redis_logger.core.connection import ConnectionGuard
from redis_logger.core.logger import RedisLogger
from redis_logger.encoders import (
    NULL_PLACEHOLDER,
    DefaultPubSubEncoder,
    DefaultStreamEncoder,
    PubSubEncoder,
    StreamEncoder,
)
from redis_logger.errors import (
    ChannelNotSetError,
    ClientNotSetError,
    PoisonedConnectionError,
    RedisConnectionError,
    RedisLoggerConfigError,
    SetLoggerError,
)
from redis_logger.models import (
    ChannelSet,
    Level,
    LevelFilter,
    LogRecord,
    RedisLoggerConfig,
    StreamSet,
)

__all__ = [
    "__version__",
    # sink
    "RedisLogger",
    "RedisLoggerConfigBuilder",
    "RedisLoggerConfig",
    "ChannelSet",
    "StreamSet",
    "ConnectionGuard",
    "LoggerSettings",
    # records
    "Level",
    "LevelFilter",
    "LogRecord",
    # encoders
    "PubSubEncoder",
    "StreamEncoder",
    "DefaultPubSubEncoder",
    "DefaultStreamEncoder",
    "NULL_PLACEHOLDER",
    # errors
    "RedisLoggerConfigError",
    "ClientNotSetError",
    "ChannelNotSetError",
    "RedisConnectionError",
    "SetLoggerError",
    "PoisonedConnectionError",
]
