"""Error taxonomy for redis_logger.

Configuration errors derive from ``RedisLoggerConfigError`` and are raised
to the caller of the builder (or of ``RedisLogger.init``) so it can decide
on a fallback before the sink is wired into ``logging``.

Transport errors during a live dispatch are never raised; they are reported
on stderr and the record is dropped.

``PoisonedConnectionError`` is the single fatal condition.  It must not be
caught and ignored; the connection state is unknown.
"""

from __future__ import annotations


class RedisLoggerConfigError(Exception):
    """Base class for every configuration-time error."""


class ClientNotSetError(RedisLoggerConfigError):
    """No Redis client or connection URL was supplied."""

    def __init__(self, message: str = "Redis client not set") -> None:
        super().__init__(message)


class ChannelNotSetError(RedisLoggerConfigError):
    """Neither channels nor streams were supplied, or a supplied list is empty."""

    def __init__(
        self,
        message: str = (
            "Channels not set. Set at least one pub/sub channel "
            "and/or one stream name."
        ),
    ) -> None:
        super().__init__(message)


class RedisConnectionError(RedisLoggerConfigError):
    """Opening a connection from a URL failed.

    The underlying ``redis`` (or URL parsing) error is chained as
    ``__cause__``.
    """


class SetLoggerError(RedisLoggerConfigError):
    """A RedisLogger is already registered on the target logger."""


class PoisonedConnectionError(RuntimeError):
    """The shared connection lock was held by an operation that crashed.

    Raised on every use of the connection after the crash.  There is no
    recovery path; the process should exit.
    """
