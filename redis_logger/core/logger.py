"""RedisLogger: a ``logging.Handler`` that forwards records to Redis.

For every admitted record the handler:

1. encodes it once per configured delivery mode (no lock held),
2. queues one ``PUBLISH`` per channel and one ``XADD <stream> *`` per
   stream on a single pipeline, reusing the encoded payloads,
3. sends the pipeline in one round trip under the connection lock.

Delivery is fire-and-forget.  A transport failure is printed to stderr and
the record is dropped; nothing is raised into the logging call site and no
state is kept, so the next record is attempted normally.  The only error
that escapes is ``PoisonedConnectionError``.
"""

from __future__ import annotations

import logging
import threading

from rich.console import Console

from redis_logger.core.connection import TRANSPORT_ERRORS
from redis_logger.core.diagnostics import report_delivery_failure
from redis_logger.errors import PoisonedConnectionError, SetLoggerError
from redis_logger.models.config import RedisLoggerConfig
from redis_logger.models.record import Level, LevelFilter, LogRecord

logger = logging.getLogger(__name__)

_registration_lock = threading.Lock()


class RedisLogger(logging.Handler):
    """Publishes records to pub/sub channels and/or appends them to streams.

    Parameters
    ----------
    level:
        Least severe level still delivered.
    config:
        Validated configuration, usually from ``RedisLoggerConfigBuilder``.
    console:
        Where delivery failures are reported.  Defaults to stderr.
    """

    def __init__(
        self,
        level: LevelFilter,
        config: RedisLoggerConfig,
        console: Console | None = None,
    ) -> None:
        super().__init__(level=level.to_logging())
        self._threshold = level
        self._config = config
        self._console = console
        self._attached_to: logging.Logger | None = None

    @property
    def threshold(self) -> LevelFilter:
        return self._threshold

    @property
    def config(self) -> RedisLoggerConfig:
        return self._config

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    @classmethod
    def init(
        cls,
        level: LevelFilter,
        config: RedisLoggerConfig,
        logger: logging.Logger | None = None,
        console: Console | None = None,
    ) -> RedisLogger:
        """Create a handler and register it on *logger* (root by default).

        Also sets the logger's level to the threshold.  Only one
        RedisLogger may be registered per logger.

        Raises
        ------
        SetLoggerError
            A RedisLogger is already registered on that logger.
        """
        target = logger if logger is not None else logging.getLogger()
        with _registration_lock:
            if any(isinstance(h, RedisLogger) for h in target.handlers):
                raise SetLoggerError(
                    f"A RedisLogger is already registered on logger {target.name!r}"
                )
            handler = cls(level, config, console=console)
            _log_registration(handler, target)
            target.setLevel(level.to_logging())
            target.addHandler(handler)
            handler._attached_to = target
        return handler

    def close(self) -> None:
        """Detach from the logger ``init`` registered on.

        The connection belongs to the config; close it with
        ``config.close()``.
        """
        if self._attached_to is not None:
            self._attached_to.removeHandler(self)
            self._attached_to = None
        super().close()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def is_enabled(self, level: Level) -> bool:
        """True iff *level* is at least as severe as the threshold."""
        return self._threshold.admits(level)

    def dispatch(self, record: LogRecord) -> None:
        """Deliver *record* in one pipeline round trip.

        Transport errors are reported and swallowed.

        Raises
        ------
        PoisonedConnectionError
            The connection lock was poisoned by an earlier crash.
        """
        if not self.is_enabled(record.level):
            return

        config = self._config
        message = (
            config.channels.encoder.encode(record) if config.channels is not None else None
        )
        fields = (
            dict(config.streams.encoder.encode(record)) if config.streams is not None else None
        )

        try:
            # redis-py rejects some commands while queueing (e.g. XADD
            # with no fields); those count as delivery failures too
            pipe = config.connection.pipeline(transaction=config.transaction)
            if message is not None:
                for channel in config.channels.names:
                    pipe.publish(channel, message)
            if fields is not None:
                for stream in config.streams.names:
                    pipe.xadd(stream, fields, id="*")
            config.connection.execute(pipe)
        except TRANSPORT_ERRORS as exc:
            report_delivery_failure(exc, self._console)

    def handle(self, record: logging.LogRecord) -> logging.LogRecord | bool:
        # Handler.handle would hold self.lock around emit and serialize
        # encoding; only the network call needs the connection lock.
        rv = self.filter(record)
        if isinstance(rv, logging.LogRecord):
            record = rv
        if rv:
            self.emit(record)
        return rv

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.dispatch(LogRecord.from_logging(record))
        except PoisonedConnectionError:
            raise
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        """No-op: nothing is buffered."""

    def __repr__(self) -> str:
        config = self._config
        channels = list(config.channels.names) if config.channels else []
        streams = list(config.streams.names) if config.streams else []
        return (
            f"<RedisLogger ({self._threshold.name}) "
            f"channels={channels} streams={streams}>"
        )


def _log_registration(handler: RedisLogger, target: logging.Logger) -> None:
    # emitted before the handler is attached so it does not reach Redis
    logger.debug(
        "Registering %r on logger %r", handler, target.name or "root"
    )
