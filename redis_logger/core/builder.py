"""RedisLoggerConfigBuilder: fluent, validated construction of a config.

Setters may be called in any order; each one records its value and
overwrites whatever that slot held before (last write wins).  ``build()``
validates and either returns a ``RedisLoggerConfig`` or raises a typed
``RedisLoggerConfigError``.  ``build_or_exit()`` is the aborting variant
for fixed startup configuration.

Usage
-----
>>> config = (
...     RedisLoggerConfigBuilder()
...     .connection_url("redis://localhost:6379/0")
...     .channels(["logging"])
...     .streams(["logs"], MyStreamEncoder())
...     .build()
... )

or, per delivery mode:

>>> config = RedisLoggerConfigBuilder.with_pubsub_default(
...     "redis://localhost:6379/0", ["logging"]
... ).build()
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, NoReturn, Union

import redis
from rich.console import Console

from redis_logger.core.connection import ConnectionGuard
from redis_logger.core.diagnostics import report_config_error
from redis_logger.encoders import (
    DefaultPubSubEncoder,
    DefaultStreamEncoder,
    PubSubEncoder,
    StreamEncoder,
    is_encoder,
)
from redis_logger.errors import (
    ChannelNotSetError,
    ClientNotSetError,
    RedisConnectionError,
    RedisLoggerConfigError,
)
from redis_logger.models.config import ChannelSet, RedisLoggerConfig, StreamSet

if TYPE_CHECKING:
    from redis_logger.config import LoggerSettings

logger = logging.getLogger(__name__)

ConnectionLike = Union[redis.Redis, str]


def _names(names: Sequence[str]) -> list[str]:
    # a bare string is a Sequence[str] too, of its characters
    if isinstance(names, (str, bytes)):
        raise TypeError(f"Expected a list of names, got {names!r}")
    return list(names)


def _require_names(names: Sequence[str]) -> list[str]:
    names = _names(names)
    if not names:
        raise ChannelNotSetError()
    return names


class RedisLoggerConfigBuilder:
    """Collects connection, channels and streams, then validates them."""

    def __init__(self) -> None:
        self._client: redis.Redis | None = None
        self._url: str | None = None
        self._channels: tuple[list[str], PubSubEncoder] | None = None
        self._streams: tuple[list[str], StreamEncoder] | None = None
        self._transaction = False

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def connection(self, client: redis.Redis) -> RedisLoggerConfigBuilder:
        """Use an already-open client.  Replaces any URL set before."""
        self._client = client
        self._url = None
        return self

    def connection_url(self, url: str) -> RedisLoggerConfigBuilder:
        """Open a client from *url* at ``build()``.  Replaces any client set before."""
        self._url = url
        self._client = None
        return self

    def channels(
        self, names: Sequence[str], encoder: PubSubEncoder | None = None
    ) -> RedisLoggerConfigBuilder:
        """Publish to *names*, encoding with *encoder* (default JSON)."""
        if encoder is None:
            encoder = DefaultPubSubEncoder()
        elif not is_encoder(encoder, PubSubEncoder):
            raise TypeError(f"{encoder!r} does not implement PubSubEncoder.encode")
        self._channels = (_names(names), encoder)
        return self

    def streams(
        self, names: Sequence[str], encoder: StreamEncoder | None = None
    ) -> RedisLoggerConfigBuilder:
        """Append to *names*, encoding with *encoder* (default field list)."""
        if encoder is None:
            encoder = DefaultStreamEncoder()
        elif not is_encoder(encoder, StreamEncoder):
            raise TypeError(f"{encoder!r} does not implement StreamEncoder.encode")
        self._streams = (_names(names), encoder)
        return self

    def transaction(self, enabled: bool = True) -> RedisLoggerConfigBuilder:
        """Wrap every pipeline in MULTI/EXEC."""
        self._transaction = enabled
        return self

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self) -> RedisLoggerConfig:
        """Validate and produce the immutable config.

        Checks, in order: a connection is set; channels and/or streams are
        set; every set list is non-empty.  A URL is opened only after all
        checks pass.

        Raises
        ------
        ClientNotSetError
            No client and no URL.
        ChannelNotSetError
            No channels and no streams, or an empty list.
        RedisConnectionError
            The URL could not be opened.
        """
        if self._client is None and not self._url:
            raise ClientNotSetError()
        if self._channels is None and self._streams is None:
            raise ChannelNotSetError()
        if self._channels is not None and not self._channels[0]:
            raise ChannelNotSetError()
        if self._streams is not None and not self._streams[0]:
            raise ChannelNotSetError()

        client = self._client if self._client is not None else _open(self._url)

        channels = (
            ChannelSet(names=tuple(self._channels[0]), encoder=self._channels[1])
            if self._channels is not None
            else None
        )
        streams = (
            StreamSet(names=tuple(self._streams[0]), encoder=self._streams[1])
            if self._streams is not None
            else None
        )
        return RedisLoggerConfig(
            connection=ConnectionGuard(client),
            channels=channels,
            streams=streams,
            transaction=self._transaction,
        )

    def build_or_exit(self, console: Console | None = None) -> RedisLoggerConfig:
        """Like ``build()``, but report and exit the process on any error.

        Only for call sites with a fixed configuration where a bad config
        is a deployment bug.  Libraries should call ``build()``.
        """
        try:
            return self.build()
        except RedisLoggerConfigError as exc:
            _abort(exc, console)

    # ------------------------------------------------------------------
    # Per-mode constructors
    # ------------------------------------------------------------------

    @classmethod
    def _start(cls, connection: ConnectionLike) -> RedisLoggerConfigBuilder:
        builder = cls()
        if isinstance(connection, str):
            return builder.connection_url(connection)
        return builder.connection(connection)

    @classmethod
    def with_pubsub(
        cls, connection: ConnectionLike, channels: Sequence[str], encoder: PubSubEncoder
    ) -> RedisLoggerConfigBuilder:
        """Pub/sub only, custom encoder."""
        return cls._start(connection).channels(_require_names(channels), encoder)

    @classmethod
    def with_pubsub_default(
        cls, connection: ConnectionLike, channels: Sequence[str]
    ) -> RedisLoggerConfigBuilder:
        """Pub/sub only, ``DefaultPubSubEncoder``."""
        return cls._start(connection).channels(_require_names(channels))

    @classmethod
    def with_streams(
        cls, connection: ConnectionLike, streams: Sequence[str], encoder: StreamEncoder
    ) -> RedisLoggerConfigBuilder:
        """Streams only, custom encoder."""
        return cls._start(connection).streams(_require_names(streams), encoder)

    @classmethod
    def with_streams_default(
        cls, connection: ConnectionLike, streams: Sequence[str]
    ) -> RedisLoggerConfigBuilder:
        """Streams only, ``DefaultStreamEncoder``."""
        return cls._start(connection).streams(_require_names(streams))

    @classmethod
    def with_pubsub_and_streams(
        cls,
        connection: ConnectionLike,
        channels: Sequence[str],
        pubsub_encoder: PubSubEncoder,
        streams: Sequence[str],
        stream_encoder: StreamEncoder,
    ) -> RedisLoggerConfigBuilder:
        """Both modes, custom encoders.  Both lists must be non-empty."""
        return (
            cls._start(connection)
            .channels(_require_names(channels), pubsub_encoder)
            .streams(_require_names(streams), stream_encoder)
        )

    @classmethod
    def with_pubsub_and_streams_default(
        cls, connection: ConnectionLike, channels: Sequence[str], streams: Sequence[str]
    ) -> RedisLoggerConfigBuilder:
        """Both modes, default encoders.  Both lists must be non-empty."""
        return (
            cls._start(connection)
            .channels(_require_names(channels))
            .streams(_require_names(streams))
        )

    @classmethod
    def from_settings(cls, settings: LoggerSettings) -> RedisLoggerConfigBuilder:
        """Builder populated from env-driven settings, default encoders.

        Empty ``channels`` / ``streams`` settings are left unset, so
        ``build()`` reports ``ChannelNotSetError`` when both are empty.
        """
        builder = cls().connection_url(settings.url).transaction(settings.transaction)
        if settings.channels:
            builder.channels(settings.channels)
        if settings.streams:
            builder.streams(settings.streams)
        return builder


def _open(url: str) -> redis.Redis:
    """Open a client from *url* and verify it with ``PING``."""
    try:
        client = redis.Redis.from_url(url)
        client.ping()
    except (redis.RedisError, OSError, ValueError) as exc:
        raise RedisConnectionError(f"Error handling Redis: {exc}") from exc
    logger.info("Connected to Redis at %s", _redact(url))
    return client


def _redact(url: str) -> str:
    """Drop credentials from a connection URL for logging."""
    scheme, sep, rest = url.partition("://")
    if not sep or "@" not in rest:
        return url
    return f"{scheme}://***@{rest.rsplit('@', 1)[1]}"


def _abort(exc: RedisLoggerConfigError, console: Console | None) -> NoReturn:
    logger.critical("Redis logger configuration invalid: %s", exc)
    report_config_error(exc, console)
    raise SystemExit(1) from exc
