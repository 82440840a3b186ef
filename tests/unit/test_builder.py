"""Unit tests for RedisLoggerConfigBuilder."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import redis

from redis_logger.config import LoggerSettings
from redis_logger.core.builder import RedisLoggerConfigBuilder
from redis_logger.encoders import DefaultPubSubEncoder, DefaultStreamEncoder
from redis_logger.errors import (
    ChannelNotSetError,
    ClientNotSetError,
    RedisConnectionError,
    RedisLoggerConfigError,
)
from redis_logger.models.record import LogRecord


class _PubSub:
    def encode(self, record: LogRecord) -> bytes:
        return b"x"


class _Stream:
    def encode(self, record: LogRecord) -> list[tuple[str, bytes]]:
        return [("x", b"x")]


@pytest.fixture
def patched_from_url(monkeypatch, redis_client) -> MagicMock:
    """Make ``redis.Redis.from_url`` return the mocked client."""
    from_url = MagicMock(return_value=redis_client)
    monkeypatch.setattr(redis.Redis, "from_url", from_url)
    return from_url


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestBuildValidation:
    def test_no_connection_is_client_not_set(self):
        with pytest.raises(ClientNotSetError):
            RedisLoggerConfigBuilder().channels(["a"]).build()

    def test_client_checked_before_channels(self):
        with pytest.raises(ClientNotSetError):
            RedisLoggerConfigBuilder().build()

    def test_empty_url_counts_as_unset(self):
        with pytest.raises(ClientNotSetError):
            RedisLoggerConfigBuilder.with_pubsub("", ["a"], _PubSub()).build()

    def test_no_destinations_is_channel_not_set(self, redis_client):
        with pytest.raises(ChannelNotSetError):
            RedisLoggerConfigBuilder().connection(redis_client).build()

    def test_empty_channels_is_channel_not_set(self, redis_client):
        with pytest.raises(ChannelNotSetError):
            RedisLoggerConfigBuilder().connection(redis_client).channels([]).build()

    def test_empty_streams_with_valid_channels_is_channel_not_set(self, redis_client):
        builder = RedisLoggerConfigBuilder().connection(redis_client).channels(["a"]).streams([])
        with pytest.raises(ChannelNotSetError):
            builder.build()

    def test_one_non_empty_list_succeeds(self, redis_client):
        config = RedisLoggerConfigBuilder().connection(redis_client).streams(["s"]).build()
        assert config.streams is not None
        assert config.streams.names == ("s",)
        assert config.channels is None

    def test_errors_share_base_class(self):
        assert issubclass(ClientNotSetError, RedisLoggerConfigError)
        assert issubclass(ChannelNotSetError, RedisLoggerConfigError)
        assert issubclass(RedisConnectionError, RedisLoggerConfigError)

    def test_non_encoder_rejected_at_setter(self):
        with pytest.raises(TypeError):
            RedisLoggerConfigBuilder().channels(["a"], encoder="json")  # type: ignore[arg-type]

    def test_encoder_class_instead_of_instance_rejected(self):
        with pytest.raises(TypeError):
            RedisLoggerConfigBuilder().streams(["s"], encoder=_Stream)  # type: ignore[arg-type]

    def test_bare_string_names_rejected(self, redis_client):
        builder = RedisLoggerConfigBuilder().connection(redis_client)
        with pytest.raises(TypeError):
            builder.channels("logging")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            builder.streams("logs")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Setter semantics
# ---------------------------------------------------------------------------


class TestSetters:
    def test_channels_last_write_wins(self, redis_client):
        config = (
            RedisLoggerConfigBuilder()
            .connection(redis_client)
            .channels(["a"])
            .channels(["b", "c"])
            .build()
        )
        assert config.channels is not None
        assert config.channels.names == ("b", "c")

    def test_streams_last_write_wins_including_encoder(self, redis_client):
        custom = _Stream()
        config = (
            RedisLoggerConfigBuilder()
            .connection(redis_client)
            .streams(["s1"], custom)
            .streams(["s2"])
            .build()
        )
        assert config.streams is not None
        assert config.streams.names == ("s2",)
        assert isinstance(config.streams.encoder, DefaultStreamEncoder)

    def test_setters_in_any_order(self, redis_client):
        config = (
            RedisLoggerConfigBuilder()
            .streams(["s"])
            .channels(["c"])
            .connection(redis_client)
            .build()
        )
        assert config.channels is not None and config.streams is not None

    def test_connection_replaces_url(self, redis_client, patched_from_url):
        (
            RedisLoggerConfigBuilder()
            .connection_url("redis://elsewhere:6379/0")
            .connection(redis_client)
            .channels(["a"])
            .build()
        )
        patched_from_url.assert_not_called()

    def test_transaction_flag(self, redis_client):
        config = (
            RedisLoggerConfigBuilder()
            .connection(redis_client)
            .channels(["a"])
            .transaction()
            .build()
        )
        assert config.transaction is True

    def test_config_owns_given_client(self, redis_client):
        config = RedisLoggerConfigBuilder().connection(redis_client).channels(["a"]).build()
        assert config.connection.client is redis_client


# ---------------------------------------------------------------------------
# Per-mode constructors
# ---------------------------------------------------------------------------


class TestModeConstructors:
    def test_with_pubsub(self, redis_client):
        encoder = _PubSub()
        config = RedisLoggerConfigBuilder.with_pubsub(
            redis_client, ["channel1", "channel2"], encoder
        ).build()
        assert config.streams is None
        assert config.channels is not None
        assert config.channels.names == ("channel1", "channel2")
        assert config.channels.encoder is encoder

    def test_with_streams(self, redis_client):
        config = RedisLoggerConfigBuilder.with_streams(
            redis_client, ["stream1", "stream2"], _Stream()
        ).build()
        assert config.channels is None
        assert config.streams is not None
        assert config.streams.names == ("stream1", "stream2")

    def test_with_pubsub_and_streams(self, redis_client):
        config = RedisLoggerConfigBuilder.with_pubsub_and_streams(
            redis_client, ["channel1"], _PubSub(), ["stream1"], _Stream()
        ).build()
        assert config.channels is not None and config.streams is not None

    def test_default_variants_use_default_encoders(self, redis_client):
        config = RedisLoggerConfigBuilder.with_pubsub_and_streams_default(
            redis_client, ["c"], ["s"]
        ).build()
        assert isinstance(config.channels.encoder, DefaultPubSubEncoder)
        assert isinstance(config.streams.encoder, DefaultStreamEncoder)

        pubsub_only = RedisLoggerConfigBuilder.with_pubsub_default(redis_client, ["c"]).build()
        assert isinstance(pubsub_only.channels.encoder, DefaultPubSubEncoder)

        streams_only = RedisLoggerConfigBuilder.with_streams_default(redis_client, ["s"]).build()
        assert isinstance(streams_only.streams.encoder, DefaultStreamEncoder)

    @pytest.mark.parametrize(
        "construct",
        [
            lambda conn: RedisLoggerConfigBuilder.with_pubsub(conn, [], _PubSub()),
            lambda conn: RedisLoggerConfigBuilder.with_streams(conn, [], _Stream()),
            lambda conn: RedisLoggerConfigBuilder.with_pubsub_default(conn, []),
            lambda conn: RedisLoggerConfigBuilder.with_streams_default(conn, []),
            lambda conn: RedisLoggerConfigBuilder.with_pubsub_and_streams(
                conn, [], _PubSub(), [], _Stream()
            ),
            lambda conn: RedisLoggerConfigBuilder.with_pubsub_and_streams_default(conn, ["c"], []),
        ],
    )
    def test_empty_lists_rejected_immediately(self, construct, redis_client):
        with pytest.raises(ChannelNotSetError):
            construct(redis_client)

    @pytest.mark.parametrize(
        "construct",
        [
            lambda conn: RedisLoggerConfigBuilder.with_pubsub_default(conn, "logging"),
            lambda conn: RedisLoggerConfigBuilder.with_streams(conn, "logs", _Stream()),
            lambda conn: RedisLoggerConfigBuilder.with_pubsub_and_streams_default(
                conn, ["c"], "logs"
            ),
        ],
    )
    def test_bare_string_rejected_not_split_into_characters(self, construct, redis_client):
        with pytest.raises(TypeError):
            construct(redis_client)


# ---------------------------------------------------------------------------
# Opening from a URL
# ---------------------------------------------------------------------------


class TestConnectionUrl:
    def test_url_opened_and_pinged(self, redis_client, patched_from_url):
        config = RedisLoggerConfigBuilder.with_pubsub_default(
            "redis://localhost:6379/0", ["logging"]
        ).build()
        patched_from_url.assert_called_once_with("redis://localhost:6379/0")
        redis_client.ping.assert_called_once()
        assert config.connection.client is redis_client

    def test_url_not_opened_when_validation_fails(self, patched_from_url):
        with pytest.raises(ChannelNotSetError):
            RedisLoggerConfigBuilder().connection_url("redis://localhost:6379/0").build()
        patched_from_url.assert_not_called()

    def test_unreachable_server_is_typed_error(self, redis_client, patched_from_url):
        redis_client.ping.side_effect = redis.ConnectionError("Connection refused")
        with pytest.raises(RedisConnectionError, match="Connection refused") as exc_info:
            RedisLoggerConfigBuilder.with_streams_default(
                "redis://localhost:1/0", ["logs"]
            ).build()
        assert isinstance(exc_info.value.__cause__, redis.ConnectionError)

    def test_malformed_url_is_typed_error(self):
        with pytest.raises(RedisConnectionError):
            RedisLoggerConfigBuilder.with_pubsub_default("nope://host", ["c"]).build()


# ---------------------------------------------------------------------------
# Aborting variant
# ---------------------------------------------------------------------------


class TestBuildOrExit:
    def test_valid_config_returned(self, redis_client, console):
        config = (
            RedisLoggerConfigBuilder()
            .connection(redis_client)
            .channels(["a"])
            .build_or_exit(console)
        )
        assert config.channels is not None

    def test_invalid_config_exits(self, console):
        with pytest.raises(SystemExit) as exc_info:
            RedisLoggerConfigBuilder().build_or_exit(console)
        assert exc_info.value.code == 1
        output = console.file.getvalue()
        assert "Invalid Redis logger configuration" in output
        assert "Redis client not set" in output


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class TestFromSettings:
    def test_from_settings(self, redis_client, patched_from_url):
        settings = LoggerSettings(
            _env_file=None,
            url="redis://cache:6379/3",
            channels=["logging"],
            streams=["logs"],
            transaction=True,
        )
        config = RedisLoggerConfigBuilder.from_settings(settings).build()
        patched_from_url.assert_called_once_with("redis://cache:6379/3")
        assert config.channels.names == ("logging",)
        assert config.streams.names == ("logs",)
        assert config.transaction is True

    def test_from_settings_without_destinations(self, patched_from_url):
        settings = LoggerSettings(_env_file=None)
        with pytest.raises(ChannelNotSetError):
            RedisLoggerConfigBuilder.from_settings(settings).build()
