"""Shared test fixtures for redis_logger."""

from __future__ import annotations

import io
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from redis_logger.core.connection import ConnectionGuard
from redis_logger.encoders import DefaultPubSubEncoder, DefaultStreamEncoder
from redis_logger.models.config import ChannelSet, RedisLoggerConfig, StreamSet
from redis_logger.models.record import Level, LogRecord


@pytest.fixture
def pipeline() -> MagicMock:
    """A stand-in for ``redis.client.Pipeline``."""
    return MagicMock(name="pipeline")


@pytest.fixture
def redis_client(pipeline: MagicMock) -> MagicMock:
    """A stand-in for ``redis.Redis`` whose ``pipeline()`` returns *pipeline*."""
    client = MagicMock(name="redis")
    client.pipeline.return_value = pipeline
    return client


@pytest.fixture
def guard(redis_client: MagicMock) -> ConnectionGuard:
    return ConnectionGuard(redis_client)


@pytest.fixture
def console() -> Console:
    """A Rich console writing into memory; read it with ``console.file.getvalue()``."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def make_record() -> Callable[..., LogRecord]:
    """Factory fixture: build a LogRecord with sensible defaults."""

    def _factory(**overrides: Any) -> LogRecord:
        defaults: dict[str, Any] = {
            "level": Level.INFO,
            "args": "Test message",
            "module_path": "my_module",
            "target": "my_target",
            "file": "my_file",
            "line": 42,
        }
        defaults.update(overrides)
        return LogRecord(**defaults)

    return _factory


@pytest.fixture
def make_config(guard: ConnectionGuard) -> Callable[..., RedisLoggerConfig]:
    """Factory fixture: a config on the mocked connection, default encoders."""

    def _factory(
        channels: list[str] | None = None,
        streams: list[str] | None = None,
        pubsub_encoder: Any = None,
        stream_encoder: Any = None,
        transaction: bool = False,
    ) -> RedisLoggerConfig:
        return RedisLoggerConfig(
            connection=guard,
            channels=(
                ChannelSet(names=tuple(channels), encoder=pubsub_encoder or DefaultPubSubEncoder())
                if channels
                else None
            ),
            streams=(
                StreamSet(names=tuple(streams), encoder=stream_encoder or DefaultStreamEncoder())
                if streams
                else None
            ),
            transaction=transaction,
        )

    return _factory
