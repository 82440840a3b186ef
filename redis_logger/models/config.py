"""Sink configuration models: validated once, immutable afterwards."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from redis_logger.core.connection import ConnectionGuard
from redis_logger.encoders import PubSubEncoder, StreamEncoder, is_encoder
from redis_logger.errors import ChannelNotSetError


class ChannelSet(BaseModel):
    """Pub/sub channels paired with the one encoder they all share."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    names: tuple[str, ...] = Field(min_length=1)
    encoder: Any

    @field_validator("encoder")
    @classmethod
    def _check_encoder(cls, value: Any) -> Any:
        if not is_encoder(value, PubSubEncoder):
            raise ValueError(f"{value!r} does not implement PubSubEncoder.encode")
        return value


class StreamSet(BaseModel):
    """Stream names paired with the one encoder they all share."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    names: tuple[str, ...] = Field(min_length=1)
    encoder: Any

    @field_validator("encoder")
    @classmethod
    def _check_encoder(cls, value: Any) -> Any:
        if not is_encoder(value, StreamEncoder):
            raise ValueError(f"{value!r} does not implement StreamEncoder.encode")
        return value


class RedisLoggerConfig(BaseModel):
    """Everything a ``RedisLogger`` needs to deliver records.

    Owns the connection for its whole lifetime.  At least one of
    ``channels`` / ``streams`` is always present; constructing a config
    with neither raises ``ChannelNotSetError``.  Build instances through
    ``RedisLoggerConfigBuilder``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    connection: ConnectionGuard
    channels: ChannelSet | None = None
    streams: StreamSet | None = None
    transaction: bool = False  # wrap each pipeline in MULTI/EXEC

    @model_validator(mode="after")
    def _require_destination(self) -> RedisLoggerConfig:
        if self.channels is None and self.streams is None:
            raise ChannelNotSetError()
        return self

    def close(self) -> None:
        """Close the owned connection.  Call at teardown."""
        self.connection.close()
