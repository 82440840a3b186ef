"""Encoder protocols for the two Redis delivery modes.

Pub/sub messages are a single opaque payload, so ``PubSubEncoder`` returns
``bytes``.  Stream entries are field maps, so ``StreamEncoder`` returns an
ordered list of ``(field_name, value)`` pairs.  Any object with a matching
``encode`` method can be plugged in; no base class is required.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from redis_logger.models.record import LogRecord


@runtime_checkable
class PubSubEncoder(Protocol):
    """Turns a record into the payload published to every channel.

    Implementations must be total over every ``LogRecord`` (never raise),
    must not mutate the record and must be safe to call from many threads
    at once.  The result is computed once per record and reused for all
    configured channels.
    """

    def encode(self, record: LogRecord) -> bytes:
        """Encode *record* into a byte payload."""
        ...


@runtime_checkable
class StreamEncoder(Protocol):
    """Turns a record into the field list appended to every stream.

    Same contract as ``PubSubEncoder``.  Field names must be unique; their
    order only matters for reproducibility, Redis stores entries as maps.
    """

    def encode(self, record: LogRecord) -> list[tuple[str, bytes]]:
        """Encode *record* into ``(field_name, value)`` pairs."""
        ...


def is_encoder(value: object, protocol: type) -> bool:
    """True if *value* is an encoder instance usable as *protocol*.

    The ``runtime_checkable`` check only looks for an ``encode`` attribute.
    ``str`` and ``bytes`` have an unrelated one and a class has an unbound
    one, so neither counts.
    """
    if isinstance(value, (str, bytes, bytearray, type)):
        return False
    return isinstance(value, protocol) and callable(value.encode)


from redis_logger.encoders.defaults import (  # noqa: E402
    NULL_PLACEHOLDER,
    DefaultPubSubEncoder,
    DefaultStreamEncoder,
)

__all__ = [
    "PubSubEncoder",
    "StreamEncoder",
    "is_encoder",
    "DefaultPubSubEncoder",
    "DefaultStreamEncoder",
    "NULL_PLACEHOLDER",
]
