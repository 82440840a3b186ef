"""Default encoders: used when no custom encoder is configured.

``DefaultPubSubEncoder`` renders a record as one JSON object with sorted
keys and no whitespace::

    {"args":"Test message","file":"app.py","level":"INFO","line":42,
     "module_path":"app","target":"my_app.http"}

``DefaultStreamEncoder`` renders the same fields as a flat list of byte
strings for ``XADD``.  Every field is always present so consumers can rely
on a stable schema; an absent value is written as ``NULL_PLACEHOLDER``.

Both encoders accept any ``str``, including lone surrogates such as those
``os.fsdecode`` produces for undecodable paths.  Those are written as
``\\udcff`` escapes instead of failing the record.
"""

from __future__ import annotations

import json

from redis_logger.models.record import LogRecord

NULL_PLACEHOLDER = b"null"

# Lone surrogates cannot be UTF-8 encoded; escape them.
_UNENCODABLE = "backslashreplace"


def _utf8(text: str) -> bytes:
    return text.encode("utf-8", _UNENCODABLE)


def _text_or_null(value: str | int | None) -> bytes:
    if value is None:
        return NULL_PLACEHOLDER
    return _utf8(str(value))


def _json_payload(fields: dict[str, str | int | None]) -> bytes:
    """Serialize a record's fields the same way for every call.

    Keys are sorted and separators compact so identical records give
    identical payloads.  Non-ASCII text is kept as UTF-8.
    """
    text = json.dumps(fields, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return _utf8(text)


class DefaultPubSubEncoder:
    """Encode a record as a JSON object (``null`` for absent fields)."""

    def encode(self, record: LogRecord) -> bytes:
        return _json_payload(
            {
                "level": record.level.as_str(),
                "args": record.args,
                "module_path": record.module_path,
                "target": record.target,
                "file": record.file,
                "line": record.line,
            }
        )

    def __repr__(self) -> str:
        return "DefaultPubSubEncoder()"


class DefaultStreamEncoder:
    """Encode a record as stream fields in a fixed order."""

    def encode(self, record: LogRecord) -> list[tuple[str, bytes]]:
        return [
            ("level", _utf8(record.level.as_str())),
            ("args", _utf8(record.args)),
            ("module_path", _text_or_null(record.module_path)),
            ("target", _utf8(record.target)),
            ("file", _text_or_null(record.file)),
            ("line", _text_or_null(record.line)),
        ]

    def __repr__(self) -> str:
        return "DefaultStreamEncoder()"
