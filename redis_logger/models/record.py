"""Log record and severity models: the read-only input of every encoder.

Severities follow the five-level scheme ERROR < WARN < INFO < DEBUG < TRACE,
where a lower value is more severe.  ``LevelFilter`` is the threshold a sink
is configured with; a record passes when ``record.level <= threshold``.
"""

from __future__ import annotations

import logging
from enum import IntEnum

from pydantic import BaseModel, ConfigDict

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Values the stdlib fills in when the call site is unknown.
_UNKNOWN_FILE = "(unknown file)"
_UNKNOWN_MODULE = "Unknown module"


class Level(IntEnum):
    """Severity of a single record."""

    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

    def as_str(self) -> str:
        """Wire name of the level, e.g. ``"WARN"``."""
        return self.name

    def to_logging(self) -> int:
        """Matching stdlib numeric level."""
        return _TO_LOGGING[self]

    @classmethod
    def from_logging(cls, levelno: int) -> Level:
        """Map a stdlib numeric level onto the five-level scheme.

        CRITICAL folds into ERROR; anything below DEBUG is TRACE.
        """
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        if levelno >= logging.DEBUG:
            return cls.DEBUG
        return cls.TRACE


_TO_LOGGING: dict[Level, int] = {
    Level.ERROR: logging.ERROR,
    Level.WARN: logging.WARNING,
    Level.INFO: logging.INFO,
    Level.DEBUG: logging.DEBUG,
    Level.TRACE: TRACE,
}


class LevelFilter(IntEnum):
    """Severity threshold of a sink.  ``OFF`` admits nothing."""

    OFF = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

    def admits(self, level: Level) -> bool:
        return int(level) <= int(self)

    def to_logging(self) -> int:
        """Stdlib level for ``Handler.setLevel`` / ``Logger.setLevel``.

        Must let through every stdlib level that ``Level.from_logging``
        maps to an admitted level, so ``TRACE`` opens the gate down to 1.
        """
        if self is LevelFilter.OFF:
            return logging.CRITICAL + 1
        if self is LevelFilter.TRACE:
            return logging.NOTSET + 1
        return Level(int(self)).to_logging()

    @classmethod
    def parse(cls, name: str) -> LevelFilter:
        """Parse a level name, case-insensitively.

        Accepts the stdlib spellings ``WARNING`` and ``CRITICAL`` as
        aliases for ``WARN`` and ``ERROR``.
        """
        key = name.strip().upper()
        key = _ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            raise ValueError(
                f"Unknown level filter: {name!r}. "
                f"Available: {[member.name for member in cls]}"
            ) from None


_ALIASES: dict[str, str] = {
    "WARNING": "WARN",
    "CRITICAL": "ERROR",
    "FATAL": "ERROR",
}


class LogRecord(BaseModel):
    """One structured log event, as seen by encoders.

    ``args`` holds the fully formatted message.  ``module_path``, ``file``
    and ``line`` are ``None`` when the call site is unknown.
    """

    model_config = ConfigDict(frozen=True)

    level: Level
    args: str
    module_path: str | None = None
    target: str
    file: str | None = None
    line: int | None = None

    @classmethod
    def from_logging(cls, record: logging.LogRecord) -> LogRecord:
        """Build a record from a stdlib ``logging.LogRecord``.

        ``target`` is the logger name.  The stdlib placeholders for an
        unknown call site become ``None``.
        """
        pathname: str | None = record.pathname
        module: str | None = record.module
        if not pathname or pathname == _UNKNOWN_FILE:
            # module is derived from pathname, so it is unknown as well
            pathname = module = None
        if module == _UNKNOWN_MODULE:
            module = None
        return cls(
            level=Level.from_logging(record.levelno),
            args=record.getMessage(),
            module_path=module or None,
            target=record.name,
            file=pathname,
            line=record.lineno or None,
        )
