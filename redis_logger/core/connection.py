"""Exclusive access to the shared Redis connection.

Every dispatch submits its pipeline through ``ConnectionGuard.execute``,
which holds a single lock for the duration of the network round trip and
nothing else.  Building the pipeline (``ConnectionGuard.pipeline``) does no
I/O and needs no lock.

A transport failure (``redis.RedisError`` / ``OSError``) leaves the guard
usable.  Any other exception escaping while the lock is held, including
``KeyboardInterrupt``, poisons the guard: the state of the connection is
unknown, so every later ``execute`` raises ``PoisonedConnectionError``.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

import redis

from redis_logger.errors import PoisonedConnectionError

if TYPE_CHECKING:
    from redis.client import Pipeline

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (redis.RedisError, OSError)


class ConnectionGuard:
    """Owns one ``redis.Redis`` client behind an exclusive lock.

    Parameters
    ----------
    client:
        An open Redis client.  The guard takes ownership; ``close()``
        closes it.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client
        self._lock = threading.Lock()
        self._poisoned = False

    @property
    def client(self) -> redis.Redis:
        return self._client

    @property
    def is_poisoned(self) -> bool:
        return self._poisoned

    def pipeline(self, transaction: bool = False) -> Pipeline:
        """Create an empty pipeline.  Commands are buffered locally."""
        return self._client.pipeline(transaction=transaction)

    def execute(self, pipe: Pipeline) -> list[Any]:
        """Send *pipe* as one round trip while holding the lock.

        Raises
        ------
        PoisonedConnectionError
            If a previous holder crashed while holding the lock.
        redis.RedisError, OSError
            Transport failures, for the caller to report.
        """
        with self._lock:
            if self._poisoned:
                raise PoisonedConnectionError(
                    "Redis connection lock is poisoned: a previous operation "
                    "crashed while holding it"
                )
            try:
                return pipe.execute()
            except TRANSPORT_ERRORS:
                raise
            except BaseException:
                self._poisoned = True
                raise

    def close(self) -> None:
        """Close the underlying client."""
        with self._lock:
            self._client.close()
        logger.debug("ConnectionGuard: closed Redis client")

    def __repr__(self) -> str:
        # never render the client: its repr may carry credentials
        state = "poisoned" if self._poisoned else "ok"
        return f"ConnectionGuard({state})"
