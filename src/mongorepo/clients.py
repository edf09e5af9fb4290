"""
Process-wide cache of database clients.

Clients are expensive: each one owns a connection pool and monitoring
threads. ClientCache guarantees that at most one client is constructed per
key for the lifetime of the cache, even when many threads ask for the same
key at once.

Reads of an already-populated key are lock-free. Construction happens under
a single lock with a second check, so a thread that lost the race picks up
the winner's client instead of building another. A failed construction
inserts nothing, so the next call retries.

Example:
    >>> cache: ClientCache[MongoClient] = ClientCache()
    >>> client = cache.get_or_create("primary", lambda: MongoClient(uri))
    >>> assert cache.get_or_create("primary", lambda: MongoClient(uri)) is client
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

from mongorepo.observability import Tracer, create_tracer
from mongorepo.observability.attributes import ATTR_CLIENT_KEY

logger = logging.getLogger(__name__)

TClient = TypeVar("TClient")


class ClientCache(Generic[TClient]):
    """
    Memoizing concurrent factory keyed by string.

    Thread-Safety:
        get_or_create() is safe to call from any number of threads. The lock
        is only taken on a miss and is held across check, construct and insert.

    There is no eviction: once a key has a client it keeps it until
    close_all() is called at shutdown.
    """

    def __init__(self, tracer: Tracer | None = None, enable_tracing: bool = True) -> None:
        self._clients: dict[str, TClient] = {}
        self._lock = threading.Lock()
        self._tracer = tracer or create_tracer(__name__, enable_tracing)

    def get_or_create(self, key: str, factory: Callable[[], TClient]) -> TClient:
        """
        Return the client for a key, constructing it on first use.

        Args:
            key: Cache key
            factory: Zero-argument callable building the client. Called at
                most once per key for as long as it succeeds.

        Returns:
            The cached client

        Raises:
            Exception: Whatever the factory raises, unchanged
        """
        client = self._clients.get(key)
        if client is not None:
            return client

        with self._lock:
            client = self._clients.get(key)
            if client is not None:
                return client

            with self._tracer.span(
                "mongorepo.client_cache.create_client",
                {ATTR_CLIENT_KEY: key},
            ):
                try:
                    client = factory()
                except Exception:
                    logger.exception(
                        "Failed to create client for key '%s'",
                        key,
                        extra={"client_key": key},
                    )
                    raise

            self._clients[key] = client
            logger.debug(
                "Created client for key '%s'",
                key,
                extra={"client_key": key},
            )
            return client

    def get(self, key: str) -> TClient | None:
        """Return the cached client for a key without creating one."""
        return self._clients.get(key)

    def keys(self) -> list[str]:
        """Return the keys that currently have a client."""
        return list(self._clients)

    def close_all(self) -> None:
        """
        Close and forget every cached client.

        Intended for process shutdown and tests. Clients without a close()
        method are simply dropped.
        """
        with self._lock:
            clients = list(self._clients.items())
            self._clients.clear()

        for key, client in clients:
            close = getattr(client, "close", None)
            if callable(close):
                close()
            logger.debug("Closed client for key '%s'", key, extra={"client_key": key})

    def __contains__(self, key: str) -> bool:
        return key in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __bool__(self) -> bool:
        """Cache is always truthy, even when empty."""
        return True


# Module-level default cache shared by repositories in this process
default_client_cache: ClientCache[object] = ClientCache()


__all__ = [
    "ClientCache",
    "default_client_cache",
]
