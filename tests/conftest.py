"""
Shared pytest fixtures for the mongorepo library tests.

This module provides:
- Convention fixtures (convention_registry, mapper) isolated per test
- Connection configuration fixtures (connection_config)
- Client fixtures (client_cache, client_factory) backed by mongomock
- Config service reset between tests

Every fixture builds fresh instances so tests never share the process-wide
defaults.
"""

from __future__ import annotations

import threading
from collections.abc import Generator
from typing import Any

import mongomock
import pytest

from mongorepo.clients import ClientCache
from mongorepo.config import ClientConfig, CollectionOverride, ConnectionConfig
from mongorepo.conventions import ConventionRegistry, build_default_pack
from mongorepo.mapping import DocumentMapper
from mongorepo.repositories import MongoRepositoryCore
from mongorepo.services import MongoRepositoryConfigService


class CountingClientFactory:
    """Client factory that builds mongomock clients and records each call."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, client_config: ClientConfig) -> mongomock.MongoClient:
        with self._lock:
            self.calls.append(client_config.key)
        return mongomock.MongoClient()

    @property
    def call_count(self) -> int:
        return len(self.calls)


# ============================================================================
# Convention Fixtures
# ============================================================================


@pytest.fixture
def convention_registry() -> ConventionRegistry:
    """Provide a registry holding the default pack under "additional"."""
    registry = ConventionRegistry()
    registry.register("additional", build_default_pack())
    return registry


@pytest.fixture
def empty_registry() -> ConventionRegistry:
    """Provide a registry with no conventions."""
    return ConventionRegistry()


@pytest.fixture
def mapper(convention_registry: ConventionRegistry) -> DocumentMapper:
    """Provide a mapper bound to the default conventions."""
    return DocumentMapper(convention_registry)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def connection_config() -> ConnectionConfig:
    """
    Provide a two-tenant configuration.

    - "primary": database "orders", no collection overrides
    - "tenant-b": database "tenant_b", overrides order lines to "ol"
    """
    return ConnectionConfig(
        clients=[
            ClientConfig(
                key="primary",
                connection_string="mongodb://primary.example:27017",
                database="orders",
            ),
            ClientConfig(
                key="tenant-b",
                connection_string="mongodb://tenant-b.example:27017",
                database="tenant_b",
                collections=[
                    CollectionOverride(key="order_lines", name="ol"),
                    CollectionOverride(key="orderline", name="lines"),
                ],
            ),
        ],
        default_key="primary",
    )


# ============================================================================
# Client Fixtures
# ============================================================================


@pytest.fixture
def client_factory() -> CountingClientFactory:
    """Provide a counting mongomock client factory."""
    return CountingClientFactory()


@pytest.fixture
def client_cache() -> Generator[ClientCache[Any], None, None]:
    """Provide an isolated client cache, closed after the test."""
    cache: ClientCache[Any] = ClientCache(enable_tracing=False)
    yield cache
    cache.close_all()


@pytest.fixture
def repository_kwargs(
    client_cache: ClientCache[Any],
    mapper: DocumentMapper,
    client_factory: CountingClientFactory,
) -> dict[str, Any]:
    """Keyword arguments wiring a repository to the isolated fixtures."""
    return {
        "client_cache": client_cache,
        "mapper": mapper,
        "client_factory": client_factory,
        "enable_tracing": False,
    }


# ============================================================================
# Global State Reset
# ============================================================================


@pytest.fixture(autouse=True)
def reset_config_service() -> Generator[None, None, None]:
    """Let every test run MongoRepositoryConfigService.initialize() afresh."""
    MongoRepositoryConfigService.reset()
    yield
    MongoRepositoryConfigService.reset()


@pytest.fixture(scope="session", autouse=True)
def shutdown_repository_executor() -> Generator[None, None, None]:
    """Shut down the shared async executor at the end of the session."""
    yield
    MongoRepositoryCore.shutdown_executor()
