"""
Connection configuration for multi-tenant MongoDB repositories.

This module provides:
- CollectionOverride: Maps a logical collection key to a physical name
- ClientConfig: Connection settings for one keyed client
- ConnectionConfig: The ordered set of client entries consulted per call
- MongoRepositorySettings: Environment-backed loader for ConnectionConfig
- load_connection_config(): Normalizes the accepted configuration sources

The configuration is loaded once at startup and is immutable afterwards.
Key lookups are case-insensitive and the first matching entry wins.

Example:
    >>> config = ConnectionConfig(
    ...     clients=[
    ...         ClientConfig(
    ...             key="primary",
    ...             connection_string="mongodb://localhost:27017",
    ...             database="orders",
    ...             collections=[CollectionOverride(key="orderline", name="order_lines")],
    ...         )
    ...     ]
    ... )
    >>> config.resolve_client("PRIMARY").database
    'orders'
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from mongorepo.exceptions import (
    InvalidClientConfigurationError,
    InvalidConnectionConfigurationError,
    InvalidConnectionStringError,
    InvalidDatabaseError,
)

logger = logging.getLogger(__name__)


def _matches(candidate: str, key: str) -> bool:
    return candidate.casefold() == key.casefold()


class _ConfigModel(BaseModel):
    # Accept both snake_case and camelCase keys so settings files written
    # as "connectionString" load alongside "connection_string".
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class CollectionOverride(_ConfigModel):
    """Maps a logical collection key to a physical collection name."""

    key: str = Field(..., description="Logical collection key (case-insensitive)")
    name: str = Field(..., description="Physical collection name in the database")


class ClientConfig(_ConfigModel):
    """
    Connection settings for one keyed client.

    Attributes:
        key: Logical tenant/connection identifier
        connection_string: MongoDB connection URI
        database: Database name used for every collection of this client
        collections: Optional per-client collection name overrides
    """

    key: str = Field(..., description="Logical tenant/connection identifier")
    connection_string: str = Field(default="", repr=False)
    database: str = ""
    collections: tuple[CollectionOverride, ...] = ()

    def find_collection(self, key: str) -> CollectionOverride | None:
        """Return the first override whose key matches, ignoring case."""
        for override in self.collections:
            if _matches(override.key, key):
                return override
        return None


class ConnectionConfig(_ConfigModel):
    """
    Ordered set of client entries.

    Attributes:
        clients: Client entries, consulted in order
        default_key: Key used by single-database repositories when none is
            passed explicitly
    """

    clients: tuple[ClientConfig, ...] = ()
    default_key: str | None = None

    @model_validator(mode="after")
    def _warn_on_duplicate_keys(self) -> ConnectionConfig:
        seen: set[str] = set()
        for client in self.clients:
            folded = client.key.casefold()
            if folded in seen:
                logger.warning(
                    "Duplicate client key '%s' in connection configuration; "
                    "the first entry wins",
                    client.key,
                    extra={"client_key": client.key},
                )
            seen.add(folded)
        return self

    def find_client(self, key: str) -> ClientConfig | None:
        """Return the first client entry whose key matches, ignoring case."""
        for client in self.clients:
            if _matches(client.key, key):
                return client
        return None

    def resolve_client(self, key: str) -> ClientConfig:
        """
        Resolve and validate the client entry for a key.

        Args:
            key: Logical tenant/connection identifier

        Returns:
            The first matching ClientConfig

        Raises:
            InvalidClientConfigurationError: If no entry matches the key
            InvalidConnectionStringError: If the entry has no connection string
            InvalidDatabaseError: If the entry has no database name
        """
        client = self.find_client(key)
        if client is None:
            raise InvalidClientConfigurationError(key)

        if not client.connection_string:
            raise InvalidConnectionStringError(key)

        if not client.database:
            raise InvalidDatabaseError(key)

        return client


class MongoRepositorySettings(BaseSettings):
    """
    Connection configuration sourced from the environment.

    Complex values are read as JSON, for example::

        MONGOREPO_CLIENTS='[{"key": "primary", "connectionString": "mongodb://db",
                             "database": "orders"}]'
        MONGOREPO_DEFAULT_KEY=primary
    """

    model_config = SettingsConfigDict(
        env_prefix="MONGOREPO_",
        env_file=".env",
        extra="ignore",
    )

    clients: list[ClientConfig] = Field(default_factory=list)
    default_key: str | None = None

    def to_connection_config(self) -> ConnectionConfig:
        """Build the immutable ConnectionConfig from these settings."""
        return ConnectionConfig(clients=tuple(self.clients), default_key=self.default_key)


def load_connection_config(
    source: ConnectionConfig | MongoRepositorySettings | Mapping[str, Any] | None,
) -> ConnectionConfig:
    """
    Normalize a configuration source into a ConnectionConfig.

    Args:
        source: A ConnectionConfig, MongoRepositorySettings, or a mapping
            with the ConnectionConfig shape

    Returns:
        The validated ConnectionConfig

    Raises:
        InvalidConnectionConfigurationError: If the source is missing, of an
            unsupported type, or fails validation
    """
    if source is None:
        raise InvalidConnectionConfigurationError()

    if isinstance(source, ConnectionConfig):
        return source

    if isinstance(source, MongoRepositorySettings):
        return source.to_connection_config()

    if isinstance(source, Mapping):
        try:
            return ConnectionConfig.model_validate(source)
        except ValidationError as e:
            raise InvalidConnectionConfigurationError(
                f"{e.error_count()} validation error(s)"
            ) from e

    raise InvalidConnectionConfigurationError(
        f"unsupported configuration type {type(source).__name__}"
    )


__all__ = [
    "CollectionOverride",
    "ClientConfig",
    "ConnectionConfig",
    "MongoRepositorySettings",
    "load_connection_config",
]
