"""
Base classes for multi-tenant MongoDB repositories.

Every call resolves, in order:
1. The client entry for the key (ConnectionConfig.resolve_client)
2. The client, created at most once per key (ClientCache.get_or_create)
3. The database handle (cheap, not cached)
4. The collection name (resolve_collection_name)

Repositories expose blocking methods and ``*_async`` equivalents with the
same semantics. The async variants run the blocking work on a shared thread
pool so the event loop is never blocked by driver calls.

Example:
    >>> class OrderRepository(BaseMongoRepository):
    ...     def add_line(self, tenant: str, line: OrderLine) -> None:
    ...         response = self.get_collection(tenant, OrderLine)
    ...         response.collection.insert_one(response.to_document(line))
    >>>
    >>> repository = OrderRepository(connection_config)
"""

from __future__ import annotations

import asyncio
import functools
import logging
import threading
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, ClassVar, TypeVar

from pymongo import MongoClient

from mongorepo.clients import ClientCache, default_client_cache
from mongorepo.config import (
    ClientConfig,
    ConnectionConfig,
    MongoRepositorySettings,
    load_connection_config,
)
from mongorepo.mapping import DocumentMapper, default_mapper
from mongorepo.naming import resolve_collection_name
from mongorepo.observability import (
    ATTR_CLIENT_KEY,
    ATTR_DB_COLLECTION,
    ATTR_DB_NAME,
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
    ATTR_DOCUMENT_TYPE,
    DB_SYSTEM_MONGODB,
    Tracer,
    create_tracer,
)
from mongorepo.repositories.responses import CollectionResponse, DatabaseResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")
TDocument = TypeVar("TDocument")

ClientFactory = Callable[[ClientConfig], Any]
ConfigSource = ConnectionConfig | MongoRepositorySettings | Mapping[str, Any] | None


def default_client_factory(client_config: ClientConfig) -> MongoClient[Any]:
    """Build a pymongo client from a client entry's connection string."""
    return MongoClient(client_config.connection_string)


def _require(value: str, argument: str) -> None:
    if not value:
        raise ValueError(f"{argument} must not be empty")


class MongoRepositoryCore:
    """
    Resolution machinery shared by keyed and single-database repositories.

    Subclasses customize behaviour through two hooks:
    - initialize_connection(config): adjust the configuration per call
    - initialize_client(client, client_config): customize a new client
      before it is cached (pool sizes, TLS, codec options)
    """

    # Class-level executor for the async variants
    _executor: ClassVar[ThreadPoolExecutor | None] = None
    _executor_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        config: ConfigSource,
        *,
        client_cache: ClientCache[Any] | None = None,
        mapper: DocumentMapper | None = None,
        client_factory: ClientFactory | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Initialize the repository.

        Args:
            config: Connection configuration, settings, or a mapping with the
                ConnectionConfig shape
            client_cache: Cache to hold clients (default: process-wide cache)
            mapper: Document mapper (default: process-wide mapper)
            client_factory: Builds a client from a ClientConfig
                (default: pymongo.MongoClient)
            tracer: Optional tracer
            enable_tracing: Whether to create a tracer when none is given

        Raises:
            InvalidConnectionConfigurationError: If config is missing or malformed
        """
        self._config = load_connection_config(config)
        self._client_cache = client_cache if client_cache is not None else default_client_cache
        self._mapper = mapper if mapper is not None else default_mapper
        self._client_factory = client_factory or default_client_factory
        self._tracer = tracer or create_tracer(__name__, enable_tracing)

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def client_cache(self) -> ClientCache[Any]:
        return self._client_cache

    @property
    def mapper(self) -> DocumentMapper:
        return self._mapper

    @classmethod
    def _get_executor(cls) -> ThreadPoolExecutor:
        """Get or create the shared thread pool executor."""
        with MongoRepositoryCore._executor_lock:
            if MongoRepositoryCore._executor is None:
                MongoRepositoryCore._executor = ThreadPoolExecutor(
                    thread_name_prefix="mongorepo",
                )
            return MongoRepositoryCore._executor

    @classmethod
    def shutdown_executor(cls) -> None:
        """
        Shutdown the shared thread pool executor.

        Call this during application shutdown to clean up resources.
        After calling this, the executor will be recreated on next use.
        """
        with MongoRepositoryCore._executor_lock:
            if MongoRepositoryCore._executor is not None:
                MongoRepositoryCore._executor.shutdown(wait=True)
                MongoRepositoryCore._executor = None

    async def _run_async(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._get_executor(), functools.partial(func, *args))

    def initialize_connection(self, config: ConnectionConfig) -> ConnectionConfig:
        """Hook to adjust the configuration before each resolution."""
        return config

    def initialize_client(self, client: Any, client_config: ClientConfig) -> Any:
        """Hook to customize a newly constructed client before it is cached."""
        return client

    def _create_client(self, client_config: ClientConfig) -> Any:
        client = self._client_factory(client_config)
        return self.initialize_client(client, client_config)

    def _database(self, key: str) -> DatabaseResponse:
        _require(key, "key")

        try:
            config = self.initialize_connection(self._config)
            client_config = config.resolve_client(key)

            with self._tracer.span(
                "mongorepo.repository.get_database",
                {
                    ATTR_DB_SYSTEM: DB_SYSTEM_MONGODB,
                    ATTR_CLIENT_KEY: key,
                    ATTR_DB_NAME: client_config.database,
                },
            ):
                client = self._client_cache.get_or_create(
                    client_config.key.casefold(),
                    lambda: self._create_client(client_config),
                )
                database = client.get_database(client_config.database)
        except Exception:
            logger.exception(
                "Failed to resolve database for key '%s'",
                key,
                extra={"client_key": key},
            )
            raise

        return DatabaseResponse(database=database, client_config=client_config, client=client)

    def _collection(
        self,
        key: str,
        document_type: type[TDocument],
        collection_name: str | None,
    ) -> CollectionResponse[TDocument]:
        if collection_name is not None:
            _require(collection_name, "collection_name")

        response = self._database(key)
        requested: str | type = collection_name if collection_name is not None else document_type
        name = resolve_collection_name(response.client_config, requested)

        return CollectionResponse(
            collection=response.database.get_collection(name),
            name=name,
            document_type=document_type,
            database=response.database,
            client_config=response.client_config,
            client=response.client,
            mapper=self._mapper,
        )

    def _drop(self, key: str, requested: str | type) -> bool:
        if isinstance(requested, str):
            _require(requested, "collection_name")

        response = self._database(key)
        name = resolve_collection_name(response.client_config, requested)

        attributes = {
            ATTR_DB_SYSTEM: DB_SYSTEM_MONGODB,
            ATTR_DB_OPERATION: "drop_collection",
            ATTR_CLIENT_KEY: key,
            ATTR_DB_NAME: response.client_config.database,
            ATTR_DB_COLLECTION: name,
        }
        if isinstance(requested, type):
            attributes[ATTR_DOCUMENT_TYPE] = requested.__name__

        with self._tracer.span("mongorepo.repository.drop_collection", attributes):
            try:
                response.database.drop_collection(name)
            except Exception:
                logger.exception(
                    "Failed to drop collection '%s' for key '%s'",
                    name,
                    key,
                    extra={
                        "client_key": key,
                        "database": response.client_config.database,
                        "collection": name,
                    },
                )
                raise

        logger.debug(
            "Dropped collection '%s' for key '%s'",
            name,
            key,
            extra={
                "client_key": key,
                "database": response.client_config.database,
                "collection": name,
            },
        )
        return True


class BaseMongoRepository(MongoRepositoryCore):
    """
    Repository base where every call names the tenant/connection key.

    Subclass it and build the domain operations on the collection handles
    returned by get_collection().
    """

    def get_database(self, key: str) -> DatabaseResponse:
        """
        Resolve the database for a key.

        Raises:
            ValueError: If key is empty
            InvalidClientConfigurationError: If no client matches the key
            InvalidConnectionStringError: If the client has no connection string
            InvalidDatabaseError: If the client has no database name
        """
        return self._database(key)

    def get_collection(
        self,
        key: str,
        document_type: type[TDocument],
        collection_name: str | None = None,
    ) -> CollectionResponse[TDocument]:
        """
        Resolve a collection handle bound to a document type.

        Args:
            key: Tenant/connection key
            document_type: Type of the stored documents (a pydantic model or dict)
            collection_name: Explicit logical collection key. When omitted the
                key is derived from document_type.

        Returns:
            CollectionResponse for the resolved collection
        """
        return self._collection(key, document_type, collection_name)

    def drop_collection(self, key: str, collection_name: str) -> bool:
        """Drop a collection by logical key. Returns True on success."""
        return self._drop(key, collection_name)

    def drop_collection_for(self, key: str, document_type: type) -> bool:
        """Drop the collection a document type resolves to. Returns True on success."""
        return self._drop(key, document_type)

    async def get_database_async(self, key: str) -> DatabaseResponse:
        return await self._run_async(self.get_database, key)

    async def get_collection_async(
        self,
        key: str,
        document_type: type[TDocument],
        collection_name: str | None = None,
    ) -> CollectionResponse[TDocument]:
        return await self._run_async(self.get_collection, key, document_type, collection_name)

    async def drop_collection_async(self, key: str, collection_name: str) -> bool:
        return await self._run_async(self.drop_collection, key, collection_name)

    async def drop_collection_for_async(self, key: str, document_type: type) -> bool:
        return await self._run_async(self.drop_collection_for, key, document_type)


__all__ = [
    "BaseMongoRepository",
    "MongoRepositoryCore",
    "ClientFactory",
    "default_client_factory",
]
