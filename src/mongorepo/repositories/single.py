"""
Repository base bound to a single client key.

Applications with one database use SingleDatabaseMongoRepository so the
key does not have to be threaded through every call. The key is either
passed explicitly or taken from ``ConnectionConfig.default_key``.
"""

from __future__ import annotations

from typing import Any, TypeVar

from mongorepo.exceptions import InvalidConnectionConfigurationError
from mongorepo.repositories.base import ConfigSource, MongoRepositoryCore
from mongorepo.repositories.responses import CollectionResponse, DatabaseResponse

TDocument = TypeVar("TDocument")


class SingleDatabaseMongoRepository(MongoRepositoryCore):
    """
    Repository base whose calls all resolve against one configured key.

    Example:
        >>> class SettingsRepository(SingleDatabaseMongoRepository):
        ...     def load(self) -> dict:
        ...         return self.get_collection(dict, "settings").collection.find_one({})
        >>>
        >>> repository = SettingsRepository(connection_config, key="primary")
    """

    def __init__(self, config: ConfigSource, key: str | None = None, **kwargs: Any) -> None:
        """
        Initialize the repository.

        Args:
            config: Connection configuration (see MongoRepositoryCore)
            key: Client key to bind to (default: config.default_key)
            **kwargs: Passed through to MongoRepositoryCore

        Raises:
            InvalidConnectionConfigurationError: If no key is given and the
                configuration has no default key
        """
        super().__init__(config, **kwargs)
        resolved = key or self.config.default_key
        if not resolved:
            raise InvalidConnectionConfigurationError(
                "no key given and no default key configured"
            )
        self._key = resolved

    @property
    def key(self) -> str:
        return self._key

    def get_database(self) -> DatabaseResponse:
        return self._database(self._key)

    def get_collection(
        self,
        document_type: type[TDocument],
        collection_name: str | None = None,
    ) -> CollectionResponse[TDocument]:
        """Resolve a collection handle bound to a document type."""
        return self._collection(self._key, document_type, collection_name)

    def drop_collection(self, collection_name: str) -> bool:
        return self._drop(self._key, collection_name)

    def drop_collection_for(self, document_type: type) -> bool:
        return self._drop(self._key, document_type)

    async def get_database_async(self) -> DatabaseResponse:
        return await self._run_async(self.get_database)

    async def get_collection_async(
        self,
        document_type: type[TDocument],
        collection_name: str | None = None,
    ) -> CollectionResponse[TDocument]:
        return await self._run_async(self.get_collection, document_type, collection_name)

    async def drop_collection_async(self, collection_name: str) -> bool:
        return await self._run_async(self.drop_collection, collection_name)

    async def drop_collection_for_async(self, document_type: type) -> bool:
        return await self._run_async(self.drop_collection_for, document_type)


__all__ = ["SingleDatabaseMongoRepository"]
