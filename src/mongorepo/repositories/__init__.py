"""
Repository base classes.

- BaseMongoRepository: every call names the tenant/connection key
- SingleDatabaseMongoRepository: every call uses one configured key
- DatabaseResponse / CollectionResponse: resolved handles
"""

from mongorepo.repositories.base import (
    BaseMongoRepository,
    ClientFactory,
    MongoRepositoryCore,
    default_client_factory,
)
from mongorepo.repositories.responses import CollectionResponse, DatabaseResponse
from mongorepo.repositories.single import SingleDatabaseMongoRepository

__all__ = [
    "BaseMongoRepository",
    "SingleDatabaseMongoRepository",
    "MongoRepositoryCore",
    "ClientFactory",
    "default_client_factory",
    "DatabaseResponse",
    "CollectionResponse",
]
