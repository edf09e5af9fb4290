"""
mongorepo - Multi-tenant MongoDB repository base layer for Python.

This library provides:
- Keyed connection configuration with per-client collection name overrides
- A process-wide client cache constructing at most one client per key
- Collection name resolution from explicit keys or document types
- Document mapping conventions registered once per process
- Repository base classes with blocking and asyncio variants
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mongorepo-py")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

# Client cache
from mongorepo.clients import ClientCache, default_client_cache

# Configuration
from mongorepo.config import (
    ClientConfig,
    CollectionOverride,
    ConnectionConfig,
    MongoRepositorySettings,
    load_connection_config,
)

# Conventions
from mongorepo.conventions import (
    ConventionPack,
    ConventionRegistry,
    IgnoreExtraElementsConvention,
    IgnoreIfNullConvention,
    LowerFirstElementNameConvention,
    NotMappedConvention,
    build_default_pack,
    default_convention_registry,
    register_conventions,
)
from mongorepo.exceptions import (
    ClassMapAlreadyRegisteredError,
    InvalidClientConfigurationError,
    InvalidConnectionConfigurationError,
    InvalidConnectionStringError,
    InvalidDatabaseError,
    MappingError,
    MongoRepositoryError,
    UnknownMemberError,
    UnmappedElementError,
)

# Mapping
from mongorepo.mapping import (
    ClassMap,
    DocumentMapper,
    IgnoreMapping,
    MemberMap,
    NotMapped,
    default_mapper,
)

# Collection naming
from mongorepo.naming import collection_name, resolve_collection_name

# Repositories
from mongorepo.repositories import (
    BaseMongoRepository,
    CollectionResponse,
    DatabaseResponse,
    SingleDatabaseMongoRepository,
)
from mongorepo.services import MongoRepositoryConfigService

__all__ = [
    "__version__",
    # Exceptions
    "MongoRepositoryError",
    "InvalidConnectionConfigurationError",
    "InvalidClientConfigurationError",
    "InvalidConnectionStringError",
    "InvalidDatabaseError",
    "MappingError",
    "UnmappedElementError",
    "ClassMapAlreadyRegisteredError",
    "UnknownMemberError",
    # Configuration
    "CollectionOverride",
    "ClientConfig",
    "ConnectionConfig",
    "MongoRepositorySettings",
    "load_connection_config",
    # Client cache
    "ClientCache",
    "default_client_cache",
    # Naming
    "collection_name",
    "resolve_collection_name",
    # Conventions
    "ConventionPack",
    "ConventionRegistry",
    "NotMappedConvention",
    "IgnoreExtraElementsConvention",
    "IgnoreIfNullConvention",
    "LowerFirstElementNameConvention",
    "build_default_pack",
    "default_convention_registry",
    "register_conventions",
    # Mapping
    "NotMapped",
    "IgnoreMapping",
    "ClassMap",
    "MemberMap",
    "DocumentMapper",
    "default_mapper",
    # Startup
    "MongoRepositoryConfigService",
    # Repositories
    "BaseMongoRepository",
    "SingleDatabaseMongoRepository",
    "DatabaseResponse",
    "CollectionResponse",
]
