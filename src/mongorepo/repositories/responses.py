"""
Resolved handles returned by repositories.

DatabaseResponse and CollectionResponse bundle the driver handle together
with the client and configuration it was resolved from, so callers can reach
the client (for sessions) or the client config (for logging) without
resolving the key again. Both are cheap to create and are not cached.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from pymongo import MongoClient
    from pymongo.collection import Collection
    from pymongo.database import Database

    from mongorepo.config import ClientConfig
    from mongorepo.mapping import DocumentMapper

TDocument = TypeVar("TDocument")


@dataclass(frozen=True)
class DatabaseResponse:
    """A database handle plus the client and config it came from."""

    database: Database[Any]
    client_config: ClientConfig
    client: MongoClient[Any] = field(repr=False)


@dataclass(frozen=True)
class CollectionResponse(Generic[TDocument]):
    """
    A collection handle bound to a document type.

    For pydantic model types the mapper converts between models and stored
    documents; for ``dict`` documents pass through unchanged.

    Example:
        >>> response = repository.get_collection("primary", OrderLine)
        >>> response.collection.insert_one(response.to_document(line))
        >>> line = response.from_document(response.collection.find_one({}))
    """

    collection: Collection[Any]
    name: str
    document_type: type[TDocument]
    database: Database[Any] = field(repr=False)
    client_config: ClientConfig = field(repr=False)
    client: MongoClient[Any] = field(repr=False)
    mapper: DocumentMapper = field(repr=False)

    @property
    def is_mapped_type(self) -> bool:
        return isinstance(self.document_type, type) and issubclass(
            self.document_type, BaseModel
        )

    def to_document(self, item: TDocument) -> dict[str, Any]:
        """Convert an item of the bound type into a storable document."""
        if isinstance(item, BaseModel):
            return self.mapper.to_document(item)
        return dict(item)  # type: ignore[call-overload]

    def from_document(self, document: Mapping[str, Any]) -> TDocument:
        """Convert a stored document into the bound type."""
        if self.is_mapped_type:
            return self.mapper.from_document(self.document_type, document)  # type: ignore[arg-type, return-value]
        return document  # type: ignore[return-value]


__all__ = ["DatabaseResponse", "CollectionResponse"]
