"""
Collection name resolution.

A collection is requested either by an explicit logical key or by a
document type. The logical key is looked up (case-insensitively) against
the client's collection overrides; when no override exists the key is used
verbatim as the physical collection name.

For types the logical key is derived from:
1. The name declared with @collection_name / __collection_name__, lower-cased
2. Otherwise the class name, lower-cased

Example:
    >>> @collection_name("Order_Lines")
    ... class OrderLine(BaseModel):
    ...     sku: str
    >>>
    >>> resolve_collection_name(client_config, OrderLine)
    'order_lines'
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from mongorepo.config import ClientConfig

T = TypeVar("T", bound=type)

COLLECTION_NAME_ATTRIBUTE = "__collection_name__"


def collection_name(name: str) -> Callable[[T], T]:
    """
    Class decorator declaring the logical collection key of a document type.

    Args:
        name: Declared collection key. It is lower-cased at resolution time.

    Example:
        >>> @collection_name("customers")
        ... class Customer(BaseModel):
        ...     name: str
    """

    def decorator(cls: T) -> T:
        setattr(cls, COLLECTION_NAME_ATTRIBUTE, name)
        return cls

    return decorator


def declared_collection_name(document_type: type) -> str | None:
    """Return the non-empty name declared on a type, or None."""
    declared = getattr(document_type, COLLECTION_NAME_ATTRIBUTE, None)
    if isinstance(declared, str) and declared:
        return declared
    return None


def collection_key(requested: str | type) -> str:
    """
    Compute the logical collection key for a requested name or type.

    Raises:
        ValueError: If the requested key is empty
    """
    if isinstance(requested, type):
        declared = declared_collection_name(requested)
        key = (declared or requested.__name__).lower()
    else:
        key = requested

    if not key:
        raise ValueError("collection key must not be empty")
    return key


def resolve_collection_name(client_config: ClientConfig, requested: str | type) -> str:
    """
    Resolve the physical collection name for a client.

    Args:
        client_config: The client whose overrides are consulted
        requested: Explicit logical key or a document type

    Returns:
        The override's name if one matches the key, otherwise the key itself
    """
    key = collection_key(requested)
    override = client_config.find_collection(key)
    return override.name if override is not None else key


__all__ = [
    "COLLECTION_NAME_ATTRIBUTE",
    "collection_name",
    "declared_collection_name",
    "collection_key",
    "resolve_collection_name",
]
