"""Library exceptions for the mongorepo package."""

from __future__ import annotations

from collections.abc import Iterable


class MongoRepositoryError(Exception):
    """Base exception for mongorepo library."""

    pass


class InvalidConnectionConfigurationError(MongoRepositoryError):
    """
    Raised when the connection configuration itself is missing or malformed.

    This is detected when a repository is constructed, before any key is
    resolved, and means the process was started without a usable
    ``ConnectionConfig``.

    Attributes:
        reason: Short description of what was wrong with the configuration
    """

    def __init__(self, reason: str = "connection configuration is missing") -> None:
        self.reason = reason
        super().__init__(f"Invalid connection configuration: {reason}")


class InvalidClientConfigurationError(MongoRepositoryError):
    """Raised when no client entry matches the requested key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"No client configuration found for key '{key}'")


class InvalidConnectionStringError(MongoRepositoryError):
    """Raised when the matched client entry has an empty connection string."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Client configuration '{key}' has no connection string")


class InvalidDatabaseError(MongoRepositoryError):
    """Raised when the matched client entry has an empty database name."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Client configuration '{key}' has no database name")


class MappingError(MongoRepositoryError):
    """Raised when a type cannot be mapped to or from a document."""

    pass


class UnmappedElementError(MappingError):
    """
    Raised when a document holds elements the target type does not map.

    Only raised for class maps that do not ignore extra elements. With the
    default convention pack registered, unknown elements are dropped instead.

    Attributes:
        document_type: Name of the type being deserialized
        elements: Element names that had no matching member
    """

    def __init__(self, document_type: str, elements: Iterable[str]) -> None:
        self.document_type = document_type
        self.elements = sorted(elements)
        super().__init__(
            f"Document for {document_type} contains unmapped elements: "
            f"{', '.join(self.elements)}"
        )


class ClassMapAlreadyRegisteredError(MappingError):
    """Raised when registering a class map for a type that is already mapped."""

    def __init__(self, document_type: str) -> None:
        self.document_type = document_type
        super().__init__(f"A class map for {document_type} is already registered")


class UnknownMemberError(MappingError):
    """Raised when a class map is asked for a member the type does not declare."""

    def __init__(self, document_type: str, member_name: str) -> None:
        self.document_type = document_type
        self.member_name = member_name
        super().__init__(f"{document_type} has no mapped member '{member_name}'")


__all__ = [
    "MongoRepositoryError",
    "InvalidConnectionConfigurationError",
    "InvalidClientConfigurationError",
    "InvalidConnectionStringError",
    "InvalidDatabaseError",
    "MappingError",
    "UnmappedElementError",
    "ClassMapAlreadyRegisteredError",
    "UnknownMemberError",
]
