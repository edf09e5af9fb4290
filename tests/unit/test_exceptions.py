"""
Unit tests for the exception hierarchy.

Tests cover:
- Inheritance from MongoRepositoryError
- Context attributes
- Message formatting
"""

import pytest

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


class TestHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize(
        "exc",
        [
            InvalidConnectionConfigurationError(),
            InvalidClientConfigurationError("primary"),
            InvalidConnectionStringError("primary"),
            InvalidDatabaseError("primary"),
            MappingError("boom"),
        ],
    )
    def test_all_errors_derive_from_base(self, exc: Exception) -> None:
        """Every library error is a MongoRepositoryError."""
        assert isinstance(exc, MongoRepositoryError)

    def test_mapping_errors_share_base(self) -> None:
        """Mapping errors derive from MappingError."""
        assert issubclass(UnmappedElementError, MappingError)
        assert issubclass(ClassMapAlreadyRegisteredError, MappingError)
        assert issubclass(UnknownMemberError, MappingError)

    def test_configuration_errors_are_distinguishable(self) -> None:
        """The three resolve failures are distinct types."""
        kinds = {
            InvalidClientConfigurationError,
            InvalidConnectionStringError,
            InvalidDatabaseError,
        }
        assert len(kinds) == 3
        assert not issubclass(InvalidConnectionStringError, InvalidClientConfigurationError)
        assert not issubclass(InvalidDatabaseError, InvalidConnectionStringError)


class TestContextAttributes:
    """Tests for attributes and messages."""

    def test_invalid_connection_configuration_default_reason(self) -> None:
        """Default reason reports a missing configuration."""
        exc = InvalidConnectionConfigurationError()

        assert exc.reason == "connection configuration is missing"
        assert "Invalid connection configuration" in str(exc)

    def test_invalid_connection_configuration_custom_reason(self) -> None:
        """Custom reason appears in the message."""
        exc = InvalidConnectionConfigurationError("2 validation error(s)")

        assert exc.reason == "2 validation error(s)"
        assert "2 validation error(s)" in str(exc)

    def test_client_configuration_error_carries_key(self) -> None:
        """Missing client error carries the requested key."""
        exc = InvalidClientConfigurationError("tenant-x")

        assert exc.key == "tenant-x"
        assert "tenant-x" in str(exc)

    def test_connection_string_error_message(self) -> None:
        """Connection string error names the key."""
        exc = InvalidConnectionStringError("primary")

        assert exc.key == "primary"
        assert "connection string" in str(exc)

    def test_database_error_message(self) -> None:
        """Database error names the key."""
        exc = InvalidDatabaseError("primary")

        assert exc.key == "primary"
        assert "database name" in str(exc)

    def test_unmapped_element_error_sorts_elements(self) -> None:
        """Unmapped elements are reported sorted."""
        exc = UnmappedElementError("Customer", ["zeta", "alpha"])

        assert exc.document_type == "Customer"
        assert exc.elements == ["alpha", "zeta"]
        assert "alpha, zeta" in str(exc)

    def test_class_map_already_registered_error(self) -> None:
        """Duplicate class map error names the type."""
        exc = ClassMapAlreadyRegisteredError("Customer")

        assert exc.document_type == "Customer"
        assert "Customer" in str(exc)

    def test_unknown_member_error(self) -> None:
        """Unknown member error names type and member."""
        exc = UnknownMemberError("Customer", "Missing")

        assert exc.document_type == "Customer"
        assert exc.member_name == "Missing"
        assert "Missing" in str(exc)
