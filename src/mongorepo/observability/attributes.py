"""
Standard span attributes for mongorepo.

Database attributes follow the OpenTelemetry semantic conventions; the
remaining ones are namespaced under ``mongorepo.``.

Example:
    >>> from mongorepo.observability.attributes import ATTR_CLIENT_KEY, ATTR_DB_NAME
    >>>
    >>> with tracer.span(
    ...     "mongorepo.repository.get_database",
    ...     {ATTR_CLIENT_KEY: "primary", ATTR_DB_NAME: "orders"},
    ... ):
    ...     pass
"""

# =============================================================================
# Database Attributes (OpenTelemetry semantic conventions)
# =============================================================================

ATTR_DB_SYSTEM = "db.system"
"""Database system identifier, always 'mongodb' here."""

ATTR_DB_NAME = "db.name"
"""Database name being accessed."""

ATTR_DB_OPERATION = "db.operation"
"""Database operation (e.g., 'drop_collection')."""

ATTR_DB_COLLECTION = "db.mongodb.collection"
"""Physical collection name the operation targets."""

# =============================================================================
# Repository Attributes
# =============================================================================

ATTR_CLIENT_KEY = "mongorepo.client.key"
"""Logical tenant/connection key used to select the client."""

ATTR_DOCUMENT_TYPE = "mongorepo.document.type"
"""Name of the document type a collection is bound to."""

DB_SYSTEM_MONGODB = "mongodb"


__all__ = [
    "ATTR_DB_SYSTEM",
    "ATTR_DB_NAME",
    "ATTR_DB_OPERATION",
    "ATTR_DB_COLLECTION",
    "ATTR_CLIENT_KEY",
    "ATTR_DOCUMENT_TYPE",
    "DB_SYSTEM_MONGODB",
]
