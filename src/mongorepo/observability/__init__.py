"""
Observability utilities for mongorepo.

Tracing is composition-based: components accept a Tracer and default to
create_tracer(), which returns a no-op tracer when OpenTelemetry is not
installed or tracing is disabled.

Note:
    OpenTelemetry is an optional dependency. All utilities in this module
    gracefully handle the case where OpenTelemetry is not installed.
"""

from mongorepo.observability.attributes import (
    ATTR_CLIENT_KEY,
    ATTR_DB_COLLECTION,
    ATTR_DB_NAME,
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
    ATTR_DOCUMENT_TYPE,
    DB_SYSTEM_MONGODB,
)
from mongorepo.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    Tracer,
    create_tracer,
)
from mongorepo.observability.tracing import OTEL_AVAILABLE, should_trace

__all__ = [
    # Availability
    "OTEL_AVAILABLE",
    "should_trace",
    # Tracers
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "create_tracer",
    # Attributes
    "ATTR_CLIENT_KEY",
    "ATTR_DB_COLLECTION",
    "ATTR_DB_NAME",
    "ATTR_DB_OPERATION",
    "ATTR_DB_SYSTEM",
    "ATTR_DOCUMENT_TYPE",
    "DB_SYSTEM_MONGODB",
]
