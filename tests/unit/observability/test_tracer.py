"""
Unit tests for tracer protocol and implementations.

Tests for:
- Tracer Protocol (runtime_checkable)
- NullTracer class
- OpenTelemetryTracer class
- MockTracer class
- create_tracer() and should_trace()
- Span attribute constants
"""

from __future__ import annotations

import pytest

from mongorepo.observability import (
    ATTR_CLIENT_KEY,
    ATTR_DB_COLLECTION,
    ATTR_DB_NAME,
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
    ATTR_DOCUMENT_TYPE,
    DB_SYSTEM_MONGODB,
    OTEL_AVAILABLE,
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    Tracer,
    create_tracer,
    should_trace,
)


class TestTracerProtocol:
    """Tests for Tracer protocol."""

    def test_null_tracer_implements_protocol(self):
        """NullTracer implements Tracer protocol."""
        assert isinstance(NullTracer(), Tracer)

    def test_mock_tracer_implements_protocol(self):
        """MockTracer implements Tracer protocol."""
        assert isinstance(MockTracer(), Tracer)

    @pytest.mark.skipif(not OTEL_AVAILABLE, reason="OTEL not installed")
    def test_otel_tracer_implements_protocol(self):
        """OpenTelemetryTracer implements Tracer protocol."""
        assert isinstance(OpenTelemetryTracer(__name__), Tracer)


class TestNullTracer:
    """Tests for NullTracer class."""

    def test_span_yields_none(self):
        """span() yields None."""
        with NullTracer().span("test", {"key": "value"}) as span:
            assert span is None

    def test_enabled_is_false(self):
        """enabled property returns False."""
        assert NullTracer().enabled is False

    def test_span_does_not_swallow_exceptions(self):
        """Exceptions raised inside a span propagate."""
        with pytest.raises(ValueError, match="test error"), NullTracer().span("test"):
            raise ValueError("test error")


class TestOpenTelemetryTracer:
    """Tests for OpenTelemetryTracer class."""

    @pytest.mark.skipif(not OTEL_AVAILABLE, reason="OTEL not installed")
    def test_creates_real_spans(self):
        """span() creates real OpenTelemetry spans."""
        tracer = OpenTelemetryTracer(__name__)
        with tracer.span("mongorepo.test", {ATTR_CLIENT_KEY: "primary"}) as span:
            assert span is not None
            assert hasattr(span, "set_attribute")
        assert tracer.enabled is True

    @pytest.mark.skipif(OTEL_AVAILABLE, reason="OTEL is installed")
    def test_raises_without_otel(self):
        """OpenTelemetryTracer raises ImportError when OTEL not installed."""
        with pytest.raises(ImportError):
            OpenTelemetryTracer(__name__)


class TestMockTracer:
    """Tests for MockTracer class."""

    def test_records_spans(self):
        """MockTracer records span names and attributes."""
        tracer = MockTracer()
        with tracer.span("first", {"key": "value"}):
            pass
        with tracer.span("second"):
            pass

        assert tracer.spans == [("first", {"key": "value"}), ("second", None)]
        assert tracer.span_names == ["first", "second"]
        assert tracer.enabled is True

    def test_clear(self):
        """clear() removes recorded spans."""
        tracer = MockTracer()
        with tracer.span("first"):
            pass

        tracer.clear()

        assert tracer.spans == []


class TestCreateTracer:
    """Tests for create_tracer and should_trace."""

    def test_disabled_returns_null_tracer(self):
        """Disabled tracing gives a NullTracer."""
        assert isinstance(create_tracer(__name__, enable_tracing=False), NullTracer)

    def test_without_otel_returns_null_tracer(self, monkeypatch):
        """Missing OpenTelemetry gives a NullTracer."""
        monkeypatch.setattr("mongorepo.observability.tracing.OTEL_AVAILABLE", False)

        assert isinstance(create_tracer(__name__), NullTracer)
        assert should_trace(True) is False

    @pytest.mark.skipif(not OTEL_AVAILABLE, reason="OTEL not installed")
    def test_enabled_returns_otel_tracer(self):
        """Enabled tracing with OpenTelemetry gives an OpenTelemetryTracer."""
        assert isinstance(create_tracer(__name__), OpenTelemetryTracer)
        assert should_trace(True) is True

    def test_should_trace_respects_flag(self):
        """should_trace is False whenever tracing is disabled."""
        assert should_trace(False) is False


class TestAttributes:
    """Tests for span attribute constants."""

    def test_database_attributes_follow_semantic_conventions(self):
        """Database attributes use the OpenTelemetry names."""
        assert ATTR_DB_SYSTEM == "db.system"
        assert ATTR_DB_NAME == "db.name"
        assert ATTR_DB_OPERATION == "db.operation"
        assert ATTR_DB_COLLECTION.startswith("db.")
        assert DB_SYSTEM_MONGODB == "mongodb"

    def test_repository_attributes_have_prefix(self):
        """Repository attributes are namespaced under mongorepo."""
        assert ATTR_CLIENT_KEY.startswith("mongorepo.")
        assert ATTR_DOCUMENT_TYPE.startswith("mongorepo.")
