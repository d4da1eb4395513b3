"""
Unit tests for the tracing helpers.

This test suite covers:
- Logfire initialization when disabled and enabled
- The traced decorator on sync and async functions
- Span attributes written by log_api_request
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

import wikipedia_potd.core.monitoring as monitoring
from wikipedia_potd.core.monitoring import initialize_logfire, log_api_request, traced
from wikipedia_potd.server.core.constant import VERSION


class TestInitializeLogfire:
    """Test initialize_logfire."""

    def test_disabled_by_default(self):
        """Test that Logfire is not configured when disabled."""
        with patch("logfire.configure") as mock_configure:
            assert initialize_logfire() is False
            mock_configure.assert_not_called()

    def test_enabled_configures_and_instruments(self):
        """Test that enabling configures Logfire and instruments the app and engine."""
        config = SimpleNamespace(
            enabled=True,
            token=None,
            service_name="wikipedia-potd",
            environment="test",
        )
        app = MagicMock()
        engine = MagicMock()

        with (
            patch.object(monitoring, "settings", SimpleNamespace(logfire=config)),
            patch.object(monitoring, "_initialized", False),
            patch("logfire.configure") as mock_configure,
            patch("logfire.instrument_pydantic_ai") as mock_ai,
            patch("logfire.instrument_httpx") as mock_httpx,
            patch("logfire.instrument_sqlalchemy") as mock_sqlalchemy,
            patch("logfire.instrument_fastapi") as mock_fastapi,
        ):
            assert initialize_logfire(app, engine) is True

            mock_configure.assert_called_once()
            assert mock_configure.call_args.kwargs["service_name"] == "wikipedia-potd"
            assert mock_configure.call_args.kwargs["environment"] == "test"
            assert mock_configure.call_args.kwargs["service_version"] == VERSION
            mock_ai.assert_called_once()
            mock_httpx.assert_called_once()
            mock_sqlalchemy.assert_called_once_with(engine=engine.sync_engine)
            mock_fastapi.assert_called_once_with(app)

    def test_instrumentation_failure_is_not_fatal(self):
        """Test that a failing instrumentation does not stop initialization."""
        config = SimpleNamespace(enabled=True, token=None, service_name="svc", environment="test")

        with (
            patch.object(monitoring, "settings", SimpleNamespace(logfire=config)),
            patch.object(monitoring, "_initialized", False),
            patch("logfire.configure"),
            patch("logfire.instrument_pydantic_ai", side_effect=RuntimeError("missing extra")),
            patch("logfire.instrument_httpx") as mock_httpx,
        ):
            assert initialize_logfire() is True
            mock_httpx.assert_called_once()


class TestTraced:
    """Test the traced decorator."""

    def test_sync_function_runs_inside_span(self):
        @traced("Test.sync")
        def add(a, b):
            return a + b

        with patch.object(monitoring, "tracer") as mock_tracer:
            assert add(1, 2) == 3
            mock_tracer.start_as_current_span.assert_called_once_with("Test.sync")

    @pytest.mark.asyncio
    async def test_async_function_runs_inside_span(self):
        @traced("Test.async")
        async def double(x):
            return x * 2

        with patch.object(monitoring, "tracer") as mock_tracer:
            assert await double(4) == 8
            mock_tracer.start_as_current_span.assert_called_once_with("Test.async")

    def test_preserves_function_metadata(self):
        @traced("Test.named")
        def documented():
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."

    def test_exceptions_propagate(self):
        @traced("Test.error")
        def broken():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            broken()


class TestLogApiRequest:
    """Test log_api_request."""

    def test_sets_span_attributes_when_recording(self):
        span = MagicMock()
        span.is_recording.return_value = True

        with patch.object(monitoring.trace, "get_current_span", return_value=span):
            log_api_request("GET", "/api/potd/today", 200, 12.5)

        span.set_attribute.assert_any_call("potd.request.method", "GET")
        span.set_attribute.assert_any_call("potd.request.path", "/api/potd/today")
        span.set_attribute.assert_any_call("potd.request.status_code", 200)
        span.set_attribute.assert_any_call("potd.request.duration_ms", 12.5)

    def test_skips_attributes_without_recording_span(self):
        span = MagicMock()
        span.is_recording.return_value = False

        with patch.object(monitoring.trace, "get_current_span", return_value=span):
            log_api_request("GET", "/health", 200, 1.0)

        span.set_attribute.assert_not_called()
