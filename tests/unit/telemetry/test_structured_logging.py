"""Unit tests for structured logging and activation spans."""

import json
import logging
import sys

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from exthost_core.extensions import ExtensionActivator, ExtensionDescriptor
from exthost_core.namespace import Namespace
from exthost_core.telemetry import (
    StructuredLogFormatter,
    StructuredLogger,
    get_logger,
    instrument_activation,
    reset_loggers,
)
from exthost_core.telemetry import tracing


@pytest.fixture
def tracer_provider():
    provider = TracerProvider()
    exporter = InMemorySpanExporter()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider, exporter


@pytest.fixture
def spans(tracer_provider, monkeypatch):
    """Finished spans recorded by instrument_activation."""
    provider, exporter = tracer_provider
    monkeypatch.setattr(tracing, "_tracer", provider.get_tracer("test"))
    return exporter


def _record(message="hello", **extra):
    record = logging.LogRecord("exthost.loader", logging.INFO, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredLogFormatter:
    """JSON output with trace context."""

    def test_basic_fields(self):
        entry = json.loads(StructuredLogFormatter().format(_record(manifest="contact.yaml")))

        assert entry["level"] == "INFO"
        assert entry["component"] == "exthost.loader"
        assert entry["message"] == "hello"
        assert entry["manifest"] == "contact.yaml"
        assert "trace_id" not in entry

    def test_trace_context_injected(self, tracer_provider):
        provider, _ = tracer_provider
        tracer = provider.get_tracer("test")

        with tracer.start_as_current_span("extension.activate") as span:
            entry = json.loads(StructuredLogFormatter().format(_record()))
            context = span.get_span_context()

        assert entry["trace_id"] == format(context.trace_id, "032x")
        assert entry["span_id"] == format(context.span_id, "016x")

    def test_exception_included(self):
        try:
            raise ValueError("bad manifest")
        except ValueError:
            record = logging.LogRecord(
                "exthost.loader", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )

        entry = json.loads(StructuredLogFormatter().format(record))

        assert "ValueError: bad manifest" in entry["exception"]


class TestGetLogger:
    """Logger cache."""

    @pytest.fixture(autouse=True)
    def _reset(self):
        reset_loggers()
        yield
        reset_loggers()

    def test_cached_by_name(self):
        assert get_logger("application") is get_logger("application")
        assert isinstance(get_logger("application"), StructuredLogger)

    def test_reset_creates_new_instance(self):
        first = get_logger("application")
        reset_loggers()

        assert get_logger("application") is not first

    def test_extra_fields_reach_handlers(self, caplog):
        with caplog.at_level(logging.INFO, logger="exthost.application"):
            get_logger("application").info("Service started", app_id="org.example")

        (record,) = [r for r in caplog.records if r.name == "exthost.application"]
        assert record.getMessage() == "Service started"
        assert record.app_id == "org.example"

    def test_exception_keeps_traceback(self, caplog):
        with caplog.at_level(logging.ERROR, logger="exthost.application"):
            try:
                raise RuntimeError("on_exit broke")
            except RuntimeError:
                get_logger("application").exception("on_exit hook failed", app_id="org.example")

        (record,) = [r for r in caplog.records if r.name == "exthost.application"]
        assert record.exc_info[0] is RuntimeError
        entry = json.loads(StructuredLogFormatter().format(record))
        assert "on_exit broke" in entry["exception"]
        assert entry["app_id"] == "org.example"


class TestInstrumentActivation:
    """Activation spans."""

    def test_successful_span(self, spans):
        with instrument_activation("tizen.contact", True):
            pass

        (span,) = spans.get_finished_spans()
        assert span.name == "extension.activate"
        assert span.attributes["extension.name"] == "tizen.contact"
        assert span.attributes["extension.use_trampoline"] is True
        assert span.status.status_code == StatusCode.OK

    def test_reported_failure(self, spans):
        with instrument_activation("tizen.bad", False) as result:
            result["status"] = "error"
            result["error"] = "boom"

        (span,) = spans.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert span.status.description == "boom"

    def test_exception_propagates(self, spans):
        with pytest.raises(RuntimeError), instrument_activation("tizen.bad", False):
            raise RuntimeError("loader failed")

        (span,) = spans.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR

    def test_activator_records_span(self, spans, router):
        activator = ExtensionActivator(Namespace(internal=True), Namespace(), router)

        activator.activate(ExtensionDescriptor("tizen.bad", code="raise ValueError('x')"))

        (span,) = spans.get_finished_spans()
        assert span.attributes["extension.name"] == "tizen.bad"
        assert span.status.status_code == StatusCode.ERROR
