"""Activation span helper.

Uses the globally configured tracer provider; without an SDK installed
the span is a no-op.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

_tracer = trace.get_tracer("exthost_core")


@contextmanager
def instrument_activation(name: str, use_trampoline: bool) -> Iterator[dict[str, Any]]:
    """Context manager wrapping one extension activation in a span.

    Args:
        name: Extension name
        use_trampoline: Whether the activation was deferred

    Yields:
        Dictionary the caller fills with ``status`` and ``error``
    """
    result: dict[str, Any] = {"status": "ok", "error": None}
    with _tracer.start_as_current_span("extension.activate") as span:
        span.set_attribute("extension.name", name)
        span.set_attribute("extension.use_trampoline", use_trampoline)
        try:
            yield result
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise
        if result["status"] == "ok":
            span.set_status(Status(StatusCode.OK))
        else:
            span.set_status(Status(StatusCode.ERROR, str(result["error"])))
