"""Telemetry - structured logs and activation spans."""

from .logging import StructuredLogFormatter, StructuredLogger, get_logger, reset_loggers
from .tracing import instrument_activation

__all__ = [
    "StructuredLogFormatter",
    "StructuredLogger",
    "get_logger",
    "reset_loggers",
    "instrument_activation",
]
