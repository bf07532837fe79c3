"""Shared types for the extension host.

Import from here rather than submodules:
    from exthost_core.types import LoadState, LogLevel, Visibility
"""

from .enums import CodeKind, LoadState, LogFormat, LogLevel, Visibility
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "LoadState",
    "Visibility",
    "CodeKind",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
