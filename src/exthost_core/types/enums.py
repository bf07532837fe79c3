"""Shared enumerations for the extension host."""

from enum import Enum


class LogLevel(str, Enum):
    """Log verbosity level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output format."""

    COLORED = "colored"
    JSON = "json"


class LoadState(str, Enum):
    """Activation state of a single extension."""

    UNLOADED = "unloaded"
    TRAMPOLINED = "trampolined"
    LOADED = "loaded"
    FAILED = "failed"


class Visibility(str, Enum):
    """How a namespace path is exposed on a root."""

    INTERNAL = "internal"  # plain value on the protected root
    PUBLIC = "public"  # plain writable value on the public root
    PUBLIC_READONLY = "public-readonly"  # forwards to the protected copy
    LAZY = "lazy"  # trampoline, resolves on first read


class CodeKind(str, Enum):
    """Form in which an extension supplies its API code."""

    CALLABLE = "callable"
    REFERENCE = "reference"  # "package.module:function"
    SOURCE = "source"  # Python source run in the sandbox
