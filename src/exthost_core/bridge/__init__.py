"""Message bridge between extension code and the host."""

from .bridge import ExtensionBridge
from .router import RuntimeHandler, RuntimeMessageRouter
from .types import ExtensionInstance, RuntimeMessageKind

__all__ = [
    "ExtensionBridge",
    "ExtensionInstance",
    "RuntimeMessageRouter",
    "RuntimeHandler",
    "RuntimeMessageKind",
]
