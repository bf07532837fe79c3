"""Host Logging - Component colored logging for extension activation."""

from .colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
)
from .logger import (
    BridgeLogger,
    ExtensionLogger,
    HostLogger,
    LogConfig,
    TrampolineLogger,
)

__all__ = [
    # Logger classes
    "HostLogger",
    "ExtensionLogger",
    "TrampolineLogger",
    "BridgeLogger",
    "LogConfig",
    # Colors
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "ORANGE",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
