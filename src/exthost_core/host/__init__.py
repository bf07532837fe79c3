"""Host runtime side of the extension loader."""

from .manifest import ManifestHost, apply_trampoline_policy
from .protocol import HostRuntime
from .runtime_variables import DEFAULT_RUNTIME_NAME, RuntimeVariables

__all__ = [
    "HostRuntime",
    "RuntimeVariables",
    "DEFAULT_RUNTIME_NAME",
    "ManifestHost",
    "apply_trampoline_policy",
]
