"""exthost-core - Extension host with lazy namespace activation.

Loads extensions enumerated by a host runtime into nested namespaces,
either eagerly or behind trampolines that activate them on first
access, and bridges messages between extension code and the host.
"""

from exthost_core.application import ServiceApplication
from exthost_core.extensions import ExtensionDescriptor, ExtensionLoader
from exthost_core.host import ManifestHost, RuntimeVariables

__version__ = "0.1.0"
__all__ = [
    "__version__",
    "ServiceApplication",
    "ExtensionLoader",
    "ExtensionDescriptor",
    "ManifestHost",
    "RuntimeVariables",
]
