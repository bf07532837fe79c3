"""Extension registry, activation and lazy loading."""

from .activator import ExtensionActivator
from .code import load_reference, merge_exports, run_extension_code
from .descriptor import ExtensionDescriptor, NullInstance
from .registry import ExtensionLoader
from .trampoline import TrampolineInstaller

__all__ = [
    "ExtensionLoader",
    "ExtensionDescriptor",
    "ExtensionActivator",
    "TrampolineInstaller",
    "NullInstance",
    "load_reference",
    "merge_exports",
    "run_extension_code",
]
