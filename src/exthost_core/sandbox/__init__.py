"""Sandbox module for running extension API source."""

from .sandbox import ExtensionSandbox, SandboxResult, SecurityError
from .types import DANGEROUS_BUILTINS, SAFE_IMPORTS

__all__ = [
    "ExtensionSandbox",
    "SandboxResult",
    "SecurityError",
    "SAFE_IMPORTS",
    "DANGEROUS_BUILTINS",
]
