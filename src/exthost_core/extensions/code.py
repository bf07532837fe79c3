"""Resolution of extension code into an exports table."""

import importlib
from collections.abc import Mapping
from typing import Any

from exthost_core.bridge import ExtensionBridge
from exthost_core.namespace import Exports
from exthost_core.sandbox import ExtensionSandbox, SandboxResult
from exthost_core.types import CodeKind

from .descriptor import ExtensionDescriptor


def load_reference(reference: str) -> Any:
    """Import the object named by ``"package.module:attribute"``.

    Raises:
        ImportError: If the module or attribute cannot be found
    """
    module_name, sep, attr_path = reference.strip().partition(":")
    if not sep or not module_name or not attr_path:
        raise ImportError(f"Invalid reference: {reference!r}", name=reference)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ImportError(f"Cannot import extension module: {module_name}", name=reference) from e

    obj: Any = module
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ImportError(f"'{module_name}' has no attribute '{attr_path}'", name=reference) from e
    return obj


def merge_exports(exports: Exports, table: Any) -> None:
    """Copy a returned exports table into ``exports``.

    Mapping keys containing a dot are published as entry points.

    Raises:
        TypeError: If ``table`` is neither a Mapping nor an Exports
    """
    if isinstance(table, Exports):
        for name in table._slots:
            exports._slots[name] = table._slots[name]
        for path, value in table.published.items():
            exports.publish(path, value)
    elif isinstance(table, Mapping):
        for name, value in table.items():
            # dotted keys are entry points, e.g. {"tizen.AddressBook": AddressBook}
            if "." in name:
                exports.publish(name, value)
            else:
                setattr(exports, name, value)
    else:
        raise TypeError(f"Extension factory returned {type(table).__name__}, expected a mapping")


def run_extension_code(
    descriptor: ExtensionDescriptor,
    exports: Exports,
    bridge: ExtensionBridge,
    sandbox: ExtensionSandbox,
) -> SandboxResult | None:
    """Run the descriptor's code so that it fills ``exports``.

    Source text goes through the sandbox with ``exports`` and
    ``extension`` as its only injected names. Callables and references
    are called as ``factory(bridge, exports)``; a non-None return value
    is merged into ``exports``.

    Returns:
        The sandbox result for source code, None otherwise

    Raises:
        Exception: Whatever stopped the code; the caller decides how to report it
    """
    kind = descriptor.kind
    if kind is CodeKind.SOURCE:
        result = sandbox.execute(
            descriptor.code,
            {"exports": exports, "extension": bridge},
            filename=f"<extension {descriptor.name}>",
        )
        if not result.success and result.exception is not None:
            raise result.exception
        return result

    factory = descriptor.code if kind is CodeKind.CALLABLE else load_reference(descriptor.code)
    if not callable(factory):
        raise TypeError(f"Extension code for '{descriptor.name}' is not callable")
    table = factory(bridge, exports)
    if table is not None and table is not exports:
        merge_exports(exports, table)
    return None
