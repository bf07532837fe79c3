"""Host runtime backed by extension manifest files.

A manifest is a YAML or JSON list of extension entries:

    - name: tizen
      code: tizen_api.core:build
    - name: tizen.contact
      entry_points: [tizen.AddressBook, tizen.Person]
      api: contact_api.py            # Python source, relative to the manifest
      instance: tizen_native.contact:ContactInstance

``code`` is an import reference or inline source text, ``api`` a source
file, and ``instance`` an import reference to a factory called with the
runtime variables that returns the extension's host instance.

Unless an entry sets ``use_trampoline`` itself, an extension is loaded
lazily when another registered extension is a prefix of its name and
eagerly otherwise (``tizen`` eager, ``tizen.contact`` lazy).
"""

import glob
import json
import logging
from collections.abc import Mapping, Sequence
from functools import partial
from pathlib import Path
from typing import Any

import yaml

from exthost_core.errors import create_error
from exthost_core.extensions.code import load_reference
from exthost_core.extensions.descriptor import ExtensionDescriptor, NullInstance
from exthost_core.types import LogLevel, ValidationIssue

from .runtime_variables import RuntimeVariables

logger = logging.getLogger(__name__)

_STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


def _create_instance(reference: str, runtime_variables: RuntimeVariables) -> Any:
    factory = load_reference(reference)
    return factory(runtime_variables)


def apply_trampoline_policy(
    descriptors: Sequence[ExtensionDescriptor],
    explicit: set[str] | None = None,
) -> None:
    """Make every extension without a registered ancestor eager.

    For each extension the shortest prefix of its name that is itself a
    registered extension (possibly the extension itself) is switched to
    eager loading. Names in ``explicit`` keep their setting.
    """
    explicit = explicit or set()
    by_name = {descriptor.name: descriptor for descriptor in descriptors}
    for descriptor in descriptors:
        parts = descriptor.name.split(".")
        for i in range(1, len(parts) + 1):
            owner = by_name.get(".".join(parts[:i]))
            if owner is not None:
                if owner.name not in explicit:
                    owner.use_trampoline = False
                break


class ManifestHost:
    """HostRuntime that registers extensions from manifest files."""

    def __init__(
        self,
        manifest_paths: Sequence[str | Path] = (),
        base_dir: str | Path | None = None,
        logger: Any = None,
        force_trampoline: bool | None = None,
    ):
        """Initialize manifest host.

        Args:
            manifest_paths: Manifest files or glob patterns
            base_dir: Base for relative manifest paths (default: cwd)
            logger: Optional HostLogger instance
            force_trampoline: Overrides use_trampoline for every extension
        """
        self._manifest_paths = list(manifest_paths)
        self._base_dir = Path(base_dir) if base_dir else Path.cwd()
        self._logger = logger
        self._force_trampoline = force_trampoline
        self._variables = RuntimeVariables()
        self._extensions: dict[str, ExtensionDescriptor] = {}
        self._symbols: set[str] = set()
        self._explicit_trampoline: set[str] = set()
        self._issues: list[ValidationIssue] = []
        self._initialized = False

    def _log(self, level: LogLevel, message: str, context: dict[str, Any] | None = None) -> None:
        if self._logger:
            self._logger._log(level, "loader", message, context)
        else:
            logger.log(_STDLIB_LEVELS.get(level, logging.INFO), message)

    @property
    def runtime_variables(self) -> RuntimeVariables:
        return self._variables

    @property
    def issues(self) -> list[ValidationIssue]:
        """Problems found while reading manifests."""
        return list(self._issues)

    # HostRuntime protocol

    def initialize(self, runtime_variables: Mapping[str, str]) -> None:
        """Store the runtime variables and register extensions from manifests."""
        self._variables.update(runtime_variables)
        if self._initialized:
            return
        self._initialized = True

        for path in self._expand_paths():
            self.load_manifest(path)

        apply_trampoline_policy(list(self._extensions.values()), self._explicit_trampoline)
        if self._force_trampoline is not None:
            for descriptor in self._extensions.values():
                descriptor.use_trampoline = self._force_trampoline

    def get_extensions(self) -> list[ExtensionDescriptor]:
        return list(self._extensions.values())

    def update_runtime_variables(self, runtime_variables: Mapping[str, str]) -> None:
        """Replace the runtime variables; non-string values are dropped."""
        self._variables.update(runtime_variables)

    # Registration

    def register(self, descriptor: ExtensionDescriptor) -> bool:
        """Register one extension.

        Returns:
            False when its name or an entry point is already registered
        """
        if descriptor.name in self._symbols:
            self._warn_duplicate(descriptor, descriptor.name)
            return False
        for entry_point in descriptor.entry_points:
            if entry_point in self._symbols:
                self._warn_duplicate(descriptor, entry_point)
                return False

        self._symbols.update(descriptor.entry_points)
        self._symbols.add(descriptor.name)
        self._extensions[descriptor.name] = descriptor
        return True

    def load_manifest(self, path: str | Path) -> int:
        """Register the extensions listed in one manifest file.

        Returns:
            Number of extensions registered from the file
        """
        manifest = Path(path)
        try:
            text = manifest.read_text()
            data = json.loads(text) if manifest.suffix == ".json" else yaml.safe_load(text)
        except (OSError, ValueError, yaml.YAMLError) as e:
            self._report(str(manifest), f"Can't read extension manifest: {e}")
            return 0

        if not isinstance(data, list):
            self._report(str(manifest), f"{manifest} is not an extension manifest")
            return 0

        count = 0
        for index, entry in enumerate(data):
            descriptor = self._entry_to_descriptor(manifest, index, entry)
            if descriptor is not None and self.register(descriptor):
                count += 1

        self._log(
            LogLevel.DEBUG,
            f"Registered {count} extensions from {manifest}",
            {"manifest": str(manifest), "count": count},
        )
        return count

    def _entry_to_descriptor(
        self, manifest: Path, index: int, entry: Any
    ) -> ExtensionDescriptor | None:
        where = f"{manifest}[{index}]"
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str) or not entry["name"]:
            self._report(where, "Extension entry must be a mapping with a 'name'")
            return None

        name = entry["name"]
        entry_points = entry.get("entry_points")
        if not isinstance(entry_points, list):
            self._report(where, f"There are no entry points for '{name}'", severity="warning")
            entry_points = []

        code: str = entry.get("code") or ""
        if entry.get("api"):
            api_path = Path(entry["api"])
            if not api_path.is_absolute():
                api_path = manifest.parent / api_path
            try:
                code = api_path.read_text()
            except OSError as e:
                self._report(where, f"Can't read API source of '{name}': {e}")
                return None

        loader: Any = NullInstance
        if entry.get("instance"):
            loader = partial(_create_instance, entry["instance"], self._variables)

        descriptor = ExtensionDescriptor(
            name=name,
            code=code,
            entry_points=[str(entry_point) for entry_point in entry_points],
            use_trampoline=bool(entry.get("use_trampoline", True)),
            loader=loader,
        )
        if "use_trampoline" in entry:
            self._explicit_trampoline.add(name)
        return descriptor

    def _expand_paths(self) -> list[Path]:
        paths: list[Path] = []
        for pattern in self._manifest_paths:
            pattern_path = Path(pattern).expanduser()
            if not pattern_path.is_absolute():
                pattern_path = self._base_dir / pattern_path
            matches = sorted(glob.glob(str(pattern_path)))
            if not matches:
                self._report(str(pattern), "No extension manifest matches", severity="warning")
            paths.extend(Path(match) for match in matches)
        return paths

    def _report(self, path: str, message: str, severity: str = "error") -> None:
        self._issues.append(ValidationIssue(path=path, message=message, severity=severity))
        if severity == "error":
            error = create_error("MANIFEST_INVALID", manifest=path, detail=message)
            self._log(LogLevel.ERROR, str(error), {"manifest": path})
        else:
            self._log(LogLevel.WARN, message, {"manifest": path})

    def _warn_duplicate(self, descriptor: ExtensionDescriptor, path: str) -> None:
        error = create_error("EXTENSION_DUPLICATE", extension_name=descriptor.name, path=path)
        self._issues.append(
            ValidationIssue(path=descriptor.name, message=error.message, severity="warning")
        )
        self._log(LogLevel.WARN, error.message, {"extension": descriptor.name, "path": path})
