"""Extension activation.

Activation runs an extension's code once, with a fresh Exports container
and a bridge onto its host instance, and installs the result:

- eager extensions straight into the public root;
- trampolined extensions into the protected root, after which every
  entry point and the extension's own name (in that order) gets a
  read-only forwarding slot on the public root.

Code failures are contained: they are logged, the extension is marked
FAILED and its namespace stays the empty container created for it.
"""

import logging
import time
from functools import partial

from exthost_core.bridge import ExtensionBridge, RuntimeMessageRouter
from exthost_core.errors import ErrorFactory, ExtHostError, create_error
from exthost_core.logging import HostLogger
from exthost_core.namespace import (
    Exports,
    ForwardingSlot,
    Namespace,
    ValueSlot,
    assign,
    create_namespace,
    define,
    lookup,
    merge,
    peek_parent,
    peek_slot,
    remove,
    split_path,
)
from exthost_core.sandbox import ExtensionSandbox
from exthost_core.telemetry import instrument_activation
from exthost_core.types import LoadState

from .code import run_extension_code
from .descriptor import ExtensionDescriptor

logger = logging.getLogger(__name__)


class ExtensionActivator:
    """Activates extensions into a protected and a public namespace root."""

    def __init__(
        self,
        protected: Namespace,
        public: Namespace,
        router: RuntimeMessageRouter,
        sandbox: ExtensionSandbox | None = None,
        logger: HostLogger | None = None,
        error_factory: ErrorFactory | None = None,
    ):
        """Initialize activator.

        Args:
            protected: Root holding authoritative values of trampolined extensions
            public: Root the hosted application reads
            router: Shared runtime-message router handed to every bridge
            sandbox: Runs extension source text (default: ExtensionSandbox())
            logger: Diagnostic sink for activation events
            error_factory: Converts code failures to ExtHostError
        """
        self._protected = protected
        self._public = public
        self._router = router
        self._sandbox = sandbox or ExtensionSandbox()
        self._logger = logger
        self._errors = error_factory or ErrorFactory()
        self._bridges: dict[str, ExtensionBridge] = {}

    def bridge_for(self, name: str) -> ExtensionBridge | None:
        """Bridge created for an activated extension, if any."""
        return self._bridges.get(name)

    def activate(self, descriptor: ExtensionDescriptor) -> bool:
        """Activate ``descriptor`` unless it already was.

        Returns:
            True if this call activated the extension successfully

        Raises:
            ExtHostError(EXTENSION_LOADER_FAILED): If the host instance
                cannot be created; ``loaded`` stays False in that case
        """
        if descriptor.loaded:
            return False

        name = descriptor.name
        ext_logger = self._logger.extension(name) if self._logger else None
        if ext_logger:
            ext_logger.activating(descriptor.use_trampoline)

        start = time.perf_counter()
        with instrument_activation(name, descriptor.use_trampoline) as span:
            instance = self._load_instance(descriptor)

            # Set before running code so re-entrant activation is a no-op.
            descriptor.loaded = True

            target = self._protected if descriptor.use_trampoline else self._public
            exports = Exports(name)
            bridge = ExtensionBridge(
                name,
                instance,
                self._router,
                logger=self._logger.bridge(name) if self._logger else None,
            )

            try:
                create_namespace(self._protected, name)
                create_namespace(self._public, name)
                result = run_extension_code(descriptor, exports, bridge, self._sandbox)
                if result is not None and result.stdout:
                    logger.debug("Output of %s: %s", name, result.stdout.rstrip())
                self._install(target, descriptor, exports)
                if descriptor.use_trampoline:
                    self._expose(descriptor)
            except Exception as e:
                error = self._errors.from_exception(
                    e, extension_name=name, fallback_code="EXTENSION_CODE_RUNTIME"
                )
                descriptor.state = LoadState.FAILED
                descriptor.error = error
                span["status"] = "error"
                span["error"] = error
                if ext_logger:
                    ext_logger.failed(error)
                else:
                    logger.error('Error loading extension "%s": %s', name, error)
                self.reserve_paths(descriptor)
                return False

            self._bridges[name] = bridge
            descriptor.state = LoadState.LOADED

        if ext_logger:
            duration_ms = int((time.perf_counter() - start) * 1000)
            ext_logger.activated(duration_ms, list(descriptor.entry_points))
        return True

    def _load_instance(self, descriptor: ExtensionDescriptor):
        try:
            instance = descriptor.loader()
            instance.load_instance()
        except ExtHostError:
            raise
        except Exception as e:
            raise create_error(
                "EXTENSION_LOADER_FAILED",
                extension_name=descriptor.name,
                detail=f"{type(e).__name__}: {e}",
            ) from e
        return instance

    def reserve_paths(self, descriptor: ExtensionDescriptor) -> None:
        """Leave None at public paths a failed activation left undefined.

        Only paths whose parent container already exists are filled;
        nothing lazy is resolved.
        """
        for path in descriptor.paths:
            parent = peek_parent(self._public, path)
            if parent is None:
                continue
            leaf = split_path(path)[-1]
            if parent._get_slot(leaf) is None:
                parent._define_slot(leaf, ValueSlot(None))

    def _install(self, target: Namespace, descriptor: ExtensionDescriptor, exports: Exports) -> None:
        """Install published entry points, then the exports under the name."""
        published = exports.published
        for path in descriptor.entry_points:
            if path in published:
                assign(target, path, published[path])
        for path in published:
            if path not in descriptor.entry_points:
                logger.warning(
                    "Extension %s published undeclared entry point %s, ignoring",
                    descriptor.name,
                    path,
                )
        existing = peek_slot(target, descriptor.name)
        if isinstance(existing, ValueSlot) and isinstance(existing.value, Namespace):
            # Keep nested extensions installed under this name before us.
            for clash in merge(exports, existing.value):
                logger.warning(
                    "Extension %s overrides nested member %s.%s",
                    descriptor.name,
                    descriptor.name,
                    clash,
                )
        elif isinstance(existing, ValueSlot):
            # A parent extension's own member already sits at this name.
            logger.warning(
                "Extension %s not installed: a parent extension already defines %s",
                descriptor.name,
                descriptor.name,
            )
            return
        assign(target, descriptor.name, exports)

    def _expose(self, descriptor: ExtensionDescriptor) -> None:
        """Promote each path to the protected root behind a read-only public slot."""
        for path in descriptor.paths:
            parent = peek_parent(self._public, path)
            if parent is not None and parent is peek_parent(self._protected, path):
                # An ancestor already forwards into the protected root.
                continue
            slot = peek_slot(self._public, path)
            if slot is not None:
                if isinstance(slot, ValueSlot):
                    self._promote(path, slot.value)
                remove(self._public, path)
            define(
                self._public,
                path,
                ForwardingSlot(partial(lookup, self._protected, path), extension=descriptor.name),
            )

    def _promote(self, path: str, value: object) -> None:
        """Move a value found on the public root to the protected root.

        The extension's own value wins; containers are merged so nested
        extensions keep their slots.
        """
        current = peek_slot(self._protected, path)
        if current is None:
            assign(self._protected, path, value)
        elif (
            isinstance(current, ValueSlot)
            and isinstance(current.value, Namespace)
            and isinstance(value, Namespace)
            and current.value is not value
        ):
            for clash in merge(current.value, value):
                logger.warning("Keeping protected member %s.%s over the public one", path, clash)
