"""Extension Registry - descriptors enumerated once from the host."""

import logging
from typing import Any

from exthost_core.bridge import RuntimeMessageRouter
from exthost_core.errors import ErrorFactory, ExtHostError
from exthost_core.host.protocol import HostRuntime
from exthost_core.host.runtime_variables import RuntimeVariables
from exthost_core.logging import HostLogger
from exthost_core.namespace import Namespace, lookup
from exthost_core.sandbox import ExtensionSandbox
from exthost_core.types import LoadState, LogLevel

from .activator import ExtensionActivator
from .descriptor import ExtensionDescriptor
from .trampoline import TrampolineInstaller

logger = logging.getLogger(__name__)

_MISSING = object()

_STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class ExtensionLoader:
    """Registry of the host's extensions and owner of both namespace roots.

    On start the host is initialized with the runtime variables and asked
    for its extensions exactly once. Each descriptor is then, in
    enumeration order, either activated right away or given trampolines
    on the public root.

    Example:
        loader = ExtensionLoader(host)
        contact = loader.public.tizen.contact   # activates on first read
    """

    def __init__(
        self,
        host: HostRuntime,
        runtime_variables: RuntimeVariables | None = None,
        router: RuntimeMessageRouter | None = None,
        sandbox: ExtensionSandbox | None = None,
        logger: HostLogger | None = None,
        error_factory: ErrorFactory | None = None,
        autostart: bool = True,
    ):
        """Initialize extension loader.

        Args:
            host: Host runtime supplying the extension descriptors
            runtime_variables: Passed to ``host.initialize``
            router: Runtime-message router shared by all bridges
            sandbox: Sandbox for extension source text
            logger: Optional host logger
            error_factory: Converts failures to ExtHostError
            autostart: Call ``start()`` from the constructor

        Raises:
            ExtHostError: If ``autostart`` is set and the host fails
        """
        self._host = host
        if runtime_variables is None:
            runtime_variables = RuntimeVariables()
        self._runtime_variables = runtime_variables
        self._router = router or RuntimeMessageRouter(on_terminate=self._unhandled_terminate)
        self._logger = logger
        self._errors = error_factory or ErrorFactory()

        self._protected = Namespace(internal=True)
        self._public = Namespace()
        self._extensions: dict[str, ExtensionDescriptor] = {}
        self._started = False

        self._activator = ExtensionActivator(
            self._protected,
            self._public,
            self._router,
            sandbox=sandbox,
            logger=logger,
            error_factory=self._errors,
        )
        self._trampolines = TrampolineInstaller(
            self._protected,
            self._public,
            self._activator,
            logger=logger,
        )

        if autostart:
            self.start()

    def _log(self, level: LogLevel, message: str, context: dict[str, Any] | None = None) -> None:
        """Log message if logger available."""
        if self._logger:
            self._logger._log(level, "loader", message, context)
        else:
            logger.log(_STDLIB_LEVELS.get(level, logging.INFO), message)

    @property
    def public(self) -> Namespace:
        """Root the hosted application reads."""
        return self._public

    @property
    def protected(self) -> Namespace:
        """Root holding the authoritative values of trampolined extensions."""
        return self._protected

    @property
    def router(self) -> RuntimeMessageRouter:
        return self._router

    @property
    def activator(self) -> ExtensionActivator:
        return self._activator

    @property
    def descriptors(self) -> list[ExtensionDescriptor]:
        """Registered descriptors in enumeration order."""
        return list(self._extensions.values())

    def start(self) -> None:
        """Initialize the host, register its extensions and dispatch them.

        Does nothing when already started.

        Raises:
            ExtHostError(HOST_INIT_FAILED): If ``host.initialize`` fails
            ExtHostError(HOST_ENUMERATION_FAILED): If ``host.get_extensions`` fails
            ExtHostError(EXTENSION_LOADER_FAILED): If an eager extension's
                instance cannot be created
        """
        if self._started:
            return
        self._started = True

        try:
            self._host.initialize(self._runtime_variables.as_dict())
        except Exception as e:
            raise self._host_error("HOST_INIT_FAILED", e) from e

        try:
            descriptors = list(self._host.get_extensions())
        except Exception as e:
            raise self._host_error("HOST_ENUMERATION_FAILED", e) from e

        for descriptor in descriptors:
            self._register(descriptor)

        for descriptor in self.descriptors:
            if descriptor.use_trampoline:
                self._trampolines.install_trampoline(descriptor)
            else:
                self._activator.activate(descriptor)

        self._log(
            LogLevel.INFO,
            f"Registered {len(self._extensions)} extensions",
            {"extensions": self.names()},
        )

    def get(self, name: str) -> ExtensionDescriptor | None:
        """Get descriptor by extension name."""
        return self._extensions.get(name)

    def names(self) -> list[str]:
        return list(self._extensions)

    def resolve(self, path: str) -> Any:
        """Read ``path`` from the public root, activating lazily if needed.

        Raises:
            ExtHostError(NAMESPACE_NOT_FOUND): If nothing is defined at ``path``
        """
        value = lookup(self._public, path, _MISSING)
        if value is _MISSING:
            raise self._errors.create("NAMESPACE_NOT_FOUND", path=path)
        return value

    def activate(self, name: str) -> bool:
        """Activate an extension now instead of on first access.

        Returns:
            True if this call activated the extension

        Raises:
            ExtHostError(EXTENSION_UNKNOWN): If no extension has that name
        """
        descriptor = self._extensions.get(name)
        if descriptor is None:
            raise self._errors.create("EXTENSION_UNKNOWN", extension_name=name)
        if descriptor.state == LoadState.TRAMPOLINED:
            self._trampolines.delete_trampoline(descriptor)
        return self._activator.activate(descriptor)

    def _register(self, descriptor: ExtensionDescriptor) -> None:
        claimed = {path for registered in self._extensions.values() for path in registered.paths}
        for path in descriptor.paths:
            if path in claimed:
                error = self._errors.create(
                    "EXTENSION_DUPLICATE", extension_name=descriptor.name, path=path
                )
                self._log(LogLevel.WARN, error.message, {"extension": descriptor.name, "path": path})
                return

        descriptor.loaded = False
        descriptor.state = LoadState.UNLOADED
        descriptor.error = None
        self._extensions[descriptor.name] = descriptor

    def _host_error(self, code: str, cause: Exception) -> ExtHostError:
        return self._errors.create(code, detail=f"{type(cause).__name__}: {cause}")

    def _unhandled_terminate(self) -> None:
        self._log(LogLevel.WARN, "Runtime exit requested but no terminate handler is set")
