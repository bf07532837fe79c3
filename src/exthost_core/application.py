"""Service Application - orchestrator for the extension host.

Initializes and wires the components together and drives the hosted
application's lifecycle:

1. Config loading
2. Logger setup
3. Error registry
4. Runtime variables and message router
5. Host runtime (manifest host unless one is injected)
6. Extension loader (eager activation, trampolines)
7. Hosted application module (``on_start``, ``on_request``, ``on_exit``)
"""

import atexit
import importlib
import importlib.util
import sys
from collections.abc import Callable
from pathlib import Path
from types import ModuleType
from typing import Any, TextIO

from exthost_core.bridge import RuntimeMessageRouter
from exthost_core.config import ConfigLoader, ServiceConfig
from exthost_core.errors import ErrorFactory, ErrorRegistry
from exthost_core.extensions import ExtensionLoader
from exthost_core.extensions.code import load_reference
from exthost_core.host import HostRuntime, ManifestHost, RuntimeVariables
from exthost_core.logging import HostLogger, LogConfig
from exthost_core.namespace import Namespace
from exthost_core.sandbox import ExtensionSandbox
from exthost_core.telemetry import get_logger
from exthost_core.types import LogLevel


class ServiceApplication:
    """Extension host application orchestrator.

    The hosted application is a module (or any object) exposing optional
    hooks:

    - ``on_start(api)``: called once after extensions are registered,
      with the public namespace root
    - ``on_request(bundle)``: called for every service request
    - ``on_exit()``: called once when the service terminates
    - ``on_runtime_message(type, data, callback)``: runtime messages
      other than the exit request
    """

    def __init__(
        self,
        config_path: str | None = None,
        config: ServiceConfig | None = None,
        host: HostRuntime | None = None,
        app: Any = None,
        log_output: TextIO | None = None,
        exit_callback: Callable[[], Any] | None = None,
    ):
        """Initialize application.

        Args:
            config_path: Path to config file (optional)
            config: Ready configuration; skips config loading
            host: Host runtime (default: ManifestHost from the config)
            app: Hosted application (default: loaded from
                ``application.start_script``)
            log_output: Output stream for logs (default: sys.stdout)
            exit_callback: Called after ``on_exit`` on termination
                (default: sys.exit)
        """
        self._config_path = config_path
        self._log_output = log_output or sys.stdout
        self._exit_callback = exit_callback or sys.exit
        self._initialized = False
        self._exited = False

        self.config_loader: ConfigLoader | None = None
        self.config: ServiceConfig | None = config
        self.logger: HostLogger | None = None
        self.error_registry: ErrorRegistry | None = None
        self.error_factory: ErrorFactory | None = None
        self.runtime_variables: RuntimeVariables | None = None
        self.router: RuntimeMessageRouter | None = None
        self.host: HostRuntime | None = host
        self.loader: ExtensionLoader | None = None
        self.app: Any = app

    @property
    def api(self) -> Namespace:
        """Public namespace root the hosted application reads."""
        if self.loader is None:
            raise RuntimeError("Application not initialized")
        return self.loader.public

    def initialize(self) -> None:
        """Initialize all components and start the hosted application.

        Raises:
            ExtHostError: On invalid config, host failure or when the
                hosted application cannot be loaded
        """
        if self._initialized:
            return

        # 1. Config Loader
        if self.config is None:
            self.config_loader = ConfigLoader()
            self.config = self.config_loader.load(self._config_path)

        # 2. Logger
        log_config = LogConfig(
            level=self.config.logging.level,
            format=self.config.logging.format,
            show_context=self.config.logging.options.show_context,
            truncate_at=self.config.logging.options.truncate_at,
            components={
                "loader": self.config.logging.components.loader,
                "extension": self.config.logging.components.extension,
                "trampoline": self.config.logging.components.trampoline,
                "bridge": self.config.logging.components.bridge,
                "config": self.config.logging.components.config,
                "application": self.config.logging.components.application,
            },
            output=self._log_output,
        )
        self.logger = HostLogger(log_config)

        # 3. Error Registry & Factory
        self.error_registry = ErrorRegistry()
        self.error_factory = ErrorFactory(self.error_registry)

        # 4. Runtime variables and router
        self.runtime_variables = RuntimeVariables(self.config.runtime.name)
        self.runtime_variables.update(self.config.runtime.variables, clear=False)
        if self.config.runtime.app_id:
            self.runtime_variables.add("app_id", self.config.runtime.app_id)
        self.router = RuntimeMessageRouter(on_terminate=self.terminate)

        extension_dir = self.config.extensions.extension_dir
        if extension_dir and extension_dir not in sys.path:
            sys.path.insert(0, extension_dir)

        # 5. Host runtime
        if self.host is None:
            self.host = ManifestHost(
                self.config.extensions.manifest_paths,
                base_dir=extension_dir,
                logger=self.logger,
                force_trampoline=self.config.extensions.force_trampoline,
            )

        # 6. Extension loader
        sandbox = ExtensionSandbox(
            allowed_imports=set(self.config.sandbox.allowed_imports) or None,
            max_output_size=self.config.sandbox.max_output_size,
        )
        self.loader = ExtensionLoader(
            self.host,
            runtime_variables=self.runtime_variables,
            router=self.router,
            sandbox=sandbox,
            logger=self.logger,
            error_factory=self.error_factory,
        )

        # 7. Hosted application
        if self.app is None:
            self.app = self._load_app(self.config.application.start_script)
        handler = getattr(self.app, "on_runtime_message", None)
        if callable(handler):
            self.router.set_handler(handler)
        atexit.register(self._run_on_exit)

        self._initialized = True
        self._log(LogLevel.INFO, "Service started", {"extensions": self.loader.names()})

        on_start = getattr(self.app, "on_start", None)
        if callable(on_start):
            on_start(self.api)

    def handle_service(self, bundle: str) -> Any:
        """Handle one service request.

        Stores the encoded bundle as a runtime variable, pushes the
        variables to the host and calls the application's ``on_request``.
        """
        if not self._initialized:
            raise RuntimeError("Application not initialized")
        self.runtime_variables.add("encoded_bundle", bundle)
        self.host.update_runtime_variables(self.runtime_variables.as_dict())
        on_request = getattr(self.app, "on_request", None)
        if callable(on_request):
            return on_request(bundle)
        return None

    def terminate(self) -> None:
        """Run the application's ``on_exit`` once and exit."""
        self._log(LogLevel.INFO, "Service terminating")
        self._run_on_exit()
        self._exit_callback()

    def _run_on_exit(self) -> None:
        if self._exited:
            return
        self._exited = True
        atexit.unregister(self._run_on_exit)
        on_exit = getattr(self.app, "on_exit", None)
        if callable(on_exit):
            try:
                on_exit()
            except Exception:
                get_logger("application").exception("on_exit hook failed")
                raise

    def _load_app(self, start_script: str) -> Any:
        """Load the hosted application from a module, file or reference.

        Raises:
            ExtHostError(APPLICATION_LOAD_FAILED): If it cannot be loaded
        """
        try:
            if start_script.endswith(".py"):
                return self._load_app_file(Path(start_script))
            if ":" in start_script:
                return load_reference(start_script)
            return importlib.import_module(start_script)
        except Exception as e:
            raise self.error_factory.create(
                "APPLICATION_LOAD_FAILED",
                start_script=start_script,
                detail=f"{type(e).__name__}: {e}",
            ) from e

    def _load_app_file(self, path: Path) -> ModuleType:
        if not path.is_absolute() and self.config.extensions.extension_dir:
            path = Path(self.config.extensions.extension_dir) / path
        spec = importlib.util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load application file: {path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    def _log(self, level: LogLevel, message: str, context: dict[str, Any] | None = None) -> None:
        if self.logger:
            self.logger._log(level, "application", message, context)
