"""Extension host configuration data models."""

from dataclasses import dataclass, field

from exthost_core.types import LogFormat, LogLevel


@dataclass
class RuntimeConfig:
    """Runtime identity passed to the host as runtime variables."""

    name: str = "wrt-service"
    app_id: str = ""
    variables: dict[str, str] = field(default_factory=dict)


@dataclass
class ExtensionsConfig:
    """Where extensions come from and how they load.

    Attributes:
        manifest_paths: Manifest files or glob patterns (YAML or JSON)
        extension_dir: Base directory for relative manifest paths and
            prepended to the import path for extension modules
        force_trampoline: Overrides ``use_trampoline`` of every extension
            when set
    """

    manifest_paths: list[str] = field(default_factory=list)
    extension_dir: str | None = None
    force_trampoline: bool | None = None


@dataclass
class SandboxSettings:
    """Sandbox for extension API source text."""

    allowed_imports: list[str] = field(default_factory=list)  # empty = built-in safe set
    max_output_size: int = 64 * 1024


@dataclass
class LoggingComponentsConfig:
    """Per-component logging toggles."""

    loader: bool = True
    extension: bool = True
    trampoline: bool = True
    bridge: bool = True
    config: bool = True
    application: bool = True


@dataclass
class LoggingOptionsConfig:
    """Logging display options."""

    show_context: bool = True
    truncate_at: int = 200


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    components: LoggingComponentsConfig = field(default_factory=LoggingComponentsConfig)
    options: LoggingOptionsConfig = field(default_factory=LoggingOptionsConfig)


@dataclass
class ApplicationConfig:
    """Hosted application."""

    start_script: str = "service"  # module or "module:object" reference


@dataclass
class ServiceConfig:
    """Complete extension host configuration."""

    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    extensions: ExtensionsConfig = field(default_factory=ExtensionsConfig)
    sandbox: SandboxSettings = field(default_factory=SandboxSettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    application: ApplicationConfig = field(default_factory=ApplicationConfig)
