"""Extension host configuration - config loading and models."""

from .loader import (
    CONFIG_PATH_ENV,
    ConfigLoader,
    deep_merge,
    get_config_loader,
    load_config,
    resolve_env_vars,
)
from .models import (
    ApplicationConfig,
    ExtensionsConfig,
    LoggingComponentsConfig,
    LoggingConfig,
    LoggingOptionsConfig,
    RuntimeConfig,
    SandboxSettings,
    ServiceConfig,
)

__all__ = [
    # Config models
    "ServiceConfig",
    "RuntimeConfig",
    "ExtensionsConfig",
    "SandboxSettings",
    "LoggingConfig",
    "LoggingComponentsConfig",
    "LoggingOptionsConfig",
    "ApplicationConfig",
    # Loader
    "ConfigLoader",
    "CONFIG_PATH_ENV",
    "get_config_loader",
    "load_config",
    "resolve_env_vars",
    "deep_merge",
]
