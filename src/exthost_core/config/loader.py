"""Extension host configuration loader."""

import os
import re
import typing
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from exthost_core.errors import create_error
from exthost_core.types import LogFormat, LogLevel, ValidationIssue, ValidationResult

from .models import ServiceConfig

CONFIG_PATH_ENV = "EXTHOST_CONFIG_PATH"

_VALID_SECTIONS = {"runtime", "extensions", "sandbox", "logging", "application"}


def resolve_env_vars(value: str) -> str:
    """Resolve environment variable references in string.

    Supports:
    - ${VAR} - Required, error if not set
    - ${VAR:-default} - With default value
    - ${VAR:?error message} - Required with custom error

    Raises:
        ExtHostError(CONFIG_INVALID): If a required variable is not set
    """
    pattern = r"\$\{([^}:]+)(?::([?-])([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        operator = match.group(2)  # '-' or '?' or None
        operand = match.group(3)  # default value or error message

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value

        if operator == "-":
            return operand or ""
        if operator == "?":
            error_msg = operand or f"Required environment variable {var_name} not set"
            raise create_error("CONFIG_INVALID", detail=error_msg)
        raise create_error(
            "CONFIG_INVALID",
            detail=f"Required environment variable {var_name} not set",
        )

    return re.sub(pattern, replacer, value)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries; ``override`` wins on leaves."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return resolve_env_vars(data)
    else:
        return data


class ConfigLoader:
    """Load and validate extension host configuration."""

    def __init__(self, logger: Any = None):
        """Initialize config loader.

        Args:
            logger: Optional HostLogger instance
        """
        self._config: ServiceConfig | None = None
        self._config_path: Path | None = None
        self._logger = logger

    @property
    def config_path(self) -> Path | None:
        """Path of the file the current configuration came from."""
        return self._config_path

    def load(
        self,
        path: str | Path | None = None,
        use_defaults: bool = True,
        overrides: dict[str, Any] | None = None,
    ) -> ServiceConfig:
        """Load configuration from file.

        Resolution order if path not specified:
        1. EXTHOST_CONFIG_PATH environment variable
        2. ./exthost-config.yaml
        3. ~/.exthost/config.yaml
        4. If use_defaults=True and no file found, use default configuration

        Args:
            path: Optional path to config file
            use_defaults: Use default config when no file is found
            overrides: Merged over the file contents before validation

        Raises:
            ExtHostError(CONFIG_INVALID): If file not found (when
                use_defaults=False) or invalid
        """
        if path is None:
            path = self._resolve_config_path()

        config_path = Path(path)

        if not config_path.exists():
            if use_defaults:
                self._log("INFO", "No config file found, using default configuration")
                return self.load_from_dict(overrides or {})
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Configuration file not found: {config_path}",
            )

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Invalid YAML in config file: {e}",
            ) from e

        if not isinstance(data, dict):
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Configuration root must be a mapping: {config_path}",
            )

        data = _resolve_env_vars_recursive(data)
        if overrides:
            data = deep_merge(data, overrides)

        return self.load_from_dict(data, config_path)

    def load_defaults(self) -> ServiceConfig:
        """Load default configuration without a file."""
        return self.load_from_dict({})

    def load_from_dict(self, data: dict[str, Any], config_path: Path | None = None) -> ServiceConfig:
        """Load configuration from dictionary.

        Raises:
            ExtHostError(CONFIG_INVALID): If configuration is invalid
        """
        validation = self.validate(data)
        if not validation.valid:
            error_messages = [f"- {issue.path}: {issue.message}" for issue in validation.errors]
            raise create_error(
                "CONFIG_INVALID",
                detail="Configuration validation failed:\n" + "\n".join(error_messages),
            )
        for warning in validation.warnings:
            self._log("WARN", warning.message)

        try:
            config = self._convert_field(ServiceConfig, data)
        except Exception as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Failed to parse configuration: {e}",
            ) from e

        self._config = config
        self._config_path = config_path
        self._log("INFO", "Configuration loaded successfully")
        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate config data without loading.

        Unknown keys are warnings; wrong types and unknown enum values
        are errors.
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        for key in data:
            if key not in _VALID_SECTIONS:
                warnings.append(
                    ValidationIssue(
                        path=key,
                        message=f"Unknown configuration key: {key}",
                        severity="warning",
                    )
                )

        for section in _VALID_SECTIONS & set(data):
            if not isinstance(data[section], dict):
                errors.append(
                    ValidationIssue(path=section, message=f"{section} must be a dictionary")
                )

        extensions = data.get("extensions")
        if isinstance(extensions, dict):
            manifest_paths = extensions.get("manifest_paths", [])
            if not isinstance(manifest_paths, list) or not all(
                isinstance(p, str) for p in manifest_paths
            ):
                errors.append(
                    ValidationIssue(
                        path="extensions.manifest_paths",
                        message="manifest_paths must be a list of strings",
                    )
                )
            force = extensions.get("force_trampoline")
            if force is not None and not isinstance(force, bool):
                errors.append(
                    ValidationIssue(
                        path="extensions.force_trampoline",
                        message="force_trampoline must be a boolean",
                    )
                )

        sandbox = data.get("sandbox")
        if isinstance(sandbox, dict) and "max_output_size" in sandbox:
            value = sandbox["max_output_size"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(
                    ValidationIssue(
                        path="sandbox.max_output_size",
                        message="max_output_size must be a positive integer",
                    )
                )

        runtime = data.get("runtime")
        if isinstance(runtime, dict) and isinstance(runtime.get("variables"), dict):
            for key, value in runtime["variables"].items():
                if not isinstance(value, str):
                    warnings.append(
                        ValidationIssue(
                            path=f"runtime.variables.{key}",
                            message=f"Runtime variable {key} is not a string and will be ignored",
                            severity="warning",
                        )
                    )

        logging_section = data.get("logging")
        if isinstance(logging_section, dict):
            for key, enum_type in (("level", LogLevel), ("format", LogFormat)):
                if key in logging_section:
                    allowed = [member.value for member in enum_type]
                    if logging_section[key] not in allowed:
                        errors.append(
                            ValidationIssue(
                                path=f"logging.{key}",
                                message=f"{key} must be one of {allowed}",
                            )
                        )

        return ValidationResult(valid=True, errors=errors, warnings=warnings)

    def get(self) -> ServiceConfig:
        """Get current configuration.

        Raises:
            ExtHostError(CONFIG_INVALID): If configuration not loaded
        """
        if self._config is None:
            raise create_error("CONFIG_INVALID", detail="Configuration not loaded")
        return self._config

    def reload(self) -> ServiceConfig:
        """Reload configuration from the file it was loaded from.

        Raises:
            ExtHostError(CONFIG_INVALID): If no config path set or reload fails
        """
        if self._config_path is None:
            raise create_error("CONFIG_INVALID", detail="No config path set, cannot reload")
        return self.load(self._config_path)

    def _log(self, level: str, message: str) -> None:
        if self._logger:
            self._logger._log(LogLevel(level), "config", message)

    def _resolve_config_path(self) -> Path:
        """Resolve config file path using resolution order."""
        # 1. EXTHOST_CONFIG_PATH environment variable
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path)

        # 2. ./exthost-config.yaml
        local_path = Path("exthost-config.yaml")
        if local_path.exists():
            return local_path

        # 3. ~/.exthost/config.yaml
        home_path = Path.home() / ".exthost" / "config.yaml"
        if home_path.exists():
            return home_path

        # Not found - use local path as default
        return local_path

    def _convert_field(self, field_type: Any, value: Any) -> Any:
        """Convert a parsed YAML value to ``field_type``."""
        if value is None:
            return None

        origin = typing.get_origin(field_type)

        if origin is list:
            if not isinstance(value, list):
                return value
            args = typing.get_args(field_type)
            if args:
                return [self._convert_field(args[0], item) for item in value]
            return value

        if origin is dict:
            if not isinstance(value, dict):
                return value
            args = typing.get_args(field_type)
            if args and len(args) == 2:
                return {k: self._convert_field(args[1], v) for k, v in value.items()}
            return value

        if is_dataclass(field_type):
            if isinstance(value, dict):
                kwargs = {}
                for f in fields(field_type):
                    if f.name in value:
                        kwargs[f.name] = self._convert_field(f.type, value[f.name])
                return field_type(**kwargs)
            return value

        if isinstance(field_type, type) and issubclass(field_type, Enum):
            if isinstance(value, str):
                return field_type(value)
            return value

        return value


# Convenience singleton
_default_loader: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get default config loader singleton."""
    global _default_loader  # noqa: PLW0603
    if _default_loader is None:
        _default_loader = ConfigLoader()
    return _default_loader


def load_config(path: str | Path | None = None) -> ServiceConfig:
    """Convenience function to load config."""
    return get_config_loader().load(path)
