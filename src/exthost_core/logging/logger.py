"""Host Logger - Component colored logging for extension activation."""

import json
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TextIO

from exthost_core.logging.colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
)
from exthost_core.types import LogFormat, LogLevel

COMPONENTS = ("loader", "extension", "trampoline", "bridge", "config", "application")


@dataclass
class LogConfig:
    """Logger configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    show_context: bool = True
    truncate_at: int = 200
    components: dict[str, bool] = field(default_factory=dict)
    output: TextIO = field(default=sys.stdout)

    def __post_init__(self) -> None:
        """Initialize default components if not provided."""
        if not self.components:
            self.components = {name: True for name in COMPONENTS}


class HostLogger:
    """Main logger facade. Creates component-specific loggers."""

    def __init__(self, config: LogConfig | None = None):
        """Initialize logger with configuration.

        Args:
            config: Logger configuration (defaults to LogConfig())
        """
        self.config = config or LogConfig()
        self._level_order = {
            LogLevel.DEBUG: 0,
            LogLevel.INFO: 1,
            LogLevel.WARN: 2,
            LogLevel.ERROR: 3,
        }

    def extension(self, name: str) -> "ExtensionLogger":
        """Get a logger scoped to one extension."""
        return ExtensionLogger(self, name)

    def bridge(self, name: str) -> "BridgeLogger":
        """Get a logger for the message bridge of one extension."""
        return BridgeLogger(self, name)

    def configure(self, config: LogConfig) -> None:
        """Update configuration.

        Args:
            config: New logger configuration
        """
        self.config = config

    def info(self, component: str, message: str, context: dict[str, Any] | None = None) -> None:
        self._log(LogLevel.INFO, component, message, context)

    def warn(self, component: str, message: str, context: dict[str, Any] | None = None) -> None:
        self._log(LogLevel.WARN, component, message, context)

    def error(self, component: str, message: str, context: dict[str, Any] | None = None) -> None:
        self._log(LogLevel.ERROR, component, message, context)

    def _should_log(self, level: LogLevel) -> bool:
        return self._level_order.get(level, 0) >= self._level_order.get(self.config.level, 1)

    def _log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Internal logging method.

        Args:
            level: Log level
            component: Component name (loader, extension, trampoline, bridge, ...)
            message: Log message
            context: Additional context data
        """
        if not self._should_log(level):
            return

        if not self.config.components.get(component, True):
            return

        if self.config.format == LogFormat.JSON:
            self._log_json(level, component, message, context)
        else:
            self._log_colored(level, component, message, context)

    def _log_json(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": level.value,
            "component": component,
            "message": message,
        }
        if context:
            log_entry.update(context)

        print(json.dumps(log_entry, default=str), file=self.config.output)

    def _log_colored(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        level_colors = {
            LogLevel.DEBUG: LIGHT_BLUE,
            LogLevel.INFO: CYAN,
            LogLevel.WARN: YELLOW,
            LogLevel.ERROR: RED,
        }

        color = level_colors.get(level, RESET)
        component_color = {
            "loader": MAGENTA,
            "extension": GREEN,
            "trampoline": ORANGE,
            "bridge": CYAN,
        }.get(component, RESET)

        # Format: [COMPONENT] message
        output = f"{component_color}[{component.upper()}]{RESET} {color}{message}{RESET}"

        if context and self.config.show_context:
            context_str = str(context)
            if len(context_str) > self.config.truncate_at:
                context_str = context_str[: self.config.truncate_at] + "..."
            output += f" {LIGHT_BLUE}{context_str}{RESET}"

        print(output, file=self.config.output)


class ExtensionLogger:
    """Logger for activation events of a single extension.

    This is the diagnostic sink the activator reports non-fatal
    activation failures to.
    """

    def __init__(self, parent: HostLogger, name: str):
        self.parent = parent
        self.name = name

    def _context(self, event: str, **extra: Any) -> dict[str, Any]:
        return {"extension": self.name, "event": event, **extra}

    def activating(self, use_trampoline: bool) -> None:
        """Log activation start."""
        mode = "lazy" if use_trampoline else "eager"
        self.parent._log(
            LogLevel.DEBUG,
            "extension",
            f"Activating extension '{self.name}' ({mode})",
            self._context("extension_activating", use_trampoline=use_trampoline),
        )

    def activated(self, duration_ms: int, entry_points: list[str]) -> None:
        """Log a completed activation.

        Args:
            duration_ms: Activation duration in milliseconds
            entry_points: Entry points installed alongside the extension name
        """
        message = f"Extension '{self.name}' loaded ({duration_ms}ms) ✓"
        self.parent._log(
            LogLevel.INFO,
            "extension",
            message,
            self._context(
                "extension_loaded", duration_ms=duration_ms, entry_points=entry_points
            ),
        )

    def failed(self, error: Exception) -> None:
        """Log an abandoned activation."""
        self.parent._log(
            LogLevel.ERROR,
            "extension",
            f'Error loading extension "{self.name}": {error}',
            self._context(
                "extension_failed", error=str(error), error_type=type(error).__name__
            ),
        )

    def trampoline(self) -> "TrampolineLogger":
        """Get a logger for the lazy accessors of this extension."""
        return TrampolineLogger(self)


class TrampolineLogger:
    """Logger for trampoline install / fire events."""

    def __init__(self, parent: ExtensionLogger):
        self.parent = parent

    def installed(self, paths: list[str]) -> None:
        self.parent.parent._log(
            LogLevel.DEBUG,
            "trampoline",
            f"Trampoline installed for '{self.parent.name}'",
            self.parent._context("trampoline_installed", paths=paths),
        )

    def fired(self, path: str) -> None:
        """Log the first read of a lazy path."""
        self.parent.parent._log(
            LogLevel.INFO,
            "trampoline",
            f"First access to '{path}', activating '{self.parent.name}'",
            self.parent._context("trampoline_fired", path=path),
        )

    def error(self, path: str, trace: str) -> None:
        """Log a failed first-access activation with its traceback."""
        self.parent.parent._log(
            LogLevel.ERROR,
            "trampoline",
            f"Activation through '{path}' failed\n{trace}",
            self.parent._context("trampoline_error", path=path),
        )


class BridgeLogger:
    """Logger for runtime messages sent through an extension bridge."""

    def __init__(self, parent: HostLogger, name: str):
        self.parent = parent
        self.name = name

    def runtime_message(self, message_type: str) -> None:
        self.parent._log(
            LogLevel.DEBUG,
            "bridge",
            f"Runtime message '{message_type}' from '{self.name}'",
            {"extension": self.name, "event": "runtime_message", "type": message_type},
        )

    def terminate_requested(self, message_type: str) -> None:
        self.parent._log(
            LogLevel.WARN,
            "bridge",
            f"Termination requested by '{self.name}'",
            {"extension": self.name, "event": "terminate_requested", "type": message_type},
        )
