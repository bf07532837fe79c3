"""Error registry for creating errors from templates."""

from typing import Any

from .errors import ErrorCategory, ErrorTemplate, ExtHostError


class ErrorRegistry:
    """Registry of error templates. Creates errors from templates + context."""

    def __init__(self) -> None:
        """Initialize error registry with built-in templates."""
        self._templates: dict[str, ErrorTemplate] = {}
        self._load_builtin_templates()

    def get_template(self, code: str) -> ErrorTemplate | None:
        """Get template by error code.

        Args:
            code: Error code to look up

        Returns:
            ErrorTemplate if found, None otherwise
        """
        return self._templates.get(code)

    def list_codes(self) -> list[str]:
        """List all registered error codes."""
        return list(self._templates.keys())

    def register(self, template: ErrorTemplate) -> None:
        """Register (or replace) a template."""
        self._templates[template.code] = template

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: ExtHostError | None = None,
    ) -> ExtHostError:
        """Create error instance from template + context.

        Args:
            code: Error code
            context: Context variables for template interpolation
            cause: Optional cause error

        Returns:
            ExtHostError instance

        Raises:
            ValueError: If error code not found
        """
        template = self.get_template(code)
        if not template:
            msg = f"Unknown error code: {code}"
            raise ValueError(msg)

        context = context or {}

        message = self._interpolate(template.message_template, context)
        detail = context.get("detail") or self._interpolate(template.detail_template, context)
        suggestion = self._interpolate(template.suggestion_template, context)

        if message is None:
            message = f"Error {code}"

        return ExtHostError(
            code=template.code,
            category=template.category,
            message=message,
            detail=detail,
            suggestion=suggestion,
            retryable=template.default_retryable,
            extension_name=context.get("extension_name"),
            path=context.get("path"),
            cause=cause,
        )

    def _interpolate(
        self,
        template: str | None,
        context: dict[str, Any],
    ) -> str | None:
        """Safe string interpolation.

        Args:
            template: Template string with {var} placeholders
            context: Context variables

        Returns:
            Interpolated string or None if template is None
        """
        if template is None:
            return None

        try:
            return template.format(**context)
        except KeyError:
            # Missing context variable - return template as-is
            return template

    def _load_builtin_templates(self) -> None:
        """Load hardcoded built-in templates."""
        # HOST Errors
        self._templates["HOST_INIT_FAILED"] = ErrorTemplate(
            code="HOST_INIT_FAILED",
            category=ErrorCategory.HOST,
            message_template="Host runtime initialization failed",
            detail_template="The host rejected the runtime variables or could not start",
            suggestion_template="Check the host runtime logs",
        )

        self._templates["HOST_ENUMERATION_FAILED"] = ErrorTemplate(
            code="HOST_ENUMERATION_FAILED",
            category=ErrorCategory.HOST,
            message_template="Host runtime could not enumerate extensions",
            detail_template="getExtensions() raised or returned an invalid descriptor list",
            suggestion_template="Check the extension manifests registered with the host",
        )

        self._templates["MANIFEST_INVALID"] = ErrorTemplate(
            code="MANIFEST_INVALID",
            category=ErrorCategory.HOST,
            message_template="Extension manifest '{manifest}' is invalid",
            suggestion_template="A manifest must be a list of objects with at least a 'name'",
        )

        # EXTENSION Errors
        self._templates["EXTENSION_DUPLICATE"] = ErrorTemplate(
            code="EXTENSION_DUPLICATE",
            category=ErrorCategory.EXTENSION,
            message_template="Ignoring extension '{extension_name}': '{path}' is already registered",
        )

        self._templates["EXTENSION_UNKNOWN"] = ErrorTemplate(
            code="EXTENSION_UNKNOWN",
            category=ErrorCategory.EXTENSION,
            message_template="Unknown extension '{extension_name}'",
        )

        self._templates["EXTENSION_LOADER_FAILED"] = ErrorTemplate(
            code="EXTENSION_LOADER_FAILED",
            category=ErrorCategory.EXTENSION,
            message_template="Could not create an instance of extension '{extension_name}'",
            detail_template="The host instance loader raised an exception",
        )

        self._templates["EXTENSION_CODE_SYNTAX"] = ErrorTemplate(
            code="EXTENSION_CODE_SYNTAX",
            category=ErrorCategory.EXTENSION,
            message_template="Syntax error in extension '{extension_name}'",
            detail_template="The extension API source contains syntax errors",
            suggestion_template="Fix the extension source and restart the service",
        )

        self._templates["EXTENSION_CODE_SECURITY"] = ErrorTemplate(
            code="EXTENSION_CODE_SECURITY",
            category=ErrorCategory.EXTENSION,
            message_template="Security violation in extension '{extension_name}'",
            detail_template="The extension attempted to use forbidden imports or builtins",
            suggestion_template="Allow the import in sandbox.allowed_imports or remove it",
        )

        self._templates["EXTENSION_CODE_RUNTIME"] = ErrorTemplate(
            code="EXTENSION_CODE_RUNTIME",
            category=ErrorCategory.EXTENSION,
            message_template="Error loading extension '{extension_name}'",
            detail_template="The extension code raised an exception during activation",
        )

        self._templates["EXTENSION_IMPORT_FAILED"] = ErrorTemplate(
            code="EXTENSION_IMPORT_FAILED",
            category=ErrorCategory.EXTENSION,
            message_template="Cannot import '{reference}'",
            suggestion_template="Use the form 'package.module:attribute'",
        )

        # NAMESPACE Errors
        self._templates["NAMESPACE_CONFLICT"] = ErrorTemplate(
            code="NAMESPACE_CONFLICT",
            category=ErrorCategory.NAMESPACE,
            message_template="Cannot create namespace '{path}': '{segment}' is not a container",
        )

        self._templates["NAMESPACE_READONLY"] = ErrorTemplate(
            code="NAMESPACE_READONLY",
            category=ErrorCategory.NAMESPACE,
            message_template="Namespace '{path}' is read-only",
        )

        self._templates["NAMESPACE_NOT_FOUND"] = ErrorTemplate(
            code="NAMESPACE_NOT_FOUND",
            category=ErrorCategory.NAMESPACE,
            message_template="Namespace '{path}' is not defined",
        )

        # CONFIG Errors
        self._templates["CONFIG_INVALID"] = ErrorTemplate(
            code="CONFIG_INVALID",
            category=ErrorCategory.CONFIG,
            message_template="Invalid configuration",
            suggestion_template="Check the configuration file syntax and values",
        )

        # SYSTEM Errors
        self._templates["APPLICATION_LOAD_FAILED"] = ErrorTemplate(
            code="APPLICATION_LOAD_FAILED",
            category=ErrorCategory.SYSTEM,
            message_template="Cannot load hosted application '{start_script}'",
        )

        self._templates["INTERNAL_ERROR"] = ErrorTemplate(
            code="INTERNAL_ERROR",
            category=ErrorCategory.SYSTEM,
            message_template="Internal error",
            detail_template="An unexpected {error_type} occurred",
        )
