"""Error factory for creating ExtHostErrors from any exception type."""

from typing import Any

from .errors import ExtHostError
from .matchers import ErrorMatcherChain
from .registry import ErrorRegistry


class ErrorFactory:
    """Creates ExtHostErrors from any exception type."""

    def __init__(
        self,
        registry: ErrorRegistry | None = None,
        matcher_chain: ErrorMatcherChain | None = None,
    ):
        """Initialize error factory.

        Args:
            registry: Error registry (defaults to new ErrorRegistry())
            matcher_chain: Matcher chain (defaults to new ErrorMatcherChain())
        """
        self.registry = registry or ErrorRegistry()
        self.matcher_chain = matcher_chain or ErrorMatcherChain()

    def from_exception(
        self,
        error: Exception,
        extension_name: str | None = None,
        path: str | None = None,
        fallback_code: str | None = None,
    ) -> ExtHostError:
        """Convert any exception to ExtHostError.

        Args:
            error: Exception to convert
            extension_name: Optional extension name
            path: Optional namespace path
            fallback_code: Code used instead of INTERNAL_ERROR when no
                specific matcher applies

        Returns:
            ExtHostError instance
        """
        if isinstance(error, ExtHostError):
            return error.with_context(extension_name=extension_name, path=path)

        match_result = self.matcher_chain.match(error)

        code = match_result.code
        if code == "INTERNAL_ERROR" and fallback_code:
            code = fallback_code

        context = match_result.context.copy()
        if extension_name:
            context["extension_name"] = extension_name
        if path:
            context["path"] = path

        ext_error = self.registry.create(code=code, context=context)

        if match_result.retryable is not None:
            ext_error.retryable = match_result.retryable

        return ext_error

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> ExtHostError:
        """Create ExtHostError directly from code.

        Args:
            code: Error code
            context: Context variables for template interpolation
            **kwargs: Additional context variables

        Returns:
            ExtHostError instance
        """
        merged_context = dict(context or {})
        merged_context.update(kwargs)

        return self.registry.create(code=code, context=merged_context)


# Convenience singleton
_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Get default error factory singleton."""
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, **context: Any) -> ExtHostError:
    """Convenience function to create error.

    Args:
        code: Error code
        **context: Context variables for template interpolation

    Returns:
        ExtHostError instance
    """
    return get_error_factory().create(code, context)
