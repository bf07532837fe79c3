"""Error matchers for converting exceptions to ExtHostErrors."""

from exthost_core.sandbox.sandbox import SecurityError

from .errors import ErrorMatcher, MatchResult


class SyntaxErrorMatcher(ErrorMatcher):
    """Matches Python syntax errors raised while compiling extension source."""

    def matches(self, error: Exception) -> bool:
        return isinstance(error, SyntaxError)

    def extract(self, error: Exception) -> MatchResult:
        """Extract syntax error info.

        Args:
            error: Exception to extract from

        Returns:
            MatchResult with EXTENSION_CODE_SYNTAX code
        """
        detail = str(error)
        if isinstance(error, SyntaxError) and error.lineno is not None:
            detail = f"line {error.lineno}: {error.msg}"
        return MatchResult(code="EXTENSION_CODE_SYNTAX", context={"detail": detail})


class SecurityErrorMatcher(ErrorMatcher):
    """Matches sandbox policy violations."""

    def matches(self, error: Exception) -> bool:
        return isinstance(error, SecurityError)

    def extract(self, error: Exception) -> MatchResult:
        return MatchResult(code="EXTENSION_CODE_SECURITY", context={"detail": str(error)})


class ImportErrorMatcher(ErrorMatcher):
    """Matches failures to resolve an extension import reference."""

    def matches(self, error: Exception) -> bool:
        return isinstance(error, ImportError)

    def extract(self, error: Exception) -> MatchResult:
        reference = getattr(error, "name", None) or "unknown"
        return MatchResult(
            code="EXTENSION_IMPORT_FAILED",
            context={"reference": reference, "detail": str(error)},
        )


class GenericErrorMatcher(ErrorMatcher):
    """Fallback matcher for any exception."""

    def matches(self, error: Exception) -> bool:
        """Always matches."""
        return True

    def extract(self, error: Exception) -> MatchResult:
        """Extract generic error info.

        Args:
            error: Exception to extract from

        Returns:
            MatchResult with INTERNAL_ERROR code
        """
        return MatchResult(
            code="INTERNAL_ERROR",
            context={"detail": str(error), "error_type": type(error).__name__},
        )


class ErrorMatcherChain:
    """Ordered chain of matchers. First match wins."""

    def __init__(self) -> None:
        """Initialize matcher chain with built-in matchers."""
        self.matchers: list[ErrorMatcher] = []
        self._load_builtin_matchers()

    def match(self, error: Exception) -> MatchResult:
        """Find first matching matcher and extract result.

        Args:
            error: Exception to match

        Returns:
            MatchResult from first matching matcher
        """
        for matcher in self.matchers:
            if matcher.matches(error):
                return matcher.extract(error)

        # Should never reach here due to GenericErrorMatcher
        return MatchResult(code="INTERNAL_ERROR", context={"detail": str(error)})

    def _load_builtin_matchers(self) -> None:
        """Load built-in matchers in priority order."""
        # Order matters - more specific matchers first
        self.matchers = [
            SyntaxErrorMatcher(),
            SecurityErrorMatcher(),
            ImportErrorMatcher(),
            GenericErrorMatcher(),  # Fallback - must be last
        ]
