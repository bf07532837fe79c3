"""Isolated execution scope for extension API source.

Extension source runs with:
1. Import restrictions (AST-based whitelist)
2. Builtin restrictions (no eval, exec, open, etc.)
3. Only the injected names as globals (``exports`` and ``extension``)

Execution is synchronous; activation must run to completion.
"""

import ast
import builtins as builtins_module
import contextlib
import io
import time
from contextlib import redirect_stderr, redirect_stdout
from dataclasses import dataclass
from typing import Any

from .types import DANGEROUS_BUILTINS, SAFE_IMPORTS


class SecurityError(Exception):
    """Raised when code violates the sandbox policy."""

    pass


@dataclass
class SandboxResult:
    """Result of sandboxed execution.

    Attributes:
        success: Whether execution succeeded
        stdout: Captured stdout output
        stderr: Captured stderr output
        execution_time: Total execution time in seconds
        error: Error message if execution failed
        exception: The exception that stopped execution, if any
    """

    success: bool
    stdout: str
    stderr: str
    execution_time: float
    error: str | None = None
    exception: Exception | None = None


class ExtensionSandbox:
    """Runs extension source in a restricted global scope.

    Example:
        >>> sandbox = ExtensionSandbox()
        >>> exports = Exports("tizen.echo")
        >>> res = sandbox.execute("exports.ping = lambda: 'pong'", {"exports": exports})
        >>> res.success, exports.ping()
        (True, 'pong')
    """

    def __init__(
        self,
        allowed_imports: set[str] | None = None,
        max_output_size: int = 64 * 1024,
    ):
        """Initialize sandbox.

        Args:
            allowed_imports: Whitelist of allowed top-level modules (default: SAFE_IMPORTS)
            max_output_size: Maximum captured stdout/stderr size in characters
        """
        self.allowed_imports = set(allowed_imports) if allowed_imports else SAFE_IMPORTS.copy()
        self.max_output_size = max_output_size

    def validate_code(self, code: str) -> list[str]:
        """Validate code without executing it.

        Args:
            code: Python code to validate

        Returns:
            List of validation error messages (empty if valid)
        """
        try:
            tree = ast.parse(code)
        except SyntaxError as e:
            return [f"Syntax error at line {e.lineno}: {e.msg}"]

        errors = []
        for node in ast.walk(tree):
            message = self._check_node(node)
            if message:
                errors.append(message)
        return errors

    def _check_node(self, node: ast.AST) -> str | None:
        if isinstance(node, ast.Import):
            for alias in node.names:
                module = alias.name.split(".")[0]
                if module not in self.allowed_imports:
                    return f"Import '{module}' not allowed"
        elif isinstance(node, ast.ImportFrom):
            if node.level:
                return "Relative imports are not allowed"
            module = (node.module or "").split(".")[0]
            if module not in self.allowed_imports:
                return f"Import from '{module}' not allowed"
        elif isinstance(node, ast.Name) and node.id in {"eval", "exec", "compile"}:
            return f"Use of '{node.id}' is not allowed"
        return None

    def _validate(self, tree: ast.AST) -> None:
        """Raise SecurityError on the first policy violation in ``tree``."""
        for node in ast.walk(tree):
            message = self._check_node(node)
            if message:
                raise SecurityError(
                    f"{message}. Allowed imports: {sorted(self.allowed_imports)}"
                )

    def _create_safe_import(self) -> Any:
        """Create a safe __import__ function that only allows whitelisted modules."""

        def safe_import(name: str, *args: Any, **kwargs: Any) -> Any:
            module_name = name.split(".")[0]
            if module_name not in self.allowed_imports:
                raise SecurityError(f"Import '{module_name}' not allowed")
            return __import__(name, *args, **kwargs)

        return safe_import

    def _create_safe_globals(self, context: dict[str, Any], module_name: str) -> dict[str, Any]:
        """Create the globals dict with restricted builtins plus ``context``."""
        safe_builtins = {}
        for name in dir(builtins_module):
            if name not in DANGEROUS_BUILTINS:
                with contextlib.suppress(AttributeError):
                    safe_builtins[name] = getattr(builtins_module, name)

        safe_builtins["__import__"] = self._create_safe_import()

        # class statements look up __name__ in globals
        return {"__builtins__": safe_builtins, "__name__": module_name, **context}

    def _truncate(self, text: str) -> str:
        if len(text) > self.max_output_size:
            return text[: self.max_output_size] + "\n... (truncated)"
        return text

    def execute(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        filename: str = "<extension>",
    ) -> SandboxResult:
        """Execute Python source in the sandbox.

        Args:
            code: Python code to execute
            context: Names injected as globals
            filename: Name reported in tracebacks

        Returns:
            SandboxResult; failures are reported in it, never raised
        """
        start_time = time.perf_counter()
        stdout_capture = io.StringIO()
        stderr_capture = io.StringIO()

        try:
            tree = ast.parse(code, filename=filename)
            self._validate(tree)
            safe_globals = self._create_safe_globals(context or {}, filename)
            compiled = compile(tree, filename, "exec")
            with redirect_stdout(stdout_capture), redirect_stderr(stderr_capture):
                exec(compiled, safe_globals)
        except Exception as e:
            return SandboxResult(
                success=False,
                stdout=self._truncate(stdout_capture.getvalue()),
                stderr=self._truncate(stderr_capture.getvalue()),
                execution_time=time.perf_counter() - start_time,
                error=f"{type(e).__name__}: {e}",
                exception=e,
            )

        return SandboxResult(
            success=True,
            stdout=self._truncate(stdout_capture.getvalue()),
            stderr=self._truncate(stderr_capture.getvalue()),
            execution_time=time.perf_counter() - start_time,
        )
