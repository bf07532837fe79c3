"""Sandbox policy applied to extension API source.

Extension source text runs in the sandbox; a policy violation fails that
one extension and leaves the others untouched.
"""

import pytest

from exthost_core.extensions import ExtensionDescriptor, ExtensionLoader
from exthost_core.sandbox import ExtensionSandbox, SecurityError
from exthost_core.types import LoadState
from tests.mocks import RecordingHost


@pytest.mark.security
class TestForbiddenImports:
    """Imports outside the whitelist are rejected before execution."""

    @pytest.fixture
    def sandbox(self):
        return ExtensionSandbox()

    FORBIDDEN = [
        pytest.param("import os", id="os"),
        pytest.param("import subprocess", id="subprocess"),
        pytest.param("import os.path", id="submodule"),
        pytest.param("from sys import modules", id="from-import"),
        pytest.param("from . import sibling", id="relative"),
        pytest.param("import socket as s", id="aliased"),
        pytest.param("def f():\n    import ctypes\n", id="nested-in-function"),
    ]

    @pytest.mark.parametrize("code", FORBIDDEN)
    def test_rejected(self, sandbox, code):
        result = sandbox.execute(code)

        assert not result.success
        assert isinstance(result.exception, SecurityError)

    def test_nothing_runs_before_rejection(self, sandbox):
        result = sandbox.execute("print('side effect')\nimport os\n")

        assert result.stdout == ""

    def test_dynamic_import_blocked_at_runtime(self, sandbox):
        result = sandbox.execute("__import__('os')")

        assert not result.success
        assert isinstance(result.exception, (SecurityError, NameError))

    def test_allowed_module_imports(self, sandbox):
        result = sandbox.execute("import json\nfrom collections import OrderedDict\n")

        assert result.success


@pytest.mark.security
class TestForbiddenBuiltins:
    """Dangerous builtins are unavailable."""

    @pytest.fixture
    def sandbox(self):
        return ExtensionSandbox()

    @pytest.mark.parametrize("code", ["eval('1')", "exec('x = 1')", "compile('1', 'f', 'eval')"])
    def test_code_execution_builtins_rejected(self, sandbox, code):
        result = sandbox.execute(code)

        assert isinstance(result.exception, SecurityError)

    @pytest.mark.parametrize(
        "code",
        [
            "open('/etc/passwd')",
            "globals()",
            "getattr(exports, 'x')",
            "breakpoint()",
            "input()",
        ],
    )
    def test_missing_builtins(self, sandbox, code):
        result = sandbox.execute(code, {"exports": object()})

        assert isinstance(result.exception, NameError)

    def test_builtins_dict_not_reachable_through_globals(self, sandbox):
        result = sandbox.execute("__builtins__['open']")

        assert isinstance(result.exception, KeyError)


@pytest.mark.security
class TestPerExtensionContainment:
    """A violating extension fails alone."""

    @pytest.mark.parametrize(
        ("code", "error_code"),
        [
            ("import os\nexports.cwd = os.getcwd()", "EXTENSION_CODE_SECURITY"),
            ("exports.data = open('/etc/passwd').read()", "EXTENSION_CODE_RUNTIME"),
            ("exports.value = eval('1 + 1')", "EXTENSION_CODE_SECURITY"),
        ],
    )
    def test_violation_fails_only_that_extension(self, code, error_code):
        host = RecordingHost(
            [
                ExtensionDescriptor("tizen.evil", code=code),
                ExtensionDescriptor("tizen.good", code="exports.ok = True"),
            ]
        )

        loader = ExtensionLoader(host)

        evil = loader.get("tizen.evil")
        assert evil.state == LoadState.FAILED
        assert evil.error.code == error_code
        assert list(loader.public.tizen.evil) == []
        assert loader.public.tizen.good.ok is True

    def test_custom_whitelist_applies_to_extensions(self):
        code = "import math\nexports.pi = math.pi"
        host = RecordingHost([ExtensionDescriptor("tizen.math", code=code)])

        loader = ExtensionLoader(host, sandbox=ExtensionSandbox(allowed_imports={"json"}))

        assert loader.get("tizen.math").error.code == "EXTENSION_CODE_SECURITY"

    def test_extension_cannot_reach_host_globals(self):
        host = RecordingHost(
            [ExtensionDescriptor("tizen.scope", code="exports.names = sorted(dir())")]
        )

        loader = ExtensionLoader(host)

        assert loader.public.tizen.scope.names == [
            "__builtins__",
            "__name__",
            "exports",
            "extension",
        ]
