"""Unit tests for RuntimeVariables."""

import pytest

from exthost_core.host import DEFAULT_RUNTIME_NAME, RuntimeVariables


class TestRuntimeVariables:
    """String-only variable map."""

    def test_defaults_to_runtime_name(self):
        variables = RuntimeVariables()

        assert variables.as_dict() == {"runtime_name": DEFAULT_RUNTIME_NAME}
        assert "runtime_name" in variables
        assert len(variables) == 1

    def test_keyword_variables(self):
        variables = RuntimeVariables(runtime_name="custom", app_id="org.example")

        assert list(variables) == ["runtime_name", "app_id"]
        assert variables.get("app_id") == "org.example"
        assert variables.get("missing", "fallback") == "fallback"

    def test_add_rejects_non_string(self):
        variables = RuntimeVariables()

        with pytest.raises(TypeError):
            variables.add("port", 8080)

        variables.add("encoded_bundle", "e30=")
        assert variables.get("encoded_bundle") == "e30="

    def test_update_replaces_and_drops_non_strings(self):
        variables = RuntimeVariables(app_id="org.example")

        variables.update({"app_id": "org.other", "count": 3, "flag": None})

        assert variables.as_dict() == {"app_id": "org.other"}

    def test_update_without_clear_extends(self):
        variables = RuntimeVariables()

        variables.update({"app_id": "org.example"}, clear=False)

        assert variables.as_dict() == {"runtime_name": "wrt-service", "app_id": "org.example"}

    def test_cleared_map_is_falsy_but_usable(self):
        variables = RuntimeVariables()
        variables.clear()

        assert not variables
        assert variables.as_dict() == {}

    def test_as_dict_is_a_copy(self):
        variables = RuntimeVariables()

        variables.as_dict()["injected"] = "x"

        assert "injected" not in variables
