"""Property-based tests for configuration loading.

Tests env var resolution, deep merge and validation of generated data.
"""

import os
from unittest.mock import patch

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from exthost_core.config import ConfigLoader, deep_merge, resolve_env_vars
from exthost_core.errors import ExtHostError

# =============================================================================
# Strategies
# =============================================================================

valid_env_var_name = st.from_regex(r"^EXTHOST_[A-Z][A-Z0-9_]{0,20}$", fullmatch=True)

valid_env_var_value = st.from_regex(r"^[a-zA-Z0-9_\-./]{1,50}$", fullmatch=True)

config_key = st.from_regex(r"^[a-z][a-z0-9_]{0,15}$", fullmatch=True)

nested_dicts = st.recursive(
    st.dictionaries(config_key, st.integers(), max_size=4),
    lambda children: st.dictionaries(config_key, children, max_size=4),
    max_leaves=12,
)


def _without(var_name):
    return {k: v for k, v in os.environ.items() if k != var_name}


# =============================================================================
# Environment variable resolution
# =============================================================================


@pytest.mark.property
class TestEnvVarResolution:
    """Property tests for ${VAR} resolution."""

    @given(valid_env_var_name, valid_env_var_value)
    @settings(max_examples=50)
    def test_set_variable_resolved(self, var_name, var_value):
        """Set variables resolve, with or without a default."""
        with patch.dict(os.environ, {var_name: var_value}):
            assert resolve_env_vars(f"${{{var_name}}}") == var_value
            assert resolve_env_vars(f"${{{var_name}:-unused}}") == var_value

    @given(valid_env_var_name, valid_env_var_value)
    @settings(max_examples=50)
    def test_default_used_when_unset(self, var_name, default):
        """Unset variables fall back to the default."""
        with patch.dict(os.environ, _without(var_name), clear=True):
            assert resolve_env_vars(f"prefix-${{{var_name}:-{default}}}") == f"prefix-{default}"

    @given(valid_env_var_name)
    @settings(max_examples=30)
    def test_required_variable_raises(self, var_name):
        """Unset required variables are CONFIG_INVALID."""
        with patch.dict(os.environ, _without(var_name), clear=True):
            with pytest.raises(ExtHostError) as exc_info:
                resolve_env_vars(f"${{{var_name}}}")
            assert exc_info.value.code == "CONFIG_INVALID"

    @given(st.text(alphabet=st.characters(whitelist_categories=("L", "N")), max_size=50))
    @settings(max_examples=30)
    def test_text_without_references_unchanged(self, text):
        """Strings without ${...} pass through."""
        assume("$" not in text)
        assert resolve_env_vars(text) == text


# =============================================================================
# Merge and validation
# =============================================================================


@pytest.mark.property
class TestMergeAndValidation:
    """Property tests for deep_merge and validate()."""

    @given(nested_dicts)
    @settings(max_examples=50)
    def test_merge_with_empty_is_identity(self, data):
        assert deep_merge(data, {}) == data
        assert deep_merge({}, data) == data

    @given(nested_dicts, nested_dicts)
    @settings(max_examples=50)
    def test_override_keys_win(self, base, override):
        merged = deep_merge(base, override)

        for key, value in override.items():
            if not isinstance(value, dict):
                assert merged[key] == value

    @given(st.dictionaries(config_key, st.just({}), max_size=5))
    @settings(max_examples=30)
    def test_unknown_sections_only_warn(self, data):
        """Unknown top-level keys never make a config invalid."""
        result = ConfigLoader().validate(data)

        assert result.valid

    @given(st.integers(max_value=0))
    @settings(max_examples=20)
    def test_non_positive_output_size_rejected(self, size):
        result = ConfigLoader().validate({"sandbox": {"max_output_size": size}})

        assert not result.valid
