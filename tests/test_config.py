"""
Tests for rubydockerfile.config module.

Tests descriptor loading including:
- Effective path precedence (argument > env var > default)
- Section extraction (runtime_config, beta_settings, service)
- Error handling for missing, invalid and non-mapping files
- YAML value coercion helpers
"""

from __future__ import annotations

import pytest

from rubydockerfile.config import (
    as_list,
    as_mapping,
    as_text,
    effective_app_yaml_path,
    load_descriptor,
)
from rubydockerfile.exceptions import ConfigurationError


class TestEffectivePath:
    """Tests for descriptor path selection."""

    def test_default_path(self):
        """Test that ./app.yaml is used without overrides."""
        assert effective_app_yaml_path(None, {}) == "./app.yaml"

    def test_env_var_override(self):
        """Test that GAE_APPLICATION_YAML_PATH replaces the default."""
        environ = {"GAE_APPLICATION_YAML_PATH": "deploy/app.yaml"}
        assert effective_app_yaml_path(None, environ) == "deploy/app.yaml"

    def test_explicit_argument_wins(self):
        """Test that an explicit path beats the env var."""
        environ = {"GAE_APPLICATION_YAML_PATH": "deploy/app.yaml"}
        assert effective_app_yaml_path("worker.yaml", environ) == "worker.yaml"

    def test_empty_env_var_ignored(self):
        """Test that an empty env var falls back to the default."""
        environ = {"GAE_APPLICATION_YAML_PATH": ""}
        assert effective_app_yaml_path(None, environ) == "./app.yaml"


class TestLoadDescriptor:
    """Tests for loading app.yaml from a workspace."""

    def test_load_simple_descriptor(self, workspace, write_app_yaml):
        """Test loading a descriptor with all sections."""
        write_app_yaml(
            {
                "runtime": "ruby",
                "service": "api",
                "runtime_config": {"entrypoint": "puma"},
                "beta_settings": {"cloud_sql_instances": "p:r:i"},
            }
        )

        descriptor = load_descriptor(workspace, environ={})

        assert descriptor.path == "./app.yaml"
        assert descriptor.data["runtime"] == "ruby"
        assert descriptor.service_name == "api"
        assert descriptor.runtime_config == {"entrypoint": "puma"}
        assert descriptor.beta_settings == {"cloud_sql_instances": "p:r:i"}

    def test_missing_sections_default(self, workspace, write_app_yaml):
        """Test defaults when optional sections are absent."""
        write_app_yaml({"runtime": "ruby"})

        descriptor = load_descriptor(workspace, environ={})

        assert descriptor.runtime_config == {}
        assert descriptor.beta_settings == {}
        assert descriptor.service_name == "default"

    def test_non_mapping_sections_default(self, workspace, write_app_yaml):
        """Test that wrongly-shaped sections are treated as empty."""
        write_app_yaml({"runtime_config": ["a", "b"], "beta_settings": "oops"})

        descriptor = load_descriptor(workspace, environ={})

        assert descriptor.runtime_config == {}
        assert descriptor.beta_settings == {}

    def test_load_from_env_override(self, workspace, write_app_yaml):
        """Test that GAE_APPLICATION_YAML_PATH selects the file."""
        write_app_yaml({"service": "worker"}, name="deploy/worker.yaml")

        descriptor = load_descriptor(
            workspace, environ={"GAE_APPLICATION_YAML_PATH": "deploy/worker.yaml"}
        )

        assert descriptor.path == "deploy/worker.yaml"
        assert descriptor.service_name == "worker"

    def test_load_from_explicit_path(self, workspace, write_app_yaml):
        """Test that the explicit argument selects the file."""
        write_app_yaml({"service": "default"})
        write_app_yaml({"service": "batch"}, name="batch.yaml")

        descriptor = load_descriptor(workspace, "batch.yaml", environ={})

        assert descriptor.service_name == "batch"

    def test_absolute_path_stays_in_workspace(self, tmp_path, workspace, write_app_yaml):
        """Test that an absolute override is read relative to the workspace."""
        outside = tmp_path / "outside.yaml"
        outside.write_text("service: outside\n")
        write_app_yaml({"service": "inside"}, name=str(outside).lstrip("/"))

        from_arg = load_descriptor(workspace, str(outside), environ={})
        from_env = load_descriptor(
            workspace, environ={"GAE_APPLICATION_YAML_PATH": str(outside)}
        )

        assert from_arg.service_name == "inside"
        assert from_env.service_name == "inside"


class TestErrorHandling:
    """Tests for descriptor load failures."""

    def test_missing_file_raises(self, workspace):
        """Test that a missing app.yaml raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Could not read app engine config file"):
            load_descriptor(workspace, environ={})

    def test_error_names_path(self, workspace):
        """Test that the error message includes the attempted path."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_descriptor(workspace, "missing.yaml", environ={})

        assert "missing.yaml" in str(exc_info.value)

    def test_invalid_yaml_raises(self, workspace):
        """Test that invalid YAML raises ConfigurationError."""
        (workspace / "app.yaml").write_text("invalid: yaml: syntax: error:")

        with pytest.raises(ConfigurationError) as exc_info:
            load_descriptor(workspace, environ={})

        assert exc_info.value.__cause__ is not None

    def test_empty_yaml_raises(self, workspace):
        """Test that an empty file raises ConfigurationError."""
        (workspace / "app.yaml").write_text("")

        with pytest.raises(ConfigurationError):
            load_descriptor(workspace, environ={})

    def test_non_dict_yaml_raises(self, workspace):
        """Test that a top-level list raises ConfigurationError."""
        (workspace / "app.yaml").write_text("- item1\n- item2\n")

        with pytest.raises(ConfigurationError):
            load_descriptor(workspace, environ={})


class TestCoercion:
    """Tests for YAML value coercion helpers."""

    def test_as_list(self):
        """Test list coercion of absent, scalar and sequence values."""
        assert as_list(None) == []
        assert as_list("libpq-dev") == ["libpq-dev"]
        assert as_list(["a", "b"]) == ["a", "b"]
        assert as_list(("a",)) == ["a"]

    def test_as_mapping(self):
        """Test mapping coercion."""
        assert as_mapping({"a": 1}) == {"a": 1}
        assert as_mapping(None) == {}
        assert as_mapping([1, 2]) == {}

    def test_as_text(self):
        """Test canonical stringification of YAML scalars."""
        assert as_text(None) == ""
        assert as_text(True) == "true"
        assert as_text(False) == "false"
        assert as_text(8080) == "8080"
        assert as_text(1.5) == "1.5"
        assert as_text("x") == "x"
