"""
Tests for rubydockerfile.validation module.

Tests the name validation table and check_name().
"""

from __future__ import annotations

import pytest

from rubydockerfile.exceptions import ConfigurationError
from rubydockerfile.validation import NAME_RULES, check_name, is_valid_name


class TestEnvVariableNames:
    """Tests for environment variable name rules."""

    @pytest.mark.parametrize("name", ["A", "RAILS_ENV", "a1", "x_Y_2"])
    def test_valid_names(self, name):
        """Test names that start with a letter and continue with word chars."""
        assert check_name("env_variable", name) == name

    @pytest.mark.parametrize("name", ["", "1ABC", "_FOO", "FOO-BAR", "FOO BAR", "FOO\n", "ÄPFEL"])
    def test_invalid_names(self, name):
        """Test that other names are rejected with the offending key."""
        with pytest.raises(ConfigurationError, match="Illegal environment variable name"):
            check_name("env_variable", name)

    def test_non_string_rejected(self):
        """Test that non-string keys are rejected."""
        assert not is_valid_name("env_variable", 123)


class TestPackageNames:
    """Tests for debian package name rules."""

    @pytest.mark.parametrize("name", ["libpq-dev", "imagemagick", "python3.9"])
    def test_valid_names(self, name):
        assert check_name("package", name) == name

    @pytest.mark.parametrize("name", ["rm -rf /", "a;b", "pkg$(x)", ""])
    def test_invalid_names(self, name):
        with pytest.raises(ConfigurationError, match="Illegal debian package name"):
            check_name("package", name)


class TestCloudSqlInstanceNames:
    """Tests for Cloud SQL instance name rules."""

    def test_connection_name_valid(self):
        assert check_name("cloud_sql_instance", "my-proj:us-central1:db.1")

    def test_invalid_name(self):
        with pytest.raises(ConfigurationError, match="Illegal cloud sql instance name: 'a b'"):
            check_name("cloud_sql_instance", "a b")


class TestRubyVersions:
    """Tests for Ruby version rules."""

    @pytest.mark.parametrize("version", ["2.5.1", "2.6.0-preview1", "3.0.0.rc1"])
    def test_valid_versions(self, version):
        assert is_valid_name("ruby_version", version)

    @pytest.mark.parametrize("version", ["2.5", "ruby-2.5.1", "latest", "2.5.1 "])
    def test_invalid_versions(self, version):
        with pytest.raises(ConfigurationError, match="Illegal ruby version"):
            check_name("ruby_version", version)


def test_rules_table_keys():
    """Test that every rule is registered under its own field name."""
    assert set(NAME_RULES) == {
        "env_variable",
        "package",
        "cloud_sql_instance",
        "ruby_version",
    }
    for field, rule in NAME_RULES.items():
        assert rule.field == field
