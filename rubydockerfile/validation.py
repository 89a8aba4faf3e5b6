# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Syntactic validation of names that end up in the Dockerfile.

Values taken from app.yaml are interpolated into shell commands and
Dockerfile instructions, so each kind of name is held to a strict pattern.
The rules live in one table and are applied by check_name().

Validation Rules:

- env_variable: ^[A-Za-z]\\w*$
- package: ^[\\w.-]+$
- cloud_sql_instance: ^[\\w:.-]+$
- ruby_version: ^\\d+\\.\\d+\\.[\\w.-]+$ (the empty string is also accepted
  by the caller, meaning "no version pinned")

All patterns use ASCII character classes and must match the whole value.

Example:
    Validate a package name:
        ```python
        from rubydockerfile.validation import check_name

        check_name("package", "libpq-dev")      # returns "libpq-dev"
        check_name("package", "rm -rf /")       # raises ConfigurationError
        ```
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any

from rubydockerfile.exceptions import ConfigurationError

__all__ = ["NameRule", "NAME_RULES", "check_name", "is_valid_name"]


@dataclass(frozen=True)
class NameRule:
    """A validation rule for one kind of name.

    Attributes:
        field: Rule key, used by callers to select the rule.
        pattern: Compiled pattern the whole value must match.
        message: Error message template; {value!r} is the offending value.
    """

    field: str
    pattern: re.Pattern[str]
    message: str


NAME_RULES: dict[str, NameRule] = {
    rule.field: rule
    for rule in (
        NameRule(
            "env_variable",
            re.compile(r"[A-Za-z]\w*", re.ASCII),
            "Illegal environment variable name: {value!r}",
        ),
        NameRule(
            "package",
            re.compile(r"[\w.-]+", re.ASCII),
            "Illegal debian package name: {value!r}",
        ),
        NameRule(
            "cloud_sql_instance",
            re.compile(r"[\w:.-]+", re.ASCII),
            "Illegal cloud sql instance name: {value!r}",
        ),
        NameRule(
            "ruby_version",
            re.compile(r"\d+\.\d+\.[\w.-]+", re.ASCII),
            "Illegal ruby version: {value!r}",
        ),
    )
}


def is_valid_name(field: str, value: Any) -> bool:
    """Return True if value is a string fully matching the rule for field.

    Raises:
        KeyError: If no rule is registered for field.
    """
    rule = NAME_RULES[field]
    return isinstance(value, str) and rule.pattern.fullmatch(value) is not None


def check_name(field: str, value: Any) -> str:
    """Validate value against the rule for field.

    Non-string values never match; YAML keys such as `1:` or list entries
    such as `- 42` are rejected rather than silently stringified.

    Args:
        field: Rule key from NAME_RULES.
        value: Value to validate.

    Returns:
        The validated value, unchanged.

    Raises:
        ConfigurationError: If the value does not match.
    """
    if not is_valid_name(field, value):
        raise ConfigurationError(NAME_RULES[field].message.format(value=value))
    return value
