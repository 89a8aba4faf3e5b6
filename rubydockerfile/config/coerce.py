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

"""Total accessors for loosely-typed YAML values.

Any field in app.yaml may be missing, a scalar, or the wrong shape. These
helpers turn whatever the parser produced into a predictable Python type so
the resolver never has to type-check at each call site.

Example:
    >>> as_list(None)
    []
    >>> as_list("libpq-dev")
    ['libpq-dev']
    >>> as_mapping(["not", "a", "dict"])
    {}
    >>> as_text(True)
    'true'
"""

from __future__ import annotations

from typing import Any

__all__ = ["as_mapping", "as_list", "as_text"]


def as_mapping(value: Any) -> dict[str, Any]:
    """Return value if it is a mapping, else an empty dict."""
    if isinstance(value, dict):
        return value
    return {}


def as_list(value: Any) -> list[Any]:
    """Wrap a YAML value in a list.

    None becomes an empty list, sequences are copied, and any other value
    becomes a single-element list.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def as_text(value: Any) -> str:
    """Stringify a YAML scalar the way it was written in the file.

    None becomes "" and booleans are lowercased, so `DEBUG: true` yields
    "true" rather than Python's "True".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
