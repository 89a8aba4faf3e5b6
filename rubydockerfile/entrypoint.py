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

"""Entrypoint resolution and decoration.

The entrypoint is looked up in this order:

1. runtime_config.entrypoint
2. entrypoint at the top level of app.yaml
3. `bundle exec rackup -p $PORT`, if the workspace has a readable config.ru

Without any of these, resolution fails.

A string entrypoint is rendered in shell form, so it is prefixed with
`exec` to make the app replace the shell and receive signals directly.
The prefix is skipped when it would be wrong:

- already starts with `exec `
- compound commands (`;`, `&&`, `|`), where exec would cover only the
  first command
- leading variable assignments (`FOO=bar cmd`)

A list entrypoint is rendered in exec form as a JSON array.

Example:
    >>> decorate_entrypoint("bundle exec puma -p $PORT")
    'exec bundle exec puma -p $PORT'
    >>> decorate_entrypoint("rake db:migrate && puma")
    'rake db:migrate && puma'
    >>> decorate_entrypoint(("puma", "-p", "8080"))
    '["puma","-p","8080"]'
"""

from __future__ import annotations

import json
from pathlib import Path
import re
from typing import Any, Union

from rubydockerfile.config.coerce import as_text
from rubydockerfile.exceptions import ConfigurationError
from rubydockerfile.logging import get_global_logger
from rubydockerfile.runtime import is_readable_file

__all__ = [
    "DEFAULT_RACK_ENTRYPOINT",
    "RawEntrypoint",
    "decorate_entrypoint",
    "resolve_raw_entrypoint",
]

DEFAULT_RACK_ENTRYPOINT = "bundle exec rackup -p $PORT"
RACK_CONFIG_FILE = "config.ru"

RawEntrypoint = Union[str, tuple[str, ...]]

_COMPOUND_COMMAND = re.compile(r";|&&|\|")
_LEADING_ASSIGNMENT = re.compile(r"\w+=", re.ASCII)


def _normalize(value: Any) -> RawEntrypoint | None:
    """Turn a YAML entrypoint value into a string or tuple, None if unset."""
    if isinstance(value, (list, tuple)):
        return tuple(as_text(part) for part in value) or None
    if isinstance(value, bool):
        return None
    return as_text(value) or None


def resolve_raw_entrypoint(
    runtime_config: dict[str, Any],
    app_config: dict[str, Any],
    workspace_dir: Path,
) -> RawEntrypoint:
    """Find the entrypoint configured for the app.

    Args:
        runtime_config: The runtime_config section of app.yaml.
        app_config: The whole app.yaml document.
        workspace_dir: Workspace root, checked for config.ru.

    Returns:
        The entrypoint as a string, or a tuple of strings for exec form.

    Raises:
        ConfigurationError: If no entrypoint is configured or it contains
            a newline.
    """
    logger = get_global_logger()

    raw = _normalize(runtime_config.get("entrypoint")) or _normalize(
        app_config.get("entrypoint")
    )
    if raw is None and is_readable_file(workspace_dir / RACK_CONFIG_FILE):
        logger.verbose("ENTRYPOINT", f"Found {RACK_CONFIG_FILE}, using rackup")
        raw = DEFAULT_RACK_ENTRYPOINT
    if raw is None:
        raise ConfigurationError(
            "Please specify an entrypoint in the App Engine configuration"
        )

    parts = raw if isinstance(raw, tuple) else (raw,)
    if any("\n" in part for part in parts):
        shown = list(raw) if isinstance(raw, tuple) else raw
        raise ConfigurationError(f"Illegal newline in entrypoint: {shown!r}")
    return raw


def decorate_entrypoint(entrypoint: RawEntrypoint) -> str:
    """Prepare an entrypoint for rendering into the Dockerfile."""
    if isinstance(entrypoint, (list, tuple)):
        return json.dumps(list(entrypoint), separators=(",", ":"), ensure_ascii=False)
    if entrypoint.startswith("exec "):
        return entrypoint
    if _COMPOUND_COMMAND.search(entrypoint):
        return entrypoint
    if _LEADING_ASSIGNMENT.match(entrypoint):
        return entrypoint
    return f"exec {entrypoint}"
