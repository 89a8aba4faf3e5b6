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

"""Ruby version and lockfile detection for a workspace.

The Ruby version is taken from the first source that yields one:

1. `.ruby-version` in the workspace root, stripped of whitespace
2. The output of `bundle platform --ruby` run in the workspace, when it
   contains a line `ruby X.Y.Z`

rbenv-style values such as `ruby-2.5.1` are normalized to `2.5.1`. The
final value is either empty (no version pinned) or must look like
`X.Y.<rest>`.

Neither a missing `.ruby-version` nor a failing `bundle` is an error; both
just mean "no version found from this source".

Example:
    Detect the runtime of a checked-out app:
        ```python
        from pathlib import Path
        from rubydockerfile.runtime import resolve_ruby_version, has_lockfile

        version = resolve_ruby_version(Path("/workspace"))
        pinned = has_lockfile(Path("/workspace"))
        ```
"""

from __future__ import annotations

import os
from pathlib import Path
import re
import subprocess

from rubydockerfile.logging import get_global_logger
from rubydockerfile.validation import check_name

__all__ = [
    "LOCKFILE_NAMES",
    "bundler_ruby_version",
    "has_lockfile",
    "is_readable_file",
    "normalize_ruby_version",
    "read_ruby_version_file",
    "resolve_ruby_version",
]

RUBY_VERSION_FILE = ".ruby-version"
LOCKFILE_NAMES = ("Gemfile.lock", "gems.locked")
BUNDLE_PLATFORM_COMMAND = ["bundle", "platform", "--ruby"]

_BUNDLER_RUBY_LINE = re.compile(r"^ruby (\d+\.\d+\.\d+)$", re.MULTILINE | re.ASCII)
_RBENV_PREFIX = re.compile(r"ruby-(\d+\.\d+\.[\w.-]+)", re.ASCII)


def is_readable_file(path: Path) -> bool:
    """Return True if path is a regular file the current user can read."""
    return path.is_file() and os.access(path, os.R_OK)


def read_ruby_version_file(workspace_dir: Path) -> str:
    """Return the stripped contents of .ruby-version, or "" if unreadable."""
    try:
        return (workspace_dir / RUBY_VERSION_FILE).read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return ""


def bundler_ruby_version(workspace_dir: Path) -> str:
    """Ask bundler which Ruby the Gemfile requires.

    Returns:
        "X.Y.Z" if bundler printed a `ruby X.Y.Z` line, otherwise "".
    """
    logger = get_global_logger()
    logger.debug("RUNTIME", f"Running: {' '.join(BUNDLE_PLATFORM_COMMAND)}")
    try:
        result = subprocess.run(
            BUNDLE_PLATFORM_COMMAND,
            cwd=workspace_dir,
            check=True,
            capture_output=True,
            text=True,
        )
    except (OSError, subprocess.SubprocessError) as err:
        logger.debug("RUNTIME", f"bundle platform failed: {err}")
        return ""

    match = _BUNDLER_RUBY_LINE.search(result.stdout.strip())
    return match.group(1) if match else ""


def normalize_ruby_version(version: str) -> str:
    """Strip an rbenv-style `ruby-` prefix.

    Example:
        >>> normalize_ruby_version("ruby-2.5.1")
        '2.5.1'
        >>> normalize_ruby_version("2.5.1")
        '2.5.1'
    """
    match = _RBENV_PREFIX.fullmatch(version)
    return match.group(1) if match else version


def resolve_ruby_version(workspace_dir: Path) -> str:
    """Determine the Ruby version for the workspace.

    Returns:
        A version like "2.5.1", or "" if none is pinned.

    Raises:
        ConfigurationError: If the version found is malformed.
    """
    logger = get_global_logger()

    version = read_ruby_version_file(workspace_dir)
    if version:
        logger.verbose("RUNTIME", f"Read {RUBY_VERSION_FILE}: {version}")
    else:
        version = bundler_ruby_version(workspace_dir)
        if version:
            logger.verbose("RUNTIME", f"Bundler reports ruby {version}")

    version = normalize_ruby_version(version)
    if version:
        check_name("ruby_version", version)
    return version


def has_lockfile(workspace_dir: Path) -> bool:
    """Return True if Gemfile.lock or gems.locked is readable."""
    return any(is_readable_file(workspace_dir / name) for name in LOCKFILE_NAMES)
