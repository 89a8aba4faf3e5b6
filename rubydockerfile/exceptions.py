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

"""Exception hierarchy for rubydockerfile.

Every failure while resolving an application descriptor is reported as a
ConfigurationError carrying a human-readable message. There is no recovery:
the first error aborts resolution and is surfaced to the caller verbatim.

All exceptions inherit from RubyDockerfileError, so callers embedding the
resolver can catch everything it raises with a single except clause.

Example:
    Handling a bad descriptor:
        ```python
        from pathlib import Path
        from rubydockerfile.core import resolve_app_config
        from rubydockerfile.exceptions import ConfigurationError

        try:
            config = resolve_app_config(Path("/workspace"))
        except ConfigurationError as e:
            print(f"Config error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "RubyDockerfileError",
    "ConfigurationError",
]


class RubyDockerfileError(Exception):
    """Base exception for all rubydockerfile errors."""

    pass


class ConfigurationError(RubyDockerfileError):
    """Raised when the application configuration cannot be resolved.

    This exception is raised when:

    - app.yaml cannot be read or is not a YAML mapping
    - An environment variable, debian package or Cloud SQL instance name
      is illegal
    - The Ruby version string is malformed
    - No entrypoint is configured, or the entrypoint contains a newline
    - `build` and `dotenv_config` are both set in runtime_config
    - A build command contains a newline
    """

    pass
