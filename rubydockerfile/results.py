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

"""Public API return types for rubydockerfile.

ResolvedConfiguration is what resolve_app_config() hands to the Dockerfile
renderer. It is frozen, its sequences are tuples and its mappings are
read-only views, so a renderer cannot change it behind the resolver's back.

Example:
    Using the result:
        ```python
        from pathlib import Path
        from rubydockerfile.core import resolve_app_config

        config = resolve_app_config(Path("/workspace"))
        print(config.entrypoint)     # "exec bundle exec rackup -p $PORT"
        print(config.to_dict())      # plain types for YAML/JSON output
        ```

Note:
    Only public API return types belong in this module. Intermediate types
    (like Descriptor or ProjectIdentity) stay with the logic that makes them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rubydockerfile.entrypoint import RawEntrypoint


@dataclass(frozen=True)
class ResolvedConfiguration:
    """Fully validated configuration for rendering a Dockerfile.

    Attributes:
        workspace_dir: Application workspace root.
        app_yaml_path: Descriptor path, relative to workspace_dir.
        project_id: Cloud project id, or None if unknown.
        project_id_for_display: project_id or "(unknown)".
        project_id_for_example: project_id or "my-project-id".
        service_name: App Engine service name.
        runtime_config: The runtime_config section of app.yaml.
        env_variables: Environment variables, all values stringified.
        install_packages: Debian packages to install.
        cloud_sql_instances: Cloud SQL instance connection names.
        ruby_version: Ruby version, or "" if none is pinned.
        has_gemfile: True if Gemfile.lock or gems.locked is present.
        raw_entrypoint: Entrypoint as configured (string or exec-form tuple).
        entrypoint: Entrypoint as rendered into the Dockerfile.
        build_scripts: Shell commands to run at build time.
    """

    workspace_dir: Path
    app_yaml_path: str
    project_id: str | None
    project_id_for_display: str
    project_id_for_example: str
    service_name: str
    runtime_config: Mapping[str, Any]
    env_variables: Mapping[str, str]
    install_packages: tuple[str, ...]
    cloud_sql_instances: tuple[str, ...]
    ruby_version: str
    has_gemfile: bool
    raw_entrypoint: RawEntrypoint
    entrypoint: str
    build_scripts: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as plain dicts, lists and strings."""
        raw_entrypoint = self.raw_entrypoint
        return {
            "workspace_dir": str(self.workspace_dir),
            "app_yaml_path": self.app_yaml_path,
            "project_id": self.project_id,
            "project_id_for_display": self.project_id_for_display,
            "project_id_for_example": self.project_id_for_example,
            "service_name": self.service_name,
            "runtime_config": dict(self.runtime_config),
            "env_variables": dict(self.env_variables),
            "install_packages": list(self.install_packages),
            "cloud_sql_instances": list(self.cloud_sql_instances),
            "ruby_version": self.ruby_version,
            "has_gemfile": self.has_gemfile,
            "raw_entrypoint": (
                list(raw_entrypoint) if isinstance(raw_entrypoint, tuple) else raw_entrypoint
            ),
            "entrypoint": self.entrypoint,
            "build_scripts": list(self.build_scripts),
        }
