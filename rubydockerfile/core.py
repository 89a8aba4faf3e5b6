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

"""Configuration resolution for rubydockerfile.

This module turns an app.yaml plus the workspace around it into a
ResolvedConfiguration for the Dockerfile renderer.

Resolution Pipeline:

Loading app.yaml always comes first, since every other step reads it. The
remaining steps run in this fixed order, each receiving the fields
resolved so far and returning them extended:

1. project: project id from PROJECT_ID or the metadata server
2. env_variables: validated names, stringified values
3. packages: validated debian package names
4. runtime: Ruby version and lockfile presence
5. cloud_sql: validated Cloud SQL instance names
6. entrypoint: raw and decorated entrypoint
7. build_scripts: custom or default build steps (reads the entrypoint and
   Cloud SQL fields, so it fails if run before steps 5 and 6)

Design Principles:

- Steps are plain functions over immutable inputs
- Every validation failure raises ConfigurationError and aborts the run
- Best-effort lookups (metadata server, bundler) never fail resolution

Example:
    Programmatic usage:
        ```python
        from pathlib import Path
        from rubydockerfile.core import resolve_app_config

        config = resolve_app_config(Path("/workspace"))
        print(config.ruby_version)
        print(config.build_scripts)
        ```

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any

from rubydockerfile.build import resolve_build_scripts
from rubydockerfile.config import Descriptor, as_list, as_mapping, as_text, load_descriptor
from rubydockerfile.entrypoint import decorate_entrypoint, resolve_raw_entrypoint
from rubydockerfile.logging import get_global_logger
from rubydockerfile.metadata import resolve_project_identity
from rubydockerfile.results import ResolvedConfiguration
from rubydockerfile.runtime import has_lockfile, resolve_ruby_version
from rubydockerfile.validation import check_name

__all__ = ["DEFAULT_WORKSPACE_DIR", "resolve_app_config"]

DEFAULT_WORKSPACE_DIR = "/workspace"


@dataclass(frozen=True)
class ResolveContext:
    """Inputs shared by every resolution step."""

    workspace_dir: Path
    descriptor: Descriptor
    environ: Mapping[str, str]


Fields = dict[str, Any]
ResolveStep = Callable[[ResolveContext, Fields], Fields]


def _resolve_project(ctx: ResolveContext, fields: Fields) -> Fields:
    identity = resolve_project_identity(ctx.environ)
    return {
        **fields,
        "project_id": identity.project_id,
        "project_id_for_display": identity.for_display,
        "project_id_for_example": identity.for_example,
    }


def _resolve_env_variables(ctx: ResolveContext, fields: Fields) -> Fields:
    env_variables: dict[str, str] = {}
    for key, value in as_mapping(ctx.descriptor.data.get("env_variables")).items():
        check_name("env_variable", key)
        env_variables[key] = as_text(value)
    return {**fields, "env_variables": MappingProxyType(env_variables)}


def _resolve_packages(ctx: ResolveContext, fields: Fields) -> Fields:
    # runtime_config wins whenever set, even to an empty list
    raw = ctx.descriptor.runtime_config.get("packages")
    if raw is None:
        raw = ctx.descriptor.data.get("packages")
    packages = tuple(check_name("package", pkg) for pkg in as_list(raw))
    return {**fields, "install_packages": packages}


def _resolve_runtime(ctx: ResolveContext, fields: Fields) -> Fields:
    return {
        **fields,
        "ruby_version": resolve_ruby_version(ctx.workspace_dir),
        "has_gemfile": has_lockfile(ctx.workspace_dir),
    }


def _split_instance_names(entry: Any) -> list[Any]:
    """Split a comma-joined entry, dropping trailing empty pieces.

    Interior empties are kept so that "a,,b" still fails validation.
    """
    if not isinstance(entry, str):
        return [entry]
    parts = entry.split(",")
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def _resolve_cloud_sql(ctx: ResolveContext, fields: Fields) -> Fields:
    names: list[str] = []
    for entry in as_list(ctx.descriptor.beta_settings.get("cloud_sql_instances")):
        names.extend(
            check_name("cloud_sql_instance", part)
            for part in _split_instance_names(entry)
        )
    return {**fields, "cloud_sql_instances": tuple(names)}


def _resolve_entrypoint(ctx: ResolveContext, fields: Fields) -> Fields:
    raw = resolve_raw_entrypoint(
        ctx.descriptor.runtime_config, ctx.descriptor.data, ctx.workspace_dir
    )
    entrypoint = decorate_entrypoint(raw)
    get_global_logger().verbose("ENTRYPOINT", entrypoint)
    return {**fields, "raw_entrypoint": raw, "entrypoint": entrypoint}


def _resolve_build_scripts(ctx: ResolveContext, fields: Fields) -> Fields:
    scripts = resolve_build_scripts(
        ctx.descriptor.runtime_config,
        ctx.workspace_dir,
        entrypoint=fields["entrypoint"],
        cloud_sql_instances=fields["cloud_sql_instances"],
    )
    return {**fields, "build_scripts": scripts}


RESOLUTION_STEPS: tuple[tuple[str, ResolveStep], ...] = (
    ("Resolving project id", _resolve_project),
    ("Resolving environment variables", _resolve_env_variables),
    ("Resolving packages", _resolve_packages),
    ("Resolving Ruby version", _resolve_runtime),
    ("Resolving Cloud SQL instances", _resolve_cloud_sql),
    ("Resolving entrypoint", _resolve_entrypoint),
    ("Resolving build scripts", _resolve_build_scripts),
)


def resolve_app_config(
    workspace_dir: Path | str,
    app_yaml_path: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ResolvedConfiguration:
    """Resolve the Dockerfile configuration for an application workspace.

    Args:
        workspace_dir: Root of the application source tree.
        app_yaml_path: Descriptor path relative to workspace_dir. When
            None, GAE_APPLICATION_YAML_PATH or ./app.yaml is used.
        environ: Environment mapping consulted for GAE_APPLICATION_YAML_PATH
            and PROJECT_ID. Defaults to os.environ.

    Returns:
        ResolvedConfiguration with every field validated.

    Raises:
        ConfigurationError: If app.yaml cannot be loaded or any field is
            invalid. Resolution stops at the first error.

    Example:
        Resolving with an explicit environment:
            ```python
            config = resolve_app_config(
                Path("/workspace"),
                environ={"PROJECT_ID": "my-project"},
            )
            print(config.project_id_for_display)  # my-project
            ```

    """
    logger = get_global_logger()
    workspace_dir = Path(workspace_dir)
    if environ is None:
        environ = os.environ

    total = len(RESOLUTION_STEPS) + 1
    logger.step(1, total, "Loading app config")
    descriptor = load_descriptor(workspace_dir, app_yaml_path, environ=environ)

    ctx = ResolveContext(
        workspace_dir=workspace_dir, descriptor=descriptor, environ=environ
    )
    fields: Fields = {
        "workspace_dir": workspace_dir,
        "app_yaml_path": descriptor.path,
        "service_name": descriptor.service_name,
        "runtime_config": MappingProxyType(descriptor.runtime_config),
    }
    for index, (message, step) in enumerate(RESOLUTION_STEPS, start=2):
        logger.step(index, total, message)
        fields = step(ctx, fields)

    return ResolvedConfiguration(**fields)
