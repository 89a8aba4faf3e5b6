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

"""Build script resolution.

Build scripts are shell commands run as RUN steps after the app is copied
into the image. They come either from runtime_config.build, used verbatim,
or from defaults synthesized from the workspace:

- dotenv: when runtime_config.dotenv_config names a runtime config, load it
  into .env with rcloadenv
- assets: when the app looks like Rails (app/assets and
  config/application.rb exist), precompile assets

`build` and `dotenv_config` cannot be combined; the custom list would
silently drop the dotenv step.

Private Helpers:
    - _dotenv_script: The rcloadenv step, or None
    - _asset_precompile_script: The rake assets:precompile step, or None

Example:
    from pathlib import Path
    from rubydockerfile.build.scripts import resolve_build_scripts

    scripts = resolve_build_scripts(
        runtime_config={"dotenv_config": "my-config"},
        workspace_dir=Path("/workspace"),
        entrypoint="exec bundle exec puma",
        cloud_sql_instances=(),
    )
    # ['gem install rcloadenv && rbenv rehash && rcloadenv my-config >> .env']
"""

from __future__ import annotations

from pathlib import Path
import re
from typing import Any

from rubydockerfile.config.coerce import as_list, as_text
from rubydockerfile.exceptions import ConfigurationError
from rubydockerfile.logging import get_global_logger

__all__ = ["resolve_build_scripts"]

DOTENV_SCRIPT_TEMPLATE = (
    "gem install rcloadenv && rbenv rehash && rcloadenv {config_name} >> .env"
)
ASSET_PRECOMPILE_TEMPLATE = "bundle exec {loadenv}rake assets:precompile || true"
CLOUD_SQL_PREFLIGHT = "access_cloud_sql --lenient && "

_RCLOADENV_PREFIX = re.compile(r"(rcloadenv\s.+\s--\s)")


def _dotenv_script(runtime_config: dict[str, Any]) -> str | None:
    config_name = as_text(runtime_config.get("dotenv_config"))
    if not config_name:
        return None
    return DOTENV_SCRIPT_TEMPLATE.format(config_name=config_name)


def _asset_precompile_script(
    workspace_dir: Path,
    entrypoint: str,
    cloud_sql_instances: tuple[str, ...],
) -> str | None:
    if (
        not (workspace_dir / "app" / "assets").is_dir()
        or not (workspace_dir / "config" / "application.rb").is_file()
    ):
        return None

    # Precompile under the same rcloadenv wrapper the app runs with
    match = _RCLOADENV_PREFIX.search(entrypoint)
    script = ASSET_PRECOMPILE_TEMPLATE.format(loadenv=match.group(1) if match else "")
    if cloud_sql_instances:
        script = CLOUD_SQL_PREFLIGHT + script
    return script


def resolve_build_scripts(
    runtime_config: dict[str, Any],
    workspace_dir: Path,
    entrypoint: str,
    cloud_sql_instances: tuple[str, ...],
) -> tuple[str, ...]:
    """Determine the build scripts to run in the image.

    Args:
        runtime_config: The runtime_config section of app.yaml.
        workspace_dir: Workspace root, checked for Rails asset layout.
        entrypoint: The decorated entrypoint.
        cloud_sql_instances: Resolved Cloud SQL instance names.

    Returns:
        Build scripts in execution order.

    Raises:
        ConfigurationError: If build and dotenv_config are both set, or a
            script contains a newline.
    """
    logger = get_global_logger()

    raw_build = runtime_config.get("build")
    if raw_build is not None and runtime_config.get("dotenv_config") is not None:
        raise ConfigurationError(
            "The `dotenv_config` setting conflicts with the `build` setting."
            " If you want to build a dotenv file in your list of custom build"
            " steps, try adding the build step: `gem install rcloadenv && rbenv"
            " rehash && rcloadenv my-config-name > .env`"
        )

    if raw_build is not None:
        scripts = [as_text(script) for script in as_list(raw_build)]
        logger.verbose("BUILD", f"Using {len(scripts)} custom build script(s)")
    else:
        candidates = [
            _dotenv_script(runtime_config),
            _asset_precompile_script(workspace_dir, entrypoint, cloud_sql_instances),
        ]
        scripts = [script for script in candidates if script]
        logger.verbose("BUILD", f"Using {len(scripts)} default build script(s)")

    for script in scripts:
        if "\n" in script:
            raise ConfigurationError(f"Illegal newline in build command: {script!r}")
        logger.debug("BUILD", script)
    return tuple(scripts)
