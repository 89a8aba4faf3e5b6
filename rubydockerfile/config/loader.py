"""
Loading of the App Engine application descriptor (app.yaml).

The descriptor is the only declarative input to resolution. This module
finds it, parses it, and pulls out the sub-sections every later step reads.

Path Resolution
---------------
The descriptor path is relative to the workspace directory and is chosen in
this order:
  1. The explicit path passed by the caller (e.g. `--app-yaml` on the CLI)
  2. The GAE_APPLICATION_YAML_PATH environment variable
  3. ./app.yaml

Extracted Sections
------------------
  - runtime_config: build/runtime overrides (empty dict if absent or not
    a mapping)
  - beta_settings: platform settings such as cloud_sql_instances (empty
    dict if absent or not a mapping)
  - service: the service name ("default" if absent or empty)

Error Handling
--------------
Any failure to read or parse the file, and a document that is not a
mapping, raises ConfigurationError naming the path that was tried. The
original exception is chained with "from err".

Examples
--------
    >>> from pathlib import Path
    >>> from rubydockerfile.config import load_descriptor
    >>> descriptor = load_descriptor(Path("/workspace"))
    >>> descriptor.service_name
    'default'
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any

import yaml

from rubydockerfile.config.coerce import as_mapping, as_text
from rubydockerfile.exceptions import ConfigurationError
from rubydockerfile.logging import get_global_logger

DEFAULT_APP_YAML_PATH = "./app.yaml"
DEFAULT_SERVICE_NAME = "default"
APP_YAML_PATH_ENV = "GAE_APPLICATION_YAML_PATH"

# -------------------------------
# Data types
# -------------------------------


@dataclass(frozen=True)
class Descriptor:
    """
    The parsed app.yaml plus the sections extracted from it.
    Lives only for the duration of a resolution run.
    """

    path: str
    data: dict[str, Any]
    runtime_config: dict[str, Any]
    beta_settings: dict[str, Any]
    service_name: str


# -------------------------------
# Path resolution
# -------------------------------


def effective_app_yaml_path(
    app_yaml_path: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """
    Pick the descriptor path: explicit argument > env override > default.
    Empty strings count as unset.
    """
    if environ is None:
        environ = os.environ
    return app_yaml_path or environ.get(APP_YAML_PATH_ENV) or DEFAULT_APP_YAML_PATH


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> dict[str, Any]:
    """
    Read and parse p, requiring a top-level mapping.

    Raises:
      ConfigurationError - unreadable file, invalid YAML, or non-mapping document
    """
    message = f"Could not read app engine config file: {str(p)!r}"
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as err:
        raise ConfigurationError(message) from err
    if not isinstance(data, dict):
        raise ConfigurationError(message)
    return data


# -------------------------------
# Public API
# -------------------------------


def load_descriptor(
    workspace_dir: Path,
    app_yaml_path: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Descriptor:
    """
    Load app.yaml from the workspace.

    Steps
      1) Pick the effective path (argument > GAE_APPLICATION_YAML_PATH > ./app.yaml).
      2) Read and parse workspace_dir / path.
      3) Extract runtime_config, beta_settings and service.

    Returns
      A Descriptor holding the raw document and its extracted sections.

    Raises
      ConfigurationError if the file cannot be read or parsed.
    """
    logger = get_global_logger()

    path = effective_app_yaml_path(app_yaml_path, environ)
    # Always inside the workspace, even for an absolute override
    config_file = Path(workspace_dir) / path.lstrip("/")
    logger.verbose("CONFIG", f"Loading app config: {config_file}")

    data = _load_yaml_file(config_file)
    logger.debug("CONFIG", f"Top-level keys: {', '.join(map(str, data))}")

    service_name = as_text(data.get("service")) or DEFAULT_SERVICE_NAME
    return Descriptor(
        path=path,
        data=data,
        runtime_config=as_mapping(data.get("runtime_config")),
        beta_settings=as_mapping(data.get("beta_settings")),
        service_name=service_name,
    )
