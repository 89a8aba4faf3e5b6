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

"""Cloud project identity lookup.

The project id is only used for display and for example commands in the
generated Dockerfile, so resolution never fails because of it.

Lookup Order:

1. The PROJECT_ID environment variable, used verbatim
2. The GCE metadata server, queried once with 100ms connect and read
   timeouts

Any request failure (timeout, connection error, non-200 status) leaves the
project id unset.

Example:
    Resolve the identity:
        ```python
        from rubydockerfile.metadata import resolve_project_identity

        identity = resolve_project_identity()
        print(identity.for_display)  # "my-project" or "(unknown)"
        ```
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import os

import requests

from rubydockerfile.logging import get_global_logger

__all__ = ["ProjectIdentity", "fetch_metadata_project_id", "resolve_project_identity"]

PROJECT_ID_ENV = "PROJECT_ID"
METADATA_PROJECT_ID_URL = (
    "http://169.254.169.254/computeMetadata/v1/project/project-id"
)
METADATA_HEADERS = {"Metadata-Flavor": "Google"}
METADATA_TIMEOUT = (0.1, 0.1)  # (connect, read) seconds

UNKNOWN_PROJECT_DISPLAY = "(unknown)"
EXAMPLE_PROJECT_ID = "my-project-id"


@dataclass(frozen=True)
class ProjectIdentity:
    """The resolved project id and its derived views.

    Attributes:
        project_id: Project id, or None if it could not be determined.
        for_display: Project id, or "(unknown)".
        for_example: Project id, or the placeholder "my-project-id".
    """

    project_id: str | None

    @property
    def for_display(self) -> str:
        return self.project_id if self.project_id is not None else UNKNOWN_PROJECT_DISPLAY

    @property
    def for_example(self) -> str:
        return self.project_id if self.project_id is not None else EXAMPLE_PROJECT_ID


def fetch_metadata_project_id() -> str | None:
    """Ask the metadata server for the project id.

    Returns:
        The response body on HTTP 200, otherwise None.
    """
    logger = get_global_logger()
    logger.debug("PROJECT", f"GET {METADATA_PROJECT_ID_URL}")
    try:
        response = requests.get(
            METADATA_PROJECT_ID_URL,
            headers=METADATA_HEADERS,
            timeout=METADATA_TIMEOUT,
        )
    except requests.exceptions.RequestException as err:
        logger.debug("PROJECT", f"Metadata lookup failed: {err}")
        return None
    if response.status_code != 200:
        logger.debug("PROJECT", f"Metadata lookup returned {response.status_code}")
        return None
    return response.text


def resolve_project_identity(
    environ: Mapping[str, str] | None = None,
) -> ProjectIdentity:
    """Determine the project id from the environment or the metadata server.

    Args:
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        ProjectIdentity; project_id is None when neither source has it.
    """
    if environ is None:
        environ = os.environ

    project_id = environ.get(PROJECT_ID_ENV)
    if project_id is None:
        project_id = fetch_metadata_project_id()

    get_global_logger().verbose("PROJECT", f"Project id: {project_id or '(unknown)'}")
    return ProjectIdentity(project_id=project_id)
