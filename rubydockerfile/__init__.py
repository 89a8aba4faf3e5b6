"""
rubydockerfile - Dockerfile configuration for Ruby App Engine apps

Resolves everything needed to render a Dockerfile for a Ruby application
deployed to the App Engine flexible environment, from the app's app.yaml
and the workspace it lives in.

rubydockerfile provides:
  - app.yaml loading with path overrides
  - Strict validation of env variable, package and Cloud SQL names
  - Ruby version detection from .ruby-version or bundler
  - Entrypoint resolution with signal-safe `exec` decoration
  - Default build steps (rcloadenv dotenv loading, Rails assets)

Quick Start
-----------
Print the resolved configuration for a workspace:

    $ rubydockerfile resolve --workspace-dir ./myapp

Check an app.yaml without printing the result:

    $ rubydockerfile validate --workspace-dir ./myapp

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    The resolution pipeline.
config : package
    app.yaml loading and YAML value coercion.
metadata : module
    Project id lookup.
runtime : module
    Ruby version and lockfile detection.
entrypoint : module
    Entrypoint resolution and decoration.
build : package
    Build script resolution.

Public API
----------
    from rubydockerfile.core import resolve_app_config
    from rubydockerfile.results import ResolvedConfiguration
    from rubydockerfile.exceptions import ConfigurationError

Project Information
-------------------
License: Apache-2.0
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "Dockerfile configuration resolver for Ruby App Engine apps"

# Re-export commonly used names for convenience
from rubydockerfile.core import resolve_app_config
from rubydockerfile.exceptions import ConfigurationError, RubyDockerfileError
from rubydockerfile.results import ResolvedConfiguration

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "resolve_app_config",
    "ResolvedConfiguration",
    "ConfigurationError",
    "RubyDockerfileError",
]
