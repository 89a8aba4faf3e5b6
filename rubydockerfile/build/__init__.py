"""Build step resolution for rubydockerfile.

This package decides which shell commands run as build steps in the
generated Dockerfile, either taken verbatim from runtime_config.build or
synthesized from the workspace layout (rcloadenv dotenv loading, Rails
asset precompilation).

Example:
    from pathlib import Path
    from rubydockerfile.build import resolve_build_scripts

    scripts = resolve_build_scripts(
        runtime_config={},
        workspace_dir=Path("/workspace"),
        entrypoint="exec bundle exec rackup -p $PORT",
        cloud_sql_instances=("proj:region:db",),
    )
"""

from .scripts import resolve_build_scripts

__all__ = ["resolve_build_scripts"]
