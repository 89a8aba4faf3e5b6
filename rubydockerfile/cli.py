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

"""Command-line interface for rubydockerfile.

Commands:

    resolve: Print the resolved configuration as YAML or JSON
    validate: Check app.yaml and the workspace, print a summary

Example:
    Resolve the configuration of an app:
        ```bash
        $ rubydockerfile resolve --workspace-dir ./myapp
        ```

    Use a non-default descriptor:
        ```bash
        $ rubydockerfile resolve --workspace-dir ./myapp --app-yaml worker.yaml
        ```

    Validate with progress output:
        ```bash
        $ rubydockerfile validate --workspace-dir ./myapp --verbose
        ```

Exit Codes:

- 0: Success
- 1: Configuration error

"""

from __future__ import annotations

import argparse
import json
import sys

import yaml

from rubydockerfile import __version__
from rubydockerfile.core import DEFAULT_WORKSPACE_DIR, resolve_app_config
from rubydockerfile.exceptions import RubyDockerfileError
from rubydockerfile.logging import get_logger, set_global_logger
from rubydockerfile.results import ResolvedConfiguration


def _resolve_or_report(args: argparse.Namespace) -> ResolvedConfiguration | None:
    """Run resolution, printing the error and returning None on failure."""
    try:
        return resolve_app_config(args.workspace_dir, args.app_yaml)
    except RubyDockerfileError as err:
        print(f"Error: {err}")
        if args.verbose or getattr(args, "debug", False):
            import traceback

            traceback.print_exc()
        return None


def cmd_resolve(args: argparse.Namespace) -> int:
    """Handler for 'rubydockerfile resolve' command.

    Args:
        args: Parsed command-line arguments containing workspace directory,
            app.yaml path, output format and flags.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    config = _resolve_or_report(args)
    if config is None:
        return 1

    data = config.to_dict()
    if args.format == "json":
        # YAML timestamps in runtime_config are not JSON types
        print(json.dumps(data, indent=2, default=str))
    else:
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'rubydockerfile validate' command.

    Resolves the configuration exactly as a build would, but only reports
    whether it succeeded.

    Args:
        args: Parsed command-line arguments containing workspace directory,
            app.yaml path and verbose flag.

    Returns:
        Exit code (0 for valid configuration, 1 for invalid).

    """
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    print(f"Validating app config in: {args.workspace_dir}")
    print()

    config = _resolve_or_report(args)
    if config is None:
        print()
        print("[FAILED] App config is invalid.")
        return 1

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"App Config:      {config.app_yaml_path}")
    print(f"Service:         {config.service_name}")
    print(f"Project:         {config.project_id_for_display}")
    print(f"Ruby Version:    {config.ruby_version or '(default)'}")
    print(f"Lockfile:        {'yes' if config.has_gemfile else 'no'}")
    print(f"Entrypoint:      {config.entrypoint}")
    print(f"Build Scripts:   {len(config.build_scripts)}")
    print("=" * 70)
    print()
    print("[SUCCESS] App config is valid!")
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workspace-dir",
        default=DEFAULT_WORKSPACE_DIR,
        help=f"Application workspace directory (default: {DEFAULT_WORKSPACE_DIR})",
    )
    parser.add_argument(
        "--app-yaml",
        default=None,
        help="Path to app.yaml relative to the workspace "
        "(default: $GAE_APPLICATION_YAML_PATH or ./app.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show resolution progress",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the rubydockerfile CLI."""
    parser = argparse.ArgumentParser(
        prog="rubydockerfile",
        description="Resolve Dockerfile configuration for a Ruby App Engine app",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"rubydockerfile {__version__}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'resolve' command
    parser_resolve = subparsers.add_parser(
        "resolve",
        help="Print the resolved configuration",
        description="Resolve app.yaml and the workspace into the configuration used to render a Dockerfile.",
    )
    _add_common_arguments(parser_resolve)
    parser_resolve.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml)",
    )
    parser_resolve.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_resolve.set_defaults(func=cmd_resolve)

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Check app.yaml and the workspace",
        description="Resolve the configuration and report whether it is valid.",
    )
    _add_common_arguments(parser_validate)
    parser_validate.set_defaults(func=cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the rubydockerfile CLI.

    This function is registered as the 'rubydockerfile' console script in
    pyproject.toml.
    """
    args = build_parser().parse_args(argv)
    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
