"""
Pytest configuration and shared fixtures for rubydockerfile tests.

This module provides reusable fixtures for building throwaway application
workspaces and keeping the resolver away from the real network and
bundler.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
import yaml

from rubydockerfile.logging import get_global_logger, set_global_logger


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """
    Provide an empty application workspace directory.

    Automatically cleaned up after test completion.
    """
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws


@pytest.fixture
def write_app_yaml(workspace: Path):
    """
    Factory fixture for writing app.yaml (or another descriptor) into the workspace.

    Usage:
        write_app_yaml({"entrypoint": "puma"})
        write_app_yaml({"entrypoint": "puma"}, name="worker.yaml")
    """

    def _write(data: dict[str, Any], name: str = "app.yaml") -> Path:
        path = workspace / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
        return path

    return _write


@pytest.fixture
def rails_workspace(workspace: Path) -> Path:
    """Provide a workspace with the Rails asset pipeline layout."""
    (workspace / "app" / "assets").mkdir(parents=True)
    (workspace / "config").mkdir()
    (workspace / "config" / "application.rb").write_text("module MyApp; end\n")
    return workspace


@pytest.fixture
def env() -> dict[str, str]:
    """
    Provide an isolated environment mapping.

    PROJECT_ID is set so the metadata server is never contacted.
    """
    return {"PROJECT_ID": "test-project"}


@pytest.fixture
def no_bundler():
    """Make `bundle platform --ruby` unavailable."""
    with patch(
        "rubydockerfile.runtime.subprocess.run",
        side_effect=FileNotFoundError("bundle"),
    ) as mock_run:
        yield mock_run


@pytest.fixture
def restore_logger():
    """Restore the global logger after a test that installs its own."""
    previous = get_global_logger()
    yield
    set_global_logger(previous)
