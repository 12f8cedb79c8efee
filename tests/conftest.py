"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.cli.deployment.gke_deployer.constants import DeploymentPaths
from src.cli.deployment.shell_commands import CommandResult


@pytest.fixture
def paths(tmp_path: Path) -> DeploymentPaths:
    """Transient paths rooted in a per-test directory."""
    return DeploymentPaths(tmp_path / "transient")


@pytest.fixture
def mock_console() -> MagicMock:
    """Create a mock CLI console."""
    return MagicMock()


@pytest.fixture
def mock_commands() -> MagicMock:
    """Shell commands whose every stage succeeds."""
    commands = MagicMock()
    ok = CommandResult(success=True)
    commands.gcloud.activate_service_account.return_value = ok
    commands.gcloud.get_cluster_credentials.return_value = ok
    commands.kubectl.version.return_value = ok
    commands.kubectl.set_context_namespace.return_value = ok
    commands.kubectl.apply.return_value = ok
    return commands


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Run the test from a directory that holds the templates."""
    root = tmp_path / "repo"
    root.mkdir()
    monkeypatch.chdir(root)
    yield root
