"""Shared fixtures for pipeline tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.infra.constants import PipelinePaths
from src.pipeline.settings import PipelineSettings
from tests.helpers import TEMPLATE


@pytest.fixture
def settings() -> PipelineSettings:
    """Default pipeline settings."""
    return PipelineSettings()


@pytest.fixture
def paths(tmp_path: Path) -> PipelinePaths:
    """Pipeline paths rooted at a temporary project directory."""
    return PipelinePaths(tmp_path)


@pytest.fixture
def manifest_template(paths: PipelinePaths) -> Path:
    """Write the standard manifest template and return its path."""
    paths.manifest_template.write_text(TEMPLATE)
    return paths.manifest_template


@pytest.fixture
def mock_console() -> MagicMock:
    """Create a mock console."""
    return MagicMock()


@pytest.fixture
def mock_commands() -> MagicMock:
    """Create a mock shell commands instance.

    ``kubectl.using_kubeconfig`` yields ``kubectl`` itself so scoped calls
    can be asserted on ``mock_commands.kubectl``.
    """
    commands = MagicMock()
    scope = MagicMock()
    scope.__enter__.return_value = commands.kubectl
    scope.__exit__.return_value = False
    commands.kubectl.using_kubeconfig.return_value = scope
    return commands
