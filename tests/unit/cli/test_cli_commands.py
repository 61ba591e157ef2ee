"""Tests for the pipeline CLI commands."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from src.cli import app
from src.cli.context import CLIContext
from src.cli.shared.console import console
from src.infra.constants import DEFAULT_CONSTANTS, PipelinePaths
from src.pipeline import PipelineResult, RunStatus
from src.pipeline.errors import ImagePushError
from src.pipeline.image_builder import ImageReference
from src.pipeline.settings import PipelineSettings
from tests.helpers import TEMPLATE, ok

runner = CliRunner()
IMAGE = ImageReference("app", "20240101-000000")


@pytest.fixture
def cli_context(tmp_path: Path, mock_commands: MagicMock) -> CLIContext:
    return CLIContext(
        console=console,
        project_root=tmp_path,
        commands=mock_commands,
        settings=PipelineSettings(),
        constants=DEFAULT_CONSTANTS,
        paths=PipelinePaths(tmp_path),
    )


@pytest.fixture(autouse=True)
def patched_context(cli_context: CLIContext):
    with patch("src.cli.context.build_cli_context", return_value=cli_context) as build:
        yield build


def _run_with(result: PipelineResult, *args: str):
    with patch("src.cli.commands.pipeline.PipelineRunner") as pipeline_runner:
        pipeline_runner.return_value.run.return_value = result
        outcome = runner.invoke(app, ["run", *args])
    return outcome, pipeline_runner


def test_run_success_exits_zero() -> None:
    result, pipeline_runner = _run_with(
        PipelineResult(status=RunStatus.SUCCESS, namespace="prod", image=IMAGE),
        "--namespace",
        "prod",
    )

    assert result.exit_code == 0
    pipeline_runner.return_value.run.assert_called_once_with("prod")


def test_run_defaults_namespace_from_settings() -> None:
    _, pipeline_runner = _run_with(
        PipelineResult(status=RunStatus.SUCCESS, namespace="default", image=IMAGE)
    )

    pipeline_runner.return_value.run.assert_called_once_with("default")


def test_run_degraded_exits_zero() -> None:
    result, _ = _run_with(
        PipelineResult(status=RunStatus.DEGRADED, namespace="default", image=IMAGE)
    )

    assert result.exit_code == 0
    assert "DEGRADED" in result.output


def test_run_failure_exits_one() -> None:
    result, _ = _run_with(
        PipelineResult(
            status=RunStatus.FAILED,
            namespace="default",
            image=IMAGE,
            error=ImagePushError("Failed to push image", details="denied"),
        )
    )

    assert result.exit_code == 1
    assert "Failed to push image" in result.output


def test_invalid_configuration_exits_one(patched_context: MagicMock) -> None:
    patched_context.side_effect = ValueError("Invalid pipeline configuration: bad")

    result = runner.invoke(app, ["status"])

    assert result.exit_code == 1
    assert "Invalid pipeline configuration" in result.output


def test_render_writes_manifest(cli_context: CLIContext) -> None:
    cli_context.paths.manifest_template.write_text(TEMPLATE)

    result = runner.invoke(
        app, ["render", "-n", "prod", "--image", "ghcr.io/acme/app:20240101-000000"]
    )

    assert result.exit_code == 0
    content = cli_context.paths.manifest_output.read_text()
    assert "image: ghcr.io/acme/app:20240101-000000" in content
    assert "namespace: prod" in content


def test_render_without_template_exits_one(cli_context: CLIContext) -> None:
    result = runner.invoke(app, ["render"])

    assert result.exit_code == 1
    assert not cli_context.paths.manifest_output.exists()


def test_status_lists_resources(
    cli_context: CLIContext, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("KUBECONFIG_CONTENT", "apiVersion: v1\nkind: Config\n")
    monkeypatch.delenv("KUBECONFIG_FILE", raising=False)
    cli_context.commands.kubectl.get_resources.return_value = ok("NAME   READY")

    result = runner.invoke(app, ["status", "-n", "prod"])

    assert result.exit_code == 0
    cli_context.commands.kubectl.get_resources.assert_called_once_with("prod")


def test_subcommand_help_ignores_broken_configuration(patched_context: MagicMock) -> None:
    patched_context.side_effect = ValueError("Invalid pipeline configuration: bad")

    result = runner.invoke(app, ["run", "--help"])

    assert result.exit_code == 0
    assert "--namespace" in result.output
    patched_context.assert_not_called()


def test_global_options_reach_context_builder(
    patched_context: MagicMock, tmp_path: Path
) -> None:
    config = tmp_path / "ci.yaml"

    runner.invoke(
        app, ["--project-root", str(tmp_path), "--config", str(config), "status"]
    )

    patched_context.assert_called_once_with(tmp_path, config)


def test_failure_details_are_printed_literally() -> None:
    result, _ = _run_with(
        PipelineResult(
            status=RunStatus.FAILED,
            namespace="default",
            image=IMAGE,
            error=ImagePushError(
                "Failed to push image",
                details="=> ERROR [internal] load metadata for docker.io/library/app",
            ),
        )
    )

    assert result.exit_code == 1
    assert "[internal]" in result.output
