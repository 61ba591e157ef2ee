"""Tests for CLI context dependency injection."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import typer

from src.cli.context import CLIContext, CLIOptions, build_cli_context, get_cli_context
from src.pipeline.settings import PipelineSettings


def _context(**overrides: object) -> CLIContext:
    fields: dict[str, object] = {
        "console": Mock(),
        "project_root": Path("/test"),
        "commands": Mock(),
        "settings": PipelineSettings(),
        "constants": Mock(),
        "paths": Mock(),
    }
    fields.update(overrides)
    return CLIContext(**fields)  # type: ignore[arg-type]


def test_cli_context_is_immutable():
    """Test that CLIContext is frozen/immutable."""
    ctx = _context()

    with pytest.raises(AttributeError):
        ctx.console = Mock()  # type: ignore[misc]


def test_build_cli_context_creates_all_dependencies(tmp_path):
    """Test that build_cli_context creates all required dependencies."""
    with patch("src.cli.context.get_project_root", return_value=tmp_path):
        ctx = build_cli_context()

    assert ctx.console is not None
    assert ctx.project_root == tmp_path
    assert ctx.commands is not None
    assert isinstance(ctx.settings, PipelineSettings)
    assert ctx.constants is not None
    assert ctx.paths.project_root == tmp_path


def test_build_cli_context_paths_follow_settings(tmp_path):
    """Test that manifest paths come from the loaded settings."""
    (tmp_path / "Dockerfile").write_text("FROM scratch\n")
    (tmp_path / "pipeline.yaml").write_text(
        "config:\n"
        "  manifest_template: k8s/app.yaml\n"
        "  manifest_output: app-resolved.yaml\n"
    )

    ctx = build_cli_context(tmp_path)
    root = tmp_path.resolve()

    assert ctx.paths.manifest_template == root / "k8s" / "app.yaml"
    assert ctx.paths.manifest_output == root / "k8s" / "app-resolved.yaml"


@patch("src.cli.context.load_settings")
@patch("src.cli.context.get_project_root")
def test_build_cli_context_passes_config_file(mock_get_root, mock_load_settings):
    """Test that an explicit config file reaches the settings loader."""
    mock_get_root.return_value = Path("/test/project")
    mock_load_settings.return_value = PipelineSettings()

    build_cli_context(config_file=Path("/etc/pipeline.yaml"))

    mock_load_settings.assert_called_once_with(
        Path("/test/project"), Path("/etc/pipeline.yaml")
    )


@patch("src.cli.context.load_settings")
@patch("src.cli.context.get_project_root")
def test_build_cli_context_propagates_config_errors(mock_get_root, mock_load_settings):
    """Test that invalid configuration is surfaced to the caller."""
    mock_get_root.return_value = Path("/test/project")
    mock_load_settings.side_effect = ValueError("Invalid pipeline configuration")

    with pytest.raises(ValueError):
        build_cli_context()


def test_get_cli_context_from_typer_context():
    """Test that get_cli_context retrieves from Typer context."""
    mock_ctx_obj = _context()

    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = mock_ctx_obj

    result = get_cli_context(typer_ctx)

    assert result is mock_ctx_obj


def test_get_cli_context_with_invalid_obj_falls_back():
    """Test that get_cli_context falls back when ctx.obj is not CLIContext."""
    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = "invalid"

    with patch("src.cli.context.build_cli_context") as mock_build:
        mock_build.return_value = Mock(spec=CLIContext)

        get_cli_context(typer_ctx)

        mock_build.assert_called_once()


@patch("click.get_current_context")
def test_get_cli_context_uses_click_context_as_fallback(mock_get_click_ctx):
    """Test that get_cli_context uses click context when typer ctx is None."""
    mock_ctx_obj = _context()

    mock_click_context = Mock()
    mock_click_context.obj = mock_ctx_obj
    mock_get_click_ctx.return_value = mock_click_context

    result = get_cli_context(None)

    assert result is mock_ctx_obj
    mock_get_click_ctx.assert_called_once_with(silent=True)


@patch("src.cli.context.ShellCommands")
@patch("src.cli.context.load_settings")
@patch("src.cli.context.get_project_root")
def test_cli_context_shell_commands_initialized_with_project_root(
    mock_get_root, mock_load_settings, mock_shell_commands
):
    """Test that ShellCommands is initialized with project_root."""
    mock_get_root.return_value = Path("/test/project")
    mock_load_settings.return_value = PipelineSettings()

    build_cli_context()

    mock_shell_commands.assert_called_once_with(Path("/test/project"))


def test_get_cli_context_resolves_options_once():
    """Test that stored options are built into a context on first access."""
    built = _context()
    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = CLIOptions(project_root=Path("/repo"), config_file=Path("/repo/ci.yaml"))

    with patch("src.cli.context.build_cli_context", return_value=built) as mock_build:
        first = get_cli_context(typer_ctx)
        second = get_cli_context(typer_ctx)

    assert first is built
    assert second is built
    mock_build.assert_called_once_with(Path("/repo"), Path("/repo/ci.yaml"))


def test_get_cli_context_reports_invalid_options():
    """Test that configuration errors exit with status 1."""
    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = CLIOptions()

    with patch(
        "src.cli.context.build_cli_context",
        side_effect=ValueError("Invalid pipeline configuration: bad"),
    ):
        with pytest.raises(typer.Exit) as excinfo:
            get_cli_context(typer_ctx)

    assert excinfo.value.exit_code == 1
