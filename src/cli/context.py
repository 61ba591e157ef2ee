"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click
import typer

from src.cli.shared.console import CLIConsole, console
from src.infra.constants import DEFAULT_CONSTANTS, PipelineConstants, PipelinePaths
from src.pipeline.settings import PipelineSettings, load_settings
from src.pipeline.shell_commands import ShellCommands
from src.utils.paths import get_project_root


@dataclass(frozen=True)
class CLIOptions:
    """Global options captured by the app callback.

    The full context is built from these on first use, so ``--help`` on a
    subcommand works even when the configuration is broken.
    """

    project_root: Path | None = None
    config_file: Path | None = None


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    project_root: Path
    commands: ShellCommands
    settings: PipelineSettings
    constants: PipelineConstants
    paths: PipelinePaths


def build_cli_context(
    project_root: Path | None = None,
    config_file: Path | None = None,
) -> CLIContext:
    """Build a fresh CLIContext.

    Raises:
        FileNotFoundError: If an explicit config file does not exist
        ValueError: If the configuration is invalid
    """
    root = get_project_root(project_root)
    settings = load_settings(root, config_file)
    paths = PipelinePaths(
        root,
        manifest_template=settings.manifest_template,
        manifest_output=settings.manifest_output,
    )

    return CLIContext(
        console=console,
        project_root=root,
        commands=ShellCommands(root),
        settings=settings,
        constants=DEFAULT_CONSTANTS,
        paths=paths,
    )


def _build_from_options(options: CLIOptions) -> CLIContext:
    try:
        return build_cli_context(options.project_root, options.config_file)
    except (FileNotFoundError, ValueError) as e:
        console.handle_error("Invalid pipeline configuration", str(e))


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext for the current command.

    Options stored by the app callback are resolved into a CLIContext on
    first access and cached on the context. Without either, a new context
    is built from defaults.
    """
    context = ctx or click.get_current_context(silent=True)
    if context is None:
        return build_cli_context()
    if isinstance(context.obj, CLIContext):
        return context.obj
    if isinstance(context.obj, CLIOptions):
        built = _build_from_options(context.obj)
        context.obj = built
        return built
    return build_cli_context()
