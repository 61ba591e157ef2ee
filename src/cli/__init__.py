"""Main CLI application module.

This module provides the entry point for the pipeline CLI.

Commands:
- run: Build, publish and deploy the application image
- ensure-kubectl: Install kubectl when missing
- render: Write the materialized deployment manifest
- status: Show resources in the target namespace
"""

from pathlib import Path
from typing import Annotated

import typer

from .commands import ensure_kubectl, render, run, status
from .context import CLIOptions
from .shared.log_config import configure_logging

# Create the main CLI application
app = typer.Typer(
    help="🛠️  Pipeline CLI - build, publish and deploy the application image",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def setup(
    ctx: typer.Context,
    project_root: Annotated[
        Path | None,
        typer.Option(
            "--project-root",
            help="Repository to build (default: nearest directory with a Dockerfile)",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Pipeline YAML config file"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logs")
    ] = False,
) -> None:
    """Record options shared by all commands."""
    configure_logging(verbose)
    ctx.obj = CLIOptions(project_root=project_root, config_file=config)


app.command("run")(run)
app.command("ensure-kubectl")(ensure_kubectl)
app.command("render")(render)
app.command("status")(status)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
