"""Pipeline commands.

This module provides the full build/publish/deploy run plus commands that
expose individual stages for local troubleshooting.
"""

from typing import Annotated

import typer

from src.cli.context import get_cli_context
from src.cli.shared.console import with_error_handling
from src.pipeline import (
    DeploymentApplier,
    ImageBuilder,
    PipelineRunner,
    RunStatus,
    ToolProvisioner,
)

NamespaceOption = Annotated[
    str | None,
    typer.Option(
        "--namespace",
        "-n",
        help="Target Kubernetes namespace (default from settings: 'default')",
    ),
]


@with_error_handling
def run(ctx: typer.Context, namespace: NamespaceOption = None) -> None:
    """🚀 Build, publish and deploy the application image."""
    cli = get_cli_context(ctx)
    target = namespace or cli.settings.namespace
    cli.console.print_header(f"Build & Deploy → namespace '{target}'")

    runner = PipelineRunner(cli.commands, cli.settings, cli.paths, cli.console)
    result = runner.run(target)

    if result.status is RunStatus.FAILED and result.error is not None:
        cli.console.handle_error(result.error.message, result.error.details)
    elif result.status is RunStatus.DEGRADED:
        cli.console.warn(f"Run finished DEGRADED: {result.image} published, not deployed")
    else:
        cli.console.ok(f"Run finished: {result.image} deployed to {target}")


@with_error_handling
def ensure_kubectl(ctx: typer.Context) -> None:
    """🔧 Install kubectl if it is not already on PATH."""
    cli = get_cli_context(ctx)
    path = ToolProvisioner(cli.commands, cli.settings, cli.console).ensure_kubectl()
    cli.console.print(f"[dim]{path}[/dim]")


@with_error_handling
def render(
    ctx: typer.Context,
    namespace: NamespaceOption = None,
    image: Annotated[
        str | None,
        typer.Option(
            "--image",
            "-i",
            help="Image reference to substitute (default: a fresh timestamp tag)",
        ),
    ] = None,
) -> None:
    """📝 Materialize the deployment manifest without touching the cluster."""
    cli = get_cli_context(ctx)
    target = namespace or cli.settings.namespace
    reference = image or str(
        ImageBuilder(cli.commands, cli.settings, cli.paths, cli.console).reference_for()
    )
    applier = DeploymentApplier(cli.commands, cli.settings, cli.paths, cli.console)
    output = applier.render(reference, target)
    cli.console.ok(f"Wrote {output} (image {reference}, namespace {target})")


@with_error_handling
def status(ctx: typer.Context, namespace: NamespaceOption = None) -> None:
    """📊 Show deployments, pods and services in the target namespace."""
    cli = get_cli_context(ctx)
    target = namespace or cli.settings.namespace
    DeploymentApplier(cli.commands, cli.settings, cli.paths, cli.console).show_status(
        target
    )
