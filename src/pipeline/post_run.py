"""Post-run hooks.

Local cleanup runs after every pipeline run whatever its outcome. Cleanup
is best-effort: failures are logged and never change the run result.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from loguru import logger
from rich.panel import Panel

from src.utils.console_like import ConsoleLike, coalesce_console

if TYPE_CHECKING:
    from .image_builder import ImageReference
    from .settings import PipelineSettings
    from .shell_commands import CommandResult, ShellCommands


class PostRunHooks:
    """Cleanup and operator guidance printed at the end of a run."""

    def __init__(
        self,
        commands: ShellCommands,
        settings: PipelineSettings,
        console: ConsoleLike | None = None,
    ) -> None:
        self.commands = commands
        self.settings = settings
        self.console = coalesce_console(console)

    def cleanup(self, image: ImageReference | None) -> None:
        """Remove the local image (if one was built) and prune the runtime."""
        self.console.print("[dim]Cleaning up local container resources...[/dim]")
        if image is not None:
            self._best_effort(
                f"remove image {image}",
                lambda: self.commands.docker.remove_image(str(image)),
            )
        self._best_effort("prune unused resources", self.commands.docker.system_prune)

    def _best_effort(self, action: str, operation: Callable[[], CommandResult]) -> bool:
        try:
            result = operation()
        except Exception as e:
            logger.warning("Cleanup step '{}' raised: {}", action, e)
            return False
        if not result.success:
            logger.warning("Cleanup step '{}' failed: {}", action, result.tail(5))
            return False
        logger.debug("Cleanup step '{}' done", action)
        return True

    def print_guidance(self, namespace: str) -> None:
        """Print follow-up commands for a successful deployment."""
        name = self.settings.deployment_name
        port = self.settings.app_port
        self.console.print(
            Panel(
                f"[bold]Port-forward:[/bold]  kubectl port-forward deployment/{name} "
                f"{port}:{port} -n {namespace}\n"
                f"[bold]Tail logs:[/bold]     kubectl logs -f deployment/{name} -n {namespace}\n"
                f"[bold]Scale:[/bold]         kubectl scale deployment/{name} "
                f"--replicas=3 -n {namespace}",
                title="🎉 Deployment complete",
                border_style="green",
            )
        )

    def report_degraded(self, namespace: str) -> None:
        """Print the banner for a run that published but did not deploy."""
        self.console.print(
            Panel(
                "The image was published, but the cluster could not be reached, "
                f"so nothing was deployed to namespace [bold]{namespace}[/bold].\n"
                "Re-run the pipeline once the cluster is reachable.",
                title="⚠️  Run degraded",
                border_style="yellow",
            )
        )
