"""Pipeline orchestration.

Runs the stages strictly in order:

1. provision: make sure kubectl is installed
2. build: build and tag the image
3. publish: push the image to the registry
4. deploy: apply the manifest and wait for the rollout

Post-run cleanup executes exactly once per run, after whichever stage
ended it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from src.utils.console_like import ConsoleLike, coalesce_console

from .deployment_applier import DeploymentApplier, DeploymentOutcome
from .errors import PipelineError
from .image_builder import ImageBuilder, ImageReference
from .image_publisher import ImagePublisher
from .post_run import PostRunHooks
from .tool_provisioner import ToolProvisioner

if TYPE_CHECKING:
    from src.infra.constants import PipelinePaths

    from .settings import PipelineSettings
    from .shell_commands import ShellCommands


class RunStatus(str, Enum):
    """Overall result of a pipeline run."""

    SUCCESS = "success"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass
class PipelineResult:
    """Outcome of one pipeline run.

    Attributes:
        status: Overall run status
        namespace: Target namespace
        image: Image built in this run, or None if the build never completed
        stages_completed: Names of the stages that finished, in order
        error: The error that ended the run, if it failed
        cleanup_ran: Whether post-run cleanup executed
    """

    status: RunStatus
    namespace: str
    image: ImageReference | None = None
    stages_completed: list[str] = field(default_factory=list)
    error: PipelineError | None = None
    cleanup_ran: bool = False

    @property
    def exit_code(self) -> int:
        """Process exit code: degraded runs are reported as non-fatal."""
        return 1 if self.status is RunStatus.FAILED else 0


class PipelineRunner:
    """Executes the fixed build, publish and deploy recipe."""

    def __init__(
        self,
        commands: ShellCommands,
        settings: PipelineSettings,
        paths: PipelinePaths,
        console: ConsoleLike | None = None,
        *,
        provisioner: ToolProvisioner | None = None,
        builder: ImageBuilder | None = None,
        publisher: ImagePublisher | None = None,
        applier: DeploymentApplier | None = None,
        hooks: PostRunHooks | None = None,
    ) -> None:
        """Initialize the runner.

        Stage components default to the standard implementations and can be
        replaced individually.
        """
        self.settings = settings
        self.console = coalesce_console(console)
        self.provisioner = provisioner or ToolProvisioner(commands, settings, self.console)
        self.builder = builder or ImageBuilder(commands, settings, paths, self.console)
        self.publisher = publisher or ImagePublisher(commands, self.console)
        self.applier = applier or DeploymentApplier(
            commands, settings, paths, self.console
        )
        self.hooks = hooks or PostRunHooks(commands, settings, self.console)

    def _announce(self, step: int, title: str) -> None:
        self.console.print(f"\n[bold cyan]▶ [{step}/4] {title}[/bold cyan]")

    def run(self, namespace: str | None = None) -> PipelineResult:
        """Run every stage and return the result.

        A ``PipelineError`` raised by any stage ends the run as FAILED. Other
        exceptions (e.g. KeyboardInterrupt) propagate after cleanup.
        """
        target_namespace = namespace or self.settings.namespace
        result = PipelineResult(status=RunStatus.FAILED, namespace=target_namespace)

        try:
            self._announce(1, "Provisioning kubectl")
            self.provisioner.ensure_kubectl()
            result.stages_completed.append("provision")

            self._announce(2, "Building image")
            result.image = self.builder.build()
            result.stages_completed.append("build")

            self._announce(3, "Publishing image")
            self.publisher.publish(result.image)
            result.stages_completed.append("publish")

            self._announce(4, f"Deploying to namespace {target_namespace}")
            outcome = self.applier.deploy(result.image, target_namespace)
            result.stages_completed.append("deploy")

            result.status = (
                RunStatus.SUCCESS
                if outcome is DeploymentOutcome.APPLIED
                else RunStatus.DEGRADED
            )
        except PipelineError as e:
            logger.error("Pipeline failed: {}", e.message)
            result.error = e
        finally:
            self.hooks.cleanup(result.image)
            result.cleanup_ran = True

        if result.status is RunStatus.SUCCESS:
            self.hooks.print_guidance(target_namespace)
        elif result.status is RunStatus.DEGRADED:
            self.hooks.report_degraded(target_namespace)

        return result
