"""Build, publish and deploy pipeline.

This package implements a fixed four-stage recipe plus post-run hooks:

- ToolProvisioner: ensures kubectl is installed
- ImageBuilder: builds the image tagged with a timestamp identifier
- ImagePublisher: pushes the image inside a scoped registry session
- DeploymentApplier: renders the manifest, applies it, waits for readiness
- PostRunHooks: cleanup that always runs, plus operator guidance

PipelineRunner wires the stages together. External programs are driven
through the shell_commands subpackage.
"""

from .deployment_applier import DeploymentApplier, DeploymentOutcome
from .errors import PipelineError
from .image_builder import ImageBuilder, ImageReference
from .image_publisher import ImagePublisher
from .orchestrator import PipelineResult, PipelineRunner, RunStatus
from .post_run import PostRunHooks
from .tool_provisioner import ToolProvisioner

__all__ = [
    "DeploymentApplier",
    "DeploymentOutcome",
    "ImageBuilder",
    "ImagePublisher",
    "ImageReference",
    "PipelineError",
    "PipelineResult",
    "PipelineRunner",
    "PostRunHooks",
    "RunStatus",
    "ToolProvisioner",
]
