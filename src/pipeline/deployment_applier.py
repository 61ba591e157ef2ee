"""Deployment to the target cluster.

The applier has three observable outcomes:

- manifest missing: ``ManifestMissingError`` is raised before any cluster
  credential is read
- cluster unreachable: reported as ``DeploymentOutcome.CLUSTER_UNREACHABLE``;
  the image is already published, so the run is degraded, not failed
- applied: the manifest is applied and the rollout became available

A rollout that does not become available within the timeout is a hard
failure (``ReadinessTimeoutError``), unlike the unreachable case.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger
from rich.markup import escape

from src.utils.console_like import ConsoleLike, coalesce_console

from .credentials import ClusterCredentials
from .errors import (
    AuthenticationError,
    ClusterUnreachableError,
    ManifestApplyError,
    ManifestMissingError,
    ReadinessTimeoutError,
)
from .manifest import materialize_manifest

if TYPE_CHECKING:
    from src.infra.constants import PipelinePaths

    from .image_builder import ImageReference
    from .settings import PipelineSettings
    from .shell_commands import KubectlCommands, ShellCommands


class DeploymentOutcome(str, Enum):
    """Non-exceptional results of a deployment attempt."""

    APPLIED = "applied"
    CLUSTER_UNREACHABLE = "cluster-unreachable"


class DeploymentApplier:
    """Applies the templated manifest and waits for the rollout."""

    def __init__(
        self,
        commands: ShellCommands,
        settings: PipelineSettings,
        paths: PipelinePaths,
        console: ConsoleLike | None = None,
        credentials_loader: Callable[[], ClusterCredentials] = ClusterCredentials.from_env,
    ) -> None:
        """Initialize the applier.

        Args:
            commands: Shell command executor
            settings: Pipeline settings (deployment name, timeouts)
            paths: Pipeline paths (manifest template and output)
            console: Console for output
            credentials_loader: Returns the cluster credential when called
        """
        self.commands = commands
        self.settings = settings
        self.paths = paths
        self.console = coalesce_console(console)
        self._credentials_loader = credentials_loader

    # =========================================================================
    # Public API
    # =========================================================================

    def render(self, image: ImageReference | str, namespace: str) -> Path:
        """Materialize the manifest for ``image`` and ``namespace``.

        Raises:
            ManifestMissingError: If the template does not exist
        """
        self._require_template()
        output = materialize_manifest(
            self.paths.manifest_template,
            self.paths.manifest_output,
            image,
            namespace,
        )
        logger.debug("Materialized manifest at {}", output)
        return output

    def deploy(self, image: ImageReference, namespace: str) -> DeploymentOutcome:
        """Deploy ``image`` into ``namespace``.

        Raises:
            ManifestMissingError: If the template does not exist
            AuthenticationError: If cluster credentials are missing or malformed
            ManifestApplyError: If kubectl rejects the namespace or manifest
            ReadinessTimeoutError: If the rollout does not complete in time
        """
        self._require_template()
        credentials = self._credentials_loader()

        with credentials.kubeconfig() as kubeconfig:
            with self.commands.kubectl.using_kubeconfig(kubeconfig) as kubectl:
                self._validate_credentials(kubectl)
                try:
                    self._probe_cluster(kubectl)
                except ClusterUnreachableError as e:
                    self._report_unreachable(e)
                    return DeploymentOutcome.CLUSTER_UNREACHABLE

                self._ensure_namespace(kubectl, namespace)
                manifest = self.render(image, namespace)
                self._apply(kubectl, manifest)
                self._wait_for_rollout(kubectl, namespace)
                self._print_resources(kubectl, namespace)

        return DeploymentOutcome.APPLIED

    def show_status(self, namespace: str) -> None:
        """Print the deployment/pod/service listing for ``namespace``."""
        credentials = self._credentials_loader()
        with credentials.kubeconfig() as kubeconfig:
            with self.commands.kubectl.using_kubeconfig(kubeconfig) as kubectl:
                self._print_resources(kubectl, namespace)

    # =========================================================================
    # Steps
    # =========================================================================

    def _require_template(self) -> None:
        template = self.paths.manifest_template
        if not template.is_file():
            raise ManifestMissingError(
                f"Deployment manifest not found: {template}",
                details=(
                    f"Create {template.name} at the repository root with the "
                    "placeholders __IMAGE__ and __NAMESPACE__."
                ),
            )

    def _validate_credentials(self, kubectl: KubectlCommands) -> None:
        result = kubectl.validate_credentials()
        if not result.success:
            raise AuthenticationError(
                "Cluster credentials are not a valid kubeconfig",
                details=result.tail() or None,
            )

    def _probe_cluster(self, kubectl: KubectlCommands) -> None:
        timeout = self.settings.cluster_probe_timeout
        self.console.info(f"Checking cluster connectivity (timeout {timeout}s)")
        result = kubectl.cluster_info(timeout=timeout)
        if result.timed_out:
            raise ClusterUnreachableError(
                f"Cluster did not respond within {timeout}s",
                details=result.tail() or None,
            )
        if not result.success:
            raise ClusterUnreachableError(
                "Cannot connect to the Kubernetes cluster",
                details=result.tail() or None,
            )
        self.console.ok("Cluster is reachable")

    def _report_unreachable(self, error: ClusterUnreachableError) -> None:
        logger.warning("Cluster unreachable: {}", error.message)
        self.console.warn(error.message)
        if error.details:
            self.console.print(f"[dim]{escape(error.details)}[/dim]")
        self.console.print(
            "\n[yellow]Troubleshooting:[/yellow]\n"
            "  • Check that the kubeconfig server address is reachable from this agent\n"
            "  • Verify VPN, firewall and security-group rules for the API server port\n"
            "  • Confirm the cluster is running and its certificate has not expired\n"
            "  • Test manually with: [cyan]kubectl cluster-info[/cyan]\n"
        )
        self.console.warn(
            "The image was built and published; deployment was skipped"
        )

    def _ensure_namespace(self, kubectl: KubectlCommands, namespace: str) -> None:
        result = kubectl.ensure_namespace(namespace)
        if not result.success:
            raise ManifestApplyError(
                f"Could not create namespace {namespace}",
                details=result.tail() or None,
            )
        logger.debug("Namespace {} ready", namespace)

    def _apply(self, kubectl: KubectlCommands, manifest: Path) -> None:
        self.console.info(f"Applying {manifest.name}")
        result = kubectl.apply_manifest(manifest)
        if not result.success:
            raise ManifestApplyError(
                f"kubectl apply failed for {manifest.name}",
                details=result.tail() or None,
            )
        if result.stdout.strip():
            self.console.print(f"[dim]{escape(result.stdout.strip())}[/dim]")

    def _wait_for_rollout(self, kubectl: KubectlCommands, namespace: str) -> None:
        name = self.settings.deployment_name
        timeout = self.settings.rollout_timeout
        self.console.info(
            f"Waiting for deployment/{name} to become available (timeout {timeout}s)"
        )
        result = kubectl.rollout_status(name, namespace, timeout=timeout)
        if not result.success:
            raise ReadinessTimeoutError(
                f"deployment/{name} did not become available within {timeout}s",
                details=(
                    (result.tail() + "\n\n" if result.output else "")
                    + f"Inspect with: kubectl describe deployment/{name} -n {namespace}"
                ),
            )
        self.console.ok(f"deployment/{name} is available")

    def _print_resources(self, kubectl: KubectlCommands, namespace: str) -> None:
        result = kubectl.get_resources(namespace)
        if result.success:
            self.console.print(f"\n[bold]Resources in {namespace}:[/bold]")
            self.console.print(escape(result.stdout.rstrip()))
        else:
            self.console.warn(f"Could not list resources in {namespace}")
            logger.warning("kubectl get failed: {}", result.tail())

