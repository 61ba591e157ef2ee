"""Kubectl command abstractions.

This module provides commands for Kubernetes resource management via kubectl.
Every call can be scoped to a specific kubeconfig file so that cluster
credentials are only visible to the commands that need them.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from src.infra.constants import DEFAULT_CONSTANTS

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner

# Extra wall-clock slack given to the subprocess on top of kubectl's own timeout
_TIMEOUT_GRACE_SECONDS = 5


class KubectlCommands:
    """Kubectl-related shell commands.

    Provides operations for:
    - Client version and credential checks
    - Cluster reachability probing
    - Namespace management
    - Manifest application and rollout status
    - Resource listing
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize kubectl commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner
        self._kubeconfig: Path | None = None

    @property
    def kubeconfig(self) -> Path | None:
        """Kubeconfig file currently in scope, if any."""
        return self._kubeconfig

    @contextmanager
    def using_kubeconfig(self, kubeconfig: Path) -> Iterator[KubectlCommands]:
        """Scope all kubectl calls inside the block to ``kubeconfig``.

        Example:
            >>> with kubectl.using_kubeconfig(Path("/tmp/kubeconfig")):
            ...     kubectl.cluster_info(timeout=30)
        """
        previous = self._kubeconfig
        self._kubeconfig = kubeconfig
        try:
            yield self
        finally:
            self._kubeconfig = previous

    def _run(
        self,
        args: list[str],
        *,
        input_data: str | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        env = {"KUBECONFIG": str(self._kubeconfig)} if self._kubeconfig else None
        return self._runner.run(
            ["kubectl", *args], input_data=input_data, env=env, timeout=timeout
        )

    # =========================================================================
    # Client & Credentials
    # =========================================================================

    def client_version(self) -> CommandResult:
        """Report the kubectl client version."""
        return self._run(["version", "--client"])

    def validate_credentials(self) -> CommandResult:
        """Check that the kubeconfig in scope is well-formed.

        This is a local query; it does not contact the cluster.
        """
        return self._run(["config", "view", "--minify"])

    def cluster_info(self, *, timeout: int = 30) -> CommandResult:
        """Probe cluster reachability with a bounded timeout.

        Args:
            timeout: Seconds before the request is abandoned
        """
        return self._run(
            ["cluster-info", f"--request-timeout={timeout}s"],
            timeout=timeout + _TIMEOUT_GRACE_SECONDS,
        )

    # =========================================================================
    # Namespace Management
    # =========================================================================

    def ensure_namespace(self, namespace: str) -> CommandResult:
        """Create a namespace if it does not already exist.

        Renders the namespace client-side and applies it, which is a no-op
        for namespaces that already exist.
        """
        rendered = self._run(
            ["create", "namespace", namespace, "--dry-run=client", "-o", "yaml"]
        )
        if not rendered.success:
            return rendered
        return self._run(["apply", "-f", "-"], input_data=rendered.stdout)

    # =========================================================================
    # Deployment Operations
    # =========================================================================

    def apply_manifest(self, manifest_path: Path) -> CommandResult:
        """Apply a Kubernetes manifest file."""
        return self._run(["apply", "-f", str(manifest_path)])

    def rollout_status(
        self,
        name: str,
        namespace: str,
        *,
        timeout: int = 300,
    ) -> CommandResult:
        """Block until a deployment reports available or the timeout elapses.

        Args:
            name: Deployment name
            namespace: Kubernetes namespace
            timeout: Seconds to wait for the rollout
        """
        return self._run(
            [
                "rollout",
                "status",
                f"deployment/{name}",
                "-n",
                namespace,
                f"--timeout={timeout}s",
            ],
            timeout=timeout + _TIMEOUT_GRACE_SECONDS,
        )

    def get_resources(
        self,
        namespace: str,
        resource_types: str = DEFAULT_CONSTANTS.STATUS_RESOURCE_TYPES,
    ) -> CommandResult:
        """List resources in a namespace in kubectl's table format."""
        return self._run(["get", resource_types, "-n", namespace])
