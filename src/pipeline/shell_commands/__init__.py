"""Shell command abstractions for the build and deploy pipeline.

This package provides a small, typed interface over the external programs
the pipeline drives. It is organized into specialized modules per tool:

- docker: Image build, push, registry session, cleanup
- kubectl: Cluster probing, namespaces, manifests, rollout status
- tools: Executable lookup and downloads

Usage:
    from src.pipeline.shell_commands import ShellCommands

    commands = ShellCommands(project_root=Path("."))
    result = commands.kubectl.cluster_info(timeout=10)
    if not result.success:
        print(result.tail())
"""

from pathlib import Path

from .docker import DockerCommands
from .kubectl import KubectlCommands
from .runner import CommandRunner
from .tools import ToolCommands
from .types import CommandResult


class ShellCommands:
    """Unified interface for all shell command operations.

    Attributes:
        docker: Docker-related commands
        kubectl: Kubernetes kubectl commands
        tools: Host tool lookup and download
    """

    def __init__(self, project_root: Path) -> None:
        """Initialize the shell commands executor.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
        """
        self._project_root = Path(project_root)
        self._runner = CommandRunner(self._project_root)

        self.docker = DockerCommands(self._runner)
        self.kubectl = KubectlCommands(self._runner)
        self.tools = ToolCommands(self._runner)

    @property
    def project_root(self) -> Path:
        """Get the project root path."""
        return self._project_root

    @property
    def runner(self) -> CommandRunner:
        """Get the underlying command runner."""
        return self._runner


__all__ = [
    "ShellCommands",
    "CommandResult",
    "CommandRunner",
    "DockerCommands",
    "KubectlCommands",
    "ToolCommands",
]
