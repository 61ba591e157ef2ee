"""Docker command abstractions.

This module provides commands for the container image lifecycle:
building, registry login/logout, pushing, and local cleanup.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class DockerCommands:
    """Docker-related shell commands.

    Provides operations for:
    - Image management (build, push, remove)
    - Registry session (login, logout)
    - Runtime housekeeping (system prune)
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Docker commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    # =========================================================================
    # Image Management
    # =========================================================================

    def build_image(
        self,
        image_tag: str,
        context_dir: Path,
        *,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Build an image from a build context.

        Args:
            image_tag: Tag to apply (e.g., "app:20240101-000000")
            context_dir: Directory used as the build context
            on_output: Optional callback receiving each line of build output

        Returns:
            CommandResult with build status and collected output
        """
        return self._runner.run_streaming(
            ["docker", "build", "-t", image_tag, str(context_dir)],
            cwd=context_dir,
            on_output=on_output,
        )

    def push_image(self, image_tag: str) -> CommandResult:
        """Push a Docker image to a remote registry.

        Args:
            image_tag: Full image tag including registry
                      (e.g., "registry.example.com/app:v1")
        """
        return self._runner.run(["docker", "push", image_tag])

    def remove_image(self, image_tag: str) -> CommandResult:
        """Force-remove a local image."""
        return self._runner.run(["docker", "rmi", "-f", image_tag])

    def system_prune(self) -> CommandResult:
        """Remove unused containers, networks, and dangling images."""
        return self._runner.run(["docker", "system", "prune", "-f"])

    # =========================================================================
    # Registry Session
    # =========================================================================

    def login(
        self,
        username: str,
        password: str,
        registry: str | None = None,
    ) -> CommandResult:
        """Log in to a container registry.

        The password is passed on stdin so it never appears in the
        process table or in logged command lines.

        Args:
            username: Registry username
            password: Registry password or token
            registry: Registry host; Docker Hub when omitted
        """
        cmd = ["docker", "login"]
        if registry:
            cmd.append(registry)
        cmd.extend(["--username", username, "--password-stdin"])
        return self._runner.run(cmd, input_data=password)

    def logout(self, registry: str | None = None) -> CommandResult:
        """Log out of a container registry."""
        cmd = ["docker", "logout"]
        if registry:
            cmd.append(registry)
        return self._runner.run(cmd)
