"""Container image building.

This module handles the build stage of the pipeline:
- Generating a wall-clock build identifier (second granularity)
- Building the repository root with ``docker build``

The resulting ``ImageReference`` is the only artifact handed to the later
stages; publish and deploy always use the exact object returned here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from loguru import logger
from rich.markup import escape

from src.infra.constants import DEFAULT_CONSTANTS, PipelineConstants
from src.utils.console_like import ConsoleLike, coalesce_console

from .errors import ImageBuildError

if TYPE_CHECKING:
    from src.infra.constants import PipelinePaths

    from .settings import PipelineSettings
    from .shell_commands import ShellCommands


@dataclass(frozen=True)
class ImageReference:
    """A ``repository:tag`` image name.

    Attributes:
        repository: Repository, including the registry prefix when one is set
        tag: Build identifier
    """

    repository: str
    tag: str

    def __str__(self) -> str:
        return f"{self.repository}:{self.tag}"

    @property
    def registry_host(self) -> str | None:
        """Registry host embedded in the repository, or None for Docker Hub.

        Follows Docker's rule: the first path component is a host only if it
        contains a dot or a port, or is ``localhost``.
        """
        first, sep, _ = self.repository.partition("/")
        if not sep:
            return None
        if "." in first or ":" in first or first == "localhost":
            return first
        return None


def build_identifier(
    now: datetime | None = None,
    constants: PipelineConstants = DEFAULT_CONSTANTS,
) -> str:
    """Format a timestamp as a build identifier.

    Example:
        >>> build_identifier(datetime(2024, 1, 1, 0, 0, 0))
        '20240101-000000'
    """
    return (now or datetime.now()).strftime(constants.IMAGE_TAG_FORMAT)


def repository_name(settings: PipelineSettings) -> str:
    """Full repository name, prefixed with the configured registry."""
    if settings.registry:
        return f"{settings.registry.rstrip('/')}/{settings.image_repository}"
    return settings.image_repository


class ImageBuilder:
    """Builds the application image from the repository root."""

    def __init__(
        self,
        commands: ShellCommands,
        settings: PipelineSettings,
        paths: PipelinePaths,
        console: ConsoleLike | None = None,
        constants: PipelineConstants | None = None,
    ) -> None:
        """Initialize the image builder.

        Args:
            commands: Shell command executor
            settings: Pipeline settings (repository name, registry)
            paths: Pipeline paths (build context)
            console: Console for output
            constants: Optional constants (uses defaults if not provided)
        """
        self.commands = commands
        self.settings = settings
        self.paths = paths
        self.console = coalesce_console(console)
        self.constants = constants or DEFAULT_CONSTANTS

    def reference_for(self, now: datetime | None = None) -> ImageReference:
        """Compute the image reference for a build started at ``now``."""
        return ImageReference(
            repository=repository_name(self.settings),
            tag=build_identifier(now, self.constants),
        )

    def build(self, now: datetime | None = None) -> ImageReference:
        """Build the image and return its reference.

        Args:
            now: Build start time (defaults to the current time)

        Returns:
            The reference the image was tagged with

        Raises:
            ImageBuildError: If the build tool exits non-zero
        """
        image = self.reference_for(now)
        context_dir = self.paths.build_context
        self.console.info(f"Building image [bold]{image}[/bold] from {context_dir}")

        result = self.commands.docker.build_image(
            str(image),
            context_dir,
            on_output=lambda line: self.console.print(f"[dim]{escape(line)}[/dim]"),
        )
        if not result.success:
            raise ImageBuildError(
                f"Image build failed (exit code {result.returncode})",
                details=result.tail() or None,
            )

        logger.info("Built image {}", image)
        self.console.ok(f"Image built: {image}")
        return image
