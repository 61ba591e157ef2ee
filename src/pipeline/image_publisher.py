"""Image publishing to a container registry."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from loguru import logger

from src.utils.console_like import ConsoleLike, coalesce_console

from .credentials import RegistryCredentials
from .errors import AuthenticationError, ImagePushError

if TYPE_CHECKING:
    from .image_builder import ImageReference
    from .shell_commands import ShellCommands


class ImagePublisher:
    """Pushes a built image inside a short-lived registry session.

    The session is opened with ``docker login`` immediately before the push
    and closed with ``docker logout`` afterwards, even when the push fails.
    """

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike | None = None,
        credentials_loader: Callable[[], RegistryCredentials] = RegistryCredentials.from_env,
    ) -> None:
        """Initialize the publisher.

        Args:
            commands: Shell command executor
            console: Console for output
            credentials_loader: Returns registry credentials when called
        """
        self.commands = commands
        self.console = coalesce_console(console)
        self._credentials_loader = credentials_loader

    def publish(self, image: ImageReference) -> None:
        """Authenticate, push ``image``, then de-authenticate.

        Raises:
            AuthenticationError: If credentials are missing or rejected
            ImagePushError: If the push fails
        """
        credentials = self._credentials_loader()
        registry = image.registry_host
        target = registry or "Docker Hub"

        self.console.info(f"Logging in to {target} as {credentials.username}")
        login = self.commands.docker.login(
            credentials.username,
            credentials.password.get_secret_value(),
            registry,
        )
        if not login.success:
            raise AuthenticationError(
                f"Registry login to {target} failed",
                details=login.tail() or None,
            )

        try:
            self.console.info(f"Pushing {image}")
            push = self.commands.docker.push_image(str(image))
            if not push.success:
                raise ImagePushError(
                    f"Failed to push {image}",
                    details=push.tail() or None,
                )
            self.console.ok(f"Image pushed: {image}")
        finally:
            logout = self.commands.docker.logout(registry)
            if not logout.success:
                logger.warning("docker logout from {} failed: {}", target, logout.tail())
