"""Host tool provisioning.

Makes sure a ``kubectl`` client is on PATH before any cluster work starts.
When it is missing, a version-pinned release binary is downloaded from the
upstream distribution point and installed into the first writable bin
directory.
"""

from __future__ import annotations

import os
import platform
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from src.infra.constants import DEFAULT_CONSTANTS, PipelineConstants
from src.utils.console_like import ConsoleLike, coalesce_console

from .errors import MissingDependencyError

if TYPE_CHECKING:
    from .settings import PipelineSettings
    from .shell_commands import ShellCommands


class ToolProvisioner:
    """Ensures the Kubernetes CLI is available on the execution host."""

    def __init__(
        self,
        commands: ShellCommands,
        settings: PipelineSettings,
        console: ConsoleLike | None = None,
        constants: PipelineConstants | None = None,
        *,
        system_bin_dir: Path | None = None,
        home: Path | None = None,
    ) -> None:
        """Initialize the provisioner.

        Args:
            commands: Shell command executor
            settings: Pipeline settings (pinned kubectl version)
            console: Console for output
            constants: Optional constants (uses defaults if not provided)
            system_bin_dir: Preferred install directory (default /usr/local/bin)
            home: Home directory for the unprivileged fallback (default ~)
        """
        self.commands = commands
        self.settings = settings
        self.console = coalesce_console(console)
        self.constants = constants or DEFAULT_CONSTANTS
        self.system_bin_dir = system_bin_dir or Path(self.constants.SYSTEM_BIN_DIR)
        self.home = home or Path.home()

    def ensure_kubectl(self) -> Path:
        """Return the kubectl path, installing the binary if it is absent.

        Raises:
            MissingDependencyError: If the download or install fails
        """
        existing = self.commands.tools.which(self.constants.KUBECTL_BINARY)
        if existing is not None:
            version = self.commands.kubectl.client_version()
            if version.success:
                first_line = version.stdout.strip().splitlines()[:1]
                self.console.ok(
                    f"kubectl found at {existing}"
                    + (f" ({first_line[0]})" if first_line else "")
                )
            else:
                self.console.warn(f"kubectl found at {existing} but version check failed")
            return existing

        self.console.warn("kubectl not found on PATH, installing")
        return self._install_kubectl()

    def download_url(self) -> str:
        """Release URL for this host's platform and the pinned version.

        Raises:
            MissingDependencyError: If the platform has no kubectl release
        """
        os_name = platform.system().lower()
        machine = platform.machine().lower()
        arch = self.constants.machine_arch_aliases.get(machine)
        if os_name not in ("linux", "darwin") or arch is None:
            raise MissingDependencyError(
                f"No kubectl release for platform {os_name}/{machine}",
                details="Install kubectl manually and make sure it is on PATH.",
            )
        return self.constants.KUBECTL_DOWNLOAD_URL.format(
            version=self.settings.kubectl_version, os=os_name, arch=arch
        )

    def _install_kubectl(self) -> Path:
        url = self.download_url()
        binary = self.constants.KUBECTL_BINARY

        with tempfile.TemporaryDirectory(prefix="kubectl-") as tmp:
            staged = Path(tmp) / binary
            self.console.info(f"Downloading {url}")
            result = self.commands.tools.download(url, staged)
            if not result.success:
                raise MissingDependencyError(
                    "Failed to download kubectl",
                    details=f"URL: {url}\n{result.tail()}".strip(),
                )
            staged.chmod(0o755)

            install_dir = self._install_dir()
            target = install_dir / binary
            try:
                shutil.move(str(staged), target)
            except OSError as e:
                raise MissingDependencyError(
                    f"Could not install kubectl into {install_dir}", details=str(e)
                ) from e

        self._ensure_on_path(install_dir)
        logger.info("Installed kubectl {} to {}", self.settings.kubectl_version, target)
        self.console.ok(f"kubectl {self.settings.kubectl_version} installed to {target}")
        return target

    def _install_dir(self) -> Path:
        """Pick the system bin dir when writable, else the per-user one."""
        if self.system_bin_dir.is_dir() and os.access(self.system_bin_dir, os.W_OK):
            return self.system_bin_dir

        user_bin = self.home / self.constants.USER_BIN_DIR
        logger.debug(
            "{} is not writable, falling back to {}", self.system_bin_dir, user_bin
        )
        try:
            user_bin.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MissingDependencyError(
                f"Could not create {user_bin}", details=str(e)
            ) from e
        return user_bin

    @staticmethod
    def _ensure_on_path(directory: Path) -> None:
        current = os.environ.get("PATH", "")
        if str(directory) not in current.split(os.pathsep):
            os.environ["PATH"] = (
                f"{directory}{os.pathsep}{current}" if current else str(directory)
            )
