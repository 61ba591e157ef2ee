"""Host tool commands.

Lookups and downloads used to provision command-line tools on the
execution host.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class ToolCommands:
    """Commands for locating and fetching host binaries."""

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def which(self, name: str) -> Path | None:
        """Resolve an executable on PATH."""
        found = shutil.which(name)
        return Path(found) if found else None

    def download(self, url: str, destination: Path) -> CommandResult:
        """Download ``url`` to ``destination`` with curl.

        Fails on HTTP errors rather than saving the error page.
        """
        return self._runner.run(
            ["curl", "-fsSL", "--retry", "0", "-o", str(destination), url],
            cwd=destination.parent,
        )
