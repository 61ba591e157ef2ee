"""Data types for shell command results.

This module contains the dataclasses shared by the shell command modules.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["CommandResult"]


@dataclass
class CommandResult:
    """Result of a command execution.

    Attributes:
        success: Whether the command exited with code 0 (and did not time out)
        stdout: Captured standard output
        stderr: Captured standard error
        returncode: Process exit code (-1 when the command timed out)
        timed_out: Whether the command was killed after exceeding its timeout
    """

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0
    timed_out: bool = False

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stripped."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part).strip()

    def tail(self, lines: int = 20) -> str:
        """Return the last ``lines`` lines of combined output."""
        return "\n".join(self.output.splitlines()[-lines:])
