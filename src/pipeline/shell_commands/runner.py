"""Command runner for executing shell commands.

This module provides the base command execution functionality used by
all specialized command modules.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from loguru import logger

from .types import CommandResult


class CommandRunner:
    """Low-level command executor with consistent result handling.

    This class provides the foundation for executing shell commands with
    proper output capture, timeouts, and streaming support.

    All specialized command modules (Docker, kubectl, tools) use this runner
    for actual command execution.
    """

    def __init__(self, project_root: Path) -> None:
        """Initialize the command runner.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
        """
        self.project_root = project_root

    def _build_env(self, env: Mapping[str, str] | None) -> dict[str, str] | None:
        if not env:
            return None
        merged = os.environ.copy()
        merged.update(env)
        return merged

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = True,
        input_data: str | None = None,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute a shell command and return structured result.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to project_root)
            capture_output: Whether to capture stdout/stderr
            input_data: Optional text sent to the process on stdin
            env: Extra environment variables layered over os.environ
            timeout: Seconds before the process is killed

        Returns:
            CommandResult with success status, output, and return code.
            A missing executable is reported as returncode 127.
        """
        logger.debug("Executing: {}", " ".join(cmd))
        try:
            result = subprocess.run(
                list(cmd),
                cwd=cwd or self.project_root,
                capture_output=capture_output,
                encoding="utf-8",
                errors="replace",
                input=input_data,
                env=self._build_env(env),
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning("Command timed out after {}s: {}", timeout, cmd[0])
            return CommandResult(
                success=False,
                stdout=_decode(exc.stdout),
                stderr=_decode(exc.stderr),
                returncode=-1,
                timed_out=True,
            )
        except FileNotFoundError:
            logger.warning("Command not found: {}", cmd[0])
            return CommandResult(
                success=False,
                stderr=f"{cmd[0]}: command not found",
                returncode=127,
            )

        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )

    def run_streaming(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Execute a shell command with real-time output streaming.

        This method runs a command and calls the on_output callback for each
        line of output, allowing real-time progress display.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to project_root)
            on_output: Callback function called with each line of output.
                      If None, output is collected but not streamed.

        Returns:
            CommandResult with success status, collected output, and return code
        """
        logger.debug("Streaming: {}", " ".join(cmd))
        env = os.environ.copy()
        env["PYTHONUNBUFFERED"] = "1"

        stdout_lines: list[str] = []

        try:
            with subprocess.Popen(
                list(cmd),
                cwd=cwd or self.project_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,  # Merge stderr into stdout
                encoding="utf-8",
                errors="replace",
                bufsize=1,
                env=env,
            ) as process:
                if process.stdout:
                    for line in iter(process.stdout.readline, ""):
                        line = line.rstrip("\n")
                        if line:
                            stdout_lines.append(line)
                            if on_output:
                                on_output(line)
                process.wait()
        except FileNotFoundError:
            logger.warning("Command not found: {}", cmd[0])
            return CommandResult(
                success=False,
                stderr=f"{cmd[0]}: command not found",
                returncode=127,
            )

        return CommandResult(
            success=process.returncode == 0,
            stdout="\n".join(stdout_lines),
            stderr="",  # stderr is merged into stdout
            returncode=process.returncode or 0,
        )


def _decode(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value
