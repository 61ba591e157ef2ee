"""Test helpers shared across test modules."""

from __future__ import annotations

from src.pipeline.shell_commands import CommandResult

TEMPLATE = """apiVersion: apps/v1
kind: Deployment
metadata:
  name: app
  namespace: __NAMESPACE__
spec:
  template:
    spec:
      containers:
        - name: app
          image: __IMAGE__
"""


def ok(stdout: str = "") -> CommandResult:
    """Successful command result."""
    return CommandResult(success=True, stdout=stdout)


def failed(stderr: str = "error", returncode: int = 1) -> CommandResult:
    """Failed command result."""
    return CommandResult(success=False, stderr=stderr, returncode=returncode)
