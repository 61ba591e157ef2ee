"""CLI command modules.

Commands:
- run: Full build, publish and deploy recipe
- ensure-kubectl: Tool provisioning only
- render: Manifest materialization only
- status: Resource listing for a namespace
"""

from .pipeline import ensure_kubectl, render, run, status

__all__ = [
    "run",
    "ensure_kubectl",
    "render",
    "status",
]
