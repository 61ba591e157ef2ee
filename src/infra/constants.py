"""Pipeline constants and paths.

This module centralizes the magic strings and fixed locations used
throughout the pipeline. Values an operator may want to change live in
``PipelineSettings`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class PipelineConstants:
    """Constants for the build and deploy pipeline.

    All attributes are class-level and immutable.
    """

    # Image tagging (second granularity, wall clock)
    IMAGE_TAG_FORMAT: str = "%Y%m%d-%H%M%S"

    # Manifest template tokens
    IMAGE_PLACEHOLDER: str = "__IMAGE__"
    NAMESPACE_PLACEHOLDER: str = "__NAMESPACE__"

    # kubectl distribution
    KUBECTL_BINARY: str = "kubectl"
    KUBECTL_DOWNLOAD_URL: str = (
        "https://dl.k8s.io/release/{version}/bin/{os}/{arch}/kubectl"
    )
    SYSTEM_BIN_DIR: str = "/usr/local/bin"
    USER_BIN_DIR: str = ".local/bin"

    # Resources reported after a deployment
    STATUS_RESOURCE_TYPES: str = "deployments,pods,services"

    # Configuration sources
    ENV_FILE: str = ".env"
    CONFIG_FILE: str = "pipeline.yaml"
    ENV_PREFIX: str = "PIPELINE_"

    @property
    def machine_arch_aliases(self) -> dict[str, str]:
        """Map ``platform.machine()`` values to kubectl release arch names."""
        return {
            "x86_64": "amd64",
            "amd64": "amd64",
            "aarch64": "arm64",
            "arm64": "arm64",
        }


DEFAULT_CONSTANTS = PipelineConstants()


class PipelinePaths:
    """Path resolver for pipeline files, derived from the project root."""

    def __init__(
        self,
        project_root: Path,
        *,
        manifest_template: str = "deployment.yaml",
        manifest_output: str = "deployment-resolved.yaml",
    ) -> None:
        """Initialize pipeline paths.

        Args:
            project_root: Path to the project root directory (the build context)
            manifest_template: Template file name, relative to the project root
            manifest_output: Materialized manifest name, written next to the template
        """
        self._project_root = project_root

        self.manifest_template = project_root / manifest_template
        self.manifest_output = self.manifest_template.parent / manifest_output

    @property
    def project_root(self) -> Path:
        """Get path to project root."""
        return self._project_root

    @property
    def build_context(self) -> Path:
        """Directory handed to the container build tool."""
        return self._project_root
