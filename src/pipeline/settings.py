"""Pipeline configuration loading.

Settings are resolved in this order, later sources winning:

1. Field defaults on ``PipelineSettings``
2. The ``config:`` section of ``pipeline.yaml`` (optional)
3. ``PIPELINE_*`` environment variables (``.env`` is loaded first, without
   overriding variables already set in the process)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.infra.constants import DEFAULT_CONSTANTS


class PipelineSettings(BaseModel):
    """Operator-tunable pipeline settings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    image_repository: str = Field(default="app", min_length=1)
    registry: str | None = Field(
        default=None, description="Registry host/prefix, e.g. ghcr.io/acme"
    )
    namespace: str = Field(default="default", min_length=1)
    deployment_name: str = Field(default="app", min_length=1)
    app_port: int = Field(default=8080, gt=0, lt=65536)
    kubectl_version: str = Field(default="v1.30.2", pattern=r"^v\d+\.\d+\.\d+$")
    cluster_probe_timeout: int = Field(default=30, gt=0)
    rollout_timeout: int = Field(default=300, gt=0)
    manifest_template: str = "deployment.yaml"
    manifest_output: str = "deployment-resolved.yaml"


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        loaded = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML in {path}: {e}") from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict) or "config" not in loaded:
        raise ValueError(f"Invalid YAML structure in {path}: missing 'config' key")
    section = loaded["config"] or {}
    if not isinstance(section, dict):
        raise ValueError(f"Invalid YAML structure in {path}: 'config' must be a mapping")
    return section


def _env_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    prefix = DEFAULT_CONSTANTS.ENV_PREFIX
    overrides: dict[str, str] = {}
    for field_name in PipelineSettings.model_fields:
        value = environ.get(f"{prefix}{field_name.upper()}")
        if value is not None and value != "":
            overrides[field_name] = value
    return overrides


def load_settings(
    project_root: Path,
    config_file: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> PipelineSettings:
    """Load and validate pipeline settings.

    Args:
        project_root: Project root; ``.env`` and ``pipeline.yaml`` are looked up here
        config_file: Explicit YAML config path. Unlike the default path, it must exist.
        environ: Environment mapping (defaults to os.environ after loading .env)

    Returns:
        Validated PipelineSettings

    Raises:
        FileNotFoundError: If an explicit config_file does not exist
        ValueError: If the YAML is malformed or a value fails validation
    """
    load_dotenv(project_root / DEFAULT_CONSTANTS.ENV_FILE, override=False)
    env = os.environ if environ is None else environ

    data: dict[str, Any] = {}
    if config_file is not None:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        path: Path | None = config_file
    else:
        default_path = project_root / DEFAULT_CONSTANTS.CONFIG_FILE
        path = default_path if default_path.exists() else None

    if path is not None:
        logger.info("Loading pipeline configuration from {}", path)
        data.update(_read_config_file(path))

    overrides = _env_overrides(env)
    if overrides:
        logger.debug("Environment overrides: {}", sorted(overrides))
    data.update(overrides)

    try:
        return PipelineSettings.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid pipeline configuration: {e}") from e
