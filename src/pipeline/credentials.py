"""Scoped secrets for the registry and the cluster.

Both credential types are injected through the environment by the CI
executor. They are held as ``SecretStr`` so they never show up in reprs or
log lines, and the cluster credential is only materialized on disk for the
duration of a ``with`` block.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, SecretStr

from .errors import AuthenticationError

REGISTRY_USERNAME_ENV = "REGISTRY_USERNAME"
REGISTRY_PASSWORD_ENV = "REGISTRY_PASSWORD"
KUBECONFIG_FILE_ENV = "KUBECONFIG_FILE"
KUBECONFIG_CONTENT_ENV = "KUBECONFIG_CONTENT"


class RegistryCredentials(BaseModel):
    """Username/password pair for ``docker login``."""

    username: str
    password: SecretStr

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RegistryCredentials:
        """Read registry credentials from the environment.

        Raises:
            AuthenticationError: If either variable is unset or empty
        """
        env = os.environ if environ is None else environ
        username = env.get(REGISTRY_USERNAME_ENV, "")
        password = env.get(REGISTRY_PASSWORD_ENV, "")
        if not username or not password:
            raise AuthenticationError(
                "Registry credentials not provided",
                details=(
                    f"Set {REGISTRY_USERNAME_ENV} and {REGISTRY_PASSWORD_ENV} "
                    "in the job environment (e.g. from a CI secret binding)."
                ),
            )
        return cls(username=username, password=SecretStr(password))


class ClusterCredentials(BaseModel):
    """Cluster access credential: a kubeconfig path or inline kubeconfig."""

    kubeconfig_file: Path | None = None
    kubeconfig_content: SecretStr | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClusterCredentials:
        """Read the cluster credential from the environment.

        ``KUBECONFIG_FILE`` takes precedence over ``KUBECONFIG_CONTENT``.

        Raises:
            AuthenticationError: If neither variable is set
        """
        env = os.environ if environ is None else environ
        file_value = env.get(KUBECONFIG_FILE_ENV, "")
        content_value = env.get(KUBECONFIG_CONTENT_ENV, "")
        if file_value:
            return cls(kubeconfig_file=Path(file_value))
        if content_value:
            return cls(kubeconfig_content=SecretStr(content_value))
        raise AuthenticationError(
            "Cluster credentials not provided",
            details=(
                f"Set {KUBECONFIG_FILE_ENV} to a kubeconfig path or "
                f"{KUBECONFIG_CONTENT_ENV} to its contents."
            ),
        )

    @contextmanager
    def kubeconfig(self) -> Iterator[Path]:
        """Yield a kubeconfig path valid only inside the block.

        Inline content is written to a private temporary file that is
        removed on exit, whatever the outcome of the block.

        Raises:
            AuthenticationError: If a kubeconfig file path does not exist
        """
        if self.kubeconfig_file is not None:
            if not self.kubeconfig_file.is_file():
                raise AuthenticationError(
                    f"Kubeconfig file not found: {self.kubeconfig_file}"
                )
            yield self.kubeconfig_file
            return

        if self.kubeconfig_content is None:
            raise AuthenticationError("Cluster credentials not provided")

        fd, name = tempfile.mkstemp(prefix="kubeconfig-", suffix=".yaml")
        path = Path(name)
        try:
            with os.fdopen(fd, "w") as handle:
                handle.write(self.kubeconfig_content.get_secret_value())
            path.chmod(0o600)
            logger.debug("Wrote transient kubeconfig to {}", path)
            yield path
        finally:
            path.unlink(missing_ok=True)
