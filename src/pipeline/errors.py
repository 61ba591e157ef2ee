"""Pipeline error taxonomy.

Every stage failure is raised as a ``PipelineError`` subclass carrying a
short message and optional operator-facing details. The CLI renders
``details`` in a panel below the message.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Raised when a pipeline operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class MissingDependencyError(PipelineError):
    """A required host tool is absent and could not be installed."""


class ManifestMissingError(PipelineError):
    """The deployment manifest template does not exist."""


class AuthenticationError(PipelineError):
    """Registry or cluster credentials were missing or rejected."""


class ClusterUnreachableError(PipelineError):
    """The cluster did not answer the reachability probe in time.

    The deployment applier downgrades this to a degraded run; it never
    ends a run as a failure.
    """


class ImageBuildError(PipelineError):
    """The container build tool exited non-zero."""


class ImagePushError(PipelineError):
    """The image could not be pushed to the registry."""


class ManifestApplyError(PipelineError):
    """``kubectl apply`` rejected the materialized manifest."""


class ReadinessTimeoutError(PipelineError):
    """The deployment did not become available within the rollout timeout."""
