"""Deployment manifest materialization.

The template is treated as plain text: placeholder tokens are replaced
verbatim and the result is not parsed before it is handed to kubectl.
"""

from __future__ import annotations

from pathlib import Path

from src.infra.constants import DEFAULT_CONSTANTS

from .image_builder import ImageReference


def render_manifest(template: str, image: ImageReference | str, namespace: str) -> str:
    """Substitute the image reference and namespace into a template.

    Every occurrence of each token is replaced.

    Example:
        >>> render_manifest("image: __IMAGE__", "repo:20240101-000000", "prod")
        'image: repo:20240101-000000'
    """
    return template.replace(DEFAULT_CONSTANTS.IMAGE_PLACEHOLDER, str(image)).replace(
        DEFAULT_CONSTANTS.NAMESPACE_PLACEHOLDER, namespace
    )


def materialize_manifest(
    template_path: Path,
    output_path: Path,
    image: ImageReference | str,
    namespace: str,
) -> Path:
    """Render ``template_path`` and write the result to ``output_path``.

    Returns:
        The path written
    """
    rendered = render_manifest(template_path.read_text(), image, namespace)
    output_path.write_text(rendered)
    return output_path
