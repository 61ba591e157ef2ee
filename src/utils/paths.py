from pathlib import Path

# Files that mark the root of the repository being shipped
ROOT_MARKERS = ("Dockerfile", "deployment.yaml", ".git")


def get_project_root(start: Path | None = None) -> Path:
    """Get the root of the repository the pipeline operates on.

    Walks up from ``start`` (default: the current working directory) to
    the first directory containing a Dockerfile, the manifest template, or
    a .git directory.

    Returns:
        Path to the project root directory, or ``start`` itself if no
        marker is found
    """
    current = (start or Path.cwd()).resolve()

    for parent in [current, *current.parents]:
        if any((parent / marker).exists() for marker in ROOT_MARKERS):
            return parent

    return current
