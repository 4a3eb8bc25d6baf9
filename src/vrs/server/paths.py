"""Request path resolution under a served root."""

from pathlib import Path


class PathNotAllowed(Exception):
    """Requested path escapes the served root."""


def resolve_under_root(root: Path, relative: str) -> Path:
    """Join a request path onto root, refusing anything outside it.

    Symlinks are resolved before the check, so a link pointing out of the
    root is refused too.

    Raises:
        PathNotAllowed: If the resolved path is not inside root.
    """
    root = root.resolve()
    candidate = (root / relative.lstrip("/")).resolve()
    if not candidate.is_relative_to(root):
        raise PathNotAllowed(relative)
    return candidate
