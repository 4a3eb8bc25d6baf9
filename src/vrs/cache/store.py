"""Filesystem cache of transcoded outputs.

One MP4 per source, named by the md5 of the source path string. The file's
existence is the cache record; there is no index.
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from vrs.core.errors import CacheIOError

logger = logging.getLogger(__name__)

CACHE_SUFFIX = ".mp4"


def cache_key(source: Path | str) -> str:
    """Cache file name for a source path.

    Depends only on the path string, never on file contents, so callers
    should pass absolute paths.
    """
    digest = hashlib.md5(  # nosec B324 - naming only, not security
        str(source).encode("utf-8"), usedforsecurity=False
    ).hexdigest()
    return f"{digest}{CACHE_SUFFIX}"


@dataclass
class CleanupResult:
    """Outcome of one cleanup pass."""

    removed: list[Path] = field(default_factory=list)
    errors: list[CacheIOError] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "removed": len(self.removed),
            "errors": len(self.errors),
            "removed_files": [path.name for path in self.removed],
        }


class TranscodeCache:
    """Deterministic output locations under a cache root."""

    def __init__(self, root: Path) -> None:
        """Initialize the cache, creating root if needed.

        Raises:
            CacheIOError: If root cannot be created.
        """
        self.root = root.expanduser()
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheIOError(str(self.root), f"cannot create cache root: {e}") from e

    def resolve(self, source: Path | str) -> Path:
        """Output path for a source, whether or not it exists yet."""
        return self.root / cache_key(source)

    def has(self, source: Path | str) -> bool:
        return self.resolve(source).is_file()

    def entries(self) -> list[Path]:
        """Cached files directly under root."""
        if not self.root.is_dir():
            return []
        return sorted(p for p in self.root.iterdir() if p.is_file())

    def cleanup(self, max_age_hours: float = 24) -> CleanupResult:
        """Delete cache entries at least max_age_hours old by mtime.

        Entries that cannot be inspected or deleted are logged and skipped.

        Args:
            max_age_hours: Age threshold; 0 removes everything.

        Returns:
            CleanupResult listing removed paths and per-entry errors.
        """
        result = CleanupResult()
        if not self.root.is_dir():
            return result

        now = time.time()
        max_age_seconds = max_age_hours * 3600

        for entry in self.root.iterdir():
            try:
                if not entry.is_file():
                    continue
                age = now - entry.stat().st_mtime
                if age >= max_age_seconds:
                    entry.unlink()
                    result.removed.append(entry)
                    logger.info("Removed cached output: %s", entry.name)
            except OSError as e:
                error = CacheIOError(str(entry), str(e))
                result.errors.append(error)
                logger.warning("Skipping cache entry: %s", error)

        if result.removed or result.errors:
            logger.info(
                "Cache cleanup removed %d file(s), %d error(s)",
                len(result.removed),
                len(result.errors),
                extra={"cache_root": str(self.root), "max_age_hours": max_age_hours},
            )
        return result
