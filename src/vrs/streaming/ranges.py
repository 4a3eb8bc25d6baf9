"""HTTP byte-range resolution.

Turns a file size and an optional ``Range`` header into either a bounded
window (206) or the whole file (200). Anything else is a 416.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from vrs.config.models import DEFAULT_CHUNK_TIERS, MIB, ChunkTier
from vrs.core.errors import RangeNotSatisfiableError

# bytes=<start>-<end>? ; one range only
_RANGE_RE = re.compile(r"^\s*bytes\s*=\s*(\d+)\s*-\s*(\d*)\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class RangeWindow:
    """Inclusive byte window of a file: 0 <= start <= end < total_size."""

    start: int
    end: int
    total_size: int

    status = 206

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.total_size}"

    def headers(self) -> dict[str, str]:
        return {
            "Content-Range": self.content_range,
            "Content-Length": str(self.length),
            "Accept-Ranges": "bytes",
        }


@dataclass(frozen=True)
class FullFile:
    """The whole file, served when no range was requested."""

    total_size: int

    status = 200

    @property
    def start(self) -> int:
        return 0

    @property
    def end(self) -> int:
        return self.total_size - 1

    @property
    def length(self) -> int:
        return self.total_size

    def headers(self) -> dict[str, str]:
        return {
            "Content-Length": str(self.total_size),
            "Accept-Ranges": "bytes",
        }


def chunk_size_for(
    file_size: int,
    tiers: Sequence[ChunkTier] = DEFAULT_CHUNK_TIERS,
    default_chunk_size: int = MIB,
) -> int:
    """Pick the chunk size for a file from the size tiers.

    The first tier (largest threshold) the file exceeds wins; smaller files
    get default_chunk_size.
    """
    for tier in sorted(tiers, key=lambda t: t.min_file_size, reverse=True):
        if file_size > tier.min_file_size:
            return tier.chunk_size
    return default_chunk_size


def resolve_range(
    range_header: str | None,
    file_size: int,
    tiers: Sequence[ChunkTier] = DEFAULT_CHUNK_TIERS,
    default_chunk_size: int = MIB,
) -> RangeWindow | FullFile:
    """Resolve a Range header against a file size.

    An open-ended range (``bytes=100-``) is capped at one chunk so players
    fetch large files progressively instead of in one response.

    Args:
        range_header: Raw header value, or None/empty if absent.
        file_size: Size of the file in bytes.
        tiers: Chunk size tiers.
        default_chunk_size: Chunk size below every tier.

    Returns:
        RangeWindow for a satisfiable range, FullFile when no range was asked.

    Raises:
        RangeNotSatisfiableError: Malformed header, suffix or multi-part
            ranges, or a window outside the file.
    """
    if not range_header:
        return FullFile(total_size=file_size)

    match = _RANGE_RE.match(range_header)
    if match is None:
        raise RangeNotSatisfiableError(range_header, file_size, "malformed")

    start = int(match.group(1))
    if start >= file_size:
        raise RangeNotSatisfiableError(range_header, file_size, "start beyond end of file")

    if match.group(2):
        end = int(match.group(2))
    else:
        chunk = chunk_size_for(file_size, tiers, default_chunk_size)
        end = min(start + chunk - 1, file_size - 1)

    if end >= file_size:
        raise RangeNotSatisfiableError(range_header, file_size, "end beyond end of file")
    if start > end:
        raise RangeNotSatisfiableError(range_header, file_size, "start after end")

    return RangeWindow(start=start, end=end, total_size=file_size)
