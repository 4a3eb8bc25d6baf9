"""Helpers for deciding whether and how long to transcode."""

from __future__ import annotations

from pathlib import Path

from vrs.core.codecs import NEEDS_TRANSCODE_EXTENSIONS

REFERENCE_WIDTH = 1920
# Rough throughput of a fast x264 encode at 1080p
MB_PER_MINUTE = 60


def needs_transcoding(path: Path | str) -> bool:
    """Check whether a file's container cannot be played by browsers as-is.

    Based only on the extension; use the planner for a stream-level answer.
    """
    return Path(path).suffix.lower() in NEEDS_TRANSCODE_EXTENSIONS


def estimate_transcode_minutes(file_size: int, target_width: int = REFERENCE_WIDTH) -> int:
    """Estimate encode time in whole minutes.

    Widths above 1080p cost proportionally more, doubled for the extra
    motion search at higher resolutions.

    Args:
        file_size: Input size in bytes.
        target_width: Output frame width.

    Returns:
        Estimated minutes, never less than 1.
    """
    size_mb = file_size / (1024 * 1024)
    if target_width <= REFERENCE_WIDTH:
        scale = 1.0
    else:
        scale = (target_width / REFERENCE_WIDTH) * 2
    return max(1, round(size_mb * scale / MB_PER_MINUTE))
