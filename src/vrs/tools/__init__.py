"""External tool detection for ffmpeg and ffprobe."""

from vrs.tools.detection import (
    find_tool,
    is_ffmpeg_available,
    is_tool_available,
)

__all__ = [
    "find_tool",
    "is_ffmpeg_available",
    "is_tool_available",
]
