"""External tool detection.

Resolves ffmpeg/ffprobe executables from configured paths or PATH and
checks that they actually run.
"""

import logging
import shutil
import subprocess  # nosec B404 - subprocess is required for tool detection
from pathlib import Path

from vrs.core.subprocess_utils import run_command

logger = logging.getLogger(__name__)

# Timeout for version detection commands (seconds)
DETECTION_TIMEOUT = 10


def find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.

    Returns:
        Path to tool executable, or None if not found.
    """
    if configured_path:
        if configured_path.is_file():
            return configured_path
        logger.warning(
            "Configured path for %s is not a file: %s", name, configured_path
        )

    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)

    return None


def is_tool_available(name: str, configured_path: Path | None = None) -> bool:
    """Check that a tool exists and `<tool> -version` exits cleanly."""
    path = find_tool(name, configured_path)
    if path is None:
        return False
    try:
        result = run_command([path, "-version"], timeout=DETECTION_TIMEOUT)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("%s -version failed: %s", name, e)
        return False
    return result.ok


def is_ffmpeg_available(configured_path: Path | None = None) -> bool:
    """True if a working ffmpeg is available."""
    return is_tool_available("ffmpeg", configured_path)
