"""FFprobe-based implementation of the StreamInspector protocol."""

import json
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from vrs.core.errors import ProbeError
from vrs.core.subprocess_utils import run_command
from vrs.introspector.parsers import parse_ffprobe_output
from vrs.introspector.types import MediaStreamInfo
from vrs.tools.detection import find_tool

DEFAULT_PROBE_TIMEOUT = 60


class FFprobeInspector:
    """ffprobe-based implementation of StreamInspector.

    The ffprobe executable is resolved lazily so constructing an inspector
    never fails; a missing binary surfaces as ProbeError on first use.
    """

    def __init__(
        self,
        ffprobe_path: Path | None = None,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        """Initialize the inspector.

        Args:
            ffprobe_path: Optional explicit path to ffprobe; PATH otherwise.
            timeout: Seconds before a probe is abandoned.
        """
        self._configured_path = ffprobe_path
        self._ffprobe_path: Path | None = None
        self._timeout = timeout

    @property
    def ffprobe_path(self) -> Path:
        if self._ffprobe_path is None:
            path = find_tool("ffprobe", self._configured_path)
            if path is None:
                raise ProbeError(
                    "ffprobe is not installed or not in PATH. Install ffmpeg or "
                    "set VRS_FFPROBE_PATH."
                )
            self._ffprobe_path = path
        return self._ffprobe_path

    def build_command(self, path: Path) -> list[str]:
        return [
            str(self.ffprobe_path),
            "-v",
            "error",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]

    def probe(self, path: Path) -> MediaStreamInfo:
        """Inspect a media file with ffprobe.

        Raises:
            ProbeError: If ffprobe is missing, times out, exits non-zero, or
                prints something other than a JSON object with a stream list.
        """
        if not path.exists():
            raise ProbeError(f"File not found: {path}", path=str(path))

        try:
            result = run_command(self.build_command(path), timeout=self._timeout)
        except subprocess.TimeoutExpired as e:
            raise ProbeError(
                f"ffprobe timed out for {path} after {e.timeout}s", path=str(path)
            ) from e
        except OSError as e:
            raise ProbeError(f"Could not run ffprobe: {e}", path=str(path)) from e

        if not result.ok:
            raise ProbeError(
                f"ffprobe failed for {path} with code {result.returncode}",
                path=str(path),
                diagnostics=result.stderr,
            )

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ProbeError(
                f"Invalid ffprobe output for {path}: {e}",
                path=str(path),
                diagnostics=result.stderr,
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("streams"), list):
            raise ProbeError(
                f"Missing 'streams' in ffprobe output for {path}. "
                "File may be corrupted or not a valid media file.",
                path=str(path),
                diagnostics=result.stderr,
            )

        return parse_ffprobe_output(data)
