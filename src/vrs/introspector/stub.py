"""In-memory StreamInspector for development and testing."""

from __future__ import annotations

from pathlib import Path

from vrs.core.errors import ProbeError
from vrs.introspector.types import MediaStreamInfo


class StubInspector:
    """Returns canned MediaStreamInfo per path.

    Paths without a registered result raise ProbeError, which lets tests
    exercise the planner's fallback without spawning ffprobe.
    """

    def __init__(
        self,
        results: dict[Path, MediaStreamInfo] | None = None,
        default: MediaStreamInfo | None = None,
    ) -> None:
        self._results = {Path(p): info for p, info in (results or {}).items()}
        self._default = default
        self.calls: list[Path] = []

    def add(self, path: Path, info: MediaStreamInfo) -> None:
        self._results[Path(path)] = info

    def probe(self, path: Path) -> MediaStreamInfo:
        self.calls.append(path)
        info = self._results.get(Path(path), self._default)
        if info is None:
            raise ProbeError(f"No stub result for {path}", path=str(path))
        return info
