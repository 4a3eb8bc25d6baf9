"""StreamInspector interface for media stream probing."""

from pathlib import Path
from typing import Protocol

from vrs.core.errors import ProbeError
from vrs.introspector.types import MediaStreamInfo

__all__ = ["ProbeError", "StreamInspector"]


class StreamInspector(Protocol):
    """Protocol for stream inspection implementations.

    Implementations spawn a read-only inspection of the file and return
    its stream list. They do not retry.
    """

    def probe(self, path: Path) -> MediaStreamInfo:
        """Inspect a media file.

        Args:
            path: Path to the media file.

        Returns:
            MediaStreamInfo with the file's streams in order.

        Raises:
            ProbeError: If the file cannot be inspected.
        """
        ...
