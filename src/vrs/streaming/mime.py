"""Content types for served video files."""

from pathlib import Path

VIDEO_MIME_TYPES: dict[str, str] = {
    ".mp4": "video/mp4",
    ".m4v": "video/mp4",
    ".mkv": "video/x-matroska",
    ".webm": "video/webm",
    ".avi": "video/x-msvideo",
    ".mov": "video/quicktime",
    ".wmv": "video/x-ms-wmv",
    ".flv": "video/x-flv",
    ".ts": "video/mp2t",
    ".m2ts": "video/mp2t",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


def content_type_for(path: Path) -> str:
    return VIDEO_MIME_TYPES.get(path.suffix.lower(), DEFAULT_MIME_TYPE)
