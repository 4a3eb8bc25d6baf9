"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data into VRS stream types.
All functions are pure (no I/O, no side effects) for easy testing.
"""

import logging
from typing import Any

from vrs.introspector.types import CodecType, MediaStreamInfo, StreamDescriptor

logger = logging.getLogger(__name__)

FFPROBE_CODEC_TYPES: dict[str, CodecType] = {
    "video": CodecType.VIDEO,
    "audio": CodecType.AUDIO,
}


def map_codec_type(codec_type: str | None) -> CodecType:
    """Map ffprobe codec_type to CodecType; anything else is OTHER."""
    return FFPROBE_CODEC_TYPES.get(codec_type or "", CodecType.OTHER)


def parse_duration(value: Any) -> float | None:
    """Parse duration string from ffprobe into seconds, or None."""
    if value is None:
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def parse_stream(stream: dict, position: int = 0) -> StreamDescriptor:
    """Parse a single ffprobe stream dict into a StreamDescriptor.

    Args:
        stream: Stream dictionary from ffprobe JSON.
        position: Fallback index when the stream dict has none.

    Returns:
        StreamDescriptor with the raw dict attached.
    """
    disposition = stream.get("disposition") or {}
    index = stream.get("index")
    return StreamDescriptor(
        index=index if isinstance(index, int) else position,
        codec_type=map_codec_type(stream.get("codec_type")),
        codec_name=stream.get("codec_name"),
        profile=stream.get("profile"),
        level=stream.get("level"),
        width=_positive_int(stream.get("width")),
        height=_positive_int(stream.get("height")),
        is_attached_pic=disposition.get("attached_pic", 0) == 1,
        raw=stream,
    )


def parse_ffprobe_output(data: dict) -> MediaStreamInfo:
    """Convert parsed ffprobe JSON into MediaStreamInfo.

    Streams that are not dicts are skipped with a warning rather than
    failing the whole probe.
    """
    fmt = data.get("format") or {}
    streams: list[StreamDescriptor] = []
    for position, stream in enumerate(data.get("streams") or []):
        if not isinstance(stream, dict):
            logger.warning("Skipping malformed ffprobe stream entry %d", position)
            continue
        streams.append(parse_stream(stream, position))

    return MediaStreamInfo(
        streams=tuple(streams),
        format_name=fmt.get("format_name"),
        duration_seconds=parse_duration(fmt.get("duration")),
        raw_format=fmt,
    )
