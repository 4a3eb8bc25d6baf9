"""Formatters for probe results.

Human-readable and JSON renderings of MediaStreamInfo plus its copy
capability, shared by the `probe` and `plan` commands.
"""

import json
from pathlib import Path
from typing import Any

from vrs.introspector.types import CodecType, CopyCapability, MediaStreamInfo, StreamDescriptor

_SECTION_TITLES = {
    CodecType.VIDEO: "Video",
    CodecType.AUDIO: "Audio",
    CodecType.OTHER: "Other",
}


def format_stream_line(stream: StreamDescriptor) -> str:
    """Format a single stream for human output.

    Example: "#0 h264 (High, level 41) 1920x1080"
    """
    parts = [f"#{stream.index}", stream.codec_name or "unknown"]

    details = []
    if stream.profile:
        details.append(stream.profile)
    if stream.level is not None and stream.codec_type == CodecType.VIDEO:
        details.append(f"level {stream.level}")
    if details:
        parts.append(f"({', '.join(details)})")

    if stream.width and stream.height:
        parts.append(f"{stream.width}x{stream.height}")
    if stream.is_attached_pic:
        parts.append("[cover art]")
    return " ".join(parts)


def format_human(
    path: Path, info: MediaStreamInfo, capability: CopyCapability
) -> str:
    """Format a probe result for terminal output."""
    lines = [f"File: {path}"]
    if info.format_name:
        lines.append(f"Container: {info.format_name}")
    if info.duration_seconds is not None:
        lines.append(f"Duration: {info.duration_seconds:.1f}s")
    lines.append("")

    lines.append("Streams:")
    if not info.streams:
        lines.append("  (no streams found)")
    for codec_type, title in _SECTION_TITLES.items():
        streams = [s for s in info.streams if s.codec_type == codec_type]
        if streams:
            lines.append(f"  {title}:")
            lines.extend(f"    {format_stream_line(s)}" for s in streams)

    lines.append("")
    lines.append("Copyable into MP4:")
    lines.append(f"  video: {'yes' if capability.video_copyable else 'no'}")
    lines.append(f"  audio: {'yes' if capability.audio_copyable else 'no'}")
    return "\n".join(lines)


def stream_to_dict(stream: StreamDescriptor) -> dict[str, Any]:
    return {
        "index": stream.index,
        "codec_type": stream.codec_type.value,
        "codec_name": stream.codec_name,
        "profile": stream.profile,
        "level": stream.level,
        "width": stream.width,
        "height": stream.height,
        "attached_pic": stream.is_attached_pic,
    }


def format_json(
    path: Path, info: MediaStreamInfo, capability: CopyCapability
) -> str:
    """Format a probe result as indented JSON."""
    data = {
        "file": str(path),
        "container": info.format_name,
        "duration_seconds": info.duration_seconds,
        "streams": [stream_to_dict(s) for s in info.streams],
        "copy_capability": {
            "video": capability.video_copyable,
            "audio": capability.audio_copyable,
        },
    }
    return json.dumps(data, indent=2)
