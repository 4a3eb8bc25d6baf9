"""Data types produced by stream inspection."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CodecType(str, Enum):
    """Kind of elementary stream."""

    VIDEO = "video"
    AUDIO = "audio"
    OTHER = "other"


@dataclass(frozen=True)
class StreamDescriptor:
    """One elementary stream as reported by the prober."""

    index: int
    codec_type: CodecType
    codec_name: str | None = None
    profile: str | None = None
    level: str | int | float | None = None
    """Level exactly as reported; see vrs.core.codecs.parse_level."""
    width: int | None = None
    height: int | None = None
    is_attached_pic: bool = False
    """Cover art is exposed by ffprobe as a video stream."""
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class MediaStreamInfo:
    """Result of probing a media file."""

    streams: tuple[StreamDescriptor, ...] = ()
    format_name: str | None = None
    duration_seconds: float | None = None
    raw_format: Mapping[str, Any] = field(
        default_factory=dict, compare=False, repr=False
    )

    @property
    def video_streams(self) -> list[StreamDescriptor]:
        return [s for s in self.streams if s.codec_type == CodecType.VIDEO]

    @property
    def audio_streams(self) -> list[StreamDescriptor]:
        return [s for s in self.streams if s.codec_type == CodecType.AUDIO]

    @property
    def primary_video(self) -> StreamDescriptor | None:
        """First real video stream, skipping embedded cover art."""
        for stream in self.video_streams:
            if not stream.is_attached_pic:
                return stream
        return None


@dataclass(frozen=True)
class CopyCapability:
    """Whether each stream kind can be copied into MP4 without re-encoding."""

    video_copyable: bool = False
    audio_copyable: bool = False

    @property
    def all_copyable(self) -> bool:
        return self.video_copyable and self.audio_copyable
