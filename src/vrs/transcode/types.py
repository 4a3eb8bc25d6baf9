"""Transcode data types.

Options supplied by callers, per-stream actions, and the immutable plan
the job manager turns into an ffmpeg command line.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from vrs.core.codecs import (
    DEFAULT_AUDIO_ENCODER,
    DEFAULT_PIXEL_FORMAT,
    DEFAULT_VIDEO_ENCODER,
    DEFAULT_VIDEO_LEVEL,
    DEFAULT_VIDEO_PROFILE,
    X264_PRESETS,
)


@dataclass(frozen=True)
class TranscodeOptions:
    """Per-call overrides for planning and encoding.

    None means "use the configured default".
    """

    force_encode: bool = False
    """Re-encode both streams even when they could be copied."""

    max_width: int | None = None
    """Scale video down to at most this width; forces a video encode."""

    preset: str | None = None
    crf: int | None = None
    audio_bitrate: str | None = None

    allow_hevc_copy: bool = False
    """Treat HEVC video as copyable. Off by default."""

    def __post_init__(self) -> None:
        """Validate options."""
        if self.max_width is not None and self.max_width <= 0:
            raise ValueError(f"max_width must be positive, got {self.max_width}")
        if self.preset is not None and self.preset not in X264_PRESETS:
            raise ValueError(f"preset must be one of {X264_PRESETS}, got {self.preset}")
        if self.crf is not None and not 0 <= self.crf <= 51:
            raise ValueError(f"crf must be 0-51, got {self.crf}")

    def merged_with(self, overrides: TranscodeOptions) -> TranscodeOptions:
        """Return a copy where every non-default field of overrides wins."""
        changes = {
            name: value
            for name, value in (
                ("force_encode", overrides.force_encode or None),
                ("max_width", overrides.max_width),
                ("preset", overrides.preset),
                ("crf", overrides.crf),
                ("audio_bitrate", overrides.audio_bitrate),
                ("allow_hevc_copy", overrides.allow_hevc_copy or None),
            )
            if value is not None
        }
        return replace(self, **changes)


class PlanKind(str, Enum):
    """Processing path chosen for a file, cheapest first."""

    FAST_REMUX = "fast_remux"
    SELECTIVE_COPY = "selective_copy"
    FULL_TRANSCODE = "full_transcode"


@dataclass(frozen=True)
class CopyAction:
    """Copy the stream's encoded bytes unchanged."""

    def __str__(self) -> str:
        return "copy"


COPY = CopyAction()


@dataclass(frozen=True)
class VideoEncodeParams:
    """H.264 encode settings for the video stream."""

    preset: str
    crf: int
    max_width: int | None = None
    encoder: str = DEFAULT_VIDEO_ENCODER
    profile: str = DEFAULT_VIDEO_PROFILE
    level: str = DEFAULT_VIDEO_LEVEL
    pix_fmt: str = DEFAULT_PIXEL_FORMAT

    @property
    def scale_filter(self) -> str | None:
        """Width-bounded scale keeping aspect ratio with an even height."""
        if self.max_width is None:
            return None
        return f"scale='min({self.max_width},iw)':-2"

    def __str__(self) -> str:
        scale = f", max_width={self.max_width}" if self.max_width else ""
        return f"{self.encoder} (preset={self.preset}, crf={self.crf}{scale})"


@dataclass(frozen=True)
class AudioEncodeParams:
    """AAC encode settings for the audio stream."""

    bitrate: str
    encoder: str = DEFAULT_AUDIO_ENCODER

    def __str__(self) -> str:
        return f"{self.encoder} ({self.bitrate})"


VideoAction = CopyAction | VideoEncodeParams
AudioAction = CopyAction | AudioEncodeParams


@dataclass(frozen=True)
class TranscodePlan:
    """Decision for one input: how each stream reaches the MP4 output."""

    kind: PlanKind
    video: VideoAction
    audio: AudioAction
    reason: str = ""
    """Short human-readable explanation of the decision."""

    @property
    def copies_video(self) -> bool:
        return isinstance(self.video, CopyAction)

    @property
    def copies_audio(self) -> bool:
        return isinstance(self.audio, CopyAction)

    @classmethod
    def fast_remux(cls, reason: str = "all streams copyable") -> TranscodePlan:
        return cls(PlanKind.FAST_REMUX, COPY, COPY, reason)

    def describe(self) -> str:
        return f"{self.kind.value}: video={self.video}, audio={self.audio}"
