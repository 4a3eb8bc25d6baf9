"""Copy-capability classification.

Decides, from probed stream metadata alone, whether the video and audio
streams can be copied into an MP4 container and still play in browsers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from vrs.core.codecs import (
    COPYABLE_H264_PROFILES,
    MAX_COPYABLE_H264_LEVEL,
    is_copyable_audio_codec,
    is_h264,
    is_hevc,
    parse_level,
)
from vrs.introspector.types import CopyCapability, MediaStreamInfo, StreamDescriptor

if TYPE_CHECKING:
    from vrs.transcode.types import TranscodeOptions


def is_video_copyable(stream: StreamDescriptor, allow_hevc_copy: bool = False) -> bool:
    """Check a single video stream against the browser-safe copy rules."""
    if is_h264(stream.codec_name):
        profile = (stream.profile or "").casefold()
        return (
            profile in COPYABLE_H264_PROFILES
            and parse_level(stream.level) <= MAX_COPYABLE_H264_LEVEL
        )
    if is_hevc(stream.codec_name):
        return allow_hevc_copy
    return False


def classify_copyability(
    info: MediaStreamInfo | None,
    options: TranscodeOptions | None = None,
) -> CopyCapability:
    """Derive CopyCapability from probe results.

    Pure: depends only on its arguments and never raises.

    - Video: the primary video stream must be H.264 with a baseline, main or
      high profile at level 4.1 or below. HEVC qualifies only when
      options.allow_hevc_copy is set.
    - Audio: every audio stream must be AAC or MP3, and there must be one.

    Args:
        info: Probe result, or None when probing produced nothing.
        options: Per-call options; only allow_hevc_copy is consulted.

    Returns:
        CopyCapability; both flags False when info has no streams.
    """
    if info is None or not info.streams:
        return CopyCapability(video_copyable=False, audio_copyable=False)

    allow_hevc_copy = bool(options is not None and options.allow_hevc_copy)

    video = info.primary_video
    video_copyable = video is not None and is_video_copyable(video, allow_hevc_copy)

    # "-c:a copy" carries every audio track, so each one must be MP4-safe
    audio = info.audio_streams
    audio_copyable = bool(audio) and all(
        is_copyable_audio_codec(stream.codec_name) for stream in audio
    )

    return CopyCapability(video_copyable=video_copyable, audio_copyable=audio_copyable)
